from dataclasses import dataclass


@dataclass(frozen=True)
class Streamer:
    summoner: str
    tag: str
    region: str
    twitch_channel: str

    @property
    def riot_id(self) -> str:
        return f"{self.summoner}#{self.tag}"

    @staticmethod
    def parse(riot_id: str, region: str, twitch_channel: str) -> 'Streamer':
        # Riot IDs look like "Game Name#TAG"; the game name may contain spaces but not '#'
        summoner, separator, tag = (riot_id or '').strip().rpartition('#')
        if not separator or not summoner.strip() or not tag.strip():
            raise ValueError(f"Invalid Riot ID '{riot_id}', expected something like 'Name#TAG'")

        if not twitch_channel or not twitch_channel.strip():
            raise ValueError("The Twitch channel is required")

        return Streamer(
            summoner=summoner.strip(),
            tag=tag.strip(),
            region=(region or 'na1').strip().lower(),
            twitch_channel=twitch_channel.strip().lower(),
        )
