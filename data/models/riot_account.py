from dataclasses import dataclass


@dataclass(frozen=True)
class RiotAccount:
    puuid: str
    game_name: str
    tag_line: str
