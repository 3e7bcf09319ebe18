from enum import Enum, unique


@unique
class GameType(Enum):
    LOL = "lol"

    @property
    def display_name(self) -> str:
        return GAME_NAMES[self]


GAME_NAMES = {
    GameType.LOL: "League of Legends",
}
