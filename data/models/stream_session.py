from dataclasses import dataclass, replace
from copy import deepcopy
from datetime import datetime
from typing import Optional

from data.models.game_type import GameType


@dataclass(frozen=True)
class StreamSession:
    game_type: GameType
    stream_start: datetime
    starting_lp: Optional[int] = None
    wins: int = 0
    losses: int = 0
    lp_change: Optional[int] = None
    # Set when the baseline was taken after games had already been played
    starting_lp_approximate: bool = False

    @property
    def games_played(self) -> int:
        return self.wins + self.losses

    def copy(self, **changes) -> 'StreamSession':
        return replace(deepcopy(self), **changes)
