from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from data.models.rank_snapshot import RankSnapshot
from data.models.stream_session import StreamSession


@dataclass(frozen=True)
class SessionResolution:
    is_new_session: bool
    effective_stream_start: datetime
    existing_session: Optional[StreamSession]


@dataclass(frozen=True)
class StreamRecord:
    wins: int
    losses: int
    lp_change: Optional[int]
    rank: RankSnapshot
    session: StreamSession
    # The starting LP was taken after games had already been played, so the LP change is a guess
    approximate: bool = False

    @property
    def has_games(self) -> bool:
        return self.wins > 0 or self.losses > 0

    @property
    def tier(self) -> Optional[str]:
        return self.rank.tier

    @property
    def division(self) -> Optional[str]:
        return self.rank.division

    @property
    def league_points(self) -> Optional[int]:
        return self.rank.league_points


@dataclass(frozen=True)
class OfflineRecord:
    wins: int
    losses: int
    lp_change: Optional[int]
    approximate: bool = False
