from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class CapturedLp:
    player: str
    stream_start: datetime
    lp: int
    captured_at: Optional[datetime] = None
