from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class RankedMatch:
    match_id: str
    ended_at: datetime
    # None means the outcome could not be determined from the API payload
    won: Optional[bool]
