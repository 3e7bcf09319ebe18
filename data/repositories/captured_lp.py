from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from data.models.captured_lp import CapturedLp


class CapturedLpRepository(ABC):
    @abstractmethod
    def get(self, player: str, stream_start: datetime) -> Optional[CapturedLp]:
        pass

    @abstractmethod
    def save(self, model: CapturedLp) -> None:
        pass
