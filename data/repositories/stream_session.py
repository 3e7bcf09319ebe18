from abc import ABC, abstractmethod
from typing import Optional

from data.models.game_type import GameType
from data.models.stream_session import StreamSession


class StreamSessionRepository(ABC):
    @abstractmethod
    def get(self, game_type: GameType, player: str) -> Optional[StreamSession]:
        pass

    @abstractmethod
    def save(self, game_type: GameType, player: str, session: StreamSession) -> None:
        pass
