import logging
from datetime import datetime
from typing import Optional

from data.models.captured_lp import CapturedLp
from data.models.game_type import GameType
from data.models.stream_session import StreamSession
from data.repositories.captured_lp import CapturedLpRepository
from data.repositories.stream_session import StreamSessionRepository

from helpers.business_logic.record.stream_record import SessionResolution

logger = logging.getLogger(__name__)


class SessionManager:
    def __init__(self, sessions: StreamSessionRepository, captured_lp: CapturedLpRepository):
        self._sessions = sessions
        self._captured_lp = captured_lp

    def get_session(self, game_type: GameType, player: str) -> Optional[StreamSession]:
        return self._sessions.get(game_type, player)

    def resolve_session(self, game_type: GameType, player: str, requested_stream_start: datetime) -> SessionResolution:
        existing = self._sessions.get(game_type, player)

        # A different stream start means the streamer went live again, so the old session is over
        if not existing or existing.stream_start != requested_stream_start:
            return SessionResolution(
                is_new_session=True,
                effective_stream_start=requested_stream_start,
                existing_session=None,
            )

        return SessionResolution(
            is_new_session=False,
            effective_stream_start=existing.stream_start,
            existing_session=existing,
        )

    def create_new_session(self, game_type: GameType, stream_start: datetime, starting_lp: Optional[int], approximate: bool = False) -> StreamSession:
        logger.info(f"Starting a new {game_type.display_name} session for the stream that started at {stream_start}")

        return StreamSession(
            game_type=game_type,
            stream_start=stream_start,
            starting_lp=starting_lp,
            starting_lp_approximate=approximate,
        )

    def update_session(self, existing: StreamSession, wins: int, losses: int, lp_change: Optional[int]) -> StreamSession:
        # An unknown LP change (e.g. the rank lookup came back empty) must not erase the last known one
        if lp_change is None:
            return existing.copy(wins=wins, losses=losses)

        return existing.copy(wins=wins, losses=losses, lp_change=lp_change)

    def save_session(self, game_type: GameType, player: str, session: StreamSession) -> None:
        self._sessions.save(game_type, player, session)

    def get_captured_starting_lp(self, player: str, requested_stream_start: datetime) -> Optional[int]:
        captured = self._captured_lp.get(player, requested_stream_start)
        return captured.lp if captured else None

    def capture_starting_lp(self, player: str, stream_start: datetime, lp: int, captured_at: datetime = None) -> int:
        # The first capture wins; later ones would already include games played on stream
        existing = self._captured_lp.get(player, stream_start)
        if existing:
            return existing.lp

        self._captured_lp.save(CapturedLp(
            player=player,
            stream_start=stream_start,
            lp=lp,
            captured_at=captured_at,
        ))
        logger.info(f"Captured starting LP {lp} for {player} (stream started at {stream_start})")

        return lp
