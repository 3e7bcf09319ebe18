import asyncio
import logging
from datetime import datetime
from typing import Optional

from data.models.game_type import GameType
from data.models.rank_snapshot import RankSnapshot
from data.models.stream_session import StreamSession
from integrations.ranking import RankingApi

from helpers.business_logic.record.match_filter import select_stream_matches, calculate_record
from helpers.business_logic.record.session_manager import SessionManager
from helpers.business_logic.record.stream_record import SessionResolution, StreamRecord, OfflineRecord

logger = logging.getLogger(__name__)


def player_key(summoner: str, tag: str) -> str:
    return f"{summoner}#{tag}"


class StreamTracker:
    game_type = GameType.LOL

    def __init__(self, api: RankingApi, sessions: SessionManager):
        self._api = api
        self._sessions = sessions

        # One reconciliation at a time per player - the store itself is last-writer-wins
        self._locks: dict[tuple[GameType, str], asyncio.Lock] = {}

    async def track_online(self, summoner: str, tag: str, region: str, stream_start: datetime, start_lp_override: Optional[int] = None) -> StreamRecord:
        player = player_key(summoner, tag)

        async with self._lock_for(player):
            resolution = self._sessions.resolve_session(self.game_type, player, stream_start)

            account = await self._api.get_account(summoner, tag, region)
            logger.debug(f"Resolved {player} to PUUID {account.puuid}")

            # The rank and the match list don't depend on each other
            rank, matches = await asyncio.gather(
                self._api.get_current_rank(account.puuid, region),
                self._api.get_matches_since(account.puuid, region, resolution.effective_stream_start),
            )
            logger.debug(f"Current rank of {player}: {rank}")

            stream_matches = select_stream_matches(matches, resolution.effective_stream_start)
            wins, losses = calculate_record(stream_matches)

            starting_lp, approximate = self._resolve_starting_lp(player, resolution, rank, wins + losses, start_lp_override)

            current_lp = rank.ladder_points
            lp_change = current_lp - starting_lp if starting_lp is not None and current_lp is not None else None

            # Fill in the whole record in memory and save it once, so a failure never leaves a half-written session
            base_session = (
                self._sessions.create_new_session(self.game_type, resolution.effective_stream_start, starting_lp, approximate)
                if resolution.is_new_session
                else resolution.existing_session
            )
            session = self._sessions.update_session(base_session, wins, losses, lp_change)
            self._sessions.save_session(self.game_type, player, session)

            return StreamRecord(
                wins=wins,
                losses=losses,
                lp_change=lp_change,
                rank=rank,
                session=session,
                approximate=approximate,
            )

    def track_offline(self, summoner: str, tag: str) -> Optional[OfflineRecord]:
        last_session = self._sessions.get_session(self.game_type, player_key(summoner, tag))
        if not last_session or last_session.games_played == 0:
            return None

        return OfflineRecord(
            wins=last_session.wins,
            losses=last_session.losses,
            lp_change=last_session.lp_change,
            approximate=last_session.starting_lp_approximate,
        )

    async def capture_starting_lp(self, summoner: str, tag: str, region: str, stream_start: datetime) -> Optional[int]:
        player = player_key(summoner, tag)

        captured = self._sessions.get_captured_starting_lp(player, stream_start)
        if captured is not None:
            return captured

        account = await self._api.get_account(summoner, tag, region)
        rank, matches = await asyncio.gather(
            self._api.get_current_rank(account.puuid, region),
            self._api.get_matches_since(account.puuid, region, stream_start),
        )

        current_lp = rank.ladder_points
        if current_lp is None:
            logger.info(f"{player} is unranked, there is no starting LP to capture")
            return None

        # Too late: the current LP already includes games played on stream
        stream_matches = select_stream_matches(matches, stream_start)
        if stream_matches:
            logger.warning(f"{len(stream_matches)} games were already played by {player} on this stream, not capturing the starting LP")
            return None

        return self._sessions.capture_starting_lp(player, stream_start, current_lp, datetime.now(stream_start.tzinfo))

    def _resolve_starting_lp(self, player: str, resolution: SessionResolution, rank: RankSnapshot, games_played: int, override: Optional[int]) -> tuple[Optional[int], bool]:
        # An operator-provided value always wins
        if override is not None:
            logger.info(f"Using the starting LP override for {player}: {override}")
            return override, False

        # Continuing sessions keep the baseline they started with
        if not resolution.is_new_session:
            existing: StreamSession = resolution.existing_session
            return existing.starting_lp, existing.starting_lp_approximate

        # The background job may have caught the LP before the first command came in
        captured = self._sessions.get_captured_starting_lp(player, resolution.effective_stream_start)
        if captured is not None:
            return captured, False

        # No games played yet, so the current LP is exactly the starting LP
        if games_played == 0:
            logger.info(f"No games played yet, using the current LP of {player} as the starting LP: {rank.ladder_points}")
            return rank.ladder_points, False

        # Games were played before anyone asked - the real starting LP is lost
        logger.warning(f"{games_played} games were already played by {player} before the first record, the LP change will be approximate")
        return rank.ladder_points, rank.ladder_points is not None

    def _lock_for(self, player: str) -> asyncio.Lock:
        key = (self.game_type, player)
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]
