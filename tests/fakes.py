"""In-memory stand-ins for the stores and the ranking API, shared by the tests."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from data.models.captured_lp import CapturedLp
from data.models.game_type import GameType
from data.models.rank_snapshot import RankSnapshot
from data.models.ranked_match import RankedMatch
from data.models.riot_account import RiotAccount
from data.models.stream_session import StreamSession
from data.repositories.captured_lp import CapturedLpRepository
from data.repositories.exceptions import StoreUnavailableError
from data.repositories.stream_session import StreamSessionRepository
from integrations.exceptions import AccountNotFoundError, UpstreamUnavailableError
from integrations.ranking import RankingApi


class InMemorySessions(StreamSessionRepository):
    def __init__(self) -> None:
        self.data: dict[tuple[GameType, str], StreamSession] = {}
        self.fail_writes = False
        self.saves = 0

    def get(self, game_type: GameType, player: str) -> Optional[StreamSession]:
        return self.data.get((game_type, player))

    def save(self, game_type: GameType, player: str, session: StreamSession) -> None:
        if self.fail_writes:
            raise StoreUnavailableError("sessions are down")
        self.saves += 1
        self.data[(game_type, player)] = session


class InMemoryCapturedLp(CapturedLpRepository):
    def __init__(self) -> None:
        self.data: dict[tuple[str, datetime], CapturedLp] = {}
        self.fail_writes = False

    def get(self, player: str, stream_start: datetime) -> Optional[CapturedLp]:
        return self.data.get((player, stream_start))

    def save(self, model: CapturedLp) -> None:
        if self.fail_writes:
            raise StoreUnavailableError("captures are down")
        self.data.setdefault((model.player, model.stream_start), model)


class FakeRankingApi(RankingApi):
    def __init__(self, rank: RankSnapshot | None = None, matches: list[RankedMatch] | None = None) -> None:
        self.rank = rank or RankSnapshot.unranked()
        self.matches = matches or []
        self.account_missing = False
        self.down = False
        self.account_calls = 0
        self.match_calls: list[datetime] = []

    async def get_account(self, summoner: str, tag: str, region: str) -> RiotAccount:
        self.account_calls += 1
        if self.down:
            raise UpstreamUnavailableError("riot is down")
        if self.account_missing:
            raise AccountNotFoundError(f"{summoner}#{tag}")
        return RiotAccount(puuid="puuid-1", game_name=summoner, tag_line=tag)

    async def get_current_rank(self, puuid: str, region: str) -> RankSnapshot:
        if self.down:
            raise UpstreamUnavailableError("riot is down")
        return self.rank

    async def get_matches_since(self, puuid: str, region: str, since: datetime) -> list[RankedMatch]:
        if self.down:
            raise UpstreamUnavailableError("riot is down")
        self.match_calls.append(since)
        return list(self.matches)
