from abc import ABC, abstractmethod
from datetime import datetime

from data.models.rank_snapshot import RankSnapshot
from data.models.ranked_match import RankedMatch
from data.models.riot_account import RiotAccount


# The ranking data source used by the stream tracker
# Implementations raise AccountNotFoundError and UpstreamUnavailableError, and handle their own rate limiting
class RankingApi(ABC):
    @abstractmethod
    async def get_account(self, summoner: str, tag: str, region: str) -> RiotAccount:
        pass

    @abstractmethod
    async def get_current_rank(self, puuid: str, region: str) -> RankSnapshot:
        pass

    @abstractmethod
    async def get_matches_since(self, puuid: str, region: str, since: datetime) -> list[RankedMatch]:
        pass
