import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import quote

import aiohttp
from ratelimit import limits, RateLimitException

from data.models.rank_snapshot import RankSnapshot
from data.models.ranked_match import RankedMatch
from data.models.riot_account import RiotAccount
from integrations.exceptions import AccountNotFoundError, UpstreamUnavailableError
from integrations.ranking import RankingApi

logger = logging.getLogger(__name__)

SOLO_QUEUE_TYPE = 'RANKED_SOLO_5x5'
SOLO_QUEUE_ID = 420

# Account and match data live on the regional clusters, ranks live on the platforms
PLATFORM_TO_REGION = {
    'na1': 'americas',
    'br1': 'americas',
    'la1': 'americas',
    'la2': 'americas',
    'euw1': 'europe',
    'eun1': 'europe',
    'tr1': 'europe',
    'ru': 'europe',
    'me1': 'europe',
    'kr': 'asia',
    'jp1': 'asia',
    'oc1': 'sea',
    'ph2': 'sea',
    'sg2': 'sea',
    'th2': 'sea',
    'tw2': 'sea',
    'vn2': 'sea',
}


class RiotApi(RankingApi):
    def __init__(self, api_key: str, timeout: float = 10.0, match_count: int = 100):
        self._api_key = api_key
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._match_count = match_count

    async def get_account(self, summoner: str, tag: str, region: str) -> RiotAccount:
        url = f"https://{self._regional_host(region)}/riot/account/v1/accounts/by-riot-id/{quote(summoner)}/{quote(tag)}"

        data = await self._get(url)
        if data is None:
            raise AccountNotFoundError(f"{summoner}#{tag}")

        return RiotAccount(
            puuid=data['puuid'],
            game_name=data.get('gameName', summoner),
            tag_line=data.get('tagLine', tag),
        )

    async def get_current_rank(self, puuid: str, region: str) -> RankSnapshot:
        url = f"https://{self._platform_host(region)}/lol/league/v4/entries/by-puuid/{puuid}"

        entries = await self._get(url) or []
        for entry in entries:
            if entry.get('queueType') == SOLO_QUEUE_TYPE:
                return RankSnapshot(
                    tier=entry.get('tier'),
                    division=entry.get('rank'),
                    league_points=entry.get('leaguePoints'),
                )

        return RankSnapshot.unranked()

    async def get_matches_since(self, puuid: str, region: str, since: datetime) -> list[RankedMatch]:
        host = self._regional_host(region)
        match_ids = await self._get_match_ids(host, puuid, since)

        matches = []
        for match_id in match_ids:
            data = await self._get(f"https://{host}/lol/match/v5/matches/{match_id}")
            if data is None:
                raise UpstreamUnavailableError(f"Match {match_id} disappeared while loading the match list")

            match = RiotApi._parse_match(match_id, puuid, data)
            if match:
                matches.append(match)

        return matches

    async def _get_match_ids(self, host: str, puuid: str, since: datetime) -> list[str]:
        match_ids = []
        start = 0

        # The ids come in pages, newest first; a short page is the last one
        while True:
            params = {
                'queue': SOLO_QUEUE_ID,
                'startTime': int(since.timestamp()),  # The match API wants seconds, not milliseconds
                'start': start,
                'count': self._match_count,
            }

            page = await self._get(f"https://{host}/lol/match/v5/matches/by-puuid/{puuid}/ids", params) or []
            match_ids.extend(page)

            if len(page) < self._match_count:
                return match_ids

            start += self._match_count

    @staticmethod
    def _parse_match(match_id: str, puuid: str, data: dict) -> Optional[RankedMatch]:
        info = data.get('info', {})

        participant = next((p for p in info.get('participants', []) if p.get('puuid') == puuid), None)

        # Remakes don't count as games and don't move the LP
        if participant and participant.get('gameEndedInEarlySurrender'):
            return None

        end_timestamp = info.get('gameEndTimestamp') or info.get('gameStartTimestamp') or info.get('gameCreation')
        if not end_timestamp:
            raise UpstreamUnavailableError(f"Match {match_id} has no timestamps")

        won = participant.get('win') if participant else None

        return RankedMatch(
            match_id=match_id,
            ended_at=datetime.fromtimestamp(end_timestamp / 1000, tz=timezone.utc),
            won=won if isinstance(won, bool) else None,
        )

    async def _get(self, url: str, params: dict = None) -> Optional[dict | list]:
        await RiotApi._wait_for_rate_limit()

        try:
            async with aiohttp.ClientSession(timeout=self._timeout, headers={'X-Riot-Token': self._api_key}) as session:
                async with session.get(url, params=params) as response:
                    if response.status == 404:
                        return None

                    if response.status != 200:
                        logger.warning(f"Riot API answered HTTP {response.status} for {url}")
                        raise UpstreamUnavailableError(f"Riot API answered HTTP {response.status}")

                    return await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as error:
            logger.warning(f"Riot API request failed for {url}: {error}")
            raise UpstreamUnavailableError(f"Riot API request failed: {error}") from error

    @staticmethod
    async def _wait_for_rate_limit() -> None:
        # Each request takes a slot; waiting for one must not block the other handlers
        while True:
            try:
                RiotApi._take_rate_limit_slot()
                return
            except RateLimitException as e:
                logger.debug(f"Riot API rate limit reached, waiting {e.period_remaining:.2f}s")
                await asyncio.sleep(e.period_remaining)

    @staticmethod
    @limits(calls=20, period=1)
    def _take_rate_limit_slot() -> None:
        pass

    @staticmethod
    def _platform_host(region: str) -> str:
        platform = region.lower()
        if platform not in PLATFORM_TO_REGION:
            raise ValueError(f"Unknown platform region: {region}")

        return f"{platform}.api.riotgames.com"

    @staticmethod
    def _regional_host(region: str) -> str:
        platform = region.lower()
        if platform not in PLATFORM_TO_REGION:
            raise ValueError(f"Unknown platform region: {region}")

        return f"{PLATFORM_TO_REGION[platform]}.api.riotgames.com"
