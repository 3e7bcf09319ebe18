import asyncio
import logging
from datetime import datetime
from typing import Optional

import aiohttp

from integrations.exceptions import UpstreamUnavailableError

logger = logging.getLogger(__name__)

TOKEN_URL = 'https://id.twitch.tv/oauth2/token'
STREAMS_URL = 'https://api.twitch.tv/helix/streams'


class TwitchApi:
    def __init__(self, client_id: str, client_secret: str, timeout: float = 10.0):
        self._client_id = client_id
        self._client_secret = client_secret
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._token: Optional[str] = None

    async def get_stream_start(self, channel: str) -> Optional[datetime]:
        # Returns None when the channel is offline
        data = await self._get_streams(channel)

        streams = data.get('data', [])
        if not streams:
            return None

        started_at = streams[0].get('started_at')
        if not started_at:
            return None

        return datetime.fromisoformat(started_at.replace('Z', '+00:00'))

    async def _get_streams(self, channel: str, retry_auth: bool = True) -> dict:
        token = await self._get_token()

        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                headers = {'Client-Id': self._client_id, 'Authorization': f"Bearer {token}"}
                async with session.get(STREAMS_URL, params={'user_login': channel}, headers=headers) as response:
                    # App tokens expire - get a fresh one and try once more
                    if response.status == 401 and retry_auth:
                        self._token = None
                        return await self._get_streams(channel, retry_auth=False)

                    if response.status != 200:
                        raise UpstreamUnavailableError(f"Twitch answered HTTP {response.status}")

                    return await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as error:
            logger.warning(f"Twitch request failed: {error}")
            raise UpstreamUnavailableError(f"Twitch request failed: {error}") from error

    async def _get_token(self) -> str:
        if self._token:
            return self._token

        params = {
            'client_id': self._client_id,
            'client_secret': self._client_secret,
            'grant_type': 'client_credentials',
        }

        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.post(TOKEN_URL, params=params) as response:
                    if response.status != 200:
                        raise UpstreamUnavailableError(f"Twitch refused the app credentials (HTTP {response.status})")

                    data = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as error:
            raise UpstreamUnavailableError(f"Twitch authentication failed: {error}") from error

        self._token = data['access_token']
        logger.info("Obtained a new Twitch app token")

        return self._token
