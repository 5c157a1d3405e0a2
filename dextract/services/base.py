# services/base.py
import asyncio
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import aiohttp

from dextract.config import ProviderConfig
from dextract.exceptions import UpstreamRequestFailedError
from dextract.models.schemas.chain import ChainIdentifier
from dextract.models.schemas.price import PriceList, TokenPrice
from dextract.models.schemas.swap import SwapRoute
from dextract.models.schemas.token import Token, TokenList
from dextract.utils.logging import get_logger

logger = get_logger(__name__)


class BaseApiAdapter:
    """Talks to one upstream API.

    Rate limiting is a single slot: consecutive requests are spaced at least
    `per_time_window / max_requests` seconds apart, no bursts. The limiter
    state belongs to this instance only.
    """

    PROVIDER: str = "custom"
    API_KEY_HEADER = "Authorization"

    def __init__(self, config: ProviderConfig, session: Optional[aiohttp.ClientSession] = None):
        self.config = config
        self.session = session
        self.headers = {"accept": "application/json"}
        if config.api_key:
            self.headers[self.API_KEY_HEADER] = self._api_key_value(config.api_key)

        self.last_request_time = 0.0
        self._rate_lock = asyncio.Lock()

    def _api_key_value(self, api_key: str) -> str:
        return f"Bearer {api_key}"

    async def __aenter__(self):
        """Context manager entry."""
        if not self.session or self.session.closed:
            self.session = aiohttp.ClientSession(headers=self.headers)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit with cleanup."""
        await self.close()

    async def close(self) -> None:
        if self.session and not self.session.closed:
            await self.session.close()

    async def _respect_rate_limit(self) -> None:
        rate_limit = self.config.rate_limit
        if not rate_limit:
            return

        async with self._rate_lock:
            elapsed = time.monotonic() - self.last_request_time
            if elapsed < rate_limit.interval:
                wait_time = rate_limit.interval - elapsed
                logger.debug(f"{self.PROVIDER}: rate limited, sleeping {wait_time:.2f}s")
                await asyncio.sleep(wait_time)
            self.last_request_time = time.monotonic()

    async def request(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        method: str = "GET",
        body: Any = None,
    ) -> Any:
        """Call the upstream and return its decoded JSON body.

        Raises:
            UpstreamRequestFailedError: On transport errors, timeouts and HTTP status >= 400
        """
        await self._respect_rate_limit()

        if not self.session or self.session.closed:
            self.session = aiohttp.ClientSession(headers=self.headers)

        url = f"{self.config.base_url}{endpoint}"
        try:
            async with self.session.request(
                method,
                url,
                params=params if method == "GET" else None,
                json=None if method == "GET" else (body if body is not None else params),
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
            ) as response:
                if response.status >= 400:
                    text = await response.text()
                    raise UpstreamRequestFailedError(
                        f"API request failed: {response.status} - {text[:200]}",
                        provider=self.PROVIDER,
                        status=response.status,
                    )
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    # HTML challenge pages and the like come back as 200
                    raise UpstreamRequestFailedError(
                        f"API returned a non-JSON body: {e}",
                        provider=self.PROVIDER,
                        status=response.status,
                    ) from e
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise UpstreamRequestFailedError(
                f"API request failed: {e!r}", provider=self.PROVIDER
            ) from e


class PriceApiAdapter(ABC):
    """Price capability of a provider. Never raises on upstream failure:
    returns fallback data flagged `degraded` instead."""

    @abstractmethod
    async def get_list(self, chain_id: ChainIdentifier) -> PriceList:
        pass

    @abstractmethod
    async def get_one(self, chain_id: ChainIdentifier, token_id: str) -> Optional[TokenPrice]:
        pass

    async def close(self) -> None:
        pass


class TokenApiAdapter(ABC):
    """Token metadata capability of a provider. Never raises on upstream failure."""

    @abstractmethod
    async def get_list(self, chain_id: ChainIdentifier) -> TokenList:
        pass

    @abstractmethod
    async def get_one(self, chain_id: ChainIdentifier, token_id: str) -> Optional[Token]:
        pass

    async def close(self) -> None:
        pass


class RouteProvider(ABC):
    """Supplies candidate swap routes between two token addresses."""

    @abstractmethod
    async def get_routes(
        self, chain_id: ChainIdentifier, from_token: str, to_token: str, amount: str
    ) -> List[SwapRoute]:
        pass

    async def close(self) -> None:
        pass
