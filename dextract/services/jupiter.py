import asyncio
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError

from dextract.exceptions import UpstreamRequestFailedError
from dextract.models.schemas.chain import ChainIdentifier
from dextract.models.schemas.swap import SwapRoute
from dextract.models.schemas.token import Token, TokenList
from dextract.utils.chains.queries import get_chain_alias
from dextract.utils.jupiter.types import JupiterToken, QuoteRequest, QuoteResponse
from dextract.utils.logging import get_logger
from dextract.utils.types import ApiProviderType, ServiceType
from .base import BaseApiAdapter, RouteProvider, TokenApiAdapter

logger = get_logger(__name__)

UPSTREAM_ERRORS = (UpstreamRequestFailedError, ValidationError)


class JupiterAdapter(BaseApiAdapter):
    PROVIDER = ApiProviderType.JUPITER.value
    API_KEY_HEADER = "x-api-key"

    def _api_key_value(self, api_key: str) -> str:
        return api_key

    def _check_chain(self, chain_id: ChainIdentifier) -> str:
        # Jupiter only serves Solana mainnet
        return get_chain_alias(chain_id, ServiceType.JUPITER)


class JupiterTokenAdapter(JupiterAdapter, TokenApiAdapter):
    """Verified Solana token list from the Jupiter token API."""

    LIST_NAME = "Jupiter Verified Tokens"

    @staticmethod
    def _to_token(chain_id: ChainIdentifier, token: JupiterToken) -> Token:
        return Token(
            address=token.address,
            symbol=token.symbol,
            name=token.name,
            decimals=token.decimals,
            logo_uri=token.logo_uri,
            tags=token.tags,
            chain_type=chain_id.chain,
            network_type=chain_id.network,
        )

    async def get_list(self, chain_id: ChainIdentifier) -> TokenList:
        self._check_chain(chain_id)
        timestamp = datetime.now(timezone.utc).isoformat()

        try:
            data = await self.request("/tokens", {"tags": "verified"})
            tokens = [self._to_token(chain_id, JupiterToken.model_validate(t)) for t in data or []]
        except UPSTREAM_ERRORS as e:
            logger.error(f"Error fetching Jupiter token list: {e}")
            return TokenList(name=self.LIST_NAME, timestamp=timestamp, degraded=True)

        return TokenList(name=self.LIST_NAME, tokens=tokens, timestamp=timestamp)

    async def get_one(self, chain_id: ChainIdentifier, token_id: str) -> Optional[Token]:
        self._check_chain(chain_id)

        try:
            data = await self.request(f"/token/{token_id}")
            if not data:
                return None
            return self._to_token(chain_id, JupiterToken.model_validate(data))
        except UPSTREAM_ERRORS as e:
            logger.warning(f"Error fetching Jupiter token {token_id}: {e}")
            return None


class JupiterRouteProvider(JupiterAdapter, RouteProvider):
    """Swap routes from the Jupiter quote API.

    The best overall quote and the best direct-only quote are requested
    concurrently; each successful answer becomes one candidate route.
    """

    def __init__(self, config, session=None, slippage_bps: int = 50):
        super().__init__(config, session=session)
        self.slippage_bps = slippage_bps

    @staticmethod
    def _to_route(quote: QuoteResponse) -> SwapRoute:
        path = [quote.input_mint]
        providers = []
        for step in quote.route_plan:
            path.append(step.swap_info.output_mint)
            if step.swap_info.label and step.swap_info.label not in providers:
                providers.append(step.swap_info.label)

        return SwapRoute(
            from_token=quote.input_mint,
            to_token=quote.output_mint,
            from_amount=quote.in_amount,
            to_amount=quote.out_amount,
            price_impact=quote.price_impact_pct,
            path=path,
            providers=providers or [ApiProviderType.JUPITER.value],
        )

    async def _quote(self, request: QuoteRequest) -> SwapRoute:
        data = await self.request("/quote", request.to_api_params())
        return self._to_route(QuoteResponse.model_validate(data))

    async def get_routes(
        self, chain_id: ChainIdentifier, from_token: str, to_token: str, amount: str
    ) -> List[SwapRoute]:
        self._check_chain(chain_id)

        requests = [
            QuoteRequest(
                input_mint=from_token,
                output_mint=to_token,
                amount=amount,
                slippage_bps=self.slippage_bps,
                only_direct_routes=direct,
            )
            for direct in (False, True)
        ]
        results = await asyncio.gather(*(self._quote(r) for r in requests), return_exceptions=True)

        routes = []
        for request, result in zip(requests, results):
            if isinstance(result, UPSTREAM_ERRORS):
                logger.warning(
                    f"Jupiter quote failed (direct={request.only_direct_routes}): {result}"
                )
                continue
            if isinstance(result, BaseException):
                raise result
            if result not in routes:
                routes.append(result)
        return routes
