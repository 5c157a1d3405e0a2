import asyncio

from dextract.datastore.service import DataStoreService
from dextract.exceptions import NoRoutesFoundError, TokensNotFoundError
from dextract.models.schemas.chain import ChainIdentifier
from dextract.models.schemas.swap import SwapQuote
from dextract.utils.common import now_ms
from dextract.utils.logging import get_logger
from .base import RouteProvider
from .tokens import TokensService

logger = get_logger(__name__)


class SwapsService:
    NAMESPACE = "swaps"
    QUOTE_TTL = 30

    def __init__(
        self,
        store: DataStoreService,
        tokens: TokensService,
        route_provider: RouteProvider,
        quote_ttl: float = QUOTE_TTL,
    ):
        self.store = store
        self.tokens = tokens
        self.route_provider = route_provider
        self.quote_ttl = quote_ttl

    async def get_quote(self, chain, network, from_id: str, to_id: str, amount) -> SwapQuote:
        """Quote a swap of `amount` raw units, cached per parameter tuple.

        Raises:
            TokensNotFoundError: If either token cannot be resolved
            NoRoutesFoundError: If the route provider has nothing to offer
        """
        chain_id = ChainIdentifier.of(chain, network)
        amount = str(amount)
        from_key = self.tokens.normalize_identifier(chain_id.chain, chain_id.network, from_id)
        to_key = self.tokens.normalize_identifier(chain_id.chain, chain_id.network, to_id)
        key = f"{chain_id.key}:quote:{from_key}:{to_key}:{amount}"

        cached = await self.store.get_or_set(
            key,
            lambda: self._build_quote(chain_id, from_id, to_id, amount),
            namespace=self.NAMESPACE,
            ttl=self.quote_ttl,
        )
        return SwapQuote.model_validate(cached)

    async def _build_quote(
        self, chain_id: ChainIdentifier, from_id: str, to_id: str, amount: str
    ) -> SwapQuote:
        logger.info(f"Getting quote for {amount} {from_id} to {to_id} on {chain_id}")

        from_token, to_token = await asyncio.gather(
            self.tokens.get_one(chain_id.chain, chain_id.network, from_id),
            self.tokens.get_one(chain_id.chain, chain_id.network, to_id),
        )
        missing = [t for t, found in ((from_id, from_token), (to_id, to_token)) if found is None]
        if missing:
            raise TokensNotFoundError(f"Tokens not found on {chain_id}: {', '.join(missing)}")

        routes = await self.route_provider.get_routes(
            chain_id, from_token.address, to_token.address, amount
        )
        if not routes:
            raise NoRoutesFoundError(
                f"No routes found for {from_token.symbol} -> {to_token.symbol} on {chain_id}"
            )

        # raw integer amounts; max keeps the first route on ties
        best_route = max(routes, key=lambda r: int(r.to_amount))

        return SwapQuote(
            routes=routes,
            best_route=best_route,
            from_token=from_token.address,
            to_token=to_token.address,
            from_amount=amount,
            updated_at=now_ms(),
        )
