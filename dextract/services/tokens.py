from typing import List, Optional

from dextract.datastore.service import DataStoreService
from dextract.models.schemas.chain import ChainIdentifier
from dextract.models.schemas.token import Token, TokenList
from dextract.utils.blockchain.base import ChainAdapter
from dextract.utils.blockchain.registry import ChainAdapterRegistry
from dextract.utils.common import now_ms
from dextract.utils.logging import get_logger
from .base import TokenApiAdapter
from .factory import TokenApiAdapterFactory

logger = get_logger(__name__)


class TokensService:
    """Token lists and single tokens per chain, cached without expiry.

    Cached lists only grow: `check_for_new_tokens` appends what the upstream
    gained since the last sync and never drops tokens.
    """

    NAMESPACE = "tokens"

    def __init__(
        self,
        store: DataStoreService,
        chain_registry: ChainAdapterRegistry,
        token_adapters: TokenApiAdapterFactory,
        provider: Optional[str] = None,
    ):
        self.store = store
        self.chain_registry = chain_registry
        self.token_adapters = token_adapters
        self.provider = provider

    def _provider(self) -> TokenApiAdapter:
        if self.provider:
            return self.token_adapters.get(self.provider)
        return self.token_adapters.get_default()

    def _chain_adapter(self, chain_id: ChainIdentifier) -> ChainAdapter:
        return self.chain_registry.resolve(chain_id.chain, chain_id.network)

    @staticmethod
    def _tokens_key(chain_id: ChainIdentifier) -> str:
        return f"{chain_id.key}:tokens"

    @staticmethod
    def _token_key(chain_id: ChainIdentifier, token_id: str) -> str:
        return f"{chain_id.key}:token:{token_id}"

    @staticmethod
    def _last_sync_key(chain_id: ChainIdentifier) -> str:
        return f"{chain_id.key}:tokens:last-sync"

    @staticmethod
    def _normalize(adapter: ChainAdapter, chain_id: ChainIdentifier, token: Token) -> Token:
        return token.model_copy(
            update={
                "address": adapter.normalize_address(token.address),
                "chain_type": chain_id.chain,
                "network_type": chain_id.network,
            }
        )

    def normalize_identifier(self, chain, network, token_id: str) -> str:
        chain_id = ChainIdentifier.of(chain, network)
        return self._chain_adapter(chain_id).normalize_address(token_id)

    async def _fetch_list(self, chain_id: ChainIdentifier) -> TokenList:
        adapter = self._chain_adapter(chain_id)
        token_list = await self._provider().get_list(chain_id)
        if token_list.degraded:
            logger.warning(f"Token list for {chain_id} is degraded ({len(token_list.tokens)} tokens)")
        return token_list.model_copy(
            update={"tokens": [self._normalize(adapter, chain_id, t) for t in token_list.tokens]}
        )

    async def get_all(self, chain, network) -> TokenList:
        chain_id = ChainIdentifier.of(chain, network)
        self._chain_adapter(chain_id)

        cached = await self.store.get_or_set(
            self._tokens_key(chain_id),
            lambda: self._fetch_list(chain_id),
            namespace=self.NAMESPACE,
            ttl=None,
        )
        return TokenList.model_validate(cached)

    async def get_one(self, chain, network, token_id: str) -> Optional[Token]:
        """Look a token up by address or symbol.

        Order: per-token cache, cached full list, upstream point query.
        Whatever is found is cached under the normalized identifier.
        """
        chain_id = ChainIdentifier.of(chain, network)
        adapter = self._chain_adapter(chain_id)
        normalized = adapter.normalize_address(token_id)
        key = self._token_key(chain_id, normalized)

        cached = await self.store.get(key, namespace=self.NAMESPACE)
        if cached is not None:
            return Token.model_validate(cached)

        token_list = await self.get_all(chain_id.chain, chain_id.network)
        symbol = token_id.upper()
        token = next((t for t in token_list.tokens if t.address == normalized), None)
        if token is None:
            token = next((t for t in token_list.tokens if t.symbol.upper() == symbol), None)

        if token is None:
            found = await self._provider().get_one(chain_id, normalized)
            if found is not None:
                token = self._normalize(adapter, chain_id, found)

        if token is None:
            logger.debug(f"Token {token_id} not found on {chain_id}")
            return None

        await self.store.set(key, token, namespace=self.NAMESPACE, ttl=None)
        return token

    async def check_for_new_tokens(self, chain, network) -> TokenList:
        """Append tokens the upstream gained since the cached list was built."""
        chain_id = ChainIdentifier.of(chain, network)
        fresh = await self._fetch_list(chain_id)

        cached = await self.store.get(self._tokens_key(chain_id), namespace=self.NAMESPACE)
        current = TokenList.model_validate(cached) if cached is not None else None

        known = {t.address for t in current.tokens} if current else set()
        new_tokens: List[Token] = []
        for token in fresh.tokens:
            if token.address not in known:
                known.add(token.address)
                new_tokens.append(token)

        result = current or fresh.model_copy(update={"tokens": []})
        if new_tokens:
            logger.info(f"Found {len(new_tokens)} new tokens on {chain_id}")
            result = result.model_copy(
                update={
                    "tokens": result.tokens + new_tokens,
                    "timestamp": fresh.timestamp,
                    "degraded": fresh.degraded,
                }
            )
            await self.store.set(self._tokens_key(chain_id), result, namespace=self.NAMESPACE, ttl=None)
            for token in new_tokens:
                await self.store.set(
                    self._token_key(chain_id, token.address), token, namespace=self.NAMESPACE, ttl=None
                )
        else:
            logger.debug(f"No new tokens on {chain_id}")

        await self.store.set(self._last_sync_key(chain_id), now_ms(), namespace=self.NAMESPACE, ttl=None)
        return result

    async def get_last_sync(self, chain, network) -> Optional[int]:
        chain_id = ChainIdentifier.of(chain, network)
        return await self.store.get(self._last_sync_key(chain_id), namespace=self.NAMESPACE)
