import asyncio
from typing import Awaitable, Callable, Dict, List, Optional

from dextract.config import WorkerConfig
from dextract.models.schemas.chain import ChainIdentifier
from dextract.services.prices import PricesService
from dextract.services.tokens import TokensService
from dextract.utils.logging import get_logger

logger = get_logger(__name__)


class CronService:
    """Periodic token discovery and price refresh sweeps.

    Each sweep visits every configured chain; a failure on one chain is
    logged and the sweep moves on to the next.
    """

    def __init__(
        self,
        tokens: TokensService,
        prices: PricesService,
        config: Optional[WorkerConfig] = None,
    ):
        self.tokens = tokens
        self.prices = prices
        self.config = config or WorkerConfig()
        self.chains: List[ChainIdentifier] = [ChainIdentifier.parse(c) for c in self.config.chains]
        self._stopped = asyncio.Event()

    async def _sweep(self, name: str, job: Callable[[ChainIdentifier], Awaitable]) -> Dict[str, bool]:
        results = {}
        for chain_id in self.chains:
            try:
                await job(chain_id)
                results[chain_id.key] = True
            except Exception as e:
                logger.exception(f"{name} failed for {chain_id}: {e}")
                results[chain_id.key] = False
        return results

    async def refresh_tokens(self) -> Dict[str, bool]:
        logger.info("Checking for new tokens")
        return await self._sweep(
            "Token sync", lambda c: self.tokens.check_for_new_tokens(c.chain, c.network)
        )

    async def refresh_prices(self) -> Dict[str, bool]:
        logger.info("Refreshing prices")
        return await self._sweep("Price refresh", lambda c: self.prices.refresh(c.chain, c.network))

    async def _every(self, interval: float, job: Callable[[], Awaitable]) -> None:
        while not self._stopped.is_set():
            try:
                await job()
            except Exception as e:
                logger.exception(f"Scheduled job failed: {e}")
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=interval)
            except asyncio.TimeoutError:
                pass

    async def run(self) -> None:
        """Run both sweeps on their intervals until `stop` is called."""
        self._stopped.clear()
        await asyncio.gather(
            self._every(self.config.token_sync_interval, self.refresh_tokens),
            self._every(self.config.price_refresh_interval, self.refresh_prices),
        )

    def stop(self) -> None:
        self._stopped.set()
