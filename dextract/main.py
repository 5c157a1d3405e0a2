import asyncio

from dextract.config import Settings
from dextract.context import create_app_context
from dextract.utils.logging import get_logger
from dextract.workers.cron import CronService

logger = get_logger(__name__)


async def run() -> None:
    context = create_app_context(Settings().to_app_config())
    cron = CronService(context.tokens, context.prices, context.config.workers)
    try:
        await cron.run()
    finally:
        cron.stop()
        await context.close()


def main() -> None:
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        logger.info("Shutting down")


if __name__ == "__main__":
    main()
