import asyncio
import logging
import sys

from accountservice.config import get_settings
from accountservice.db import AccountStore, BucketInitError, FatalOpenError, WriteError


async def main() -> int:
    """Open the account store, seed it and report its health."""
    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level_value,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stdout,
    )
    logger = logging.getLogger(__name__)

    store = AccountStore.from_settings(settings.db)
    try:
        await store.open()
    except FatalOpenError as e:
        logger.critical("%s", e)
        return 1

    try:
        try:
            await store.initialize_bucket()
        except BucketInitError as e:
            logger.error("Account store is not ready: %s", e)
            return 1

        try:
            result = await store.seed_accounts(settings.seed.count, strict=settings.seed.strict)
        except WriteError as e:
            logger.error("Seeding aborted: %s", e)
            return 1
        if not result.ok:
            logger.warning("%d of %d accounts failed to seed", len(result.failed), result.requested)
        logger.info("Account store healthy: %s", store.check_health())
    finally:
        await store.close()
    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logging.info("Seeding interrupted.")
