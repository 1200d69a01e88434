"""
Script to run one sync pass for all configured FIO accounts
"""

import asyncio
import sys
import os
import logging

# Add current directory to path to allow imports from core, ingestion, etc.
sys.path.append(os.getcwd())

from core.config import Settings
from core.database import create_engine, create_session_factory
from core.logging import setup_logging
from ingestion.runner import sync_accounts

logger = logging.getLogger(__name__)


async def run_sync(settings: Settings) -> int:
    """Sync all configured accounts, return number of failed accounts"""
    engine = create_engine(settings)

    try:
        results = await sync_accounts(settings, create_session_factory(engine))
    finally:
        await engine.dispose()

    for account_number, result in results.items():
        if result["status"] == "success":
            logger.info(
                f"Sync completed for {account_number}: "
                f"Accounts={result['accounts']}, Transactions={result['transactions']}"
            )

    failed = [account for account, result in results.items() if result["status"] != "success"]
    logger.info(f"All sync jobs completed ({len(failed)} failed)")
    return len(failed)


if __name__ == "__main__":
    settings = Settings()
    setup_logging(settings)
    sys.exit(1 if asyncio.run(run_sync(settings)) else 0)
