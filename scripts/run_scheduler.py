"""
Script to keep syncing all configured FIO accounts at SYNC_RATE_SECONDS
"""

import asyncio
import sys
import os

# Add current directory to path to allow imports from core, ingestion, etc.
sys.path.append(os.getcwd())

from core.config import Settings
from core.logging import setup_logging
from ingestion.scheduler import SyncScheduler


async def main():
    settings = Settings()
    setup_logging(settings)

    scheduler = SyncScheduler(settings)
    scheduler.start()
    try:
        await asyncio.Event().wait()
    finally:
        await scheduler.stop()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
