import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from core.config import Settings
from core.database import create_engine, create_session_factory
from ingestion.runner import sync_accounts

logger = logging.getLogger(__name__)


class SyncScheduler:
    def __init__(self, settings: Settings):
        self.settings = settings
        self.scheduler = AsyncIOScheduler()
        self.engine = create_engine(settings)
        self.SessionLocal = create_session_factory(self.engine)

    async def run_sync_job(self):
        """Job to sync all configured FIO accounts"""
        logger.info("Scheduler: Starting sync job")
        try:
            results = await sync_accounts(self.settings, self.SessionLocal)
            failed = [account for account, result in results.items() if result["status"] != "success"]
            if failed:
                logger.warning(f"Scheduler: sync failed for {', '.join(failed)}")
        except Exception as e:
            logger.error(f"Scheduler: sync job failed - {e}")

    def start(self):
        """Start the scheduler"""
        self.scheduler.add_job(
            self.run_sync_job,
            trigger=IntervalTrigger(seconds=self.settings.SYNC_RATE_SECONDS),
            id="fio_sync_job",
            replace_existing=True,
            max_instances=1
        )
        self.scheduler.start()
        logger.info(f"Sync Scheduler started (every {self.settings.SYNC_RATE_SECONDS} seconds)")

    async def stop(self):
        self.scheduler.shutdown()
        await self.engine.dispose()
        logger.info("Sync Scheduler stopped")
