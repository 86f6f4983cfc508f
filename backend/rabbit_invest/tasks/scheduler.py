"""Background auto-refresh of comparison NAV data."""

import logging
from datetime import datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from rabbit_invest.config import NAV_REFRESH_INTERVAL
from rabbit_invest.services.app_state import AppState

logger = logging.getLogger(__name__)

REFRESH_JOB_ID = "refresh_comparison_navs"


def create_scheduler() -> AsyncIOScheduler:
    return AsyncIOScheduler()


class NavRefresher:
    """Re-fetches the selected funds' NAV history every `interval` seconds
    while the comparison view is being watched.

    Each stop() bumps a generation counter; a fetch that started under an
    older generation is discarded when it completes.
    """

    def __init__(
        self,
        state: AppState,
        scheduler: AsyncIOScheduler,
        interval: int = NAV_REFRESH_INTERVAL,
    ):
        self.state = state
        self.scheduler = scheduler
        self.interval = interval
        self._generation = 0
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> None:
        """Schedule the refresh job; the first run fires immediately."""
        self._generation += 1
        self._active = True
        self.scheduler.add_job(
            self.refresh,
            trigger=IntervalTrigger(seconds=self.interval),
            id=REFRESH_JOB_ID,
            replace_existing=True,
            next_run_time=datetime.now(),
        )
        logger.info(f"NAV auto-refresh started, every {self.interval}s")

    def stop(self) -> None:
        self._generation += 1
        self._active = False
        if self.scheduler.get_job(REFRESH_JOB_ID) is not None:
            self.scheduler.remove_job(REFRESH_JOB_ID)
            logger.info("NAV auto-refresh stopped")

    async def refresh(self) -> bool:
        """Fetch and publish fresh NAV data. Returns False if discarded."""
        generation = self._generation
        try:
            nav_map = await self.state.aggregator.fetch_many(
                self.state.selection.codes()
            )
        except Exception as e:
            logger.error(f"Failed to refresh comparison NAVs: {e}")
            return False

        if generation != self._generation or not self._active:
            logger.info("Discarding stale NAV refresh result")
            return False

        self.state.set_nav_map(nav_map)
        logger.info(f"Refreshed NAV data for {len(nav_map)} schemes")
        return True


def start_scheduler(scheduler: AsyncIOScheduler) -> None:
    """Start the background scheduler."""
    if not scheduler.running:
        scheduler.start()
        logger.info("Scheduler started")


def stop_scheduler(scheduler: AsyncIOScheduler) -> None:
    """Stop the background scheduler."""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler stopped")
