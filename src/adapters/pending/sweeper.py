"""
Periodic sweep of expired pending registrations.

Runs store.sweep() on an APScheduler background thread from app startup
until shutdown. One sweeper per process; the store is process-local.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from apscheduler.schedulers.background import BackgroundScheduler

from src.domain.ports import PendingRegistrationStore

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "sweep-pending-registrations"


class PendingRegistrationSweeper:
    def __init__(
        self,
        store: PendingRegistrationStore,
        clock: Callable[[], datetime],
        interval_seconds: int = 60,
    ) -> None:
        self._store = store
        self._clock = clock
        self._interval_seconds = interval_seconds
        self._scheduler: BackgroundScheduler | None = None

    def run_once(self) -> int:
        removed = self._store.sweep(self._clock())
        if removed:
            logger.info("Swept %d expired registration(s)", removed)
        return removed

    def start(self) -> None:
        if self._scheduler is not None:
            return
        scheduler = BackgroundScheduler()
        scheduler.add_job(
            self.run_once,
            "interval",
            seconds=self._interval_seconds,
            id=SWEEP_JOB_ID,
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("Registration sweeper started (every %ss)", self._interval_seconds)

    def shutdown(self) -> None:
        if self._scheduler is None:
            return
        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Registration sweeper stopped")

    @property
    def running(self) -> bool:
        return self._scheduler is not None
