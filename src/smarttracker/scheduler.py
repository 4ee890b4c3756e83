"""Background scheduler for debounced saves and the periodic rollover sweep."""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta
from typing import Callable

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler as APScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger("smarttracker.scheduler")

# Overlapping save jobs queue on the category run lock.
SAVE_JOB_MAX_INSTANCES = 16


class BackgroundScheduler:
    """Debounce channels ("habits", "settings") on top of APScheduler.

    ``schedule`` replaces whatever is pending for the same category and pushes
    its deadline back; a flush that already started always runs to completion.
    Runs for one category never overlap, and work scheduled while one is in
    progress is picked up as soon as it finishes.
    Until ``start`` is called nothing fires on its own and pending work waits
    for ``flush``, which is how the CLI and the tests drive it.
    """

    def __init__(self) -> None:
        self.scheduler: APScheduler | None = None
        self._pending: dict[str, Callable[[], None]] = {}
        self._run_locks: dict[str, threading.Lock] = {}
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self.scheduler is not None

    def start(self) -> None:
        """Start the background scheduler."""
        if self.scheduler is not None:
            logger.warning("Scheduler already running")
            return

        self.scheduler = APScheduler()
        self.scheduler.start()
        logger.info("Background scheduler started")

        # Anything queued before start still needs to run.
        with self._lock:
            queued = list(self._pending)
        for category in queued:
            self._add_date_job(category, 0)

    def stop(self, *, flush: bool = True) -> None:
        """Stop the scheduler, running pending saves first unless ``flush`` is False."""
        if flush:
            self.flush()
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=True)
            self.scheduler = None
            logger.info("Background scheduler stopped")

    def pending(self) -> list[str]:
        """Categories with a save waiting to run."""
        with self._lock:
            return sorted(self._pending)

    def schedule(self, category: str, delay: float, func: Callable[[], None]) -> None:
        """Run ``func`` after ``delay`` seconds, superseding pending work for ``category``."""
        with self._lock:
            self._pending[category] = func
        if self.scheduler is not None:
            self._add_date_job(category, delay)

    def cancel(self, category: str) -> None:
        with self._lock:
            self._pending.pop(category, None)
        self._remove_job(self._job_id(category))

    def flush(self) -> None:
        """Run every pending task now, in category order."""
        with self._lock:
            ready = sorted(self._pending.items())
            self._pending.clear()
        for category, func in ready:
            self._remove_job(self._job_id(category))
            with self._run_lock(category):
                self._execute(category, func)

    def add_interval_job(self, func: Callable[[], None], *, seconds: int, job_id: str) -> None:
        """Add a recurring job (e.g. the rollover sweep)."""
        if self.scheduler is None:
            logger.warning(f"Cannot add job {job_id}: scheduler not started")
            return
        self.scheduler.add_job(
            func=func,
            trigger=IntervalTrigger(seconds=seconds),
            id=job_id,
            name=job_id,
            replace_existing=True,
        )
        logger.info(f"Added job: {job_id} every {seconds}s")

    @staticmethod
    def _job_id(category: str) -> str:
        return f"save:{category}"

    def _add_date_job(self, category: str, delay: float) -> None:
        assert self.scheduler is not None
        self.scheduler.add_job(
            func=self._run_pending,
            trigger=DateTrigger(run_date=datetime.now() + timedelta(seconds=delay)),
            args=[category],
            id=self._job_id(category),
            name=f"Debounced {category} save",
            replace_existing=True,
            max_instances=SAVE_JOB_MAX_INSTANCES,
        )

    def _remove_job(self, job_id: str) -> None:
        if self.scheduler is None:
            return
        try:
            self.scheduler.remove_job(job_id)
        except JobLookupError:
            pass

    def _run_lock(self, category: str) -> threading.Lock:
        with self._lock:
            return self._run_locks.setdefault(category, threading.Lock())

    def _run_pending(self, category: str) -> None:
        with self._run_lock(category):
            with self._lock:
                func = self._pending.pop(category, None)
            if func is not None:
                self._execute(category, func)
        self._rearm(category)

    def _rearm(self, category: str) -> None:
        """Give work that is still pending a job if its own job was skipped."""
        scheduler = self.scheduler
        if scheduler is None:
            return
        with self._lock:
            waiting = category in self._pending
        if waiting and scheduler.get_job(self._job_id(category)) is None:
            logger.debug(f"Re-arming orphaned {category} save")
            self._add_date_job(category, 0)

    def _execute(self, category: str, func: Callable[[], None]) -> None:
        try:
            func()
        except Exception as exc:
            # Save callables report their own failures; this only guards the worker.
            logger.error(f"Scheduled {category} task failed: {exc}", exc_info=True)


def create_scheduler(*, auto_start: bool = False) -> BackgroundScheduler:
    """Create and optionally start a background scheduler."""
    scheduler = BackgroundScheduler()
    if auto_start:
        scheduler.start()
    return scheduler
