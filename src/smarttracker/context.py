"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from sqlmodel import Session

from .config import BaseConfig
from .controller import CommandResult, HabitTracker, Notifier
from .infra.database import bootstrap_database
from .infra.repositories import SQLModelHabitRepository, SQLModelSettingsRepository
from .logging_config import get_logger
from .scheduler import BackgroundScheduler, create_scheduler

logger = get_logger(__name__)

ROLLOVER_JOB_ID = "rollover_sweep"


@dataclass
class AppContext:
    """Configuration, repositories, scheduler and the controller built on them."""

    config: BaseConfig
    session_factory: Callable[[], Session]
    habit_repo: SQLModelHabitRepository
    settings_repo: SQLModelSettingsRepository
    scheduler: BackgroundScheduler
    tracker: HabitTracker

    def start_background(
        self, on_rollover: Optional[Callable[[CommandResult], None]] = None
    ) -> None:
        """Start timed saves and the periodic rollover sweep.

        ``on_rollover`` is called with the sweep result whenever a period
        boundary actually reset something, so a front end can re-render.
        """

        def sweep() -> None:
            result = self.tracker.sweep_rollovers()
            if result.ok and on_rollover is not None:
                on_rollover(result)

        self.scheduler.start()
        self.scheduler.add_interval_job(
            sweep,
            seconds=self.config.ROLLOVER_SWEEP_SECONDS,
            job_id=ROLLOVER_JOB_ID,
        )

    def shutdown(self) -> None:
        logger.info("Shutting down, flushing pending saves")
        self.tracker.close()


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    notifier: Optional[Notifier] = None,
    start_background: bool = False,
) -> AppContext:
    """Create and initialize the application context."""

    if config is None:
        config = BaseConfig()

    _engine, session_factory = bootstrap_database(config)

    habit_repo = SQLModelHabitRepository(session_factory)
    settings_repo = SQLModelSettingsRepository(session_factory)
    scheduler = create_scheduler()
    tracker = HabitTracker(
        habit_repo,
        settings_repo,
        scheduler,
        notifier=notifier,
        habits_save_delay=config.habits_save_delay,
        settings_save_delay=config.settings_save_delay,
        app_name=config.APP_NAME,
    )

    ctx = AppContext(
        config=config,
        session_factory=session_factory,
        habit_repo=habit_repo,
        settings_repo=settings_repo,
        scheduler=scheduler,
        tracker=tracker,
    )
    if start_background:
        ctx.start_background()
    return ctx
