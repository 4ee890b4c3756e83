"""Pytest configuration and shared fixtures for Smart Tracker tests.

This module provides database fixtures, a controllable clock, habit factories
and a tracker wired to a scheduler that is never started, so debounced saves
only reach the database when a test calls ``flush()``.
"""

from __future__ import annotations

import itertools
import logging
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from smarttracker.models import AppSetting, Habit  # noqa: F401
from smarttracker.controller import HabitTracker
from smarttracker.infra.database import create_session_factory
from smarttracker.infra.repositories import SQLModelHabitRepository, SQLModelSettingsRepository
from smarttracker.scheduler import create_scheduler
from smarttracker.services.habits import create_habit

# Wednesday; the Sunday-anchored week key for it is 2024-03-10.
START = datetime(2024, 3, 13, 9, 0, 0)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(
        f"sqlite:///{db_path}", echo=False, connect_args={"check_same_thread": False}
    )
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the one the app context builds."""

    return create_session_factory(db_engine)


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def settings_repo(session_factory) -> SQLModelSettingsRepository:
    return SQLModelSettingsRepository(session_factory)


# =============================================================================
# Clock, notifier and factories
# =============================================================================


class FakeClock:
    """Callable clock that only moves when a test moves it."""

    def __init__(self, start: datetime = START):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> datetime:
        self.now = self.now + timedelta(**delta)
        return self.now


class RecordingNotifier:
    """Collects ``(message, level)`` pairs the tracker emits."""

    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def __call__(self, message: str, level: str) -> None:
        self.messages.append((message, level))

    @property
    def texts(self) -> list[str]:
        return [message for message, _ in self.messages]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def habit_factory(clock):
    """Factory for in-memory habits with sequential ids.

    Returns:
        Callable: Function that builds Habit instances via ``create_habit``
    """
    ids = itertools.count(1)

    def _create_habit(
        name: str = "Drink water",
        target: int = 1,
        frequency: str = "daily",
        priority: str = "low",
        tags: tuple[str, ...] = (),
        **overrides,
    ) -> Habit:
        """Create a habit with sensible defaults, then apply field overrides.

        Args:
            name: Display name (3-30 letters, digits or spaces)
            target: Units per period
            frequency: 'daily' or 'weekly'
            overrides: Any Habit field, e.g. ``progress=2`` or ``status="paused"``
        """
        habit = create_habit(
            name, target, frequency, priority, tags, habit_id=next(ids), now=clock()
        )
        for field, value in overrides.items():
            setattr(habit, field, value)
        return habit

    return _create_habit


# =============================================================================
# Tracker Fixtures
# =============================================================================


@pytest.fixture
def make_tracker(habit_repo, settings_repo, clock):
    """Build and load a tracker on the shared test database.

    Calling it a second time simulates an app restart against the same file.
    """
    created: list[HabitTracker] = []

    def _make(notifier=None, habit_repository=None, settings_repository=None) -> HabitTracker:
        tracker = HabitTracker(
            habit_repository or habit_repo,
            settings_repository or settings_repo,
            create_scheduler(),
            notifier=notifier,
            clock=clock,
        )
        tracker.load()
        created.append(tracker)
        return tracker

    yield _make

    for tracker in created:
        tracker.scheduler.stop(flush=False)


@pytest.fixture
def tracker(make_tracker, notifier) -> HabitTracker:
    return make_tracker(notifier=notifier)


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Drop handlers that setup_logging attached during a test."""

    yield
    logger = logging.getLogger("smarttracker")
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
