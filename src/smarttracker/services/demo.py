"""Demo habits for trying the app out."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..logging_config import get_logger
from .habits import normalize_name

if TYPE_CHECKING:
    from ..controller import HabitTracker

logger = get_logger(__name__)

# name, target, frequency, priority, tags, units already done this period
DEMO_HABITS: tuple[tuple[str, int, str, str, tuple[str, ...], int], ...] = (
    ("Drink water", 8, "daily", "high", ("health",), 3),
    ("Read 20 pages", 1, "daily", "medium", ("learning", "evening"), 1),
    ("Morning walk", 1, "daily", "low", ("health", "morning"), 0),
    ("Gym session", 3, "weekly", "high", ("health", "fitness"), 1),
    ("Call family", 1, "weekly", "medium", ("social",), 0),
    ("Practice guitar", 4, "weekly", "low", ("music",), 2),
)


@dataclass(frozen=True)
class SeedSummary:
    added: int
    skipped: int


def seed_demo_habits(tracker: HabitTracker) -> SeedSummary:
    """Add the demo habits that are not already present and return counts."""

    added = skipped = 0
    existing = tracker.state.store.names
    for name, target, frequency, priority, tags, done in DEMO_HABITS:
        if normalize_name(name) in existing:
            skipped += 1
            continue
        result = tracker.add_habit(name, target, frequency, priority, tags)
        if not result.ok or result.habit is None:
            skipped += 1
            continue
        added += 1
        for _ in range(done):
            tracker.increment_habit(result.habit.id)

    logger.info("Demo habits seeded", extra={"added": added, "skipped": skipped})
    return SeedSummary(added=added, skipped=skipped)
