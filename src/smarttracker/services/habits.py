"""Habit factory and lifecycle transitions (rollover, increment, pause)."""

from __future__ import annotations

import re
import threading
from datetime import datetime
from typing import Callable, Iterable

from ..errors import ValidationError
from ..models.habit import FREQUENCIES, PRIORITIES, Habit
from .periods import current_period_key

HABIT_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9 ]{3,30}$")


def normalize_name(name: str) -> str:
    """Return the clean name used as the uniqueness key."""

    return name.strip().lower()


def is_valid_habit_name(name: str) -> bool:
    return bool(HABIT_NAME_PATTERN.match(name.strip()))


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Trim and lower-case tags, dropping empty entries."""

    return [tag.strip().lower() for tag in tags if tag and tag.strip()]


def parse_tags(raw: str | None) -> list[str]:
    """Split comma-separated tag input (``"Health, morning"``) into clean tags."""

    if not raw:
        return []
    return normalize_tags(raw.split(","))


def validate_habit_input(name: str, target: int, frequency: str, priority: str) -> None:
    """Raise ValidationError when any creation field is unacceptable."""

    if not name or not name.strip():
        raise ValidationError("Habit name is required")
    if not is_valid_habit_name(name):
        raise ValidationError("Habit name must be 3-30 letters, digits or spaces")
    if isinstance(target, bool) or not isinstance(target, int) or target < 1:
        raise ValidationError("Target must be a positive whole number")
    if frequency not in FREQUENCIES:
        raise ValidationError(f"Invalid frequency: {frequency}")
    if priority not in PRIORITIES:
        raise ValidationError(f"Invalid priority: {priority}")


class HabitIdGenerator:
    """Hands out strictly increasing ids derived from the creation time in ms.

    Two habits created within the same millisecond get consecutive ids instead
    of colliding.
    """

    def __init__(self, clock: Callable[[], datetime] = datetime.now, *, last_id: int = 0):
        self._clock = clock
        self._last = last_id
        self._lock = threading.Lock()

    def seed(self, last_id: int) -> None:
        """Never hand out an id at or below ``last_id`` (e.g. the largest loaded id)."""

        with self._lock:
            self._last = max(self._last, last_id)

    def next_id(self) -> int:
        with self._lock:
            candidate = int(self._clock().timestamp() * 1000)
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return candidate


def create_habit(
    name: str,
    target: int = 1,
    frequency: str = "daily",
    priority: str = "low",
    tags: Iterable[str] = (),
    *,
    habit_id: int,
    now: datetime | None = None,
) -> Habit:
    """Build a new, validated habit in its initial ``active`` state."""

    validate_habit_input(name, target, frequency, priority)
    now = now or datetime.now()
    clean = name.strip()
    return Habit(
        id=habit_id,
        name=clean,
        clean_name=normalize_name(clean),
        target=target,
        frequency=frequency,
        priority=priority,
        tags=normalize_tags(tags),
        progress=0,
        streak=0,
        status="active",
        order=habit_id,
        period_key=current_period_key(frequency, now),
        created_at=now,
    )


def roll_over(habit: Habit, now: datetime | None = None) -> bool:
    """Reset progress when the habit's period has ended; return True if it did.

    A missed target breaks the streak. Running it again within the same period
    changes nothing.
    """

    expected = current_period_key(habit.frequency, now)
    if habit.period_key == expected:
        return False
    if habit.progress < habit.target:
        habit.streak = 0
    habit.progress = 0
    if habit.status == "completed":
        habit.status = "active"
    habit.period_key = expected
    return True


def increment(habit: Habit, now: datetime | None = None) -> bool:
    """Record one unit of progress; return True exactly when the habit completes."""

    roll_over(habit, now)
    if habit.status in ("paused", "completed"):
        return False
    habit.progress = min(habit.progress + 1, habit.target)
    if habit.progress == habit.target:
        habit.streak += 1
        habit.status = "completed"
        return True
    return False


def toggle_pause(habit: Habit, now: datetime | None = None) -> str | None:
    """Flip active/paused. Completed habits are left alone and None is returned."""

    roll_over(habit, now)
    if habit.status == "completed":
        return None
    habit.status = "active" if habit.status == "paused" else "paused"
    return habit.status


__all__ = [
    "HABIT_NAME_PATTERN",
    "HabitIdGenerator",
    "create_habit",
    "increment",
    "is_valid_habit_name",
    "normalize_name",
    "normalize_tags",
    "parse_tags",
    "roll_over",
    "toggle_pause",
    "validate_habit_input",
]
