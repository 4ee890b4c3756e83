"""Error taxonomy for habit commands and persistence."""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for errors raised by the tracker core."""


class ValidationError(TrackerError, ValueError):
    """Input failed validation (name format, target, enum values)."""


class DuplicateName(TrackerError, ValueError):
    """A habit with the same normalized name already exists."""

    def __init__(self, clean_name: str):
        super().__init__(f"Habit already exists: {clean_name!r}")
        self.clean_name = clean_name


class DuplicateId(TrackerError, ValueError):
    """A habit with the same id is already present in the store."""

    def __init__(self, habit_id: int):
        super().__init__(f"Habit id already in use: {habit_id}")
        self.habit_id = habit_id


class NotFound(TrackerError, LookupError):
    """No habit with the given id is present in the store."""

    def __init__(self, habit_id: int):
        super().__init__(f"Habit not found: {habit_id}")
        self.habit_id = habit_id


class PersistenceFailure(TrackerError, RuntimeError):
    """The local database could not be read or written."""


__all__ = [
    "TrackerError",
    "ValidationError",
    "DuplicateName",
    "DuplicateId",
    "NotFound",
    "PersistenceFailure",
]
