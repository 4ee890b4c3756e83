"""Status filter and free-text search over the habit list."""

from __future__ import annotations

from typing import Iterable

from ..models.habit import STATUSES, Habit

STATUS_FILTERS: tuple[str, ...] = ("all", *STATUSES)


def normalize_query(query: str | None) -> str:
    return (query or "").strip().lower()


def matches_query(habit: Habit, query: str) -> bool:
    """True when the normalized query occurs in the clean name or any tag."""

    if not query:
        return True
    return query in habit.clean_name or any(query in tag for tag in habit.tags)


def build_view(habits: Iterable[Habit], status: str = "all", query: str = "") -> list[Habit]:
    """Return the habits to display, sorted by ``order``; the input is untouched."""

    needle = normalize_query(query)
    selected = [
        habit
        for habit in habits
        if (status == "all" or habit.status == status) and matches_query(habit, needle)
    ]
    return sorted(selected, key=lambda h: h.order)


__all__ = ["STATUS_FILTERS", "build_view", "matches_query", "normalize_query"]
