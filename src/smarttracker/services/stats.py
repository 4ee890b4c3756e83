"""Summary numbers for the counter cards and window title."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from ..models.habit import Habit


@dataclass(frozen=True)
class HabitStats:
    total: int = 0
    completed: int = 0
    completion_rate: int = 0
    longest_streak: int = 0


def compute_stats(habits: Iterable[Habit]) -> HabitStats:
    """Aggregate over the full habit set, never the filtered view."""

    items = list(habits)
    total = len(items)
    completed = sum(1 for h in items if h.progress >= h.target)
    # Halves round up (12.5% -> 13%).
    rate = math.floor(completed / total * 100 + 0.5) if total else 0
    longest = max((h.streak or 0 for h in items), default=0)
    return HabitStats(
        total=total,
        completed=completed,
        completion_rate=rate,
        longest_streak=longest,
    )


def summary_title(stats: HabitStats, app_name: str = "Smart Tracker") -> str:
    """Window title such as ``Smart Tracker — Today: 2/5 ✅ | Best Streak 🔥 3``."""

    if not stats.total:
        return app_name
    return (
        f"{app_name} — Today: {stats.completed}/{stats.total} ✅ | "
        f"Best Streak 🔥 {stats.longest_streak}"
    )


__all__ = ["HabitStats", "compute_stats", "summary_title"]
