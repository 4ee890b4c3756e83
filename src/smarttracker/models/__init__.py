"""SQLModel table exports."""

from .habit import FREQUENCIES, PRIORITIES, STATUSES, Habit
from .settings import AppSetting

__all__ = [
    "AppSetting",
    "FREQUENCIES",
    "Habit",
    "PRIORITIES",
    "STATUSES",
]
