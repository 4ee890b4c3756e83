"""Session state owned by the habit controller."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Optional

from .services.query import STATUS_FILTERS
from .services.store import HabitStore, UndoBuffer

THEMES: tuple[str, ...] = ("light", "dark")


@dataclass
class Filters:
    status: str = "all"
    q: str = ""

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "Filters":
        """Build filters from persisted values, dropping anything unrecognised."""

        if not isinstance(raw, Mapping):
            return cls()
        status = raw.get("status")
        q = raw.get("q")
        return cls(
            status=status if status in STATUS_FILTERS else "all",
            q=q if isinstance(q, str) else "",
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class UiPreferences:
    theme: str = "light"
    notifications: bool = True

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "UiPreferences":
        if not isinstance(raw, Mapping):
            return cls()
        theme = raw.get("theme")
        notifications = raw.get("notifications")
        return cls(
            theme=theme if theme in THEMES else "light",
            notifications=notifications if isinstance(notifications, bool) else True,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class AppState:
    """Everything the app knows during one session."""

    store: HabitStore = field(default_factory=HabitStore)
    undo: UndoBuffer = field(default_factory=UndoBuffer)
    last_active_date: Optional[str] = None
    filters: Filters = field(default_factory=Filters)
    ui: UiPreferences = field(default_factory=UiPreferences)

    def settings_snapshot(self) -> dict[str, Any]:
        """Values persisted under the ``filters``/``lastActiveDate``/``ui`` keys."""

        return {
            "filters": self.filters.to_dict(),
            "lastActiveDate": self.last_active_date,
            "ui": self.ui.to_dict(),
        }


__all__ = ["AppState", "Filters", "THEMES", "UiPreferences"]
