"""Command/query interface that front ends drive.

Every command mutates the in-memory state immediately and schedules a
debounced save; persistence failures are reported but never roll state back.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Optional

from .domain.repositories import HabitRepository, SettingsRepository
from .errors import DuplicateId, DuplicateName, NotFound, PersistenceFailure, ValidationError
from .logging_config import get_logger
from .models.habit import Habit
from .scheduler import BackgroundScheduler
from .services.habits import HabitIdGenerator, create_habit, increment, roll_over, toggle_pause
from .services.ordering import reorder_habits
from .services.periods import today_key
from .services.query import STATUS_FILTERS, build_view, normalize_query
from .services.stats import HabitStats, compute_stats, summary_title
from .state import THEMES, AppState, Filters, UiPreferences

logger = get_logger(__name__)

Notifier = Callable[[str, str], None]

HABITS_CHANNEL = "habits"
SETTINGS_CHANNEL = "settings"
SETTINGS_KEYS = ("filters", "lastActiveDate", "ui")

DUPLICATE_MESSAGE = "Invalid habit name or habit already exists."
ADD_FAILED_MESSAGE = "Failed to add habit. Please try again."
SAVE_FAILED_MESSAGE = "Failed to save habits. Please try again."
LOAD_FAILED_MESSAGE = "Failed to load app data. Please restart the app."
RESET_MESSAGE = "Habits progress reset 🌅"


@dataclass(frozen=True)
class TrackerView:
    """Read-only snapshot a front end renders from."""

    habits: list[Habit]
    stats: HabitStats
    filters: Filters
    ui: UiPreferences
    can_undo: bool
    title: str


@dataclass(frozen=True)
class CommandResult:
    ok: bool
    view: TrackerView
    message: Optional[str] = None
    level: str = "info"
    habit: Optional[Habit] = None


def _fingerprint(habit: Habit) -> tuple:
    return (habit.progress, habit.streak, habit.status, habit.period_key)


def _detached(habit: Optional[Habit]) -> Optional[Habit]:
    """Copy of a store-owned row; edits to it never reach the store or its name index."""
    if habit is None:
        return None
    return Habit.model_validate(habit.snapshot())


class HabitTracker:
    """Owns ``AppState`` and serialises every command behind one lock."""

    def __init__(
        self,
        habit_repo: HabitRepository,
        settings_repo: SettingsRepository,
        scheduler: BackgroundScheduler,
        *,
        notifier: Optional[Notifier] = None,
        clock: Callable[[], datetime] = datetime.now,
        habits_save_delay: float = 0.2,
        settings_save_delay: float = 0.25,
        app_name: str = "Smart Tracker",
    ):
        self.habit_repo = habit_repo
        self.settings_repo = settings_repo
        self.scheduler = scheduler
        self.notifier = notifier
        self.clock = clock
        self.habits_save_delay = habits_save_delay
        self.settings_save_delay = settings_save_delay
        self.app_name = app_name
        self.state = AppState()
        self._ids = HabitIdGenerator(clock)
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def view(self) -> TrackerView:
        with self._lock:
            habits = self.state.store.list()
            stats = compute_stats(habits)
            return TrackerView(
                habits=[
                    _detached(h)
                    for h in build_view(habits, self.state.filters.status, self.state.filters.q)
                ],
                stats=stats,
                filters=Filters(**self.state.filters.to_dict()),
                ui=UiPreferences(**self.state.ui.to_dict()),
                can_undo=bool(self.state.undo),
                title=summary_title(stats, self.app_name),
            )

    def get(self, habit_id: int) -> Optional[Habit]:
        with self._lock:
            return _detached(self.state.store.get(habit_id))

    # ------------------------------------------------------------------
    # Startup / shutdown
    # ------------------------------------------------------------------

    def load(self) -> CommandResult:
        """Load habits and settings, then roll stale periods forward."""

        with self._lock:
            try:
                habits = self.habit_repo.load_all()
                meta = self.settings_repo.get_many(SETTINGS_KEYS)
            except PersistenceFailure as exc:
                logger.error(f"Error initializing app: {exc}", exc_info=True)
                return self._result(False, LOAD_FAILED_MESSAGE, "error")

            self.state.store.load(habits)
            self.state.undo.clear()
            self._ids.seed(self.state.store.max_id())
            self.state.filters = Filters.from_mapping(meta.get("filters"))
            self.state.ui = UiPreferences.from_mapping(meta.get("ui"))
            last_active = meta.get("lastActiveDate")
            self.state.last_active_date = last_active if isinstance(last_active, str) else None
            logger.info("State loaded", extra={"habits": len(habits)})

            message = self._roll_over_all()
            self._schedule_habits_save()
            return self._result(True, message)

    def flush(self) -> None:
        """Write pending saves now."""
        self.scheduler.flush()

    def close(self) -> None:
        self.scheduler.stop(flush=True)

    # ------------------------------------------------------------------
    # Habit commands
    # ------------------------------------------------------------------

    def add_habit(
        self,
        name: str,
        target: int = 1,
        frequency: str = "daily",
        priority: str = "low",
        tags: Iterable[str] = (),
    ) -> CommandResult:
        with self._lock:
            try:
                habit = create_habit(
                    name,
                    target,
                    frequency,
                    priority,
                    tags,
                    habit_id=self._ids.next_id(),
                    now=self.clock(),
                )
                self.state.store.add(habit)
            except DuplicateName as exc:
                logger.info("Habit rejected", extra={"reason": str(exc)})
                return self._result(False, DUPLICATE_MESSAGE, "error")
            except ValidationError as exc:
                logger.info("Habit rejected", extra={"reason": str(exc)})
                return self._result(False, f"{exc}.", "error")
            except DuplicateId as exc:
                logger.error(f"Habit id clash: {exc}")
                return self._result(False, ADD_FAILED_MESSAGE, "error")

            logger.info("Habit added", extra={"habit_id": habit.id})
            self._schedule_habits_save()
            return self._result(True, "Habit added successfully.", habit=habit)

    def increment_habit(self, habit_id: int) -> CommandResult:
        with self._lock:
            habit = self.state.store.get(habit_id)
            if habit is None:
                return self._missing(habit_id)
            now = self.clock()
            rolled = roll_over(habit, now)
            progress_before = habit.progress
            completed = increment(habit, now)
            if rolled or habit.progress != progress_before:
                self._schedule_habits_save()
            if habit.progress == progress_before:
                # Paused or already completed for this period.
                return self._result(False, habit=habit)
            if completed:
                logger.info("Habit completed", extra={"habit_id": habit_id, "streak": habit.streak})
                return self._result(True, "Congratulations! Habit completed.", "success", habit)
            return self._result(True, habit=habit)

    def toggle_pause(self, habit_id: int) -> CommandResult:
        with self._lock:
            habit = self.state.store.get(habit_id)
            if habit is None:
                return self._missing(habit_id)
            before = _fingerprint(habit)
            new_status = toggle_pause(habit, self.clock())
            if _fingerprint(habit) != before:
                self._schedule_habits_save()
            if new_status is None:
                return self._result(False, habit=habit)
            message = "Habit paused" if new_status == "paused" else "Habit resumed"
            return self._result(True, message, habit=habit)

    def delete_habit(self, habit_id: int) -> CommandResult:
        with self._lock:
            try:
                habit = self.state.store.remove(habit_id)
            except NotFound:
                return self._missing(habit_id)
            self.state.undo.push(habit)
            logger.info("Habit removed", extra={"habit_id": habit_id})
            self._schedule_habits_save()
            return self._result(True, "Habit removed successfully.", "attention", habit)

    def undo_delete(self) -> CommandResult:
        with self._lock:
            habit = self.state.undo.pop()
            if habit is None:
                return self._result(False)
            try:
                self.state.store.restore(habit)
            except DuplicateName:
                logger.info("Undo rejected, name reused", extra={"habit_id": habit.id})
                return self._result(
                    False, "Cannot undo: a habit with that name already exists.", "error"
                )
            except DuplicateId as exc:
                logger.error(f"Undo rejected: {exc}")
                return self._result(False, "Cannot undo: the habit could not be restored.", "error")
            roll_over(habit, self.clock())
            logger.info("Habit restored", extra={"habit_id": habit.id})
            self._schedule_habits_save()
            return self._result(True, "Habit restored.", habit=habit)

    def reorder(self, dragged_id: int, target_id: int, position: str) -> CommandResult:
        with self._lock:
            try:
                reordered = reorder_habits(
                    self.state.store.sorted(), dragged_id, target_id, position
                )
            except ValidationError as exc:
                return self._result(False, f"{exc}.", "error")
            if reordered is None:
                return self._result(False)
            self._schedule_habits_save()
            return self._result(True)

    def sweep_rollovers(self) -> CommandResult:
        """Periodic check for day/week boundaries."""

        with self._lock:
            message = self._roll_over_all()
            if message is None:
                return self._result(False)
            self._schedule_habits_save()
            return self._result(True, message)

    def clear_habits(self) -> CommandResult:
        with self._lock:
            removed = len(self.state.store)
            self.state.store.clear()
            self.state.undo.clear()
            logger.info("All habits cleared", extra={"removed": removed})
            self.scheduler.schedule(
                HABITS_CHANNEL, self.habits_save_delay, self._guarded(self.habit_repo.clear)
            )
            return self._result(True, f"Removed {removed} habits.", "attention")

    # ------------------------------------------------------------------
    # Filters and preferences
    # ------------------------------------------------------------------

    def set_filter(self, status: str) -> CommandResult:
        with self._lock:
            if status not in STATUS_FILTERS:
                return self._result(False, f"Unknown filter: {status}.", "error")
            self.state.filters.status = status
            self._schedule_settings_save()
            return self._result(True)

    def set_query(self, text: str) -> CommandResult:
        with self._lock:
            self.state.filters.q = normalize_query(text)
            self._schedule_settings_save()
            return self._result(True)

    def clear_filters(self) -> CommandResult:
        with self._lock:
            self.state.filters = Filters()
            self._schedule_settings_save()
            return self._result(True)

    def set_theme(self, theme: str) -> CommandResult:
        with self._lock:
            if theme not in THEMES:
                return self._result(False, f"Unknown theme: {theme}.", "error")
            self.state.ui.theme = theme
            self._schedule_settings_save()
            return self._result(True, f"{theme.capitalize()} theme enabled.")

    def toggle_theme(self) -> CommandResult:
        with self._lock:
            return self.set_theme("light" if self.state.ui.theme == "dark" else "dark")

    def set_notifications(self, enabled: bool) -> CommandResult:
        with self._lock:
            if enabled:
                self.state.ui.notifications = True
                self._schedule_settings_save()
                return self._result(True, "Notifications enabled.")
            # Announce before muting so the user sees the confirmation.
            message = "Notifications disabled."
            self._notify(message, "info")
            self.state.ui.notifications = False
            self._schedule_settings_save()
            return self._result(True, message, notify=False)

    def toggle_notifications(self) -> CommandResult:
        with self._lock:
            return self.set_notifications(not self.state.ui.notifications)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _roll_over_all(self) -> Optional[str]:
        now = self.clock()
        did_reset = False
        for habit in self.state.store.list():
            did_reset = roll_over(habit, now) or did_reset
        if not did_reset:
            return None
        self.state.last_active_date = today_key(now)
        self._schedule_settings_save()
        logger.info("Progress reset for new period", extra={"date": self.state.last_active_date})
        return RESET_MESSAGE

    def _missing(self, habit_id: int) -> CommandResult:
        logger.debug("Ignoring command for unknown habit", extra={"habit_id": habit_id})
        return self._result(False)

    def _result(
        self,
        ok: bool,
        message: Optional[str] = None,
        level: str = "info",
        habit: Optional[Habit] = None,
        *,
        notify: bool = True,
    ) -> CommandResult:
        if message and notify:
            self._notify(message, level)
        return CommandResult(
            ok=ok, view=self.view(), message=message, level=level, habit=_detached(habit)
        )

    def _notify(self, message: str, level: str) -> None:
        # Save failures arrive here from scheduler worker threads.
        with self._lock:
            enabled = self.state.ui.notifications
        if self.notifier is None or not enabled:
            return
        try:
            self.notifier(message, level)
        except Exception as exc:
            logger.warning(f"Notifier failed: {exc}", exc_info=True)

    def _schedule_habits_save(self) -> None:
        snapshot = [Habit.model_validate(h.snapshot()) for h in self.state.store.sorted()]
        self.scheduler.schedule(
            HABITS_CHANNEL,
            self.habits_save_delay,
            self._guarded(lambda: self.habit_repo.replace_all(snapshot)),
        )

    def _schedule_settings_save(self) -> None:
        values = self.state.settings_snapshot()
        self.scheduler.schedule(
            SETTINGS_CHANNEL,
            self.settings_save_delay,
            self._guarded(lambda: self.settings_repo.set_many(values), SETTINGS_CHANNEL),
        )

    def _guarded(self, write: Callable[[], None], channel: str = HABITS_CHANNEL) -> Callable[[], None]:
        """Wrap a write so failures are logged and shown instead of raised."""

        def run() -> None:
            try:
                write()
            except PersistenceFailure as exc:
                logger.error(f"Error saving {channel}: {exc}", exc_info=True)
                if channel == HABITS_CHANNEL:
                    self._notify(SAVE_FAILED_MESSAGE, "error")
                else:
                    self._notify("Failed to save settings.", "error")
            else:
                logger.debug(f"Saved {channel}")

        return run


__all__ = ["CommandResult", "HabitTracker", "Notifier", "TrackerView"]
