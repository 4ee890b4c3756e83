"""In-memory habit store with a clean-name uniqueness index and undo slot."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from ..errors import DuplicateId, DuplicateName, NotFound
from ..models.habit import Habit


class HabitStore:
    """Habits keyed by id, plus the set of clean names currently in use.

    Every mutation checks first and then updates both structures together, so
    the name index always mirrors membership.
    """

    def __init__(self, habits: Iterable[Habit] = ()):
        self._habits: dict[int, Habit] = {}
        self._names: set[str] = set()
        self.load(habits)

    def __len__(self) -> int:
        return len(self._habits)

    def __contains__(self, habit_id: object) -> bool:
        return habit_id in self._habits

    def __iter__(self) -> Iterator[Habit]:
        return iter(list(self._habits.values()))

    @property
    def names(self) -> frozenset[str]:
        return frozenset(self._names)

    def has_name(self, clean_name: str) -> bool:
        return clean_name in self._names

    def load(self, habits: Iterable[Habit]) -> None:
        """Replace the contents, rebuilding the name index from scratch."""

        by_id: dict[int, Habit] = {}
        names: set[str] = set()
        for habit in habits:
            if habit.clean_name in names:
                raise DuplicateName(habit.clean_name)
            by_id[habit.id] = habit
            names.add(habit.clean_name)
        self._habits = by_id
        self._names = names

    def clear(self) -> None:
        self._habits = {}
        self._names = set()

    def add(self, habit: Habit) -> Habit:
        if habit.clean_name in self._names:
            raise DuplicateName(habit.clean_name)
        if habit.id in self._habits:
            raise DuplicateId(habit.id)
        self._habits[habit.id] = habit
        self._names.add(habit.clean_name)
        return habit

    def restore(self, habit: Habit) -> Habit:
        """Re-insert a previously removed habit (undo)."""

        return self.add(habit)

    def remove(self, habit_id: int) -> Habit:
        habit = self._habits.get(habit_id)
        if habit is None:
            raise NotFound(habit_id)
        del self._habits[habit_id]
        self._names.discard(habit.clean_name)
        return habit

    def get(self, habit_id: int) -> Optional[Habit]:
        return self._habits.get(habit_id)

    def require(self, habit_id: int) -> Habit:
        habit = self._habits.get(habit_id)
        if habit is None:
            raise NotFound(habit_id)
        return habit

    def list(self) -> list[Habit]:
        """All habits in insertion order (no display ordering applied)."""

        return list(self._habits.values())

    def sorted(self) -> list[Habit]:
        """All habits by ascending ``order``; ties keep insertion order."""

        return sorted(self._habits.values(), key=lambda h: h.order)

    def max_id(self) -> int:
        return max(self._habits, default=0)


class UndoBuffer:
    """Holds at most one recently deleted habit; a new push replaces the old one."""

    def __init__(self) -> None:
        self._slot: Optional[Habit] = None

    def __bool__(self) -> bool:
        return self._slot is not None

    def push(self, habit: Habit) -> None:
        self._slot = habit

    def peek(self) -> Optional[Habit]:
        return self._slot

    def pop(self) -> Optional[Habit]:
        habit, self._slot = self._slot, None
        return habit

    def clear(self) -> None:
        self._slot = None


__all__ = ["HabitStore", "UndoBuffer"]
