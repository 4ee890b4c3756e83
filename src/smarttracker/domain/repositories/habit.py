"""Habit repository protocol."""

from __future__ import annotations

from typing import Iterable, Protocol

from ...models.habit import Habit


class HabitRepository(Protocol):
    """Durable storage for habits, upserted by id."""

    def load_all(self) -> list[Habit]:
        """Return every stored habit."""
        ...

    def put(self, habit: Habit) -> None:
        """Insert or update a single habit."""
        ...

    def put_bulk(self, habits: Iterable[Habit]) -> None:
        """Insert or update many habits in one transaction."""
        ...

    def delete(self, habit_id: int) -> None:
        """Delete a habit by ID; unknown ids are ignored."""
        ...

    def clear(self) -> None:
        """Delete every habit."""
        ...

    def replace_all(self, habits: Iterable[Habit]) -> None:
        """Make storage match ``habits`` exactly."""
        ...
