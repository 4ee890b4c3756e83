"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from typing import Callable, Iterable

from sqlmodel import Session, select

from ...models.habit import Habit
from ..database import persistence_guard


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def load_all(self) -> list[Habit]:
        """Return every stored habit, detached from the session."""
        with persistence_guard("load habits"):
            with self.session_factory() as session:
                rows = list(session.exec(select(Habit).order_by(Habit.order)).all())  # type: ignore
                session.expunge_all()
                return rows

    def put(self, habit: Habit) -> None:
        """Insert or update a single habit."""
        self.put_bulk([habit])

    def put_bulk(self, habits: Iterable[Habit]) -> None:
        """Insert or update many habits in one transaction."""
        with persistence_guard("save habits"):
            with self.session_factory() as session:
                for habit in habits:
                    session.merge(habit)
                session.commit()

    def delete(self, habit_id: int) -> None:
        """Delete a habit by ID."""
        with persistence_guard("delete habit"):
            with self.session_factory() as session:
                habit = session.get(Habit, habit_id)
                if habit:
                    session.delete(habit)
                    session.commit()

    def clear(self) -> None:
        """Delete every habit."""
        with persistence_guard("clear habits"):
            with self.session_factory() as session:
                for habit in session.exec(select(Habit)).all():
                    session.delete(habit)
                session.commit()

    def replace_all(self, habits: Iterable[Habit]) -> None:
        """Make the table match ``habits``: drop missing rows, then upsert the rest."""
        incoming = list(habits)
        keep = {habit.id for habit in incoming}
        with persistence_guard("save habits"):
            with self.session_factory() as session:
                for row in session.exec(select(Habit)).all():
                    if row.id not in keep:
                        session.delete(row)
                # Deletes go out first so a re-created name does not trip the unique index.
                session.flush()
                for habit in incoming:
                    session.merge(habit)
                session.commit()


__all__ = ["SQLModelHabitRepository"]
