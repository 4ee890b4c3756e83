"""Habit tracking data structures."""

from __future__ import annotations

from datetime import datetime
from typing import Any, ClassVar

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

FREQUENCIES: tuple[str, ...] = ("daily", "weekly")
PRIORITIES: tuple[str, ...] = ("low", "medium", "high")
STATUSES: tuple[str, ...] = ("active", "paused", "completed")


class Habit(SQLModel, table=True):
    """A recurring habit with progress counted against a per-period target."""

    __tablename__: ClassVar[str] = "habit"

    id: int = Field(primary_key=True, sa_column_kwargs={"autoincrement": False})
    name: str = Field(nullable=False, max_length=30)
    clean_name: str = Field(nullable=False, max_length=30, unique=True, index=True)
    target: int = Field(default=1, nullable=False)
    frequency: str = Field(default="daily", max_length=16)
    priority: str = Field(default="low", max_length=16)
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    progress: int = Field(default=0, nullable=False)
    streak: int = Field(default=0, nullable=False)
    status: str = Field(default="active", max_length=16, index=True)
    order: int = Field(default=0, nullable=False, index=True)
    period_key: str = Field(nullable=False, max_length=10)
    created_at: datetime = Field(default_factory=datetime.now, nullable=False)

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    def snapshot(self) -> dict[str, Any]:
        """Return a detached copy of the row values, safe to hand to another thread."""

        data = self.model_dump()
        data["tags"] = list(self.tags)
        return data
