"""Period keys used to detect when a habit's progress rolls over."""

from __future__ import annotations

from datetime import date, datetime, timedelta


def _local_date(now: datetime | None) -> date:
    return (now or datetime.now()).date()


def today_key(now: datetime | None = None) -> str:
    """Return the local calendar date as YYYY-MM-DD."""

    return _local_date(now).isoformat()


def week_key(now: datetime | None = None) -> str:
    """Return the date of the most recent Sunday (today included) as YYYY-MM-DD."""

    day = _local_date(now)
    # date.weekday(): Monday=0 .. Sunday=6, so Sunday maps to 0 days back.
    days_since_sunday = (day.weekday() + 1) % 7
    return (day - timedelta(days=days_since_sunday)).isoformat()


def current_period_key(frequency: str, now: datetime | None = None) -> str:
    """Return the key of the period a habit with ``frequency`` is currently in."""

    return week_key(now) if frequency == "weekly" else today_key(now)


__all__ = ["current_period_key", "today_key", "week_key"]
