"""Demo data seeding script."""

from __future__ import annotations

from smarttracker.config import BaseConfig
from smarttracker.context import create_app_context
from smarttracker.logging_config import setup_logging
from smarttracker.services.demo import seed_demo_habits


def seed_demo() -> None:
    """Populate the database with demo habits for the desktop app."""

    config = BaseConfig()
    setup_logging(config)
    ctx = create_app_context(config)
    loaded = ctx.tracker.load()
    if not loaded.ok:
        raise SystemExit(loaded.message)
    try:
        summary = seed_demo_habits(ctx.tracker)
    finally:
        ctx.shutdown()
    print(f"Demo habits ready ({summary.added} added, {summary.skipped} already present)")


if __name__ == "__main__":
    seed_demo()
