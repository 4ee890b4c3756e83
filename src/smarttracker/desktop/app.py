"""Main Flet desktop application entry point."""

from __future__ import annotations

import flet as ft

from ..config import BaseConfig
from ..context import create_app_context
from ..logging_config import setup_logging
from . import controllers
from .views.habits import build_habits_view


def main(page: ft.Page) -> None:
    """Main entry point for the Flet desktop app."""

    config = BaseConfig()

    # Initialize structured logging
    logger = setup_logging(config)
    logger.info("Smart Tracker desktop application starting")

    ctx = create_app_context(config, notifier=controllers.make_notifier(page))
    loaded = ctx.tracker.load()
    if not loaded.ok:
        logger.error("Starting with an empty habit list after a failed load")

    page.title = loaded.view.title
    controllers.apply_theme(page, loaded.view.ui.theme)
    page.padding = 0
    page.window_width = 960
    page.window_height = 800
    page.window_min_width = 640
    page.window_min_height = 600

    def show_habits() -> None:
        page.views.clear()
        page.views.append(build_habits_view(ctx, page))
        page.update()

    # Cleanup on page close
    def on_page_close(_):
        logger.info("Application closing, flushing pending saves")
        ctx.shutdown()

    page.on_close = on_page_close

    # Timed saves and the day/week rollover sweep run in the background from here on.
    ctx.start_background(on_rollover=lambda _result: show_habits())

    show_habits()


if __name__ == "__main__":
    ft.app(target=main)
