"""Headless smoke tests for the Flet desktop shell."""

from __future__ import annotations

import flet as ft
import pytest

from smarttracker.config import BaseConfig
from smarttracker.context import create_app_context
from smarttracker.desktop import app as desktop_app
from smarttracker.desktop import controllers
from smarttracker.desktop.components.habit_dialog import show_add_habit_dialog
from smarttracker.desktop.views.habits import build_habits_view


class DummyPage:
    """Minimal stand-in for flet.Page used in view builders."""

    def __init__(self):
        self.views: list[ft.View] = []
        self.snack_bar = None
        self.dialog = None
        self.title = ""
        self.on_close = None
        self.updates = 0

    def update(self):
        self.updates += 1

    padding = 0
    window_width = 960
    window_height = 800
    window_min_width = 640
    window_min_height = 600
    theme_mode = ft.ThemeMode.LIGHT


@pytest.fixture
def config(tmp_path, monkeypatch):
    monkeypatch.setenv("SMARTTRACKER_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("SMARTTRACKER_DATABASE_URL", f"sqlite:///{tmp_path / 'desktop.db'}")
    return BaseConfig()


@pytest.fixture
def page():
    return DummyPage()


@pytest.fixture
def ctx(config, page):
    context = create_app_context(config, notifier=controllers.make_notifier(page))
    context.tracker.load()
    yield context
    context.shutdown()


def test_view_builder_renders_empty_state(ctx, page):
    view = build_habits_view(ctx, page)

    assert isinstance(view, ft.View)
    assert view.route == "/"
    assert page.title == "Smart Tracker"


def test_view_builder_renders_habits(ctx, page):
    ctx.tracker.add_habit("Drink water", 8, "daily", "high", ["health"])
    ctx.tracker.add_habit("Read books")
    ctx.tracker.set_theme("dark")

    build_habits_view(ctx, page)

    assert page.title.startswith("Smart Tracker — Today: 0/2")
    assert page.theme_mode == ft.ThemeMode.DARK


def test_notifier_shows_snack_bar(page):
    notify = controllers.make_notifier(page)

    notify("Habit added successfully.", "info")

    assert isinstance(page.snack_bar, ft.SnackBar)
    assert page.snack_bar.open is True

    undone = []
    controllers.attach_undo(page, lambda: undone.append(True))
    assert page.snack_bar.action == "Undo"
    page.snack_bar.on_action(None)
    assert undone == [True]


def test_add_dialog_creates_habit(ctx, page):
    saved = []
    dialog = show_add_habit_dialog(ctx, page, on_save_callback=saved.append)
    assert page.dialog is dialog
    assert dialog.open is True

    name_field = dialog.content.controls[0]
    target_field = dialog.content.controls[1].controls[0]
    name_field.value = "Morning walk"
    target_field.value = "2"

    save_button = dialog.actions[-1]
    save_button.on_click(None)

    assert dialog.open is False
    assert page.dialog is None
    assert saved and saved[0].habit.name == "Morning walk"
    assert saved[0].habit.target == 2
    assert page.snack_bar.open is True


def test_add_dialog_reports_bad_input(ctx, page):
    dialog = show_add_habit_dialog(ctx, page)
    name_field = dialog.content.controls[0]
    target_field = dialog.content.controls[1].controls[0]

    target_field.value = "lots"
    dialog.actions[-1].on_click(None)
    assert target_field.error_text == "Enter a whole number"

    target_field.value = "1"
    name_field.value = "x"
    dialog.actions[-1].on_click(None)
    assert name_field.error_text
    assert dialog.open is True
    assert ctx.tracker.view().habits == []


def test_main_builds_page_and_flushes_on_close(config, page, monkeypatch):
    monkeypatch.setattr(desktop_app, "BaseConfig", lambda: config)

    desktop_app.main(page)

    assert len(page.views) == 1
    assert page.title == "Smart Tracker"
    assert callable(page.on_close)
    page.on_close(None)
