"""Controller helpers shared by the desktop views."""

from __future__ import annotations

from typing import Callable, Optional

import flet as ft

from ..controller import Notifier

_LEVEL_COLORS = {
    "success": ft.Colors.GREEN_700,
    "error": ft.Colors.ERROR,
    "attention": ft.Colors.AMBER_800,
}


def show_snack(
    page: ft.Page,
    message: str,
    level: str = "info",
    *,
    action: Optional[str] = None,
    on_action: Optional[Callable] = None,
) -> None:
    """Display a snack bar message."""

    page.snack_bar = ft.SnackBar(
        content=ft.Text(message),
        bgcolor=_LEVEL_COLORS.get(level),
        action=action,
        on_action=on_action,
    )
    page.snack_bar.open = True
    page.update()


def make_notifier(page: ft.Page) -> Notifier:
    """Route tracker messages to the page's snack bar."""

    def notify(message: str, level: str) -> None:
        show_snack(page, message, level)

    return notify


def attach_undo(page: ft.Page, on_undo: Callable[[], None]) -> None:
    """Add an Undo action to the snack bar that is currently showing."""

    snack = page.snack_bar
    if snack is None:
        return
    snack.action = "Undo"
    snack.on_action = lambda _e: on_undo()
    page.update()


def apply_theme(page: ft.Page, theme: str) -> None:
    page.theme_mode = ft.ThemeMode.DARK if theme == "dark" else ft.ThemeMode.LIGHT
