"""New-habit dialog.

Fields mirror ``HabitTracker.add_habit``: name, target, frequency, priority and
comma-separated tags. Validation happens in the tracker; the dialog only
checks that the target parses as a number so it can show a field error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional

import flet as ft

from ...controller import CommandResult
from ...logging_config import get_logger
from ...models.habit import FREQUENCIES, PRIORITIES
from ...services.habits import parse_tags

if TYPE_CHECKING:
    from ...context import AppContext

logger = get_logger(__name__)


def show_add_habit_dialog(
    ctx: AppContext,
    page: ft.Page,
    on_save_callback: Optional[Callable[[CommandResult], None]] = None,
) -> ft.AlertDialog:
    """Show the create habit dialog and return it.

    Args:
        ctx: Application context
        page: Flet page
        on_save_callback: Called with the tracker result after a successful add
    """

    name_field = ft.TextField(
        label="Habit Name *",
        hint_text="3-30 letters, digits or spaces",
        autofocus=True,
        max_length=30,
        width=400,
    )
    target_field = ft.TextField(
        label="Target",
        value="1",
        keyboard_type=ft.KeyboardType.NUMBER,
        width=120,
    )
    frequency_field = ft.Dropdown(
        label="Frequency",
        options=[ft.dropdown.Option(key, key.capitalize()) for key in FREQUENCIES],
        value="daily",
        width=160,
    )
    priority_field = ft.Dropdown(
        label="Priority",
        options=[ft.dropdown.Option(key, key.capitalize()) for key in PRIORITIES],
        value="low",
        width=160,
    )
    tags_field = ft.TextField(
        label="Tags (optional)",
        hint_text="health, morning",
        width=400,
    )

    def _close_dialog(_=None) -> None:
        dialog.open = False
        page.dialog = None
        page.update()

    def _validate_and_save(_=None) -> None:
        name_field.error_text = None
        target_field.error_text = None

        try:
            target = int((target_field.value or "").strip())
        except ValueError:
            target_field.error_text = "Enter a whole number"
            page.update()
            return

        result = ctx.tracker.add_habit(
            name_field.value or "",
            target,
            frequency_field.value or "daily",
            priority_field.value or "low",
            parse_tags(tags_field.value or ""),
        )
        if not result.ok:
            name_field.error_text = result.message
            page.update()
            return

        logger.info("Habit created from dialog", extra={"habit_id": result.habit.id})
        _close_dialog()
        if on_save_callback:
            on_save_callback(result)

    dialog = ft.AlertDialog(
        modal=True,
        title=ft.Text("New Habit"),
        content=ft.Column(
            controls=[
                name_field,
                ft.Row(controls=[target_field, frequency_field, priority_field], spacing=10),
                tags_field,
            ],
            tight=True,
            spacing=12,
            width=450,
        ),
        actions=[
            ft.TextButton("Cancel", on_click=_close_dialog),
            ft.FilledButton("Save", icon=ft.Icons.SAVE, on_click=_validate_and_save),
        ],
        actions_alignment=ft.MainAxisAlignment.END,
    )

    page.dialog = dialog
    dialog.open = True
    page.update()
    return dialog
