"""Habits view implementation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

import flet as ft

from .. import controllers
from ...controller import CommandResult, TrackerView
from ...logging_config import get_logger
from ...models.habit import Habit
from ...services.query import STATUS_FILTERS
from ..components import show_add_habit_dialog

if TYPE_CHECKING:
    from ...context import AppContext

logger = get_logger(__name__)

_PRIORITY_COLORS = {
    "high": ft.Colors.RED_400,
    "medium": ft.Colors.AMBER_600,
    "low": ft.Colors.BLUE_GREY_400,
}

_STATUS_LABELS = {
    "all": "All habits",
    "active": "Active",
    "paused": "Paused",
    "completed": "Completed",
}


def _stat_card(label: str, value: ft.Text) -> ft.Control:
    return ft.Card(
        content=ft.Container(
            content=ft.Column(
                controls=[
                    ft.Text(label, size=12, color=ft.Colors.ON_SURFACE_VARIANT),
                    value,
                ],
                spacing=4,
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            ),
            padding=12,
            width=150,
        )
    )


def build_habits_view(ctx: AppContext, page: ft.Page) -> ft.View:
    """Build the habits view."""

    tracker = ctx.tracker

    title_text = ft.Text("", size=24, weight=ft.FontWeight.BOLD)
    total_text = ft.Text("0", size=20, weight=ft.FontWeight.BOLD)
    completed_text = ft.Text("0", size=20, weight=ft.FontWeight.BOLD)
    rate_text = ft.Text("0%", size=20, weight=ft.FontWeight.BOLD)
    streak_text = ft.Text("0", size=20, weight=ft.FontWeight.BOLD)
    habit_list = ft.Column(spacing=8)

    status_filter = ft.Dropdown(
        label="Show",
        options=[ft.dropdown.Option(key, _STATUS_LABELS[key]) for key in STATUS_FILTERS],
        width=180,
    )
    search_field = ft.TextField(
        label="Search name or tag",
        prefix_icon=ft.Icons.SEARCH,
        width=260,
    )
    undo_button = ft.TextButton("Undo delete", icon=ft.Icons.UNDO)
    theme_switch = ft.Switch(label="Dark theme")
    notifications_switch = ft.Switch(label="Notifications")

    def render(view: TrackerView) -> None:
        title_text.value = view.title
        page.title = view.title
        total_text.value = str(view.stats.total)
        completed_text.value = str(view.stats.completed)
        rate_text.value = f"{view.stats.completion_rate}%"
        streak_text.value = str(view.stats.longest_streak)

        status_filter.value = view.filters.status
        if (search_field.value or "") != view.filters.q:
            search_field.value = view.filters.q
        theme_switch.value = view.ui.theme == "dark"
        notifications_switch.value = view.ui.notifications
        undo_button.disabled = not view.can_undo
        controllers.apply_theme(page, view.ui.theme)

        rows: list[ft.Control] = [
            _habit_card(habit, index, view.habits) for index, habit in enumerate(view.habits)
        ]
        if not rows:
            rows.append(_empty_state(view))
        habit_list.controls = rows
        page.update()

    def run(command: Callable[..., CommandResult], *args) -> CommandResult:
        result = command(*args)
        logger.debug(f"{command.__name__} -> ok={result.ok}", extra={"command_args": list(args)})
        render(result.view)
        return result

    def _undo() -> None:
        run(tracker.undo_delete)

    def _delete(habit_id: int) -> None:
        result = run(tracker.delete_habit, habit_id)
        if result.ok and result.view.ui.notifications:
            controllers.attach_undo(page, _undo)

    def _habit_card(habit: Habit, index: int, shown: list[Habit]) -> ft.Control:
        period = "today" if habit.frequency == "daily" else "this week"
        previous_id = shown[index - 1].id if index > 0 else None
        next_id = shown[index + 1].id if index + 1 < len(shown) else None

        details: list[ft.Control] = [
            ft.Text(
                f"{habit.progress}/{habit.target} {period}",
                size=12,
                color=ft.Colors.ON_SURFACE_VARIANT,
            ),
            ft.Text(f"Streak {habit.streak}", size=12, color=ft.Colors.ON_SURFACE_VARIANT),
            ft.Text(
                habit.priority.capitalize(),
                size=12,
                color=_PRIORITY_COLORS.get(habit.priority),
                weight=ft.FontWeight.W_500,
            ),
        ]
        details.extend(
            ft.Container(
                content=ft.Text(f"#{tag}", size=11),
                bgcolor=ft.Colors.SURFACE_CONTAINER_HIGHEST,
                border_radius=8,
                padding=ft.padding.symmetric(horizontal=6, vertical=2),
            )
            for tag in habit.tags
        )

        paused = habit.status == "paused"
        return ft.Card(
            content=ft.Container(
                content=ft.Row(
                    controls=[
                        ft.Column(
                            controls=[
                                ft.IconButton(
                                    icon=ft.Icons.ARROW_UPWARD,
                                    tooltip="Move up",
                                    disabled=previous_id is None,
                                    on_click=lambda _e, hid=habit.id, tid=previous_id: run(
                                        tracker.reorder, hid, tid, "before"
                                    ),
                                ),
                                ft.IconButton(
                                    icon=ft.Icons.ARROW_DOWNWARD,
                                    tooltip="Move down",
                                    disabled=next_id is None,
                                    on_click=lambda _e, hid=habit.id, tid=next_id: run(
                                        tracker.reorder, hid, tid, "after"
                                    ),
                                ),
                            ],
                            spacing=0,
                        ),
                        ft.Column(
                            controls=[
                                ft.Text(
                                    habit.name,
                                    size=16,
                                    weight=ft.FontWeight.BOLD,
                                    color=ft.Colors.ON_SURFACE_VARIANT if paused else None,
                                ),
                                ft.ProgressBar(
                                    value=min(habit.progress / habit.target, 1.0),
                                    color=ft.Colors.GREEN if habit.is_completed else None,
                                ),
                                ft.Row(controls=details, spacing=8, wrap=True),
                            ],
                            spacing=4,
                            expand=True,
                        ),
                        ft.IconButton(
                            icon=ft.Icons.ADD_CIRCLE_OUTLINE,
                            tooltip="+1",
                            disabled=habit.status != "active",
                            on_click=lambda _e, hid=habit.id: run(tracker.increment_habit, hid),
                        ),
                        ft.IconButton(
                            icon=ft.Icons.PLAY_ARROW if paused else ft.Icons.PAUSE,
                            tooltip="Resume" if paused else "Pause",
                            visible=habit.status != "completed",
                            on_click=lambda _e, hid=habit.id: run(tracker.toggle_pause, hid),
                        ),
                        ft.IconButton(
                            icon=ft.Icons.DELETE_OUTLINE,
                            tooltip="Delete habit",
                            on_click=lambda _e, hid=habit.id: _delete(hid),
                        ),
                    ],
                    alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                ),
                padding=12,
            )
        )

    def _empty_state(view: TrackerView) -> ft.Control:
        filtered = view.filters.status != "all" or bool(view.filters.q)
        return ft.Container(
            content=ft.Column(
                controls=[
                    ft.Icon(
                        ft.Icons.CHECK_CIRCLE_OUTLINE,
                        size=64,
                        color=ft.Colors.ON_SURFACE_VARIANT,
                    ),
                    ft.Text(
                        "No matching habits" if filtered else "No habits yet",
                        size=20,
                        weight=ft.FontWeight.BOLD,
                    ),
                    ft.Text(
                        "Try clearing the filters" if filtered else "Add a habit to start tracking",
                        color=ft.Colors.ON_SURFACE_VARIANT,
                    ),
                ],
                horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            ),
            padding=24,
        )

    status_filter.on_change = lambda _e: run(tracker.set_filter, status_filter.value or "all")
    search_field.on_change = lambda _e: run(tracker.set_query, search_field.value or "")
    undo_button.on_click = lambda _e: _undo()
    theme_switch.on_change = lambda _e: run(tracker.toggle_theme)
    notifications_switch.on_change = lambda _e: run(tracker.toggle_notifications)

    def open_create_dialog(_=None) -> None:
        show_add_habit_dialog(ctx, page, on_save_callback=lambda result: render(result.view))

    render(tracker.view())

    content = ft.Column(
        controls=[
            ft.Row(
                controls=[
                    title_text,
                    ft.FilledButton("Add habit", icon=ft.Icons.ADD, on_click=open_create_dialog),
                ],
                alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
            ),
            ft.Row(
                controls=[
                    _stat_card("Total", total_text),
                    _stat_card("Completed", completed_text),
                    _stat_card("Completion rate", rate_text),
                    _stat_card("Best streak", streak_text),
                ],
                wrap=True,
            ),
            ft.Row(
                controls=[
                    status_filter,
                    search_field,
                    ft.TextButton(
                        "Clear filters",
                        icon=ft.Icons.FILTER_ALT_OFF,
                        on_click=lambda _e: run(tracker.clear_filters),
                    ),
                    undo_button,
                ],
                wrap=True,
            ),
            ft.Divider(),
            habit_list,
            ft.Container(height=80),
        ],
        expand=True,
        scroll=ft.ScrollMode.AUTO,
    )

    app_bar = ft.AppBar(
        title=ft.Text(ctx.config.APP_NAME),
        actions=[theme_switch, notifications_switch, ft.Container(width=12)],
    )

    return ft.View(
        route="/",
        appbar=app_bar,
        controls=[ft.Container(content=content, padding=16, expand=True)],
        padding=0,
    )
