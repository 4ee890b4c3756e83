"""Terminal front end: ``smarttracker add "Read books" --target 3``."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import click

from .config import BaseConfig
from .context import create_app_context
from .controller import CommandResult, HabitTracker
from .logging_config import setup_logging
from .models.habit import FREQUENCIES, PRIORITIES, Habit
from .services.demo import seed_demo_habits
from .services.habits import parse_tags
from .services.ordering import DROP_POSITIONS
from .services.query import STATUS_FILTERS, build_view
from .state import THEMES


@contextmanager
def _open_tracker(verbose: bool) -> Iterator[HabitTracker]:
    """Load state, hand the tracker over, and always flush on the way out."""

    config = BaseConfig()
    setup_logging(config, console=verbose)
    ctx = create_app_context(config)
    tracker = ctx.tracker
    loaded = tracker.load()
    if not loaded.ok:
        raise click.ClickException(loaded.message or "Failed to load app data.")
    if loaded.message and loaded.view.ui.notifications:
        click.echo(f"[{loaded.level}] {loaded.message}")
    try:
        yield tracker
    finally:
        ctx.shutdown()


def _report(result: CommandResult) -> None:
    """Echo the user-facing message; non-successful commands exit non-zero."""

    if result.message and (result.view.ui.notifications or result.level == "error"):
        click.echo(f"[{result.level}] {result.message}", err=result.level == "error")
    if not result.ok:
        raise click.ClickException(
            "Nothing changed." if result.level != "error" else "Command failed."
        )


def _format_habit(habit: Habit) -> str:
    period = "today" if habit.frequency == "daily" else "this week"
    tags = " ".join(f"#{tag}" for tag in habit.tags)
    line = (
        f"{habit.id}  {habit.name:<30} {habit.progress}/{habit.target} {period:<9} "
        f"{habit.status:<9} streak {habit.streak} [{habit.priority}]"
    )
    return f"{line} {tags}" if tags else line


@click.group()
@click.option("--verbose", is_flag=True, default=False, help="Log to the console as well")
@click.pass_context
def cli(click_ctx: click.Context, verbose: bool) -> None:
    """Track recurring habits from the terminal."""

    click_ctx.obj = {"verbose": verbose}


@cli.command("add")
@click.argument("name")
@click.option("--target", "-t", type=click.IntRange(min=1), default=1, show_default=True)
@click.option("--frequency", "-f", type=click.Choice(FREQUENCIES), default="daily", show_default=True)
@click.option("--priority", "-p", type=click.Choice(PRIORITIES), default="low", show_default=True)
@click.option("--tags", default="", help="Comma-separated tags")
@click.pass_obj
def add_command(obj: dict, name: str, target: int, frequency: str, priority: str, tags: str) -> None:
    """Create a habit."""

    with _open_tracker(obj["verbose"]) as tracker:
        result = tracker.add_habit(name, target, frequency, priority, parse_tags(tags))
        _report(result)
        if result.habit is not None:
            click.echo(_format_habit(result.habit))


@cli.command("list")
@click.option("--status", type=click.Choice(STATUS_FILTERS), default=None, help="Status filter")
@click.option("--query", "-q", default=None, help="Match name or tag")
@click.pass_obj
def list_command(obj: dict, status: str | None, query: str | None) -> None:
    """Show habits (saved filters apply unless overridden)."""

    with _open_tracker(obj["verbose"]) as tracker:
        view = tracker.view()
        if status is not None or query is not None:
            habits = build_view(
                tracker.state.store.list(),
                status if status is not None else view.filters.status,
                query if query is not None else view.filters.q,
            )
        else:
            habits = view.habits
        if not habits:
            click.echo("No habits to show.")
        for habit in habits:
            click.echo(_format_habit(habit))


@cli.command("done")
@click.argument("habit_id", type=int)
@click.pass_obj
def done_command(obj: dict, habit_id: int) -> None:
    """Add one unit of progress."""

    with _open_tracker(obj["verbose"]) as tracker:
        result = tracker.increment_habit(habit_id)
        _report(result)
        if result.habit is not None:
            click.echo(_format_habit(result.habit))


@cli.command("pause")
@click.argument("habit_id", type=int)
@click.pass_obj
def pause_command(obj: dict, habit_id: int) -> None:
    """Pause an active habit or resume a paused one."""

    with _open_tracker(obj["verbose"]) as tracker:
        _report(tracker.toggle_pause(habit_id))


@cli.command("remove")
@click.argument("habit_id", type=int)
@click.pass_obj
def remove_command(obj: dict, habit_id: int) -> None:
    """Delete a habit."""

    with _open_tracker(obj["verbose"]) as tracker:
        _report(tracker.delete_habit(habit_id))


@cli.command("move")
@click.argument("habit_id", type=int)
@click.argument("target_id", type=int)
@click.option(
    "--position",
    type=click.Choice(DROP_POSITIONS),
    default="after",
    show_default=True,
    help="Drop before or after the target habit",
)
@click.pass_obj
def move_command(obj: dict, habit_id: int, target_id: int, position: str) -> None:
    """Reorder: place HABIT_ID next to TARGET_ID."""

    with _open_tracker(obj["verbose"]) as tracker:
        _report(tracker.reorder(habit_id, target_id, position))
        for habit in tracker.view().habits:
            click.echo(_format_habit(habit))


@cli.command("stats")
@click.pass_obj
def stats_command(obj: dict) -> None:
    """Print totals, completion rate and best streak."""

    with _open_tracker(obj["verbose"]) as tracker:
        stats = tracker.view().stats
        click.echo(f"Total habits:    {stats.total}")
        click.echo(f"Completed:       {stats.completed}")
        click.echo(f"Completion rate: {stats.completion_rate}%")
        click.echo(f"Best streak:     {stats.longest_streak}")


@cli.command("theme")
@click.argument("theme", type=click.Choice(THEMES))
@click.pass_obj
def theme_command(obj: dict, theme: str) -> None:
    """Set the desktop theme."""

    with _open_tracker(obj["verbose"]) as tracker:
        _report(tracker.set_theme(theme))


@cli.command("notifications")
@click.argument("state", type=click.Choice(["on", "off"]))
@click.pass_obj
def notifications_command(obj: dict, state: str) -> None:
    """Turn user-facing messages on or off."""

    with _open_tracker(obj["verbose"]) as tracker:
        result = tracker.set_notifications(state == "on")
        # Always confirm this one, even when muting.
        click.echo(f"[{result.level}] {result.message}")


@cli.command("reset")
@click.confirmation_option(prompt="Delete every habit?")
@click.pass_obj
def reset_command(obj: dict) -> None:
    """Delete all habits."""

    with _open_tracker(obj["verbose"]) as tracker:
        _report(tracker.clear_habits())


@cli.command("seed-demo")
@click.pass_obj
def seed_demo_command(obj: dict) -> None:
    """Add a handful of sample habits."""

    with _open_tracker(obj["verbose"]) as tracker:
        summary = seed_demo_habits(tracker)
        click.echo(f"Demo habits ready ({summary.added} added, {summary.skipped} already present)")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
