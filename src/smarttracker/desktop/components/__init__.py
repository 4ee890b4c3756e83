"""Reusable UI components for the desktop app."""

from .habit_dialog import show_add_habit_dialog

__all__ = ["show_add_habit_dialog"]
