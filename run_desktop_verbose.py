#!/usr/bin/env python
"""Desktop app entrypoint for Smart Tracker with dev-mode console logging."""

import os

# Must be set before the config module reads the environment
os.environ["SMARTTRACKER_DEV_MODE"] = "true"

print("=" * 80)
print("Smart Tracker - VERBOSE DEV MODE")
print("Commands, saves and rollovers will be logged below")
print("=" * 80)
print()

import flet as ft  # noqa: E402

from smarttracker.desktop.app import main  # noqa: E402

if __name__ == "__main__":
    ft.app(target=main)
