#!/usr/bin/env python
"""Desktop app entrypoint for Smart Tracker."""

import flet as ft

from smarttracker.desktop.app import main

if __name__ == "__main__":
    ft.app(target=main)
