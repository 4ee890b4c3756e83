"""Service module exports."""

from . import demo, habits, ordering, periods, query, stats, store

__all__ = [
    "demo",
    "habits",
    "ordering",
    "periods",
    "query",
    "stats",
    "store",
]
