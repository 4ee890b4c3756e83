"""Settings repository protocol."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol


class SettingsRepository(Protocol):
    """Key/value storage for filters, UI preferences and session markers."""

    def get_many(self, keys: Iterable[str]) -> dict[str, Any]:
        """Return values for ``keys``; missing keys map to None."""
        ...

    def set_many(self, values: Mapping[str, Any]) -> None:
        """Store every key/value pair in one transaction."""
        ...
