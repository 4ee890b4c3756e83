"""Settings repository for app-level key/value pairs."""

from __future__ import annotations

import json
from typing import Any, Callable, Iterable, Mapping

from sqlmodel import Session, select

from ...logging_config import get_logger
from ...models.settings import AppSetting
from ..database import persistence_guard

logger = get_logger(__name__)


def _decode(raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning("Ignoring undecodable setting value", extra={"raw": raw[:80]})
        return None


class SQLModelSettingsRepository:
    """SQLModel-based settings repository storing JSON-encoded values."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def get_many(self, keys: Iterable[str]) -> dict[str, Any]:
        wanted = list(keys)
        with persistence_guard("load settings"):
            with self.session_factory() as session:
                rows = session.exec(select(AppSetting).where(AppSetting.key.in_(wanted))).all()  # type: ignore
                found = {row.key: _decode(row.value) for row in rows}
        return {key: found.get(key) for key in wanted}

    def set_many(self, values: Mapping[str, Any]) -> None:
        with persistence_guard("save settings"):
            with self.session_factory() as session:
                for key, value in values.items():
                    encoded = json.dumps(value)
                    setting = session.get(AppSetting, key)
                    if setting:
                        setting.value = encoded
                    else:
                        setting = AppSetting(key=key, value=encoded)
                    session.add(setting)
                session.commit()


__all__ = ["SQLModelSettingsRepository"]
