"""
Durable key/value storage for the session.

`FileStorage` keeps a small JSON object on disk; `MemoryStorage` is the same
contract without persistence. Writes and removals take several keys at once so
related values (token and user) always land or disappear together.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, Mapping

from estate_client.utils.config import session_file
from estate_client.utils.logger import get_logger

logger = get_logger()

TOKEN_KEY = "token"
USER_KEY = "user"
SESSION_KEYS = (TOKEN_KEY, USER_KEY)


class MemoryStorage:
    """In-process storage. Lost on exit."""

    def __init__(self, initial: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def update(self, values: Mapping[str, Any]) -> None:
        self._data.update(values)

    def remove(self, keys: Iterable[str]) -> None:
        for k in keys:
            self._data.pop(k, None)


class FileStorage:
    """
    JSON file storage. The whole object is rewritten on every change.

    A missing or unreadable file reads as empty; failures to write are logged
    and propagate to the caller.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = Path(path) if path is not None else session_file()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        if not self._path.is_file():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Session storage read failed for %s: %s", self._path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self._path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
        except OSError as e:
            logger.error("Session storage write failed for %s: %s", self._path, e)
            raise

    def get(self, key: str) -> Any:
        return self._read().get(key)

    def update(self, values: Mapping[str, Any]) -> None:
        data = self._read()
        data.update(values)
        self._write(data)

    def remove(self, keys: Iterable[str]) -> None:
        data = self._read()
        changed = False
        for k in keys:
            if k in data:
                del data[k]
                changed = True
        if changed:
            self._write(data)
