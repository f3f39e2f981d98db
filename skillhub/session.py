from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_KEY = "token"


class SessionStore:
    """Holds the opaque session token between requests."""

    def get(self) -> str | None:
        raise NotImplementedError

    def set(self, token: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class MemorySessionStore(SessionStore):
    def __init__(self, token: str | None = None):
        self._token = token

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileSessionStore(SessionStore):
    """Persists the token in a small JSON file, keyed by a fixed name."""

    def __init__(self, path: Path, *, key: str = DEFAULT_TOKEN_KEY):
        self._path = path
        self._key = key

    @property
    def path(self) -> Path:
        return self._path

    def get(self) -> str | None:
        token = self._read().get(self._key)
        if isinstance(token, str) and token:
            return token
        return None

    def set(self, token: str) -> None:
        payload = self._read()
        payload[self._key] = token
        self._write(payload)

    def clear(self) -> None:
        payload = self._read()
        if self._key not in payload:
            return
        payload.pop(self._key)
        self._write(payload)

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("Ignoring unreadable session file %s", self._path)
            return {}
        if not isinstance(payload, dict):
            return {}
        return payload

    def _write(self, payload: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
