"""
In-process key-value store with the ValkeyClient interface.

Backs the session when no Valkey server is configured (single-user local
runs, tests). Expiry is not modelled: the session manager owns expiry
through its own stamp and countdown.
"""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """The narrow store interface the session manager depends on."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str, expire_seconds: int | None = None) -> None:
        ...

    def delete(self, key: str) -> bool:
        ...

    def keys(self) -> list[str]:
        ...


class MemoryStore:
    """Dict-backed KeyValueStore."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str, expire_seconds: int | None = None) -> None:
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> list[str]:
        return list(self._data)

    def close(self) -> None:
        logger.debug("MemoryStore closed")
