"""
Valkey-backed KeyValueStore for session state that survives restarts.

Thin wrapper over redis-py. Every key is namespaced with a prefix so the
login state can share a Valkey database with other services. Fail-fast:
connection errors propagate, nothing falls back to memory.
"""

import logging

import redis

logger = logging.getLogger(__name__)


class ValkeyClient:
    """
    KeyValueStore over a Valkey (Redis-compatible) server.

    Usage:
        store = ValkeyClient("redis://localhost:6379/0")
        store.set("session:logged_in", "true")   # stored as login:session:logged_in
        store.get("session:logged_in")           # "true", or None when absent
    """

    def __init__(self, url: str, key_prefix: str = "login:"):
        """
        Connect and verify the server answers.

        Raises:
            redis.ConnectionError: If the server is unreachable
        """
        self._prefix = key_prefix
        self._client = redis.from_url(url, decode_responses=True)
        self._client.ping()
        logger.info(f"ValkeyClient connected (prefix={key_prefix!r})")

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def ping(self) -> bool:
        self._client.ping()
        return True

    def get(self, key: str) -> str | None:
        """Value for key, or None when unset."""
        return self._client.get(self._key(key))

    def set(self, key: str, value: str, expire_seconds: int | None = None) -> None:
        self._client.set(self._key(key), value, ex=expire_seconds)

    def delete(self, key: str) -> bool:
        """True if the key existed."""
        return self._client.delete(self._key(key)) > 0

    def keys(self) -> list[str]:
        """Unprefixed names of every key under this store's prefix."""
        start = len(self._prefix)
        return [name[start:] for name in self._client.scan_iter(match=f"{self._prefix}*")]

    def close(self) -> None:
        self._client.close()
        logger.info("ValkeyClient closed")
