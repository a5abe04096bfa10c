# distributed_lock/backends.py
"""
Key-value backends a LockManager can run against.

A backend needs three atomic commands: create-if-absent with a TTL, read and
delete. Library errors are re-raised as BackendError so the manager can tell a
failed command from a lost race.
"""

import logging
import threading
import time
from typing import Dict, Optional, Protocol, Tuple
from urllib.parse import urlsplit

import redis

from .errors import BackendError, ConfigurationError

logger = logging.getLogger(__name__)


class Backend(Protocol):
    def set_if_absent(self, key: str, value: str, ttl_ms: int) -> bool:
        """Create `key` with a TTL only if it does not exist (SET NX PX)."""

    def get(self, key: str) -> Optional[str]:
        """Current value of `key`, or None if absent or expired."""

    def delete(self, key: str) -> None:
        """Remove `key` unconditionally."""


class RedisBackend:
    """
    Backend over a single Redis (or Redis-compatible) endpoint.

    Usage:
        backend = RedisBackend.from_url("redis://127.0.0.1:6379/0")
    """

    def __init__(self, client: redis.Redis):
        self.client = client

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisBackend":
        return cls(redis.Redis.from_url(url, **kwargs))

    def set_if_absent(self, key: str, value: str, ttl_ms: int) -> bool:
        try:
            # redis-py returns True on success and None when NX blocked the write
            return bool(self.client.set(key, value, px=ttl_ms, nx=True))
        except redis.RedisError as e:
            raise BackendError(f"SET {key} failed: {e}") from e

    def get(self, key: str) -> Optional[str]:
        try:
            value = self.client.get(key)
        except redis.RedisError as e:
            raise BackendError(f"GET {key} failed: {e}") from e
        if isinstance(value, bytes):
            value = value.decode()
        return value

    def delete(self, key: str) -> None:
        try:
            self.client.delete(key)
        except redis.RedisError as e:
            raise BackendError(f"DEL {key} failed: {e}") from e


class InMemoryBackend:
    """
    Process-local backend with the same TTL semantics, for tests and for
    coordinating threads of a single process.
    """

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        # key -> (value, expires_at)
        self._entries: Dict[str, Tuple[str, float]] = {}
        self._mutex = threading.Lock()

    def _live(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set_if_absent(self, key: str, value: str, ttl_ms: int) -> bool:
        with self._mutex:
            if self._live(key) is not None:
                return False
            self._entries[key] = (value, self._clock() + ttl_ms / 1000.0)
            return True

    def get(self, key: str) -> Optional[str]:
        with self._mutex:
            return self._live(key)

    def delete(self, key: str) -> None:
        with self._mutex:
            self._entries.pop(key, None)

    def ttl_ms(self, key: str) -> Optional[int]:
        """Remaining lease of `key` in ms, None if it is absent."""
        with self._mutex:
            if self._live(key) is None:
                return None
            return max(0, int((self._entries[key][1] - self._clock()) * 1000))


def backend_from_url(url: str) -> Backend:
    """
    Build a backend from a URL.

    - redis://, rediss://, unix:// -> RedisBackend
    - etcd://host:port -> EtcdBackend
    - memory:// -> InMemoryBackend
    """
    scheme = urlsplit(url).scheme
    logger.debug("Creating backend for scheme %r", scheme)
    if scheme in ("redis", "rediss", "unix"):
        return RedisBackend.from_url(url)
    if scheme == "etcd":
        # etcd3 is only imported when an etcd endpoint is requested
        from .etcd import EtcdBackend
        return EtcdBackend.from_url(url)
    if scheme == "memory":
        return InMemoryBackend()
    raise ConfigurationError(f"Unsupported backend URL: {url!r}")
