"""Redis-backed distributed locks with TTL leases."""

from .backends import Backend, InMemoryBackend, RedisBackend, backend_from_url
from .errors import BackendError, ConfigurationError, LockAcquisitionError, LockError
from .log import configure_logging
from .manager import LockManager
from .record import LockRecord
from .registry import OwnerRegistry
from .settings import LockSettings, TimeUnit

__all__ = [
    "Backend",
    "BackendError",
    "ConfigurationError",
    "InMemoryBackend",
    "LockAcquisitionError",
    "LockError",
    "LockManager",
    "LockRecord",
    "LockSettings",
    "OwnerRegistry",
    "RedisBackend",
    "TimeUnit",
    "backend_from_url",
    "configure_logging",
]
