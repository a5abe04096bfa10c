# distributed_lock/settings.py

import enum
from dataclasses import dataclass

from .errors import ConfigurationError

DEFAULT_MAX_LEASE_TIME = 60_000
DEFAULT_KEY_PREFIX = "lock:"
DEFAULT_RETRY_SLEEP = 10


class TimeUnit(enum.Enum):
    """Units accepted by LockManager.try_lock, valued in nanoseconds."""

    NANOSECONDS = 1
    MICROSECONDS = 1_000
    MILLISECONDS = 1_000_000
    SECONDS = 1_000_000_000
    MINUTES = 60 * SECONDS
    HOURS = 60 * MINUTES
    DAYS = 24 * HOURS

    def to_millis(self, duration: float) -> int:
        # rounds down, so 999 microseconds is 0 ms
        return int(duration * self.value // 1_000_000)


@dataclass(frozen=True)
class LockSettings:
    """
    Tunables for a LockManager.

    Parameters:
        max_lease_time (int): lease applied to every acquired lock, in ms
        key_prefix (str): prepended to a lock name to form the backend key
        retry_sleep (int): pause between acquisition attempts, in ms
    """
    max_lease_time: int = DEFAULT_MAX_LEASE_TIME
    key_prefix: str = DEFAULT_KEY_PREFIX
    retry_sleep: int = DEFAULT_RETRY_SLEEP

    def __post_init__(self):
        if self.max_lease_time <= 0:
            raise ConfigurationError(
                f"max_lease_time must be positive, got {self.max_lease_time}")
        if self.retry_sleep <= 0:
            raise ConfigurationError(
                f"retry_sleep must be positive, got {self.retry_sleep}")
        if not self.key_prefix:
            raise ConfigurationError("key_prefix must not be empty")

    def key_for(self, name: str) -> str:
        return f"{self.key_prefix}{name}"
