# distributed_lock/manager.py

import contextlib
import logging
import threading
import time
import uuid
from typing import Optional

from .backends import Backend
from .errors import BackendError, LockAcquisitionError
from .record import LockRecord
from .registry import OwnerRegistry
from .settings import LockSettings, TimeUnit

logger = logging.getLogger(__name__)


class LockManager:
    """
    Named locks shared by every process that talks to the same backend.

    A lock is a record under `<key_prefix><name>` created with SET NX PX, so
    the backend lets only one holder in and evicts the record when the lease
    runs out. Each acquisition writes a fresh UUID token into the record and
    into a thread-local registry; a thread owns the lock while the two match.

    Parameters:
        backend (Backend): key-value store with conditional put and TTL
        settings (LockSettings): lease, key prefix and retry pause
        registry (OwnerRegistry): per-thread token table, one per manager by default

    Usage:
        manager = LockManager(RedisBackend.from_url("redis://localhost:6379"))
        if manager.try_lock("report", 500):
            try:
                # critical section
                pass
            finally:
                manager.unlock("report")
    """

    def __init__(self, backend: Backend, settings: Optional[LockSettings] = None,
                 registry: Optional[OwnerRegistry] = None):
        self.backend = backend
        self.settings = settings if settings is not None else LockSettings()
        self.registry = registry if registry is not None else OwnerRegistry()

    def lock(self, name: str, interrupt: Optional[threading.Event] = None) -> None:
        """
        Block until `name` is acquired. Contention and backend errors are
        retried without bound; only a set `interrupt` ends the wait, with
        LockAcquisitionError.
        """
        if not self._lock_inner(name, self.settings.max_lease_time, 0, interrupt):
            raise LockAcquisitionError(f"error occurred while locking '{name}'")

    def try_lock(self, name: str, duration: float, unit: TimeUnit = TimeUnit.MILLISECONDS,
                 interrupt: Optional[threading.Event] = None) -> bool:
        """
        Try to acquire `name` for at most `duration` (wall clock).
        Returns False on timeout or interruption; never raises for contention.
        """
        if duration <= 0:
            raise ValueError(f"try_lock needs a positive wait, got {duration} {unit.name}")
        # a wait shorter than a millisecond still gets one attempt window
        timeout_ms = max(1, unit.to_millis(duration))
        return self._lock_inner(name, self.settings.max_lease_time, timeout_ms, interrupt)

    def unlock(self, name: str) -> None:
        """Release `name` if the calling thread holds it; otherwise do nothing."""
        if self.is_held_by_current_thread(name):
            self.backend.delete(self.settings.key_for(name))
            self.registry.remove(name)
            logger.debug("Unlocked '%s'", name)
        else:
            logger.debug("Unlock of '%s' ignored: not held by this thread", name)

    def force_unlock(self, name: str) -> None:
        """Delete the lock record whoever holds it. For administrative recovery."""
        self.backend.delete(self.settings.key_for(name))
        logger.debug("Force unlocked '%s'", name)

    def is_held_by_current_thread(self, name: str) -> bool:
        record = self.current_record(name)
        return record is not None and record.id == self.registry.get(name)

    def current_record(self, name: str) -> Optional[LockRecord]:
        """Record currently stored for `name`, or None when nobody holds it."""
        value = self.backend.get(self.settings.key_for(name))
        return None if value is None else LockRecord.decode(value)

    @contextlib.contextmanager
    def hold(self, name: str, timeout: Optional[float] = None,
             unit: TimeUnit = TimeUnit.MILLISECONDS):
        """
        Context manager around lock/unlock.

        Without `timeout` it blocks like `lock`; with one it raises
        LockAcquisitionError when `try_lock` gives up.

        Usage:
            with manager.hold("job42", timeout=5, unit=TimeUnit.SECONDS):
                # critical section
                pass
        """
        if timeout is None:
            self.lock(name)
        elif not self.try_lock(name, timeout, unit):
            raise LockAcquisitionError(f"Timed out after {timeout} {unit.name.lower()} waiting for '{name}'")
        try:
            yield self
        finally:
            self.unlock(name)

    def _lock_inner(self, name: str, lease_ms: int, timeout_ms: int,
                    interrupt: Optional[threading.Event]) -> bool:
        key = self.settings.key_for(name)
        is_bounded = timeout_ms > 0
        # 1) Fresh token, recorded before any put can succeed
        token = uuid.uuid4()
        self.registry.set(name, token)
        value = LockRecord(token).encode()
        logger.info("Attempting to acquire lock '%s' (lease=%sms, timeout=%sms)",
                    key, lease_ms, timeout_ms if is_bounded else None)

        start = time.monotonic()
        while True:
            # 2) Atomic create-if-absent; a failing backend counts as a lost attempt
            try:
                if self.backend.set_if_absent(key, value, lease_ms):
                    logger.debug("Locked '%s', value=%s", key, value)
                    return True
            except BackendError:
                logger.exception("Error occurred while locking '%s'", key)

            # 3) Give up once the wall-clock budget is spent
            elapsed_ms = (time.monotonic() - start) * 1000
            if is_bounded and elapsed_ms > timeout_ms:
                logger.info("Failed to lock '%s': timed out after %.0fms", key, elapsed_ms)
                return False

            # 4) Pause before the next attempt; a set interrupt ends the wait
            pause = self.settings.retry_sleep / 1000.0
            if interrupt is None:
                time.sleep(pause)
            elif interrupt.wait(pause):
                logger.info("Interrupted while waiting for '%s'", key)
                return False
