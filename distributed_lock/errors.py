# distributed_lock/errors.py


class LockError(Exception):
    """Base class for every error raised by this package."""


class LockAcquisitionError(LockError):
    """
    A blocking acquire gave up without owning the lock.

    Raised by LockManager.lock when the wait is interrupted, and by
    LockManager.hold when a bounded wait runs out.
    """


class BackendError(LockError):
    """The key-value backend failed to answer a command."""


class ConfigurationError(LockError, ValueError):
    """Invalid lock settings or backend URL."""
