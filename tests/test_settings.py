import pytest

from distributed_lock import ConfigurationError, InMemoryBackend, LockManager, LockSettings, TimeUnit


def test_defaults():
    settings = LockSettings()
    assert settings.max_lease_time == 60_000
    assert settings.key_prefix == "lock:"
    assert settings.retry_sleep == 10
    assert settings.key_for("orders") == "lock:orders"


@pytest.mark.parametrize("kwargs", [
    {"max_lease_time": 0},
    {"max_lease_time": -5},
    {"retry_sleep": 0},
    {"key_prefix": ""},
])
def test_invalid_settings_rejected(kwargs):
    with pytest.raises(ConfigurationError):
        LockSettings(**kwargs)


def test_configuration_error_is_a_value_error():
    with pytest.raises(ValueError):
        LockSettings(retry_sleep=-1)


def test_manager_uses_default_settings():
    assert LockManager(InMemoryBackend()).settings == LockSettings()


@pytest.mark.parametrize("unit, duration, expected", [
    (TimeUnit.NANOSECONDS, 5_000_000, 5),
    (TimeUnit.MICROSECONDS, 2500, 2),
    (TimeUnit.MILLISECONDS, 150, 150),
    (TimeUnit.SECONDS, 2, 2000),
    (TimeUnit.SECONDS, 0.25, 250),
    (TimeUnit.MINUTES, 1, 60_000),
    (TimeUnit.HOURS, 1, 3_600_000),
    (TimeUnit.DAYS, 1, 86_400_000),
])
def test_time_unit_to_millis(unit, duration, expected):
    assert unit.to_millis(duration) == expected
