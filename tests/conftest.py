import fakeredis
import pytest

from distributed_lock import InMemoryBackend, LockManager, RedisBackend


@pytest.fixture(params=["memory", "redis"])
def backend(request):
    if request.param == "memory":
        return InMemoryBackend()
    # a private server per test so keys never leak between tests
    return RedisBackend(fakeredis.FakeRedis(server=fakeredis.FakeServer()))


@pytest.fixture
def manager(backend):
    return LockManager(backend)
