from unittest import mock

import pytest

etcd3 = pytest.importorskip("etcd3")
grpc = pytest.importorskip("grpc")

from distributed_lock import BackendError, backend_from_url  # noqa: E402
from distributed_lock.etcd import EtcdBackend, safe_revoke  # noqa: E402


@pytest.fixture
def client():
    client = mock.MagicMock()
    client.lease.return_value = mock.Mock(id=7)
    return client


def test_conditional_put_attaches_lease(client):
    client.transaction.return_value = (True, [])
    backend = EtcdBackend(client)
    assert backend.set_if_absent("lock:a", "v", 1500)
    # etcd leases are whole seconds
    client.lease.assert_called_once_with(2)
    client.transactions.create.assert_called_once_with("lock:a")
    client.transactions.put.assert_called_once_with("lock:a", "v", 7)
    client.lease.return_value.revoke.assert_not_called()


def test_short_ttl_rounds_up_to_one_second(client):
    client.transaction.return_value = (True, [])
    EtcdBackend(client).set_if_absent("lock:a", "v", 200)
    client.lease.assert_called_once_with(1)


def test_lost_race_revokes_lease(client):
    client.transaction.return_value = (False, [])
    assert not EtcdBackend(client).set_if_absent("lock:a", "v", 1000)
    client.lease.return_value.revoke.assert_called_once_with()


def test_get_and_delete(client):
    backend = EtcdBackend(client)
    client.get.return_value = (b"value", mock.Mock())
    assert backend.get("lock:a") == "value"
    client.get.return_value = (None, None)
    assert backend.get("lock:a") is None
    backend.delete("lock:a")
    client.delete.assert_called_once_with("lock:a")


def test_errors_become_backend_errors(client):
    client.transaction.side_effect = etcd3.exceptions.ConnectionFailedError()
    with pytest.raises(BackendError):
        EtcdBackend(client).set_if_absent("lock:a", "v", 1000)
    client.lease.return_value.revoke.assert_called_once_with()


def test_safe_revoke_ignores_expired_lease():
    lease = mock.Mock(id=3)
    lease.revoke.side_effect = grpc.RpcError("etcdserver: requested lease not found")
    safe_revoke(lease)


def test_safe_revoke_reports_other_errors():
    lease = mock.Mock(id=3)
    lease.revoke.side_effect = etcd3.exceptions.InternalServerError()
    with pytest.raises(BackendError):
        safe_revoke(lease)


def test_backend_from_url_builds_etcd_client():
    with mock.patch("etcd3.client") as factory:
        backend = backend_from_url("etcd://10.0.0.5:2381")
    factory.assert_called_once_with(host="10.0.0.5", port=2381)
    assert isinstance(backend, EtcdBackend)
