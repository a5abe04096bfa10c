# distributed_lock/etcd.py
"""
etcd backend: the record is put inside a transaction that only succeeds
while the key has never been created, attached to a lease that carries the TTL.
"""

import logging
import math
from typing import Optional
from urllib.parse import urlsplit

import etcd3
import grpc
from etcd3.exceptions import Etcd3Exception

from .errors import BackendError

logger = logging.getLogger(__name__)

DEFAULT_PORT = 2379
# etcd3 maps some gRPC status codes to its own exceptions and re-raises the rest
ETCD_ERRORS = (Etcd3Exception, grpc.RpcError)


def safe_revoke(lease):
    """
    Try to revoke a lease, but ignore if the lease has already expired.
    """
    try:
        lease.revoke()
        logger.debug("Lease %s revoked", getattr(lease, 'id', None))
    except ETCD_ERRORS as e:
        # etcd returns an error if the lease is not found (already expired)
        if "requested lease not found" not in str(e):
            raise BackendError(f"Error revoking lease: {e}") from e
        logger.warning("Lease %s not found (already expired)", getattr(lease, 'id', None))


class EtcdBackend:
    """
    Backend over an etcd v3 cluster.

    etcd leases have one second granularity, so TTLs are rounded up to whole
    seconds.
    """

    def __init__(self, client: etcd3.Etcd3Client):
        self.client = client

    @classmethod
    def from_url(cls, url: str) -> "EtcdBackend":
        parts = urlsplit(url)
        return cls(etcd3.client(host=parts.hostname or "127.0.0.1",
                                port=parts.port or DEFAULT_PORT))

    def set_if_absent(self, key: str, value: str, ttl_ms: int) -> bool:
        ttl = max(1, math.ceil(ttl_ms / 1000))
        try:
            lease = self.client.lease(ttl)
        except ETCD_ERRORS as e:
            raise BackendError(f"Lease grant for {key} failed: {e}") from e
        try:
            got_it, _ = self.client.transaction(
                compare=[self.client.transactions.create(key) == 0],
                success=[self.client.transactions.put(key, value, lease.id)],
                failure=[]
            )
        except ETCD_ERRORS as e:
            safe_revoke(lease)
            raise BackendError(f"Conditional put of {key} failed: {e}") from e
        if not got_it:
            # the lease would otherwise linger until it expires
            safe_revoke(lease)
        return got_it

    def get(self, key: str) -> Optional[str]:
        try:
            val, _ = self.client.get(key)
        except ETCD_ERRORS as e:
            raise BackendError(f"Get of {key} failed: {e}") from e
        return None if val is None else val.decode()

    def delete(self, key: str) -> None:
        try:
            self.client.delete(key)
        except ETCD_ERRORS as e:
            raise BackendError(f"Delete of {key} failed: {e}") from e
