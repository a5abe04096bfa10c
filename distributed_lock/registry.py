# distributed_lock/registry.py

import threading
import uuid
from typing import Dict, Optional


class OwnerRegistry:
    """
    Per-thread table of the ownership token each thread believes it holds,
    keyed by lock name.

    Every thread sees its own table, so no locking is needed. An entry can
    outlive its lease; the manager always checks the backend record before
    trusting it.
    """

    def __init__(self):
        self._local = threading.local()

    def _table(self) -> Dict[str, uuid.UUID]:
        table = getattr(self._local, "tokens", None)
        if table is None:
            table = self._local.tokens = {}
        return table

    def set(self, name: str, token: uuid.UUID) -> None:
        self._table()[name] = token

    def get(self, name: str) -> Optional[uuid.UUID]:
        return self._table().get(name)

    def remove(self, name: str) -> None:
        self._table().pop(name, None)
