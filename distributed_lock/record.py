# distributed_lock/record.py

import json
import threading
import uuid
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class LockRecord:
    """
    Value stored under a lock key.

    `id` is the ownership token; `thread_id` identifies the acquiring thread
    and is only there for whoever inspects the backend by hand.
    """
    id: uuid.UUID
    thread_id: Optional[int] = field(default_factory=threading.get_ident)

    def encode(self) -> str:
        return json.dumps({"id": str(self.id), "threadId": self.thread_id},
                          separators=(",", ":"))

    @classmethod
    def decode(cls, value) -> "LockRecord":
        """
        Parse a stored value. Raises ValueError when it is not a record
        written by `encode`.
        """
        if isinstance(value, bytes):
            value = value.decode()
        data = json.loads(value)
        if not isinstance(data, dict) or "id" not in data:
            raise ValueError(f"not a lock record: {value!r}")
        return cls(id=uuid.UUID(data["id"]), thread_id=data.get("threadId"))
