from __future__ import annotations

import threading
from collections import deque
from collections.abc import Iterable
from typing import TYPE_CHECKING

from .exceptions import UnknownSender
from .types import Message
from .types import new_id
from .validators import MESSAGE_MAX_LENGTH
from .validators import validate_message_body

if TYPE_CHECKING:
    from .registry import ConnectionRegistry

HISTORY_LIMIT = 100


class MessageLog:
    """Bounded, arrival-ordered message history used for replay on join.

    Once ``capacity`` is reached every append evicts the oldest entry.
    """

    def __init__(
        self,
        registry: ConnectionRegistry,
        *,
        capacity: int = HISTORY_LIMIT,
        max_length: int = MESSAGE_MAX_LENGTH,
        seed: Iterable[Message] = (),
    ):
        if capacity < 1:
            msg = "capacity must be at least 1"
            raise ValueError(msg)
        self._registry = registry
        self.max_length = max_length
        self._lock = threading.Lock()
        self._messages: deque[Message] = deque(seed, maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._messages.maxlen or 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._messages)

    def append(self, connection_id: str, raw_body: object) -> Message:
        body = validate_message_body(raw_body, self.max_length)
        # Snapshot of the sender as of now; later renames do not touch it.
        author = self._registry.get(connection_id)
        if author is None:
            raise UnknownSender
        message = Message(id=new_id(), body=body, author=author)
        with self._lock:
            self._messages.append(message)
        return message

    def snapshot(self) -> list[Message]:
        with self._lock:
            return list(self._messages)
