from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from dataclasses import replace


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Identity:
    """Who a connection (or a message author) is.

    Frozen so that a snapshot stored on a Message is never affected by a later
    rename; renames produce a new value via :meth:`renamed`.
    """

    id: str
    display_name: str
    contact: str | None = None

    @property
    def is_registered(self) -> bool:
        return self.contact is not None

    def renamed(self, display_name: str) -> Identity:
        return replace(self, display_name=display_name)


@dataclass(frozen=True)
class Message:
    id: str
    body: str
    author: Identity


class ConnectionState(enum.Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"
