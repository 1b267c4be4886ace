"""Connection registry: which identity each live connection has right now.

Rows are keyed by the transport's connection handle (the Socket.IO sid).
Every mutation happens under a short lock with no awaits inside, so rows
stay consistent while handlers for different connections interleave.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Awaitable
from collections.abc import Callable
from dataclasses import dataclass

from .exceptions import AuthFailure
from .exceptions import UnknownSender
from .types import ConnectionState
from .types import Identity
from .types import new_id
from .validators import DISPLAY_NAME_MAX_LENGTH
from .validators import validate_display_name

logger = logging.getLogger(__name__)

Resolver = Callable[[str], Awaitable[Identity]]


@dataclass
class ConnectionEntry:
    connection_id: str
    identity: Identity
    state: ConnectionState = ConnectionState.ANONYMOUS


class ConnectionRegistry:
    def __init__(
        self,
        resolver: Resolver | None = None,
        *,
        anonymous_name: str = "anonymous",
        display_name_max_length: int = DISPLAY_NAME_MAX_LENGTH,
    ):
        self._resolver = resolver
        self.anonymous_name = anonymous_name
        self.display_name_max_length = display_name_max_length
        self._lock = threading.Lock()
        self._rows: dict[str, ConnectionEntry] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._rows)

    def __contains__(self, connection_id: object) -> bool:
        with self._lock:
            return connection_id in self._rows

    def on_connect(self, connection_id: str) -> Identity:
        """Register a new connection under a fresh anonymous identity."""
        identity = Identity(id=new_id(), display_name=self.anonymous_name)
        with self._lock:
            if connection_id in self._rows:
                logger.warning("Connection %s registered twice, resetting", connection_id)
            self._rows[connection_id] = ConnectionEntry(connection_id, identity)
        return identity

    async def on_authenticate(self, connection_id: str, token: str) -> Identity:
        """Resolve ``token`` and attach the resulting identity to the connection.

        The resolver runs outside the lock; the row is only touched once it
        has returned. A later successful call replaces the identity again.
        Raises whatever the resolver raises for a bad token, and UnknownSender
        if the connection went away while the token was being resolved.
        """
        if self._resolver is None:
            msg = "Authentication is not available"
            raise AuthFailure(msg)
        identity = await self._resolver(token)
        with self._lock:
            entry = self._rows.get(connection_id)
            if entry is None:
                raise UnknownSender
            entry.identity = identity
            entry.state = ConnectionState.AUTHENTICATED
        return identity

    def on_rename(self, connection_id: str, new_name: object) -> Identity:
        name = validate_display_name(new_name, self.display_name_max_length)
        with self._lock:
            entry = self._rows.get(connection_id)
            if entry is None:
                raise UnknownSender
            entry.identity = entry.identity.renamed(name)
            return entry.identity

    def on_disconnect(self, connection_id: str) -> Identity | None:
        """Drop the row. Safe to call more than once."""
        with self._lock:
            entry = self._rows.pop(connection_id, None)
        return entry.identity if entry is not None else None

    def get(self, connection_id: str) -> Identity | None:
        with self._lock:
            entry = self._rows.get(connection_id)
            return entry.identity if entry is not None else None

    def state(self, connection_id: str) -> ConnectionState | None:
        """Current state, or None once the connection is closed."""
        with self._lock:
            entry = self._rows.get(connection_id)
            return entry.state if entry is not None else None

    def connection_ids(self) -> list[str]:
        with self._lock:
            return list(self._rows)
