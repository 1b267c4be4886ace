from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING
from typing import Any
from typing import Protocol

if TYPE_CHECKING:
    from .registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """The slice of ``socketio.AsyncServer`` the chat core relies on."""

    async def emit(self, event: str, data: Any = None, to: str | None = None, **kwargs: Any) -> None: ...

    async def disconnect(self, sid: str, **kwargs: Any) -> None: ...


class BroadcastDispatcher:
    """Fan events out to every connection currently in the registry.

    Best effort only: a delivery that fails is logged and skipped, and a
    connection that closes mid-dispatch simply misses the event.
    """

    def __init__(self, registry: ConnectionRegistry, transport: Transport):
        self._registry = registry
        self._transport = transport

    async def send_to(self, connection_id: str, event: str, payload: Any) -> bool:
        try:
            await self._transport.emit(event, payload, to=connection_id)
        except Exception:
            logger.exception("Failed to deliver %s to %s", event, connection_id)
            return False
        return True

    async def broadcast_all(self, event: str, payload: Any) -> int:
        """Deliver ``payload`` to all registered connections; return the hit count."""
        targets = self._registry.connection_ids()
        if not targets:
            return 0
        results = await asyncio.gather(
            *(
                self.send_to(connection_id, event, payload)
                for connection_id in targets
                if connection_id in self._registry
            ),
        )
        return sum(results)
