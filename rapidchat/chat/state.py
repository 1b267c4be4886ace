"""The chat state context handed to every chat component.

One instance per process in production (see ``rapidchat.realtime.socketio``);
tests build their own with fakes.
"""

from __future__ import annotations

from collections.abc import Awaitable
from collections.abc import Callable
from dataclasses import dataclass

from channels.db import database_sync_to_async
from django.conf import settings

from .dispatch import BroadcastDispatcher
from .dispatch import Transport
from .history import HISTORY_LIMIT
from .history import MessageLog
from .registry import ConnectionRegistry
from .registry import Resolver
from .types import Identity
from .types import Message
from .types import new_id
from .validators import DISPLAY_NAME_MAX_LENGTH
from .validators import MESSAGE_MAX_LENGTH

NameSync = Callable[[str, str], Awaitable[bool]]


@dataclass
class ChatState:
    registry: ConnectionRegistry
    log: MessageLog
    dispatcher: BroadcastDispatcher
    transport: Transport
    name_sync: NameSync | None = None
    disconnect_on_auth_failure: bool = True

    @classmethod
    def build(  # noqa: PLR0913
        cls,
        *,
        transport: Transport,
        resolver: Resolver | None = None,
        name_sync: NameSync | None = None,
        history_limit: int = HISTORY_LIMIT,
        message_max_length: int = MESSAGE_MAX_LENGTH,
        display_name_max_length: int = DISPLAY_NAME_MAX_LENGTH,
        anonymous_name: str = "anonymous",
        welcome_message: str = "",
        system_name: str = "RapidChat",
        disconnect_on_auth_failure: bool = True,
    ) -> ChatState:
        registry = ConnectionRegistry(
            resolver,
            anonymous_name=anonymous_name,
            display_name_max_length=display_name_max_length,
        )
        seed = []
        if welcome_message:
            system = Identity(id=new_id(), display_name=system_name)
            seed.append(Message(id=new_id(), body=welcome_message, author=system))
        log = MessageLog(
            registry,
            capacity=history_limit,
            max_length=message_max_length,
            seed=seed,
        )
        return cls(
            registry=registry,
            log=log,
            dispatcher=BroadcastDispatcher(registry, transport),
            transport=transport,
            name_sync=name_sync,
            disconnect_on_auth_failure=disconnect_on_auth_failure,
        )

    @classmethod
    def from_settings(cls, transport: Transport) -> ChatState:
        """Build the process-wide state wired to the database-backed auth."""
        from rapidchat.users import credentials  # noqa: PLC0415
        from rapidchat.users import sessions  # noqa: PLC0415

        return cls.build(
            transport=transport,
            resolver=database_sync_to_async(sessions.resolve),
            name_sync=database_sync_to_async(credentials.update_display_name),
            history_limit=settings.CHAT_HISTORY_LIMIT,
            message_max_length=settings.CHAT_MESSAGE_MAX_LENGTH,
            display_name_max_length=settings.CHAT_DISPLAY_NAME_MAX_LENGTH,
            anonymous_name=settings.CHAT_ANONYMOUS_NAME,
            welcome_message=settings.CHAT_WELCOME_MESSAGE,
            system_name=settings.CHAT_SYSTEM_NAME,
            disconnect_on_auth_failure=settings.CHAT_DISCONNECT_ON_AUTH_FAILURE,
        )
