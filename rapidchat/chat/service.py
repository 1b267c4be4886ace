"""Handles inbound persistent-channel events against a ChatState.

Each coroutine applies one client event and emits the resulting outbound
events: unicast replies to the sender, broadcasts to everyone registered.
Validation problems and vanished connections are answered on the channel and
never raised to the transport.
"""

from __future__ import annotations

import logging

from rapidchat.realtime.events.chat import build_history_payload
from rapidchat.realtime.events.chat import build_identity_payload
from rapidchat.realtime.events.chat import build_message_payload
from rapidchat.users.exceptions import InvalidToken

from .events import Outbound
from .exceptions import AuthFailure
from .exceptions import ChatError
from .exceptions import UnknownSender
from .state import ChatState
from .types import Identity
from .types import Message

logger = logging.getLogger(__name__)


class ChatService:
    def __init__(self, state: ChatState):
        self.state = state

    @property
    def registry(self):
        return self.state.registry

    @property
    def log(self):
        return self.state.log

    async def _reply(self, connection_id: str, event: str, payload) -> None:
        await self.state.dispatcher.send_to(connection_id, event, payload)

    async def _reply_error(self, connection_id: str, exc: ChatError) -> None:
        await self._reply(connection_id, Outbound.VALIDATION_ERROR, exc.message)

    async def connect(self, connection_id: str, token: str | None = None) -> Identity:
        """Register the connection anonymously and replay the history to it.

        A token handed over with the handshake is checked right away. If it is
        rejected and failed authentications close the connection, the row is
        dropped and AuthFailure is raised so the transport can refuse the
        handshake instead of closing a connection it has not finished opening.
        """
        identity = self.registry.on_connect(connection_id)
        logger.info("user connected: %s", connection_id)
        await self._reply(
            connection_id,
            Outbound.HISTORY_SNAPSHOT,
            build_history_payload(self.log.snapshot()),
        )
        if not token:
            return identity
        try:
            authenticated = await self._authenticate(connection_id, token)
        except AuthFailure:
            if self.state.disconnect_on_auth_failure:
                self.registry.on_disconnect(connection_id)
                raise
            return identity
        return authenticated or identity

    async def authenticate(self, connection_id: str, token: object) -> Identity | None:
        """Handle ``client-auth`` on an open connection."""
        try:
            return await self._authenticate(connection_id, token)
        except AuthFailure:
            if self.state.disconnect_on_auth_failure:
                self.registry.on_disconnect(connection_id)
                await self.state.transport.disconnect(connection_id)
            return None

    async def _authenticate(self, connection_id: str, token: object) -> Identity | None:
        """Resolve ``token`` onto the connection and tell the client how it went.

        Raises AuthFailure once ``auth-error`` has been sent. Returns None if
        the connection closed while the token was being resolved.
        """
        try:
            identity = await self.registry.on_authenticate(connection_id, token)
        except (InvalidToken, AuthFailure) as exc:
            logger.warning("Authentication failed for connection %s", connection_id)
            await self._reply(
                connection_id,
                Outbound.AUTH_FAILED,
                AuthFailure.default_message,
            )
            raise AuthFailure from exc
        except UnknownSender:
            logger.info("Connection %s closed during authentication", connection_id)
            return None

        logger.info("User authenticated: %s", identity.display_name)
        await self._reply(
            connection_id,
            Outbound.AUTH_SUCCEEDED,
            "Authentication successful",
        )
        return identity

    async def send_message(self, connection_id: str, text: object) -> Message | None:
        try:
            message = self.log.append(connection_id, text)
        except UnknownSender as exc:
            logger.warning("Message from unregistered connection %s", connection_id)
            await self._reply_error(connection_id, exc)
            return None
        except ChatError as exc:
            await self._reply_error(connection_id, exc)
            return None

        await self.state.dispatcher.broadcast_all(
            Outbound.MESSAGE_ADDED,
            build_message_payload(message),
        )
        logger.info("Message from %s: %s", message.author.display_name, message.body)
        return message

    async def set_display_name(self, connection_id: str, name: object) -> Identity | None:
        try:
            identity = self.registry.on_rename(connection_id, name)
        except UnknownSender as exc:
            logger.warning("Rename from unregistered connection %s", connection_id)
            await self._reply_error(connection_id, exc)
            return None
        except ChatError as exc:
            await self._reply_error(connection_id, exc)
            return None

        if identity.is_registered and self.state.name_sync is not None:
            try:
                await self.state.name_sync(identity.contact, identity.display_name)
            except Exception:
                # The rename already applied in chat; the stored name catches up
                # on the next successful rename.
                logger.exception("Failed to sync display name for %s", identity.contact)

        await self.state.dispatcher.broadcast_all(
            Outbound.DISPLAY_NAME_CHANGED,
            identity.display_name,
        )
        logger.info("New name for %s: %s", identity.id, identity.display_name)
        return identity

    async def typing_started(self, connection_id: str) -> None:
        await self._typing(connection_id, Outbound.TYPING_STARTED)

    async def typing_stopped(self, connection_id: str) -> None:
        await self._typing(connection_id, Outbound.TYPING_STOPPED)

    async def _typing(self, connection_id: str, event: str) -> None:
        identity = self.registry.get(connection_id)
        if identity is None:
            return
        await self.state.dispatcher.broadcast_all(event, build_identity_payload(identity))

    async def disconnect(self, connection_id: str) -> None:
        identity = self.registry.on_disconnect(connection_id)
        if identity is not None:
            logger.info("User disconnected: %s", identity.display_name)
