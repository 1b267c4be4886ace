"""Global Socket.IO server for the chat frontend.

Connections start anonymous and receive the recent history immediately. A
client upgrades to its registered identity by emitting ``client-auth`` with
the token returned by the login endpoint, or by passing that token up front
as ``auth: { token }`` / ``query.token`` when connecting.

Handlers are registered once here, at import time. Each one delegates to the
process-wide ChatService.
"""

from __future__ import annotations

import functools
import logging
from typing import Any
from urllib.parse import parse_qs

import socketio
from django.conf import settings

from rapidchat.chat.events import Inbound
from rapidchat.chat.exceptions import AuthFailure
from rapidchat.chat.service import ChatService
from rapidchat.chat.state import ChatState

logger = logging.getLogger(__name__)


def _cors_allowed_origins() -> str | list[str]:
    origins = list(settings.CHAT_CORS_ALLOWED_ORIGINS)
    # engineio only treats the bare string as a wildcard
    if not origins or "*" in origins:
        return "*"
    return origins


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=_cors_allowed_origins(),
    logger=False,
    engineio_logger=False,
)


@functools.cache
def get_chat_service() -> ChatService:
    return ChatService(ChatState.from_settings(transport=sio))


def _extract_token(environ: dict[str, Any], auth: Any | None) -> str | None:
    """Extract an optional session token from Socket.IO environ/auth.

    Handles python-socketio environ shapes across ASGI/WSGI servers.
    """

    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    scope: Any = environ
    if isinstance(environ, dict) and "asgi.scope" in environ:
        inner = environ.get("asgi.scope")
        if isinstance(inner, dict):
            scope = inner

    query_string: str | bytes = ""
    if isinstance(scope, dict) and "query_string" in scope:
        query_string = scope.get("query_string", b"")
    elif isinstance(scope, dict) and "QUERY_STRING" in scope:
        query_string = scope.get("QUERY_STRING", "")

    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")

    token = parse_qs(str(query_string)).get("token", [None])[0]
    if isinstance(token, str) and token:
        return token
    return None


def guarded(handler):
    """Log and swallow unexpected errors so one connection cannot take others down."""

    @functools.wraps(handler)
    async def wrapper(sid: str, *args: Any):
        try:
            return await handler(sid, *args)
        except Exception:
            logger.exception("Socket.IO handler %s failed (sid=%s)", handler.__name__, sid)
            return None

    return wrapper


def _first(args: tuple[Any, ...]) -> Any:
    return args[0] if args else None


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    token = _extract_token(environ, auth)
    try:
        await get_chat_service().connect(sid, token=token)
    except AuthFailure as exc:
        # The client gets CONNECT_ERROR and never sees the connection as open.
        raise socketio.exceptions.ConnectionRefusedError(exc.message) from exc
    except Exception as exc:
        logger.exception("Socket.IO connect error")
        msg = "server_error"
        raise socketio.exceptions.ConnectionRefusedError(msg) from exc


@sio.event
@guarded
async def disconnect(sid: str, *args: Any):
    # Newer python-socketio passes a reason argument; it is not needed here.
    await get_chat_service().disconnect(sid)


@sio.on(Inbound.AUTHENTICATE)
@guarded
async def authenticate(sid: str, *args: Any):
    await get_chat_service().authenticate(sid, _first(args))


@sio.on(Inbound.SEND_MESSAGE)
@guarded
async def send_message(sid: str, *args: Any):
    await get_chat_service().send_message(sid, _first(args))


@sio.on(Inbound.SET_DISPLAY_NAME)
@guarded
async def set_display_name(sid: str, *args: Any):
    await get_chat_service().set_display_name(sid, _first(args))


@sio.on(Inbound.TYPING_STARTED)
@guarded
async def typing_started(sid: str, *args: Any):
    await get_chat_service().typing_started(sid)


@sio.on(Inbound.TYPING_STOPPED)
@guarded
async def typing_stopped(sid: str, *args: Any):
    await get_chat_service().typing_stopped(sid)
