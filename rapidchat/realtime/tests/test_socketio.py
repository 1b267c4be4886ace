import pytest
import socketio
from asgiref.sync import async_to_sync
from socketio import packet

from rapidchat.chat.events import Outbound
from rapidchat.chat.service import ChatService
from rapidchat.chat.state import ChatState
from rapidchat.chat.types import ConnectionState
from rapidchat.realtime import socketio as rt


class Exploding:
    async def send_message(self, *args):
        msg = "boom"
        raise RuntimeError(msg)

    async def connect(self, *args, **kwargs):
        msg = "boom"
        raise RuntimeError(msg)


@pytest.fixture
def wired(monkeypatch, service):
    monkeypatch.setattr(rt, "get_chat_service", lambda: service)
    return service


def test_extract_token_prefers_auth_payload():
    environ = {"QUERY_STRING": "token=from-query"}
    assert rt._extract_token(environ, {"token": "from-auth"}) == "from-auth"  # noqa: SLF001


def test_extract_token_from_wsgi_query_string():
    assert rt._extract_token({"QUERY_STRING": "EIO=4&token=abc"}, None) == "abc"  # noqa: SLF001


def test_extract_token_from_asgi_scope():
    environ = {"asgi.scope": {"query_string": b"token=xyz&transport=websocket"}}
    assert rt._extract_token(environ, {}) == "xyz"  # noqa: SLF001


def test_extract_token_missing():
    assert rt._extract_token({"QUERY_STRING": "EIO=4"}, {"token": ""}) is None  # noqa: SLF001


def test_connect_with_query_token(wired, transport):
    async_to_sync(rt.connect)("sid1", {"QUERY_STRING": "token=ann-token"}, None)

    assert wired.registry.state("sid1") is ConnectionState.AUTHENTICATED
    assert transport.events_for("sid1") == [
        Outbound.HISTORY_SNAPSHOT,
        Outbound.AUTH_SUCCEEDED,
    ]


def test_handlers_delegate_to_the_service(wired, transport):
    async_to_sync(rt.connect)("sid1", {}, None)
    async_to_sync(rt.authenticate)("sid1", "ann-token")
    async_to_sync(rt.send_message)("sid1", "hello")
    async_to_sync(rt.set_display_name)("sid1", "Annie")
    async_to_sync(rt.typing_started)("sid1")
    async_to_sync(rt.typing_stopped)("sid1")

    assert transport.events_for("sid1") == [
        Outbound.HISTORY_SNAPSHOT,
        Outbound.AUTH_SUCCEEDED,
        Outbound.MESSAGE_ADDED,
        Outbound.DISPLAY_NAME_CHANGED,
        Outbound.TYPING_STARTED,
        Outbound.TYPING_STOPPED,
    ]

    async_to_sync(rt.disconnect)("sid1", "client disconnect")
    assert "sid1" not in wired.registry


def test_missing_payload_is_a_validation_error(wired, transport):
    async_to_sync(rt.connect)("sid1", {}, None)
    transport.clear()

    async_to_sync(rt.send_message)("sid1")

    assert transport.received("sid1", Outbound.VALIDATION_ERROR) == [
        "Invalid message. Message cannot be empty.",
    ]


def test_handler_errors_are_swallowed(monkeypatch):
    monkeypatch.setattr(rt, "get_chat_service", Exploding)

    assert async_to_sync(rt.send_message)("sid1", "hello") is None


def test_connect_errors_refuse_the_connection(monkeypatch):
    monkeypatch.setattr(rt, "get_chat_service", Exploding)

    with pytest.raises(socketio.exceptions.ConnectionRefusedError):
        async_to_sync(rt.connect)("sid1", {}, None)


class Wire:
    """Captures every Socket.IO packet the server sends, decoded."""

    def __init__(self, server):
        self.server = server
        self.packets = []

    async def send_packet(self, eio_sid, pkt):
        self.packets.append(pkt)

    async def send_eio_packet(self, eio_sid, eio_pkt):
        self.packets.append(self.server.packet_class(encoded_packet=eio_pkt.data))

    def of_type(self, packet_type):
        return [p for p in self.packets if p.packet_type == packet_type]

    def events(self):
        return [p.data[0] for p in self.of_type(packet.EVENT)]


@pytest.fixture
def wire(monkeypatch):
    wire = Wire(rt.sio)
    monkeypatch.setattr(rt.sio, "_send_packet", wire.send_packet)
    monkeypatch.setattr(rt.sio, "_send_eio_packet", wire.send_eio_packet)
    return wire


@pytest.fixture
def on_server(monkeypatch, resolver, wire):
    service = ChatService(ChatState.build(transport=rt.sio, resolver=resolver))
    monkeypatch.setattr(rt, "get_chat_service", lambda: service)
    opened = []

    def handshake(eio_sid, auth=None):
        async def run():
            await rt.sio._handle_eio_connect(eio_sid, {"QUERY_STRING": ""})  # noqa: SLF001
            connect = rt.sio.packet_class(packet.CONNECT, data=auth)
            await rt.sio._handle_eio_message(eio_sid, connect.encode())  # noqa: SLF001

        opened.append(eio_sid)
        async_to_sync(run)()

    yield service, handshake

    async def close_all():
        for eio_sid in opened:
            sid = rt.sio.manager.sid_from_eio_sid(eio_sid, "/")
            if sid is not None:
                await rt.sio.manager.disconnect(sid, "/", ignore_queue=True)
            rt.sio.environ.pop(eio_sid, None)

    async_to_sync(close_all)()


def test_handshake_with_bad_token_is_refused(on_server, wire):
    service, handshake = on_server

    handshake("eio-bad", {"token": "forged"})

    assert wire.of_type(packet.CONNECT) == []
    [refusal] = wire.of_type(packet.CONNECT_ERROR)
    assert refusal.data == {"message": "Authentication failed"}
    assert Outbound.AUTH_FAILED in wire.events()
    assert rt.sio.manager.sid_from_eio_sid("eio-bad", "/") is None
    assert len(service.registry) == 0


def test_handshake_with_good_token_is_accepted(on_server, wire):
    service, handshake = on_server

    handshake("eio-good", {"token": "ann-token"})

    assert wire.of_type(packet.CONNECT_ERROR) == []
    assert len(wire.of_type(packet.CONNECT)) == 1
    [sid] = service.registry.connection_ids()
    assert rt.sio.manager.sid_from_eio_sid("eio-good", "/") == sid
    assert service.registry.state(sid) is ConnectionState.AUTHENTICATED
    assert wire.events() == [Outbound.HISTORY_SNAPSHOT, Outbound.AUTH_SUCCEEDED]


def test_connect_handler_refuses_bad_query_token(wired, transport):
    with pytest.raises(socketio.exceptions.ConnectionRefusedError) as exc:
        async_to_sync(rt.connect)("sid1", {"QUERY_STRING": "token=forged"}, None)

    assert exc.value.error_args == {"message": "Authentication failed"}
    assert transport.disconnected == []
    assert "sid1" not in wired.registry
