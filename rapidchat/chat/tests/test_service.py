import pytest
from asgiref.sync import async_to_sync

from rapidchat.chat.events import Outbound
from rapidchat.chat.exceptions import AuthFailure
from rapidchat.chat.service import ChatService
from rapidchat.chat.state import ChatState
from rapidchat.chat.tests.fakes import RecordingNameSync
from rapidchat.chat.types import ConnectionState


def run(coro_fn, *args, **kwargs):
    return async_to_sync(coro_fn)(*args, **kwargs)


def test_connect_replays_history_to_the_newcomer_only(service, transport):
    run(service.connect, "c1")
    run(service.send_message, "c1", "first")
    transport.clear()

    run(service.connect, "c2")

    assert transport.events_for("c1") == []
    [history] = transport.received("c2", Outbound.HISTORY_SNAPSHOT)
    assert [m["message"] for m in history] == ["first"]


def test_welcome_message_is_seeded(transport):
    state = ChatState.build(
        transport=transport,
        welcome_message="Welcome",
        system_name="RapidChat",
    )
    service = ChatService(state)

    run(service.connect, "c1")

    [history] = transport.received("c1", Outbound.HISTORY_SNAPSHOT)
    assert len(history) == 1
    assert history[0]["message"] == "Welcome"
    assert history[0]["user"]["name"] == "RapidChat"


def test_message_is_broadcast_to_everyone(service, transport):
    run(service.connect, "c1")
    run(service.connect, "c2")

    message = run(service.send_message, "c1", "hello")

    for connection_id in ("c1", "c2"):
        [payload] = transport.received(connection_id, Outbound.MESSAGE_ADDED)
        assert payload == {
            "id": message.id,
            "message": "hello",
            "user": {"id": message.author.id, "name": "anonymous"},
        }


def test_empty_message_is_answered_to_sender_only(service, transport):
    run(service.connect, "c1")
    run(service.connect, "c2")
    transport.clear()

    assert run(service.send_message, "c1", "   ") is None

    assert transport.received("c1") == ["Invalid message. Message cannot be empty."]
    assert transport.events_for("c1") == [Outbound.VALIDATION_ERROR]
    assert transport.events_for("c2") == []
    assert len(service.log) == 0


def test_too_long_message_is_rejected(service, transport):
    run(service.connect, "c1")
    transport.clear()

    run(service.send_message, "c1", "x" * 101)

    assert transport.received("c1", Outbound.VALIDATION_ERROR) == [
        "Invalid message. Message cannot be longer than 100 characters.",
    ]
    assert len(service.log) == 0


def test_message_from_closed_connection(service, transport):
    run(service.connect, "c1")
    run(service.disconnect, "c1")
    transport.clear()

    assert run(service.send_message, "c1", "hi") is None
    assert transport.received("c1", Outbound.VALIDATION_ERROR) == ["User not found."]
    assert len(service.log) == 0


def test_invalid_rename_changes_nothing(service, transport):
    run(service.connect, "c1")
    before = service.registry.get("c1")
    transport.clear()

    run(service.set_display_name, "c1", "ABCDEFGHIJK")

    assert transport.received("c1") == [
        "Invalid name. Name cannot be longer than 10 characters.",
    ]
    assert service.registry.get("c1") == before


def test_rename_is_broadcast(service, transport, name_sync):
    run(service.connect, "c1")
    run(service.connect, "c2")
    transport.clear()

    run(service.set_display_name, "c1", "Bob")

    assert transport.received("c1", Outbound.DISPLAY_NAME_CHANGED) == ["Bob"]
    assert transport.received("c2", Outbound.DISPLAY_NAME_CHANGED) == ["Bob"]
    # Anonymous renames never reach the credential store.
    assert name_sync.calls == []


def test_two_anonymous_users_stay_distinct(service):
    run(service.connect, "c1")
    run(service.connect, "c2")

    first = run(service.send_message, "c1", "one")
    second = run(service.send_message, "c2", "two")

    assert first.author.display_name == second.author.display_name == "anonymous"
    assert first.author.id != second.author.id


def test_authenticate_success(service, transport):
    run(service.connect, "c1")

    identity = run(service.authenticate, "c1", "ann-token")

    assert identity.display_name == "Ann"
    assert transport.received("c1", Outbound.AUTH_SUCCEEDED) == [
        "Authentication successful",
    ]
    assert service.registry.state("c1") is ConnectionState.AUTHENTICATED


def test_connect_with_token_authenticates(service, transport):
    identity = run(service.connect, "c1", token="ann-token")

    assert identity.contact == "ann@example.com"
    assert transport.events_for("c1") == [
        Outbound.HISTORY_SNAPSHOT,
        Outbound.AUTH_SUCCEEDED,
    ]


def test_bad_token_at_connect_refuses_the_handshake(service, transport):
    with pytest.raises(AuthFailure):
        run(service.connect, "c1", token="forged")

    assert transport.received("c1", Outbound.AUTH_FAILED) == ["Authentication failed"]
    # Closing is left to the transport refusing the handshake.
    assert transport.disconnected == []
    assert service.registry.state("c1") is None
    assert len(service.registry) == 0


def test_bad_token_at_connect_can_stay_anonymous(transport, resolver):
    state = ChatState.build(
        transport=transport,
        resolver=resolver,
        disconnect_on_auth_failure=False,
    )
    service = ChatService(state)

    identity = run(service.connect, "c1", token="forged")

    assert identity.display_name == "anonymous"
    assert service.registry.state("c1") is ConnectionState.ANONYMOUS
    assert transport.disconnected == []


def test_authenticate_failure_closes_the_connection(service, transport):
    run(service.connect, "c1")
    run(service.connect, "c2")
    transport.clear()

    assert run(service.authenticate, "c1", "forged") is None

    assert transport.received("c1", Outbound.AUTH_FAILED) == ["Authentication failed"]
    assert transport.disconnected == ["c1"]
    assert service.registry.state("c1") is None
    assert transport.events_for("c2") == []


@pytest.mark.parametrize("token", [None, "", 123])
def test_authenticate_rejects_malformed_tokens(service, transport, token):
    run(service.connect, "c1")

    run(service.authenticate, "c1", token)

    assert transport.received("c1", Outbound.AUTH_FAILED) == ["Authentication failed"]


def test_authenticate_failure_can_keep_connection_open(transport, resolver):
    state = ChatState.build(
        transport=transport,
        resolver=resolver,
        disconnect_on_auth_failure=False,
    )
    service = ChatService(state)
    run(service.connect, "c1")

    run(service.authenticate, "c1", "forged")

    assert transport.disconnected == []
    assert service.registry.state("c1") is ConnectionState.ANONYMOUS


def test_authenticated_rename_keeps_past_messages(service, transport, name_sync):
    run(service.connect, "c1", token="ann-token")
    run(service.connect, "c2")

    run(service.send_message, "c1", "hi")
    run(service.set_display_name, "c1", "Annie")
    run(service.send_message, "c1", "again")

    authors = [m.author.display_name for m in service.log.snapshot()]
    assert authors == ["Ann", "Annie"]
    assert name_sync.calls == [("ann@example.com", "Annie")]
    assert transport.received("c2", Outbound.DISPLAY_NAME_CHANGED) == ["Annie"]


def test_rename_still_broadcast_when_sync_fails(transport, resolver):
    state = ChatState.build(
        transport=transport,
        resolver=resolver,
        name_sync=RecordingNameSync(fail=True),
    )
    service = ChatService(state)
    run(service.connect, "c1", token="ann-token")
    transport.clear()

    identity = run(service.set_display_name, "c1", "Annie")

    assert identity.display_name == "Annie"
    assert transport.received("c1", Outbound.DISPLAY_NAME_CHANGED) == ["Annie"]


def test_typing_indicators_carry_the_identity(service, transport):
    run(service.connect, "c1", token="ann-token")
    run(service.connect, "c2")
    transport.clear()

    run(service.typing_started, "c1")
    run(service.typing_stopped, "c1")

    expected = {"id": "ann-id", "name": "Ann", "email": "ann@example.com"}
    assert transport.received("c2", Outbound.TYPING_STARTED) == [expected]
    assert transport.received("c2", Outbound.TYPING_STOPPED) == [expected]


def test_typing_from_unknown_connection_is_ignored(service, transport):
    run(service.connect, "c1")
    transport.clear()

    run(service.typing_started, "ghost")

    assert transport.emitted == []


def test_disconnect_is_idempotent(service):
    run(service.connect, "c1")

    run(service.disconnect, "c1")
    run(service.disconnect, "c1")

    assert len(service.registry) == 0
