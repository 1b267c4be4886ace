import pytest

from rapidchat.chat.service import ChatService
from rapidchat.chat.state import ChatState
from rapidchat.chat.tests.fakes import ANN
from rapidchat.chat.tests.fakes import USER_PASSWORD
from rapidchat.chat.tests.fakes import FakeResolver
from rapidchat.chat.tests.fakes import FakeTransport
from rapidchat.chat.tests.fakes import RecordingNameSync
from rapidchat.users.models import User


@pytest.fixture
def user(db) -> User:
    return User.objects.create_user(
        email="ann@example.com",
        password=USER_PASSWORD,
        name="Ann",
    )


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def resolver() -> FakeResolver:
    return FakeResolver({"ann-token": ANN})


@pytest.fixture
def name_sync() -> RecordingNameSync:
    return RecordingNameSync()


@pytest.fixture
def chat_state(transport, resolver, name_sync) -> ChatState:
    return ChatState.build(
        transport=transport,
        resolver=resolver,
        name_sync=name_sync,
    )


@pytest.fixture
def service(chat_state) -> ChatService:
    return ChatService(chat_state)
