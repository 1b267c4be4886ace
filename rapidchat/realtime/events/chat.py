from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from rapidchat.chat.types import Identity
from rapidchat.chat.types import Message


def build_identity_payload(identity: Identity) -> dict[str, Any]:
    payload: dict[str, Any] = {"id": identity.id, "name": identity.display_name}
    if identity.contact:
        payload["email"] = identity.contact
    return payload


def build_message_payload(message: Message) -> dict[str, Any]:
    return {
        "id": message.id,
        "message": message.body,
        "user": build_identity_payload(message.author),
    }


def build_history_payload(messages: Iterable[Message]) -> list[dict[str, Any]]:
    return [build_message_payload(message) for message in messages]
