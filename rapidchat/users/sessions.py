"""Session correlator.

Bridges the REST login flow and the socket authentication flow: ``login``
mints a signed ``ChatSessionToken``, ``resolve`` turns one back into the
identity it was issued for. Tokens are stateless apart from the blacklist
consulted on every decode, which is what ``revoke`` (logout) writes to.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from django.contrib.auth import get_user_model
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.settings import api_settings

from rapidchat.chat.types import Identity

from .credentials import find_by_contact
from .exceptions import InvalidCredentials
from .exceptions import InvalidToken
from .tokens import ChatSessionToken

logger = logging.getLogger(__name__)
User = get_user_model()


@dataclass(frozen=True)
class IssuedSession:
    token: str
    display_name: str


def _decode(token: object) -> ChatSessionToken:
    if not isinstance(token, str) or not token:
        raise InvalidToken
    try:
        return ChatSessionToken(token)
    except TokenError as exc:
        raise InvalidToken from exc


def login(contact: str, secret: str) -> IssuedSession:
    user = find_by_contact(contact)
    if user is None:
        # Hash anyway so an unknown contact takes as long as a wrong secret.
        User().set_password(secret)
        raise InvalidCredentials
    if not user.check_password(secret) or not user.is_active:
        raise InvalidCredentials

    token = ChatSessionToken.for_user(user)
    logger.info("User logged in: %s", user.email)
    return IssuedSession(token=str(token), display_name=user.name)


def resolve(token: object) -> Identity:
    """Return the identity a token was issued for.

    Raises InvalidToken for a bad signature, malformed or expired token,
    a token of another type, or one that has been revoked.
    """
    decoded = _decode(token)
    identity_id = decoded.get(api_settings.USER_ID_CLAIM)
    if not identity_id:
        raise InvalidToken
    return Identity(
        id=str(identity_id),
        display_name=decoded.get("name", ""),
        contact=decoded.get("contact"),
    )


def revoke(token: object) -> None:
    """Blacklist a token. Unknown, expired or already revoked tokens are ignored."""
    try:
        decoded = _decode(token)
    except InvalidToken:
        logger.debug("Logout with an unusable token ignored")
        return
    decoded.blacklist()
    logger.info("Token revoked for identity %s", decoded.get(api_settings.USER_ID_CLAIM))


def profile(token: object) -> IssuedSession | None:
    """Return the token with the current display name, or None on any miss."""
    try:
        identity = resolve(token)
    except InvalidToken:
        return None
    user = User.objects.filter(uuid=identity.id, is_active=True).first()
    if user is None:
        return None
    return IssuedSession(token=str(token), display_name=user.name)
