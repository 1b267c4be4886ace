from rest_framework_simplejwt.settings import api_settings
from rest_framework_simplejwt.tokens import BlacklistMixin
from rest_framework_simplejwt.tokens import Token


class ChatSessionToken(BlacklistMixin, Token):
    """Signed proof of a login, presented over the socket to leave anonymity.

    Carries the identity id (``USER_ID_CLAIM``), the display name at login time
    and the contact. Issued tokens are recorded as outstanding so logout can
    blacklist them.
    """

    token_type = "chat"  # noqa: S105
    lifetime = api_settings.ACCESS_TOKEN_LIFETIME

    @classmethod
    def for_user(cls, user):
        token = super().for_user(user)
        token["name"] = user.name
        token["contact"] = user.email
        return token
