"""Errors raised while handling persistent-channel events."""


class ChatError(Exception):
    default_message = "Chat error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(ChatError):
    """Inbound text failed a shape or length check. Nothing was changed."""

    default_message = "Invalid input."


class UnknownSender(ChatError):  # noqa: N818
    """The connection has no registry row, usually because it just closed."""

    default_message = "User not found."


class AuthFailure(ChatError):  # noqa: N818
    default_message = "Authentication failed"
