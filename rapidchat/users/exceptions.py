"""Errors raised by the credential store and session correlator.

Messages are deliberately generic: callers surface them verbatim and must not
reveal which field was wrong.
"""


class CredentialError(Exception):
    default_message = "Authentication error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class DuplicateContact(CredentialError):  # noqa: N818
    default_message = "User already exists"


class InvalidCredentials(CredentialError):  # noqa: N818
    default_message = "Invalid email or password"


class InvalidToken(CredentialError):  # noqa: N818
    default_message = "Authentication failed"
