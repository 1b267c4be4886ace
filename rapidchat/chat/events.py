"""Socket.IO event names, kept wire-compatible with the existing web client."""


class Inbound:
    AUTHENTICATE = "client-auth"
    SEND_MESSAGE = "client-message-sent"
    SET_DISPLAY_NAME = "client-name-sent"
    TYPING_STARTED = "user-typed"
    TYPING_STOPPED = "user-stop-typed"


class Outbound:
    AUTH_SUCCEEDED = "auth-success"
    AUTH_FAILED = "auth-error"
    VALIDATION_ERROR = "error-message"
    MESSAGE_ADDED = "new-message-sent"
    DISPLAY_NAME_CHANGED = "client-name-sent"
    TYPING_STARTED = "user-typing"
    TYPING_STOPPED = "user-stop-typing"
    HISTORY_SNAPSHOT = "init-messages-published"
