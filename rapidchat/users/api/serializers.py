from rest_framework import serializers

REQUIRED_MESSAGE = "Email, password, and name are required"
LOGIN_REQUIRED_MESSAGE = "Email and password are required"

_register_errors = {
    "required": REQUIRED_MESSAGE,
    "blank": REQUIRED_MESSAGE,
    "null": REQUIRED_MESSAGE,
}
_login_errors = {
    "required": LOGIN_REQUIRED_MESSAGE,
    "blank": LOGIN_REQUIRED_MESSAGE,
    "null": LOGIN_REQUIRED_MESSAGE,
}


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField(error_messages=_register_errors)
    password = serializers.CharField(
        write_only=True,
        trim_whitespace=False,
        error_messages=_register_errors,
    )
    # Any non-empty name; the in-chat length limit applies to renames only.
    name = serializers.CharField(max_length=255, error_messages=_register_errors)


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField(error_messages=_login_errors)
    password = serializers.CharField(
        write_only=True,
        trim_whitespace=False,
        error_messages=_login_errors,
    )


class TokenSerializer(serializers.Serializer):
    token = serializers.CharField(required=False, allow_blank=True, default="")


class SessionSerializer(serializers.Serializer):
    """Response body of login and profile."""

    token = serializers.CharField()
    name = serializers.CharField()


class RegisteredSerializer(serializers.Serializer):
    message = serializers.CharField()
    name = serializers.CharField()


class ErrorSerializer(serializers.Serializer):
    messageError = serializers.CharField()  # noqa: N815
