"""Stateless checks applied to inbound text before it touches any state."""

from __future__ import annotations

from .exceptions import ValidationError

MESSAGE_MAX_LENGTH = 100
DISPLAY_NAME_MAX_LENGTH = 10


def _clean(value: object, *, label: str, max_length: int) -> str:
    if not isinstance(value, str) or not value.strip():
        msg = f"Invalid {label.lower()}. {label} cannot be empty."
        raise ValidationError(msg)
    cleaned = value.strip()
    if len(cleaned) > max_length:
        msg = (
            f"Invalid {label.lower()}. {label} cannot be longer than "
            f"{max_length} characters."
        )
        raise ValidationError(msg)
    return cleaned


def validate_message_body(value: object, max_length: int = MESSAGE_MAX_LENGTH) -> str:
    """Return the trimmed body or raise ValidationError."""
    return _clean(value, label="Message", max_length=max_length)


def validate_display_name(
    value: object,
    max_length: int = DISPLAY_NAME_MAX_LENGTH,
) -> str:
    """Return the trimmed name or raise ValidationError."""
    return _clean(value, label="Name", max_length=max_length)
