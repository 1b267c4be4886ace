"""Credential store: registered identities keyed by their contact email."""

from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError
from django.db import transaction
from django.utils import timezone

from .exceptions import DuplicateContact

logger = logging.getLogger(__name__)
User = get_user_model()


def find_by_contact(contact: str):
    """Return the registered user for ``contact`` (case-insensitive), or None."""
    if not contact:
        return None
    return User.objects.filter(email__iexact=contact.strip()).first()


def register(contact: str, secret: str, display_name: str):
    """Create a registered identity.

    The secret goes through the configured password hasher; only the hash is
    stored. Raises DuplicateContact if the contact is already taken.
    """
    contact = contact.strip()
    if find_by_contact(contact) is not None:
        raise DuplicateContact
    try:
        # Savepoint so a concurrent insert of the same email stays recoverable
        with transaction.atomic():
            user = User.objects.create_user(
                email=contact,
                password=secret,
                name=display_name,
            )
    except IntegrityError as exc:
        raise DuplicateContact from exc

    logger.info("User registered: %s", user.email)
    return user


def update_display_name(contact: str, display_name: str) -> bool:
    """Sync a display name change onto the registered identity, if any."""
    if not contact:
        return False
    updated = User.objects.filter(email__iexact=contact.strip()).update(
        name=display_name,
        updated_at=timezone.now(),
    )
    return bool(updated)
