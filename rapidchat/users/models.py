import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import CharField
from django.db.models import EmailField
from django.utils.translation import gettext_lazy as _

from .managers import UserManager


class User(AbstractUser):
    """
    Registered chat participant.
    The email is the unique contact used to log in; ``name`` is the display
    name shown next to messages and is kept in sync with in-chat renames.
    """

    # Stable public identity id, carried in session tokens and chat payloads
    uuid = models.UUIDField(default=uuid.uuid4, unique=True, editable=False)
    name = CharField(_("Display Name"), blank=True, max_length=255)
    email = EmailField(_("email address"), unique=True)
    first_name = None  # type: ignore[assignment]
    last_name = None  # type: ignore[assignment]
    username = None  # type: ignore[assignment]
    # Audit timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    def __str__(self) -> str:
        return self.email
