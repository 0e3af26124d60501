"""Customer profile attached one-to-one to Django's auth user."""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models

from modules.accounts.constants import DEFAULT_PROFILE_IMAGE_URL
from modules.core.models import BaseModel


class Profile(BaseModel):
    """Shop-specific data for a user account.

    Credentials, username and e-mail stay on the auth user; ``is_staff``
    there marks shop administrators.
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile",
    )
    profile_image_url = models.CharField(
        max_length=500, default=DEFAULT_PROFILE_IMAGE_URL
    )
    shipping_address = models.TextField(blank=True, default="")
    phone = models.CharField(max_length=20, blank=True, default="")
    balance = models.DecimalField(
        max_digits=10, decimal_places=2, default=Decimal("0.00")
    )

    class Meta:
        db_table = "profiles"

    def __str__(self) -> str:
        return f"Profile of user {self.user_id}"
