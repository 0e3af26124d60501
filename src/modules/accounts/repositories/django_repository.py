"""Django ORM implementation of the user repository.

Users live in Django's auth table; ``create`` also writes the profile row
in the same transaction.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.contrib.auth import get_user_model
from django.db import transaction

from modules.accounts.models import Profile
from modules.accounts.repositories.interfaces import IUserRepository

logger = structlog.get_logger(__name__)

PROFILE_FIELDS = ("profile_image_url", "shipping_address", "phone")


class UserDjangoRepository(IUserRepository):
    """Concrete user repository backed by ``django.contrib.auth``."""

    def __init__(self) -> None:
        self._model = get_user_model()

    def get_by_id(self, id: Any) -> Optional[Any]:
        try:
            user_id = int(id)
        except (TypeError, ValueError):
            return None
        return (
            self._model.objects.select_related("profile").filter(id=user_id).first()
        )

    def get_by_username(self, username: str) -> Optional[Any]:
        user = self._model.objects.filter(username=username).first()
        # MySQL's default collation compares case-insensitively.
        if user is not None and user.username != username:
            return None
        return user

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Any]:
        queryset = self._model.objects.select_related("profile").order_by("id")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Any:
        """Create a user with a hashed password plus its profile.

        Expected keys: ``username``, ``password``, ``email`` and the
        profile fields.
        """
        user = self._model.objects.create_user(
            username=data["username"],
            password=data["password"],
            email=data.get("email", ""),
        )
        Profile.objects.create(
            user=user, **{key: data[key] for key in PROFILE_FIELDS if key in data}
        )
        logger.info("user.created", user_id=user.id)
        return user

    @transaction.atomic
    def delete(self, id: Any) -> bool:
        user = self.get_by_id(id)
        if user is None:
            return False
        user.delete()
        logger.info("user.deleted", user_id=id)
        return True
