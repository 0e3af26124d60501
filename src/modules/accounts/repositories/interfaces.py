"""User repository contract."""

from __future__ import annotations

from abc import abstractmethod
from typing import Optional

from django.contrib.auth.models import AbstractBaseUser

from modules.core.repositories.interfaces import IRepository


class IUserRepository(IRepository[AbstractBaseUser]):
    """User accounts with their shop profile."""

    @abstractmethod
    def get_by_username(self, username: str) -> Optional[AbstractBaseUser]:
        """Exact (case-sensitive) username match, or ``None``."""
        ...
