"""User repositories package."""

from __future__ import annotations

from modules.accounts.repositories.django_repository import UserDjangoRepository
from modules.accounts.repositories.interfaces import IUserRepository


def get_user_repository() -> IUserRepository:
    """Users always live in the database, whatever ``STORAGE_BACKEND`` says."""
    return UserDjangoRepository()


__all__ = ["IUserRepository", "UserDjangoRepository", "get_user_repository"]
