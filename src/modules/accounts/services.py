"""Account service layer (Use Cases).

Sign-up, user look-ups and account removal.  Deleting a user also deletes
every order the user placed, in whichever storage backend holds orders.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union

import structlog
from django.contrib.auth import get_user_model, password_validation
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from pydantic import ValidationError as PydanticValidationError

from modules.accounts.dtos import SignUpDTO
from modules.accounts.exceptions import InvalidSignUpData, UsernameTaken, UserNotFound

if TYPE_CHECKING:
    from modules.accounts.repositories.interfaces import IUserRepository
    from modules.orders.services import OrderService

logger = structlog.get_logger(__name__)


class AccountService:
    """Application service for user accounts.

    Receives the user repository and the order service via constructor
    injection (DIP).
    """

    def __init__(
        self, user_repository: IUserRepository, order_service: OrderService
    ) -> None:
        self._user_repo = user_repository
        self._orders = order_service

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def sign_up(self, data: Union[SignUpDTO, Mapping[str, Any]]) -> Any:
        """Register a customer account.

        Raises:
            InvalidSignUpData: payload or password failed validation.
            UsernameTaken: the username is already registered.
        """
        if isinstance(data, SignUpDTO):
            dto = data
        else:
            try:
                dto = SignUpDTO.model_validate(dict(data))
            except PydanticValidationError as exc:
                raise InvalidSignUpData.from_pydantic(exc, "Invalid sign-up data.") from exc

        log = logger.bind(username=dto.username)
        if self._user_repo.get_by_username(dto.username) is not None:
            log.warning("user.signup_rejected", reason="username_taken")
            raise UsernameTaken(f"Username {dto.username!r} is already taken.")

        try:
            password_validation.validate_password(
                dto.password,
                user=get_user_model()(username=dto.username, email=dto.email),
            )
        except DjangoValidationError as exc:
            log.warning("user.signup_rejected", reason="weak_password")
            raise InvalidSignUpData(
                "Invalid sign-up data.",
                [f"password: {message}" for message in exc.messages],
            ) from exc

        try:
            with transaction.atomic():
                user = self._user_repo.create(dto.model_dump())
        except IntegrityError as exc:
            # Lost a race against a concurrent sign-up with the same name.
            raise UsernameTaken(f"Username {dto.username!r} is already taken.") from exc

        log.info("user.signed_up", user_id=user.id)
        return user

    @transaction.atomic
    def delete_user(self, user_id: Any) -> None:
        """Delete a user together with all of the user's orders.

        Raises:
            UserNotFound: no user with that ID.
        """
        user = self.get_user(user_id)
        removed = self._orders.delete_user_orders(user.id)
        self._user_repo.delete(user.id)
        logger.info("user.removed", user_id=user.id, orders_deleted=removed)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_user(self, user_id: Any) -> Any:
        """Raises ``UserNotFound`` if missing."""
        user = self._user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFound(f"User {user_id} not found.")
        return user

    def list_users(self, filters: Optional[Dict[str, Any]] = None) -> List[Any]:
        return self._user_repo.list(filters)
