"""Account domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import InvalidInput


class UserNotFound(Exception):
    """The requested user does not exist."""


class UsernameTaken(Exception):
    """Sign-up with a username that is already registered."""


class InvalidSignUpData(InvalidInput):
    """Sign-up payload or password failed validation."""
