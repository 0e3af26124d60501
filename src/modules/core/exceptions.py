"""Exceptions shared across modules."""

from __future__ import annotations

from typing import List

from pydantic import ValidationError as PydanticValidationError


class InvalidInput(Exception):
    """Request data failed DTO validation.

    Carries a flat list of ``"field: message"`` strings so views can return
    them as-is.
    """

    def __init__(self, message: str, errors: List[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError, message: str) -> InvalidInput:
        errors = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error["loc"])
            text = error["msg"].removeprefix("Value error, ")
            errors.append(f"{location}: {text}" if location else text)
        return cls(message, errors)
