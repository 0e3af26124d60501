"""Account DTOs (Pydantic v2, immutable)."""

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.accounts.constants import DEFAULT_PROFILE_IMAGE_URL, USERNAME_MAX_LENGTH

# Same character set Django's UnicodeUsernameValidator accepts.
USERNAME_PATTERN = re.compile(r"^[\w.@+-]+\Z")


class SignUpDTO(BaseModel):
    """Immutable DTO for customer sign-up.

    Password strength is checked by Django's validators in the service,
    not here.
    """

    model_config = ConfigDict(frozen=True)

    username: str = Field(max_length=USERNAME_MAX_LENGTH)
    password: str = Field(min_length=1)
    email: str = Field(default="", max_length=254)
    profile_image_url: str = Field(default=DEFAULT_PROFILE_IMAGE_URL, max_length=500)
    shipping_address: str = ""
    phone: str = Field(default="", max_length=20)

    @field_validator("username")
    @classmethod
    def username_is_valid(cls, v: str) -> str:
        v = v.strip()
        if not USERNAME_PATTERN.match(v):
            raise ValueError(
                "Username may contain only letters, digits and @/./+/-/_ characters."
            )
        return v

    @field_validator("profile_image_url", mode="before")
    @classmethod
    def default_image_when_blank(cls, v: Optional[str]) -> str:
        return (v or "").strip() or DEFAULT_PROFILE_IMAGE_URL
