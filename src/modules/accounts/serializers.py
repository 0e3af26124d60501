"""Account serializers (output only, plus the login payload)."""

from __future__ import annotations

from typing import Any, Dict

import structlog
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from modules.accounts.models import Profile

logger = structlog.get_logger(__name__)


class ProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = Profile
        fields = ["profile_image_url", "shipping_address", "phone", "balance"]
        read_only_fields = fields


class UserSerializer(serializers.Serializer):
    """User account with its profile (``null`` for users created by
    ``createsuperuser``, which have none)."""

    id = serializers.IntegerField(read_only=True)
    username = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)
    is_staff = serializers.BooleanField(read_only=True)
    date_joined = serializers.DateTimeField(read_only=True)
    profile = serializers.SerializerMethodField()

    def get_profile(self, user) -> Dict[str, Any] | None:
        # A missing reverse one-to-one raises an AttributeError subclass.
        profile = getattr(user, "profile", None)
        return ProfileSerializer(profile).data if profile is not None else None


class LoginSerializer(TokenObtainPairSerializer):
    """Token pair plus the identity the storefront needs after login."""

    def validate(self, attrs: Dict[str, Any]) -> Dict[str, Any]:
        data = super().validate(attrs)
        data["user_id"] = self.user.id
        data["is_staff"] = self.user.is_staff
        logger.info("auth.login_succeeded", user_id=self.user.id)
        return data
