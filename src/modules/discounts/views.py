"""Discount API views.

Public look-up for the storefront plus admin management.  Domain
exceptions are translated into HTTP status codes here.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.discounts.exceptions import (
    DiscountCodeAlreadyExists,
    DiscountCodeNotFound,
    DiscountUsageExhausted,
    InvalidDiscountData,
)
from modules.discounts.repositories import get_discount_repository
from modules.discounts.serializers import (
    DiscountCodeSerializer,
    DiscountLookupSerializer,
)
from modules.discounts.services import DiscountService


class DiscountLookupViewSet(ViewSet):
    """GET /api/v1/discounts/{code}/: check a code before submitting an order."""

    permission_classes = [AllowAny]
    throttle_scope = "discount_lookup"
    lookup_field = "code"
    lookup_value_regex = "[^/]+"

    def retrieve(self, request: Request, code: str | None = None) -> Response:
        service = DiscountService(get_discount_repository())
        try:
            descriptor = service.lookup_discount(code or "")
        except DiscountCodeNotFound:
            return Response(
                {"detail": "Invalid or expired discount code."},
                status=status.HTTP_404_NOT_FOUND,
            )
        except DiscountUsageExhausted:
            return Response(
                {"detail": "This discount code has reached its usage limit."},
                status=status.HTTP_409_CONFLICT,
            )
        return Response(DiscountLookupSerializer(descriptor).data)


class AdminDiscountViewSet(ViewSet):
    """Admin CRUD for discount codes under /api/v1/admin/discounts/."""

    permission_classes = [IsAdminUser]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = DiscountService(get_discount_repository())

    def list(self, request: Request) -> Response:
        """GET /api/v1/admin/discounts/"""
        discounts = self._service.list_discounts()
        return Response(DiscountCodeSerializer(discounts, many=True).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/admin/discounts/"""
        try:
            discount = self._service.create_discount(request.data)
        except InvalidDiscountData as exc:
            return Response(
                {"detail": str(exc), "errors": exc.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except DiscountCodeAlreadyExists as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(
            DiscountCodeSerializer(discount).data, status=status.HTTP_201_CREATED
        )

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/admin/discounts/{pk}/"""
        try:
            discount = self._service.get_discount(pk or "")
        except DiscountCodeNotFound:
            return Response(
                {"detail": "Discount code not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(DiscountCodeSerializer(discount).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/admin/discounts/{pk}/"""
        try:
            self._service.delete_discount(pk or "")
        except DiscountCodeNotFound:
            return Response(
                {"detail": "Discount code not found."},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(status=status.HTTP_204_NO_CONTENT)
