"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.

- ``OrderViewSet``: the signed-in customer's orders, submission and quotes.
- ``AdminOrderViewSet``: staff-only order management.
- ``PricingView``: the public price table.
"""

from __future__ import annotations

from typing import Any, Dict

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.views import APIView
from rest_framework.viewsets import ViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.discounts.repositories import get_discount_repository
from modules.orders.constants import OrderStatus
from modules.orders.exceptions import (
    InvalidOrderData,
    InvalidOrderStatus,
    OrderNotFound,
    OrderStorageError,
)
from modules.orders.filters import admin_order_filters, order_state
from modules.orders.pricing import price_table
from modules.orders.repositories import get_order_repository
from modules.orders.serializers import (
    AdminOrderListSerializer,
    OrderListSerializer,
    OrderQuoteSerializer,
    OrderSerializer,
)
from modules.orders.services import OrderService


def build_order_service() -> OrderService:
    """``OrderService`` wired to the configured storage backend."""
    return OrderService(
        order_repository=get_order_repository(),
        discount_repository=get_discount_repository(),
    )


def request_payload(request: Request) -> Dict[str, Any]:
    data = request.data
    if hasattr(data, "dict"):
        return data.dict()
    return dict(data)


def _invalid(exc: InvalidOrderData) -> Response:
    return Response(
        {"detail": str(exc), "errors": exc.errors},
        status=status.HTTP_400_BAD_REQUEST,
    )


def _order_not_found() -> Response:
    return Response({"detail": "Order not found."}, status=status.HTTP_404_NOT_FOUND)


def _storage_error(exc: OrderStorageError) -> Response:
    return Response(
        {"detail": str(exc)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


class PricingView(APIView):
    """GET /api/v1/pricing/: per-gram rates and surcharges."""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        return Response(price_table())


class OrderViewSet(ViewSet):
    """The signed-in customer's orders.

    Does **not** extend ``ModelViewSet``; all storage access goes through
    the service/repository layer.
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_order_service()

    def get_throttles(self) -> list[BaseThrottle]:
        """Scope throttling per action."""
        self.throttle_scope = "order_creation" if self.action == "create" else None
        return super().get_throttles()

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/?state=active|completed"""
        try:
            orders = self._service.list_user_orders(
                request.user.id, order_state(request.query_params)
            )
        except InvalidOrderData as exc:
            return _invalid(exc)

        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(orders, request, view=self)
        serializer = OrderListSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Prices the order server-side.  The client's ``price`` is required
        but the stored amount is always the server's.
        """
        payload = {**request_payload(request), "user_id": request.user.id}
        try:
            order = self._service.finalize_order(payload)
        except InvalidOrderData as exc:
            return _invalid(exc)
        except OrderStorageError as exc:
            return _storage_error(exc)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/: own orders only (staff see all)."""
        try:
            order = self._service.get_order(pk or "")
        except OrderNotFound:
            return _order_not_found()
        if order.user_id != request.user.id and not request.user.is_staff:
            return _order_not_found()
        return Response(OrderSerializer(order).data)

    @action(detail=False, methods=["post"], permission_classes=[AllowAny])
    def quote(self, request: Request) -> Response:
        """POST /api/v1/orders/quote/: price preview, nothing is stored."""
        try:
            quote = self._service.quote_order(request_payload(request))
        except InvalidOrderData as exc:
            return _invalid(exc)
        return Response(OrderQuoteSerializer(quote).data)


class AdminOrderViewSet(ViewSet):
    """Staff-only order management under /api/v1/admin/orders/."""

    permission_classes = [IsAdminUser]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_order_service()

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/admin/orders/?status=&user="""
        try:
            filters = admin_order_filters(request.query_params)
        except InvalidOrderData as exc:
            return _invalid(exc)

        orders = self._service.list_orders(filters)
        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(orders, request, view=self)
        usernames = dict(
            get_user_model()
            .objects.filter(id__in={order.user_id for order in page})
            .values_list("id", "username")
        )
        serializer = AdminOrderListSerializer(
            page, many=True, context={"usernames": usernames}
        )
        return paginator.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/admin/orders/{pk}/"""
        try:
            order = self._service.get_order(pk or "")
        except OrderNotFound:
            return _order_not_found()
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Create / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/admin/orders/: order entered on a customer's behalf."""
        payload = request_payload(request)
        user_id = str(payload.get("user_id", ""))
        if user_id.isdigit() and not get_user_model().objects.filter(id=user_id).exists():
            return Response(
                {"detail": "User not found."}, status=status.HTTP_404_NOT_FOUND
            )
        try:
            order = self._service.create_admin_order(payload)
        except InvalidOrderData as exc:
            return _invalid(exc)
        except OrderStorageError as exc:
            return _storage_error(exc)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/admin/orders/{pk}/"""
        try:
            self._service.delete_order(pk or "")
        except OrderNotFound:
            return _order_not_found()
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    def _transition(self, pk: str | None, new_status: str) -> Response:
        try:
            order = self._service.update_status(pk or "", new_status)
        except OrderNotFound:
            return _order_not_found()
        except InvalidOrderStatus as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"])
    def confirm(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/admin/orders/{pk}/confirm/"""
        return self._transition(pk, OrderStatus.CONFIRMED)

    @action(detail=True, methods=["post"])
    def complete(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/admin/orders/{pk}/complete/"""
        return self._transition(pk, OrderStatus.COMPLETED)

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/admin/orders/{pk}/cancel/"""
        return self._transition(pk, OrderStatus.CANCELLED)

    # ------------------------------------------------------------------
    # Amount overrides
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def amount(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/admin/orders/{pk}/amount/ {"amount": "12.50"}"""
        try:
            order = self._service.update_final_amount(
                pk or "", request.data.get("amount")
            )
        except InvalidOrderData as exc:
            return _invalid(exc)
        except OrderNotFound:
            return _order_not_found()
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["patch"])
    def discount(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/admin/orders/{pk}/discount/ {"discount_applied": "2.00"}"""
        try:
            order = self._service.update_discount_applied(
                pk or "", request.data.get("discount_applied")
            )
        except InvalidOrderData as exc:
            return _invalid(exc)
        except OrderNotFound:
            return _order_not_found()
        return Response(OrderSerializer(order).data)
