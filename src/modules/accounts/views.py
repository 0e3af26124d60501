"""Account API views.

- ``SignUpView`` / ``LoginView``: registration and JWT login.
- ``UserViewSet``: a user's own account and order history.
- ``AdminUserViewSet``: staff-only user management.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework.viewsets import ViewSet
from rest_framework_simplejwt.views import TokenObtainPairView

from modules.accounts.exceptions import InvalidSignUpData, UsernameTaken, UserNotFound
from modules.accounts.repositories import get_user_repository
from modules.accounts.serializers import LoginSerializer, UserSerializer
from modules.accounts.services import AccountService
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.exceptions import InvalidOrderData
from modules.orders.filters import order_state
from modules.orders.serializers import OrderListSerializer
from modules.orders.views import build_order_service, request_payload


def build_account_service() -> AccountService:
    return AccountService(
        user_repository=get_user_repository(),
        order_service=build_order_service(),
    )


def _user_not_found() -> Response:
    return Response({"detail": "User not found."}, status=status.HTTP_404_NOT_FOUND)


class LoginView(TokenObtainPairView):
    """POST /api/v1/auth/token/: access/refresh pair, ``user_id`` and ``is_staff``."""

    serializer_class = LoginSerializer


class SignUpView(APIView):
    """POST /api/v1/auth/signup/"""

    permission_classes = [AllowAny]
    throttle_scope = "signup"

    def post(self, request: Request) -> Response:
        try:
            user = build_account_service().sign_up(request_payload(request))
        except InvalidSignUpData as exc:
            return Response(
                {"detail": str(exc), "errors": exc.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        except UsernameTaken as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class UserViewSet(ViewSet):
    """Accounts as seen by their owner.  Other users' accounts are hidden
    (404) unless the caller is staff."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_account_service()

    def _visible_user(self, request: Request, pk: str | None):
        if not request.user.is_staff and str(request.user.id) != str(pk):
            raise UserNotFound(f"User {pk} not found.")
        return self._service.get_user(pk)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/users/{pk}/"""
        try:
            user = self._visible_user(request, pk)
        except UserNotFound:
            return _user_not_found()
        return Response(UserSerializer(user).data)

    @action(detail=False, methods=["get"])
    def me(self, request: Request) -> Response:
        """GET /api/v1/users/me/"""
        return Response(UserSerializer(self._service.get_user(request.user.id)).data)

    @action(detail=True, methods=["get"])
    def orders(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/users/{pk}/orders/?state=active|completed"""
        try:
            user = self._visible_user(request, pk)
        except UserNotFound:
            return _user_not_found()
        try:
            orders = build_order_service().list_user_orders(
                user.id, order_state(request.query_params)
            )
        except InvalidOrderData as exc:
            return Response(
                {"detail": str(exc), "errors": exc.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(orders, request, view=self)
        return paginator.get_paginated_response(
            OrderListSerializer(page, many=True).data
        )


class AdminUserViewSet(ViewSet):
    """Staff-only user management under /api/v1/admin/users/."""

    permission_classes = [IsAdminUser]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_account_service()

    def list(self, request: Request) -> Response:
        """GET /api/v1/admin/users/"""
        paginator = StandardResultsSetPagination()
        page = paginator.paginate_queryset(self._service.list_users(), request, view=self)
        return paginator.get_paginated_response(UserSerializer(page, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/admin/users/{pk}/"""
        try:
            user = self._service.get_user(pk)
        except UserNotFound:
            return _user_not_found()
        return Response(UserSerializer(user).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/admin/users/{pk}/: also deletes the user's orders."""
        if str(request.user.id) == str(pk):
            return Response(
                {"detail": "You cannot delete your own account."},
                status=status.HTTP_409_CONFLICT,
            )
        try:
            self._service.delete_user(pk)
        except UserNotFound:
            return _user_not_found()
        return Response(status=status.HTTP_204_NO_CONTENT)
