from django.urls import include, path
from rest_framework.routers import DefaultRouter

from modules.accounts.views import AdminUserViewSet, SignUpView, UserViewSet

router = DefaultRouter(trailing_slash=True)
router.include_root_view = False
router.register(r"users", UserViewSet, basename="user")
router.register(r"admin/users", AdminUserViewSet, basename="admin-user")

urlpatterns = [
    path("auth/signup/", SignUpView.as_view(), name="signup"),
    path("", include(router.urls)),
]
