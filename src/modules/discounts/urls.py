"""Discount URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.discounts.views import AdminDiscountViewSet, DiscountLookupViewSet

router = DefaultRouter(trailing_slash=True)
router.include_root_view = False
router.register("discounts", DiscountLookupViewSet, basename="discount")
router.register("admin/discounts", AdminDiscountViewSet, basename="admin-discount")

urlpatterns = router.urls
