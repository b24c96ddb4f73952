from __future__ import annotations

from django.urls import include, path, re_path
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions
from rest_framework.routers import DefaultRouter

from .actes_views import ActeMariageViewSet
from .auth import change_password, forgot_password, login, logout, me, reset_password
from .mariages_views import MariageViewSet
from .views import dashboard_data, dashboard_stats
from .viewsets import ArrondissementViewSet, MairieViewSet, UserViewSet, VilleViewSet

router = DefaultRouter(trailing_slash="/?")
router.register(r"users", UserViewSet, basename="users")
router.register(r"villes", VilleViewSet, basename="villes")
router.register(r"arrondissements", ArrondissementViewSet, basename="arrondissements")
router.register(r"mairies", MairieViewSet, basename="mairies")
router.register(r"mariages", MariageViewSet, basename="mariages")
router.register(r"actes", ActeMariageViewSet, basename="actes")

schema_view = get_schema_view(
    openapi.Info(
        title="Registre des mariages API",
        default_version="v1",
        description="API de gestion des mariages et actes de mariage (mairies, RBAC, audit).",
    ),
    public=True,
    permission_classes=[permissions.AllowAny],
)

urlpatterns = [
    re_path(r"^auth/login/?$", login, name="auth-login"),
    re_path(r"^auth/logout/?$", logout, name="auth-logout"),
    re_path(r"^auth/me/?$", me, name="auth-me"),
    re_path(r"^auth/change-password/?$", change_password, name="auth-change-password"),
    re_path(r"^auth/forgot-password/?$", forgot_password, name="auth-forgot-password"),
    re_path(r"^auth/reset-password/?$", reset_password, name="auth-reset-password"),
    re_path(r"^dashboard/?$", dashboard_data, name="dashboard-data"),
    re_path(r"^dashboard/stats/?$", dashboard_stats, name="dashboard-stats"),
    path("swagger/", schema_view.with_ui("swagger", cache_timeout=0), name="swagger-ui"),
    path("redoc/", schema_view.with_ui("redoc", cache_timeout=0), name="redoc"),
    path("", include(router.urls)),
]
