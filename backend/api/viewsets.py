from __future__ import annotations

from typing import Any, Dict

from django.db.models import Count, Q
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.geographie.models import Arrondissement, Mairie, Ville
from core.exceptions import BusinessRuleError
from core.rbac.checker import default_checker
from identity.models import AuditAction, Role, User

from .mixins import AuditTrailMixin, EnvelopeModelMixin, TenantScopeMixin
from .permissions import CapabilityPermission
from .serializers import (
    ArrondissementSerializer,
    MairieSerializer,
    UserSerializer,
    VilleSerializer,
)


class BaseRegistryViewSet(EnvelopeModelMixin, AuditTrailMixin, TenantScopeMixin, viewsets.ModelViewSet):
    permission_classes = (IsAuthenticated, CapabilityPermission)
    http_method_names = ["get", "post", "put", "patch", "delete", "head", "options"]
    search_fields: tuple = ()

    def apply_search(self, queryset):
        term = self.request.query_params.get("search", "").strip()
        if not term or not self.search_fields:
            return queryset
        condition = Q()
        for field in self.search_fields:
            condition |= Q(**{f"{field}__icontains": term})
        return queryset.filter(condition)


class UserViewSet(BaseRegistryViewSet):
    queryset = User.objects.select_related("mairie").all()
    serializer_class = UserSerializer
    rbac_resource = "USER"
    rbac_actions = {"toggle_status": "toggle_status"}
    search_fields = ("full_name", "email", "telephone")
    not_found_message = "Utilisateur non trouvé"
    created_message = "Utilisateur créé avec succès"
    updated_message = "Utilisateur mis à jour avec succès"
    deleted_message = "Utilisateur supprimé avec succès"
    audit_entity = "User"
    audit_fields = ("full_name", "email", "role", "mairie_id", "is_active")

    def get_queryset(self):  # type: ignore[override]
        queryset = self.scope_by_tenant(super().get_queryset())
        queryset = self.apply_search(queryset)
        params = self.request.query_params
        if params.get("role"):
            queryset = queryset.filter(role=params["role"])
        if params.get("is_active") in {"true", "false"}:
            queryset = queryset.filter(is_active=params["is_active"] == "true")
        return queryset.order_by("-created_at")

    def writable_data(self) -> Dict[str, Any]:
        data = super().writable_data()
        if not self.is_super_admin():
            data["mairie"] = self.request.user.mairie_id
        return data

    def _check_assignable(self, role: str | None) -> None:
        if role is None:
            return
        allowed = default_checker.assignable_roles(role=self.request.user.role)
        if role not in allowed:
            raise PermissionDenied("Vous ne pouvez pas attribuer ce rôle")

    def _check_manageable(self, target: User) -> None:
        if self.is_super_admin():
            return
        allowed = default_checker.assignable_roles(role=self.request.user.role)
        if target.role not in allowed:
            raise PermissionDenied("Vous ne pouvez pas gérer cet utilisateur")

    def _check_not_self(self, target: User, message: str) -> None:
        if target.pk == self.request.user.pk:
            raise BusinessRuleError(message)

    def perform_create(self, serializer):  # type: ignore[override]
        self._check_assignable(serializer.validated_data.get("role", Role.AGENT))
        super().perform_create(serializer)

    def perform_update(self, serializer):  # type: ignore[override]
        self._check_manageable(serializer.instance)
        if "role" in serializer.validated_data:
            if serializer.instance.pk == self.request.user.pk:
                if serializer.validated_data["role"] != serializer.instance.role:
                    raise BusinessRuleError("Vous ne pouvez pas modifier votre propre rôle")
            else:
                self._check_assignable(serializer.validated_data["role"])
        super().perform_update(serializer)

    def perform_destroy(self, instance):  # type: ignore[override]
        self._check_not_self(instance, "Vous ne pouvez pas supprimer votre propre compte")
        self._check_manageable(instance)
        super().perform_destroy(instance)

    @action(detail=True, methods=["post"], url_path="toggle-status")
    def toggle_status(self, request, pk=None):
        user = self.get_object()
        self._check_not_self(user, "Vous ne pouvez pas désactiver votre propre compte")
        self._check_manageable(user)
        user.is_active = not user.is_active
        user.save(update_fields=["is_active", "updated_at"])
        self.audit(
            AuditAction.ACTIVATE if user.is_active else AuditAction.DEACTIVATE,
            user,
            old_values={"is_active": not user.is_active},
            new_values={"is_active": user.is_active},
            description=f"{'Activation' if user.is_active else 'Désactivation'} de l'utilisateur {user.email}",
        )
        message = "Utilisateur activé" if user.is_active else "Utilisateur désactivé"
        return Response({"success": True, "message": message, "data": self.get_serializer(user).data})


class VilleViewSet(BaseRegistryViewSet):
    queryset = Ville.objects.all()
    serializer_class = VilleSerializer
    rbac_resource = "VILLE"
    tenant_field = None
    search_fields = ("nom", "code", "region")
    not_found_message = "Ville non trouvée"
    created_message = "Ville créée avec succès"
    updated_message = "Ville mise à jour avec succès"
    deleted_message = "Ville supprimée avec succès"
    audit_entity = "Ville"
    audit_fields = ("nom", "code", "region", "is_active")

    def get_queryset(self):  # type: ignore[override]
        queryset = super().get_queryset().annotate(arrondissements_count=Count("arrondissements"))
        queryset = self.apply_search(queryset)
        if self.request.query_params.get("region"):
            queryset = queryset.filter(region__iexact=self.request.query_params["region"])
        return queryset.order_by("nom")

    def perform_destroy(self, instance):  # type: ignore[override]
        if instance.arrondissements.exists():
            raise BusinessRuleError("Impossible de supprimer une ville contenant des arrondissements")
        super().perform_destroy(instance)


class ArrondissementViewSet(BaseRegistryViewSet):
    queryset = Arrondissement.objects.select_related("ville").all()
    serializer_class = ArrondissementSerializer
    rbac_resource = "ARRONDISSEMENT"
    tenant_field = None
    search_fields = ("nom", "code")
    not_found_message = "Arrondissement non trouvé"
    created_message = "Arrondissement créé avec succès"
    updated_message = "Arrondissement mis à jour avec succès"
    deleted_message = "Arrondissement supprimé avec succès"
    audit_entity = "Arrondissement"
    audit_fields = ("nom", "code", "ville_id", "is_active")

    def get_queryset(self):  # type: ignore[override]
        queryset = self.apply_search(super().get_queryset())
        ville_id = self.request.query_params.get("ville_id")
        if ville_id:
            queryset = queryset.filter(ville_id=ville_id)
        return queryset.order_by("nom")

    def perform_destroy(self, instance):  # type: ignore[override]
        if instance.mairies.exists():
            raise BusinessRuleError("Impossible de supprimer un arrondissement contenant des mairies")
        super().perform_destroy(instance)


class MairieViewSet(BaseRegistryViewSet):
    queryset = Mairie.objects.select_related("arrondissement", "arrondissement__ville").all()
    serializer_class = MairieSerializer
    rbac_resource = "MAIRIE"
    tenant_field = "pk"
    search_fields = ("nom", "code", "adresse")
    not_found_message = "Mairie non trouvée"
    created_message = "Mairie créée avec succès"
    updated_message = "Mairie mise à jour avec succès"
    deleted_message = "Mairie supprimée avec succès"
    audit_entity = "Mairie"
    audit_fields = ("nom", "code", "prefixe_acte", "is_active")
    audit_self_tenant = True

    def audit_mairie_id(self, instance):
        return instance.pk

    def get_queryset(self):  # type: ignore[override]
        queryset = self.scope_by_tenant(super().get_queryset())
        queryset = self.apply_search(queryset)
        params = self.request.query_params
        if params.get("arrondissement_id"):
            queryset = queryset.filter(arrondissement_id=params["arrondissement_id"])
        if params.get("ville_id"):
            queryset = queryset.filter(arrondissement__ville_id=params["ville_id"])
        return queryset.order_by("nom")

    def perform_destroy(self, instance):  # type: ignore[override]
        if instance.users.exists() or instance.mariages.exists():
            raise BusinessRuleError(
                "Impossible de supprimer une mairie ayant des utilisateurs ou des mariages"
            )
        super().perform_destroy(instance)

    @action(detail=True, methods=["get"])
    def stats(self, request, pk=None):
        mairie = self.get_object()
        return Response(
            {
                "success": True,
                "data": {
                    "mairie": mairie.nom,
                    "total_users": mairie.users.count(),
                    "total_mariages": mairie.mariages.count(),
                    "total_actes": mairie.actes.count(),
                    "dernier_numero_acte": mairie.dernier_numero_acte,
                },
            }
        )
