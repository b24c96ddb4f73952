from __future__ import annotations

from typing import Any, Dict, Optional

from django.db.models import QuerySet
from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from core.rbac.checker import SUPER_ADMIN, ActionDecision, default_checker
from identity.audit import log_action, snapshot
from identity.models import AuditAction

from .permissions import capability_action


def _as_int(value: Optional[str]) -> Optional[int]:
    try:
        return int(value) if value not in (None, "") else None
    except (TypeError, ValueError):
        return None


def scope_for_user(queryset: QuerySet, user, params=None, field: str = "mairie") -> QuerySet:
    """
    Filtre le queryset selon la mairie de ``user``.

    Le super_admin voit tout et peut filtrer via ``?mairie_id=`` ; les
    autres rôles sont restreints à leur mairie, tout ``mairie_id`` fourni
    par le client étant ignoré.
    """
    lookup = field if field == "pk" else f"{field}_id"
    if getattr(user, "role", None) == SUPER_ADMIN:
        explicit = _as_int((params or {}).get("mairie_id"))
        if explicit is not None:
            return queryset.filter(**{lookup: explicit})
        return queryset
    mairie_id = getattr(user, "mairie_id", None)
    if mairie_id is None:
        return queryset.none()
    return queryset.filter(**{lookup: mairie_id})


class TenantScopeMixin:
    """Cloisonne les querysets sur la mairie de l'utilisateur connecté."""

    tenant_field: Optional[str] = "mairie"

    def is_super_admin(self) -> bool:
        return getattr(self.request.user, "role", None) == SUPER_ADMIN

    def scope_by_tenant(self, queryset: QuerySet, field: Optional[str] = None) -> QuerySet:
        field = field or self.tenant_field
        if field is None:
            return queryset
        return scope_for_user(queryset, self.request.user, self.request.query_params, field)


class AuditTrailMixin:
    """Journalise création, modification et suppression via ``identity.audit``."""

    audit_entity: str = ""
    audit_fields: tuple = ()
    # La ressource est elle-même une mairie : pas de rattachement après suppression.
    audit_self_tenant = False

    def audit_mairie_id(self, instance) -> Optional[int]:
        return getattr(instance, "mairie_id", None)

    def audit_label(self, instance) -> str:
        return str(instance)

    def audit(self, action: str, instance, *, old_values=None, new_values=None, description: str = ""):
        return log_action(
            action=action,
            entity_type=self.audit_entity,
            entity_id=instance.pk,
            user=self.request.user,
            mairie_id=self.audit_mairie_id(instance),
            old_values=old_values,
            new_values=new_values,
            description=description,
            request=self.request,
        )

    def perform_create(self, serializer):  # type: ignore[override]
        instance = serializer.save()
        self.audit(
            AuditAction.CREATE,
            instance,
            new_values=snapshot(instance, self.audit_fields),
            description=f"Création {self.audit_entity} {self.audit_label(instance)}",
        )

    def perform_update(self, serializer):  # type: ignore[override]
        old_values = snapshot(serializer.instance, self.audit_fields)
        instance = serializer.save()
        self.audit(
            AuditAction.UPDATE,
            instance,
            old_values=old_values,
            new_values=snapshot(instance, self.audit_fields),
            description=f"Modification {self.audit_entity} {self.audit_label(instance)}",
        )

    def perform_destroy(self, instance):  # type: ignore[override]
        old_values = snapshot(instance, self.audit_fields)
        label = self.audit_label(instance)
        pk = instance.pk
        mairie_id = None if self.audit_self_tenant else self.audit_mairie_id(instance)
        instance.delete()
        log_action(
            action=AuditAction.DELETE,
            entity_type=self.audit_entity,
            entity_id=pk,
            user=self.request.user,
            mairie_id=mairie_id,
            old_values=old_values,
            description=f"Suppression {self.audit_entity} {label}",
            request=self.request,
        )


class EnvelopeModelMixin:
    """
    Réponses ``{success, message?, data?}`` pour un ModelViewSet.

    ``?all=true`` renvoie la liste complète des éléments actifs, sans pagination.
    """

    rbac_resource: str = ""
    rbac_actions: Dict[str, str] = {}
    not_found_message = "Ressource non trouvée"
    created_message = "Créé avec succès"
    updated_message = "Mis à jour avec succès"
    deleted_message = "Supprimé avec succès"
    active_field: Optional[str] = "is_active"

    def rbac_decision(self, action: Optional[str] = None) -> ActionDecision:
        return default_checker.decision(
            role=getattr(self.request.user, "role", None),
            action=action or capability_action(self) or "read",
            resource=self.rbac_resource,
        )

    def writable_data(self) -> Dict[str, Any]:
        """Données de la requête privées des champs que le rôle ne peut pas écrire."""
        restricted = self.rbac_decision().restricted_fields
        data = self.request.data
        keys = list(data.keys()) if hasattr(data, "keys") else []
        return {key: data.get(key) for key in keys if key not in restricted}

    def get_object(self):  # type: ignore[override]
        try:
            return super().get_object()
        except Http404:
            raise NotFound(self.not_found_message)

    def list(self, request, *args, **kwargs):  # type: ignore[override]
        queryset = self.filter_queryset(self.get_queryset())
        if request.query_params.get("all") == "true":
            if self.active_field:
                queryset = queryset.filter(**{self.active_field: True})
            serializer = self.get_serializer(queryset, many=True)
            return Response({"success": True, "data": serializer.data})

        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = self.get_serializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        serializer = self.get_serializer(queryset, many=True)
        return Response({"success": True, "data": serializer.data})

    def retrieve(self, request, *args, **kwargs):  # type: ignore[override]
        serializer = self.get_serializer(self.get_object())
        return Response({"success": True, "data": serializer.data})

    def create(self, request, *args, **kwargs):  # type: ignore[override]
        serializer = self.get_serializer(data=self.writable_data())
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        data = self.get_serializer(serializer.instance).data
        return Response(
            {"success": True, "message": self.created_message, "data": data},
            status=status.HTTP_201_CREATED,
        )

    def update(self, request, *args, **kwargs):  # type: ignore[override]
        # PUT et PATCH acceptent tous deux une mise à jour partielle.
        kwargs.pop("partial", None)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=self.writable_data(), partial=True)
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        data = self.get_serializer(serializer.instance).data
        return Response({"success": True, "message": self.updated_message, "data": data})

    def destroy(self, request, *args, **kwargs):  # type: ignore[override]
        self.perform_destroy(self.get_object())
        return Response({"success": True, "message": self.deleted_message})
