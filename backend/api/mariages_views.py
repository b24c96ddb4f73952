from __future__ import annotations

from typing import Any, Dict

from django.utils.dateparse import parse_date
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.etat_civil.models import Mariage, StatutMariage
from apps.etat_civil.services.mariages import (
    CHAMPS_AUDIT,
    supprimer_mariage,
    valider_mariage,
    verifier_modifiable,
)
from identity.audit import snapshot
from identity.models import AuditAction

from .serializers import MariageSerializer
from .viewsets import BaseRegistryViewSet


class MariageViewSet(BaseRegistryViewSet):
    """
    Registre des mariages, cloisonné par mairie.

    GET /api/mariages/ : liste paginée (filtres statut, date_debut, date_fin, search)
    POST /api/mariages/ : création en brouillon
    PUT/PATCH /api/mariages/<id>/ : modification (brouillon uniquement hors super_admin)
    DELETE /api/mariages/<id>/ : suppression si aucun acte n'a été généré
    POST /api/mariages/<id>/validate/ : brouillon -> valide
    """

    queryset = Mariage.objects.select_related("mairie", "created_by", "acte").all()
    serializer_class = MariageSerializer
    rbac_resource = "MARIAGE"
    active_field = None
    search_fields = ("epoux_nom", "epoux_prenom", "epouse_nom", "epouse_prenom")
    not_found_message = "Mariage non trouvé"
    created_message = "Mariage enregistré avec succès"
    updated_message = "Mariage mis à jour avec succès"
    deleted_message = "Mariage supprimé avec succès"
    audit_entity = "Mariage"
    audit_fields = CHAMPS_AUDIT

    def audit_label(self, instance: Mariage) -> str:
        return f"{instance.epoux_nom_complet} & {instance.epouse_nom_complet}"

    def get_queryset(self):  # type: ignore[override]
        queryset = self.scope_by_tenant(super().get_queryset())
        queryset = self.apply_search(queryset)
        params = self.request.query_params
        if params.get("statut"):
            queryset = queryset.filter(statut=params["statut"])
        date_debut = parse_date(params.get("date_debut", "") or "")
        if date_debut:
            queryset = queryset.filter(date_mariage__gte=date_debut)
        date_fin = parse_date(params.get("date_fin", "") or "")
        if date_fin:
            queryset = queryset.filter(date_mariage__lte=date_fin)
        return queryset.order_by("-created_at", "-id")

    def writable_data(self) -> Dict[str, Any]:
        data = super().writable_data()
        if self.action == "create":
            # Tout mariage naît en brouillon ; seule l'action validate le fait avancer.
            data["statut"] = StatutMariage.BROUILLON
            if not self.is_super_admin():
                data["mairie"] = self.request.user.mairie_id
        return data

    def perform_create(self, serializer):  # type: ignore[override]
        serializer.validated_data["created_by"] = self.request.user
        serializer.validated_data["updated_by"] = self.request.user
        super().perform_create(serializer)

    def perform_update(self, serializer):  # type: ignore[override]
        verifier_modifiable(serializer.instance, super_admin=self.is_super_admin())
        serializer.validated_data["updated_by"] = self.request.user
        super().perform_update(serializer)

    def perform_destroy(self, instance: Mariage):  # type: ignore[override]
        old_values = snapshot(instance, self.audit_fields)
        label = self.audit_label(instance)
        pk, mairie_id = instance.pk, instance.mairie_id
        supprimer_mariage(instance)
        instance.pk = pk
        instance.mairie_id = mairie_id
        self.audit(
            AuditAction.DELETE,
            instance,
            old_values=old_values,
            description=f"Suppression du mariage {label}",
        )

    @action(detail=True, methods=["post"])
    def validate(self, request, pk=None):
        mariage = self.get_object()
        ancien_statut = mariage.statut
        mariage = valider_mariage(mariage, request.user)
        self.audit(
            AuditAction.VALIDATE,
            mariage,
            old_values={"statut": ancien_statut},
            new_values={"statut": mariage.statut},
            description=f"Validation du mariage {self.audit_label(mariage)}",
        )
        return Response(
            {
                "success": True,
                "message": "Mariage validé avec succès",
                "data": self.get_serializer(mariage).data,
            }
        )
