from __future__ import annotations

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from apps.etat_civil.models import ActeMariage, Mariage
from apps.etat_civil.services.actes import annuler_acte, generer_acte, imprimer_acte, valider_acte
from apps.geographie.models import Mairie
from identity.models import AuditAction

from .mixins import AuditTrailMixin, EnvelopeModelMixin, TenantScopeMixin
from .permissions import CapabilityPermission
from .serializers import ActeMariageSerializer


class ActeMariageViewSet(
    EnvelopeModelMixin,
    AuditTrailMixin,
    TenantScopeMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Actes de mariage : génération numérotée puis cycle brouillon -> valide -> imprime.

    POST /api/actes/generate/ {mariage_id} : 201, 409 si un acte existe déjà
    POST /api/actes/<id>/validate/ | print/ | cancel/
    """

    queryset = ActeMariage.objects.select_related("mairie", "mariage", "valide_par").all()
    serializer_class = ActeMariageSerializer
    permission_classes = (IsAuthenticated, CapabilityPermission)
    rbac_resource = "ACTE_MARIAGE"
    rbac_actions = {"mark_printed": "print"}
    active_field = None
    not_found_message = "Acte non trouvé"
    audit_entity = "ActeMariage"
    audit_fields = ("numero_acte", "statut")

    def audit_label(self, instance: ActeMariage) -> str:
        return f"n°{instance.numero_acte}"

    def get_queryset(self):  # type: ignore[override]
        queryset = self.scope_by_tenant(super().get_queryset())
        params = self.request.query_params
        search = params.get("search", "").strip()
        if search:
            queryset = queryset.filter(numero_acte__icontains=search)
        if params.get("statut"):
            queryset = queryset.filter(statut=params["statut"])
        if params.get("annee"):
            queryset = queryset.filter(annee=params["annee"])
        return queryset.order_by("-created_at", "-id")

    def _ok(self, acte: ActeMariage, message: str, http_status: int = status.HTTP_200_OK) -> Response:
        return Response(
            {"success": True, "message": message, "data": self.get_serializer(acte).data},
            status=http_status,
        )

    @action(detail=False, methods=["post"])
    def generate(self, request):
        mariage_id = request.data.get("mariage_id") or request.data.get("mariageId")
        if mariage_id in (None, ""):
            raise ValidationError({"mariage_id": ["Ce champ est obligatoire."]})
        mariages = self.scope_by_tenant(Mariage.objects.all())
        try:
            mariage = mariages.get(pk=mariage_id)
        except (Mariage.DoesNotExist, ValueError, TypeError):
            raise NotFound("Mariage non trouvé")

        try:
            acte = generer_acte(mariage.pk, request.user)
        except Mariage.DoesNotExist:
            raise NotFound("Mariage non trouvé")
        except Mairie.DoesNotExist:
            raise NotFound("Mairie non trouvée")

        self.audit(
            AuditAction.CREATE,
            acte,
            new_values={"numero_acte": acte.numero_acte, "mariage_id": mariage.pk},
            description=f"Génération de l'acte de mariage {self.audit_label(acte)}",
        )
        return self._ok(acte, "Acte de mariage généré avec succès", status.HTTP_201_CREATED)

    def _transition(self, service, audit_action: str, verbe: str, message: str) -> Response:
        acte = self.get_object()
        ancien_statut = acte.statut
        acte = service(acte, self.request.user)
        self.audit(
            audit_action,
            acte,
            old_values={"statut": ancien_statut},
            new_values={"statut": acte.statut},
            description=f"{verbe} de l'acte de mariage {self.audit_label(acte)}",
        )
        return self._ok(acte, message)

    @action(detail=True, methods=["post"])
    def validate(self, request, pk=None):
        return self._transition(valider_acte, AuditAction.VALIDATE, "Validation", "Acte validé avec succès")

    @action(detail=True, methods=["post"], url_path="print")
    def mark_printed(self, request, pk=None):
        return self._transition(imprimer_acte, AuditAction.PRINT, "Impression", "Acte marqué comme imprimé")

    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        return self._transition(annuler_acte, AuditAction.CANCEL, "Annulation", "Acte annulé avec succès")
