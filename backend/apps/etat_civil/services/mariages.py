from __future__ import annotations

from django.db import transaction

from apps.etat_civil.exceptions import SuppressionInterdite, TransitionInterdite
from apps.etat_civil.models import ActeMariage, Mariage, StatutMariage

CHAMPS_AUDIT = ("epoux_nom_complet", "epouse_nom_complet", "date_mariage", "statut")


def verifier_modifiable(mariage: Mariage, *, super_admin: bool) -> None:
    """Seul le super_admin peut modifier un mariage sorti du brouillon."""
    if not super_admin and mariage.statut != StatutMariage.BROUILLON:
        raise TransitionInterdite("Seul un mariage en brouillon peut être modifié")


def valider_mariage(mariage: Mariage, user) -> Mariage:
    with transaction.atomic():
        mariage = Mariage.objects.select_for_update().get(pk=mariage.pk)
        if mariage.statut == StatutMariage.VALIDE:
            raise TransitionInterdite("Ce mariage est déjà validé")
        if mariage.statut != StatutMariage.BROUILLON:
            raise TransitionInterdite("Seul un mariage en brouillon peut être validé")
        mariage.statut = StatutMariage.VALIDE
        mariage.updated_by = user
        mariage.save(update_fields=["statut", "updated_by", "updated_at"])
    return mariage


def supprimer_mariage(mariage: Mariage) -> None:
    with transaction.atomic():
        if ActeMariage.objects.filter(mariage_id=mariage.pk).exists():
            raise SuppressionInterdite(
                "Impossible de supprimer un mariage pour lequel un acte a été généré"
            )
        mariage.delete()
