from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings
from django.db import transaction

from apps.geographie.models import Mairie


@dataclass(frozen=True)
class NumeroActe:
    numero: str
    annee: int
    numero_ordre: int


def formater_numero(prefixe: str, annee: int, numero_ordre: int) -> str:
    """Formate un numéro d'acte : ``{PREFIXE}-{ANNEE}-{ORDRE sur 4 chiffres}``."""
    prefixe = prefixe or getattr(settings, "ACTE_PREFIXE_DEFAUT", "ACT")
    return f"{prefixe}-{annee}-{numero_ordre:04d}"


def reserver_numero(mairie_id: int, annee: int) -> NumeroActe:
    """
    Réserve le prochain numéro d'ordre d'une mairie.

    Doit être appelé dans une transaction : la ligne de la mairie reste
    verrouillée (SELECT ... FOR UPDATE) jusqu'au commit, ce qui sérialise
    les générations concurrentes. Lève ``Mairie.DoesNotExist``.
    """
    if not transaction.get_connection().in_atomic_block:
        raise RuntimeError("reserver_numero doit être appelé dans transaction.atomic()")

    mairie = Mairie.objects.select_for_update().get(pk=mairie_id)
    annuelle = bool(getattr(settings, "ACTE_NUMEROTATION_ANNUELLE", False))
    if annuelle and mairie.annee_dernier_numero != annee:
        mairie.dernier_numero_acte = 0

    mairie.dernier_numero_acte += 1
    mairie.annee_dernier_numero = annee
    mairie.save(update_fields=["dernier_numero_acte", "annee_dernier_numero", "updated_at"])

    ordre = mairie.dernier_numero_acte
    return NumeroActe(
        numero=formater_numero(mairie.prefixe_acte, annee, ordre),
        annee=annee,
        numero_ordre=ordre,
    )
