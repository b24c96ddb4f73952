from __future__ import annotations

import logging
from typing import Optional

from django.db import transaction
from django.template.loader import render_to_string
from django.utils import timezone, translation

from apps.etat_civil.exceptions import ActeDejaExistant, MariageNonValide, TransitionInterdite
from apps.etat_civil.models import ActeMariage, Mariage, StatutActe, StatutMariage
from apps.geographie.models import Mairie

from .numerotation import reserver_numero

logger = logging.getLogger(__name__)

TEMPLATE_ACTE = "etat_civil/acte_mariage.html"


def rendre_contenu(mariage: Mariage, mairie: Mairie, numero_acte: str) -> str:
    """Produit le HTML de l'acte dans la langue de la mairie."""
    with translation.override(mairie.langue or "fr"):
        return render_to_string(
            TEMPLATE_ACTE,
            {"mariage": mariage, "mairie": mairie, "numero_acte": numero_acte},
        )


def generer_acte(mariage_id: int, user, annee: Optional[int] = None) -> ActeMariage:
    """
    Génère l'acte d'un mariage validé.

    Le mariage et la mairie sont verrouillés le temps de la transaction :
    deux appels concurrents pour le même mariage ne peuvent pas produire
    deux actes, et deux appels pour la même mairie obtiennent des numéros
    distincts. Lève ``Mariage.DoesNotExist``, ``Mairie.DoesNotExist``,
    ``ActeDejaExistant`` ou ``MariageNonValide``.
    """
    annee = annee or timezone.localdate().year
    with transaction.atomic():
        mariage = Mariage.objects.select_for_update().get(pk=mariage_id)

        existant = ActeMariage.objects.filter(mariage_id=mariage.pk).first()
        if existant is not None:
            raise ActeDejaExistant(existant)
        if mariage.statut != StatutMariage.VALIDE:
            raise MariageNonValide()

        numero = reserver_numero(mariage.mairie_id, annee)
        mairie = Mairie.objects.get(pk=mariage.mairie_id)
        acte = ActeMariage.objects.create(
            mariage=mariage,
            mairie=mairie,
            numero_acte=numero.numero,
            annee=numero.annee,
            numero_ordre=numero.numero_ordre,
            contenu=rendre_contenu(mariage, mairie, numero.numero),
            statut=StatutActe.BROUILLON,
            created_by=user,
        )
    logger.info("Acte %s généré pour le mariage %s", acte.numero_acte, mariage.pk)
    return acte


def _verrouiller(acte: ActeMariage) -> ActeMariage:
    return ActeMariage.objects.select_for_update().get(pk=acte.pk)


def valider_acte(acte: ActeMariage, user) -> ActeMariage:
    with transaction.atomic():
        acte = _verrouiller(acte)
        if acte.statut in {StatutActe.VALIDE, StatutActe.IMPRIME}:
            raise TransitionInterdite("Cet acte est déjà validé")
        if acte.statut == StatutActe.ANNULE:
            raise TransitionInterdite("Un acte annulé ne peut pas être validé")
        acte.statut = StatutActe.VALIDE
        acte.date_validation = timezone.now()
        acte.valide_par = user
        acte.updated_by = user
        acte.save(update_fields=["statut", "date_validation", "valide_par", "updated_by", "updated_at"])
    return acte


def imprimer_acte(acte: ActeMariage, user) -> ActeMariage:
    with transaction.atomic():
        acte = _verrouiller(acte)
        if acte.statut != StatutActe.VALIDE:
            raise TransitionInterdite("L'acte doit être validé avant d'être imprimé")
        acte.statut = StatutActe.IMPRIME
        acte.updated_by = user
        acte.save(update_fields=["statut", "updated_by", "updated_at"])
    return acte


def annuler_acte(acte: ActeMariage, user) -> ActeMariage:
    with transaction.atomic():
        acte = _verrouiller(acte)
        if acte.statut == StatutActe.ANNULE:
            raise TransitionInterdite("Cet acte est déjà annulé")
        acte.statut = StatutActe.ANNULE
        acte.updated_by = user
        acte.save(update_fields=["statut", "updated_by", "updated_at"])
    return acte
