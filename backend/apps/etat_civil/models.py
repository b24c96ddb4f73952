from __future__ import annotations

from auditlog.registry import auditlog
from django.conf import settings
from django.db import models

REGIME_DEFAUT = "Communauté réduite aux acquêts"
REGIMES_MATRIMONIAUX = (
    REGIME_DEFAUT,
    "Séparation de biens",
    "Communauté universelle",
    "Participation aux acquêts",
)


class StatutMariage(models.TextChoices):
    BROUILLON = "brouillon", "Brouillon"
    VALIDE = "valide", "Validé"
    ANNULE = "annule", "Annulé"


class StatutActe(models.TextChoices):
    BROUILLON = "brouillon", "Brouillon"
    VALIDE = "valide", "Validé"
    IMPRIME = "imprime", "Imprimé"
    ANNULE = "annule", "Annulé"


class Mariage(models.Model):
    """MARIAGES - Enregistrement d'un mariage célébré dans une mairie."""

    mairie = models.ForeignKey(
        "geographie.Mairie", on_delete=models.PROTECT, related_name="mariages"
    )

    epoux_nom = models.CharField(max_length=255)
    epoux_prenom = models.CharField(max_length=255)
    epoux_date_naissance = models.DateField()
    epoux_lieu_naissance = models.CharField(max_length=255)
    epoux_nationalite = models.CharField(max_length=100, blank=True)
    epoux_profession = models.CharField(max_length=255, blank=True)
    epoux_adresse = models.CharField(max_length=500, blank=True)
    epoux_nom_pere = models.CharField(max_length=255, blank=True)
    epoux_nom_mere = models.CharField(max_length=255, blank=True)

    epouse_nom = models.CharField(max_length=255)
    epouse_prenom = models.CharField(max_length=255)
    epouse_date_naissance = models.DateField()
    epouse_lieu_naissance = models.CharField(max_length=255)
    epouse_nationalite = models.CharField(max_length=100, blank=True)
    epouse_profession = models.CharField(max_length=255, blank=True)
    epouse_adresse = models.CharField(max_length=500, blank=True)
    epouse_nom_pere = models.CharField(max_length=255, blank=True)
    epouse_nom_mere = models.CharField(max_length=255, blank=True)

    date_mariage = models.DateField()
    heure_mariage = models.TimeField(null=True, blank=True)
    lieu_mariage = models.CharField(max_length=500, blank=True)
    regime_matrimonial = models.CharField(max_length=100, default=REGIME_DEFAUT)

    temoin1_nom = models.CharField(max_length=255, blank=True)
    temoin1_prenom = models.CharField(max_length=255, blank=True)
    temoin2_nom = models.CharField(max_length=255, blank=True)
    temoin2_prenom = models.CharField(max_length=255, blank=True)

    officier_nom = models.CharField(max_length=255, blank=True)
    officier_fonction = models.CharField(max_length=255, blank=True)

    statut = models.CharField(
        max_length=20, choices=StatutMariage.choices, default=StatutMariage.BROUILLON
    )
    observations = models.TextField(blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="mariages_crees",
        null=True,
        blank=True,
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="mariages_modifies",
        null=True,
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "mariages"
        ordering = ("-created_at", "-id")

    def __str__(self) -> str:
        return f"{self.epoux_nom_complet} & {self.epouse_nom_complet} ({self.date_mariage})"

    @property
    def epoux_nom_complet(self) -> str:
        return f"{self.epoux_prenom} {self.epoux_nom}"

    @property
    def epouse_nom_complet(self) -> str:
        return f"{self.epouse_prenom} {self.epouse_nom}"


class ActeMariage(models.Model):
    """
    ACTES_MARIAGE - Acte numéroté produit à partir d'un mariage validé.

    Un mariage porte au plus un acte (contrainte un-à-un) et le numéro
    d'ordre est unique par mairie et par année.
    """

    mariage = models.OneToOneField(
        Mariage, on_delete=models.PROTECT, related_name="acte"
    )
    mairie = models.ForeignKey(
        "geographie.Mairie", on_delete=models.PROTECT, related_name="actes"
    )
    numero_acte = models.CharField(max_length=50, db_index=True)
    annee = models.PositiveIntegerField()
    numero_ordre = models.PositiveIntegerField()
    contenu = models.TextField(blank=True)
    fichier_pdf = models.CharField(max_length=500, blank=True)
    statut = models.CharField(
        max_length=20, choices=StatutActe.choices, default=StatutActe.BROUILLON
    )
    date_validation = models.DateTimeField(null=True, blank=True)
    valide_par = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="actes_valides",
        null=True,
        blank=True,
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="actes_crees",
        null=True,
        blank=True,
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="actes_modifies",
        null=True,
        blank=True,
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "actes_mariage"
        ordering = ("-created_at", "-id")
        constraints = [
            models.UniqueConstraint(
                fields=("mairie", "annee", "numero_ordre"),
                name="uniq_acte_mairie_annee_ordre",
            )
        ]

    def __str__(self) -> str:
        return self.numero_acte


auditlog.register(Mariage)
auditlog.register(ActeMariage, exclude_fields=["contenu"])
