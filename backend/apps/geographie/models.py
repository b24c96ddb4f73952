from __future__ import annotations

from auditlog.registry import auditlog
from django.db import models


class Ville(models.Model):
    """VILLES - Ville regroupant des arrondissements."""

    nom = models.CharField(max_length=255)
    code = models.CharField(max_length=10, unique=True, null=True, blank=True)
    region = models.CharField(max_length=255, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "villes"
        ordering = ("nom",)

    def __str__(self) -> str:
        return self.nom


class Arrondissement(models.Model):
    """ARRONDISSEMENTS - Subdivision administrative d'une ville."""

    nom = models.CharField(max_length=255)
    code = models.CharField(max_length=10, blank=True)
    ville = models.ForeignKey(
        Ville, on_delete=models.PROTECT, related_name="arrondissements"
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "arrondissements"
        ordering = ("nom",)

    def __str__(self) -> str:
        return f"{self.nom} ({self.ville.nom})"


class Mairie(models.Model):
    """
    MAIRIES - Mairie, unité de cloisonnement des données (tenant).

    Porte le compteur des actes de mariage : ``dernier_numero_acte`` n'est
    modifié que par ``apps.etat_civil.services.numerotation`` sous verrou.
    """

    nom = models.CharField(max_length=255)
    code = models.CharField(max_length=20, unique=True)
    arrondissement = models.ForeignKey(
        Arrondissement,
        on_delete=models.PROTECT,
        related_name="mairies",
        null=True,
        blank=True,
    )
    adresse = models.CharField(max_length=500, blank=True)
    telephone = models.CharField(max_length=50, blank=True)
    email = models.EmailField(blank=True)
    logo = models.CharField(max_length=500, blank=True)
    cachet = models.CharField(max_length=500, blank=True)
    langue = models.CharField(max_length=5, default="fr")
    prefixe_acte = models.CharField(max_length=20, blank=True)
    dernier_numero_acte = models.PositiveIntegerField(default=0)
    annee_dernier_numero = models.PositiveIntegerField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "mairies"
        ordering = ("nom",)

    def __str__(self) -> str:
        return f"{self.nom} [{self.code}]"


auditlog.register(Ville)
auditlog.register(Arrondissement)
auditlog.register(Mairie, exclude_fields=["dernier_numero_acte", "annee_dernier_numero"])
