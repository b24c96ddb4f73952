from __future__ import annotations

from django.apps import AppConfig


class EtatCivilConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.etat_civil"
    label = "etat_civil"
    verbose_name = "État civil - mariages"
