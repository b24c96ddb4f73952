from __future__ import annotations

from django.apps import AppConfig


class GeographieConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.geographie"
    label = "geographie"
    verbose_name = "Géographie administrative"
