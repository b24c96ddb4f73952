from __future__ import annotations

from django.contrib import admin

from .models import ActeMariage, Mariage


class ActeMariageInline(admin.StackedInline):
    model = ActeMariage
    extra = 0
    can_delete = False
    fields = ("numero_acte", "statut", "date_validation", "valide_par")
    readonly_fields = fields


@admin.register(Mariage)
class MariageAdmin(admin.ModelAdmin):
    list_display = ("id", "epoux_nom", "epouse_nom", "date_mariage", "mairie", "statut")
    search_fields = ("epoux_nom", "epoux_prenom", "epouse_nom", "epouse_prenom")
    list_filter = ("statut", "mairie")
    date_hierarchy = "date_mariage"
    readonly_fields = ("created_by", "updated_by", "created_at", "updated_at")
    inlines = (ActeMariageInline,)


@admin.register(ActeMariage)
class ActeMariageAdmin(admin.ModelAdmin):
    list_display = ("numero_acte", "mairie", "annee", "numero_ordre", "statut", "date_validation")
    search_fields = ("numero_acte",)
    list_filter = ("statut", "annee", "mairie")
    readonly_fields = (
        "mariage",
        "mairie",
        "numero_acte",
        "annee",
        "numero_ordre",
        "contenu",
        "date_validation",
        "valide_par",
        "created_by",
        "updated_by",
    )

    def has_delete_permission(self, request, obj=None) -> bool:
        return False
