from __future__ import annotations

from django.contrib import admin

from .models import Arrondissement, Mairie, Ville


class ArrondissementInline(admin.TabularInline):
    model = Arrondissement
    extra = 0
    fields = ("nom", "code", "is_active")


@admin.register(Ville)
class VilleAdmin(admin.ModelAdmin):
    list_display = ("nom", "code", "region", "is_active")
    search_fields = ("nom", "code", "region")
    list_filter = ("is_active", "region")
    inlines = (ArrondissementInline,)


@admin.register(Arrondissement)
class ArrondissementAdmin(admin.ModelAdmin):
    list_display = ("nom", "code", "ville", "is_active")
    search_fields = ("nom", "code", "ville__nom")
    list_filter = ("is_active", "ville")


@admin.register(Mairie)
class MairieAdmin(admin.ModelAdmin):
    list_display = ("nom", "code", "arrondissement", "prefixe_acte", "dernier_numero_acte", "is_active")
    search_fields = ("nom", "code", "arrondissement__nom")
    list_filter = ("is_active", "langue")
    readonly_fields = ("dernier_numero_acte", "annee_dernier_numero", "created_at", "updated_at")
