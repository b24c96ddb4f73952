from __future__ import annotations

import logging
from typing import Iterable, Optional

from django.contrib import admin, messages
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.db.models import QuerySet

from .models import AuditLog, Role, User

logger = logging.getLogger(__name__)


class MairieRoleFilter(admin.SimpleListFilter):
    title = "rôle"
    parameter_name = "role"

    def lookups(self, request, model_admin):  # type: ignore[override]
        return Role.choices

    def queryset(self, request, queryset: QuerySet[User]) -> QuerySet[User]:
        value = self.value()
        if not value:
            return queryset
        return queryset.filter(role=value)


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    ordering = ("full_name",)
    list_display = ("email", "full_name", "role", "mairie", "is_active", "last_login")
    search_fields = ("email", "full_name", "telephone")
    list_filter = ("is_active", MairieRoleFilter, "mairie")
    readonly_fields = ("last_login", "created_at", "updated_at")
    filter_horizontal = ()
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Profil", {"fields": ("full_name", "telephone", "avatar")}),
        ("Accès", {"fields": ("role", "mairie", "is_active", "is_superuser")}),
        ("Dates", {"fields": ("last_login", "created_at", "updated_at")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "full_name", "role", "mairie", "password1", "password2"),
            },
        ),
    )
    actions = ["deactivate_accounts"]

    def deactivate_accounts(self, request, queryset: QuerySet[User]) -> None:
        count = queryset.exclude(pk=request.user.pk).update(is_active=False)
        logger.warning("Désactivation de %s compte(s) via l'admin", count)
        self.message_user(
            request, f"{count} compte(s) désactivé(s).", level=messages.WARNING
        )

    deactivate_accounts.short_description = "Désactiver les comptes sélectionnés"


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "action", "entity_type", "entity_id", "user", "mairie", "ip_address")
    search_fields = ("entity_type", "description", "user__email")
    list_filter = ("action", "entity_type", "mairie")
    date_hierarchy = "created_at"

    def get_readonly_fields(self, request, obj: Optional[AuditLog] = None) -> Iterable[str]:
        return [field.name for field in self.model._meta.fields]

    def has_add_permission(self, request) -> bool:
        return False

    def has_change_permission(self, request, obj: Optional[AuditLog] = None) -> bool:
        return False

    def has_delete_permission(self, request, obj: Optional[AuditLog] = None) -> bool:
        return False
