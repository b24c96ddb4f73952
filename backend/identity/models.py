from __future__ import annotations

from auditlog.registry import auditlog
from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.exceptions import ValidationError
from django.db import models


class Role(models.TextChoices):
    SUPER_ADMIN = "super_admin", "Super administrateur"
    ADMIN_MAIRIE = "admin_mairie", "Administrateur de mairie"
    AGENT = "agent", "Agent d'état civil"
    CONSULTATION = "consultation", "Consultation"


class UserManager(BaseUserManager):
    """Gestionnaire des utilisateurs authentifiés par email."""

    use_in_migrations = True

    def create_user(self, email: str, password: str | None = None, **extra_fields):
        if not email:
            raise ValueError("L'adresse email est obligatoire")
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.full_clean(exclude=["password"])
        user.save(using=self._db)
        return user

    def create_superuser(self, email: str, password: str | None = None, **extra_fields):
        extra_fields.setdefault("role", Role.SUPER_ADMIN)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("full_name", "Super Administrateur")
        extra_fields["mairie"] = None
        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """USERS - Compte d'accès, rattaché à une mairie sauf pour le super_admin."""

    full_name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    telephone = models.CharField(max_length=50, blank=True)
    role = models.CharField(max_length=20, choices=Role.choices, default=Role.AGENT)
    mairie = models.ForeignKey(
        "geographie.Mairie",
        on_delete=models.PROTECT,
        related_name="users",
        null=True,
        blank=True,
    )
    avatar = models.CharField(max_length=500, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = ["full_name"]

    class Meta:
        db_table = "users"
        ordering = ("full_name",)

    def __str__(self) -> str:
        return f"{self.full_name} <{self.email}>"

    @property
    def is_staff(self) -> bool:
        return self.role == Role.SUPER_ADMIN

    @property
    def is_super_admin(self) -> bool:
        return self.role == Role.SUPER_ADMIN

    def clean(self) -> None:
        super().clean()
        if self.role == Role.SUPER_ADMIN and self.mairie_id is not None:
            raise ValidationError({"mairie": "Un super administrateur n'est rattaché à aucune mairie."})
        if self.role != Role.SUPER_ADMIN and self.mairie_id is None:
            raise ValidationError({"mairie": "Une mairie est obligatoire pour ce rôle."})


class AuditAction(models.TextChoices):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    VALIDATE = "VALIDATE"
    PRINT = "PRINT"
    CANCEL = "CANCEL"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"
    ACTIVATE = "ACTIVATE"
    DEACTIVATE = "DEACTIVATE"
    PASSWORD_CHANGE = "PASSWORD_CHANGE"
    PASSWORD_RESET_REQUEST = "PASSWORD_RESET_REQUEST"


class AppendOnlyError(Exception):
    """Levée sur toute tentative de modifier ou supprimer une entrée du journal."""


class AuditLogQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise AppendOnlyError("Le journal d'audit n'accepte que des ajouts.")

    def delete(self):
        raise AppendOnlyError("Le journal d'audit n'accepte que des ajouts.")


class AuditLog(models.Model):
    """AUDIT_LOGS - Journal applicatif en ajout seul."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name="audit_logs",
        null=True,
        blank=True,
    )
    mairie = models.ForeignKey(
        "geographie.Mairie",
        on_delete=models.SET_NULL,
        related_name="audit_logs",
        null=True,
        blank=True,
    )
    action = models.CharField(max_length=32, choices=AuditAction.choices)
    entity_type = models.CharField(max_length=100)
    entity_id = models.PositiveBigIntegerField(null=True, blank=True)
    old_values = models.JSONField(null=True, blank=True)
    new_values = models.JSONField(null=True, blank=True)
    description = models.TextField(blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    objects = AuditLogQuerySet.as_manager()

    class Meta:
        db_table = "audit_logs"
        ordering = ("-created_at", "-id")

    def __str__(self) -> str:
        return f"{self.action} {self.entity_type}:{self.entity_id}"

    def save(self, *args, **kwargs) -> None:
        if self.pk is not None and not self._state.adding:
            raise AppendOnlyError("Le journal d'audit n'accepte que des ajouts.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise AppendOnlyError("Le journal d'audit n'accepte que des ajouts.")


auditlog.register(User, exclude_fields=["password", "last_login"])
