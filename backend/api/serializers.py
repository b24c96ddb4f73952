from __future__ import annotations

from django.contrib.auth import password_validation
from rest_framework import serializers

from apps.etat_civil.models import ActeMariage, Mariage
from apps.geographie.models import Arrondissement, Mairie, Ville
from identity.models import AuditLog, Role, User


class VilleSerializer(serializers.ModelSerializer):
    arrondissements_count = serializers.SerializerMethodField()

    class Meta:
        model = Ville
        fields = ("id", "nom", "code", "region", "is_active", "arrondissements_count", "created_at", "updated_at")
        read_only_fields = ("created_at", "updated_at")

    def get_arrondissements_count(self, obj: Ville) -> int:
        count = getattr(obj, "arrondissements_count", None)
        return count if count is not None else obj.arrondissements.count()


class ArrondissementSerializer(serializers.ModelSerializer):
    ville_nom = serializers.CharField(source="ville.nom", read_only=True)
    ville = serializers.PrimaryKeyRelatedField(queryset=Ville.objects.all())

    class Meta:
        model = Arrondissement
        fields = ("id", "nom", "code", "ville", "ville_nom", "is_active", "created_at", "updated_at")
        read_only_fields = ("created_at", "updated_at")


class MairieSerializer(serializers.ModelSerializer):
    arrondissement = serializers.PrimaryKeyRelatedField(
        queryset=Arrondissement.objects.all(), allow_null=True, required=False
    )
    arrondissement_nom = serializers.CharField(source="arrondissement.nom", read_only=True, default=None)
    ville_nom = serializers.CharField(source="arrondissement.ville.nom", read_only=True, default=None)

    class Meta:
        model = Mairie
        fields = (
            "id",
            "nom",
            "code",
            "arrondissement",
            "arrondissement_nom",
            "ville_nom",
            "adresse",
            "telephone",
            "email",
            "logo",
            "cachet",
            "langue",
            "prefixe_acte",
            "dernier_numero_acte",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("dernier_numero_acte", "created_at", "updated_at")


class UserSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, required=False, min_length=6, trim_whitespace=False)
    mairie = serializers.PrimaryKeyRelatedField(
        queryset=Mairie.objects.all(), allow_null=True, required=False
    )
    mairie_nom = serializers.CharField(source="mairie.nom", read_only=True, default=None)

    class Meta:
        model = User
        fields = (
            "id",
            "full_name",
            "email",
            "password",
            "telephone",
            "role",
            "mairie",
            "mairie_nom",
            "avatar",
            "is_active",
            "last_login",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("is_active", "last_login", "created_at", "updated_at")
        extra_kwargs = {"email": {"validators": []}}

    def validate_email(self, value: str) -> str:
        value = value.strip().lower()
        existing = User.objects.filter(email__iexact=value)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError("Cet email est déjà utilisé")
        return value

    def validate(self, attrs):
        role = attrs.get("role", getattr(self.instance, "role", Role.AGENT))
        mairie = attrs.get("mairie", getattr(self.instance, "mairie", None))
        if self.instance is None and not attrs.get("password"):
            raise serializers.ValidationError({"password": "Ce champ est obligatoire."})
        if role == Role.SUPER_ADMIN:
            attrs["mairie"] = None
        elif mairie is None:
            raise serializers.ValidationError({"mairie": "Une mairie est obligatoire pour ce rôle."})
        return attrs

    def create(self, validated_data):
        password = validated_data.pop("password")
        return User.objects.create_user(password=password, **validated_data)

    def update(self, instance: User, validated_data):
        password = validated_data.pop("password", None)
        for field, value in validated_data.items():
            setattr(instance, field, value)
        if password:
            instance.set_password(password)
        instance.save()
        return instance


class UserResumeSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ("id", "full_name", "email", "role", "last_login")


class ActeResumeSerializer(serializers.ModelSerializer):
    class Meta:
        model = ActeMariage
        fields = ("id", "numero_acte", "statut", "annee", "numero_ordre")


class MariageSerializer(serializers.ModelSerializer):
    mairie = serializers.PrimaryKeyRelatedField(queryset=Mairie.objects.all(), required=False)
    mairie_nom = serializers.CharField(source="mairie.nom", read_only=True)
    epoux_nom_complet = serializers.CharField(read_only=True)
    epouse_nom_complet = serializers.CharField(read_only=True)
    acte = serializers.SerializerMethodField()
    created_by_nom = serializers.CharField(source="created_by.full_name", read_only=True, default=None)

    class Meta:
        model = Mariage
        fields = "__all__"
        read_only_fields = ("created_by", "updated_by", "created_at", "updated_at")
        extra_kwargs = {
            "epoux_nom": {"min_length": 2},
            "epoux_prenom": {"min_length": 2},
            "epoux_lieu_naissance": {"min_length": 2},
            "epouse_nom": {"min_length": 2},
            "epouse_prenom": {"min_length": 2},
            "epouse_lieu_naissance": {"min_length": 2},
        }

    def validate(self, attrs):
        if self.instance is None and attrs.get("mairie") is None:
            raise serializers.ValidationError({"mairie": "Ce champ est obligatoire."})
        return attrs

    def get_acte(self, obj: Mariage):
        acte = obj.acte if hasattr(obj, "acte") else None
        return ActeResumeSerializer(acte).data if acte else None


class MariageResumeSerializer(serializers.ModelSerializer):
    epoux_nom_complet = serializers.CharField(read_only=True)
    epouse_nom_complet = serializers.CharField(read_only=True)

    class Meta:
        model = Mariage
        fields = ("id", "epoux_nom_complet", "epouse_nom_complet", "date_mariage", "statut", "mairie", "created_at")


class ActeMariageSerializer(serializers.ModelSerializer):
    mariage = MariageResumeSerializer(read_only=True)
    mairie_nom = serializers.CharField(source="mairie.nom", read_only=True)
    valide_par_nom = serializers.CharField(source="valide_par.full_name", read_only=True, default=None)

    class Meta:
        model = ActeMariage
        fields = (
            "id",
            "numero_acte",
            "annee",
            "numero_ordre",
            "mariage",
            "mairie",
            "mairie_nom",
            "contenu",
            "fichier_pdf",
            "statut",
            "date_validation",
            "valide_par",
            "valide_par_nom",
            "created_by",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class AuditLogSerializer(serializers.ModelSerializer):
    user_nom = serializers.CharField(source="user.full_name", read_only=True, default=None)

    class Meta:
        model = AuditLog
        fields = (
            "id",
            "action",
            "entity_type",
            "entity_id",
            "description",
            "user",
            "user_nom",
            "mairie",
            "created_at",
        )
        read_only_fields = fields


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(trim_whitespace=False)


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(trim_whitespace=False)
    new_password = serializers.CharField(trim_whitespace=False, min_length=6)

    def validate_new_password(self, value: str) -> str:
        password_validation.validate_password(value, user=self.context.get("user"))
        return value


class ForgotPasswordSerializer(serializers.Serializer):
    email = serializers.EmailField()


class ResetPasswordSerializer(serializers.Serializer):
    uid = serializers.CharField()
    token = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False, min_length=6)

    def validate_password(self, value: str) -> str:
        password_validation.validate_password(value)
        return value
