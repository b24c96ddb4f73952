from __future__ import annotations

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.hashers import make_password
from django.contrib.auth.tokens import default_token_generator
from django.core.mail import send_mail
from django.utils import timezone
from django.utils.encoding import force_bytes, force_str
from django.utils.http import urlsafe_base64_decode, urlsafe_base64_encode
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from core.exceptions import BusinessRuleError
from identity.audit import log_action
from identity.models import AuditAction

from .serializers import (
    ChangePasswordSerializer,
    ForgotPasswordSerializer,
    LoginSerializer,
    ResetPasswordSerializer,
    UserSerializer,
)
from .tokens import issue_token

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Email ou mot de passe incorrect"
FORGOT_PASSWORD_MESSAGE = (
    "Si cet email existe dans notre système, vous recevrez un lien de réinitialisation"
)


@api_view(["POST"])
@permission_classes([AllowAny])
def login(request: Request) -> Response:
    """
    POST /api/auth/login/ {email, password} -> {user, token}

    Même message pour un compte inconnu et un mot de passe erroné ; un
    compte désactivé est refusé après vérification du mot de passe.
    """
    serializer = LoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    email = serializer.validated_data["email"].strip().lower()
    password = serializer.validated_data["password"]

    user_model = get_user_model()
    user = user_model.objects.filter(email__iexact=email).select_related("mairie").first()
    if user is None:
        # Égalise le temps de réponse avec le cas « mot de passe erroné ».
        make_password(password)
        logger.warning("Échec de connexion pour %s", email)
        raise AuthenticationFailed(INVALID_CREDENTIALS)
    if not user.check_password(password):
        logger.warning("Échec de connexion pour %s", email)
        raise AuthenticationFailed(INVALID_CREDENTIALS)
    if not user.is_active:
        raise AuthenticationFailed("Votre compte est désactivé. Contactez l'administrateur.")

    user.last_login = timezone.now()
    user.save(update_fields=["last_login"])
    token = issue_token(user)
    log_action(
        action=AuditAction.LOGIN,
        entity_type="User",
        entity_id=user.pk,
        user=user,
        description=f"Connexion de {user.email}",
        request=request,
    )
    logger.info("Connexion de %s", user.email)
    return Response(
        {
            "success": True,
            "message": "Connexion réussie",
            "data": {"user": UserSerializer(user).data, "token": token},
        },
        status=status.HTTP_200_OK,
    )


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def logout(request: Request) -> Response:
    """POST /api/auth/logout/ : révoque le jeton présenté."""
    if request.auth is not None and hasattr(request.auth, "blacklist"):
        request.auth.blacklist()
    log_action(
        action=AuditAction.LOGOUT,
        entity_type="User",
        entity_id=request.user.pk,
        user=request.user,
        description=f"Déconnexion de {request.user.email}",
        request=request,
    )
    return Response({"success": True, "message": "Déconnexion réussie"})


@api_view(["GET"])
@permission_classes([IsAuthenticated])
def me(request: Request) -> Response:
    return Response({"success": True, "data": UserSerializer(request.user).data})


@api_view(["POST"])
@permission_classes([IsAuthenticated])
def change_password(request: Request) -> Response:
    user = request.user
    serializer = ChangePasswordSerializer(data=request.data, context={"user": user})
    serializer.is_valid(raise_exception=True)
    if not user.check_password(serializer.validated_data["current_password"]):
        raise BusinessRuleError("Mot de passe actuel incorrect")

    user.set_password(serializer.validated_data["new_password"])
    user.save(update_fields=["password", "updated_at"])
    log_action(
        action=AuditAction.PASSWORD_CHANGE,
        entity_type="User",
        entity_id=user.pk,
        user=user,
        description="Changement de mot de passe",
        request=request,
    )
    return Response({"success": True, "message": "Mot de passe modifié avec succès"})


@api_view(["POST"])
@permission_classes([AllowAny])
def forgot_password(request: Request) -> Response:
    """Réponse identique que l'email existe ou non."""
    serializer = ForgotPasswordSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    email = serializer.validated_data["email"].strip().lower()

    user = get_user_model().objects.filter(email__iexact=email, is_active=True).first()
    if user is not None:
        uid = urlsafe_base64_encode(force_bytes(user.pk))
        token = default_token_generator.make_token(user)
        link = f"{settings.FRONTEND_URL.rstrip('/')}/reset-password?uid={uid}&token={token}"
        send_mail(
            "Réinitialisation de votre mot de passe",
            f"Bonjour {user.full_name},\n\nPour réinitialiser votre mot de passe : {link}\n",
            settings.DEFAULT_FROM_EMAIL,
            [user.email],
            fail_silently=True,
        )
        log_action(
            action=AuditAction.PASSWORD_RESET_REQUEST,
            entity_type="User",
            entity_id=user.pk,
            user=user,
            description="Demande de réinitialisation du mot de passe",
            request=request,
        )
    return Response({"success": True, "message": FORGOT_PASSWORD_MESSAGE})


@api_view(["POST"])
@permission_classes([AllowAny])
def reset_password(request: Request) -> Response:
    serializer = ResetPasswordSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    user_model = get_user_model()
    try:
        pk = force_str(urlsafe_base64_decode(serializer.validated_data["uid"]))
        user = user_model.objects.get(pk=pk, is_active=True)
    except (TypeError, ValueError, OverflowError, user_model.DoesNotExist):
        user = None
    if user is None or not default_token_generator.check_token(user, serializer.validated_data["token"]):
        raise BusinessRuleError("Lien de réinitialisation invalide ou expiré")

    user.set_password(serializer.validated_data["password"])
    user.save(update_fields=["password", "updated_at"])
    log_action(
        action=AuditAction.PASSWORD_CHANGE,
        entity_type="User",
        entity_id=user.pk,
        user=user,
        description="Réinitialisation du mot de passe",
        request=request,
    )
    return Response({"success": True, "message": "Mot de passe réinitialisé avec succès"})
