from __future__ import annotations

import logging
from typing import Any, Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import ProtectedError
from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.views import exception_handler

from apps.etat_civil.exceptions import ActeDejaExistant, EtatCivilError

logger = logging.getLogger(__name__)


class BusinessRuleError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Opération impossible."
    default_code = "business_rule"


class ConflictError(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflit avec l'état actuel de la ressource."
    default_code = "conflict"

    def __init__(self, detail: Optional[str] = None, data: Any = None):
        super().__init__(detail)
        self.data = data


def _translate(exc: Exception) -> Exception:
    if isinstance(exc, ActeDejaExistant):
        from api.serializers import ActeMariageSerializer

        return ConflictError(exc.message, data=ActeMariageSerializer(exc.acte).data)
    if isinstance(exc, EtatCivilError):
        return BusinessRuleError(exc.message)
    if isinstance(exc, ProtectedError):
        return BusinessRuleError("Suppression impossible : des éléments y sont rattachés.")
    if isinstance(exc, DjangoValidationError):
        detail = exc.message_dict if hasattr(exc, "error_dict") else exc.messages
        return ValidationError(detail)
    return exc


def envelope_exception_handler(exc: Exception, context):
    """Gestionnaire DRF : toutes les erreurs sortent au format {success, message}."""
    exc = _translate(exc)
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        response.data = {
            "success": False,
            "message": "Données invalides",
            "errors": response.data,
        }
        return response

    detail = response.data.get("detail") if isinstance(response.data, dict) else response.data
    body = {"success": False, "message": str(detail)}
    extra = getattr(exc, "data", None)
    if extra is not None:
        body["data"] = extra
    if response.status_code >= 500:
        logger.error("Erreur API %s: %s", response.status_code, detail)
    response.data = body
    return response
