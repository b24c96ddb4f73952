from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, Optional

from django.core.serializers.json import DjangoJSONEncoder
from django.db import DatabaseError, transaction

from .models import AuditLog

logger = logging.getLogger(__name__)


def snapshot(instance: Any, fields: Iterable[str]) -> Dict[str, Any]:
    """Extrait les champs d'affichage d'une instance sous forme JSON-compatible."""
    values = {field: getattr(instance, field, None) for field in fields}
    return json.loads(json.dumps(values, cls=DjangoJSONEncoder))


def client_meta(request) -> Dict[str, Any]:
    if request is None:
        return {"ip_address": None, "user_agent": ""}
    return {
        "ip_address": getattr(request, "client_ip", None),
        "user_agent": getattr(request, "client_user_agent", ""),
    }


def log_action(
    *,
    action: str,
    entity_type: str,
    entity_id: Optional[int] = None,
    user=None,
    mairie_id: Optional[int] = None,
    old_values: Optional[Dict[str, Any]] = None,
    new_values: Optional[Dict[str, Any]] = None,
    description: str = "",
    request=None,
) -> Optional[AuditLog]:
    """
    Ajoute une entrée au journal d'audit.

    L'écriture se fait dans son propre savepoint : un échec est journalisé
    et n'annule jamais l'opération métier qui l'a déclenchée.
    """
    actor = user if user is not None and getattr(user, "pk", None) else None
    if mairie_id is None and actor is not None:
        mairie_id = actor.mairie_id
    try:
        with transaction.atomic():
            return AuditLog.objects.create(
                user=actor,
                mairie_id=mairie_id,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                old_values=old_values,
                new_values=new_values,
                description=description,
                **client_meta(request),
            )
    except (DatabaseError, TypeError, ValueError) as exc:
        logger.warning(
            "Échec écriture audit %s %s:%s (%s)", action, entity_type, entity_id, exc
        )
        return None
