from __future__ import annotations

from typing import Dict, Optional

from rest_framework.permissions import BasePermission

from core.rbac.checker import RBACChecker, default_checker

VIEWSET_ACTIONS: Dict[str, str] = {
    "list": "read",
    "retrieve": "read",
    "create": "create",
    "update": "update",
    "partial_update": "update",
    "destroy": "delete",
}


def capability_action(view) -> Optional[str]:
    """Action RBAC correspondant à l'action du viewset (``rbac_actions`` pour les actions personnalisées)."""
    action = getattr(view, "action", None)
    if action is None:
        return None
    custom = getattr(view, "rbac_actions", {}) or {}
    return custom.get(action) or VIEWSET_ACTIONS.get(action, action)


class CapabilityPermission(BasePermission):
    """Porte unique d'autorisation : consulte la table des capacités pour chaque action."""

    message = "Accès non autorisé"
    checker: RBACChecker = default_checker

    def has_permission(self, request, view) -> bool:  # type: ignore[override]
        if request.method == "OPTIONS":
            return True
        user = request.user
        if not user or not user.is_authenticated:
            return False
        resource = getattr(view, "rbac_resource", None)
        action = capability_action(view)
        if not resource or not action:
            return False
        return self.checker.can(role=getattr(user, "role", None), action=action, resource=resource)
