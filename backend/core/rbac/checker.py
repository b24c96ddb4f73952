from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Optional, Set

SUPER_ADMIN = "super_admin"
ADMIN_MAIRIE = "admin_mairie"
AGENT = "agent"
CONSULTATION = "consultation"

ALL_ROLES = (SUPER_ADMIN, ADMIN_MAIRIE, AGENT, CONSULTATION)
ADMINS = (SUPER_ADMIN, ADMIN_MAIRIE)
OPERATORS = (SUPER_ADMIN, ADMIN_MAIRIE, AGENT)


@dataclass(frozen=True)
class ActionDecision:
    allowed: bool
    restricted_fields: Set[str]


class RBACChecker:
    """
    Table des capacités : ressource -> action -> rôles autorisés.

    Une ressource peut aussi déclarer ``fields`` (champ -> rôles autorisés à
    l'écrire) et ``assignable_roles`` (rôle -> rôles qu'il peut attribuer).
    """

    def __init__(self, matrix: Optional[Dict[str, Dict[str, object]]] = None):
        self._matrix = matrix or self._default_matrix()

    def can(self, *, role: Optional[str], action: str, resource: str) -> bool:
        if not role:
            return False
        allowed_roles = self._matrix.get(resource, {}).get(action, [])
        if not isinstance(allowed_roles, (list, tuple, set, frozenset)):
            return False
        return role in set(allowed_roles)

    def decision(self, *, role: Optional[str], action: str, resource: str) -> ActionDecision:
        allowed = self.can(role=role, action=action, resource=resource)
        restricted = self._restricted_fields(role=role, resource=resource)
        return ActionDecision(allowed=allowed, restricted_fields=restricted)

    def assignable_roles(self, *, role: Optional[str], resource: str = "USER") -> FrozenSet[str]:
        rules = self._matrix.get(resource, {}).get("assignable_roles", {})
        if not isinstance(rules, dict) or not role:
            return frozenset()
        return frozenset(rules.get(role, ()))

    def _restricted_fields(self, *, role: Optional[str], resource: str) -> Set[str]:
        field_roles = self._matrix.get(resource, {}).get("fields", {})
        if not isinstance(field_roles, dict):
            return set()
        restricted: Set[str] = set()
        for field, roles in field_roles.items():
            roles_set = set(roles) if isinstance(roles, Iterable) else set()
            if role not in roles_set:
                restricted.add(str(field))
        return restricted

    @staticmethod
    def _default_matrix() -> Dict[str, Dict[str, object]]:
        geo_rules = {
            "read": ALL_ROLES,
            "create": (SUPER_ADMIN,),
            "update": (SUPER_ADMIN,),
            "delete": (SUPER_ADMIN,),
        }
        return {
            "USER": {
                "read": ADMINS,
                "create": ADMINS,
                "update": ADMINS,
                "delete": ADMINS,
                "toggle_status": ADMINS,
                "assignable_roles": {
                    SUPER_ADMIN: ALL_ROLES,
                    ADMIN_MAIRIE: (AGENT, CONSULTATION),
                },
                "fields": {"mairie": (SUPER_ADMIN,)},
            },
            "VILLE": dict(geo_rules),
            "ARRONDISSEMENT": dict(geo_rules),
            "MAIRIE": {
                "read": ALL_ROLES,
                "stats": ALL_ROLES,
                "create": (SUPER_ADMIN,),
                "update": ADMINS,
                "delete": (SUPER_ADMIN,),
                "fields": {
                    "nom": (SUPER_ADMIN,),
                    "code": (SUPER_ADMIN,),
                    "arrondissement": (SUPER_ADMIN,),
                    "langue": (SUPER_ADMIN,),
                    "is_active": (SUPER_ADMIN,),
                },
            },
            "MARIAGE": {
                "read": ALL_ROLES,
                "create": OPERATORS,
                "update": OPERATORS,
                "delete": ADMINS,
                "validate": ADMINS,
                "fields": {
                    "statut": (SUPER_ADMIN,),
                    "mairie": (SUPER_ADMIN,),
                },
            },
            "ACTE_MARIAGE": {
                "read": ALL_ROLES,
                "generate": OPERATORS,
                "print": OPERATORS,
                "validate": ADMINS,
                "cancel": (SUPER_ADMIN,),
            },
            "DASHBOARD": {
                "read": ALL_ROLES,
            },
        }


default_checker = RBACChecker()
