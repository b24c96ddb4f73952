from __future__ import annotations

from functools import wraps
from typing import Callable, TypeVar

from rest_framework import status
from rest_framework.response import Response

from core.rbac.checker import default_checker

F = TypeVar("F", bound=Callable[..., object])


def with_capability(resource: str, action: str = "read") -> Callable[[F], F]:
    """Décorateur pour exiger une capacité de la table RBAC sur une vue fonction DRF."""

    def decorator(view_func: F) -> F:
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            role = getattr(request.user, "role", None)
            if not default_checker.can(role=role, action=action, resource=resource):
                return Response(
                    {"success": False, "message": "Accès non autorisé"},
                    status=status.HTTP_403_FORBIDDEN,
                )
            return view_func(request, *args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
