from __future__ import annotations

from rest_framework_simplejwt.tokens import AccessToken as BaseAccessToken
from rest_framework_simplejwt.tokens import BlacklistMixin


class AccessToken(BlacklistMixin, BaseAccessToken):
    """Jeton d'accès révocable : la déconnexion l'inscrit en liste noire."""


def issue_token(user) -> str:
    token = AccessToken.for_user(user)
    token["role"] = user.role
    token["mairie_id"] = user.mairie_id
    return str(token)
