from __future__ import annotations

from typing import Optional

from django.http import HttpRequest


def _client_ip(request: HttpRequest) -> Optional[str]:
    """Adresse du client, en tenant compte d'un éventuel proxy."""
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR", "")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.META.get("REMOTE_ADDR") or None


class RequestContextMiddleware:
    """Injecte request.client_ip et request.client_user_agent pour l'audit."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request: HttpRequest):
        request.client_ip = _client_ip(request)
        request.client_user_agent = request.headers.get("User-Agent", "")[:512]
        return self.get_response(request)
