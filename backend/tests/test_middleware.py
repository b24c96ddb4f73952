"""Tests pour core/middleware.py"""
from django.http import HttpResponse
from django.test import RequestFactory

from core.middleware import RequestContextMiddleware


def _run(request):
    captured = {}

    def get_response(req):
        captured["ip"] = req.client_ip
        captured["ua"] = req.client_user_agent
        return HttpResponse("ok")

    response = RequestContextMiddleware(get_response)(request)
    assert response.status_code == 200
    return captured


class TestRequestContextMiddleware:
    """Contexte client injecté pour le journal d'audit"""

    def test_adresse_directe(self):
        """Sans proxy, l'IP est REMOTE_ADDR."""
        request = RequestFactory().get("/", REMOTE_ADDR="192.168.1.10", HTTP_USER_AGENT="Firefox")
        assert _run(request) == {"ip": "192.168.1.10", "ua": "Firefox"}

    def test_premiere_adresse_du_proxy(self):
        """La première adresse de X-Forwarded-For est retenue."""
        request = RequestFactory().get(
            "/", REMOTE_ADDR="10.0.0.1", HTTP_X_FORWARDED_FOR="41.202.219.5, 10.0.0.1"
        )
        assert _run(request)["ip"] == "41.202.219.5"

    def test_en_tete_proxy_vide(self):
        """Un X-Forwarded-For vide retombe sur REMOTE_ADDR."""
        request = RequestFactory().get("/", REMOTE_ADDR="10.0.0.1", HTTP_X_FORWARDED_FOR=" ")
        assert _run(request)["ip"] == "10.0.0.1"

    def test_user_agent_tronque(self):
        """Le user-agent est tronqué à 512 caractères."""
        request = RequestFactory().get("/", HTTP_USER_AGENT="x" * 600)
        assert len(_run(request)["ua"]) == 512

    def test_user_agent_absent(self):
        """Sans user-agent, la valeur est vide."""
        assert _run(RequestFactory().get("/"))["ua"] == ""
