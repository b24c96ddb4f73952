"""Tests pour core/decorators.py"""
import json

import pytest
from django.test import RequestFactory
from rest_framework.response import Response

from core.decorators import with_capability


@with_capability("ACTE_MARIAGE", "cancel")
def vue_annulation(request):
    return Response({"success": True})


def _request(role):
    request = RequestFactory().post("/")
    request.user = type("Utilisateur", (), {"role": role})()
    return request


class TestWithCapability:
    def test_role_autorise(self):
        """Le super_admin passe le contrôle d'annulation."""
        response = vue_annulation(_request("super_admin"))
        assert response.status_code == 200

    @pytest.mark.parametrize("role", ["admin_mairie", "agent", "consultation", None])
    def test_role_refuse(self, role):
        """Les autres rôles reçoivent un 403 dans l'enveloppe."""
        response = vue_annulation(_request(role))
        assert response.status_code == 403
        assert response.data == {"success": False, "message": "Accès non autorisé"}

    def test_nom_de_vue_conserve(self):
        """Le décorateur conserve le nom de la vue."""
        assert vue_annulation.__name__ == "vue_annulation"


@pytest.mark.django_db
def test_tableau_de_bord_refuse_sans_role(client_for, agent):
    """Un utilisateur sans rôle n'accède pas au tableau de bord."""
    agent.role = ""
    response = client_for(agent).get("/api/dashboard/")
    assert response.status_code == 403
    assert json.loads(response.content)["success"] is False
