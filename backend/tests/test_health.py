"""Tests pour api/health.py"""
from unittest.mock import patch

import pytest
from django.db import OperationalError


@pytest.mark.django_db
class TestHealth:
    def test_base_joignable(self, client):
        """Base joignable : 200 et statut healthy."""
        response = client.get("/health/")
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "healthy"

    def test_base_injoignable(self, client):
        """Base injoignable : 503."""
        with patch("api.health.connection.ensure_connection", side_effect=OperationalError("down")):
            response = client.get("/health/")
        assert response.status_code == 503
        body = response.json()
        assert body["success"] is False
        assert body["data"]["db"] == "error"
