"""Tests pour identity/audit.py et le journal en ajout seul"""
import datetime
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.test import RequestFactory

from identity.audit import client_meta, log_action, snapshot
from identity.models import AppendOnlyError, AuditAction, AuditLog


@pytest.mark.django_db
class TestAppendOnly:
    def test_modification_interdite(self, agent):
        """Une entrée existante ne peut pas être réenregistrée."""
        log = log_action(action=AuditAction.LOGIN, entity_type="User", entity_id=agent.pk, user=agent)
        log.description = "modifié"
        with pytest.raises(AppendOnlyError):
            log.save()

    def test_suppression_interdite(self, agent):
        """Une entrée ne peut pas être supprimée."""
        log = log_action(action=AuditAction.LOGIN, entity_type="User", entity_id=agent.pk, user=agent)
        with pytest.raises(AppendOnlyError):
            log.delete()
        assert AuditLog.objects.filter(pk=log.pk).exists()

    def test_operations_de_masse_interdites(self, agent):
        """Les update et delete sur queryset sont bloqués."""
        log_action(action=AuditAction.LOGIN, entity_type="User", entity_id=agent.pk, user=agent)
        with pytest.raises(AppendOnlyError):
            AuditLog.objects.all().update(description="x")
        with pytest.raises(AppendOnlyError):
            AuditLog.objects.all().delete()
        assert AuditLog.objects.count() == 1

    def test_suppression_de_l_auteur_conserve_l_entree(self, agent):
        """Supprimer l'auteur garde l'entrée, sans utilisateur."""
        log = log_action(action=AuditAction.LOGIN, entity_type="User", entity_id=agent.pk, user=agent)
        agent.delete()
        log = AuditLog.objects.get(pk=log.pk)
        assert log.user_id is None


@pytest.mark.django_db
class TestLogAction:
    def test_mairie_deduite_de_l_utilisateur(self, agent, mairie):
        """La mairie de l'entrée vient de l'utilisateur."""
        log = log_action(action=AuditAction.CREATE, entity_type="Mariage", entity_id=1, user=agent)
        assert log.mairie_id == mairie.pk

    def test_super_admin_sans_mairie(self, super_admin):
        """Une action du super_admin n'est rattachée à aucune mairie."""
        log = log_action(action=AuditAction.CREATE, entity_type="Ville", entity_id=1, user=super_admin)
        assert log.mairie_id is None
        assert log.user_id == super_admin.pk

    def test_metadonnees_de_la_requete(self, agent):
        """L'IP et le user-agent sont repris de la requête."""
        request = RequestFactory().get("/")
        request.client_ip = "10.0.0.5"
        request.client_user_agent = "pytest"
        log = log_action(action=AuditAction.LOGIN, entity_type="User", user=agent, request=request)
        assert log.ip_address == "10.0.0.5"
        assert log.user_agent == "pytest"

    def test_echec_d_ecriture_journalise(self, agent, caplog):
        """Un échec d'écriture est journalisé sans lever d'exception."""
        with patch.object(AuditLog.objects, "create", side_effect=DatabaseError("boom")):
            result = log_action(action=AuditAction.LOGIN, entity_type="User", user=agent)
        assert result is None
        assert "Échec écriture audit" in caplog.text


class TestHelpers:
    def test_snapshot_serialise_les_dates(self):
        """Le snapshot sérialise les dates et tolère les champs absents."""
        class Objet:
            date_mariage = datetime.date(2024, 6, 15)
            nom = "Mbarga"

        assert snapshot(Objet(), ("date_mariage", "nom", "absent")) == {
            "date_mariage": "2024-06-15",
            "nom": "Mbarga",
            "absent": None,
        }

    def test_client_meta_sans_requete(self):
        """Sans requête, les métadonnées client sont vides."""
        assert client_meta(None) == {"ip_address": None, "user_agent": ""}
