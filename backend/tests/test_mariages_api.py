"""Tests pour api/mariages_views.py"""
import datetime

import pytest
from django.db import connection
from django.test.utils import CaptureQueriesContext
from rest_framework import status

from apps.etat_civil.models import Mariage, StatutMariage
from apps.etat_civil.services.actes import generer_acte
from identity.models import AuditAction, AuditLog

from .factories import MARIAGE_PAYLOAD, make_mariage

URL = "/api/mariages/"


def detail_url(mariage, suffix=""):
    return f"{URL}{mariage.pk}/{suffix}"


@pytest.mark.django_db
class TestCreation:
    """POST /api/mariages/"""

    def test_creation_puis_lecture(self, client_for, agent, mairie):
        """Un mariage créé par un agent se relit à l'identique et la création est journalisée."""
        client = client_for(agent)
        response = client.post(URL, MARIAGE_PAYLOAD, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["message"] == "Mariage enregistré avec succès"
        created = response.data["data"]
        assert created["statut"] == StatutMariage.BROUILLON
        assert created["mairie"] == mairie.pk
        assert created["created_by"] == agent.pk
        assert created["regime_matrimonial"] == "Communauté réduite aux acquêts"
        assert created["acte"] is None

        fetched = client.get(f"{URL}{created['id']}/")
        assert fetched.status_code == status.HTTP_200_OK
        for key, value in MARIAGE_PAYLOAD.items():
            assert fetched.data["data"][key] == value

        log = AuditLog.objects.get(action=AuditAction.CREATE, entity_type="Mariage")
        assert log.entity_id == created["id"]
        assert log.mairie_id == mairie.pk
        assert log.new_values["statut"] == StatutMariage.BROUILLON

    def test_mairie_et_statut_imposes_hors_super_admin(self, client_for, agent, mairie, autre_mairie):
        """Pour un agent, la mairie et le statut du corps sont ignorés."""
        payload = dict(MARIAGE_PAYLOAD, mairie=autre_mairie.pk, statut=StatutMariage.VALIDE)
        response = client_for(agent).post(URL, payload, format="json")

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["data"]["mairie"] == mairie.pk
        assert response.data["data"]["statut"] == StatutMariage.BROUILLON

    def test_statut_force_en_brouillon_meme_pour_super_admin(self, client_for, super_admin, mairie):
        """Un super_admin ne peut pas créer un mariage directement validé ou annulé."""
        client = client_for(super_admin)
        for statut in (StatutMariage.VALIDE, StatutMariage.ANNULE):
            payload = dict(MARIAGE_PAYLOAD, mairie=mairie.pk, statut=statut)
            response = client.post(URL, payload, format="json")

            assert response.status_code == status.HTTP_201_CREATED
            assert response.data["data"]["statut"] == StatutMariage.BROUILLON
            assert Mariage.objects.get(pk=response.data["data"]["id"]).statut == StatutMariage.BROUILLON
        assert not AuditLog.objects.filter(action=AuditAction.VALIDATE).exists()

    def test_super_admin_doit_choisir_une_mairie(self, client_for, super_admin, autre_mairie):
        """Le super_admin doit préciser la mairie du mariage."""
        client = client_for(super_admin)
        missing = client.post(URL, MARIAGE_PAYLOAD, format="json")
        assert missing.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "mairie" in missing.data["errors"]

        response = client.post(URL, dict(MARIAGE_PAYLOAD, mairie=autre_mairie.pk), format="json")
        assert response.status_code == status.HTTP_201_CREATED
        assert response.data["data"]["mairie"] == autre_mairie.pk

    def test_champs_obligatoires(self, client_for, agent):
        """Un champ obligatoire manquant donne 422 avec le détail."""
        payload = {key: value for key, value in MARIAGE_PAYLOAD.items() if key != "epoux_nom"}
        response = client_for(agent).post(URL, payload, format="json")
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.data["success"] is False
        assert response.data["message"] == "Données invalides"
        assert "epoux_nom" in response.data["errors"]

    def test_consultation_ne_cree_pas(self, client_for, consultation):
        """Le rôle consultation ne crée pas de mariage."""
        response = client_for(consultation).post(URL, MARIAGE_PAYLOAD, format="json")
        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert not Mariage.objects.exists()


@pytest.mark.django_db
class TestListe:
    def test_cloisonnement_par_mairie(self, client_for, agent, mairie, autre_mairie):
        """L'agent ne liste que sa mairie, même avec ``mairie_id``."""
        make_mariage(mairie)
        make_mariage(autre_mairie)

        response = client_for(agent).get(f"{URL}?mairie_id={autre_mairie.pk}")

        assert response.status_code == status.HTTP_200_OK
        rows = response.data["data"]["data"]
        assert len(rows) == 1
        assert rows[0]["mairie"] == mairie.pk

    def test_super_admin_voit_tout(self, client_for, super_admin, mairie, autre_mairie):
        """Le super_admin liste toutes les mairies ou en filtre une."""
        make_mariage(mairie)
        make_mariage(autre_mairie)
        client = client_for(super_admin)
        assert client.get(URL).data["data"]["meta"]["total"] == 2
        assert client.get(f"{URL}?mairie_id={autre_mairie.pk}").data["data"]["meta"]["total"] == 1

    def test_filtres(self, client_for, agent, mairie):
        """Filtres par statut, recherche et période."""
        make_mariage(mairie, StatutMariage.VALIDE, date_mariage=datetime.date(2024, 2, 1))
        make_mariage(mairie, epoux_nom="Fotso", date_mariage=datetime.date(2024, 8, 1))
        client = client_for(agent)

        assert client.get(f"{URL}?statut=valide").data["data"]["meta"]["total"] == 1
        assert client.get(f"{URL}?search=fotso").data["data"]["meta"]["total"] == 1
        periode = client.get(f"{URL}?date_debut=2024-07-01&date_fin=2024-12-31")
        assert periode.data["data"]["meta"]["total"] == 1

    def test_pagination(self, client_for, agent, mairie):
        """Les métadonnées de pagination reflètent ``limit`` et ``page``."""
        for _ in range(3):
            make_mariage(mairie)
        response = client_for(agent).get(f"{URL}?limit=2&page=2")
        assert response.data["data"]["meta"] == {"total": 3, "perPage": 2, "currentPage": 2, "lastPage": 2}
        assert len(response.data["data"]["data"]) == 1

    def test_acte_charge_sans_requete_par_ligne(self, client_for, agent, mairie):
        """Le résumé d'acte de chaque ligne vient de la jointure, pas d'une requête par mariage."""
        client = client_for(agent)
        generer_acte(make_mariage(mairie, StatutMariage.VALIDE).pk, agent, annee=2024)
        with CaptureQueriesContext(connection) as une_ligne:
            client.get(URL)

        for _ in range(3):
            generer_acte(make_mariage(mairie, StatutMariage.VALIDE).pk, agent, annee=2024)
        make_mariage(mairie)
        with CaptureQueriesContext(connection) as cinq_lignes:
            response = client.get(URL)

        rows = response.data["data"]["data"]
        assert len(rows) == 5
        assert sum(1 for row in rows if row["acte"]) == 4
        assert "DLA1-2024-0001" in {row["acte"]["numero_acte"] for row in rows if row["acte"]}
        assert len(cinq_lignes.captured_queries) == len(une_ligne.captured_queries)

    def test_mariage_d_une_autre_mairie_introuvable(self, client_for, agent, autre_mairie):
        """Le mariage d'une autre mairie donne 404."""
        mariage = make_mariage(autre_mairie)
        response = client_for(agent).get(detail_url(mariage))
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data == {"success": False, "message": "Mariage non trouvé"}


@pytest.mark.django_db
class TestModification:
    def test_brouillon_modifiable(self, client_for, agent, mairie):
        """Un brouillon se modifie et la modification est journalisée."""
        mariage = make_mariage(mairie)
        response = client_for(agent).put(detail_url(mariage), {"lieu_mariage": "Salle des fêtes"}, format="json")

        assert response.status_code == status.HTTP_200_OK
        mariage.refresh_from_db()
        assert mariage.lieu_mariage == "Salle des fêtes"
        assert mariage.updated_by_id == agent.pk
        assert AuditLog.objects.filter(action=AuditAction.UPDATE, entity_id=mariage.pk).count() == 1

    def test_statut_ignore_hors_super_admin(self, client_for, admin_mairie, mairie):
        """Un PATCH sur le statut est ignoré hors super_admin."""
        mariage = make_mariage(mairie)
        response = client_for(admin_mairie).patch(
            detail_url(mariage), {"statut": StatutMariage.VALIDE}, format="json"
        )
        assert response.status_code == status.HTTP_200_OK
        mariage.refresh_from_db()
        assert mariage.statut == StatutMariage.BROUILLON

    def test_mariage_valide_fige_hors_super_admin(self, client_for, agent, super_admin, mairie):
        """Seul le super_admin modifie un mariage validé."""
        mariage = make_mariage(mairie, StatutMariage.VALIDE)
        refused = client_for(agent).patch(detail_url(mariage), {"observations": "x"}, format="json")
        assert refused.status_code == status.HTTP_400_BAD_REQUEST

        allowed = client_for(super_admin).patch(detail_url(mariage), {"observations": "x"}, format="json")
        assert allowed.status_code == status.HTTP_200_OK


@pytest.mark.django_db
class TestValidation:
    def test_validation_par_admin(self, client_for, admin_mairie, mairie):
        """L'admin de mairie valide un brouillon et en devient le dernier modificateur."""
        mariage = make_mariage(mairie)
        response = client_for(admin_mairie).post(detail_url(mariage, "validate/"))

        assert response.status_code == status.HTTP_200_OK
        assert response.data["data"]["statut"] == StatutMariage.VALIDE
        mariage.refresh_from_db()
        assert mariage.statut == StatutMariage.VALIDE
        assert mariage.updated_by_id == admin_mairie.pk
        log = AuditLog.objects.get(action=AuditAction.VALIDATE, entity_type="Mariage")
        assert log.old_values == {"statut": "brouillon"}
        assert log.user_id == admin_mairie.pk

    def test_deja_valide(self, client_for, admin_mairie, mairie):
        """Un mariage déjà validé ne se revalide pas."""
        mariage = make_mariage(mairie, StatutMariage.VALIDE)
        response = client_for(admin_mairie).post(detail_url(mariage, "validate/"))
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data["message"] == "Ce mariage est déjà validé"

    def test_agent_ne_valide_pas(self, client_for, agent, mairie):
        """Un agent ne valide pas : statut et journal inchangés."""
        mariage = make_mariage(mairie)
        journal_avant = AuditLog.objects.count()

        response = client_for(agent).post(detail_url(mariage, "validate/"))

        assert response.status_code == status.HTTP_403_FORBIDDEN
        mariage.refresh_from_db()
        assert mariage.statut == StatutMariage.BROUILLON
        assert AuditLog.objects.count() == journal_avant


@pytest.mark.django_db
class TestSuppression:
    def test_suppression_brouillon(self, client_for, admin_mairie, mairie):
        """Un brouillon sans acte se supprime, avec trace dans le journal."""
        mariage = make_mariage(mairie)
        response = client_for(admin_mairie).delete(detail_url(mariage))

        assert response.status_code == status.HTTP_200_OK
        assert not Mariage.objects.filter(pk=mariage.pk).exists()
        log = AuditLog.objects.get(action=AuditAction.DELETE, entity_type="Mariage")
        assert log.entity_id == mariage.pk
        assert log.mairie_id == mairie.pk

    def test_suppression_bloquee_si_acte(self, client_for, admin_mairie, agent, mairie):
        """Un mariage doté d'un acte ne se supprime pas."""
        mariage = make_mariage(mairie, StatutMariage.VALIDE)
        generer_acte(mariage.pk, agent)

        response = client_for(admin_mairie).delete(detail_url(mariage))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert Mariage.objects.filter(pk=mariage.pk).exists()
        assert not AuditLog.objects.filter(action=AuditAction.DELETE).exists()

    def test_agent_ne_supprime_pas(self, client_for, agent, mairie):
        """Un agent ne supprime pas de mariage."""
        mariage = make_mariage(mairie)
        response = client_for(agent).delete(detail_url(mariage))
        assert response.status_code == status.HTTP_403_FORBIDDEN
