from __future__ import annotations

import pytest
from rest_framework.test import APIClient

from apps.geographie.models import Arrondissement, Mairie, Ville
from identity.models import Role, User

from .factories import make_user


@pytest.fixture
def ville() -> Ville:
    return Ville.objects.create(nom="Douala", code="DLA", region="Littoral")


@pytest.fixture
def arrondissement(ville: Ville) -> Arrondissement:
    return Arrondissement.objects.create(nom="Douala 1er", code="DLA1", ville=ville)


@pytest.fixture
def mairie(arrondissement: Arrondissement) -> Mairie:
    return Mairie.objects.create(
        nom="Mairie de Douala 1er",
        code="M-DLA1",
        arrondissement=arrondissement,
        adresse="Avenue du Général de Gaulle, Douala",
        prefixe_acte="DLA1",
    )


@pytest.fixture
def autre_mairie(ville: Ville) -> Mairie:
    arrondissement = Arrondissement.objects.create(nom="Douala 2ème", code="DLA2", ville=ville)
    return Mairie.objects.create(
        nom="Mairie de Douala 2ème", code="M-DLA2", arrondissement=arrondissement, prefixe_acte="DLA2"
    )

@pytest.fixture
def super_admin() -> User:
    return make_user("superadmin@mariage.cm", Role.SUPER_ADMIN, is_superuser=True)


@pytest.fixture
def admin_mairie(mairie: Mairie) -> User:
    return make_user("admin.dla1@mariage.cm", Role.ADMIN_MAIRIE, mairie)


@pytest.fixture
def agent(mairie: Mairie) -> User:
    return make_user("agent.dla1@mariage.cm", Role.AGENT, mairie)


@pytest.fixture
def consultation(mairie: Mairie) -> User:
    return make_user("consult.dla1@mariage.cm", Role.CONSULTATION, mairie)


@pytest.fixture
def agent_autre_mairie(autre_mairie: Mairie) -> User:
    return make_user("agent.dla2@mariage.cm", Role.AGENT, autre_mairie)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def client_for(api_client: APIClient):
    def _client(user: User) -> APIClient:
        api_client.force_authenticate(user=user)
        return api_client

    return _client

