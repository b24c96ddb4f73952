from __future__ import annotations

from typing import Dict

from django.contrib.auth import get_user_model
from django.db import transaction

from apps.geographie.models import Arrondissement, Mairie, Ville
from identity.models import Role

DEMO_PASSWORD = "password123"

VILLES = [
    {"nom": "Douala", "code": "DLA", "region": "Littoral"},
    {"nom": "Yaoundé", "code": "YDE", "region": "Centre"},
    {"nom": "Bafoussam", "code": "BFS", "region": "Ouest"},
]

ARRONDISSEMENTS = [
    ("DLA", "Douala 1er", "DLA1"),
    ("DLA", "Douala 2ème", "DLA2"),
    ("DLA", "Douala 3ème", "DLA3"),
    ("DLA", "Douala 4ème", "DLA4"),
    ("DLA", "Douala 5ème", "DLA5"),
    ("YDE", "Yaoundé 1er", "YDE1"),
    ("YDE", "Yaoundé 2ème", "YDE2"),
    ("YDE", "Yaoundé 3ème", "YDE3"),
    ("YDE", "Yaoundé 4ème", "YDE4"),
    ("BFS", "Bafoussam 1er", "BFS1"),
    ("BFS", "Bafoussam 2ème", "BFS2"),
]

MAIRIES = [
    {
        "arrondissement": "DLA1",
        "nom": "Mairie de Douala 1er",
        "code": "M-DLA1",
        "adresse": "Avenue du Général de Gaulle, Douala",
        "telephone": "+237 233 42 00 00",
        "email": "mairie.dla1@example.com",
        "prefixe_acte": "DLA1",
    },
    {
        "arrondissement": "DLA2",
        "nom": "Mairie de Douala 2ème",
        "code": "M-DLA2",
        "adresse": "Rue de New Bell, Douala",
        "telephone": "+237 233 42 00 01",
        "email": "mairie.dla2@example.com",
        "prefixe_acte": "DLA2",
    },
    {
        "arrondissement": "YDE1",
        "nom": "Mairie de Yaoundé 1er",
        "code": "M-YDE1",
        "adresse": "Avenue Kennedy, Yaoundé",
        "telephone": "+237 222 23 00 00",
        "email": "mairie.yde1@example.com",
        "prefixe_acte": "YDE1",
    },
    {
        "arrondissement": "BFS1",
        "nom": "Mairie de Bafoussam 1er",
        "code": "M-BFS1",
        "adresse": "Centre Ville, Bafoussam",
        "telephone": "+237 233 44 00 00",
        "email": "mairie.bfs1@example.com",
        "prefixe_acte": "BFS1",
    },
]

DEMO_USERS = [
    {"full_name": "Super Administrateur", "email": "superadmin@mariage.cm", "role": Role.SUPER_ADMIN, "mairie": None},
    {"full_name": "Admin Douala 1er", "email": "admin.dla1@mariage.cm", "role": Role.ADMIN_MAIRIE, "mairie": "M-DLA1"},
    {"full_name": "Agent Douala 1er", "email": "agent.dla1@mariage.cm", "role": Role.AGENT, "mairie": "M-DLA1"},
    {"full_name": "Consultation Douala 1er", "email": "consult.dla1@mariage.cm", "role": Role.CONSULTATION, "mairie": "M-DLA1"},
    {"full_name": "Admin Yaoundé 1er", "email": "admin.yde1@mariage.cm", "role": Role.ADMIN_MAIRIE, "mairie": "M-YDE1"},
    {"full_name": "Agent Yaoundé 1er", "email": "agent.yde1@mariage.cm", "role": Role.AGENT, "mairie": "M-YDE1"},
]


def seed_initial(password: str = DEMO_PASSWORD) -> Dict[str, int]:
    """Charge le référentiel géographique et les comptes de démonstration (idempotent)."""
    counts = {"villes": 0, "arrondissements": 0, "mairies": 0, "users": 0}
    with transaction.atomic():
        villes: Dict[str, Ville] = {}
        for data in VILLES:
            ville, created = Ville.objects.get_or_create(code=data["code"], defaults=data)
            villes[ville.code] = ville
            counts["villes"] += int(created)

        arrondissements: Dict[str, Arrondissement] = {}
        for ville_code, nom, code in ARRONDISSEMENTS:
            arrondissement, created = Arrondissement.objects.get_or_create(
                code=code, ville=villes[ville_code], defaults={"nom": nom}
            )
            arrondissements[code] = arrondissement
            counts["arrondissements"] += int(created)

        mairies: Dict[str, Mairie] = {}
        for data in MAIRIES:
            defaults = {key: value for key, value in data.items() if key not in {"code", "arrondissement"}}
            defaults["arrondissement"] = arrondissements[data["arrondissement"]]
            mairie, created = Mairie.objects.get_or_create(code=data["code"], defaults=defaults)
            mairies[mairie.code] = mairie
            counts["mairies"] += int(created)

        counts["users"] = _ensure_users(mairies, password)
    return counts


def _ensure_users(mairies: Dict[str, Mairie], password: str) -> int:
    user_model = get_user_model()
    created = 0
    for data in DEMO_USERS:
        if user_model.objects.filter(email=data["email"]).exists():
            continue
        user_model.objects.create_user(
            email=data["email"],
            password=password,
            full_name=data["full_name"],
            role=data["role"],
            mairie=mairies[data["mairie"]] if data["mairie"] else None,
            is_superuser=data["role"] == Role.SUPER_ADMIN,
        )
        created += 1
    return created
