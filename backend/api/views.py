from __future__ import annotations

from typing import Any, Dict, List

from django.db.models import Count, Q
from django.db.models.functions import TruncDay, TruncMonth, TruncWeek, TruncYear
from django.utils import formats, timezone, translation
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response

from apps.etat_civil.models import ActeMariage, Mariage, StatutMariage
from apps.geographie.models import Mairie
from core.decorators import with_capability
from core.rbac.checker import ADMIN_MAIRIE, SUPER_ADMIN
from identity.models import AuditLog, User

from .mixins import scope_for_user
from .serializers import (
    AuditLogSerializer,
    MairieSerializer,
    MariageResumeSerializer,
    UserResumeSerializer,
)

PERIODES = {
    "jour": TruncDay,
    "semaine": TruncWeek,
    "mois": TruncMonth,
    "annee": TruncYear,
}


def _bornes():
    now = timezone.localtime()
    debut_mois = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    debut_annee = debut_mois.replace(month=1)
    return debut_mois, debut_annee


def _dashboard_super_admin() -> Dict[str, Any]:
    debut_mois, debut_annee = _bornes()
    stats_mairies = (
        Mairie.objects.annotate(
            total_mariages=Count("mariages", distinct=True),
            total_users=Count("users", distinct=True),
        )
        .order_by("-total_mariages", "nom")[:10]
    )
    return {
        "role": SUPER_ADMIN,
        "statistiques": {
            "total_mairies": Mairie.objects.count(),
            "total_mairies_actives": Mairie.objects.filter(is_active=True).count(),
            "total_users": User.objects.count(),
            "total_users_actifs": User.objects.filter(is_active=True).count(),
            "total_mariages": Mariage.objects.count(),
            "total_actes": ActeMariage.objects.count(),
            "mariages_mois": Mariage.objects.filter(created_at__gte=debut_mois).count(),
            "mariages_annee": Mariage.objects.filter(created_at__gte=debut_annee).count(),
        },
        "derniers_mariages": MariageResumeSerializer(
            Mariage.objects.order_by("-created_at")[:5], many=True
        ).data,
        "stats_mairies": [
            {
                "id": mairie.id,
                "nom": mairie.nom,
                "total_mariages": mairie.total_mariages,
                "total_users": mairie.total_users,
            }
            for mairie in stats_mairies
        ],
        "activites_recentes": AuditLogSerializer(
            AuditLog.objects.select_related("user")[:10], many=True
        ).data,
    }


def _dashboard_admin_mairie(user: User) -> Dict[str, Any]:
    debut_mois, debut_annee = _bornes()
    mariages = scope_for_user(Mariage.objects.all(), user)
    users = scope_for_user(User.objects.all(), user)
    par_statut = mariages.aggregate(
        brouillon=Count("id", filter=Q(statut=StatutMariage.BROUILLON)),
        valide=Count("id", filter=Q(statut=StatutMariage.VALIDE)),
        annule=Count("id", filter=Q(statut=StatutMariage.ANNULE)),
    )
    return {
        "role": ADMIN_MAIRIE,
        "mairie": MairieSerializer(user.mairie).data,
        "statistiques": {
            "total_users": users.count(),
            "total_users_actifs": users.filter(is_active=True).count(),
            "total_mariages": mariages.count(),
            "total_actes": scope_for_user(ActeMariage.objects.all(), user).count(),
            "mariages_brouillon": par_statut["brouillon"],
            "mariages_valides": par_statut["valide"],
            "mariages_annules": par_statut["annule"],
            "mariages_mois": mariages.filter(created_at__gte=debut_mois).count(),
            "mariages_annee": mariages.filter(created_at__gte=debut_annee).count(),
        },
        "derniers_mariages": MariageResumeSerializer(mariages.order_by("-created_at")[:5], many=True).data,
        "activites_recentes": AuditLogSerializer(
            scope_for_user(AuditLog.objects.select_related("user"), user)[:10], many=True
        ).data,
        "utilisateurs_actifs": UserResumeSerializer(
            users.filter(is_active=True).order_by("-last_login")[:5], many=True
        ).data,
    }


def _dashboard_agent(user: User) -> Dict[str, Any]:
    debut_mois, _ = _bornes()
    mariages = scope_for_user(Mariage.objects.all(), user)
    mes_mariages = mariages.filter(created_by=user)
    return {
        "role": user.role,
        "mairie": MairieSerializer(user.mairie).data if user.mairie_id else None,
        "statistiques": {
            "mes_mariages": mes_mariages.count(),
            "mariages_mois": mariages.filter(created_at__gte=debut_mois).count(),
        },
        "mes_derniers_mariages": MariageResumeSerializer(mes_mariages.order_by("-created_at")[:5], many=True).data,
        "mariages_recents": MariageResumeSerializer(mariages.order_by("-created_at")[:10], many=True).data,
        "mariages_en_attente": MariageResumeSerializer(
            mariages.filter(statut=StatutMariage.BROUILLON).order_by("-created_at")[:5], many=True
        ).data,
    }


@api_view(["GET"])
@permission_classes([IsAuthenticated])
@with_capability("DASHBOARD", "read")
def dashboard_data(request: Request) -> Response:
    """GET /api/dashboard/ : indicateurs adaptés au rôle de l'utilisateur."""
    user = request.user
    if user.role == SUPER_ADMIN:
        data = _dashboard_super_admin()
    elif user.role == ADMIN_MAIRIE:
        data = _dashboard_admin_mairie(user)
    else:
        data = _dashboard_agent(user)
    return Response({"success": True, "data": data})


def _libelle(periode: str, value) -> str:
    if periode == "jour":
        return value.strftime("%Y-%m-%d")
    if periode == "semaine":
        return f"Semaine {value.isocalendar()[1]}"
    if periode == "annee":
        return value.strftime("%Y")
    with translation.override("fr"):
        return formats.date_format(value, "F")


@api_view(["GET"])
@permission_classes([IsAuthenticated])
@with_capability("DASHBOARD", "read")
def dashboard_stats(request: Request) -> Response:
    """
    GET /api/dashboard/stats/?periode=jour|semaine|mois|annee&annee=YYYY

    Le super_admin peut restreindre les chiffres à une mairie via ``?mairie_id=``.
    """
    periode = request.query_params.get("periode", "mois")
    if periode not in PERIODES:
        periode = "mois"
    try:
        annee = int(request.query_params.get("annee", timezone.localdate().year))
    except (TypeError, ValueError):
        annee = timezone.localdate().year

    queryset = scope_for_user(
        Mariage.objects.filter(created_at__year=annee), request.user, request.query_params
    )

    rows = (
        queryset.annotate(periode=PERIODES[periode]("created_at"))
        .values("periode")
        .annotate(count=Count("id"))
        .order_by("periode")
    )
    stats: List[Dict[str, Any]] = []
    for row in rows:
        label = _libelle(periode, row["periode"])
        if stats and stats[-1]["label"] == label:
            stats[-1]["count"] += row["count"]
        else:
            stats.append({"label": label, "count": row["count"]})
    return Response({"success": True, "data": stats})
