"""Tests pour core/rbac/checker.py"""
import pytest

from core.rbac.checker import (
    ADMIN_MAIRIE,
    AGENT,
    ALL_ROLES,
    CONSULTATION,
    SUPER_ADMIN,
    RBACChecker,
    default_checker,
)


class TestCan:
    """Table des capacités par défaut"""

    @pytest.mark.parametrize("role", ALL_ROLES)
    def test_tous_les_roles_lisent_les_mariages(self, role):
        """Chaque rôle lit les mariages."""
        assert default_checker.can(role=role, action="read", resource="MARIAGE")

    @pytest.mark.parametrize(
        "role,allowed",
        [(SUPER_ADMIN, True), (ADMIN_MAIRIE, True), (AGENT, True), (CONSULTATION, False)],
    )
    def test_creation_mariage(self, role, allowed):
        """Tous les rôles sauf consultation créent un mariage."""
        assert default_checker.can(role=role, action="create", resource="MARIAGE") is allowed

    @pytest.mark.parametrize(
        "role,allowed",
        [(SUPER_ADMIN, True), (ADMIN_MAIRIE, True), (AGENT, False), (CONSULTATION, False)],
    )
    def test_validation_acte_reservee_aux_admins(self, role, allowed):
        """Seuls les administrateurs valident un acte."""
        assert default_checker.can(role=role, action="validate", resource="ACTE_MARIAGE") is allowed

    def test_annulation_acte_super_admin_uniquement(self):
        """Seul le super_admin annule un acte."""
        assert default_checker.can(role=SUPER_ADMIN, action="cancel", resource="ACTE_MARIAGE")
        assert not default_checker.can(role=ADMIN_MAIRIE, action="cancel", resource="ACTE_MARIAGE")

    def test_geographie_ecriture_super_admin(self):
        """Villes et arrondissements s'écrivent en super_admin seulement."""
        for resource in ("VILLE", "ARRONDISSEMENT"):
            assert default_checker.can(role=SUPER_ADMIN, action="delete", resource=resource)
            assert not default_checker.can(role=ADMIN_MAIRIE, action="create", resource=resource)

    def test_role_absent_refuse(self):
        """Un rôle absent ou vide n'a aucun droit."""
        assert not default_checker.can(role=None, action="read", resource="MARIAGE")
        assert not default_checker.can(role="", action="read", resource="MARIAGE")

    def test_ressource_ou_action_inconnue(self):
        """Ressource ou action inconnue : refus."""
        assert not default_checker.can(role=SUPER_ADMIN, action="read", resource="INCONNUE")
        assert not default_checker.can(role=SUPER_ADMIN, action="archive", resource="MARIAGE")

    def test_les_cles_de_configuration_ne_sont_pas_des_actions(self):
        """``fields`` et ``assignable_roles`` ne donnent aucune permission"""
        assert not default_checker.can(role=SUPER_ADMIN, action="fields", resource="MARIAGE")
        assert not default_checker.can(role=SUPER_ADMIN, action="assignable_roles", resource="USER")


class TestDecision:
    """Champs restreints renvoyés avec la décision"""

    def test_statut_mariage_restreint_hors_super_admin(self):
        """Hors super_admin, statut et mairie du mariage sont restreints."""
        decision = default_checker.decision(role=AGENT, action="update", resource="MARIAGE")
        assert decision.allowed
        assert decision.restricted_fields == {"statut", "mairie"}

    def test_super_admin_sans_restriction(self):
        """Le super_admin n'a aucun champ restreint."""
        decision = default_checker.decision(role=SUPER_ADMIN, action="update", resource="MARIAGE")
        assert decision.allowed
        assert decision.restricted_fields == set()

    def test_admin_mairie_ne_renomme_pas_sa_mairie(self):
        """L'admin de mairie ne touche ni au nom ni au code de sa mairie."""
        decision = default_checker.decision(role=ADMIN_MAIRIE, action="update", resource="MAIRIE")
        assert decision.allowed
        assert {"nom", "code", "arrondissement"} <= decision.restricted_fields
        assert "prefixe_acte" not in decision.restricted_fields

    def test_refus(self):
        """La décision refuse la suppression au rôle consultation."""
        decision = default_checker.decision(role=CONSULTATION, action="delete", resource="MARIAGE")
        assert not decision.allowed


class TestAssignableRoles:
    def test_super_admin_attribue_tous_les_roles(self):
        """Le super_admin attribue tous les rôles."""
        assert default_checker.assignable_roles(role=SUPER_ADMIN) == frozenset(ALL_ROLES)

    def test_admin_mairie_limite(self):
        """L'admin de mairie attribue agent et consultation."""
        assert default_checker.assignable_roles(role=ADMIN_MAIRIE) == frozenset({AGENT, CONSULTATION})

    def test_agent_aucun(self):
        """Un agent n'attribue aucun rôle."""
        assert default_checker.assignable_roles(role=AGENT) == frozenset()


def test_matrice_personnalisee():
    """Une matrice fournie remplace la table par défaut."""
    checker = RBACChecker({"DOC": {"read": ["lecteur"], "fields": {"secret": ["chef"]}}})
    assert checker.can(role="lecteur", action="read", resource="DOC")
    assert checker.decision(role="lecteur", action="read", resource="DOC").restricted_fields == {"secret"}
