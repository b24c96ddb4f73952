from __future__ import annotations


class EtatCivilError(Exception):
    """Règle métier de l'état civil non respectée."""

    default_message = "Opération impossible"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MariageNonValide(EtatCivilError):
    default_message = "Le mariage doit être validé avant de générer un acte"


class ActeDejaExistant(EtatCivilError):
    default_message = "Un acte existe déjà pour ce mariage"

    def __init__(self, acte, message: str | None = None):
        super().__init__(message)
        self.acte = acte


class TransitionInterdite(EtatCivilError):
    default_message = "Changement de statut non autorisé"


class SuppressionInterdite(EtatCivilError):
    default_message = "Suppression impossible"
