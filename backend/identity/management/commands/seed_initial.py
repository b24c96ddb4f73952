from __future__ import annotations

from django.core.management.base import BaseCommand

from identity.seed import DEMO_PASSWORD, DEMO_USERS, seed_initial


class Command(BaseCommand):
    help = "Charge les villes, arrondissements, mairies et comptes de démonstration."

    def add_arguments(self, parser) -> None:
        parser.add_argument(
            "--password",
            default=DEMO_PASSWORD,
            help="Mot de passe attribué aux comptes de démonstration créés.",
        )

    def handle(self, *args, **options) -> None:
        password: str = options["password"]
        counts = seed_initial(password=password)

        for label, count in counts.items():
            self.stdout.write(f"==> {label}: {count} créé(s)")
        self.stdout.write(self.style.SUCCESS("Référentiel initial chargé."))
        self.stdout.write("Comptes de test:")
        for user in DEMO_USERS:
            self.stdout.write(f"- {user['email']} ({user['role']}) / {password}")
