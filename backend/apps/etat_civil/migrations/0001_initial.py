from __future__ import annotations

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def _user_fk(related_name: str) -> models.ForeignKey:
    return models.ForeignKey(
        blank=True,
        null=True,
        on_delete=django.db.models.deletion.SET_NULL,
        related_name=related_name,
        to=settings.AUTH_USER_MODEL,
    )


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("geographie", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Mariage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("epoux_nom", models.CharField(max_length=255)),
                ("epoux_prenom", models.CharField(max_length=255)),
                ("epoux_date_naissance", models.DateField()),
                ("epoux_lieu_naissance", models.CharField(max_length=255)),
                ("epoux_nationalite", models.CharField(blank=True, max_length=100)),
                ("epoux_profession", models.CharField(blank=True, max_length=255)),
                ("epoux_adresse", models.CharField(blank=True, max_length=500)),
                ("epoux_nom_pere", models.CharField(blank=True, max_length=255)),
                ("epoux_nom_mere", models.CharField(blank=True, max_length=255)),
                ("epouse_nom", models.CharField(max_length=255)),
                ("epouse_prenom", models.CharField(max_length=255)),
                ("epouse_date_naissance", models.DateField()),
                ("epouse_lieu_naissance", models.CharField(max_length=255)),
                ("epouse_nationalite", models.CharField(blank=True, max_length=100)),
                ("epouse_profession", models.CharField(blank=True, max_length=255)),
                ("epouse_adresse", models.CharField(blank=True, max_length=500)),
                ("epouse_nom_pere", models.CharField(blank=True, max_length=255)),
                ("epouse_nom_mere", models.CharField(blank=True, max_length=255)),
                ("date_mariage", models.DateField()),
                ("heure_mariage", models.TimeField(blank=True, null=True)),
                ("lieu_mariage", models.CharField(blank=True, max_length=500)),
                ("regime_matrimonial", models.CharField(default="Communauté réduite aux acquêts", max_length=100)),
                ("temoin1_nom", models.CharField(blank=True, max_length=255)),
                ("temoin1_prenom", models.CharField(blank=True, max_length=255)),
                ("temoin2_nom", models.CharField(blank=True, max_length=255)),
                ("temoin2_prenom", models.CharField(blank=True, max_length=255)),
                ("officier_nom", models.CharField(blank=True, max_length=255)),
                ("officier_fonction", models.CharField(blank=True, max_length=255)),
                (
                    "statut",
                    models.CharField(
                        choices=[("brouillon", "Brouillon"), ("valide", "Validé"), ("annule", "Annulé")],
                        default="brouillon",
                        max_length=20,
                    ),
                ),
                ("observations", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "mairie",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="mariages",
                        to="geographie.mairie",
                    ),
                ),
                ("created_by", _user_fk("mariages_crees")),
                ("updated_by", _user_fk("mariages_modifies")),
            ],
            options={"db_table": "mariages", "ordering": ("-created_at", "-id")},
        ),
        migrations.CreateModel(
            name="ActeMariage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("numero_acte", models.CharField(db_index=True, max_length=50)),
                ("annee", models.PositiveIntegerField()),
                ("numero_ordre", models.PositiveIntegerField()),
                ("contenu", models.TextField(blank=True)),
                ("fichier_pdf", models.CharField(blank=True, max_length=500)),
                (
                    "statut",
                    models.CharField(
                        choices=[
                            ("brouillon", "Brouillon"),
                            ("valide", "Validé"),
                            ("imprime", "Imprimé"),
                            ("annule", "Annulé"),
                        ],
                        default="brouillon",
                        max_length=20,
                    ),
                ),
                ("date_validation", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "mariage",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="acte",
                        to="etat_civil.mariage",
                    ),
                ),
                (
                    "mairie",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="actes",
                        to="geographie.mairie",
                    ),
                ),
                ("valide_par", _user_fk("actes_valides")),
                ("created_by", _user_fk("actes_crees")),
                ("updated_by", _user_fk("actes_modifies")),
            ],
            options={"db_table": "actes_mariage", "ordering": ("-created_at", "-id")},
        ),
        migrations.AddConstraint(
            model_name="actemariage",
            constraint=models.UniqueConstraint(
                fields=("mairie", "annee", "numero_ordre"),
                name="uniq_acte_mairie_annee_ordre",
            ),
        ),
    ]
