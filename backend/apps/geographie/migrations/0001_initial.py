from __future__ import annotations

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Ville",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("nom", models.CharField(max_length=255)),
                ("code", models.CharField(blank=True, max_length=10, null=True, unique=True)),
                ("region", models.CharField(blank=True, max_length=255)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"db_table": "villes", "ordering": ("nom",)},
        ),
        migrations.CreateModel(
            name="Arrondissement",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("nom", models.CharField(max_length=255)),
                ("code", models.CharField(blank=True, max_length=10)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "ville",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="arrondissements",
                        to="geographie.ville",
                    ),
                ),
            ],
            options={"db_table": "arrondissements", "ordering": ("nom",)},
        ),
        migrations.CreateModel(
            name="Mairie",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("nom", models.CharField(max_length=255)),
                ("code", models.CharField(max_length=20, unique=True)),
                ("adresse", models.CharField(blank=True, max_length=500)),
                ("telephone", models.CharField(blank=True, max_length=50)),
                ("email", models.EmailField(blank=True, max_length=254)),
                ("logo", models.CharField(blank=True, max_length=500)),
                ("cachet", models.CharField(blank=True, max_length=500)),
                ("langue", models.CharField(default="fr", max_length=5)),
                ("prefixe_acte", models.CharField(blank=True, max_length=20)),
                ("dernier_numero_acte", models.PositiveIntegerField(default=0)),
                ("annee_dernier_numero", models.PositiveIntegerField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "arrondissement",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="mairies",
                        to="geographie.arrondissement",
                    ),
                ),
            ],
            options={"db_table": "mairies", "ordering": ("nom",)},
        ),
    ]
