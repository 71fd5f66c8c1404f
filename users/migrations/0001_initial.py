from __future__ import annotations

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ProducerAccount",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "backend_user_id",
                    models.CharField(
                        help_text="Identificador do produtor (usuario_id) nas tabelas do backend hospedado.",
                        max_length=64,
                        unique=True,
                        verbose_name="ID no backend",
                    ),
                ),
                ("display_name", models.CharField(blank=True, max_length=150, verbose_name="Nome do produtor")),
                (
                    "default_farm",
                    models.CharField(
                        blank=True,
                        help_text="Fazenda aplicada ao filtro quando nenhuma é informada.",
                        max_length=150,
                        verbose_name="Fazenda padrão",
                    ),
                ),
                ("is_active", models.BooleanField(default=True, verbose_name="Ativo")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="producer_account",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="Usuário",
                    ),
                ),
            ],
            options={
                "verbose_name": "Conta de produtor",
                "verbose_name_plural": "Contas de produtor",
                "ordering": ["display_name", "backend_user_id"],
            },
        ),
    ]
