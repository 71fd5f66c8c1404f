from __future__ import annotations

from django.conf import settings
from django.db import models

from .managers import ProducerAccountManager


class ProducerAccount(models.Model):
    """Links a dashboard login to the producer id used by the hosted backend."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="producer_account",
        verbose_name="Usuário",
    )
    backend_user_id = models.CharField(
        "ID no backend",
        max_length=64,
        unique=True,
        help_text="Identificador do produtor (usuario_id) nas tabelas do backend hospedado.",
    )
    display_name = models.CharField("Nome do produtor", max_length=150, blank=True)
    default_farm = models.CharField(
        "Fazenda padrão",
        max_length=150,
        blank=True,
        help_text="Fazenda aplicada ao filtro quando nenhuma é informada.",
    )
    is_active = models.BooleanField("Ativo", default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProducerAccountManager()

    class Meta:
        verbose_name = "Conta de produtor"
        verbose_name_plural = "Contas de produtor"
        ordering = ["display_name", "backend_user_id"]

    def __str__(self) -> str:
        label = self.display_name or self.user.get_username()
        return f"{label} ({self.backend_user_id})"
