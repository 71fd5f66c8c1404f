from __future__ import annotations

from django.db import models


class ProducerAccountQuerySet(models.QuerySet):
    """Queryset helpers for ProducerAccount."""

    def active(self) -> "ProducerAccountQuerySet":
        return self.filter(is_active=True, user__is_active=True)

    def for_user(self, user) -> "ProducerAccountQuerySet":
        if not user or not getattr(user, "is_authenticated", False):
            return self.none()
        return self.filter(user_id=user.pk)


class ProducerAccountManager(models.Manager.from_queryset(ProducerAccountQuerySet)):
    """Manager exposing the ProducerAccount queryset helpers."""
