from __future__ import annotations

import logging
from dataclasses import dataclass

from .models import ProducerAccount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProducerIdentity:
    """Resolved producer passed explicitly to every backend query."""

    user_id: str
    display_name: str = ""
    default_farm: str = ""


def resolve_identity(user) -> ProducerIdentity | None:
    """Return the backend identity for ``user`` or ``None`` when there is none.

    A missing identity is not an error: callers skip their queries silently.
    """
    if not user or not getattr(user, "is_authenticated", False):
        return None
    account = ProducerAccount.objects.active().for_user(user).first()
    if account is None:
        logger.debug("User %s has no active producer account.", user.pk)
        return None
    return ProducerIdentity(
        user_id=account.backend_user_id,
        display_name=account.display_name or user.get_username(),
        default_farm=account.default_farm,
    )
