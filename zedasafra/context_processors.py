"""Template context helpers for exposing global application settings."""

from __future__ import annotations

from custos.services.filters import current_season


def season_settings(request):
    """Expose the running safra so every page can label its defaults."""

    return {
        "CURRENT_SEASON": current_season(),
        "CURRENCY_CODE": "BRL",
    }
