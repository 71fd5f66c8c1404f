from __future__ import annotations

from django.conf import settings
from django.http import JsonResponse


def health_view(request):
    """Liveness probe; also reports whether the cost backend is configured."""

    return JsonResponse(
        {
            "status": "ok",
            "service": "Zé da Safra",
            "cost_backend_configured": bool(getattr(settings, "COST_BACKEND_URL", "")),
        }
    )
