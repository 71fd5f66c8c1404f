from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

logger = logging.getLogger(__name__)

PLOT_COSTS_FUNCTION = "custo_por_talhao"
COST_DETAILS_FUNCTION = "detalhes_custo_talhao"
PENDING_ITEMS_FUNCTION = "pendencias_custo"


class CostBackendError(Exception):
    """Raised when the hosted cost backend fails or answers with an unexpected payload."""

    def __init__(self, message: str, *, status_code: int | None = None, payload: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.payload = payload


class CostBackendClient:
    """Cliente HTTP para a API REST do backend hospedado (RPC e tabelas)."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(cls) -> "CostBackendClient":
        base_url = getattr(settings, "COST_BACKEND_URL", "")
        if not base_url:
            raise ImproperlyConfigured("COST_BACKEND_URL não está configurada.")
        return cls(
            base_url,
            getattr(settings, "COST_BACKEND_API_KEY", ""),
            timeout=getattr(settings, "COST_BACKEND_HTTP_TIMEOUT_SECONDS", 30.0),
        )

    @property
    def headers(self) -> dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    def _request(self, method: str, path: str, **kwargs: Any) -> list[dict[str, Any]]:
        url = f"{self.base_url}/rest/v1/{path}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.request(method, url, headers=self.headers, **kwargs)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise CostBackendError(
                f"O backend respondeu {exc.response.status_code} para {path}.",
                status_code=exc.response.status_code,
                payload=exc.response.text,
            ) from exc
        except httpx.HTTPError as exc:
            raise CostBackendError(f"Erro de transporte ao consultar {path}: {exc}") from exc
        except ValueError as exc:
            raise CostBackendError(f"Resposta inválida (JSON) para {path}.") from exc

        if data is None:
            return []
        if not isinstance(data, list):
            raise CostBackendError(f"Resposta inesperada para {path}: esperava uma lista.", payload=data)
        if any(not isinstance(item, Mapping) for item in data):
            raise CostBackendError(f"Resposta inesperada para {path}: itens devem ser objetos.", payload=data)
        return data

    def call_function(self, name: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        logger.debug("Calling backend function %s with %s", name, sorted(params))
        return self._request("POST", f"rpc/{name}", json=params)

    def select(self, table: str, params: dict[str, str]) -> list[dict[str, Any]]:
        return self._request("GET", table, params=params)

    def query_plot_costs(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        return self.call_function(PLOT_COSTS_FUNCTION, params)

    def query_cost_details(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        return self.call_function(COST_DETAILS_FUNCTION, params)

    def query_pending_items(self, user_id: str) -> list[dict[str, Any]]:
        return self.call_function(PENDING_ITEMS_FUNCTION, {"usuario_id": user_id})

    def list_seasons(self, user_id: str) -> list[str]:
        rows = self.select(
            "talhoes",
            {"select": "safra", "usuario_id": f"eq.{user_id}", "order": "safra.desc"},
        )
        seasons: list[str] = []
        for row in rows:
            season = row.get("safra")
            if season and season not in seasons:
                seasons.append(season)
        return seasons

    def list_farms(self, user_id: str) -> list[dict[str, str]]:
        rows = self.select(
            "propriedades",
            {"select": "id_propriedade,nome", "usuario_id": f"eq.{user_id}", "order": "nome.asc"},
        )
        return [{"id": str(row["id_propriedade"]), "name": row.get("nome") or ""} for row in rows]

    def list_plots(self, user_id: str, farm_id: str | None = None) -> list[dict[str, str]]:
        params = {"select": "id_talhao,nome", "usuario_id": f"eq.{user_id}", "order": "nome.asc"}
        if farm_id:
            params["id_propriedade"] = f"eq.{farm_id}"
        rows = self.select("talhoes", params)
        return [{"id": str(row["id_talhao"]), "name": row.get("nome") or ""} for row in rows]
