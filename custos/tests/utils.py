from __future__ import annotations

import threading
from typing import Any

from custos.services.backend import CostBackendError


def plot_record(plot_id: str, name: str, area: str, **buckets: str) -> dict[str, Any]:
    record: dict[str, Any] = {
        "id_talhao": plot_id,
        "talhao": name,
        "area": area,
        "insumos": "0",
        "operacional": "0",
        "servicos_logistica": "0",
        "administrativos": "0",
        "outros": "0",
    }
    record.update(buckets)
    return record


def detail_record(plot_id: str, amount: str, categoria: str = "Fertilizante", origem: str = "Financeiro") -> dict[str, Any]:
    return {
        "data": "2024-07-05",
        "categoria": categoria,
        "descricao": f"Lançamento {plot_id}",
        "origem": origem,
        "valor": amount,
    }


class FakeCostBackend:
    """In-memory stand-in for CostBackendClient used by the service and view tests."""

    def __init__(
        self,
        *,
        plot_costs: list[dict[str, Any]] | None = None,
        details: dict[str, list[dict[str, Any]]] | None = None,
        pending: list[dict[str, Any]] | None = None,
        seasons: list[str] | None = None,
        farms: list[dict[str, str]] | None = None,
        plots: list[dict[str, str]] | None = None,
        fail: bool = False,
    ) -> None:
        self.plot_costs = plot_costs or []
        self.details = details or {}
        self.pending = pending or []
        self.seasons = seasons or []
        self.farms = farms or []
        self.plots = plots or []
        self.fail = fail
        self.calls: list[tuple[str, Any]] = []
        self.detail_gates: dict[str, threading.Event] = {}
        self.plot_costs_gate: threading.Event | None = None

    def _maybe_fail(self, name: str) -> None:
        if self.fail:
            raise CostBackendError(f"{name} indisponível", status_code=500)

    def query_plot_costs(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        # snapshot before announcing the call so tests can swap data for the next one
        rows = list(self.plot_costs)
        gate = self.plot_costs_gate
        self.calls.append(("plot_costs", params))
        if gate is not None:
            gate.wait(5)
        self._maybe_fail("custo_por_talhao")
        return rows

    def query_cost_details(self, params: dict[str, Any]) -> list[dict[str, Any]]:
        gate = self.detail_gates.get(params["id_talhao"])
        self.calls.append(("details", params))
        if gate is not None:
            gate.wait(5)
        self._maybe_fail("detalhes_custo_talhao")
        return list(self.details.get(params["id_talhao"], []))

    def query_pending_items(self, user_id: str) -> list[dict[str, Any]]:
        self.calls.append(("pending", user_id))
        self._maybe_fail("pendencias_custo")
        return list(self.pending)

    def list_seasons(self, user_id: str) -> list[str]:
        self._maybe_fail("talhoes")
        return list(self.seasons)

    def list_farms(self, user_id: str) -> list[dict[str, str]]:
        self._maybe_fail("propriedades")
        return list(self.farms)

    def list_plots(self, user_id: str, farm_id: str | None = None) -> list[dict[str, str]]:
        self.calls.append(("plots", farm_id))
        self._maybe_fail("talhoes")
        return [plot for plot in self.plots if farm_id is None or plot.get("farm_id") == farm_id]
