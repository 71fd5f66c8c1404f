from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .aggregation import filter_details_by_group, grand_totals
from .backend import CostBackendClient
from .categories import CategoryGroup
from .fetchers import DetailsResult, FetchStatus, PlotCostsResult, fetch_cost_details, fetch_plot_costs
from .filters import CostFilter, FilterStateManager
from .records import CostDetailLine, CostTotals, PlotCost

if TYPE_CHECKING:  # pragma: no cover
    from users.services import ProducerIdentity


@dataclass
class CostTableState:
    status: FetchStatus = FetchStatus.IDLE
    rows: list[PlotCost] = field(default_factory=list)
    totals: CostTotals = field(default_factory=lambda: grand_totals([]))
    error_message: str = ""
    generation: int = 0

    @property
    def show_error_banner(self) -> bool:
        return self.status == FetchStatus.ERROR

    @property
    def show_empty_state(self) -> bool:
        return self.status == FetchStatus.EMPTY


@dataclass
class DrillDownState:
    plot_id: str | None = None
    status: FetchStatus = FetchStatus.IDLE
    lines: list[CostDetailLine] = field(default_factory=list)
    error_message: str = ""

    @property
    def is_open(self) -> bool:
        return self.plot_id is not None


class PlotCostPanel:
    """State holder for the Custo por Talhão panel.

    Table refreshes and drill-down selections are stamped with a generation
    number; a response only lands when its generation is still the newest, so
    a slow request can never overwrite fresher state.
    """

    def __init__(
        self,
        identity: ProducerIdentity | None,
        *,
        client: CostBackendClient,
        filters: FilterStateManager | None = None,
        timeout: float | None = None,
        auto_refresh: bool = True,
    ) -> None:
        self.identity = identity
        self.client = client
        self.timeout = timeout
        self.filters = filters or FilterStateManager()
        self.state = CostTableState()
        self.details = DrillDownState()
        self._lock = threading.Lock()
        self._table_generation = 0
        self._details_generation = 0
        if auto_refresh:
            self.filters.subscribe(self._on_filter_change)

    @property
    def current_filter(self) -> CostFilter:
        return self.filters.current

    def _on_filter_change(self, _new_filter: CostFilter) -> None:
        self.refresh()

    def refresh(self) -> CostTableState:
        if self.identity is None:
            return self.state
        with self._lock:
            self._table_generation += 1
            generation = self._table_generation
            self.state = CostTableState(status=FetchStatus.LOADING, generation=generation)
        result = fetch_plot_costs(self.identity, self.filters.current, client=self.client, timeout=self.timeout)
        self._apply_table(generation, result)
        return self.state

    def _apply_table(self, generation: int, result: PlotCostsResult) -> None:
        with self._lock:
            if generation != self._table_generation:
                return
            self.state = CostTableState(
                status=result.status,
                rows=list(result.rows),
                totals=grand_totals(result.rows),
                error_message=result.error_message,
                generation=generation,
            )

    def select_plot(self, plot_id: str) -> DrillDownState:
        if self.identity is None:
            return self.details
        with self._lock:
            self._details_generation += 1
            generation = self._details_generation
            self.details = DrillDownState(plot_id=plot_id, status=FetchStatus.LOADING)
        result = fetch_cost_details(self.identity, plot_id, self.filters.current, client=self.client)
        self._apply_details(generation, result)
        return self.details

    def _apply_details(self, generation: int, result: DetailsResult) -> None:
        with self._lock:
            if generation != self._details_generation or self.details.plot_id != result.plot_id:
                return
            self.details = DrillDownState(
                plot_id=result.plot_id,
                status=result.status,
                lines=list(result.lines),
                error_message=result.error_message,
            )

    def close_details(self) -> None:
        with self._lock:
            self._details_generation += 1
            self.details = DrillDownState()

    def detail_lines(self, group: CategoryGroup | None = None) -> list[CostDetailLine]:
        return filter_details_by_group(self.details.lines, group)

    def find_plot(self, plot_id: str) -> PlotCost | None:
        return next((row for row in self.state.rows if row.id == plot_id), None)
