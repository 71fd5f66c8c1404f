from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from django.conf import settings
from django.db import models

from .backend import CostBackendClient, CostBackendError
from .filters import CostFilter
from .records import CostDetailLine, PendingItem, PlotCost

if TYPE_CHECKING:  # pragma: no cover
    from users.services import ProducerIdentity

logger = logging.getLogger(__name__)

DEFAULT_COST_FETCH_TIMEOUT = 15.0
COSTS_ERROR_MESSAGE = "Não foi possível carregar os custos."
DETAILS_ERROR_MESSAGE = "Não foi possível carregar os detalhes do talhão."


class FetchStatus(models.TextChoices):
    IDLE = "idle", "Aguardando"
    SKIPPED = "skipped", "Sem usuário"
    LOADING = "loading", "Carregando"
    READY = "ready", "Carregado"
    EMPTY = "empty", "Sem dados"
    ERROR = "error", "Erro"


class FetchErrorKind(models.TextChoices):
    NETWORK_TIMEOUT = "timeout", "Tempo esgotado"
    NETWORK_ERROR = "network", "Erro de rede"


@dataclass(frozen=True)
class PlotCostsResult:
    status: FetchStatus
    rows: list[PlotCost] = field(default_factory=list)
    error_kind: FetchErrorKind | None = None
    error_message: str = ""

    @property
    def has_error(self) -> bool:
        return self.status == FetchStatus.ERROR


@dataclass(frozen=True)
class DetailsResult:
    plot_id: str
    status: FetchStatus
    lines: list[CostDetailLine] = field(default_factory=list)
    error_message: str = ""


def get_cost_fetch_timeout() -> float:
    return float(getattr(settings, "COST_FETCH_TIMEOUT_SECONDS", DEFAULT_COST_FETCH_TIMEOUT))


def _load_plot_costs(client: CostBackendClient, params: dict) -> list[PlotCost]:
    return [PlotCost.from_record(record) for record in client.query_plot_costs(params)]


def fetch_plot_costs(
    identity: ProducerIdentity | None,
    cost_filter: CostFilter,
    *,
    client: CostBackendClient,
    timeout: float | None = None,
) -> PlotCostsResult:
    """Load the per-plot cost table, giving up after ``timeout`` seconds.

    The request runs on a worker thread so the deadline covers the whole
    exchange; a request that outlives it is abandoned and its result dropped.
    """
    if identity is None:
        return PlotCostsResult(status=FetchStatus.SKIPPED)

    timeout = get_cost_fetch_timeout() if timeout is None else timeout
    params = cost_filter.as_backend_params(identity.user_id)
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="plot-costs")
    future = executor.submit(_load_plot_costs, client, params)
    try:
        rows = future.result(timeout=timeout)
    except FutureTimeoutError:
        logger.warning(
            "Plot cost query for user %s (safra %s) exceeded %.1fs.",
            identity.user_id,
            cost_filter.season,
            timeout,
        )
        return PlotCostsResult(
            status=FetchStatus.ERROR,
            error_kind=FetchErrorKind.NETWORK_TIMEOUT,
            error_message=COSTS_ERROR_MESSAGE,
        )
    except (CostBackendError, ValueError, ArithmeticError) as exc:
        logger.warning("Plot cost query for user %s failed: %s", identity.user_id, exc)
        return PlotCostsResult(
            status=FetchStatus.ERROR,
            error_kind=FetchErrorKind.NETWORK_ERROR,
            error_message=COSTS_ERROR_MESSAGE,
        )
    finally:
        executor.shutdown(wait=False, cancel_futures=True)

    if not rows:
        return PlotCostsResult(status=FetchStatus.EMPTY)
    return PlotCostsResult(status=FetchStatus.READY, rows=rows)


def fetch_cost_details(
    identity: ProducerIdentity | None,
    plot_id: str,
    cost_filter: CostFilter,
    *,
    client: CostBackendClient,
) -> DetailsResult:
    if identity is None:
        return DetailsResult(plot_id=plot_id, status=FetchStatus.SKIPPED)

    params = {"usuario_id": identity.user_id, "id_talhao": plot_id, "safra": cost_filter.season}
    if cost_filter.year_month:
        params["mes_ano"] = cost_filter.year_month
    try:
        lines = [CostDetailLine.from_record(record) for record in client.query_cost_details(params)]
    except (CostBackendError, ValueError, ArithmeticError) as exc:
        logger.warning("Cost detail query for plot %s failed: %s", plot_id, exc)
        return DetailsResult(plot_id=plot_id, status=FetchStatus.ERROR, error_message=DETAILS_ERROR_MESSAGE)

    if not lines:
        return DetailsResult(plot_id=plot_id, status=FetchStatus.EMPTY)
    return DetailsResult(plot_id=plot_id, status=FetchStatus.READY, lines=lines)


def fetch_pending_items(identity: ProducerIdentity | None, *, client: CostBackendClient) -> list[PendingItem]:
    if identity is None:
        return []
    try:
        return [PendingItem.from_record(record) for record in client.query_pending_items(identity.user_id)]
    except (CostBackendError, ValueError) as exc:
        logger.warning("Pending cost items for user %s could not be loaded: %s", identity.user_id, exc)
        return []


def resolve_farm_id(farms: list[dict[str, str]], farm: str | None) -> str | None:
    """Map the farm filter (a name, or an id) to the backend id used to narrow plots."""
    if not farm:
        return None
    for option in farms:
        if farm in (option["id"], option["name"]):
            return option["id"]
    return None


def fetch_filter_options(identity: ProducerIdentity | None, *, client: CostBackendClient, farm: str | None = None) -> dict[str, list]:
    """Seasons, farms and plots for the filter bar; each list degrades to empty on failure.

    When ``farm`` matches a known farm only that farm's plots are listed.
    """
    options: dict[str, list] = {"seasons": [], "farms": [], "plots": []}
    if identity is None:
        return options
    loaders = {
        "seasons": lambda: client.list_seasons(identity.user_id),
        "farms": lambda: client.list_farms(identity.user_id),
        "plots": lambda: client.list_plots(identity.user_id, resolve_farm_id(options["farms"], farm)),
    }
    for key, loader in loaders.items():
        try:
            options[key] = loader()
        except (CostBackendError, KeyError) as exc:
            logger.warning("Filter option '%s' for user %s could not be loaded: %s", key, identity.user_id, exc)
    return options
