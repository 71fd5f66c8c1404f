from __future__ import annotations

import re
from dataclasses import dataclass, field, fields, replace
from datetime import date
from typing import Any, Callable, Iterable, Mapping

from django.utils import timezone

from .categories import CategoryGroup

SEASON_START_MONTH = 5  # safra runs May (year N) through April (year N+1)
YEAR_MONTH_PATTERN = re.compile(r"^(\d{4})-(0[1-9]|1[0-2])$")
SEASON_PATTERN = re.compile(r"^(\d{4})/(\d{4})$")


def current_season(today: date | None = None) -> str:
    """Return the safra label that contains ``today``."""
    today = today or timezone.localdate()
    start_year = today.year if today.month >= SEASON_START_MONTH else today.year - 1
    return f"{start_year}/{start_year + 1}"


def season_bounds(season: str) -> tuple[date, date]:
    """First and last day of a ``"YYYY/YYYY"`` safra."""
    match = SEASON_PATTERN.match((season or "").strip())
    if not match:
        raise ValueError(f"Safra inválida: {season!r}")
    start_year = int(match.group(1))
    return date(start_year, SEASON_START_MONTH, 1), date(start_year + 1, SEASON_START_MONTH - 1, 30)


def _normalize_year_month(raw: object) -> str | None:
    value = str(raw or "").strip()
    return value if YEAR_MONTH_PATTERN.match(value) else None


@dataclass(frozen=True)
class CostFilter:
    season: str
    farm: str | None = None
    plot_names: frozenset[str] = field(default_factory=frozenset)
    category: CategoryGroup = CategoryGroup.ALL
    year_month: str | None = None

    @classmethod
    def default(cls, today: date | None = None) -> "CostFilter":
        return cls(season=current_season(today))

    @classmethod
    def from_query_params(cls, params: Mapping[str, Any], *, today: date | None = None) -> "CostFilter":
        """Build a filter from request parameters (``QueryDict`` or plain dict)."""
        getlist = getattr(params, "getlist", None)
        if getlist is not None:
            plot_values: Iterable[str] = getlist("talhao")
        else:
            raw_plots = params.get("talhao") or []
            plot_values = [raw_plots] if isinstance(raw_plots, str) else raw_plots
        season = (params.get("safra") or "").strip() or current_season(today)
        farm = (params.get("fazenda") or "").strip() or None
        category = CategoryGroup.parse(params.get("macrogrupo")) or CategoryGroup.ALL
        return cls(
            season=season,
            farm=farm,
            plot_names=frozenset(name.strip() for name in plot_values if name and name.strip()),
            category=category,
            year_month=_normalize_year_month(params.get("mes")),
        )

    @property
    def all_plots(self) -> bool:
        return not self.plot_names

    def as_backend_params(self, user_id: str) -> dict[str, Any]:
        payload: dict[str, Any] = {"usuario_id": user_id, "safra": self.season}
        if self.farm:
            payload["fazenda"] = self.farm
        if self.plot_names:
            payload["talhoes"] = sorted(self.plot_names)
        if self.category != CategoryGroup.ALL:
            payload["macrogrupo"] = self.category.value
        if self.year_month:
            payload["mes_ano"] = self.year_month
        return payload

    def as_query_params(self) -> list[tuple[str, str]]:
        """Inverse of ``from_query_params``; used for retry and export links."""
        pairs: list[tuple[str, str]] = [("safra", self.season)]
        if self.farm:
            pairs.append(("fazenda", self.farm))
        pairs.extend(("talhao", name) for name in sorted(self.plot_names))
        if self.category != CategoryGroup.ALL:
            pairs.append(("macrogrupo", self.category.value))
        if self.year_month:
            pairs.append(("mes", self.year_month))
        return pairs


FilterListener = Callable[[CostFilter], None]

_FILTER_FIELDS = frozenset(item.name for item in fields(CostFilter))


class FilterStateManager:
    """Single writer of the panel's ``CostFilter``.

    Every effective change notifies the subscribed listeners with the new
    filter; updates that leave the filter untouched are silent.
    """

    def __init__(self, initial: CostFilter | None = None, *, today: date | None = None) -> None:
        self._today = today
        self._current = self._with_default_season(initial or CostFilter.default(today))
        self._listeners: list[FilterListener] = []

    @property
    def current(self) -> CostFilter:
        return self._current

    def subscribe(self, listener: FilterListener) -> None:
        self._listeners.append(listener)

    def update(self, **changes: Any) -> CostFilter:
        unknown = set(changes) - _FILTER_FIELDS
        if unknown:
            raise TypeError(f"Campos de filtro desconhecidos: {', '.join(sorted(unknown))}")
        if "plot_names" in changes:
            changes["plot_names"] = frozenset(changes["plot_names"] or ())
        if "category" in changes:
            changes["category"] = CategoryGroup.parse(changes["category"]) or CategoryGroup.ALL
        return self._commit(replace(self._current, **changes))

    def toggle_plot(self, plot_name: str) -> CostFilter:
        selected = set(self._current.plot_names)
        if plot_name in selected:
            selected.remove(plot_name)
        else:
            selected.add(plot_name)
        return self._commit(replace(self._current, plot_names=frozenset(selected)))

    def clear_plots(self) -> CostFilter:
        return self._commit(replace(self._current, plot_names=frozenset()))

    def _commit(self, candidate: CostFilter) -> CostFilter:
        candidate = self._with_default_season(candidate)
        if candidate == self._current:
            return self._current
        self._current = candidate
        for listener in list(self._listeners):
            listener(candidate)
        return candidate

    def _with_default_season(self, candidate: CostFilter) -> CostFilter:
        season = (candidate.season or "").strip()
        if season == candidate.season and season:
            return candidate
        return replace(candidate, season=season or current_season(self._today))
