from .aggregation import (
    build_indicators,
    category_distribution,
    details_total,
    filter_details_by_group,
    grand_totals,
    group_totals,
    percentage_of_total,
)
from .backend import CostBackendClient, CostBackendError
from .categories import COST_BUCKETS, CategoryGroup, SourceSystem, classify_category
from .fetchers import (
    FetchErrorKind,
    FetchStatus,
    fetch_cost_details,
    fetch_filter_options,
    fetch_pending_items,
    fetch_plot_costs,
)
from .filters import CostFilter, FilterStateManager, current_season, season_bounds
from .panel import PlotCostPanel
from .records import CostDetailLine, CostTotals, PendingItem, PlotCost

__all__ = [
    "COST_BUCKETS",
    "CategoryGroup",
    "CostBackendClient",
    "CostBackendError",
    "CostDetailLine",
    "CostFilter",
    "CostTotals",
    "FetchErrorKind",
    "FetchStatus",
    "FilterStateManager",
    "PendingItem",
    "PlotCost",
    "PlotCostPanel",
    "SourceSystem",
    "build_indicators",
    "category_distribution",
    "classify_category",
    "current_season",
    "details_total",
    "fetch_cost_details",
    "fetch_filter_options",
    "fetch_pending_items",
    "fetch_plot_costs",
    "filter_details_by_group",
    "grand_totals",
    "group_totals",
    "percentage_of_total",
    "season_bounds",
]
