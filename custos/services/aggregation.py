"""Pure reductions over already-fetched plot cost rows.

Accumulation always follows the input order so repeated runs over the same
rows produce identical ``Decimal`` results.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Iterable, Sequence

from .categories import COST_BUCKETS, CategoryGroup
from .records import ZERO, CostDetailLine, CostIndicators, CostTotals, PendingItem, PlotCost, cost_per_hectare


def group_totals(rows: Iterable[PlotCost]) -> dict[CategoryGroup, Decimal]:
    totals: dict[CategoryGroup, Decimal] = {bucket: ZERO for bucket in COST_BUCKETS}
    for row in rows:
        for bucket in COST_BUCKETS:
            totals[bucket] += row.per_category_totals.get(bucket, ZERO)
    return totals


def grand_totals(rows: Iterable[PlotCost]) -> CostTotals:
    rows = list(rows)
    per_category = group_totals(rows)
    total_area = sum((row.area_hectares for row in rows), ZERO)
    grand_total = sum((per_category[bucket] for bucket in COST_BUCKETS), ZERO)
    return CostTotals(per_category=per_category, grand_total=grand_total, total_area=total_area)


def percentage_of_total(part: Decimal, whole: Decimal) -> float:
    if not whole:
        return 0.0
    return float(Decimal(part) / Decimal(whole) * Decimal("100"))


def category_distribution(totals: CostTotals) -> dict[CategoryGroup, float]:
    return {
        bucket: percentage_of_total(totals.per_category.get(bucket, ZERO), totals.grand_total)
        for bucket in COST_BUCKETS
    }


def filter_details_by_group(
    lines: Sequence[CostDetailLine], group: CategoryGroup | None
) -> list[CostDetailLine]:
    """Local macrogrupo filter over already-fetched drill-down lines."""
    if group is None or group == CategoryGroup.ALL:
        return list(lines)
    return [line for line in lines if line.category_group == group]


def details_total(lines: Iterable[CostDetailLine]) -> Decimal:
    return sum((line.amount for line in lines), ZERO)


def build_indicators(rows: Iterable[PlotCost], pending: Sequence[PendingItem] = ()) -> CostIndicators:
    totals = grand_totals(rows)
    return CostIndicators(
        total_costs=totals.grand_total,
        average_cost_per_hectare=cost_per_hectare(totals.grand_total, totals.total_area),
        pending_count=len(pending),
        distribution=category_distribution(totals),
    )
