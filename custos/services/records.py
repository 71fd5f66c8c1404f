from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from .categories import COST_BUCKETS, CategoryGroup, SourceSystem, classify_category

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
TOTAL_MISMATCH_TOLERANCE = Decimal("0.01")


def to_decimal(value: object) -> Decimal:
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    if value is None or value == "":
        return ZERO
    try:
        result = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return ZERO
    if not result.is_finite():
        return ZERO
    return result


def _require_mapping(record: object, kind: str) -> None:
    if not isinstance(record, Mapping):
        raise ValueError(f"{kind} record must be an object, got {type(record).__name__}.")


def cost_per_hectare(total: Decimal, area: Decimal) -> Decimal:
    if area <= 0:
        return ZERO
    return total / area


def _iso_date(value: object) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    raw = str(value or "").strip()
    if "/" in raw:
        # dd/mm/yyyy as the ledger exports it
        try:
            return datetime.strptime(raw, "%d/%m/%Y").date().isoformat()
        except ValueError:
            return raw
    return raw[:10]


@dataclass(frozen=True)
class PlotCost:
    id: str
    plot_name: str
    area_hectares: Decimal
    per_category_totals: Mapping[CategoryGroup, Decimal]

    @property
    def grand_total(self) -> Decimal:
        return sum((self.per_category_totals.get(bucket, ZERO) for bucket in COST_BUCKETS), ZERO)

    @property
    def cost_per_hectare(self) -> Decimal:
        return cost_per_hectare(self.grand_total, self.area_hectares)

    def amount_for(self, category: CategoryGroup) -> Decimal:
        if category == CategoryGroup.ALL:
            return self.grand_total
        return self.per_category_totals.get(category, ZERO)

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "PlotCost":
        _require_mapping(record, "Plot cost")
        area = max(to_decimal(record.get("area")), ZERO)
        totals = {bucket: to_decimal(record.get(bucket.record_key)) for bucket in COST_BUCKETS}
        plot = cls(
            id=str(record.get("id_talhao") or record.get("id") or record.get("talhao") or ""),
            plot_name=str(record.get("talhao") or record.get("nome") or ""),
            area_hectares=area,
            per_category_totals=totals,
        )
        reported_total = record.get("total")
        if reported_total is not None:
            drift = abs(to_decimal(reported_total) - plot.grand_total)
            if drift > TOTAL_MISMATCH_TOLERANCE:
                logger.debug(
                    "Backend total for plot %s (%s) differs from the category sum by %s; using the sum.",
                    plot.plot_name,
                    plot.id,
                    drift,
                )
        return plot

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "talhao": self.plot_name,
            "area": self.area_hectares,
        }
        for bucket in COST_BUCKETS:
            payload[bucket.record_key] = self.per_category_totals.get(bucket, ZERO)
        payload["total"] = self.grand_total
        payload["custo_ha"] = self.cost_per_hectare
        return payload


@dataclass(frozen=True)
class CostDetailLine:
    date: str
    category: str
    description: str
    source_system: SourceSystem
    amount: Decimal
    category_group: CategoryGroup | None = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "CostDetailLine":
        _require_mapping(record, "Cost detail")
        category = str(record.get("categoria") or "")
        group = CategoryGroup.parse(record.get("macrogrupo"))
        if group is None or group == CategoryGroup.ALL:
            group = classify_category(category)
        return cls(
            date=_iso_date(record.get("data")),
            category=category,
            description=str(record.get("descricao") or ""),
            source_system=SourceSystem.parse(record.get("origem")),
            amount=to_decimal(record.get("valor")),
            category_group=group,
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "data": self.date,
            "categoria": self.category,
            "descricao": self.description,
            "origem": self.source_system.label,
            "valor": str(self.amount),
            "macrogrupo": self.category_group.value if self.category_group else None,
        }


@dataclass(frozen=True)
class PendingItem:
    kind: str
    reference: str
    description: str
    status: str

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "PendingItem":
        _require_mapping(record, "Pending item")
        return cls(
            kind=str(record.get("tipo") or ""),
            reference=str(record.get("referencia") or ""),
            description=str(record.get("descricao") or ""),
            status=str(record.get("status") or ""),
        )

    def as_dict(self) -> dict[str, str]:
        return {
            "tipo": self.kind,
            "referencia": self.reference,
            "descricao": self.description,
            "status": self.status,
        }


@dataclass(frozen=True)
class CostTotals:
    per_category: Mapping[CategoryGroup, Decimal]
    grand_total: Decimal
    total_area: Decimal

    @property
    def cost_per_hectare(self) -> Decimal:
        return cost_per_hectare(self.grand_total, self.total_area)


@dataclass(frozen=True)
class CostIndicators:
    total_costs: Decimal
    average_cost_per_hectare: Decimal
    pending_count: int
    distribution: Mapping[CategoryGroup, float] = field(default_factory=dict)
