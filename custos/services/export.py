from __future__ import annotations

from decimal import Decimal
from io import BytesIO
from typing import Sequence

from openpyxl import Workbook

from .aggregation import grand_totals
from .categories import COST_BUCKETS
from .filters import CostFilter
from .records import PlotCost

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CURRENCY_NUMBER_FORMAT = '"R$" #,##0.00'


def _as_number(value: Decimal) -> float:
    return float(value.quantize(Decimal("0.01")))


def export_filename(cost_filter: CostFilter) -> str:
    season = cost_filter.season.replace("/", "-")
    return f"custo-por-talhao-{season}.xlsx"


def build_plot_costs_workbook(rows: Sequence[PlotCost], cost_filter: CostFilter) -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Custo por talhão"
    sheet.append(["Safra", cost_filter.season])
    if cost_filter.farm:
        sheet.append(["Fazenda", cost_filter.farm])
    if cost_filter.year_month:
        sheet.append(["Mês", cost_filter.year_month])
    sheet.append([])

    header = ["Talhão", "Área (ha)", *[bucket.label for bucket in COST_BUCKETS], "Total", "Custo/ha"]
    sheet.append(header)
    first_data_row = sheet.max_row + 1
    for row in rows:
        sheet.append(
            [
                row.plot_name,
                _as_number(row.area_hectares),
                *[_as_number(row.per_category_totals.get(bucket, Decimal("0"))) for bucket in COST_BUCKETS],
                _as_number(row.grand_total),
                _as_number(row.cost_per_hectare),
            ]
        )

    totals = grand_totals(rows)
    sheet.append(
        [
            "Total",
            _as_number(totals.total_area),
            *[_as_number(totals.per_category[bucket]) for bucket in COST_BUCKETS],
            _as_number(totals.grand_total),
            _as_number(totals.cost_per_hectare),
        ]
    )

    for sheet_row in sheet.iter_rows(min_row=first_data_row, min_col=3, max_col=len(header)):
        for cell in sheet_row:
            cell.number_format = CURRENCY_NUMBER_FORMAT

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
