from __future__ import annotations

from decimal import Decimal

from django.test import SimpleTestCase

from custos.services.aggregation import (
    build_indicators,
    category_distribution,
    details_total,
    filter_details_by_group,
    grand_totals,
    group_totals,
    percentage_of_total,
)
from custos.services.categories import COST_BUCKETS, CategoryGroup
from custos.services.records import CostDetailLine, PendingItem, PlotCost
from custos.tests.utils import detail_record, plot_record


def _rows() -> list[PlotCost]:
    return [
        PlotCost.from_record(plot_record("1", "Talhão 1A", "12.5", insumos="45000", operacional="12000", servicos_logistica="8000", administrativos="3500", outros="1500")),
        PlotCost.from_record(plot_record("2", "Talhão 2B", "18.3", insumos="62000", operacional="18500", servicos_logistica="11200", administrativos="5100", outros="2400")),
        PlotCost.from_record(plot_record("3", "Talhão 3C", "25.0", insumos="78500", operacional="23000", servicos_logistica="14300", administrativos="6800", outros="3200")),
    ]


class GroupTotalsTests(SimpleTestCase):
    def test_sums_each_bucket_across_rows(self) -> None:
        totals = group_totals(_rows())
        self.assertEqual(totals[CategoryGroup.INPUTS], Decimal("185500"))
        self.assertEqual(totals[CategoryGroup.OTHER], Decimal("7100"))
        self.assertEqual(set(totals), set(COST_BUCKETS))

    def test_group_totals_match_grand_total(self) -> None:
        rows = _rows()
        self.assertEqual(sum(group_totals(rows).values()), grand_totals(rows).grand_total)

    def test_row_total_is_sum_of_parts(self) -> None:
        for row in _rows():
            self.assertEqual(row.grand_total, sum(row.per_category_totals.values()))
        self.assertEqual(_rows()[1].grand_total, Decimal("99200"))


class GrandTotalsTests(SimpleTestCase):
    def test_empty_input_yields_zeroes(self) -> None:
        totals = grand_totals([])
        self.assertEqual(totals.grand_total, Decimal("0"))
        self.assertEqual(totals.total_area, Decimal("0"))
        self.assertEqual(totals.cost_per_hectare, Decimal("0"))
        self.assertTrue(all(value == 0 for value in totals.per_category.values()))

    def test_area_weighted_cost_per_hectare(self) -> None:
        rows = [
            PlotCost.from_record(plot_record("a", "A", "2", insumos="200")),
            PlotCost.from_record(plot_record("b", "B", "3", operacional="300")),
            PlotCost.from_record(plot_record("c", "C", "5", outros="500")),
        ]
        totals = grand_totals(rows)
        self.assertEqual(totals.total_area, Decimal("10"))
        self.assertEqual(totals.grand_total, Decimal("1000"))
        self.assertEqual(totals.cost_per_hectare, Decimal("100"))

    def test_accepts_generators(self) -> None:
        totals = grand_totals(row for row in _rows())
        self.assertEqual(totals.grand_total, Decimal("295000"))

    def test_is_deterministic(self) -> None:
        self.assertEqual(grand_totals(_rows()), grand_totals(_rows()))


class PercentageTests(SimpleTestCase):
    def test_zero_whole_returns_zero(self) -> None:
        for part in (Decimal("0"), Decimal("10"), Decimal("-3.5")):
            self.assertEqual(percentage_of_total(part, Decimal("0")), 0.0)

    def test_regular_share(self) -> None:
        self.assertAlmostEqual(percentage_of_total(Decimal("25"), Decimal("200")), 12.5)

    def test_distribution_adds_up_to_hundred(self) -> None:
        distribution = category_distribution(grand_totals(_rows()))
        self.assertAlmostEqual(sum(distribution.values()), 100.0, places=6)

    def test_distribution_of_empty_table_is_zero(self) -> None:
        distribution = category_distribution(grand_totals([]))
        self.assertEqual(set(distribution.values()), {0.0})


class DetailFilterTests(SimpleTestCase):
    def setUp(self) -> None:
        self.lines = [
            CostDetailLine.from_record(detail_record("1", "12800", categoria="Fertilizante", origem="Atividade Agrícola")),
            CostDetailLine.from_record(detail_record("1", "2100", categoria="Mão de Obra")),
            CostDetailLine.from_record(detail_record("1", "350", categoria="Seguro", origem="Estoque")),
        ]

    def test_all_returns_everything(self) -> None:
        self.assertEqual(filter_details_by_group(self.lines, CategoryGroup.ALL), self.lines)
        self.assertEqual(filter_details_by_group(self.lines, None), self.lines)

    def test_filters_by_group(self) -> None:
        filtered = filter_details_by_group(self.lines, CategoryGroup.OPERATIONAL)
        self.assertEqual([line.category for line in filtered], ["Mão de Obra"])

    def test_details_total(self) -> None:
        self.assertEqual(details_total(self.lines), Decimal("15250"))


class IndicatorTests(SimpleTestCase):
    def test_build_indicators(self) -> None:
        pending = [PendingItem(kind="NF sem detalhe", reference="Fertilizante", description="Falta unidade", status="pendente_detalhe")]
        indicators = build_indicators(_rows(), pending)
        self.assertEqual(indicators.total_costs, Decimal("295000"))
        self.assertEqual(indicators.average_cost_per_hectare, Decimal("295000") / Decimal("55.8"))
        self.assertEqual(indicators.pending_count, 1)
        self.assertIn(CategoryGroup.INPUTS, indicators.distribution)
