from __future__ import annotations

from datetime import date

from django.http import QueryDict
from django.test import SimpleTestCase

from custos.services.categories import CategoryGroup
from custos.services.filters import CostFilter, FilterStateManager, current_season, season_bounds


class SeasonRuleTests(SimpleTestCase):
    def test_may_starts_a_new_season(self) -> None:
        self.assertEqual(current_season(date(2024, 5, 1)), "2024/2025")
        self.assertEqual(current_season(date(2024, 12, 31)), "2024/2025")

    def test_april_still_belongs_to_previous_season(self) -> None:
        self.assertEqual(current_season(date(2025, 4, 30)), "2024/2025")
        self.assertEqual(current_season(date(2025, 1, 15)), "2024/2025")

    def test_season_bounds(self) -> None:
        self.assertEqual(season_bounds("2024/2025"), (date(2024, 5, 1), date(2025, 4, 30)))

    def test_season_bounds_rejects_malformed_label(self) -> None:
        with self.assertRaises(ValueError):
            season_bounds("2024")


class CostFilterTests(SimpleTestCase):
    def test_from_query_params_reads_every_field(self) -> None:
        params = QueryDict(
            "safra=2023/2024&fazenda=Santa+Rita&talhao=Talh%C3%A3o+A&talhao=Talh%C3%A3o+B&macrogrupo=insumos&mes=2023-09"
        )
        cost_filter = CostFilter.from_query_params(params, today=date(2024, 8, 1))
        self.assertEqual(cost_filter.season, "2023/2024")
        self.assertEqual(cost_filter.farm, "Santa Rita")
        self.assertEqual(cost_filter.plot_names, frozenset({"Talhão A", "Talhão B"}))
        self.assertEqual(cost_filter.category, CategoryGroup.INPUTS)
        self.assertEqual(cost_filter.year_month, "2023-09")

    def test_from_query_params_defaults(self) -> None:
        cost_filter = CostFilter.from_query_params(QueryDict("macrogrupo=desconhecido&mes=setembro"), today=date(2024, 8, 1))
        self.assertEqual(cost_filter.season, "2024/2025")
        self.assertIsNone(cost_filter.farm)
        self.assertTrue(cost_filter.all_plots)
        self.assertEqual(cost_filter.category, CategoryGroup.ALL)
        self.assertIsNone(cost_filter.year_month)

    def test_category_accepts_label(self) -> None:
        cost_filter = CostFilter.from_query_params({"macrogrupo": "Serviços/Logística"}, today=date(2024, 8, 1))
        self.assertEqual(cost_filter.category, CategoryGroup.SERVICES_LOGISTICS)

    def test_backend_params_only_carry_set_fields(self) -> None:
        cost_filter = CostFilter(season="2024/2025")
        self.assertEqual(cost_filter.as_backend_params("u-1"), {"usuario_id": "u-1", "safra": "2024/2025"})

        narrowed = CostFilter(
            season="2024/2025",
            farm="Santa Rita",
            plot_names=frozenset({"B", "A"}),
            category=CategoryGroup.OPERATIONAL,
            year_month="2024-10",
        )
        self.assertEqual(
            narrowed.as_backend_params("u-1"),
            {
                "usuario_id": "u-1",
                "safra": "2024/2025",
                "fazenda": "Santa Rita",
                "talhoes": ["A", "B"],
                "macrogrupo": "operacional",
                "mes_ano": "2024-10",
            },
        )

    def test_query_params_round_trip(self) -> None:
        original = CostFilter(season="2024/2025", farm="Boa Vista", plot_names=frozenset({"T1"}), year_month="2025-02")
        query = QueryDict(mutable=True)
        for key, value in original.as_query_params():
            query.appendlist(key, value)
        self.assertEqual(CostFilter.from_query_params(query), original)


class FilterStateManagerTests(SimpleTestCase):
    def setUp(self) -> None:
        self.manager = FilterStateManager(today=date(2024, 8, 1))
        self.notifications: list[CostFilter] = []
        self.manager.subscribe(self.notifications.append)

    def test_default_filter_uses_current_season(self) -> None:
        self.assertEqual(self.manager.current.season, "2024/2025")
        self.assertTrue(self.manager.current.all_plots)

    def test_toggle_twice_restores_original(self) -> None:
        original = self.manager.current
        self.manager.toggle_plot("Talhão A")
        self.assertIn("Talhão A", self.manager.current.plot_names)
        self.manager.toggle_plot("Talhão A")
        self.assertEqual(self.manager.current, original)
        self.assertEqual(len(self.notifications), 2)

    def test_update_replaces_subset_and_notifies(self) -> None:
        updated = self.manager.update(farm="Santa Rita", category="administrativos")
        self.assertEqual(updated.farm, "Santa Rita")
        self.assertEqual(updated.category, CategoryGroup.ADMINISTRATIVE)
        self.assertEqual(updated.season, "2024/2025")
        self.assertEqual(self.notifications, [updated])

    def test_update_without_change_is_silent(self) -> None:
        self.manager.update(season="2024/2025")
        self.assertEqual(self.notifications, [])

    def test_blank_season_falls_back_to_default(self) -> None:
        self.manager.update(season="2022/2023")
        self.manager.update(season="")
        self.assertEqual(self.manager.current.season, "2024/2025")

    def test_unknown_field_is_rejected(self) -> None:
        with self.assertRaises(TypeError):
            self.manager.update(talhao="X")

    def test_clear_plots(self) -> None:
        self.manager.update(plot_names=["A", "B"])
        self.manager.clear_plots()
        self.assertTrue(self.manager.current.all_plots)
