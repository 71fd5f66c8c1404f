from __future__ import annotations

from typing import Any

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.urls import reverse
from django.utils.http import urlencode
from django.views import generic

from zedasafra.mixins import ProducerContextMixin

from .services.aggregation import build_indicators, details_total, filter_details_by_group
from .services.backend import CostBackendClient
from .services.categories import COST_BUCKETS, CategoryGroup
from .services.export import XLSX_CONTENT_TYPE, build_plot_costs_workbook, export_filename
from .services.fetchers import FetchStatus, fetch_filter_options, fetch_pending_items
from .services.filters import CostFilter, FilterStateManager
from .services.panel import PlotCostPanel


class PlotCostFilterMixin(ProducerContextMixin):
    """Shared filter parsing and panel construction for the cost views."""

    def get_cost_filter(self) -> CostFilter:
        cost_filter = CostFilter.from_query_params(self.request.GET)
        identity = self.identity
        if identity and identity.default_farm and "fazenda" not in self.request.GET:
            cost_filter = FilterStateManager(cost_filter).update(farm=identity.default_farm)
        return cost_filter

    def get_client(self) -> CostBackendClient:
        return CostBackendClient.from_settings()

    def build_panel(self, cost_filter: CostFilter) -> PlotCostPanel:
        client = self.get_client() if self.identity else None
        return PlotCostPanel(
            self.identity,
            client=client,
            filters=FilterStateManager(cost_filter),
            auto_refresh=False,
        )


class PlotCostDashboardView(PlotCostFilterMixin, generic.TemplateView):
    template_name = "custos/dashboard.html"

    def get_context_data(self, **kwargs: Any) -> dict[str, Any]:
        context = super().get_context_data(**kwargs)
        cost_filter = self.get_cost_filter()
        panel = self.build_panel(cost_filter)
        panel.refresh()

        pending = []
        options: dict[str, list] = {"seasons": [], "farms": [], "plots": []}
        if self.identity:
            pending = fetch_pending_items(self.identity, client=panel.client)
            options = fetch_filter_options(self.identity, client=panel.client, farm=cost_filter.farm)

        selected_plot_id = (self.request.GET.get("detalhe") or "").strip()
        detail_group = CategoryGroup.parse(self.request.GET.get("detalhe_macrogrupo")) or CategoryGroup.ALL
        detail_lines = []
        if selected_plot_id:
            panel.select_plot(selected_plot_id)
            detail_lines = panel.detail_lines(detail_group)

        query_string = urlencode(cost_filter.as_query_params())
        context.update(
            {
                "identity": self.identity,
                "filters": cost_filter,
                "table": panel.state,
                "rows": panel.state.rows,
                "totals": panel.state.totals,
                "indicators": build_indicators(panel.state.rows, pending),
                "pending_items": pending,
                "buckets": COST_BUCKETS,
                "category_choices": CategoryGroup.choices,
                "options": options,
                "query_string": query_string,
                "retry_url": f"{reverse('custos:dashboard')}?{query_string}",
                "export_url": f"{reverse('custos:export')}?{query_string}",
                "details": panel.details,
                "selected_plot": panel.find_plot(selected_plot_id) if selected_plot_id else None,
                "detail_group": detail_group,
                "detail_lines": detail_lines,
                "detail_total": details_total(detail_lines),
            }
        )
        return context


class PlotCostDetailView(PlotCostFilterMixin, generic.View):
    http_method_names = ["get"]

    def get(self, request: HttpRequest, plot_id: str, *args: Any, **kwargs: Any) -> JsonResponse:
        panel = self.build_panel(self.get_cost_filter())
        details = panel.select_plot(plot_id)
        group = CategoryGroup.parse(request.GET.get("macrogrupo")) or CategoryGroup.ALL
        lines = filter_details_by_group(details.lines, group)
        status = details.status if self.identity else FetchStatus.SKIPPED
        return JsonResponse(
            {
                "plot_id": plot_id,
                "status": str(status),
                "error": details.error_message,
                "macrogrupo": group.value,
                "total": str(details_total(lines)),
                "lines": [line.as_dict() for line in lines],
            }
        )


class PendingItemsView(PlotCostFilterMixin, generic.View):
    http_method_names = ["get"]

    def get(self, request: HttpRequest, *args: Any, **kwargs: Any) -> JsonResponse:
        items = []
        if self.identity:
            items = fetch_pending_items(self.identity, client=self.get_client())
        return JsonResponse({"count": len(items), "items": [item.as_dict() for item in items]})


class PlotCostExportView(PlotCostFilterMixin, generic.View):
    http_method_names = ["get"]

    def get(self, request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
        cost_filter = self.get_cost_filter()
        panel = self.build_panel(cost_filter)
        state = panel.refresh()
        if state.status == FetchStatus.ERROR:
            return JsonResponse({"error": state.error_message}, status=503)
        response = HttpResponse(build_plot_costs_workbook(state.rows, cost_filter), content_type=XLSX_CONTENT_TYPE)
        response["Content-Disposition"] = f'attachment; filename="{export_filename(cost_filter)}"'
        return response
