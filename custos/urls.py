from django.urls import path

from .views import PendingItemsView, PlotCostDashboardView, PlotCostDetailView, PlotCostExportView

app_name = "custos"

urlpatterns = [
    path("", PlotCostDashboardView.as_view(), name="dashboard"),
    path(
        "talhoes/<str:plot_id>/detalhes/",
        PlotCostDetailView.as_view(),
        name="plot-details",
    ),
    path("pendencias/", PendingItemsView.as_view(), name="pending-items"),
    path("exportar/", PlotCostExportView.as_view(), name="export"),
]
