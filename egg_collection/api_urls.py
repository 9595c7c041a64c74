from __future__ import annotations

from django.urls import path

from . import views

app_name = "egg-collection-api"

urlpatterns = [
    path("collections/", views.CollectionRecordView.as_view(), name="record"),
    path("collections/validate/", views.CollectionValidateView.as_view(), name="validate"),
    path("collections/summary/", views.CollectionSummaryView.as_view(), name="summary"),
    path("collections/daily-report/", views.DailyReportView.as_view(), name="daily-report"),
    path("collections/export/", views.CollectionExportView.as_view(), name="export"),
    path("farmers/<int:farmer_id>/unpaid/", views.UnpaidCollectionsView.as_view(), name="farmer-unpaid"),
    path("payments/batch/", views.BatchPaymentView.as_view(), name="batch-payment"),
    path("routes/<int:route_id>/optimize/", views.RouteOptimizeView.as_view(), name="route-optimize"),
    path("market-prices/", views.MarketPricesView.as_view(), name="market-prices"),
]
