from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views import View

from agropos.mixins import CapabilityRequiredMixin
from users.models import RolePermission

from .exceptions import CollectionValidationError, ReportingError, RouteNotFound, StaffNotFound
from .forms import (
    BatchPaymentForm,
    CollectionPeriodForm,
    DailyReportForm,
    EggCollectionRequestForm,
    flatten_collection_payload,
)
from .models import EggCollection
from .services import (
    MarketPriceProvider,
    build_collection_service,
    export_collection_data,
    export_collection_workbook,
    get_collection_summary,
    get_daily_collection_report,
    optimize_route,
    process_batch_payment,
)
from .services.exports import CSV_CONTENT_TYPE, XLSX_CONTENT_TYPE


Capability = RolePermission.PermissionCode
TOTAL_VALUE_PLACES = Decimal("0.0001")

# Process-wide price cache.
market_price_provider = MarketPriceProvider()


def collection_payload(collection: EggCollection) -> dict[str, Any]:
    return {
        "id": collection.pk,
        "farmer_id": collection.farmer_id,
        "staff_id": collection.collector_id,
        "route_id": collection.route_id,
        "collection_date": collection.collection_date.isoformat(),
        "hen_eggs": collection.hen_eggs.as_dict(),
        "duck_eggs": {key: value for key, value in collection.duck_eggs.as_dict().items() if key != "extra_large"},
        "hen_egg_price": str(collection.hen_egg_price),
        "duck_egg_price": str(collection.duck_egg_price),
        "total_hen_eggs": collection.total_hen_eggs,
        "total_duck_eggs": collection.total_duck_eggs,
        "total_value": str(collection.total_value.quantize(TOTAL_VALUE_PLACES)),
        "quality_notes": collection.quality_notes,
        "quality_score": collection.quality_score,
        "paid": collection.paid,
        "payment_date": collection.payment_date.isoformat() if collection.payment_date else None,
        "synced": collection.synced,
    }


def _form_error(form) -> JsonResponse:
    return JsonResponse(
        {"error": "Invalid request data.", "reason": "invalid_input", "details": form.errors.get_json_data()},
        status=400,
    )


def _json_body(request: HttpRequest) -> dict[str, Any] | None:
    try:
        payload = json.loads(request.body or b"{}")
    except json.JSONDecodeError:
        return None
    return payload if isinstance(payload, dict) else None


def _invalid_json() -> JsonResponse:
    return JsonResponse({"error": "Invalid JSON body.", "reason": "invalid_input"}, status=400)


class CollectionRecordView(CapabilityRequiredMixin, View):
    http_method_names = ["post"]
    required_capability = Capability.EGG_COLLECTION

    def post(self, request: HttpRequest, *args: Any, **kwargs: Any) -> JsonResponse:
        payload = _json_body(request)
        if payload is None:
            return _invalid_json()
        form = EggCollectionRequestForm(flatten_collection_payload(payload))
        if not form.is_valid():
            return _form_error(form)

        service = build_collection_service(price_provider=market_price_provider)
        try:
            outcome = service.record_collection_with_report(form.to_request(staff_id=request.user.pk))
        except CollectionValidationError as exc:
            return JsonResponse({"error": exc.message, "reason": exc.reason.value}, status=400)

        return JsonResponse(
            {
                "collection": collection_payload(outcome.collection),
                "warnings": outcome.warnings,
                "side_effects": [
                    {"name": result.name, "succeeded": result.succeeded, "error": result.error}
                    for result in outcome.side_effects
                ],
            },
            status=201,
        )


class CollectionValidateView(CapabilityRequiredMixin, View):
    http_method_names = ["post"]
    required_capability = Capability.EGG_COLLECTION

    def post(self, request: HttpRequest, *args: Any, **kwargs: Any) -> JsonResponse:
        payload = _json_body(request)
        if payload is None:
            return _invalid_json()
        form = EggCollectionRequestForm(flatten_collection_payload(payload))
        if not form.is_valid():
            return _form_error(form)
        service = build_collection_service(price_provider=market_price_provider)
        report = service.validator.validate_collection_data(form.to_request(staff_id=request.user.pk))
        return JsonResponse(report.as_dict())


class CollectionSummaryView(CapabilityRequiredMixin, View):
    http_method_names = ["get"]
    required_capability = Capability.REPORTS_VIEW

    def get(self, request: HttpRequest, *args: Any, **kwargs: Any) -> JsonResponse:
        form = CollectionPeriodForm(request.GET)
        if not form.is_valid():
            return _form_error(form)
        start, end = form.bounds
        try:
            summary = get_collection_summary(start, end, form.cleaned_data.get("route"))
        except ReportingError as exc:
            return JsonResponse({"error": str(exc)}, status=500)
        return JsonResponse({"summary": summary.as_dict()})


class DailyReportView(CapabilityRequiredMixin, View):
    http_method_names = ["get"]
    required_capability = Capability.REPORTS_VIEW

    def get(self, request: HttpRequest, *args: Any, **kwargs: Any) -> JsonResponse:
        form = DailyReportForm(request.GET)
        if not form.is_valid():
            return _form_error(form)
        try:
            report = get_daily_collection_report(form.day)
        except ReportingError as exc:
            return JsonResponse({"error": str(exc)}, status=500)
        return JsonResponse(report.as_dict())


class CollectionExportView(CapabilityRequiredMixin, View):
    http_method_names = ["get"]
    required_capability = Capability.REPORTS_EXPORT

    def get(self, request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
        form = CollectionPeriodForm(request.GET)
        if not form.is_valid():
            return _form_error(form)
        start, end = form.bounds
        route_id = form.cleaned_data.get("route")
        filename = f"egg-collections-{form.cleaned_data['start']:%Y%m%d}-{form.cleaned_data['end']:%Y%m%d}"
        try:
            if form.export_format == "xlsx":
                response = HttpResponse(
                    export_collection_workbook(start, end, route_id),
                    content_type=XLSX_CONTENT_TYPE,
                )
                filename += ".xlsx"
            else:
                response = HttpResponse(
                    export_collection_data(start, end, route_id),
                    content_type=f"{CSV_CONTENT_TYPE}; charset=utf-8",
                )
                filename += ".csv"
        except ReportingError as exc:
            return JsonResponse({"error": str(exc)}, status=500)
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response


class UnpaidCollectionsView(CapabilityRequiredMixin, View):
    http_method_names = ["get"]
    required_capability = Capability.EGG_COLLECTION

    def get(self, request: HttpRequest, farmer_id: int, *args: Any, **kwargs: Any) -> JsonResponse:
        service = build_collection_service(price_provider=market_price_provider)
        collections = service.get_unpaid_collections(farmer_id)
        payload = [collection_payload(collection) for collection in collections]
        return JsonResponse({"collections": payload, "count": len(payload)})


class BatchPaymentView(CapabilityRequiredMixin, View):
    http_method_names = ["post"]
    required_capability = Capability.CREDIT_APPROVE

    def post(self, request: HttpRequest, *args: Any, **kwargs: Any) -> JsonResponse:
        payload = _json_body(request)
        if payload is None:
            return _invalid_json()
        form = BatchPaymentForm(payload)
        if not form.is_valid():
            return _form_error(form)
        try:
            result = process_batch_payment(
                form.cleaned_data["collection_ids"],
                staff_id=request.user.pk,
                payment_method=form.cleaned_data["payment_method"],
            )
        except StaffNotFound as exc:
            return JsonResponse({"error": str(exc)}, status=400)
        return JsonResponse(result.as_dict())


class RouteOptimizeView(CapabilityRequiredMixin, View):
    http_method_names = ["get"]
    required_capability = Capability.EGG_COLLECTION

    def get(self, request: HttpRequest, route_id: int, *args: Any, **kwargs: Any) -> JsonResponse:
        try:
            optimization = optimize_route(route_id)
        except RouteNotFound as exc:
            return JsonResponse({"error": str(exc)}, status=404)
        return JsonResponse(optimization.as_dict())


class MarketPricesView(CapabilityRequiredMixin, View):
    http_method_names = ["get"]
    required_capability = Capability.EGG_COLLECTION

    def get(self, request: HttpRequest, *args: Any, **kwargs: Any) -> JsonResponse:
        return JsonResponse(market_price_provider.get_prices().as_dict())
