from __future__ import annotations

import logging
from contextlib import nullcontext
from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Iterable, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count, Sum
from django.utils import timezone

from customers.models import Customer
from notifications.services import NotificationService

from ..models import EggCollection, EggCollectionQuerySet
from ..scoring import average_quality
from .market_prices import MarketPriceProvider
from .quality import QualityAlertService, expected_production
from .requests import EggCollectionRequest
from .validation import CollectionValidator

logger = logging.getLogger(__name__)

ON_TIME_RATE_PLACEHOLDER = Decimal("95")


@dataclass(frozen=True)
class SideEffectResult:
    name: str
    succeeded: bool
    error: str = ""
    detail: dict[str, Any] = field(default_factory=dict)


@dataclass
class RecordingOutcome:
    collection: EggCollection
    side_effects: list[SideEffectResult] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def failed_side_effects(self) -> list[SideEffectResult]:
        return [result for result in self.side_effects if not result.succeeded]


def _rounded_mean(total: int, count: int) -> int:
    if not count:
        return 0
    return int((Decimal(total) / Decimal(count)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class EggCollectionService:
    """Records collections and runs the follow-up bookkeeping for each one."""

    def __init__(
        self,
        *,
        notifier: NotificationService | None = None,
        price_provider: MarketPriceProvider | None = None,
        validator: CollectionValidator | None = None,
        window_days: int | None = None,
    ) -> None:
        self.notifier = notifier or NotificationService()
        self.price_provider = price_provider or MarketPriceProvider()
        self.validator = validator or CollectionValidator(price_provider=self.price_provider)
        self.quality_alerts = QualityAlertService(self.notifier)
        if window_days is None:
            window_days = getattr(settings, "EGG_COLLECTION_WINDOW_DAYS", 30)
        self.window_days = window_days

    def record_collection(self, request: EggCollectionRequest) -> EggCollection:
        return self.record_collection_with_report(request).collection

    def record_collection_with_report(self, request: EggCollectionRequest) -> RecordingOutcome:
        validated = self.validator.validate(request)

        with transaction.atomic():
            collection = EggCollection(
                farmer=validated.farmer,
                collector=validated.staff,
                route=validated.route,
                collection_date=request.collection_date or timezone.now(),
                hen_egg_price=request.hen_egg_price,
                duck_egg_price=request.duck_egg_price,
                quality_notes=request.quality_notes,
                paid=False,
                synced=False,
            )
            collection.apply_buckets(request.hen_eggs, request.duck_eggs)
            collection.save()

        logger.info(
            "Recorded egg collection %s for farmer %s: %s hen, %s duck, value %s.",
            collection.pk,
            collection.farmer_id,
            collection.total_hen_eggs,
            collection.total_duck_eggs,
            collection.total_value,
        )

        # Alerts keep one savepoint per alert inside the step.
        steps: list[tuple[str, Callable[[], dict[str, Any] | None], bool]] = [
            ("farmer_stats", lambda: self._update_farmer_stats(collection), True),
            ("quality_alerts", lambda: self._check_quality(collection), False),
        ]
        if collection.route_id:
            steps.append(("route_metrics", lambda: self._route_metrics(collection), True))
        steps.append(("collector_performance", lambda: self._update_collector_performance(collection), True))

        outcome = RecordingOutcome(collection=collection, warnings=list(validated.warnings))
        for name, step, atomic in steps:
            outcome.side_effects.append(self._run_side_effect(collection, name, step, atomic=atomic))
        return outcome

    def _run_side_effect(
        self,
        collection: EggCollection,
        name: str,
        step: Callable[[], dict[str, Any] | None],
        *,
        atomic: bool = True,
    ) -> SideEffectResult:
        try:
            with transaction.atomic() if atomic else nullcontext():
                detail = step() or {}
        except Exception as exc:
            logger.exception("Step %s failed after recording collection %s.", name, collection.pk)
            return SideEffectResult(name=name, succeeded=False, error=str(exc))
        return SideEffectResult(name=name, succeeded=True, detail=detail)

    def _update_farmer_stats(self, collection: EggCollection) -> dict[str, Any]:
        farmer = Customer.objects.select_for_update().get(pk=collection.farmer_id)
        window = (
            EggCollection.objects.for_farmer(farmer.pk)
            .in_trailing_window(self.window_days)
            .aggregate(
                count=Count("id"),
                hen=Sum("total_hen_eggs"),
                duck=Sum("total_duck_eggs"),
            )
        )
        count = window["count"] or 0
        farmer.expected_hen_eggs = _rounded_mean(window["hen"] or 0, count)
        farmer.expected_duck_eggs = _rounded_mean(window["duck"] or 0, count)
        farmer.credit_balance = farmer.credit_balance - collection.total_value
        farmer.total_egg_sales = farmer.total_egg_sales + collection.total_value
        farmer.save(
            update_fields=[
                "expected_hen_eggs",
                "expected_duck_eggs",
                "credit_balance",
                "total_egg_sales",
                "updated_at",
            ]
        )
        collection.farmer = farmer
        return {
            "expected_hen_eggs": farmer.expected_hen_eggs,
            "expected_duck_eggs": farmer.expected_duck_eggs,
            "window_collections": count,
        }

    def _check_quality(self, collection: EggCollection) -> dict[str, Any]:
        farmer = Customer.objects.get(pk=collection.farmer_id)
        notifications = self.quality_alerts.check_collection(collection, expected=expected_production(farmer))
        return {"alerts": [notification.title for notification in notifications]}

    def _route_metrics(self, collection: EggCollection) -> dict[str, Any]:
        day = timezone.localdate(collection.collection_date)
        totals = self.get_route_collections(collection.route_id, day).aggregate(
            count=Count("id"),
            value=Sum("total_value"),
        )
        value = totals["value"] or Decimal("0")
        logger.info(
            "Route %s on %s: %s collections worth %s.",
            collection.route_id,
            day.isoformat(),
            totals["count"],
            value,
        )
        return {"collections": totals["count"], "total_value": str(value)}

    def _update_collector_performance(self, collection: EggCollection) -> dict[str, Any]:
        staff = get_user_model().objects.select_for_update().get(pk=collection.collector_id)
        recent = list(self.get_staff_collections(staff.pk))
        staff.total_collections = len(recent)
        staff.average_quality = Decimal(str(average_quality(recent))).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )
        staff.on_time_rate = ON_TIME_RATE_PLACEHOLDER
        staff.metrics_updated_at = timezone.now()
        staff.save(update_fields=["total_collections", "average_quality", "on_time_rate", "metrics_updated_at"])
        return {"total_collections": staff.total_collections, "average_quality": str(staff.average_quality)}

    def get_farmer_collections(self, farmer_id: int, days: Optional[int] = None) -> EggCollectionQuerySet:
        return (
            EggCollection.objects.for_farmer(farmer_id)
            .in_trailing_window(days if days is not None else self.window_days)
            .order_by("-collection_date", "-pk")
        )

    def get_route_collections(self, route_id: int, day: date) -> EggCollectionQuerySet:
        return EggCollection.objects.for_route(route_id).on_day(day).order_by("collection_date", "pk")

    def get_staff_collections(self, staff_id: int, days: Optional[int] = None) -> EggCollectionQuerySet:
        return (
            EggCollection.objects.for_collector(staff_id)
            .in_trailing_window(days if days is not None else self.window_days)
            .order_by("-collection_date", "-pk")
        )

    def get_unpaid_collections(self, farmer_id: int) -> EggCollectionQuerySet:
        return EggCollection.objects.for_farmer(farmer_id).unpaid().order_by("-collection_date", "-pk")

    def mark_synced(self, collection_ids: Iterable[int]) -> int:
        ids = list(collection_ids)
        if not ids:
            return 0
        updated = EggCollection.objects.filter(pk__in=ids, synced=False).update(
            synced=True,
            updated_at=timezone.now(),
        )
        logger.info("Marked %s egg collections as synced.", updated)
        return updated


def build_collection_service(**overrides) -> EggCollectionService:
    return EggCollectionService(**overrides)
