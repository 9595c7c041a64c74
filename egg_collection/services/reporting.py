"""Period summaries and daily reports built from stored collections."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.db import DatabaseError

from ..exceptions import ReportingError
from ..models import EggCollection, local_day_bounds
from ..scoring import average_quality

logger = logging.getLogger(__name__)

ROUTE_EFFICIENCY_PLACEHOLDER = 85
TOP_FARMS_LIMIT = 10


@dataclass
class CollectionSummary:
    total_collections: int = 0
    total_hen_eggs: int = 0
    total_duck_eggs: int = 0
    total_value: Decimal = Decimal("0")
    average_quality: float = 0.0
    farms_visited: int = 0
    route_efficiency: int = 0

    def as_dict(self) -> dict:
        return {
            "total_collections": self.total_collections,
            "total_hen_eggs": self.total_hen_eggs,
            "total_duck_eggs": self.total_duck_eggs,
            "total_value": str(self.total_value),
            "average_quality": round(self.average_quality, 2),
            "farms_visited": self.farms_visited,
            "route_efficiency": self.route_efficiency,
        }


@dataclass
class TopFarm:
    farmer_id: int
    farmer_name: str
    total_value: Decimal = Decimal("0")
    total_eggs: int = 0


@dataclass(frozen=True)
class QualityIssue:
    collection_id: int
    farmer_id: int
    damage_rate: float
    issue: str


@dataclass
class RoutePerformance:
    route_id: int
    route_name: str
    collections: int = 0
    efficiency: int = ROUTE_EFFICIENCY_PLACEHOLDER


@dataclass
class DailyCollectionReport:
    day: date
    summary: CollectionSummary
    collections: list[EggCollection] = field(default_factory=list)
    top_farms: list[TopFarm] = field(default_factory=list)
    quality_issues: list[QualityIssue] = field(default_factory=list)
    route_performance: list[RoutePerformance] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "date": self.day.isoformat(),
            "summary": self.summary.as_dict(),
            "collections": [collection.pk for collection in self.collections],
            "top_farms": [
                {
                    "farmer_id": farm.farmer_id,
                    "farmer_name": farm.farmer_name,
                    "total_value": str(farm.total_value),
                    "total_eggs": farm.total_eggs,
                }
                for farm in self.top_farms
            ],
            "quality_issues": [
                {
                    "collection_id": issue.collection_id,
                    "farmer_id": issue.farmer_id,
                    "damage_rate": round(issue.damage_rate, 4),
                    "issue": issue.issue,
                }
                for issue in self.quality_issues
            ],
            "route_performance": [
                {
                    "route_id": route.route_id,
                    "route_name": route.route_name,
                    "collections": route.collections,
                    "efficiency": route.efficiency,
                }
                for route in self.route_performance
            ],
        }


def collections_between(start: datetime, end: datetime, route_id: Optional[int] = None):
    return (
        EggCollection.objects.between(start, end)
        .for_route(route_id)
        .select_related("farmer", "route", "collector")
        .order_by("collection_date", "pk")
    )


def summarize(collections: list[EggCollection]) -> CollectionSummary:
    if not collections:
        return CollectionSummary()
    return CollectionSummary(
        total_collections=len(collections),
        total_hen_eggs=sum(collection.total_hen_eggs for collection in collections),
        total_duck_eggs=sum(collection.total_duck_eggs for collection in collections),
        total_value=sum((collection.total_value for collection in collections), Decimal("0")),
        average_quality=average_quality(collections),
        farms_visited=len({collection.farmer_id for collection in collections}),
        route_efficiency=ROUTE_EFFICIENCY_PLACEHOLDER,
    )


def get_collection_summary(start: datetime, end: datetime, route_id: Optional[int] = None) -> CollectionSummary:
    try:
        collections = list(collections_between(start, end, route_id))
    except DatabaseError as exc:
        logger.exception("Failed to load collections for summary %s - %s.", start, end)
        raise ReportingError("Failed to calculate collection summary") from exc
    return summarize(collections)


def get_daily_collection_report(day: date) -> DailyCollectionReport:
    start, end = local_day_bounds(day)
    try:
        collections = list(collections_between(start, end))
    except DatabaseError as exc:
        logger.exception("Failed to load collections for the daily report of %s.", day)
        raise ReportingError("Daily collection report generation failed") from exc

    threshold = getattr(settings, "EGG_COLLECTION_QUALITY_ALERT_RATE", 0.10)
    farms: dict[int, TopFarm] = {}
    routes: dict[int, RoutePerformance] = {}
    issues: list[QualityIssue] = []

    for collection in collections:
        farm = farms.get(collection.farmer_id)
        if farm is None:
            farm = farms[collection.farmer_id] = TopFarm(
                farmer_id=collection.farmer_id,
                farmer_name=collection.farmer.display_name,
            )
        farm.total_value += collection.total_value
        farm.total_eggs += collection.total_eggs

        rate = collection.max_damage_rate
        if rate > threshold:
            issues.append(
                QualityIssue(
                    collection_id=collection.pk,
                    farmer_id=collection.farmer_id,
                    damage_rate=rate,
                    issue=f"High damage rate: {rate * 100:.1f}%",
                )
            )

        if collection.route_id:
            route = routes.get(collection.route_id)
            if route is None:
                route = routes[collection.route_id] = RoutePerformance(
                    route_id=collection.route_id,
                    route_name=collection.route.name,
                )
            route.collections += 1

    top_farms = sorted(farms.values(), key=lambda farm: farm.total_value, reverse=True)[:TOP_FARMS_LIMIT]
    return DailyCollectionReport(
        day=day,
        summary=summarize(collections),
        collections=collections,
        top_farms=top_farms,
        quality_issues=issues,
        route_performance=list(routes.values()),
    )
