from __future__ import annotations

from dataclasses import dataclass, field

from customers.models import Customer

from ..exceptions import RouteNotFound
from ..models import CollectionRoute

MINUTES_PER_FARM = 20
KM_PER_FARM = 3
ROUTE_SPLIT_THRESHOLD = 8

BASE_SUGGESTIONS = (
    "Visit high-production farms first to maximize collection efficiency",
    "Check weather conditions before starting route",
    "Ensure sufficient egg collection containers",
)
SPLIT_SUGGESTION = (
    f"Consider splitting route - more than {ROUTE_SPLIT_THRESHOLD} farms may be too many for one trip"
)


@dataclass
class RouteOptimization:
    route_id: int
    optimized_order: list[int] = field(default_factory=list)
    estimated_time: int = 0
    estimated_distance: int = 0
    suggestions: list[str] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "route_id": self.route_id,
            "optimized_order": list(self.optimized_order),
            "estimated_time": self.estimated_time,
            "estimated_distance": self.estimated_distance,
            "suggestions": list(self.suggestions),
        }


def optimize_route(route_id: int) -> RouteOptimization:
    """Order a route's active farms by expected production, busiest first.

    Estimates are flat per-farm allowances, not travel calculations.
    """

    route = CollectionRoute.objects.filter(pk=route_id).first()
    if route is None:
        raise RouteNotFound(route_id)

    stop_order = route.farmer_ids()
    by_id = Customer.objects.in_bulk(stop_order)
    farmers = [by_id[pk] for pk in stop_order if by_id[pk].active]
    # sorted() is stable, so equal producers keep their stop order.
    farmers = sorted(farmers, key=lambda farmer: farmer.expected_total_production, reverse=True)

    suggestions = list(BASE_SUGGESTIONS)
    if len(farmers) > ROUTE_SPLIT_THRESHOLD:
        suggestions.append(SPLIT_SUGGESTION)

    return RouteOptimization(
        route_id=route.pk,
        optimized_order=[farmer.pk for farmer in farmers],
        estimated_time=len(farmers) * MINUTES_PER_FARM,
        estimated_distance=len(farmers) * KM_PER_FARM,
        suggestions=suggestions,
    )
