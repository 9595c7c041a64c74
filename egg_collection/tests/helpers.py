from __future__ import annotations

from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from itertools import count

from django.utils import timezone

from customers.models import Customer
from egg_collection.buckets import EggBuckets
from egg_collection.models import CollectionRoute, EggCollection, RouteStop
from egg_collection.services.market_prices import MarketPriceProvider
from egg_collection.services.requests import EggCollectionRequest
from users.models import Role, RolePermission, StaffMember

_sequence = count(1)


class CollectionFixturesMixin:
    """Builders shared by the egg collection test cases."""

    def create_farmer(self, **overrides) -> Customer:
        values = {
            "customer_type": Customer.CustomerType.FARMER,
            "contact_person": f"Farmer {next(_sequence)}",
        }
        values.update(overrides)
        return Customer.objects.create(**values)

    def create_staff(self, *capabilities: str, **overrides) -> StaffMember:
        values = {
            "first_name": "Ana",
            "last_name": "Collector",
            "is_staff": True,
        }
        values.update(overrides)
        employee_id = values.pop("employee_id", f"EMP-{next(_sequence)}")
        staff = StaffMember.objects.create_user(employee_id, "secret-pass", **values)
        for code in capabilities:
            role, _ = Role.objects.get_or_create(name=_role_for(code))
            RolePermission.objects.get_or_create(role=role, permission_code=code)
            staff.roles.add(role)
        return staff

    def create_collector(self, **overrides) -> StaffMember:
        return self.create_staff(RolePermission.PermissionCode.EGG_COLLECTION, **overrides)

    def create_route(self, *farmers: Customer, **overrides) -> CollectionRoute:
        values = {"name": f"Route {next(_sequence)}"}
        values.update(overrides)
        route = CollectionRoute.objects.create(**values)
        for position, farmer in enumerate(farmers):
            RouteStop.objects.create(route=route, farmer=farmer, position=position)
        return route

    def create_collection(
        self,
        farmer: Customer,
        collector: StaffMember,
        *,
        hen: dict | None = None,
        duck: dict | None = None,
        hen_price: str = "2.50",
        duck_price: str = "4.00",
        collection_date: datetime | None = None,
        **extra,
    ) -> EggCollection:
        collection = EggCollection(
            farmer=farmer,
            collector=collector,
            hen_egg_price=Decimal(hen_price),
            duck_egg_price=Decimal(duck_price),
            collection_date=collection_date or timezone.now(),
            **extra,
        )
        collection.apply_buckets(EggBuckets(**(hen or {})), EggBuckets(**(duck or {})))
        collection.save()
        return collection

    def make_request(self, farmer: Customer, staff: StaffMember, **overrides) -> EggCollectionRequest:
        values = {
            "farmer_id": farmer.pk,
            "staff_id": staff.pk,
            "hen_eggs": EggBuckets(small=24, medium=48, large=36, extra_large=12, damaged=6),
            "duck_eggs": EggBuckets(small=12, medium=18, large=6, damaged=2),
            "hen_egg_price": Decimal("2.50"),
            "duck_egg_price": Decimal("4.00"),
        }
        values.update(overrides)
        return EggCollectionRequest(**values)


def _role_for(code: str) -> str:
    if code == RolePermission.PermissionCode.EGG_COLLECTION:
        return Role.RoleName.COLLECTOR
    if code in (RolePermission.PermissionCode.REPORTS_VIEW, RolePermission.PermissionCode.REPORTS_EXPORT):
        return Role.RoleName.SUPERVISOR
    return Role.RoleName.MANAGER


def fixed_price_provider() -> MarketPriceProvider:
    """Prices frozen at the base table (hen large 2.50, duck large 4.80)."""
    return MarketPriceProvider(
        clock=lambda: datetime(2024, 5, 1, tzinfo=dt_timezone.utc),
        jitter=lambda: 0.5,
    )
