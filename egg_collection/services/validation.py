from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from django.contrib.auth import get_user_model
from django.utils import timezone

from customers.models import Customer
from users.models import RolePermission

from ..exceptions import CollectionValidationError, ValidationReason
from ..models import CollectionRoute, EggCollection
from .market_prices import MarketPriceProvider
from .requests import EggCollectionRequest

logger = logging.getLogger(__name__)

PRODUCTION_WARNING_FACTOR = 1.5
LARGE_COLLECTION_THRESHOLD = 1000
HIGH_DAMAGE_WARNING_RATE = 0.20
LOW_PRICE_RATIO = Decimal("0.5")


@dataclass
class ValidatedCollection:
    request: EggCollectionRequest
    farmer: Customer
    staff: object
    route: Optional[CollectionRoute] = None
    warnings: list[str] = field(default_factory=list)


@dataclass
class ValidationReport:
    is_valid: bool = True
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.is_valid = False

    def as_dict(self) -> dict:
        return {"is_valid": self.is_valid, "warnings": list(self.warnings), "errors": list(self.errors)}


def production_warnings(farmer: Customer, request: EggCollectionRequest) -> list[str]:
    """Flag species totals well above the farmer's expected daily production."""

    if not farmer.has_expected_production:
        return []
    warnings = []
    checks = (
        ("Hen", request.total_hen_eggs, farmer.expected_hen_eggs or 0),
        ("Duck", request.total_duck_eggs, farmer.expected_duck_eggs or 0),
    )
    for label, actual, expected in checks:
        if actual > expected * PRODUCTION_WARNING_FACTOR:
            warnings.append(f"{label} egg collection ({actual}) exceeds expected production ({expected})")
    return warnings


class CollectionValidator:
    def __init__(self, *, price_provider: MarketPriceProvider | None = None) -> None:
        self.price_provider = price_provider or MarketPriceProvider()

    def validate(self, request: EggCollectionRequest) -> ValidatedCollection:
        """Apply the hard rules in order and stop at the first one broken."""

        farmer = Customer.objects.filter(pk=request.farmer_id).first()
        if farmer is None or not farmer.is_farmer:
            raise CollectionValidationError(ValidationReason.INVALID_FARMER, "Invalid farmer ID")
        if not farmer.active:
            raise CollectionValidationError(ValidationReason.INVALID_FARMER, "Farmer account is inactive")

        staff = get_user_model().objects.filter(pk=request.staff_id).first()
        if staff is None or not staff.is_active or not staff.has_capability(RolePermission.PermissionCode.EGG_COLLECTION):
            raise CollectionValidationError(
                ValidationReason.UNAUTHORIZED_STAFF,
                "Staff member not authorized for egg collection",
            )

        route = None
        if request.route_id is not None:
            route = CollectionRoute.objects.filter(pk=request.route_id).first()
            if route is None or not route.active:
                raise CollectionValidationError(ValidationReason.INVALID_ROUTE, "Invalid collection route")
            if not route.includes_farmer(farmer.pk):
                raise CollectionValidationError(ValidationReason.INVALID_ROUTE, "Farmer not assigned to this route")

        if request.total_eggs <= 0:
            raise CollectionValidationError(
                ValidationReason.EMPTY_COLLECTION,
                "Collection must include at least one egg",
            )

        if request.hen_egg_price <= 0 or request.duck_egg_price <= 0:
            raise CollectionValidationError(ValidationReason.INVALID_PRICE, "Invalid egg prices")

        warnings = production_warnings(farmer, request)
        for warning in warnings:
            logger.warning("Farmer %s: %s", farmer.pk, warning)

        return ValidatedCollection(request=request, farmer=farmer, staff=staff, route=route, warnings=warnings)

    def validate_collection_data(self, request: EggCollectionRequest) -> ValidationReport:
        """Advisory check: collect every error and warning without raising."""

        report = ValidationReport()
        try:
            self._check(request, report)
        except Exception:
            logger.exception("Collection validation failed for farmer %s.", request.farmer_id)
            report.add_error("Validation process failed")
        return report

    def _check(self, request: EggCollectionRequest, report: ValidationReport) -> None:
        farmer = Customer.objects.filter(pk=request.farmer_id).first()
        if farmer is None:
            report.add_error("Farmer not found")
        elif not farmer.active:
            report.add_error("Farmer account is inactive")
        elif not farmer.is_farmer:
            report.add_error("Customer is not a farmer")

        staff = get_user_model().objects.filter(pk=request.staff_id).first()
        if staff is None:
            report.add_error("Staff member not found")
        elif not staff.is_active or not staff.has_capability(RolePermission.PermissionCode.EGG_COLLECTION):
            report.add_error("Staff member not authorized for egg collection")

        if request.route_id is not None:
            route = CollectionRoute.objects.filter(pk=request.route_id).first()
            if route is None or not route.active:
                report.add_error("Invalid collection route")
            elif farmer is not None and not route.includes_farmer(farmer.pk):
                report.add_error("Farmer not assigned to this route")

        total_eggs = request.total_eggs
        if total_eggs <= 0:
            report.add_error("No eggs recorded in collection")
        if request.hen_egg_price <= 0 or request.duck_egg_price <= 0:
            report.add_error("Invalid egg prices")

        if total_eggs > LARGE_COLLECTION_THRESHOLD:
            report.warnings.append("Very large collection - please verify quantities")

        if (
            request.hen_eggs.damage_rate > HIGH_DAMAGE_WARNING_RATE
            or request.duck_eggs.damage_rate > HIGH_DAMAGE_WARNING_RATE
        ):
            report.warnings.append("High damage rate detected - consider quality investigation")

        prices = self.price_provider.get_prices()
        if request.hen_egg_price < prices.hen.large * LOW_PRICE_RATIO:
            report.warnings.append("Hen egg price is significantly below market rate")
        if request.duck_egg_price < prices.duck.large * LOW_PRICE_RATIO:
            report.warnings.append("Duck egg price is significantly below market rate")

        if farmer is not None:
            today = timezone.localdate()
            if EggCollection.objects.for_farmer(farmer.pk).on_day(today).exists():
                report.warnings.append("Farmer already has a collection recorded today")
            report.warnings.extend(production_warnings(farmer, request))
