from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from customers.models import Customer

from .buckets import EggBuckets
from .scoring import collection_quality_score, damage_rate

EGGS_PER_DOZEN = Decimal("12")


def local_day_bounds(target_date: date) -> tuple[datetime, datetime]:
    """Return the first and last instant of the local day, both inclusive."""

    local_tz = timezone.get_current_timezone()
    start = timezone.make_aware(datetime.combine(target_date, datetime.min.time()), local_tz)
    next_start = timezone.make_aware(
        datetime.combine(target_date + timedelta(days=1), datetime.min.time()),
        local_tz,
    )
    return start, next_start - timedelta(microseconds=1)


class CollectionRoute(models.Model):
    class Schedule(models.TextChoices):
        DAILY = "daily", "Daily"
        ALTERNATE = "alternate", "Alternate days"
        WEEKLY = "weekly", "Weekly"

    name = models.CharField("Name", max_length=150, unique=True)
    description = models.TextField("Description", blank=True)
    farmers = models.ManyToManyField(
        Customer,
        through="RouteStop",
        related_name="collection_routes",
        verbose_name="Farmers",
    )
    collector = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="collection_routes",
        verbose_name="Assigned collector",
    )
    schedule = models.CharField("Schedule", max_length=16, choices=Schedule.choices, default=Schedule.DAILY)
    estimated_time = models.PositiveIntegerField("Estimated time (min)", default=0)
    distance = models.DecimalField("Distance (km)", max_digits=8, decimal_places=2, default=Decimal("0"))
    active = models.BooleanField("Active", default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Collection route"
        verbose_name_plural = "Collection routes"
        ordering = ("name",)

    def __str__(self) -> str:
        return self.name

    def farmer_ids(self) -> list[int]:
        return list(self.stops.order_by("position", "pk").values_list("farmer_id", flat=True))

    def includes_farmer(self, farmer_id: int) -> bool:
        return self.stops.filter(farmer_id=farmer_id).exists()


class RouteStop(models.Model):
    route = models.ForeignKey(
        CollectionRoute,
        on_delete=models.CASCADE,
        related_name="stops",
        verbose_name="Route",
    )
    farmer = models.ForeignKey(
        Customer,
        on_delete=models.CASCADE,
        related_name="route_stops",
        verbose_name="Farmer",
    )
    position = models.PositiveSmallIntegerField("Position", default=0)

    class Meta:
        verbose_name = "Route stop"
        verbose_name_plural = "Route stops"
        ordering = ("route__name", "position", "pk")
        unique_together = ("route", "farmer")

    def __str__(self) -> str:
        return f"{self.route.name} #{self.position} - {self.farmer}"


class EggCollectionQuerySet(models.QuerySet):
    def for_farmer(self, farmer_id: int) -> "EggCollectionQuerySet":
        return self.filter(farmer_id=farmer_id)

    def for_collector(self, staff_id: int) -> "EggCollectionQuerySet":
        return self.filter(collector_id=staff_id)

    def for_route(self, route_id: int | None) -> "EggCollectionQuerySet":
        if route_id is None:
            return self
        return self.filter(route_id=route_id)

    def between(self, start: datetime, end: datetime) -> "EggCollectionQuerySet":
        return self.filter(collection_date__gte=start, collection_date__lte=end)

    def on_day(self, target_date: date) -> "EggCollectionQuerySet":
        start, end = local_day_bounds(target_date)
        return self.between(start, end)

    def in_trailing_window(self, days: int, *, now: datetime | None = None) -> "EggCollectionQuerySet":
        reference = now or timezone.now()
        return self.filter(collection_date__gte=reference - timedelta(days=days))

    def unpaid(self) -> "EggCollectionQuerySet":
        return self.filter(paid=False)


class EggCollection(models.Model):
    farmer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="egg_collections",
        verbose_name="Farmer",
    )
    collector = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="egg_collections",
        verbose_name="Collector",
    )
    route = models.ForeignKey(
        CollectionRoute,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="collections",
        verbose_name="Route",
    )
    collection_date = models.DateTimeField("Collection date", default=timezone.now)

    hen_small = models.PositiveIntegerField("Hen small", default=0)
    hen_medium = models.PositiveIntegerField("Hen medium", default=0)
    hen_large = models.PositiveIntegerField("Hen large", default=0)
    hen_extra_large = models.PositiveIntegerField("Hen extra large", default=0)
    hen_damaged = models.PositiveIntegerField("Hen damaged", default=0)

    duck_small = models.PositiveIntegerField("Duck small", default=0)
    duck_medium = models.PositiveIntegerField("Duck medium", default=0)
    duck_large = models.PositiveIntegerField("Duck large", default=0)
    duck_damaged = models.PositiveIntegerField("Duck damaged", default=0)

    hen_egg_price = models.DecimalField(
        "Hen price per dozen",
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    duck_egg_price = models.DecimalField(
        "Duck price per dozen",
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )

    total_hen_eggs = models.PositiveIntegerField("Total hen eggs", default=0, editable=False)
    total_duck_eggs = models.PositiveIntegerField("Total duck eggs", default=0, editable=False)
    total_value = models.DecimalField(
        "Total value",
        max_digits=14,
        decimal_places=4,
        default=Decimal("0"),
        editable=False,
    )

    quality_notes = models.TextField("Quality notes", blank=True)
    paid = models.BooleanField("Paid", default=False)
    payment_date = models.DateTimeField("Payment date", null=True, blank=True)
    synced = models.BooleanField("Synced", default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = EggCollectionQuerySet.as_manager()

    class Meta:
        verbose_name = "Egg collection"
        verbose_name_plural = "Egg collections"
        ordering = ("-collection_date", "-pk")
        indexes = [
            models.Index(fields=("farmer", "collection_date"), name="eggcol_farmer_date_idx"),
            models.Index(fields=("route", "collection_date"), name="eggcol_route_date_idx"),
            models.Index(fields=("collector", "collection_date"), name="eggcol_collector_date_idx"),
        ]

    def __str__(self) -> str:
        return f"Collection #{self.pk} - {self.farmer} ({self.collection_date:%Y-%m-%d})"

    def save(self, *args, **kwargs) -> None:
        self.recalculate_totals()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            fields = set(update_fields)
            if fields & _BUCKET_AND_PRICE_FIELDS:
                fields.update({"total_hen_eggs", "total_duck_eggs", "total_value"})
            kwargs["update_fields"] = fields
        super().save(*args, **kwargs)

    @property
    def hen_eggs(self) -> EggBuckets:
        return EggBuckets(
            small=self.hen_small,
            medium=self.hen_medium,
            large=self.hen_large,
            extra_large=self.hen_extra_large,
            damaged=self.hen_damaged,
        )

    @property
    def duck_eggs(self) -> EggBuckets:
        return EggBuckets(
            small=self.duck_small,
            medium=self.duck_medium,
            large=self.duck_large,
            damaged=self.duck_damaged,
        )

    def apply_buckets(self, hen_eggs: EggBuckets, duck_eggs: EggBuckets) -> None:
        self.hen_small = hen_eggs.small
        self.hen_medium = hen_eggs.medium
        self.hen_large = hen_eggs.large
        self.hen_extra_large = hen_eggs.extra_large
        self.hen_damaged = hen_eggs.damaged
        self.duck_small = duck_eggs.small
        self.duck_medium = duck_eggs.medium
        self.duck_large = duck_eggs.large
        self.duck_damaged = duck_eggs.damaged

    def recalculate_totals(self) -> None:
        """Derive egg totals and value from the buckets and price snapshot."""
        self.total_hen_eggs = self.hen_eggs.total
        self.total_duck_eggs = self.duck_eggs.total
        self.total_value = calculate_collection_value(
            self.total_hen_eggs,
            self.total_duck_eggs,
            Decimal(self.hen_egg_price or 0),
            Decimal(self.duck_egg_price or 0),
        )

    @property
    def total_eggs(self) -> int:
        return self.total_hen_eggs + self.total_duck_eggs

    @property
    def damaged_eggs(self) -> int:
        return self.hen_damaged + self.duck_damaged

    @property
    def hen_damage_rate(self) -> float:
        return damage_rate(self.hen_damaged, self.total_hen_eggs)

    @property
    def duck_damage_rate(self) -> float:
        return damage_rate(self.duck_damaged, self.total_duck_eggs)

    def damage_rates(self) -> tuple[float, float]:
        return self.hen_damage_rate, self.duck_damage_rate

    @property
    def max_damage_rate(self) -> float:
        return max(self.damage_rates())

    @property
    def quality_score(self) -> Optional[int]:
        return collection_quality_score(self.total_eggs, self.damaged_eggs)

    def mark_synced(self) -> None:
        if self.synced:
            return
        self.synced = True
        self.save(update_fields=("synced", "updated_at"))


_BUCKET_AND_PRICE_FIELDS = {
    "hen_small",
    "hen_medium",
    "hen_large",
    "hen_extra_large",
    "hen_damaged",
    "duck_small",
    "duck_medium",
    "duck_large",
    "duck_damaged",
    "hen_egg_price",
    "duck_egg_price",
}


def calculate_collection_value(
    total_hen_eggs: int,
    total_duck_eggs: int,
    hen_egg_price: Decimal,
    duck_egg_price: Decimal,
) -> Decimal:
    """Value of a collection in dozens times the per-dozen price, unrounded."""
    hen_dozens = Decimal(total_hen_eggs) / EGGS_PER_DOZEN
    duck_dozens = Decimal(total_duck_eggs) / EGGS_PER_DOZEN
    return hen_dozens * hen_egg_price + duck_dozens * duck_egg_price


class PaymentRecord(models.Model):
    class PaymentType(models.TextChoices):
        CUSTOMER_PAYMENT = "customer_payment", "Customer payment"
        VENDOR_PAYMENT = "vendor_payment", "Vendor payment"

    class PaymentMethod(models.TextChoices):
        CASH = "cash", "Cash"
        BANK_TRANSFER = "bank_transfer", "Bank transfer"
        MOBILE_MONEY = "mobile_money", "Mobile money"
        CHECK = "check", "Check"
        CREDIT = "credit", "Credit"

    payment_type = models.CharField(
        "Type",
        max_length=24,
        choices=PaymentType.choices,
        default=PaymentType.CUSTOMER_PAYMENT,
    )
    customer = models.ForeignKey(
        Customer,
        on_delete=models.PROTECT,
        related_name="payment_records",
        verbose_name="Customer",
        null=True,
        blank=True,
    )
    collection = models.ForeignKey(
        EggCollection,
        on_delete=models.SET_NULL,
        related_name="payment_records",
        verbose_name="Egg collection",
        null=True,
        blank=True,
    )
    amount = models.DecimalField("Amount", max_digits=14, decimal_places=4)
    payment_method = models.CharField(
        "Payment method",
        max_length=24,
        choices=PaymentMethod.choices,
        default=PaymentMethod.BANK_TRANSFER,
    )
    processed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="processed_payments",
        verbose_name="Processed by",
    )
    payment_date = models.DateTimeField("Payment date", default=timezone.now)
    notes = models.TextField("Notes", blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Payment record"
        verbose_name_plural = "Payment records"
        ordering = ("-payment_date", "-pk")

    def __str__(self) -> str:
        return f"{self.get_payment_type_display()} · {self.amount} ({self.payment_date:%Y-%m-%d})"
