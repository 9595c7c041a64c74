from __future__ import annotations

from decimal import Decimal

from django.db import models


class CustomerQuerySet(models.QuerySet):
    def active(self) -> "CustomerQuerySet":
        return self.filter(active=True)

    def farmers(self) -> "CustomerQuerySet":
        return self.filter(customer_type=Customer.CustomerType.FARMER)

    def active_farmers(self) -> "CustomerQuerySet":
        return self.farmers().active()


class Customer(models.Model):
    class CustomerType(models.TextChoices):
        FARMER = "farmer", "Farmer"
        REGULAR = "regular", "Regular"
        WHOLESALE = "wholesale", "Wholesale"

    class CreditStatus(models.TextChoices):
        GOOD = "good", "Good"
        WARNING = "warning", "Warning"
        OVERDUE = "overdue", "Overdue"
        BLOCKED = "blocked", "Blocked"

    customer_type = models.CharField(
        "Type",
        max_length=16,
        choices=CustomerType.choices,
        default=CustomerType.REGULAR,
    )
    business_name = models.CharField("Business name", max_length=150, blank=True)
    contact_person = models.CharField("Contact person", max_length=150)
    email = models.EmailField("Email", blank=True)
    phone = models.CharField("Phone", max_length=32, blank=True)
    address = models.CharField("Address", max_length=255, blank=True)

    credit_limit = models.DecimalField("Credit limit", max_digits=12, decimal_places=2, default=Decimal("0"))
    credit_balance = models.DecimalField(
        "Credit balance",
        max_digits=14,
        decimal_places=4,
        default=Decimal("0"),
        help_text="Outstanding amount. Egg collections reduce it by their value.",
    )
    payment_terms = models.PositiveSmallIntegerField("Payment terms (days)", default=30)
    credit_status = models.CharField(
        "Credit status",
        max_length=16,
        choices=CreditStatus.choices,
        default=CreditStatus.GOOD,
    )

    farm_size = models.DecimalField("Farm size (acres)", max_digits=8, decimal_places=2, null=True, blank=True)
    expected_hen_eggs = models.PositiveIntegerField(
        "Expected hen eggs per day",
        null=True,
        blank=True,
        help_text="Rolling average of the last collections. Empty while unknown.",
    )
    expected_duck_eggs = models.PositiveIntegerField(
        "Expected duck eggs per day",
        null=True,
        blank=True,
    )
    total_purchases = models.DecimalField("Total purchases", max_digits=14, decimal_places=2, default=Decimal("0"))
    total_egg_sales = models.DecimalField("Total egg sales", max_digits=14, decimal_places=4, default=Decimal("0"))

    active = models.BooleanField("Active", default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomerQuerySet.as_manager()

    class Meta:
        verbose_name = "Customer"
        verbose_name_plural = "Customers"
        ordering = ("contact_person",)
        indexes = [
            models.Index(fields=("customer_type", "active"), name="customers_type_active_idx"),
        ]

    def __str__(self) -> str:
        return self.display_name

    @property
    def display_name(self) -> str:
        return self.business_name or self.contact_person

    @property
    def is_farmer(self) -> bool:
        return self.customer_type == self.CustomerType.FARMER

    @property
    def has_expected_production(self) -> bool:
        return self.expected_hen_eggs is not None or self.expected_duck_eggs is not None

    @property
    def expected_total_production(self) -> int:
        return (self.expected_hen_eggs or 0) + (self.expected_duck_eggs or 0)
