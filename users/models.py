from __future__ import annotations

from decimal import Decimal

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from .managers import StaffMemberManager


class Role(models.Model):
    class RoleName(models.TextChoices):
        MANAGER = "MANAGER", "Manager"
        CASHIER = "CASHIER", "Cashier"
        COLLECTOR = "COLLECTOR", "Collector"
        ADMIN = "ADMIN", "Administrator"
        SUPERVISOR = "SUPERVISOR", "Supervisor"

    name = models.CharField(
        max_length=32,
        unique=True,
        choices=RoleName.choices,
    )

    class Meta:
        verbose_name = "Role"
        verbose_name_plural = "Roles"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.get_name_display()


class RolePermission(models.Model):
    class PermissionCode(models.TextChoices):
        POS_SALES = "pos_sales", "Make sales transactions"
        INVENTORY_MANAGE = "inventory_manage", "Manage products"
        CUSTOMER_MANAGE = "customer_manage", "Manage customers"
        EGG_COLLECTION = "egg_collection", "Collect eggs from farms"
        VENDOR_MANAGE = "vendor_manage", "Manage vendors"
        REPORTS_VIEW = "reports_view", "View reports"
        REPORTS_EXPORT = "reports_export", "Export reports"
        CREDIT_APPROVE = "credit_approve", "Approve credit transactions"
        SETTINGS_MANAGE = "settings_manage", "Change system settings"
        STAFF_MANAGE = "staff_manage", "Manage staff"

    role = models.ForeignKey(
        Role,
        on_delete=models.CASCADE,
        related_name="role_permissions",
    )
    permission_code = models.CharField(
        max_length=64,
        choices=PermissionCode.choices,
    )

    class Meta:
        verbose_name = "Role permission"
        verbose_name_plural = "Role permissions"
        unique_together = ("role", "permission_code")
        ordering = ["role__name", "permission_code"]

    def __str__(self) -> str:
        return f"{self.role.get_name_display()} - {self.get_permission_code_display()}"


class StaffMember(AbstractBaseUser, PermissionsMixin):
    class Position(models.TextChoices):
        MANAGER = "MANAGER", "Manager"
        CASHIER = "CASHIER", "Cashier"
        COLLECTOR = "COLLECTOR", "Collector"
        ADMIN = "ADMIN", "Administrator"
        SUPERVISOR = "SUPERVISOR", "Supervisor"

    class Department(models.TextChoices):
        SALES = "SALES", "Sales"
        COLLECTION = "COLLECTION", "Collection"
        INVENTORY = "INVENTORY", "Inventory"
        ADMIN = "ADMIN", "Administration"
        MANAGEMENT = "MANAGEMENT", "Management"

    employee_id = models.CharField("Employee ID", max_length=32, unique=True)
    first_name = models.CharField("First name", max_length=150)
    last_name = models.CharField("Last name", max_length=150)
    email = models.EmailField("Email", blank=True)
    phone = models.CharField("Phone", max_length=32, blank=True)
    position = models.CharField(
        "Position",
        max_length=16,
        choices=Position.choices,
        default=Position.COLLECTOR,
    )
    department = models.CharField(
        "Department",
        max_length=16,
        choices=Department.choices,
        default=Department.COLLECTION,
    )
    hire_date = models.DateField("Hire date", null=True, blank=True)
    roles = models.ManyToManyField(Role, blank=True, related_name="staff_members")

    total_collections = models.PositiveIntegerField("Collections (30 days)", default=0)
    average_quality = models.DecimalField(
        "Average quality",
        max_digits=4,
        decimal_places=2,
        default=Decimal("0"),
        validators=[MinValueValidator(Decimal("0")), MaxValueValidator(Decimal("5"))],
    )
    on_time_rate = models.DecimalField(
        "On-time rate (%)",
        max_digits=5,
        decimal_places=2,
        default=Decimal("0"),
    )
    metrics_updated_at = models.DateTimeField("Metrics updated at", null=True, blank=True)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    date_joined = models.DateTimeField(default=timezone.now)

    objects = StaffMemberManager()

    USERNAME_FIELD = "employee_id"
    REQUIRED_FIELDS = ["first_name", "last_name"]

    class Meta:
        verbose_name = "Staff member"
        verbose_name_plural = "Staff members"
        ordering = ["last_name", "first_name"]

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name} ({self.employee_id})"

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def get_full_name(self) -> str:
        return self.full_name

    def get_short_name(self) -> str:
        return self.first_name.split(" ")[0] if self.first_name else ""

    def capability_codes(self) -> set[str]:
        if not self.pk:
            return set()
        return set(
            RolePermission.objects.filter(role__staff_members=self).values_list("permission_code", flat=True)
        )

    def has_capability(self, code: str) -> bool:
        return code in self.capability_codes()

    @property
    def can_collect_eggs(self) -> bool:
        return self.has_capability(RolePermission.PermissionCode.EGG_COLLECTION)
