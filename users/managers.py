from __future__ import annotations

from django.contrib.auth.base_user import BaseUserManager
from django.db import models


class StaffMemberQuerySet(models.QuerySet):
    """Custom queryset helpers for StaffMember."""

    def active(self) -> "StaffMemberQuerySet":
        return self.filter(is_active=True)

    def with_capability(self, code: str) -> "StaffMemberQuerySet":
        """Filter staff holding the capability through any of their roles."""

        return self.filter(roles__role_permissions__permission_code=code).distinct()

    def collectors(self) -> "StaffMemberQuerySet":
        from .models import RolePermission

        return self.active().with_capability(RolePermission.PermissionCode.EGG_COLLECTION)


class StaffMemberManager(BaseUserManager):
    """Custom manager for the StaffMember model."""

    use_in_migrations = True

    def get_queryset(self):  # type: ignore[override]
        return StaffMemberQuerySet(self.model, using=self._db)

    def active(self):
        return self.get_queryset().active()

    def collectors(self):
        return self.get_queryset().collectors()

    def _create_user(self, employee_id: str, password: str | None, **extra_fields):
        if not employee_id:
            raise ValueError("Staff members must have an employee id.")
        employee_id = employee_id.strip()
        user = self.model(employee_id=employee_id, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, employee_id: str, password: str | None = None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(employee_id, password, **extra_fields)

    def create_superuser(self, employee_id: str, password: str | None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superusers must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superusers must have is_superuser=True.")
        return self._create_user(employee_id, password, **extra_fields)
