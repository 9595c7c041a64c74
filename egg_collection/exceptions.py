from __future__ import annotations

from enum import Enum


class ValidationReason(str, Enum):
    INVALID_FARMER = "invalid_farmer"
    UNAUTHORIZED_STAFF = "unauthorized_staff"
    INVALID_ROUTE = "invalid_route"
    EMPTY_COLLECTION = "empty_collection"
    INVALID_PRICE = "invalid_price"


class CollectionValidationError(Exception):
    """A collection request broke one of the hard validation rules."""

    def __init__(self, reason: ValidationReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message

    def __str__(self) -> str:
        return self.message


class NotFoundError(Exception):
    entity = "Record"

    def __init__(self, identifier) -> None:
        super().__init__(f"{self.entity} not found")
        self.identifier = identifier


class CollectionNotFound(NotFoundError):
    entity = "Collection"


class RouteNotFound(NotFoundError):
    entity = "Route"


class StaffNotFound(NotFoundError):
    entity = "Staff member"


class ReportingError(Exception):
    """Raised when a report or export cannot be produced."""


class AlertDeliveryError(Exception):
    """One or more alerts could not be handed to the notification service."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors
