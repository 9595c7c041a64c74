from __future__ import annotations

import logging
from typing import Optional

from django.conf import settings
from django.db import transaction

from notifications.models import Notification
from notifications.services import NotificationService, ProductionAlert, QualityAlert, SpeciesCounts

from ..exceptions import AlertDeliveryError
from ..models import EggCollection

logger = logging.getLogger(__name__)


def expected_production(farmer) -> Optional[SpeciesCounts]:
    """Snapshot of the farmer's expected daily production, None while unknown."""

    if not farmer.has_expected_production:
        return None
    return SpeciesCounts(hen=farmer.expected_hen_eggs or 0, duck=farmer.expected_duck_eggs or 0)


class QualityAlertService:
    def __init__(
        self,
        notifier: NotificationService,
        *,
        damage_threshold: float | None = None,
        shortfall_ratio: float | None = None,
    ) -> None:
        self.notifier = notifier
        if damage_threshold is None:
            damage_threshold = getattr(settings, "EGG_COLLECTION_QUALITY_ALERT_RATE", 0.10)
        if shortfall_ratio is None:
            shortfall_ratio = getattr(settings, "EGG_COLLECTION_SHORTFALL_RATIO", 0.5)
        self.damage_threshold = damage_threshold
        self.shortfall_ratio = shortfall_ratio

    def check_collection(
        self,
        collection: EggCollection,
        *,
        expected: Optional[SpeciesCounts] = None,
    ) -> list[Notification]:
        """Send the quality and production alerts a collection calls for.

        ``expected`` defaults to the farmer's current expected production. Each
        alert is stored in its own savepoint, so a failed one never takes a
        delivered one with it. Errors are raised together once both were tried.
        """

        sent: list[Notification] = []
        errors: list[str] = []
        farmer = collection.farmer
        if expected is None:
            expected = expected_production(farmer)

        if collection.max_damage_rate > self.damage_threshold:
            alert = QualityAlert(
                farmer_id=farmer.pk,
                collection_id=collection.pk,
                damage_rate=collection.max_damage_rate,
                farmer_name=farmer.display_name,
                notes=collection.quality_notes,
            )
            try:
                with transaction.atomic():
                    notification = self.notifier.send_quality_alert(alert)
            except Exception as exc:
                logger.exception("Quality alert for collection %s failed.", collection.pk)
                errors.append(f"quality alert: {exc}")
            else:
                if notification is not None:
                    sent.append(notification)

        if expected is not None and self._is_short(collection, expected):
            alert = ProductionAlert(
                farmer_id=farmer.pk,
                expected=expected,
                actual=SpeciesCounts(hen=collection.total_hen_eggs, duck=collection.total_duck_eggs),
                farmer_name=farmer.display_name,
            )
            try:
                with transaction.atomic():
                    sent.append(self.notifier.send_production_alert(alert))
            except Exception as exc:
                logger.exception("Production alert for farmer %s failed.", farmer.pk)
                errors.append(f"production alert: {exc}")

        if errors:
            raise AlertDeliveryError(errors)
        return sent

    def _is_short(self, collection: EggCollection, expected: SpeciesCounts) -> bool:
        return (
            collection.total_hen_eggs < expected.hen * self.shortfall_ratio
            or collection.total_duck_eggs < expected.duck * self.shortfall_ratio
        )
