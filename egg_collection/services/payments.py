from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from ..exceptions import StaffNotFound
from ..models import EggCollection, PaymentRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchPaymentFailure:
    collection_id: int
    error: str


@dataclass
class BatchPaymentResult:
    processed: int = 0
    total_amount: Decimal = Decimal("0")
    failures: list[BatchPaymentFailure] = field(default_factory=list)
    payments: list[PaymentRecord] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "processed": self.processed,
            "total_amount": str(self.total_amount),
            "failures": [
                {"collection_id": failure.collection_id, "error": failure.error} for failure in self.failures
            ],
        }


class _ItemRejected(Exception):
    pass


def _pay_collection(collection_id: int, *, staff, payment_method: str) -> PaymentRecord:
    collection = EggCollection.objects.select_for_update().filter(pk=collection_id).first()
    if collection is None:
        raise _ItemRejected("Collection not found")
    if collection.paid:
        raise _ItemRejected("Collection already paid")

    now = timezone.now()
    payment = PaymentRecord.objects.create(
        payment_type=PaymentRecord.PaymentType.CUSTOMER_PAYMENT,
        customer_id=collection.farmer_id,
        collection=collection,
        amount=collection.total_value,
        payment_method=payment_method,
        processed_by=staff,
        payment_date=now,
        notes=f"Payment for egg collection {collection.pk}",
    )
    collection.paid = True
    collection.payment_date = now
    collection.save(update_fields=["paid", "payment_date", "updated_at"])
    return payment


def process_batch_payment(
    collection_ids: Iterable[int],
    *,
    staff_id: int,
    payment_method: str = PaymentRecord.PaymentMethod.BANK_TRANSFER,
) -> BatchPaymentResult:
    """Pay each collection independently; one failed item never stops the batch."""

    if payment_method not in PaymentRecord.PaymentMethod.values:
        raise ValueError(f"Unknown payment method '{payment_method}'.")
    staff = get_user_model().objects.filter(pk=staff_id).first()
    if staff is None:
        raise StaffNotFound(staff_id)

    result = BatchPaymentResult()
    for collection_id in collection_ids:
        try:
            with transaction.atomic():
                payment = _pay_collection(collection_id, staff=staff, payment_method=payment_method)
        except _ItemRejected as exc:
            result.failures.append(BatchPaymentFailure(collection_id=collection_id, error=str(exc)))
            continue
        except Exception as exc:
            logger.exception("Payment for egg collection %s failed.", collection_id)
            result.failures.append(BatchPaymentFailure(collection_id=collection_id, error=str(exc)))
            continue
        result.processed += 1
        result.total_amount += payment.amount
        result.payments.append(payment)

    logger.info(
        "Batch payment processed: %s collections, %s total, %s failures.",
        result.processed,
        result.total_amount.quantize(Decimal("0.01")),
        len(result.failures),
    )
    return result
