from __future__ import annotations

from decimal import Decimal

from django.test import TestCase

from egg_collection.exceptions import StaffNotFound
from egg_collection.models import EggCollection, PaymentRecord
from egg_collection.services.payments import process_batch_payment

from .helpers import CollectionFixturesMixin


class BatchPaymentTests(CollectionFixturesMixin, TestCase):
    def setUp(self) -> None:
        self.collector = self.create_collector()
        self.cashier = self.create_staff()
        self.farmer = self.create_farmer()
        self.first = self.create_collection(self.farmer, self.collector, hen={"large": 24})
        self.second = self.create_collection(self.farmer, self.collector, duck={"large": 12})

    def test_pays_found_collections_and_reports_missing_ones(self) -> None:
        missing_id = self.second.pk + 100

        result = process_batch_payment(
            [self.first.pk, missing_id, self.second.pk],
            staff_id=self.cashier.pk,
            payment_method=PaymentRecord.PaymentMethod.CASH,
        )

        self.assertEqual(result.processed, 2)
        self.assertEqual(result.total_amount, Decimal("9"))
        self.assertEqual(len(result.failures), 1)
        self.assertEqual(result.failures[0].collection_id, missing_id)
        self.assertEqual(result.failures[0].error, "Collection not found")

        self.first.refresh_from_db()
        self.assertTrue(self.first.paid)
        self.assertIsNotNone(self.first.payment_date)

        payment = PaymentRecord.objects.get(collection=self.first)
        self.assertEqual(payment.payment_type, PaymentRecord.PaymentType.CUSTOMER_PAYMENT)
        self.assertEqual(payment.customer, self.farmer)
        self.assertEqual(payment.amount, Decimal("5"))
        self.assertEqual(payment.payment_method, PaymentRecord.PaymentMethod.CASH)
        self.assertEqual(payment.processed_by, self.cashier)
        self.assertEqual(payment.notes, f"Payment for egg collection {self.first.pk}")

    def test_already_paid_collection_is_not_paid_twice(self) -> None:
        process_batch_payment([self.first.pk], staff_id=self.cashier.pk)
        result = process_batch_payment([self.first.pk, self.second.pk], staff_id=self.cashier.pk)

        self.assertEqual(result.processed, 1)
        self.assertEqual(result.failures[0].error, "Collection already paid")
        self.assertEqual(PaymentRecord.objects.filter(collection=self.first).count(), 1)
        self.assertEqual(
            PaymentRecord.objects.get(collection=self.second).payment_method,
            PaymentRecord.PaymentMethod.BANK_TRANSFER,
        )

    def test_totals_leave_collection_values_untouched(self) -> None:
        process_batch_payment([self.first.pk], staff_id=self.cashier.pk)
        self.assertEqual(EggCollection.objects.get(pk=self.first.pk).total_value, Decimal("5"))
        self.assertEqual(EggCollection.objects.unpaid().count(), 1)

    def test_unknown_staff(self) -> None:
        with self.assertRaises(StaffNotFound):
            process_batch_payment([self.first.pk], staff_id=self.cashier.pk + 500)

    def test_unknown_payment_method(self) -> None:
        with self.assertRaises(ValueError):
            process_batch_payment([self.first.pk], staff_id=self.cashier.pk, payment_method="barter")
        self.assertFalse(PaymentRecord.objects.exists())
