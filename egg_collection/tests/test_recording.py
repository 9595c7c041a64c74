from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.test import TestCase
from django.utils import timezone

from egg_collection.buckets import EggBuckets
from egg_collection.exceptions import CollectionValidationError, ValidationReason
from egg_collection.models import EggCollection
from egg_collection.services.quality import QualityAlertService
from egg_collection.services.recording import EggCollectionService
from notifications.models import Notification
from notifications.services import NotificationService

from .helpers import CollectionFixturesMixin, fixed_price_provider


class EggCollectionServiceTests(CollectionFixturesMixin, TestCase):
    def setUp(self) -> None:
        self.farmer = self.create_farmer(business_name="Granja Sol")
        self.collector = self.create_collector()
        self.service = EggCollectionService(
            notifier=NotificationService(forward_to_telegram=False),
            price_provider=fixed_price_provider(),
        )

    def test_records_collection_with_derived_totals(self) -> None:
        collection = self.service.record_collection(self.make_request(self.farmer, self.collector))
        collection.refresh_from_db()

        self.assertEqual(collection.total_hen_eggs, 126)
        self.assertEqual(collection.total_duck_eggs, 38)
        self.assertEqual(collection.total_value, Decimal("38.9167"))
        self.assertFalse(collection.paid)
        self.assertFalse(collection.synced)
        self.assertIsNone(collection.route)
        self.assertEqual(collection.quality_score, 4)

    def test_updates_farmer_stats(self) -> None:
        self.service.record_collection(self.make_request(self.farmer, self.collector))
        self.service.record_collection(
            self.make_request(
                self.farmer,
                self.collector,
                hen_eggs=EggBuckets(large=121),
                duck_eggs=EggBuckets(large=41),
            )
        )
        self.farmer.refresh_from_db()

        # Means of (126, 121) and (38, 41), rounded half up.
        self.assertEqual(self.farmer.expected_hen_eggs, 124)
        self.assertEqual(self.farmer.expected_duck_eggs, 40)
        total = sum(EggCollection.objects.for_farmer(self.farmer.pk).values_list("total_value", flat=True))
        self.assertEqual(self.farmer.total_egg_sales, total)
        self.assertEqual(self.farmer.credit_balance, -total)

    def test_rolling_window_ignores_old_collections(self) -> None:
        self.create_collection(
            self.farmer,
            self.collector,
            hen={"large": 1000},
            collection_date=timezone.now() - timedelta(days=45),
        )
        self.service.record_collection(self.make_request(self.farmer, self.collector))
        self.farmer.refresh_from_db()
        self.assertEqual(self.farmer.expected_hen_eggs, 126)

    def test_updates_collector_performance(self) -> None:
        self.service.record_collection(self.make_request(self.farmer, self.collector))
        self.collector.refresh_from_db()

        self.assertEqual(self.collector.total_collections, 1)
        self.assertEqual(self.collector.average_quality, Decimal("4.00"))
        self.assertEqual(self.collector.on_time_rate, Decimal("95"))
        self.assertIsNotNone(self.collector.metrics_updated_at)

    def test_reports_every_side_effect(self) -> None:
        route = self.create_route(self.farmer)
        outcome = self.service.record_collection_with_report(
            self.make_request(self.farmer, self.collector, route_id=route.pk)
        )

        self.assertEqual(
            [result.name for result in outcome.side_effects],
            ["farmer_stats", "quality_alerts", "route_metrics", "collector_performance"],
        )
        self.assertTrue(all(result.succeeded for result in outcome.side_effects))
        route_result = outcome.side_effects[2]
        self.assertEqual(route_result.detail["collections"], 1)

    def test_route_metrics_skipped_without_route(self) -> None:
        outcome = self.service.record_collection_with_report(self.make_request(self.farmer, self.collector))
        self.assertNotIn("route_metrics", [result.name for result in outcome.side_effects])

    def test_failing_side_effect_keeps_the_collection(self) -> None:
        with mock.patch.object(QualityAlertService, "check_collection", side_effect=RuntimeError("notifier down")):
            with self.assertLogs("egg_collection.services.recording", level="ERROR"):
                outcome = self.service.record_collection_with_report(self.make_request(self.farmer, self.collector))

        self.assertTrue(EggCollection.objects.filter(pk=outcome.collection.pk).exists())
        failed = outcome.failed_side_effects
        self.assertEqual([result.name for result in failed], ["quality_alerts"])
        self.assertEqual(failed[0].error, "notifier down")
        self.farmer.refresh_from_db()
        self.assertEqual(self.farmer.expected_hen_eggs, 126)

    def test_rejected_request_persists_nothing(self) -> None:
        request = self.make_request(self.farmer, self.collector, hen_eggs=EggBuckets(), duck_eggs=EggBuckets())
        with self.assertRaises(CollectionValidationError) as ctx:
            self.service.record_collection(request)

        self.assertEqual(ctx.exception.reason, ValidationReason.EMPTY_COLLECTION)
        self.assertFalse(EggCollection.objects.exists())
        self.farmer.refresh_from_db()
        self.assertEqual(self.farmer.total_egg_sales, Decimal("0"))

    def test_zero_price_is_rejected(self) -> None:
        request = self.make_request(self.farmer, self.collector, hen_egg_price=Decimal("0"))
        with self.assertRaises(CollectionValidationError) as ctx:
            self.service.record_collection(request)
        self.assertEqual(ctx.exception.reason, ValidationReason.INVALID_PRICE)
        self.assertFalse(EggCollection.objects.exists())

    def test_high_damage_sends_quality_alert(self) -> None:
        collection = self.service.record_collection(
            self.make_request(
                self.farmer,
                self.collector,
                hen_eggs=EggBuckets(large=85, damaged=15),
                duck_eggs=EggBuckets(),
                quality_notes="Cracked trays",
            )
        )

        alert = Notification.objects.get(title="Quality Issue Detected")
        self.assertEqual(alert.priority, Notification.Priority.HIGH)
        self.assertEqual(alert.category, Notification.Category.QUALITY)
        self.assertTrue(alert.action_required)
        self.assertEqual(alert.action_url, f"/eggs/collections/{collection.pk}")
        self.assertEqual(alert.context["notes"], "Cracked trays")
        self.assertAlmostEqual(alert.context["damage_rate"], 0.15)

    def test_shortfall_compares_against_the_updated_rolling_mean(self) -> None:
        self.farmer.expected_hen_eggs = 100
        self.farmer.expected_duck_eggs = 0
        self.farmer.save()
        self.create_collection(
            self.farmer,
            self.collector,
            hen={"large": 100},
            collection_date=timezone.now() - timedelta(days=1),
        )

        self.service.record_collection(
            self.make_request(
                self.farmer,
                self.collector,
                hen_eggs=EggBuckets(large=45),
                duck_eggs=EggBuckets(),
            )
        )

        self.farmer.refresh_from_db()
        self.assertEqual(self.farmer.expected_hen_eggs, 73)
        self.assertFalse(Notification.objects.filter(title="Low Production Alert").exists())

    def test_shortfall_alert_uses_the_updated_expected_production(self) -> None:
        for days_ago in (1, 2):
            self.create_collection(
                self.farmer,
                self.collector,
                hen={"large": 300},
                collection_date=timezone.now() - timedelta(days=days_ago),
            )

        self.service.record_collection(
            self.make_request(
                self.farmer,
                self.collector,
                hen_eggs=EggBuckets(large=40),
                duck_eggs=EggBuckets(),
            )
        )

        alert = Notification.objects.get(title="Low Production Alert")
        self.assertEqual(alert.priority, Notification.Priority.MEDIUM)
        self.assertEqual(alert.message, "Granja Sol production below expected levels. Hen: -173, Duck: -0")
        self.assertEqual(alert.action_url, f"/customers/{self.farmer.pk}")
        self.assertEqual(alert.context["expected"], {"hen": 213, "duck": 0})

    def test_failed_production_alert_keeps_the_quality_alert(self) -> None:
        for days_ago in (1, 2):
            self.create_collection(
                self.farmer,
                self.collector,
                hen={"large": 200},
                collection_date=timezone.now() - timedelta(days=days_ago),
            )

        with mock.patch.object(
            NotificationService, "send_production_alert", side_effect=RuntimeError("feed offline")
        ):
            with self.assertLogs("egg_collection.services", level="ERROR"):
                outcome = self.service.record_collection_with_report(
                    self.make_request(
                        self.farmer,
                        self.collector,
                        hen_eggs=EggBuckets(large=50, damaged=15),
                        duck_eggs=EggBuckets(),
                    )
                )

        self.assertEqual([result.name for result in outcome.failed_side_effects], ["quality_alerts"])
        alert = Notification.objects.get(title="Quality Issue Detected")
        self.assertEqual(alert.context["collection_id"], outcome.collection.pk)
        self.assertEqual([n.title for n in self.service.notifier.sent], ["Quality Issue Detected"])
        self.assertEqual(outcome.collection.farmer.expected_hen_eggs, 155)

    def test_first_collection_sets_its_own_baseline(self) -> None:
        self.service.record_collection(self.make_request(self.farmer, self.collector))
        self.assertFalse(Notification.objects.filter(title="Low Production Alert").exists())

    def test_over_expected_warning_is_returned(self) -> None:
        self.farmer.expected_hen_eggs = 10
        self.farmer.save()
        with self.assertLogs("egg_collection.services.validation", level="WARNING"):
            outcome = self.service.record_collection_with_report(self.make_request(self.farmer, self.collector))
        self.assertIn("Hen egg collection (126) exceeds expected production (10)", outcome.warnings)
        self.assertIn("Duck egg collection (38) exceeds expected production (0)", outcome.warnings)


class CollectionQueryTests(CollectionFixturesMixin, TestCase):
    def setUp(self) -> None:
        self.farmer = self.create_farmer()
        self.collector = self.create_collector()
        self.service = EggCollectionService(notifier=NotificationService(forward_to_telegram=False))

    def test_farmer_collections_within_window(self) -> None:
        recent = self.create_collection(self.farmer, self.collector, hen={"small": 12})
        self.create_collection(
            self.farmer,
            self.collector,
            hen={"small": 12},
            collection_date=timezone.now() - timedelta(days=40),
        )
        self.assertEqual(list(self.service.get_farmer_collections(self.farmer.pk, 30)), [recent])
        self.assertEqual(self.service.get_farmer_collections(self.farmer.pk, 60).count(), 2)

    def test_staff_collections(self) -> None:
        other = self.create_collector()
        mine = self.create_collection(self.farmer, self.collector, hen={"small": 12})
        self.create_collection(self.farmer, other, hen={"small": 12})
        self.assertEqual(list(self.service.get_staff_collections(self.collector.pk, 7)), [mine])

    def test_route_collections_for_a_day(self) -> None:
        route = self.create_route(self.farmer)
        today = self.create_collection(self.farmer, self.collector, hen={"small": 12}, route=route)
        self.create_collection(
            self.farmer,
            self.collector,
            hen={"small": 12},
            route=route,
            collection_date=timezone.now() - timedelta(days=2),
        )
        self.assertEqual(list(self.service.get_route_collections(route.pk, timezone.localdate())), [today])

    def test_unpaid_collections_newest_first(self) -> None:
        older = self.create_collection(
            self.farmer,
            self.collector,
            hen={"small": 12},
            collection_date=timezone.now() - timedelta(days=1),
        )
        newer = self.create_collection(self.farmer, self.collector, hen={"small": 12})
        self.create_collection(self.farmer, self.collector, hen={"small": 12}, paid=True)
        self.assertEqual(list(self.service.get_unpaid_collections(self.farmer.pk)), [newer, older])

    def test_mark_synced(self) -> None:
        first = self.create_collection(self.farmer, self.collector, hen={"small": 12})
        second = self.create_collection(self.farmer, self.collector, hen={"small": 12})

        self.assertEqual(self.service.mark_synced([first.pk, second.pk]), 2)
        self.assertEqual(self.service.mark_synced([first.pk]), 0)
        self.assertEqual(self.service.mark_synced([]), 0)
        self.assertEqual(EggCollection.objects.filter(synced=True).count(), 2)

    def test_model_mark_synced_keeps_totals(self) -> None:
        collection = self.create_collection(self.farmer, self.collector, hen={"small": 24})
        collection.mark_synced()
        collection.refresh_from_db()
        self.assertTrue(collection.synced)
        self.assertEqual(collection.total_value, Decimal("5.0000"))
