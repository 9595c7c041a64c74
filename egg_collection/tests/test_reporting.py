from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.db import DatabaseError
from django.test import TestCase
from django.utils import timezone

from egg_collection.exceptions import ReportingError
from egg_collection.models import local_day_bounds
from egg_collection.services.reporting import (
    ROUTE_EFFICIENCY_PLACEHOLDER,
    get_collection_summary,
    get_daily_collection_report,
)

from .helpers import CollectionFixturesMixin


class CollectionSummaryTests(CollectionFixturesMixin, TestCase):
    def setUp(self) -> None:
        self.collector = self.create_collector()
        self.farmer = self.create_farmer()
        self.today = timezone.localdate()
        self.start, self.end = local_day_bounds(self.today)

    def test_summary_of_period(self) -> None:
        other = self.create_farmer()
        self.create_collection(self.farmer, self.collector, hen={"large": 24}, duck={"large": 12})
        self.create_collection(self.farmer, self.collector, hen={"large": 12, "damaged": 12})
        self.create_collection(other, self.collector, duck={"small": 12})

        summary = get_collection_summary(self.start, self.end)

        self.assertEqual(summary.total_collections, 3)
        self.assertEqual(summary.total_hen_eggs, 48)
        self.assertEqual(summary.total_duck_eggs, 24)
        self.assertEqual(summary.total_value, Decimal("18.0000"))
        self.assertEqual(summary.farms_visited, 2)
        # Scores 5, 1 and 5.
        self.assertAlmostEqual(summary.average_quality, 11 / 3)
        self.assertEqual(summary.route_efficiency, ROUTE_EFFICIENCY_PLACEHOLDER)

    def test_empty_period(self) -> None:
        summary = get_collection_summary(self.start, self.end)
        self.assertEqual(summary.total_collections, 0)
        self.assertEqual(summary.average_quality, 0.0)
        self.assertEqual(summary.route_efficiency, 0)
        self.assertEqual(summary.total_value, Decimal("0"))

    def test_filters_by_route_and_period(self) -> None:
        route = self.create_route(self.farmer)
        self.create_collection(self.farmer, self.collector, hen={"large": 12}, route=route)
        self.create_collection(self.farmer, self.collector, hen={"large": 12})
        self.create_collection(
            self.farmer,
            self.collector,
            hen={"large": 12},
            route=route,
            collection_date=timezone.now() - timedelta(days=3),
        )

        summary = get_collection_summary(self.start, self.end, route_id=route.pk)
        self.assertEqual(summary.total_collections, 1)

    def test_database_failure_raises_reporting_error(self) -> None:
        with mock.patch(
            "egg_collection.services.reporting.collections_between",
            side_effect=DatabaseError("connection lost"),
        ):
            with self.assertLogs("egg_collection.services.reporting", level="ERROR"):
                with self.assertRaises(ReportingError):
                    get_collection_summary(self.start, self.end)


class DailyCollectionReportTests(CollectionFixturesMixin, TestCase):
    def setUp(self) -> None:
        self.collector = self.create_collector()
        self.today = timezone.localdate()

    def test_top_farms_sorted_by_value_and_capped(self) -> None:
        farmers = [self.create_farmer(business_name=f"Farm {index:02d}") for index in range(12)]
        for index, farmer in enumerate(farmers):
            self.create_collection(farmer, self.collector, hen={"large": 12 * (index + 1)})
        # Second visit lifts the first farm to the top.
        self.create_collection(farmers[0], self.collector, hen={"large": 240})

        report = get_daily_collection_report(self.today)

        self.assertEqual(len(report.top_farms), 10)
        self.assertEqual(report.top_farms[0].farmer_name, "Farm 00")
        self.assertEqual(report.top_farms[0].total_eggs, 252)
        self.assertEqual(report.top_farms[0].total_value, Decimal("52.5"))
        values = [farm.total_value for farm in report.top_farms]
        self.assertEqual(values, sorted(values, reverse=True))
        self.assertEqual(report.top_farms[1].farmer_name, "Farm 11")
        self.assertEqual(report.summary.total_collections, 13)
        self.assertEqual(len(report.collections), 13)

    def test_quality_issues_and_route_performance(self) -> None:
        farmer = self.create_farmer()
        route = self.create_route(farmer, name="North loop")
        damaged = self.create_collection(farmer, self.collector, hen={"large": 80, "damaged": 20}, route=route)
        self.create_collection(farmer, self.collector, duck={"large": 50}, route=route)
        self.create_collection(farmer, self.collector, hen={"large": 10})

        report = get_daily_collection_report(self.today)

        self.assertEqual(len(report.quality_issues), 1)
        issue = report.quality_issues[0]
        self.assertEqual(issue.collection_id, damaged.pk)
        self.assertEqual(issue.issue, "High damage rate: 20.0%")
        self.assertEqual(len(report.route_performance), 1)
        performance = report.route_performance[0]
        self.assertEqual(performance.route_name, "North loop")
        self.assertEqual(performance.collections, 2)
        self.assertEqual(performance.efficiency, ROUTE_EFFICIENCY_PLACEHOLDER)

    def test_other_days_are_excluded(self) -> None:
        farmer = self.create_farmer()
        self.create_collection(
            farmer,
            self.collector,
            hen={"large": 12},
            collection_date=timezone.now() - timedelta(days=1),
        )
        report = get_daily_collection_report(self.today)
        self.assertEqual(report.collections, [])
        self.assertEqual(report.top_farms, [])
        self.assertEqual(report.as_dict()["summary"]["route_efficiency"], 0)
