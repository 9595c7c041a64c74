from __future__ import annotations

import csv
from io import BytesIO, StringIO

from django.test import TestCase
from django.utils import timezone
from openpyxl import load_workbook

from egg_collection.models import local_day_bounds
from egg_collection.services.exports import EXPORT_HEADERS, export_collection_data, export_collection_workbook

from .helpers import CollectionFixturesMixin


class CollectionExportTests(CollectionFixturesMixin, TestCase):
    def setUp(self) -> None:
        self.collector = self.create_collector(first_name="Luis", last_name="Mora")
        self.farmer = self.create_farmer(business_name="Granja El Roble")
        self.route = self.create_route(self.farmer, name="South loop")
        self.start, self.end = local_day_bounds(timezone.localdate())

    def test_csv_header_and_rows(self) -> None:
        self.create_collection(
            self.farmer,
            self.collector,
            hen={"small": 24, "medium": 48, "large": 36, "extra_large": 12, "damaged": 6},
            duck={"small": 12, "medium": 18, "large": 6, "damaged": 2},
            route=self.route,
            quality_notes="Dirty shells, some cracks",
        )
        self.create_collection(self.farmer, self.collector, hen={"large": 12}, paid=True)

        lines = export_collection_data(self.start, self.end).splitlines()

        self.assertEqual(lines[0], ",".join(EXPORT_HEADERS))
        self.assertEqual(len(lines), 3)
        first = lines[1].split(",")
        self.assertEqual(first[0], timezone.localdate().isoformat())
        self.assertEqual(first[2:5], ["Granja El Roble", "South loop", "Luis Mora"])
        self.assertEqual(first[10], "126")
        self.assertEqual(first[15], "38")
        self.assertEqual(first[16:19], ["2.50", "4.00", "38.92"])
        self.assertIn('"Dirty shells, some cracks"', lines[1])
        self.assertTrue(lines[1].endswith(",Unpaid"))

        second = next(csv.reader(StringIO(lines[2])))
        self.assertEqual(second[3], "Direct")
        self.assertEqual(second[-2:], ["", "Paid"])

    def test_money_rounds_half_cents_up(self) -> None:
        self.create_collection(self.farmer, self.collector, hen={"large": 1}, hen_price="1.50")

        row = next(csv.reader(StringIO(export_collection_data(self.start, self.end).splitlines()[1])))

        self.assertEqual(row[16], "1.50")
        self.assertEqual(row[18], "0.13")

    def test_route_filter(self) -> None:
        self.create_collection(self.farmer, self.collector, hen={"large": 12}, route=self.route)
        self.create_collection(self.farmer, self.collector, hen={"large": 12})

        lines = export_collection_data(self.start, self.end, route_id=self.route.pk).splitlines()
        self.assertEqual(len(lines), 2)

    def test_empty_period_has_only_the_header(self) -> None:
        self.assertEqual(export_collection_data(self.start, self.end).splitlines(), [",".join(EXPORT_HEADERS)])

    def test_workbook_keeps_numbers_numeric(self) -> None:
        self.create_collection(self.farmer, self.collector, hen={"large": 24}, route=self.route)

        workbook = load_workbook(BytesIO(export_collection_workbook(self.start, self.end)))
        sheet = workbook.active
        rows = list(sheet.iter_rows(values_only=True))

        self.assertEqual(list(rows[0]), list(EXPORT_HEADERS))
        self.assertEqual(rows[1][3], "South loop")
        self.assertEqual(rows[1][10], 24)
        self.assertEqual(rows[1][18], 5.0)
        self.assertEqual(rows[1][20], "Unpaid")
