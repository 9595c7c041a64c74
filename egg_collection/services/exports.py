from __future__ import annotations

import csv
import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from io import BytesIO, StringIO
from typing import Any, Optional

from django.db import DatabaseError
from django.utils import timezone
from openpyxl import Workbook

from ..exceptions import ReportingError
from ..models import EggCollection
from .reporting import collections_between

logger = logging.getLogger(__name__)

CSV_CONTENT_TYPE = "text/csv"
XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

EXPORT_HEADERS = (
    "Collection Date",
    "Farmer ID",
    "Farmer Name",
    "Route",
    "Collector",
    "Hen Eggs Small",
    "Hen Eggs Medium",
    "Hen Eggs Large",
    "Hen Eggs XL",
    "Hen Eggs Damaged",
    "Total Hen Eggs",
    "Duck Eggs Small",
    "Duck Eggs Medium",
    "Duck Eggs Large",
    "Duck Eggs Damaged",
    "Total Duck Eggs",
    "Hen Price/Dozen",
    "Duck Price/Dozen",
    "Total Value",
    "Quality Notes",
    "Paid Status",
)

TWO_PLACES = Decimal("0.01")


def _money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def export_row(collection: EggCollection) -> list[Any]:
    """One export row; money columns are Decimals rounded to cents."""

    return [
        timezone.localdate(collection.collection_date).isoformat(),
        collection.farmer_id,
        collection.farmer.display_name,
        collection.route.name if collection.route_id else "Direct",
        collection.collector.get_full_name(),
        collection.hen_small,
        collection.hen_medium,
        collection.hen_large,
        collection.hen_extra_large,
        collection.hen_damaged,
        collection.total_hen_eggs,
        collection.duck_small,
        collection.duck_medium,
        collection.duck_large,
        collection.duck_damaged,
        collection.total_duck_eggs,
        _money(collection.hen_egg_price),
        _money(collection.duck_egg_price),
        _money(collection.total_value),
        collection.quality_notes or "",
        "Paid" if collection.paid else "Unpaid",
    ]


def _load_rows(start: datetime, end: datetime, route_id: Optional[int]) -> list[list[Any]]:
    try:
        return [export_row(collection) for collection in collections_between(start, end, route_id)]
    except DatabaseError as exc:
        logger.exception("Failed to load collections for export %s - %s.", start, end)
        raise ReportingError("Collection data export failed") from exc


def export_collection_data(start: datetime, end: datetime, route_id: Optional[int] = None) -> str:
    rows = _load_rows(start, end, route_id)
    buffer = StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for row in rows:
        writer.writerow([f"{value:.2f}" if isinstance(value, Decimal) else value for value in row])
    return buffer.getvalue()


def export_collection_workbook(start: datetime, end: datetime, route_id: Optional[int] = None) -> bytes:
    rows = _load_rows(start, end, route_id)
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Collections"
    sheet.append(list(EXPORT_HEADERS))
    for row in rows:
        sheet.append([float(value) if isinstance(value, Decimal) else value for value in row])

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
