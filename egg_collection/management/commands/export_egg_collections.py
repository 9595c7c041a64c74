from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

from django.core.management.base import BaseCommand, CommandError, CommandParser

from egg_collection.exceptions import ReportingError
from egg_collection.models import local_day_bounds
from egg_collection.services import export_collection_data, export_collection_workbook


def _parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise CommandError(f"Invalid date '{value}', expected YYYY-MM-DD.") from exc


class Command(BaseCommand):
    help = "Exports the egg collections of a date range as CSV or Excel."

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument("--start", required=True, help="First day (YYYY-MM-DD), inclusive.")
        parser.add_argument("--end", required=True, help="Last day (YYYY-MM-DD), inclusive.")
        parser.add_argument("--route", type=int, help="Only collections of this route id.")
        parser.add_argument("--format", choices=("csv", "xlsx"), default="csv")
        parser.add_argument(
            "--output",
            help="Destination file. CSV is written to stdout when omitted; Excel requires it.",
        )

    def handle(self, *args: Any, **options: Any) -> None:
        start_day = _parse_day(options["start"])
        end_day = _parse_day(options["end"])
        if end_day < start_day:
            raise CommandError("--end must not be before --start.")
        start, _ = local_day_bounds(start_day)
        _, end = local_day_bounds(end_day)
        route_id: int | None = options.get("route")
        output = options.get("output")

        try:
            if options["format"] == "xlsx":
                if not output:
                    raise CommandError("--output is required for Excel exports.")
                content = export_collection_workbook(start, end, route_id)
                Path(output).write_bytes(content)
            else:
                text = export_collection_data(start, end, route_id)
                if not output:
                    self.stdout.write(text, ending="")
                    return
                Path(output).write_text(text, encoding="utf-8")
        except ReportingError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(self.style.SUCCESS(f"Export written to {output}"))
