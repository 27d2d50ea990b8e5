"""Export of daily records to CSV and JSON."""

import csv
import io
import logging
from dataclasses import dataclass
from pathlib import Path

from calorie_store.adapters.files import write_text_atomic
from calorie_store.adapters.record_codec import dump_json
from calorie_store.domain.errors import StorageUnavailable
from calorie_store.domain.records import DailyRecord, as_number
from calorie_store.domain.sessions import SessionContext
from calorie_store.services.records import RecordStore

CSV_HEADER = [
    "Date",
    "Total Calories",
    "Protein",
    "Carbs",
    "Fats",
    "Exercise Calories",
    "Weight",
    "Water Glasses",
]
EXPORT_FORMATS = ("csv", "json")

logger = logging.getLogger(__name__)


@dataclass
class ExportService:
    """Renders a date range of records for external tools."""

    record_store: RecordStore

    def export(
        self,
        session: SessionContext | None,
        export_format: str,
        start: str | None = None,
        end: str | None = None,
    ) -> str:
        """Return the records in ``[start, end]`` as CSV or JSON text."""
        if export_format not in EXPORT_FORMATS:
            raise ValueError(f"Unsupported export format: {export_format}")
        records: list[DailyRecord] = []
        for record in self.record_store.list_records(session, start, end):
            if isinstance(record, DailyRecord):
                records.append(record)
            else:
                logger.warning("Skipping unreadable record %s in export", record.date)
        if export_format == "json":
            return dump_json([record.to_json_dict() for record in records])
        return _to_csv(records)

    def export_to_file(
        self,
        path: Path,
        session: SessionContext | None,
        export_format: str,
        start: str | None = None,
        end: str | None = None,
    ) -> None:
        """Write an export to ``path`` atomically."""
        content = self.export(session, export_format, start, end)
        try:
            write_text_atomic(path, content)
        except OSError as exc:
            raise StorageUnavailable(f"Cannot write export to {path}") from exc
        logger.info("Exported %s to %s", export_format, path)


def _to_csv(records: list[DailyRecord]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for record in records:
        totals = record.totals()
        exercise = record.exercise.calories_burned if record.exercise else 0
        writer.writerow(
            [
                record.date,
                _number(totals.calories),
                _number(totals.protein),
                _number(totals.carbs),
                _number(totals.fats),
                _number(exercise),
                _number(record.weight) if record.weight is not None else "",
                _number(record.water.glasses),
            ]
        )
    return buffer.getvalue()


def _number(value: float) -> str:
    return str(as_number(value))
