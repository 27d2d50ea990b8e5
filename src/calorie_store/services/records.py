"""Daily record storage service."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

from calorie_store.adapters.record_codec import RecordCodec
from calorie_store.domain.errors import RecordNotFound
from calorie_store.domain.records import DailyRecord, StoredRecord, UnreadableRecord
from calorie_store.domain.sessions import SessionContext, password_of
from calorie_store.services.validation import validate_daily_record, validate_date

logger = logging.getLogger(__name__)


class RecordRepository(Protocol):
    """Persistence interface for record file text keyed by date."""

    def ensure_ready(self) -> None:
        """Create the storage location if needed."""

    def list_dates(self) -> list[str]:
        """Return the date key of every stored record."""

    def read(self, date: str) -> str | None:
        """Return the stored text for a date, or None if absent."""

    def write(self, date: str, text: str) -> None:
        """Replace the stored text for a date."""

    def delete(self, date: str) -> bool:
        """Remove the text for a date; return False if it was absent."""


@dataclass
class RecordStore:
    """Validates, encodes and persists one record per calendar date."""

    repository: RecordRepository
    codec: RecordCodec = field(default_factory=RecordCodec)

    def ensure_ready(self) -> None:
        """Create the data root and its record directory if absent."""
        self.repository.ensure_ready()

    def save(
        self, record: DailyRecord | dict[str, object], session: SessionContext | None
    ) -> str:
        """Validate and upsert a record, returning its date."""
        validated = validate_daily_record(record)
        text = self.codec.encode(validated, password_of(session))
        self.repository.write(validated.date, text)
        logger.info(
            "Saved record %s (encrypted=%s)",
            validated.date,
            password_of(session) is not None,
        )
        return validated.date

    def get(self, date: str, session: SessionContext | None) -> StoredRecord:
        """Return the record for a date.

        Raises ``RecordNotFound`` when nothing is stored for the date.
        """
        validate_date(date)
        record = self._load(date, password_of(session))
        if record is None:
            raise RecordNotFound(date)
        return record

    def list_records(
        self,
        session: SessionContext | None,
        start: str | None = None,
        end: str | None = None,
    ) -> list[StoredRecord]:
        """Return records within inclusive bounds, most recent first."""
        # Blank bounds from query strings mean "unbounded".
        start = start or None
        end = end or None
        if start is not None:
            validate_date(start)
        if end is not None:
            validate_date(end)
        password = password_of(session)
        records: list[StoredRecord] = []
        for date in self.repository.list_dates():
            record = self._load(date, password)
            # None means the file was deleted while the listing was in progress.
            if record is not None:
                records.append(record)
        return sorted(
            (record for record in records if _in_range(record.date, start, end)),
            key=lambda record: record.date,
            reverse=True,
        )

    def _load(self, date: str, password: str | None) -> StoredRecord | None:
        try:
            text = self.repository.read(date)
        except OSError:
            logger.warning("Could not read record file for %s", date)
            return UnreadableRecord(date=date, reason="Unable to read entry file")
        if text is None:
            return None
        return self.codec.decode(text, password, file_date=date)

    def delete(self, date: str) -> None:
        """Delete the record for a date; absent dates are not an error."""
        validate_date(date)
        if self.repository.delete(date):
            logger.info("Deleted record %s", date)


def _in_range(value: str, start: str | None, end: str | None) -> bool:
    if start is not None and value < start:
        return False
    if end is not None and value > end:
        return False
    return True
