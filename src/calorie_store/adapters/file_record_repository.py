"""Directory-backed repository for daily record files."""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

from calorie_store.adapters.files import write_text_atomic
from calorie_store.config import DAILY_DIR, RECORD_SUFFIX
from calorie_store.domain.errors import StorageUnavailable
from calorie_store.domain.records import DATE_PATTERN
from calorie_store.services.records import RecordRepository

logger = logging.getLogger(__name__)


@dataclass
class FileRecordRepository(RecordRepository):
    """Stores each record as ``<root>/daily/<date>.md``."""

    root: Path

    @property
    def daily_dir(self) -> Path:
        return self.root / DAILY_DIR

    def _path(self, date: str) -> Path:
        return self.daily_dir / f"{date}{RECORD_SUFFIX}"

    def ensure_ready(self) -> None:
        """Create the root and record directory; fail if not writable."""
        try:
            self.daily_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageUnavailable(
                f"Cannot create data directory {self.daily_dir}"
            ) from exc
        if not os.access(self.daily_dir, os.W_OK | os.X_OK):
            raise StorageUnavailable(f"Data directory {self.daily_dir} is not writable")

    def list_dates(self) -> list[str]:
        """Return the date of every record file in the directory."""
        try:
            with os.scandir(self.daily_dir) as entries:
                names = [entry.name for entry in entries if entry.is_file()]
        except OSError as exc:
            raise StorageUnavailable(
                f"Cannot read data directory {self.daily_dir}"
            ) from exc
        dates = []
        for name in names:
            if not name.endswith(RECORD_SUFFIX):
                continue
            stem = name[: -len(RECORD_SUFFIX)]
            if re.fullmatch(DATE_PATTERN, stem) is None:
                logger.debug("Skipping unexpected file %s", name)
                continue
            dates.append(stem)
        return dates

    def read(self, date: str) -> str | None:
        """Return file text, or None when the file does not exist."""
        try:
            return self._path(date).read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return None

    def write(self, date: str, text: str) -> None:
        """Atomically replace the file for a date."""
        try:
            write_text_atomic(self._path(date), text)
        except OSError as exc:
            raise StorageUnavailable(f"Cannot write record for {date}") from exc

    def delete(self, date: str) -> bool:
        """Remove the file for a date."""
        try:
            self._path(date).unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageUnavailable(f"Cannot delete record for {date}") from exc
        return True
