"""Single-file repository used for the settings and password files."""

from dataclasses import dataclass
from pathlib import Path

from calorie_store.adapters.files import write_text_atomic
from calorie_store.domain.errors import StorageUnavailable
from calorie_store.services.settings_document import DocumentRepository


@dataclass
class FileDocumentRepository(DocumentRepository):
    """Reads and atomically replaces one text file."""

    path: Path

    def exists(self) -> bool:
        """Return True when the file is present."""
        return self.path.is_file()

    def read(self) -> str | None:
        """Return the file text, or None when the file is absent."""
        try:
            return self.path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageUnavailable(f"Cannot read {self.path.name}") from exc

    def write(self, text: str) -> None:
        """Atomically replace the file."""
        try:
            write_text_atomic(self.path, text)
        except OSError as exc:
            raise StorageUnavailable(f"Cannot write {self.path.name}") from exc

    def delete(self) -> bool:
        """Remove the file; return False if it was absent."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageUnavailable(f"Cannot delete {self.path.name}") from exc
        return True
