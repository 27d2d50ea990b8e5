"""Error types raised by the record store.

Messages never include the session password. Callers distinguish failures by
class, so every layer raises one of these rather than a bare ``RuntimeError``.
"""

from dataclasses import dataclass


class CalorieStoreError(Exception):
    """Base class for record store errors."""


@dataclass(frozen=True)
class FieldError:
    """A single violated field, named by its dotted JSON path."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationError(CalorieStoreError):
    """Raised when input fails structural or range validation."""

    def __init__(self, field_errors: list[FieldError]) -> None:
        self.field_errors = field_errors
        details = ", ".join(str(error) for error in field_errors)
        super().__init__(f"Validation failed: {details}")

    @property
    def fields(self) -> list[str]:
        """Return the names of every violated field."""
        return [error.field for error in self.field_errors]


class StorageUnavailable(CalorieStoreError):
    """Raised when the data root is missing, unreadable or not writable."""


class RecordNotFound(CalorieStoreError):
    """Raised when no record exists for a date."""

    def __init__(self, date: str) -> None:
        self.date = date
        super().__init__(f"No record for {date}")


class DecryptionError(CalorieStoreError):
    """Raised when a ciphertext cannot be decrypted with the given password."""


class CorruptSettings(CalorieStoreError):
    """Raised when the settings document exists but cannot be decoded."""


class RecordFormatError(CalorieStoreError):
    """Raised when a record file has a malformed header or body."""


class SessionRequired(CalorieStoreError):
    """Raised when an operation needs a logged-in session and none is active."""
