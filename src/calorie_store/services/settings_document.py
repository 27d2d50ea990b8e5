"""Settings document service.

The document is replaced in full on every save. Two overlapping
load-modify-save cycles can lose an update; with a single local operator this
is accepted rather than locked against.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Protocol

from calorie_store.adapters.cipher import PasswordCipher
from calorie_store.adapters.record_codec import dump_json
from calorie_store.domain.errors import CorruptSettings, DecryptionError, ValidationError
from calorie_store.domain.sessions import SessionContext, password_of
from calorie_store.domain.settings_document import (
    SettingsDocument,
    default_settings_document,
)
from calorie_store.services.validation import validate_settings_document

logger = logging.getLogger(__name__)


class DocumentRepository(Protocol):
    """Persistence interface for a single text document."""

    def exists(self) -> bool:
        """Return True when the document is stored."""

    def read(self) -> str | None:
        """Return the document text, or None if absent."""

    def write(self, text: str) -> None:
        """Replace the document text."""

    def delete(self) -> bool:
        """Remove the document; return False if it was absent."""


@dataclass
class SettingsDocumentService:
    """Loads and saves the goals, food library and weight history."""

    repository: DocumentRepository
    cipher: PasswordCipher = field(default_factory=PasswordCipher)

    def exists(self) -> bool:
        """Return True once the document has been saved at least once."""
        return self.repository.exists()

    def read_payload(self, session: SessionContext | None) -> object | None:
        """Decrypt and parse the stored JSON without schema checks.

        Returns None when nothing is stored. Raises ``CorruptSettings`` when
        the text cannot be decrypted or is not JSON.
        """
        text = self.repository.read()
        if text is None:
            return None
        password = password_of(session)
        if password is not None:
            try:
                text = self.cipher.decrypt(text, password)
            except DecryptionError as exc:
                raise CorruptSettings("Settings could not be decrypted") from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError:
            raise CorruptSettings("Settings are not valid JSON") from None

    def load(self, session: SessionContext | None) -> SettingsDocument:
        """Return the stored document, or the defaults if none is stored."""
        payload = self.read_payload(session)
        if payload is None:
            return default_settings_document()
        try:
            return validate_settings_document(payload)
        except ValidationError as exc:
            raise CorruptSettings(f"Settings are invalid: {exc}") from exc

    def save(
        self,
        document: SettingsDocument | dict[str, object],
        session: SessionContext | None,
    ) -> SettingsDocument:
        """Validate and replace the whole document."""
        validated = validate_settings_document(document)
        text = dump_json(validated.to_json_dict())
        password = password_of(session)
        if password is not None:
            text = self.cipher.encrypt(text, password)
        self.repository.write(text)
        logger.info("Saved settings document (encrypted=%s)", password is not None)
        return validated
