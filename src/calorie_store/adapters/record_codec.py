"""On-disk text format for daily records.

Each record file is a YAML front-matter header followed by a body::

    ---
    date: '2026-01-10'
    totalCalories: 650
    encrypted: true
    ---
    <ciphertext or JSON>

The header stays readable without the password. ``totalCalories`` is
recomputed on every save and never read back; the body is authoritative.
"""

import json
import logging
import re
from dataclasses import dataclass, field

import yaml

from calorie_store.adapters.cipher import PasswordCipher
from calorie_store.domain.errors import (
    DecryptionError,
    RecordFormatError,
    ValidationError,
)
from calorie_store.domain.records import (
    DailyRecord,
    StoredRecord,
    UnreadableRecord,
    as_number,
)
from calorie_store.services.validation import validate_daily_record

_FRONT_MATTER = re.compile(r"\A---[ \t]*\n(.*?)^---[ \t]*(?:\n|\Z)", re.S | re.M)

logger = logging.getLogger(__name__)


def dump_json(payload: object) -> str:
    """Serialize a JSON payload the way the record files store it."""
    return json.dumps(payload, indent=2, ensure_ascii=False)


def split_front_matter(text: str) -> tuple[dict[str, object], str]:
    """Split a record file into its header mapping and raw body."""
    normalized = text.replace("\r\n", "\n")
    match = _FRONT_MATTER.match(normalized)
    if match is None:
        raise RecordFormatError("Record file has no front-matter header")
    try:
        header = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError:
        raise RecordFormatError("Record header is not valid YAML") from None
    if not isinstance(header, dict):
        raise RecordFormatError("Record header is not a mapping")
    return header, normalized[match.end() :].strip()


@dataclass(frozen=True)
class RecordCodec:
    """Converts daily records to and from their file text."""

    cipher: PasswordCipher = field(default_factory=PasswordCipher)

    def encode(self, record: DailyRecord, password: str | None) -> str:
        """Render a record, encrypting the body when a password is given."""
        body = dump_json(record.to_json_dict())
        if password is not None:
            body = self.cipher.encrypt(body, password)
        header = {
            "date": record.date,
            "totalCalories": as_number(record.totals().calories),
            "encrypted": password is not None,
        }
        rendered = yaml.safe_dump(header, sort_keys=False, allow_unicode=True)
        return f"---\n{rendered}---\n{body}\n"

    def parse(self, text: str, password: str | None) -> DailyRecord:
        """Decode a record strictly.

        Raises ``DecryptionError`` when the body cannot be decrypted and
        ``RecordFormatError`` for any other malformed content.
        """
        header, body = split_front_matter(text)
        if header.get("encrypted"):
            if password is None:
                raise DecryptionError("Record is encrypted and no password is set")
            body = self.cipher.decrypt(body, password)
        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            raise RecordFormatError("Record body is not valid JSON") from None
        try:
            return validate_daily_record(payload)
        except ValidationError as exc:
            raise RecordFormatError(f"Record body is invalid: {exc}") from None

    def decode(self, text: str, password: str | None, file_date: str) -> StoredRecord:
        """Decode a record, degrading to ``UnreadableRecord`` on any failure.

        ``file_date`` is the date the file is stored under. It is the
        record's identity, so a body dated otherwise is unreadable.
        """
        try:
            record = self.parse(text, password)
        except DecryptionError:
            reason = "Unable to decrypt entry"
        except RecordFormatError as exc:
            reason = str(exc)
        else:
            if record.date == file_date:
                return record
            reason = "Record date does not match its file name"
        logger.warning("Unreadable record %s: %s", file_date, reason)
        return UnreadableRecord(date=file_date, reason=reason)
