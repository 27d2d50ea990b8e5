"""Validation gate for data entering the store."""

import re
from typing import TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from calorie_store.domain.errors import FieldError, ValidationError
from calorie_store.domain.records import DATE_PATTERN, DailyRecord, check_calendar_date
from calorie_store.domain.settings_document import SettingsDocument

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_model(model: type[ModelT], raw: object) -> ModelT:
    """Validate raw input against a model, reporting every failing field."""
    if isinstance(raw, model):
        raw = raw.model_dump(by_alias=True)
    try:
        return model.model_validate(raw)
    except PydanticValidationError as exc:
        raise ValidationError(_field_errors(exc)) from None


def validate_daily_record(raw: object) -> DailyRecord:
    """Return a typed daily record or raise ``ValidationError``."""
    return validate_model(DailyRecord, raw)


def validate_settings_document(raw: object) -> SettingsDocument:
    """Return a typed settings document or raise ``ValidationError``."""
    return validate_model(SettingsDocument, raw)


def validate_date(value: str) -> str:
    """Check a record key before it is used to build a file path."""
    if not isinstance(value, str) or not re.fullmatch(DATE_PATTERN, value):
        raise ValidationError(
            [FieldError(field="date", message="Date must match YYYY-MM-DD")]
        )
    try:
        return check_calendar_date(value)
    except ValueError as exc:
        raise ValidationError([FieldError(field="date", message=str(exc))]) from None


def _field_errors(exc: PydanticValidationError) -> list[FieldError]:
    errors: list[FieldError] = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "__root__"
        errors.append(FieldError(field=field, message=error["msg"]))
    return errors
