"""
Lookup Record Normalization

Turns a stored form record into the shape lookup consumers read:

    {
        "record_id": "...",
        "submitted_at": "...",
        "<field_key>": {
            "field_value": <coerced value>,
            "field_label": "Name",
            "field_type": "text",
            "field_options": [...],
            "field_validation": {...},
        },
        ...
    }

Each field type maps to one coercion function. A coercion that cannot
handle its input returns the raw value, so one malformed answer never
aborts the rest of the record.
"""

import enum
import json
import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class FieldKind(str, enum.Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    DATETIME = "datetime"
    CHECKBOX = "checkbox"
    TEL = "tel"
    EMAIL = "email"
    URL = "url"

    @classmethod
    def of(cls, field_type: Optional[str]) -> "FieldKind":
        """Kind for a stored field type; anything unrecognised is treated as text."""
        normalized = (field_type or "").strip().lower()
        if normalized in ("datetime-local", "date-time"):
            normalized = "datetime"
        if normalized in ("decimal", "currency"):
            normalized = "number"
        try:
            return cls(normalized)
        except ValueError:
            return cls.TEXT


def parse_datetime(raw: Any) -> Optional[datetime]:
    """Parse an ISO-8601 date or datetime (a trailing 'Z' is accepted). None if unparseable."""
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day)
    if not isinstance(raw, str) or not raw.strip():
        return None
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _coerce_text(raw: Any) -> Any:
    return raw


def _coerce_number(raw: Any) -> Any:
    if isinstance(raw, bool):
        return raw
    try:
        number = float(raw)
    except (TypeError, ValueError):
        return raw
    if math.isnan(number):
        return raw
    if number.is_integer():
        return int(number)
    return number


def _coerce_date(raw: Any) -> Any:
    parsed = parse_datetime(raw)
    if parsed is None:
        return raw
    return parsed.date().isoformat()


def _coerce_datetime(raw: Any) -> Any:
    parsed = parse_datetime(raw)
    if parsed is None:
        return raw
    return parsed.isoformat()


def _coerce_checkbox(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in ("true", "1", "yes", "on", "checked")
    return bool(raw)


def _coerce_string(raw: Any) -> str:
    if raw is None:
        return ""
    return str(raw)


COERCERS: dict[FieldKind, Callable[[Any], Any]] = {
    FieldKind.TEXT: _coerce_text,
    FieldKind.NUMBER: _coerce_number,
    FieldKind.DATE: _coerce_date,
    FieldKind.DATETIME: _coerce_datetime,
    FieldKind.CHECKBOX: _coerce_checkbox,
    FieldKind.TEL: _coerce_string,
    FieldKind.EMAIL: _coerce_string,
    FieldKind.URL: _coerce_string,
}


def coerce_value(field_type: Optional[str], raw: Any) -> Any:
    """Coerce a stored answer according to its field type, falling back to the raw value."""
    kind = FieldKind.of(field_type)
    try:
        return COERCERS[kind](raw)
    except Exception as e:
        logger.debug(f"[LookupNormalize] Coercion to {kind.value} failed: {e}")
        return raw


def _parse_json_blob(raw: Any) -> Any:
    # Options/validation may have been stored as serialized JSON strings
    if isinstance(raw, str):
        try:
            return json.loads(raw)
        except ValueError:
            return raw
    return raw


@dataclass
class NormalizedField:
    """One answer of a normalized lookup record."""
    field_value: Any
    field_label: str
    field_type: str
    field_options: Any = None
    field_validation: Any = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "field_value": self.field_value,
            "field_label": self.field_label,
            "field_type": self.field_type,
            "field_options": self.field_options,
            "field_validation": self.field_validation,
        }


def normalize_answer(key: str, answer: Any) -> NormalizedField:
    """Normalize a single stored answer. Bare values are treated as untyped text answers."""
    if not isinstance(answer, dict):
        return NormalizedField(field_value=answer, field_label=key, field_type=FieldKind.TEXT.value)

    field_type = answer.get("type") or FieldKind.TEXT.value
    return NormalizedField(
        field_value=coerce_value(field_type, answer.get("value")),
        field_label=answer.get("label") or key,
        field_type=field_type,
        field_options=_parse_json_blob(answer.get("options")),
        field_validation=_parse_json_blob(answer.get("validation")) or {},
    )


def normalize_record_data(record_data: Any) -> dict[str, NormalizedField]:
    """Normalize every answer of a stored record, keyed by field key."""
    if not isinstance(record_data, dict):
        return {}
    return {key: normalize_answer(key, answer) for key, answer in record_data.items()}


def stringify(value: Any) -> str:
    """String form of a field value, as used for search matching."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(item) for item in value)
    if isinstance(value, dict):
        return json.dumps(value, default=str)
    return str(value)


def matches_search(fields: dict[str, NormalizedField], search: Optional[str]) -> bool:
    """True when no search is given or some field value contains it (case-insensitive)."""
    if not search:
        return True
    needle = search.lower()
    return any(needle in stringify(entry.field_value).lower() for entry in fields.values())
