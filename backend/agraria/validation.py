from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable

from agraria.time_utils import parse_iso_date


REQUIRED_MESSAGE = "This field is required"

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

CENT = Decimal("0.01")


class ValidationError(ValueError):
    """
    400-level input problem.

    `fields` maps a form field name to the message shown next to it; a
    form-wide problem uses the "_form" key.
    """

    def __init__(self, fields: dict[str, str] | None = None, message: str = "Validation failed"):
        super().__init__(message)
        self.fields = dict(fields or {})

    def to_dict(self) -> dict:
        return {"error": str(self), "fields": self.fields}


@dataclass
class FieldErrors:
    """Collects field errors while a form is parsed; the first message per field wins."""
    errors: dict[str, str] = field(default_factory=dict)

    def add(self, name: str, message: str) -> None:
        self.errors.setdefault(name, message)

    def has(self, name: str) -> bool:
        return name in self.errors

    def __bool__(self) -> bool:
        return bool(self.errors)

    def raise_if_any(self) -> None:
        if self.errors:
            raise ValidationError(self.errors)


def clean_str(payload: dict, key: str) -> str:
    value = payload.get(key)
    if value is None:
        return ""
    return str(value).strip()


def require_fields(payload: dict, fields: Iterable[str], errors: FieldErrors) -> None:
    for name in fields:
        if clean_str(payload, name) == "":
            errors.add(name, REQUIRED_MESSAGE)


def ensure_payload(payload: Any) -> dict:
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError({"_form": "Invalid JSON payload"})
    return payload


def parse_int(payload: dict, key: str, errors: FieldErrors) -> int | None:
    """
    Strict integer parsing: ints or plain digit strings only.
    Returns None (and records an error) when the value is unusable.
    """
    raw = payload.get(key)
    if raw is None or (isinstance(raw, str) and raw.strip() == ""):
        return None
    if isinstance(raw, bool):
        errors.add(key, "Must be a whole number")
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        if raw.is_integer():
            return int(raw)
        errors.add(key, "Must be a whole number")
        return None
    s = str(raw).strip()
    if not re.fullmatch(r"-?\d+", s):
        errors.add(key, "Must be a whole number")
        return None
    return int(s)


def parse_bool(payload: dict, key: str, errors: FieldErrors, default: bool) -> bool:
    """
    Strict flag parsing: JSON true/false only; a missing key gives `default`.

    WHY: bool("false") is True, so a form sending the text "false" would
    silently keep an account enabled.
    """
    raw = payload.get(key)
    if raw is None:
        return default
    if isinstance(raw, bool):
        return raw
    errors.add(key, "Must be true or false")
    return default


def parse_money(payload: dict, key: str, errors: FieldErrors) -> Decimal | None:
    raw = payload.get(key)
    if raw is None or (isinstance(raw, str) and raw.strip() == "") or isinstance(raw, bool):
        return None
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        errors.add(key, "Must be a number")
        return None
    if not value.is_finite():
        errors.add(key, "Must be a number")
        return None
    return value


def parse_past_date(payload: dict, key: str, errors: FieldErrors, today: date) -> date | None:
    """Parse a YYYY-MM-DD field that may not be later than today."""
    raw = clean_str(payload, key)
    if not raw:
        return None
    try:
        value = parse_iso_date(raw)
    except ValueError:
        errors.add(key, "Invalid date")
        return None
    if value is None:
        errors.add(key, "Invalid date")
        return None
    if value > today:
        errors.add(key, "The date cannot be in the future")
    return value


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value or ""))


def to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def money(value: Decimal) -> float:
    """Round to cents for storage; collections keep plain JSON numbers."""
    return float(to_cents(value))


TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def parse_time(payload: dict, key: str, errors: FieldErrors) -> str | None:
    """HH:MM, 24-hour clock."""
    raw = clean_str(payload, key)
    if not raw:
        return None
    if not TIME_RE.match(raw):
        errors.add(key, "Invalid time (HH:MM)")
        return None
    return raw


class NotFoundError(LookupError):
    """Requested record id does not exist in its collection (404)."""

    def __init__(self, message: str = "Not found"):
        super().__init__(message)
        self.message = message
