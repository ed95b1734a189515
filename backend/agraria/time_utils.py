# Overview: UTC clock and the date/timestamp string formats stored in the collections.

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Server-side 'now' in UTC (naive, canonical)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today() -> date:
    """Calendar day used for 'not in the future' checks and export filenames."""
    return utcnow().date()


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a stored timestamp into a UTC-naive datetime.

    Accepts what the browser application wrote ("2024-01-15T10:00:00.000Z")
    as well as offsets and naive values (read as UTC). Blank -> None;
    anything else unparseable raises ValueError.
    """
    text = str(value).strip() if value is not None else ""
    if not text:
        return None
    if text[-1] in "zZ":
        text = text[:-1] + "+00:00"

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """Parse "YYYY-MM-DD" (or a full timestamp) into a date."""
    text = str(value).strip() if value is not None else ""
    if not text:
        return None
    if len(text) == 10:
        return date.fromisoformat(text)
    parsed = parse_iso_datetime(text)
    return parsed.date() if parsed else None


def to_utc_z(moment: Optional[datetime]) -> Optional[str]:
    """Second-precision ISO-8601 with a trailing 'Z'; naive values are UTC."""
    if moment is None:
        return None
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment.replace(microsecond=0).isoformat() + "Z"
