"""Date input normalization.

Three textual formats are accepted, tried in this order:

1. anything containing ``-`` or ``T`` is read as an ISO 8601 date or
   date-time (``2025-08-26`` or ``2025-08-26T08:24:21.146Z``) and its date
   component is kept;
2. eight digits with no separators are read as ``DDMMYYYY``;
3. ``DD/MM/YYYY``.

Anything else yields ``None``. Callers treat ``None`` as an unknown date.
"""
import logging
import re
from datetime import date, datetime

logger = logging.getLogger(__name__)

_EIGHT_DIGITS = re.compile(r"^\d{8}$")


def _parse_iso(text: str) -> date | None:
    value = text.strip()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _build(day: str, month: str, year: str) -> date | None:
    try:
        return date(int(year), int(month), int(day))
    except ValueError:
        return None


def parse_date(text) -> date | None:
    """Parse ``text`` into a calendar date, or return None if it can't be read."""
    if isinstance(text, datetime):
        return text.date()
    if isinstance(text, date):
        return text
    if not text or not isinstance(text, str):
        return None

    if "-" in text or "T" in text:
        parsed = _parse_iso(text)
        if parsed is not None:
            return parsed

    if _EIGHT_DIGITS.match(text):
        return _build(text[0:2], text[2:4], text[4:8])

    parts = text.split("/")
    if len(parts) == 3 and all(p.strip().isdigit() for p in parts):
        return _build(parts[0], parts[1], parts[2])

    logger.debug("Unrecognized date input: %r", text)
    return None


def coerce_date(value, label: str = "date") -> date | None:
    """Like parse_date, but logs a warning when a non-empty value is rejected."""
    parsed = parse_date(value)
    if parsed is None and value:
        logger.warning("Could not parse %s: %r", label, value)
    return parsed
