"""Shared date helpers: UTC clock and free-form date parsing."""

from __future__ import annotations

import re
from datetime import UTC, date, datetime, timedelta

from fxrates.errors import ParseError

_KEYWORD_OFFSETS = {
    "today": 0,
    "now": 0,
    "yesterday": -1,
    "tomorrow": 1,
}

_UNIT_DAYS = {
    "day": 1,
    "days": 1,
    "week": 7,
    "weeks": 7,
}

_RELATIVE_RE = re.compile(r"^(?P<sign>[+-])?\s*(?P<count>\d+)\s*(?P<unit>days?|weeks?)(?P<ago>\s+ago)?$")

_FORMATS = (
    "%Y-%m-%d",
    "%Y/%m/%d",
    "%Y.%m.%d",
    "%Y%m%d",
    "%d.%m.%Y",
    "%m/%d/%Y",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
)


def utc_now() -> datetime:
    """Return the current UTC datetime."""

    return datetime.now(UTC)


def utc_today() -> date:
    """Return the current UTC calendar date."""

    return utc_now().date()


def date_from_timestamp(value: int | float) -> date:
    """Convert a unix timestamp into its UTC calendar date."""

    try:
        return datetime.fromtimestamp(value, tz=UTC).date()
    except (OverflowError, OSError, ValueError) as exc:
        raise ParseError(f"Timestamp {value!r} is out of range") from exc


def parse_date_expression(value: str, *, today: date | None = None) -> date:
    """Parse a free-form date expression.

    Understands ``today``/``yesterday``/``tomorrow``/``now``, relative offsets
    such as ``-3 days``, ``+1 week`` or ``2 days ago``, ISO date-times and a
    handful of common calendar formats.

    Raises:
        ParseError: If the expression matches none of the supported forms.
    """

    text = " ".join(value.strip().split())
    if not text:
        raise ParseError("Date expression cannot be empty")

    reference = today or utc_today()
    lowered = text.lower()

    if lowered in _KEYWORD_OFFSETS:
        return reference + timedelta(days=_KEYWORD_OFFSETS[lowered])

    match = _RELATIVE_RE.match(lowered)
    if match:
        days = int(match.group("count")) * _UNIT_DAYS[match.group("unit")]
        negative = match.group("sign") == "-" or match.group("ago") is not None
        return reference - timedelta(days=days) if negative else reference + timedelta(days=days)

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in _FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    raise ParseError(f"Unable to parse date expression '{value}'")
