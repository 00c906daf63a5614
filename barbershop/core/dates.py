"""Calendar-date normalization.

Appointments are persisted as instants (``2026-01-08T00:00:00.000Z``) but they
are date-only values. Everything that compares, sorts or looks up by date goes
through :func:`normalize_date` so that the UTC date fields are authoritative
and a viewer west of UTC never sees the previous day.
"""
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from barbershop.core.config import settings


def parse_date(value: object) -> date | None:
    """Return the calendar day encoded in ``value`` or None when unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    if not text:
        return None
    day_part = text.split("T", 1)[0].split(" ", 1)[0]
    if len(day_part.split("-")) != 3:
        return None
    if day_part == text:
        try:
            return date.fromisoformat(text)
        except ValueError:
            return None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    return parse_date(parsed)


def normalize_date(value: object) -> str | None:
    """Canonical ``YYYY-MM-DD`` for ``value``; None means "leave it out"."""
    parsed = parse_date(value)
    return parsed.isoformat() if parsed else None


def compare_dates(a: object, b: object) -> int:
    """Sort comparator; unparseable values go last."""
    da = parse_date(a)
    db = parse_date(b)
    if da is None and db is None:
        return 0
    if da is None:
        return 1
    if db is None:
        return -1
    return (da > db) - (da < db)


def to_wire_instant(d: date) -> str:
    """Midnight-UTC instant used when a date travels over the API."""
    return f"{d.isoformat()}T00:00:00.000Z"


def is_sunday(d: date) -> bool:
    return d.weekday() == 6


def shop_now() -> datetime:
    """Naive wall-clock time in the shop's timezone."""
    return datetime.now(ZoneInfo(settings.shop_timezone)).replace(tzinfo=None)
