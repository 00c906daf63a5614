from functools import lru_cache

from barbershop.core.config import settings


def _parse_hhmm(value: str) -> tuple[int, int]:
    parts = value.split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Expected HH:MM, got {value!r}")
    hour, minute = int(parts[0]), int(parts[1])
    if hour > 23 or minute > 59:
        raise ValueError(f"Expected HH:MM, got {value!r}")
    return hour, minute


@lru_cache(maxsize=16)
def generate_slots(start: str, end: str, interval_minutes: int) -> tuple[str, ...]:
    """Bookable start times in ``[start, end)``, every ``interval_minutes``.

    Values are compared as zero-padded ``HH:MM`` strings, so generation stops at
    the first value that sorts at or after ``end``.
    """
    if interval_minutes <= 0:
        raise ValueError("interval_minutes must be positive")
    _parse_hhmm(end)
    hour, minute = _parse_hhmm(start)
    slots: list[str] = []
    while True:
        current = f"{hour:02d}:{minute:02d}"
        if current >= end:
            break
        slots.append(current)
        minute += interval_minutes
        if minute >= 60:
            hour += minute // 60
            minute %= 60
    return tuple(slots)


def default_grid() -> tuple[str, ...]:
    """Slot grid for the configured business hours."""
    return generate_slots(
        settings.business_open,
        settings.business_close,
        settings.slot_interval_minutes,
    )
