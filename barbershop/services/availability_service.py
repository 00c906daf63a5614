"""Free-slot computation and calendar-day classification.

Works on any appointment objects exposing ``id``, ``date`` and ``time`` and any
blocked-day objects exposing ``date`` and ``blocked_times``: the SQLModel rows
on the server and the frozen snapshot records in the client store both fit.
"""
from collections.abc import Iterable, Sequence
from datetime import date, datetime
from enum import Enum
from typing import Any, Protocol

from barbershop.core.dates import is_sunday, parse_date
from barbershop.services.slot_service import default_grid


class AppointmentLike(Protocol):
    id: Any
    date: Any
    time: str


class BlockedDayLike(Protocol):
    date: Any
    blocked_times: Sequence[str]


class DayStatus(str, Enum):
    OPEN = "open"
    PARTIALLY_BLOCKED = "partially_blocked"
    FULLY_BLOCKED = "fully_blocked"
    DISABLED = "disabled"  # Sundays


def find_blocked_day(target: object, blocked_days: Iterable[BlockedDayLike]) -> BlockedDayLike | None:
    # Both sides normalized here; stored values may carry a time component.
    day = parse_date(target)
    if day is None:
        return None
    for blocked in blocked_days:
        if parse_date(blocked.date) == day:
            return blocked
    return None


def blocked_times_for(target: object, blocked_days: Iterable[BlockedDayLike]) -> frozenset[str]:
    blocked = find_blocked_day(target, blocked_days)
    if blocked is None:
        return frozenset()
    return frozenset(blocked.blocked_times or ())


def occupied_times(
    target: object,
    appointments: Iterable[AppointmentLike],
    exclude_id: Any = None,
) -> frozenset[str]:
    """Times already booked on ``target``, ignoring ``exclude_id`` (an appointment being edited)."""
    day = parse_date(target)
    if day is None:
        return frozenset()
    return frozenset(
        a.time
        for a in appointments
        if (exclude_id is None or a.id != exclude_id) and parse_date(a.date) == day
    )


def free_slots(
    target: object,
    appointments: Iterable[AppointmentLike],
    blocked_days: Iterable[BlockedDayLike],
    now: datetime,
    exclude_id: Any = None,
    grid: Sequence[str] | None = None,
) -> list[str]:
    """Bookable times for ``target`` as seen at ``now``, in grid order."""
    day = parse_date(target)
    if day is None or is_sunday(day):
        return []
    today = now.date()
    if day < today:
        return []
    grid = default_grid() if grid is None else grid
    unavailable = blocked_times_for(day, blocked_days) | occupied_times(day, appointments, exclude_id)
    elapsed = now.strftime("%H:%M") if day == today else None
    return [
        slot
        for slot in grid
        if slot not in unavailable and (elapsed is None or slot > elapsed)
    ]


def classify_day(
    target: object,
    blocked_days: Iterable[BlockedDayLike],
    grid: Sequence[str] | None = None,
) -> DayStatus:
    day = parse_date(target)
    if day is None or is_sunday(day):
        return DayStatus.DISABLED
    grid = default_grid() if grid is None else grid
    blocked = blocked_times_for(day, blocked_days)
    if blocked and len(blocked) == len(grid):
        return DayStatus.FULLY_BLOCKED
    if blocked:
        return DayStatus.PARTIALLY_BLOCKED
    return DayStatus.OPEN


def is_date_selectable(
    target: object,
    blocked_days: Iterable[BlockedDayLike],
    today: date,
    grid: Sequence[str] | None = None,
) -> bool:
    """Whether the date picker should offer ``target`` at all."""
    day = parse_date(target)
    if day is None or day < today:
        return False
    status = classify_day(day, blocked_days, grid)
    return status not in (DayStatus.DISABLED, DayStatus.FULLY_BLOCKED)
