"""Edit/cancel window.

An appointment can be changed or cancelled only while its start is more than
``min_modify_lead_hours`` away. Cancel and edit share this one rule.
"""
import math
from dataclasses import dataclass
from datetime import datetime, time
from enum import Enum

from barbershop.core.config import settings
from barbershop.core.dates import parse_date
from barbershop.core.errors import PolicyViolation


class AppointmentState(str, Enum):
    EDITABLE = "editable"
    LOCKED = "locked"
    HISTORICAL = "historical"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ModifyDecision:
    allowed: bool
    reason: str | None = None


def scheduled_start(appointment) -> datetime | None:
    """Local start of ``appointment`` (normalized date + HH:MM, seconds zero)."""
    day = parse_date(appointment.date)
    if day is None:
        return None
    try:
        hour, minute = (int(p) for p in appointment.time.split(":"))
        return datetime.combine(day, time(hour, minute))
    except (AttributeError, ValueError):
        return None


def hours_until_start(appointment, now: datetime) -> float | None:
    start = scheduled_start(appointment)
    if start is None:
        return None
    return (start - now).total_seconds() / 3600


def _round_half_up(value: float) -> float:
    return math.floor(value * 10 + 0.5) / 10


def can_modify(appointment, now: datetime, lead_hours: float | None = None) -> ModifyDecision:
    lead = settings.min_modify_lead_hours if lead_hours is None else lead_hours
    hours = hours_until_start(appointment, now)
    if hours is None:
        return ModifyDecision(False, "Invalid appointment date")
    if hours > lead:
        return ModifyDecision(True)
    remaining = max(0.0, _round_half_up(hours))
    return ModifyDecision(
        False,
        f"Appointments can only be changed more than {lead:g} hours in advance. "
        f"{remaining:g} hours remaining.",
    )


def ensure_can_modify(appointment, now: datetime, lead_hours: float | None = None) -> None:
    decision = can_modify(appointment, now, lead_hours)
    if not decision.allowed:
        raise PolicyViolation(decision.reason)


def appointment_state(
    appointment,
    now: datetime,
    cancelled: bool = False,
    lead_hours: float | None = None,
) -> AppointmentState:
    if cancelled:
        return AppointmentState.CANCELLED
    hours = hours_until_start(appointment, now)
    if hours is None or hours <= 0:
        return AppointmentState.HISTORICAL
    if can_modify(appointment, now, lead_hours).allowed:
        return AppointmentState.EDITABLE
    return AppointmentState.LOCKED
