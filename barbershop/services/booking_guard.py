import logging
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from barbershop.core.dates import is_sunday, parse_date
from barbershop.core.errors import ConflictError, ValidationError
from barbershop.services.availability_service import (
    AppointmentLike,
    BlockedDayLike,
    free_slots,
    occupied_times,
)
from barbershop.services.slot_service import default_grid

logger = logging.getLogger(__name__)


def check_slot_available(
    target: object,
    slot: str | None,
    appointments: Iterable[AppointmentLike],
    blocked_days: Iterable[BlockedDayLike],
    now: datetime,
    exclude_id: Any = None,
) -> None:
    """Raise unless ``slot`` on ``target`` can be booked right now.

    Runs on the client before a request goes out and again on the server
    against the database state.
    """
    if not target or not slot:
        raise ValidationError("Date and time are required")
    day = parse_date(target)
    if day is None:
        raise ValidationError("Invalid date")
    if is_sunday(day):
        raise ValidationError("Sundays are not available for appointments")
    if day < now.date():
        raise ValidationError("Cannot book an appointment in the past")
    if slot not in default_grid():
        raise ValidationError(f"{slot} is not a bookable time")
    appointments = list(appointments)
    if slot in occupied_times(day, appointments, exclude_id):
        logger.warning("Slot %s %s already taken", day.isoformat(), slot)
        raise ConflictError()
    if slot not in free_slots(day, appointments, blocked_days, now, exclude_id=exclude_id):
        raise ValidationError("This time is not available. Please choose another time.")
