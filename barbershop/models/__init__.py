from barbershop.models.appointment import Appointment, AppointmentCreate, AppointmentEdit
from barbershop.models.blocked_day import BlockedDay

__all__ = [
    "Appointment",
    "AppointmentCreate",
    "AppointmentEdit",
    "BlockedDay",
]
