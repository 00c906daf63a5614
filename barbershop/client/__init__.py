from barbershop.client.api import BookingApi
from barbershop.client.models import AppointmentRecord, Barber, BarberRef, BlockedDayRecord
from barbershop.client.session import LocalSession
from barbershop.client.store import AppointmentStore, BookingRepository, StoreSnapshot, StoreSummary

__all__ = [
    "AppointmentRecord",
    "AppointmentStore",
    "Barber",
    "BarberRef",
    "BlockedDayRecord",
    "BookingApi",
    "BookingRepository",
    "LocalSession",
    "StoreSnapshot",
    "StoreSummary",
]
