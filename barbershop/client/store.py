"""Client-side appointment store.

Holds the last fetched appointments and blocked days as one frozen
:class:`StoreSnapshot`. Reads (free slots, day status) are pure functions of
the snapshot. Every successful mutation is followed by a full refetch; the
cache is never patched in place. Fetches are not cancelled, so whichever
response arrives last wins, and callers must tolerate a stale snapshot
between a mutation and its refresh.
"""
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from functools import cmp_to_key
from typing import Protocol

from barbershop.client.models import AppointmentRecord, Barber, BarberRef, BlockedDayRecord
from barbershop.core.dates import compare_dates, is_sunday, normalize_date, parse_date, shop_now
from barbershop.core.errors import ConflictError, ValidationError
from barbershop.services import availability_service
from barbershop.services.availability_service import DayStatus
from barbershop.services.booking_guard import check_slot_available
from barbershop.services.policy_service import ensure_can_modify
from barbershop.services.slot_service import default_grid

logger = logging.getLogger(__name__)


class BookingRepository(Protocol):
    async def list_appointments(self) -> list[AppointmentRecord]: ...

    async def list_appointments_for_email(self, email: str) -> list[AppointmentRecord]: ...

    async def create_appointment(
        self, client_name: str, client_email: str, day: date | str, time: str, service: str
    ) -> AppointmentRecord: ...

    async def replace_appointment(self, appointment: AppointmentRecord) -> AppointmentRecord: ...

    async def edit_appointment(self, appointment_id: str, day: date | str, time: str, service: str) -> AppointmentRecord: ...

    async def cancel_appointment(self, appointment_id: str) -> None: ...

    async def delete_appointment(self, appointment_id: str) -> None: ...

    async def list_blocked_days(self) -> list[BlockedDayRecord]: ...

    async def block(self, day: date | str, times: list[str]) -> BlockedDayRecord: ...

    async def unblock(self, day: date | str, time: str | None = None) -> None: ...


@dataclass(frozen=True)
class StoreSnapshot:
    appointments: tuple[AppointmentRecord, ...] = ()
    blocked_days: tuple[BlockedDayRecord, ...] = ()
    fetched_at: datetime | None = field(default=None, compare=False)


@dataclass(frozen=True)
class StoreSummary:
    total_appointments: int
    total_clients: int
    appointments_per_barber: dict[str, int] = field(default_factory=dict)

    @property
    def total_barbers(self) -> int:
        return len(self.appointments_per_barber)


# Placeholder barber names older records carry
_UNKNOWN_BARBERS = frozenset({"desconocido", "unknown"})


def _barber_name(appointment: AppointmentRecord) -> str | None:
    barber = appointment.barber
    if isinstance(barber, Barber):
        return barber.name
    if isinstance(barber, BarberRef):
        return barber.id
    return None


def _by_date_then_time(a: AppointmentRecord, b: AppointmentRecord) -> int:
    return compare_dates(a.date, b.date) or (a.time > b.time) - (a.time < b.time)


class AppointmentStore:
    def __init__(self, repository: BookingRepository) -> None:
        self._repository = repository
        self._snapshot = StoreSnapshot()

    @property
    def snapshot(self) -> StoreSnapshot:
        return self._snapshot

    @property
    def appointments(self) -> tuple[AppointmentRecord, ...]:
        return self._snapshot.appointments

    @property
    def blocked_days(self) -> tuple[BlockedDayRecord, ...]:
        return self._snapshot.blocked_days

    # --- fetching ---

    async def load(self) -> StoreSnapshot:
        await self.refresh()
        await self.refresh_blocked_days()
        return self._snapshot

    async def refresh(self) -> tuple[AppointmentRecord, ...]:
        records = await self._repository.list_appointments()
        self._snapshot = StoreSnapshot(
            appointments=tuple(records),
            blocked_days=self._snapshot.blocked_days,
            fetched_at=shop_now(),
        )
        logger.debug("Fetched %d appointments", len(records))
        return self._snapshot.appointments

    async def refresh_blocked_days(self) -> tuple[BlockedDayRecord, ...]:
        records = await self._repository.list_blocked_days()
        self._snapshot = StoreSnapshot(
            appointments=self._snapshot.appointments,
            blocked_days=tuple(records),
            fetched_at=shop_now(),
        )
        logger.debug("Fetched %d blocked days", len(records))
        return self._snapshot.blocked_days

    # --- reads ---

    def free_slots(self, day: date | str, now: datetime | None = None, exclude_id: str | None = None) -> list[str]:
        snapshot = self._snapshot
        return availability_service.free_slots(
            day,
            snapshot.appointments,
            snapshot.blocked_days,
            now or shop_now(),
            exclude_id=exclude_id,
        )

    def day_status(self, day: date | str) -> DayStatus:
        return availability_service.classify_day(day, self._snapshot.blocked_days)

    def is_date_selectable(self, day: date | str, now: datetime | None = None) -> bool:
        today = (now or shop_now()).date()
        return availability_service.is_date_selectable(day, self._snapshot.blocked_days, today)

    def occupied_times(self, day: date | str) -> frozenset[str]:
        return availability_service.occupied_times(day, self._snapshot.appointments)

    def sorted_by_date(self) -> list[AppointmentRecord]:
        """Appointments by date then time; unparseable dates last."""
        return sorted(self._snapshot.appointments, key=cmp_to_key(_by_date_then_time))

    # --- admin views ---

    def filter(
        self,
        day: date | str | None = None,
        time: str | None = None,
        service: str | None = None,
    ) -> list[AppointmentRecord]:
        """Appointments matching every given criterion, by date then time."""
        wanted_day = normalize_date(day) if day else None
        if day and wanted_day is None:
            return []
        return [
            a
            for a in self.sorted_by_date()
            if (wanted_day is None or normalize_date(a.date) == wanted_day)
            and (not time or a.time == time)
            and (not service or a.service == service)
        ]

    def clients(self) -> list[AppointmentRecord]:
        """One record per client email, in first-seen order; the latest record wins."""
        by_email: dict[str, AppointmentRecord] = {}
        for a in self._snapshot.appointments:
            by_email[a.client_email.lower()] = a
        return list(by_email.values())

    def services(self) -> list[str]:
        return sorted({a.service for a in self._snapshot.appointments if a.service.strip()})

    def times(self) -> list[str]:
        return sorted({a.time for a in self._snapshot.appointments if a.time})

    def summary(self) -> StoreSummary:
        per_barber: dict[str, int] = {}
        for a in self._snapshot.appointments:
            name = _barber_name(a)
            if name and name.lower() not in _UNKNOWN_BARBERS:
                per_barber[name] = per_barber.get(name, 0) + 1
        return StoreSummary(
            total_appointments=len(self._snapshot.appointments),
            total_clients=len({a.client_name for a in self._snapshot.appointments if a.client_name}),
            appointments_per_barber=per_barber,
        )

    # --- client mutations ---

    async def book(
        self,
        client_name: str,
        client_email: str,
        day: date | str,
        time: str,
        service: str,
        now: datetime | None = None,
    ) -> AppointmentRecord:
        if not client_name or not client_email or not service:
            raise ValidationError("Name, email and service are required")
        snapshot = self._snapshot
        check_slot_available(day, time, snapshot.appointments, snapshot.blocked_days, now or shop_now())
        try:
            created = await self._repository.create_appointment(client_name, client_email, day, time, service)
        except ConflictError:
            logger.warning("Slot %s %s was taken before our booking arrived", day, time)
            raise
        await self.refresh()
        return created

    async def edit(
        self,
        appointment: AppointmentRecord,
        day: date | str,
        time: str,
        service: str,
        now: datetime | None = None,
    ) -> AppointmentRecord:
        now = now or shop_now()
        ensure_can_modify(appointment, now)
        if not service:
            raise ValidationError("Service is required")
        snapshot = self._snapshot
        if (parse_date(day), time) != (parse_date(appointment.date), appointment.time):
            check_slot_available(
                day, time, snapshot.appointments, snapshot.blocked_days, now, exclude_id=appointment.id
            )
        updated = await self._repository.edit_appointment(appointment.id, day, time, service)
        await self.refresh()
        return updated

    async def cancel(self, appointment: AppointmentRecord, now: datetime | None = None) -> None:
        ensure_can_modify(appointment, now or shop_now())
        await self._repository.cancel_appointment(appointment.id)
        await self.refresh()

    async def appointments_for(self, email: str) -> list[AppointmentRecord]:
        """One client's appointments, fetched directly and not cached."""
        if not email:
            raise ValidationError("Please enter your email")
        records = await self._repository.list_appointments_for_email(email)
        return sorted(records, key=cmp_to_key(_by_date_then_time))

    # --- admin mutations ---

    async def replace(self, appointment: AppointmentRecord, now: datetime | None = None) -> AppointmentRecord:
        """Admin full replace. Skips the edit window but not the slot check."""
        if not all((appointment.client_name, appointment.client_email, appointment.date, appointment.time)):
            raise ValidationError("All fields are required")
        snapshot = self._snapshot
        current = next((a for a in snapshot.appointments if a.id == appointment.id), None)
        moved = current is None or (parse_date(appointment.date), appointment.time) != (
            parse_date(current.date),
            current.time,
        )
        if moved:
            check_slot_available(
                appointment.date,
                appointment.time,
                snapshot.appointments,
                snapshot.blocked_days,
                now or shop_now(),
                exclude_id=appointment.id,
            )
        updated = await self._repository.replace_appointment(appointment)
        await self.refresh()
        return updated

    async def remove(self, appointment_id: str) -> None:
        await self._repository.delete_appointment(appointment_id)
        await self.refresh()

    async def block_day(self, day: date | str) -> BlockedDayRecord:
        return await self._block(day, list(default_grid()))

    async def block_time(self, day: date | str, time: str) -> BlockedDayRecord:
        return await self._block(day, [time])

    async def _block(self, day: date | str, times: list[str]) -> BlockedDayRecord:
        parsed = parse_date(day)
        if parsed is None:
            raise ValidationError("Invalid date")
        if is_sunday(parsed):
            raise ValidationError("Sundays cannot be blocked")
        blocked = await self._repository.block(parsed, times)
        await self.refresh_blocked_days()
        return blocked

    async def unblock(self, day: date | str, time: str | None = None) -> None:
        parsed = parse_date(day)
        if parsed is None:
            raise ValidationError("Invalid date")
        await self._repository.unblock(parsed, time)
        await self.refresh_blocked_days()
