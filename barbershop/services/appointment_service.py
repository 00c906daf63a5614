import logging
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from barbershop.core.errors import ConflictError, NotFoundError, ValidationError
from barbershop.models.appointment import Appointment, AppointmentCreate, AppointmentEdit
from barbershop.services.blocked_day_service import get_blocked_day
from barbershop.services.booking_guard import check_slot_available
from barbershop.services.policy_service import ensure_can_modify

logger = logging.getLogger(__name__)


async def list_appointments(session: AsyncSession) -> list[Appointment]:
    result = await session.execute(select(Appointment).order_by(Appointment.date, Appointment.time))
    return list(result.scalars().all())


async def list_appointments_for_email(session: AsyncSession, email: str) -> list[Appointment]:
    result = await session.execute(
        select(Appointment)
        .where(Appointment.client_email == email.strip().lower())
        .order_by(Appointment.date, Appointment.time)
    )
    return list(result.scalars().all())


async def list_appointments_on(session: AsyncSession, d: date) -> list[Appointment]:
    result = await session.execute(select(Appointment).where(Appointment.date == d))
    return list(result.scalars().all())


async def get_appointment(session: AsyncSession, appointment_id: str) -> Appointment:
    appointment = await session.get(Appointment, appointment_id)
    if appointment is None:
        raise NotFoundError()
    return appointment


async def _check_slot(
    session: AsyncSession, d: date, slot: str, now: datetime, exclude_id: str | None = None
) -> None:
    same_day = await list_appointments_on(session, d)
    blocked = await get_blocked_day(session, d)
    check_slot_available(
        d,
        slot,
        same_day,
        [blocked] if blocked else [],
        now,
        exclude_id=exclude_id,
    )


async def _flush_or_conflict(session: AsyncSession, appointment: Appointment) -> None:
    """Flush pending changes; the (date, time) unique constraint settles races."""
    try:
        await session.flush()
    except IntegrityError as e:
        await session.rollback()
        logger.warning("Unique constraint rejected %s %s: %s", appointment.date, appointment.time, e.orig)
        raise ConflictError() from e
    await session.refresh(appointment)


def _require_fields(client_name: str, client_email: str, service: str) -> None:
    if not client_name.strip() or not client_email.strip():
        raise ValidationError("Client name and email are required")
    if not service.strip():
        raise ValidationError("Service is required")


async def create_appointment(session: AsyncSession, data: AppointmentCreate, now: datetime) -> Appointment:
    _require_fields(data.client_name, data.client_email, data.service)
    await _check_slot(session, data.date, data.time, now)
    appointment = Appointment(
        client_name=data.client_name.strip(),
        client_email=data.client_email.strip().lower(),
        date=data.date,
        time=data.time,
        service=data.service.strip(),
    )
    session.add(appointment)
    await _flush_or_conflict(session, appointment)
    logger.info("Booked %s %s for %s", appointment.date, appointment.time, appointment.client_email)
    return appointment


async def replace_appointment(
    session: AsyncSession, appointment_id: str, data: AppointmentCreate, now: datetime
) -> Appointment:
    """Admin full-record replace. Not subject to the edit window."""
    appointment = await get_appointment(session, appointment_id)
    _require_fields(data.client_name, data.client_email, data.service)
    if (data.date, data.time) != (appointment.date, appointment.time):
        await _check_slot(session, data.date, data.time, now, exclude_id=appointment_id)
    appointment.client_name = data.client_name.strip()
    appointment.client_email = data.client_email.strip().lower()
    appointment.date = data.date
    appointment.time = data.time
    appointment.service = data.service.strip()
    session.add(appointment)
    await _flush_or_conflict(session, appointment)
    logger.info("Replaced appointment %s", appointment_id)
    return appointment


async def edit_appointment(
    session: AsyncSession, appointment_id: str, data: AppointmentEdit, now: datetime
) -> Appointment:
    """Client edit of date/time/service, allowed only inside the edit window."""
    appointment = await get_appointment(session, appointment_id)
    ensure_can_modify(appointment, now)
    if not data.service.strip():
        raise ValidationError("Service is required")
    if (data.date, data.time) != (appointment.date, appointment.time):
        await _check_slot(session, data.date, data.time, now, exclude_id=appointment_id)
    appointment.date = data.date
    appointment.time = data.time
    appointment.service = data.service.strip()
    session.add(appointment)
    await _flush_or_conflict(session, appointment)
    logger.info("Edited appointment %s to %s %s", appointment_id, appointment.date, appointment.time)
    return appointment


async def cancel_appointment(session: AsyncSession, appointment_id: str, now: datetime) -> Appointment:
    appointment = await get_appointment(session, appointment_id)
    ensure_can_modify(appointment, now)
    await session.delete(appointment)
    await session.flush()
    logger.info("Cancelled appointment %s", appointment_id)
    return appointment


async def delete_appointment(session: AsyncSession, appointment_id: str) -> Appointment:
    """Admin removal, no lead-time restriction."""
    appointment = await get_appointment(session, appointment_id)
    await session.delete(appointment)
    await session.flush()
    logger.info("Admin removed appointment %s", appointment_id)
    return appointment
