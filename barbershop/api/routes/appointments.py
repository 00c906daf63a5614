import logging
from datetime import datetime

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from barbershop.api.deps import get_now, get_session, require_admin
from barbershop.api.schemas.appointment import (
    AppointmentList,
    AppointmentPublic,
    BookAppointmentRequest,
    EditAppointmentRequest,
    MessageResponse,
)
from barbershop.core.dates import to_wire_instant
from barbershop.models.appointment import Appointment, AppointmentCreate, AppointmentEdit
from barbershop.services.appointment_service import (
    cancel_appointment,
    create_appointment,
    delete_appointment,
    edit_appointment,
    list_appointments,
    list_appointments_for_email,
    replace_appointment,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/turnos", tags=["appointments"])


def _to_public(a: Appointment) -> AppointmentPublic:
    return AppointmentPublic(
        id=a.id,
        client_name=a.client_name,
        client_email=a.client_email,
        date=to_wire_instant(a.date),
        time=a.time,
        service=a.service,
    )


def _to_create(body: BookAppointmentRequest) -> AppointmentCreate:
    return AppointmentCreate(
        client_name=body.client_name,
        client_email=str(body.client_email),
        date=body.date,
        time=body.time,
        service=body.service,
    )


@router.get("", response_model=AppointmentList)
async def list_all(session: AsyncSession = Depends(get_session)) -> AppointmentList:
    appointments = await list_appointments(session)
    return AppointmentList(data=[_to_public(a) for a in appointments])


@router.post("", response_model=AppointmentPublic, status_code=status.HTTP_201_CREATED)
async def book_appointment(
    body: BookAppointmentRequest,
    session: AsyncSession = Depends(get_session),
    now: datetime = Depends(get_now),
) -> AppointmentPublic:
    appointment = await create_appointment(session, _to_create(body), now)
    return _to_public(appointment)


@router.get("/email/{email}", response_model=AppointmentList)
async def list_for_email(email: str, session: AsyncSession = Depends(get_session)) -> AppointmentList:
    appointments = await list_appointments_for_email(session, email)
    return AppointmentList(data=[_to_public(a) for a in appointments])


@router.put("/editar/{appointment_id}", response_model=AppointmentPublic)
async def edit_my_appointment(
    appointment_id: str,
    body: EditAppointmentRequest,
    session: AsyncSession = Depends(get_session),
    now: datetime = Depends(get_now),
) -> AppointmentPublic:
    data = AppointmentEdit(date=body.date, time=body.time, service=body.service)
    appointment = await edit_appointment(session, appointment_id, data, now)
    return _to_public(appointment)


@router.delete("/cancelar/{appointment_id}", response_model=MessageResponse)
async def cancel_my_appointment(
    appointment_id: str,
    session: AsyncSession = Depends(get_session),
    now: datetime = Depends(get_now),
) -> MessageResponse:
    await cancel_appointment(session, appointment_id, now)
    return MessageResponse(message="Appointment cancelled")


@router.put("/{appointment_id}", response_model=AppointmentPublic, dependencies=[Depends(require_admin)])
async def replace(
    appointment_id: str,
    body: BookAppointmentRequest,
    session: AsyncSession = Depends(get_session),
    now: datetime = Depends(get_now),
) -> AppointmentPublic:
    appointment = await replace_appointment(session, appointment_id, _to_create(body), now)
    return _to_public(appointment)


@router.delete("/{appointment_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
async def remove(appointment_id: str, session: AsyncSession = Depends(get_session)) -> MessageResponse:
    await delete_appointment(session, appointment_id)
    return MessageResponse(message="Appointment removed")
