from datetime import date, datetime

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from barbershop.api.deps import get_now, get_session
from barbershop.api.schemas.blocked_day import AvailabilityResponse
from barbershop.services.appointment_service import list_appointments_on
from barbershop.services.availability_service import classify_day, free_slots
from barbershop.services.blocked_day_service import get_blocked_day

router = APIRouter(prefix="/disponibilidad", tags=["availability"])


@router.get("", response_model=AvailabilityResponse)
async def available_slots(
    date_param: date = Query(..., alias="date"),
    session: AsyncSession = Depends(get_session),
    now: datetime = Depends(get_now),
) -> AvailabilityResponse:
    """Free slots for one date plus its calendar classification."""
    appointments = await list_appointments_on(session, date_param)
    blocked = await get_blocked_day(session, date_param)
    blocked_days = [blocked] if blocked else []
    return AvailabilityResponse(
        date=date_param.isoformat(),
        status=classify_day(date_param, blocked_days),
        slots=free_slots(date_param, appointments, blocked_days, now),
    )
