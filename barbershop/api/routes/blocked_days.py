from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from barbershop.api.deps import get_session, require_admin
from barbershop.api.schemas.appointment import MessageResponse
from barbershop.api.schemas.blocked_day import BlockedDayPublic, BlockRequest, UnblockRequest
from barbershop.models.blocked_day import BlockedDay
from barbershop.services.blocked_day_service import block_times, list_blocked_days, unblock

router = APIRouter(prefix="/dias-no-disponibles", tags=["availability"])


def _to_public(b: BlockedDay) -> BlockedDayPublic:
    return BlockedDayPublic(id=b.id, date=b.date.isoformat(), blocked_times=list(b.blocked_times))


@router.get("", response_model=list[BlockedDayPublic])
async def list_all(session: AsyncSession = Depends(get_session)) -> list[BlockedDayPublic]:
    return [_to_public(b) for b in await list_blocked_days(session)]


@router.post(
    "",
    response_model=BlockedDayPublic,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def block(body: BlockRequest, session: AsyncSession = Depends(get_session)) -> BlockedDayPublic:
    blocked = await block_times(session, body.date, body.blocked_times)
    return _to_public(blocked)


@router.delete("", response_model=MessageResponse, dependencies=[Depends(require_admin)])
async def remove_block(body: UnblockRequest, session: AsyncSession = Depends(get_session)) -> MessageResponse:
    remaining = await unblock(session, body.date, body.time)
    if remaining is None:
        return MessageResponse(message=f"{body.date.isoformat()} is fully available")
    return MessageResponse(message=f"{body.time} unblocked on {body.date.isoformat()}")
