import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from barbershop.core.dates import is_sunday
from barbershop.core.errors import ConflictError, NotFoundError, ValidationError
from barbershop.models.blocked_day import BlockedDay
from barbershop.services.slot_service import default_grid

logger = logging.getLogger(__name__)


async def list_blocked_days(session: AsyncSession) -> list[BlockedDay]:
    result = await session.execute(select(BlockedDay).order_by(BlockedDay.date))
    return list(result.scalars().all())


async def get_blocked_day(session: AsyncSession, d: date) -> BlockedDay | None:
    result = await session.execute(select(BlockedDay).where(BlockedDay.date == d))
    return result.scalar_one_or_none()


def _in_grid_order(times: set[str]) -> list[str]:
    return [t for t in default_grid() if t in times]


async def block_times(session: AsyncSession, d: date, times: list[str]) -> BlockedDay:
    """Create the day's block or merge ``times`` into it."""
    if is_sunday(d):
        raise ValidationError("Sundays are already closed")
    grid = default_grid()
    unknown = sorted(set(times) - set(grid))
    if unknown:
        raise ValidationError(f"Not bookable times: {', '.join(unknown)}")
    blocked = await get_blocked_day(session, d)
    if blocked is None:
        blocked = BlockedDay(date=d, blocked_times=_in_grid_order(set(times)))
    else:
        # Assign a new list so the JSON column is marked dirty
        blocked.blocked_times = _in_grid_order(set(blocked.blocked_times) | set(times))
    session.add(blocked)
    try:
        await session.flush()
    except IntegrityError as e:
        # Another request created the same day's block first
        await session.rollback()
        logger.warning("Concurrent block of %s rejected: %s", d, e.orig)
        raise ConflictError(f"{d.isoformat()} was just updated by someone else. Please try again.") from e
    await session.refresh(blocked)
    logger.info("Blocked %s: %d of %d slots", d, len(blocked.blocked_times), len(grid))
    return blocked


async def unblock(session: AsyncSession, d: date, time: str | None = None) -> BlockedDay | None:
    """Remove one time, or the whole day's block when ``time`` is None.

    Returns the remaining record, or None once nothing is blocked that day.
    """
    blocked = await get_blocked_day(session, d)
    if blocked is None:
        raise NotFoundError(f"No blocked times on {d.isoformat()}")
    if time is not None:
        if time not in blocked.blocked_times:
            raise NotFoundError(f"{time} is not blocked on {d.isoformat()}")
        remaining = [t for t in blocked.blocked_times if t != time]
        if remaining:
            blocked.blocked_times = remaining
            session.add(blocked)
            await session.flush()
            logger.info("Unblocked %s %s", d, time)
            return blocked
    await session.delete(blocked)
    await session.flush()
    logger.info("Unblocked all of %s", d)
    return None
