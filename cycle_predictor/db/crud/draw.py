"""CRUD operations for draw records."""

from datetime import date, timedelta

from sqlalchemy import select, func, desc
from sqlalchemy.ext.asyncio import AsyncSession

from cycle_predictor.db.crud._insert import insert_ignore
from cycle_predictor.db.models.draw import DrawRecord
from cycle_predictor.schemas.draw import DrawRecordSchema


async def get_latest(session: AsyncSession) -> DrawRecord | None:
    result = await session.execute(
        select(DrawRecord).order_by(desc(DrawRecord.draw_number)).limit(1)
    )
    return result.scalar_one_or_none()


async def get_by_draw_id(session: AsyncSession, draw_id: str) -> DrawRecord | None:
    result = await session.execute(
        select(DrawRecord).where(DrawRecord.draw_id == draw_id)
    )
    return result.scalar_one_or_none()


async def get_recent(session: AsyncSession, limit: int = 50) -> list[DrawRecord]:
    """Most recent draws, newest first."""
    result = await session.execute(
        select(DrawRecord).order_by(desc(DrawRecord.draw_number)).limit(limit)
    )
    return list(result.scalars().all())


async def count(session: AsyncSession) -> int:
    return (await session.execute(select(func.count(DrawRecord.id)))).scalar() or 0


async def append(session: AsyncSession, draw: DrawRecordSchema) -> bool:
    """Insert a draw unless its id is already stored. Existing rows are never touched."""
    return await insert_ignore(
        session,
        DrawRecord,
        {
            "draw_id": draw.draw_id,
            "draw_number": draw.draw_number,
            "numbers": list(draw.numbers),
            "draw_time": draw.draw_time,
        },
        index_elements=["draw_id"],
    )


async def bulk_append(session: AsyncSession, draws: list[DrawRecordSchema]) -> int:
    """Append draws oldest-first. Returns number of new rows."""
    if not draws:
        return 0
    inserted = 0
    for draw in sorted(draws, key=lambda d: d.draw_number):
        if await append(session, draw):
            inserted += 1
    return inserted


async def get_draws(
    session: AsyncSession,
    *,
    page: int = 1,
    page_size: int = 50,
    date_from: date | None = None,
    date_to: date | None = None,
) -> tuple[list[DrawRecord], int]:
    """One page of draws, newest first, plus the total matching the date filter.

    ``draw_time`` starts with an ISO date, so the range is a string comparison;
    ``date_to`` includes the whole day.
    """
    query = select(DrawRecord)
    count_query = select(func.count(DrawRecord.id))

    if date_from:
        query = query.where(DrawRecord.draw_time >= date_from.isoformat())
        count_query = count_query.where(DrawRecord.draw_time >= date_from.isoformat())
    if date_to:
        before = (date_to + timedelta(days=1)).isoformat()
        # Draws without a recorded time never match a date filter
        in_range = (DrawRecord.draw_time < before, DrawRecord.draw_time != "")
        query = query.where(*in_range)
        count_query = count_query.where(*in_range)

    total = (await session.execute(count_query)).scalar() or 0

    query = query.order_by(desc(DrawRecord.draw_number))
    query = query.offset((page - 1) * page_size).limit(page_size)

    result = await session.execute(query)
    return list(result.scalars().all()), total
