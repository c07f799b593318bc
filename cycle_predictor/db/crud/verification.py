"""CRUD operations for verification records."""

from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from cycle_predictor.db.crud._insert import insert_ignore
from cycle_predictor.db.models.verification import VerificationRow
from cycle_predictor.schemas.prediction import VerificationRecord


async def append_records(session: AsyncSession, records: list[VerificationRecord]) -> int:
    """Append records; a (cycle_id, slot) pair already present is skipped."""
    inserted = 0
    for record in records:
        values = record.model_dump()
        values["predicted"] = record.predicted.value
        values["actual"] = record.actual.value
        if await insert_ignore(
            session, VerificationRow, values, index_elements=["cycle_id", "slot"]
        ):
            inserted += 1
    return inserted


async def list_recent(session: AsyncSession, *, limit: int = 100) -> list[VerificationRow]:
    result = await session.execute(
        select(VerificationRow)
        .order_by(desc(VerificationRow.verified_at), VerificationRow.slot)
        .limit(limit)
    )
    return list(result.scalars().all())


async def list_all(session: AsyncSession) -> list[VerificationRow]:
    result = await session.execute(
        select(VerificationRow).order_by(VerificationRow.verified_at, VerificationRow.slot)
    )
    return list(result.scalars().all())
