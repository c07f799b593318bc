"""Record stores for VerificationRecords."""

from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cycle_predictor.db.crud import verification as crud
from cycle_predictor.errors import PersistenceError
from cycle_predictor.schemas.prediction import VerificationRecord


class VerificationStore(Protocol):
    async def append(self, records: list[VerificationRecord]) -> int:
        """Append records, skipping (cycle_id, slot) pairs already stored."""
        ...

    async def list_recent(self, limit: int = 100) -> list[VerificationRecord]:
        ...

    async def list_all(self) -> list[VerificationRecord]:
        ...


class SqlVerificationStore:
    """VerificationStore backed by the verification_records table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def append(self, records: list[VerificationRecord]) -> int:
        async with self.session_factory() as session:
            try:
                inserted = await crud.append_records(session, records)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise PersistenceError(f"could not append verification records: {e}") from e
        return inserted

    async def list_recent(self, limit: int = 100) -> list[VerificationRecord]:
        async with self.session_factory() as session:
            rows = await crud.list_recent(session, limit=limit)
        return [VerificationRecord.model_validate(r) for r in rows]

    async def list_all(self) -> list[VerificationRecord]:
        async with self.session_factory() as session:
            rows = await crud.list_all(session)
        return [VerificationRecord.model_validate(r) for r in rows]
