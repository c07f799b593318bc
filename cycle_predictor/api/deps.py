"""Dependency injection for FastAPI."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from cycle_predictor.config import Settings, settings
from cycle_predictor.db.engine import async_session_factory
from cycle_predictor.ledger.verification_store import SqlVerificationStore, VerificationStore


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async database session for request scope."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_settings() -> Settings:
    return settings


def get_verification_store() -> VerificationStore:
    return SqlVerificationStore(async_session_factory)
