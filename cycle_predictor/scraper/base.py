"""Abstract collaborators: countdown source and draw source."""

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from cycle_predictor.db.crud import draw as crud
from cycle_predictor.db.models.ingest_log import IngestLog
from cycle_predictor.errors import TransientReadError
from cycle_predictor.schemas.draw import DrawRecordSchema


class BaseCountdownSource(ABC):
    """Remote countdown timer for the active cycle."""

    @abstractmethod
    async def read_countdown_seconds(self) -> int:
        """Current countdown in seconds. Raises TransientReadError."""
        ...

    @abstractmethod
    async def request_refresh(self) -> None:
        """Best-effort reload of the source after repeated read failures."""
        ...


class BaseDrawSource(ABC):
    """Remote list of the most recent completed draws."""

    source_name: str = ""
    read_timeout: float = 10.0

    @abstractmethod
    async def fetch_latest(self) -> list[DrawRecordSchema]:
        """Most recent known draws, any order. Raises TransientReadError."""
        ...

    async def run_with_logging(self, session: AsyncSession) -> IngestLog:
        """Fetch the latest draws, append new ones to the store, log the run."""
        log = IngestLog(
            source=self.source_name,
            status="running",
            started_at=datetime.now(),
        )
        session.add(log)
        await session.flush()

        try:
            try:
                draws = await asyncio.wait_for(self.fetch_latest(), timeout=self.read_timeout)
            except asyncio.TimeoutError as e:
                raise TransientReadError(
                    f"draw fetch timed out after {self.read_timeout}s"
                ) from e
            inserted = await crud.bulk_append(session, draws)

            log.status = "success"
            log.records_found = len(draws)
            log.records_inserted = inserted
            log.finished_at = datetime.now()
            if inserted:
                logger.info(
                    "[{}] ingest completed: {} of {} records new",
                    self.source_name, inserted, len(draws),
                )
        except Exception as e:
            log.status = "error"
            log.error_message = str(e)[:1000]
            log.finished_at = datetime.now()
            logger.error("[{}] ingest failed: {}", self.source_name, e)

        return log
