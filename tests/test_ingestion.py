"""
test_ingestion.py - Draw source ingestion runs and their logs
"""

import asyncio

import pytest

from cycle_predictor.db.crud import draw as draw_crud
from cycle_predictor.errors import TransientReadError
from cycle_predictor.scraper.base import BaseDrawSource
from tests.conftest import make_history


class StaticDrawSource(BaseDrawSource):
    source_name = "static"

    def __init__(self, draws=None, error=None, delay=0.0, read_timeout=1.0):
        self.draws = draws or []
        self.error = error
        self.delay = delay
        self.read_timeout = read_timeout

    async def fetch_latest(self):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self.draws


@pytest.mark.asyncio
async def test_successful_run_appends_new_draws(session_factory, history):
    source = StaticDrawSource(list(reversed(history)))

    async with session_factory() as session:
        log = await source.run_with_logging(session)
        await session.commit()
        assert log.status == "success"
        assert log.records_found == 12
        assert log.records_inserted == 12

        again = await source.run_with_logging(session)
        await session.commit()
        assert again.records_inserted == 0
        assert await draw_crud.count(session) == 12


@pytest.mark.asyncio
async def test_source_error_is_logged_not_raised(session_factory):
    source = StaticDrawSource(error=TransientReadError("upstream 502"))

    async with session_factory() as session:
        log = await source.run_with_logging(session)

    assert log.status == "error"
    assert "upstream 502" in log.error_message
    assert log.finished_at is not None


@pytest.mark.asyncio
async def test_slow_source_times_out(session_factory):
    source = StaticDrawSource(make_history(["12345"]), delay=0.5, read_timeout=0.01)

    async with session_factory() as session:
        log = await source.run_with_logging(session)
        assert await draw_crud.count(session) == 0

    assert log.status == "error"
    assert "timed out" in log.error_message
