"""
tests/conftest.py - Pytest configuration and fixtures

Settings point at a per-test temp directory, so nothing touches ./data.
"""

from datetime import datetime

import numpy as np
import pytest
import pytest_asyncio

from cycle_predictor.config import Settings
from cycle_predictor.db.engine import build_engine, build_session_factory, create_tables
from cycle_predictor.ml.models.base_model import BaseScorer
from cycle_predictor.schemas.draw import DrawRecordSchema
from cycle_predictor.schemas.prediction import VerificationRecord


class ConstantScorer(BaseScorer):
    """Stub scorer returning a fixed probability and remembering its inputs."""

    scorer_type = "constant"

    def __init__(self, p: float):
        self.p = p
        self.calls: list[np.ndarray] = []

    def score(self, features: np.ndarray) -> float:
        self.calls.append(np.array(features, copy=True))
        return self.p


class FailingScorer(BaseScorer):
    scorer_type = "failing"

    def score(self, features: np.ndarray) -> float:
        raise RuntimeError("model exploded")


class InMemoryVerificationStore:
    def __init__(self):
        self.records: list[VerificationRecord] = []

    async def append(self, records):
        seen = {(r.cycle_id, r.slot) for r in self.records}
        new = [r for r in records if (r.cycle_id, r.slot) not in seen]
        self.records.extend(new)
        return len(new)

    async def list_recent(self, limit=100):
        return list(reversed(self.records))[:limit]

    async def list_all(self):
        return list(self.records)


def make_draw(draw_id: int, digits: str, draw_time: str = "") -> DrawRecordSchema:
    return DrawRecordSchema(draw_id=str(draw_id), numbers=list(digits), draw_time=draw_time)


def make_history(rows: list[str], first_id: int = 1000) -> list[DrawRecordSchema]:
    """Draws from oldest to newest, ids increasing by one."""
    return [make_draw(first_id + i, digits) for i, digits in enumerate(rows)]


FIXED_NOW = datetime(2026, 10, 19, 14, 30, 0)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        DATA_DIR=tmp_path,
        PENDING_PREDICTION_FILE=tmp_path / "pending_prediction.json",
        VERIFICATION_LOG_FILE=tmp_path / "prediction_history.txt",
    )


@pytest.fixture
def history():
    """Twelve draws alternating between mostly-high and mostly-low digits."""
    rows = [
        "57391", "12840", "96573", "03412", "88765", "21304",
        "75986", "40123", "69857", "13042", "58796", "32410",
    ]
    return make_history(rows)


@pytest_asyncio.fixture
async def session_factory(settings):
    engine = build_engine(settings.DATABASE_URL)
    await create_tables(engine)
    yield build_session_factory(engine)
    await engine.dispose()
