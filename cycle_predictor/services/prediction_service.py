"""Prediction service — the firing callback and accuracy reporting."""

from collections import defaultdict

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from cycle_predictor.config import Settings
from cycle_predictor.db.crud import draw as draw_crud
from cycle_predictor.errors import PersistenceError
from cycle_predictor.ledger.verification_ledger import VerificationLedger
from cycle_predictor.ml.inference.predictor import ScoringPipeline
from cycle_predictor.schemas.draw import DrawRecordSchema
from cycle_predictor.schemas.prediction import (
    AccuracySummary,
    PendingPrediction,
    SlotAccuracy,
    VerificationRecord,
)


class PredictionService:
    def __init__(
        self,
        settings: Settings,
        session_factory: async_sessionmaker[AsyncSession],
        pipeline: ScoringPipeline,
        ledger: VerificationLedger,
    ):
        self.settings = settings
        self.session_factory = session_factory
        self.pipeline = pipeline
        self.ledger = ledger

    async def load_recent_draws(self) -> list[DrawRecordSchema]:
        async with self.session_factory() as session:
            rows = await draw_crud.get_recent(session, limit=self.settings.HISTORY_FETCH_LIMIT)
        return [DrawRecordSchema.model_validate(r) for r in rows]

    async def run_prediction(self) -> PendingPrediction | None:
        """Resolve the previous prediction, then predict the next cycle.

        InsufficientHistory and ScorerError propagate (the cycle is skipped).
        Persistence failures are logged and return None. When verification could
        not be stored, no new prediction is recorded, so the unresolved entry is
        retried on the next firing instead of being overwritten.
        """
        draws = await self.load_recent_draws()

        try:
            await self.ledger.resolve(draws)
        except PersistenceError as e:
            logger.error("Could not store verification, skipping this prediction: {}", e)
            return None

        result = self.pipeline.predict(draws)

        latest = max(draws, key=lambda d: d.draw_number)
        target = str(latest.draw_number + 1)
        try:
            pending = self.ledger.record_prediction(
                target, result.categories, result.display_numbers, result.probabilities,
            )
        except PersistenceError as e:
            logger.error("Could not record prediction for cycle {}: {}", target, e)
            return None

        logger.info(
            "Prediction for {}: [{}] digits [{}] probabilities [{}]",
            target,
            ",".join(c.value for c in result.categories),
            ",".join(str(n) for n in result.display_numbers),
            ", ".join(f"{p:.1%}" for p in result.probabilities),
        )
        return pending


def summarize_accuracy(records: list[VerificationRecord]) -> AccuracySummary:
    """Hit rate over every verified slot, overall and per slot."""
    per_slot: dict[int, list[int]] = defaultdict(lambda: [0, 0])
    for r in records:
        per_slot[r.slot][0] += 1
        per_slot[r.slot][1] += int(r.is_correct)

    total = len(records)
    correct = sum(int(r.is_correct) for r in records)
    return AccuracySummary(
        total=total,
        correct=correct,
        accuracy=round(correct / total, 4) if total else 0.0,
        cycles=len({r.cycle_id for r in records}),
        per_slot=[
            SlotAccuracy(
                slot=slot,
                total=n,
                correct=c,
                accuracy=round(c / n, 4) if n else 0.0,
            )
            for slot, (n, c) in sorted(per_slot.items())
        ],
    )
