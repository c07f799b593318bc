"""Scoring pipeline — turns recent draws into per-slot High/Low predictions."""

import random
from dataclasses import dataclass
from datetime import datetime

from loguru import logger

from cycle_predictor.config import Settings
from cycle_predictor.errors import InsufficientHistory
from cycle_predictor.ml.features.feature_engineer import FeatureEngineer, sort_newest_first
from cycle_predictor.ml.models.base_model import BaseScorer
from cycle_predictor.schemas.draw import DrawRecordSchema
from cycle_predictor.schemas.prediction import Category

HIGH_DIGITS = (5, 9)
LOW_DIGITS = (0, 4)


@dataclass(frozen=True)
class PredictionResult:
    categories: list[Category]
    display_numbers: list[int]
    probabilities: list[float]


class ScoringPipeline:
    """Per-slot ensemble scoring with positional and trend adjustments."""

    def __init__(
        self,
        settings: Settings,
        scorer: BaseScorer,
        rng: random.Random | None = None,
        clock=datetime.now,
    ):
        self.settings = settings
        self.scorer = scorer
        self.features = FeatureEngineer(settings)
        self.rng = rng or random.Random()
        self.clock = clock

    @property
    def center(self) -> float:
        return (self.settings.SLOT_COUNT - 1) / 2

    def position_bias(self, slot: int) -> float:
        """Zero at the middle slot, linear in slot index."""
        return (slot - self.center) * self.settings.POSITION_BIAS_STEP

    def trend_bias(self, trend_fraction: float) -> float:
        return (trend_fraction - 0.5) * self.settings.TREND_BIAS_STEP

    def clamp(self, p: float) -> float:
        return min(max(p, self.settings.PROB_CLAMP_LOW), self.settings.PROB_CLAMP_HIGH)

    def categorize(self, p: float) -> Category:
        return Category.HIGH if p > self.settings.DECISION_THRESHOLD else Category.LOW

    def display_digit(self, category: Category) -> int:
        """Cosmetic digit consistent with the category. Not a prediction signal."""
        low, high = HIGH_DIGITS if category is Category.HIGH else LOW_DIGITS
        return self.rng.randint(low, high)

    def adjust(self, base: float, slot: int, trend_fraction: float) -> float:
        return self.clamp(base + self.position_bias(slot) + self.trend_bias(trend_fraction))

    def score_slot(
        self, records: list[DrawRecordSchema], slot: int, now: datetime
    ) -> float:
        vector = self.features.build_slot_features(records, slot, now)
        base = self.scorer.score(vector)
        trend = self.features.trend_fraction(records, slot, self.settings.RECENT_TREND_COUNT)
        return self.adjust(base, slot, trend)

    def predict(
        self, records: list[DrawRecordSchema], now: datetime | None = None
    ) -> PredictionResult:
        """Predict every slot or raise; partial results are never returned.

        Raises:
            InsufficientHistory: too few draws for the history or trend window
            ScorerError: a scorer in the ensemble failed
        """
        if not records:
            raise InsufficientHistory("no draw history available")
        now = now or self.clock()
        ordered = sort_newest_first(records)

        short = [r.draw_id for r in ordered if len(r.numbers) < self.settings.SLOT_COUNT]
        if short:
            raise InsufficientHistory(
                f"draws {short[:3]} have fewer than {self.settings.SLOT_COUNT} slots"
            )

        probabilities = [
            self.score_slot(ordered, slot, now) for slot in range(self.settings.SLOT_COUNT)
        ]
        categories = [self.categorize(p) for p in probabilities]
        display_numbers = [self.display_digit(c) for c in categories]

        logger.debug(
            "Scored {} draws: {}",
            len(ordered),
            ", ".join(f"{c.value}({p:.1%})" for c, p in zip(categories, probabilities)),
        )
        return PredictionResult(categories, display_numbers, probabilities)
