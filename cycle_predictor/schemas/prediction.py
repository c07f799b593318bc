"""Pydantic schemas for predictions and their verification."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, computed_field


class Category(str, Enum):
    HIGH = "High"
    LOW = "Low"


def category_of(digit: int) -> Category:
    """Ground-truth category of a slot digit (>= 5 is High)."""
    return Category.HIGH if digit >= 5 else Category.LOW


class PendingPrediction(BaseModel):
    """The single in-flight forecast awaiting its draw."""

    cycle_id: str
    created_at: datetime
    predicted_categories: list[Category]
    display_numbers: list[int]
    probabilities: list[float]
    resolved_at: datetime | None = None

    @property
    def is_resolved(self) -> bool:
        return self.resolved_at is not None

    @computed_field
    @property
    def confidences(self) -> list[float]:
        """Distance of each probability from a coin flip, scaled to [0, 1]."""
        return [round(abs(p - 0.5) * 2, 4) for p in self.probabilities]


class VerificationRecord(BaseModel):
    model_config = {"from_attributes": True, "frozen": True}

    cycle_id: str
    slot: int
    predicted: Category
    actual: Category
    actual_digit: int
    display_digit: int
    probability: float
    is_correct: bool
    verified_at: datetime


class SlotAccuracy(BaseModel):
    slot: int
    total: int
    correct: int
    accuracy: float


class AccuracySummary(BaseModel):
    total: int
    correct: int
    accuracy: float
    cycles: int
    per_slot: list[SlotAccuracy]
