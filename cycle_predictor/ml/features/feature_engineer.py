"""Feature engineering for per-slot High/Low scoring."""

import math
from datetime import datetime

import numpy as np

from cycle_predictor.config import Settings
from cycle_predictor.errors import InsufficientHistory
from cycle_predictor.schemas.draw import DrawRecordSchema

# Field order is a contract with every scorer. Do not reorder.
FEATURE_NAMES: tuple[str, ...] = (
    "high_ratio",
    "current_run",
    "longest_run",
    "hour",
    "minute",
    "hour_sin",
    "hour_cos",
    "ratio_last3",
    "ratio_short",
    "momentum_weighted",
    "short_weighted",
    "medium_weighted",
)
FEATURE_DIM = len(FEATURE_NAMES)


def sort_newest_first(records: list[DrawRecordSchema]) -> list[DrawRecordSchema]:
    return sorted(records, key=lambda r: r.draw_number, reverse=True)


def _ratio(series: list[int], n: int) -> float:
    tail = series[-n:]
    return sum(tail) / len(tail) if tail else 0.0


class FeatureEngineer:
    """Build the fixed-order feature vector for one output slot."""

    def __init__(self, settings: Settings):
        self.slot_count = settings.SLOT_COUNT
        self.window = settings.HISTORY_WINDOW
        self.short_window = settings.SHORT_WINDOW
        self.medium_window = settings.MEDIUM_WINDOW
        self.run_norm = settings.RUN_LENGTH_NORM

    # ── history ───────────────────────────────────────────────────────

    @staticmethod
    def history_series(records: list[DrawRecordSchema], slot: int) -> list[int]:
        """Binary High/Low outcomes for ``slot``, oldest -> newest."""
        ordered = sorted(records, key=lambda r: r.draw_number)
        return [1 if r.digit(slot) >= 5 else 0 for r in ordered]

    @staticmethod
    def trend_fraction(records: list[DrawRecordSchema], slot: int, recent_count: int) -> float:
        """Share of High outcomes for ``slot`` over the ``recent_count`` newest draws."""
        if len(records) < recent_count:
            raise InsufficientHistory(
                f"need {recent_count} draws for the trend window, have {len(records)}"
            )
        recent = sort_newest_first(records)[:recent_count]
        return sum(1 for r in recent if r.digit(slot) >= 5) / recent_count

    # ── runs ──────────────────────────────────────────────────────────

    @staticmethod
    def run_lengths(window: list[int]) -> tuple[int, int]:
        """(current run at the newest end, longest run anywhere in the window)."""
        if not window:
            return 0, 0
        longest = 1
        run = 1
        for prev, cur in zip(window, window[1:]):
            run = run + 1 if cur == prev else 1
            longest = max(longest, run)
        current = 1
        for v in reversed(window[:-1]):
            if v != window[-1]:
                break
            current += 1
        return current, longest

    # ── feature vector ────────────────────────────────────────────────

    def positional_weight(self, slot: int) -> float:
        """Later slots weigh the momentum / ratio terms more: (s+1)/K."""
        return (slot + 1) / self.slot_count

    def compute_features(
        self, series: list[int], slot: int, now: datetime
    ) -> np.ndarray:
        """Feature vector over the newest ``HISTORY_WINDOW`` outcomes.

        ``now`` is the wall-clock time of the computation, not the draw time.

        Returns shape: (FEATURE_DIM,)
        """
        if len(series) < self.window:
            raise InsufficientHistory(
                f"slot {slot}: need {self.window} outcomes, have {len(series)}"
            )
        window = list(series[-self.window:])

        high_ratio = sum(window) / len(window)
        current_run, longest_run = self.run_lengths(window)

        hour = now.hour
        minute = now.minute

        short_term = _ratio(window, self.short_window)
        medium_term = _ratio(window, self.medium_window)
        momentum = short_term - medium_term
        weight = self.positional_weight(slot)

        return np.array([
            high_ratio,
            current_run / self.run_norm,
            longest_run / self.run_norm,
            hour / 24,
            minute / 60,
            math.sin(2 * math.pi * hour / 24),
            math.cos(2 * math.pi * hour / 24),
            _ratio(window, 3),
            short_term,
            momentum * weight,
            short_term * weight,
            medium_term * weight,
        ], dtype=np.float64)

    def build_slot_features(
        self, records: list[DrawRecordSchema], slot: int, now: datetime
    ) -> np.ndarray:
        return self.compute_features(self.history_series(records, slot), slot, now)
