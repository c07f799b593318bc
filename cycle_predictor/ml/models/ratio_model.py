"""Ratio-based statistical baseline scorer."""

import numpy as np

from cycle_predictor.ml.features.feature_engineer import FEATURE_NAMES
from cycle_predictor.ml.models.base_model import BaseScorer

_RATIO_FIELDS = ("high_ratio", "ratio_last3", "ratio_short")
_RATIO_INDEX = [FEATURE_NAMES.index(name) for name in _RATIO_FIELDS]


class RatioScorer(BaseScorer):
    """Statistical baseline: weighted blend of the window, last-3 and short ratios."""

    scorer_type = "ratio"

    def __init__(self, weights: tuple[float, ...] = (0.5, 0.2, 0.3)):
        if len(weights) != len(_RATIO_INDEX):
            raise ValueError(f"expected {len(_RATIO_INDEX)} weights, got {len(weights)}")
        w = np.asarray(weights, dtype=np.float64)
        self.weights = w / w.sum()

    def score(self, features: np.ndarray) -> float:
        ratios = np.asarray(features, dtype=np.float64)[_RATIO_INDEX]
        return float(np.dot(self.weights, ratios))
