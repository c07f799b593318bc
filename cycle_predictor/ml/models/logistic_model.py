"""Logistic scorer over the full feature vector."""

import numpy as np

from cycle_predictor.ml.features.feature_engineer import FEATURE_DIM
from cycle_predictor.ml.models.base_model import BaseScorer


class LogisticScorer(BaseScorer):
    """sigmoid(w . x + b) with pre-set coefficients."""

    scorer_type = "logistic"

    def __init__(self, weights: list[float], bias: float = 0.0):
        self.weights = np.asarray(weights, dtype=np.float64)
        if self.weights.shape != (FEATURE_DIM,):
            raise ValueError(
                f"logistic weights must have {FEATURE_DIM} entries, got {self.weights.size}"
            )
        self.bias = float(bias)

    def score(self, features: np.ndarray) -> float:
        x = np.asarray(features, dtype=np.float64)
        if x.shape != self.weights.shape:
            raise ValueError(f"feature vector shape {x.shape} != {self.weights.shape}")
        z = float(np.dot(self.weights, x)) + self.bias
        return float(1.0 / (1.0 + np.exp(-z)))
