"""Ensemble scorer — unweighted mean over a static set of scorers."""

import math

import numpy as np
from loguru import logger

from cycle_predictor.errors import ScorerError
from cycle_predictor.ml.models.base_model import BaseScorer


class EnsembleScorer(BaseScorer):
    """Average of every member's probability.

    A failing member aborts the call; there is no partial ensemble.
    """

    scorer_type = "ensemble"

    def __init__(self, scorers: list[BaseScorer]):
        if not scorers:
            raise ValueError("ensemble needs at least one scorer")
        self.scorers = list(scorers)

    def member_scores(self, features: np.ndarray) -> list[float]:
        scores = []
        for scorer in self.scorers:
            try:
                p = float(scorer.score(features))
            except ScorerError:
                raise
            except Exception as e:
                logger.error("Scorer {} failed: {}", scorer.scorer_type, e)
                raise ScorerError(f"{scorer.scorer_type} scorer failed: {e}") from e
            if not math.isfinite(p) or not 0.0 <= p <= 1.0:
                raise ScorerError(f"{scorer.scorer_type} returned {p!r}, outside [0, 1]")
            scores.append(p)
        return scores

    def score(self, features: np.ndarray) -> float:
        scores = self.member_scores(features)
        return sum(scores) / len(scores)
