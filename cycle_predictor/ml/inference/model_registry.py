"""Model registry — builds the static scorer ensemble from settings."""

from loguru import logger

from cycle_predictor.config import Settings
from cycle_predictor.ml.models.base_model import BaseScorer
from cycle_predictor.ml.models.ensemble import EnsembleScorer
from cycle_predictor.ml.models.logistic_model import LogisticScorer
from cycle_predictor.ml.models.ratio_model import RatioScorer

SCORER_NAMES = ("ratio", "logistic")


def _instantiate_scorer(name: str, settings: Settings) -> BaseScorer:
    if name == "ratio":
        return RatioScorer()
    if name == "logistic":
        return LogisticScorer(settings.LOGISTIC_WEIGHTS, settings.LOGISTIC_BIAS)
    raise ValueError(f"Unknown scorer: {name}. Valid: {SCORER_NAMES}")


def build_ensemble(settings: Settings) -> EnsembleScorer:
    """Instantiate every configured scorer once; the set is fixed afterwards."""
    scorers = [_instantiate_scorer(name, settings) for name in settings.SCORERS]
    logger.info("Loaded scorer ensemble: {}", [s.scorer_type for s in scorers])
    return EnsembleScorer(scorers)
