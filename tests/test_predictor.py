"""
test_predictor.py - Scoring pipeline, scorers and ensemble
"""

import random

import numpy as np
import pytest

from cycle_predictor.errors import InsufficientHistory, ScorerError
from cycle_predictor.ml.features.feature_engineer import FEATURE_DIM
from cycle_predictor.ml.inference.model_registry import build_ensemble
from cycle_predictor.ml.inference.predictor import ScoringPipeline
from cycle_predictor.ml.models.ensemble import EnsembleScorer
from cycle_predictor.ml.models.logistic_model import LogisticScorer
from cycle_predictor.ml.models.ratio_model import RatioScorer
from cycle_predictor.schemas.prediction import Category
from tests.conftest import (
    FIXED_NOW,
    ConstantScorer,
    FailingScorer,
    make_history,
)


def pipeline_for(settings, scorer, seed=0):
    return ScoringPipeline(settings, scorer, rng=random.Random(seed), clock=lambda: FIXED_NOW)


class TestAdjustments:
    def test_center_slot_has_no_positional_bias(self, settings):
        pipe = pipeline_for(settings, ConstantScorer(0.5))
        assert pipe.position_bias(2) == 0.0

    def test_positional_bias_is_monotonic(self, settings):
        pipe = pipeline_for(settings, ConstantScorer(0.5))
        biases = [pipe.position_bias(s) for s in range(settings.SLOT_COUNT)]
        assert biases == sorted(biases)
        assert biases == pytest.approx([-0.1, -0.05, 0.0, 0.05, 0.1])

    def test_trend_bias(self, settings):
        pipe = pipeline_for(settings, ConstantScorer(0.5))
        assert pipe.trend_bias(0.5) == 0.0
        assert pipe.trend_bias(1.0) == pytest.approx(0.1)
        assert pipe.trend_bias(0.0) == pytest.approx(-0.1)

    @pytest.mark.parametrize("p,expected", [(0.5, Category.LOW), (0.5001, Category.HIGH), (0.1, Category.LOW)])
    def test_categorize(self, settings, p, expected):
        assert pipeline_for(settings, ConstantScorer(0.5)).categorize(p) is expected


class TestPredict:
    def test_neutral_scorer_on_balanced_history(self, settings, history):
        result = pipeline_for(settings, ConstantScorer(0.5)).predict(history)
        # Newest five draws per slot decide the trend term
        newest = sorted(history, key=lambda d: d.draw_number, reverse=True)[:5]
        for slot, p in enumerate(result.probabilities):
            trend = sum(d.digit(slot) >= 5 for d in newest) / 5
            expected = 0.5 + (slot - 2) * 0.05 + (trend - 0.5) * 0.2
            assert p == pytest.approx(min(max(expected, 0.1), 0.9))

    def test_output_shape_and_display_digits(self, settings, history):
        result = pipeline_for(settings, ConstantScorer(0.7)).predict(history)
        assert len(result.categories) == len(result.display_numbers) == len(result.probabilities) == 5
        for category, digit, p in zip(result.categories, result.display_numbers, result.probabilities):
            assert (p > 0.5) is (category is Category.HIGH)
            if category is Category.HIGH:
                assert 5 <= digit <= 9
            else:
                assert 0 <= digit <= 4

    @pytest.mark.parametrize("p", [0.0, 0.02, 0.5, 0.98, 1.0])
    @pytest.mark.parametrize("digits", ["99999", "00000", "50505"])
    def test_probabilities_stay_in_clamp_band(self, settings, p, digits):
        draws = make_history([digits] * 12)
        result = pipeline_for(settings, ConstantScorer(p)).predict(draws)
        for prob in result.probabilities:
            assert settings.PROB_CLAMP_LOW <= prob <= settings.PROB_CLAMP_HIGH

    def test_input_order_does_not_matter(self, settings, history):
        shuffled = list(history)
        random.Random(3).shuffle(shuffled)
        a = pipeline_for(settings, ConstantScorer(0.6), seed=1).predict(history)
        b = pipeline_for(settings, ConstantScorer(0.6), seed=1).predict(shuffled)
        assert a == b

    def test_every_slot_is_scored(self, settings, history):
        scorer = ConstantScorer(0.5)
        pipeline_for(settings, scorer).predict(history)
        assert len(scorer.calls) == 5
        assert all(v.shape == (FEATURE_DIM,) for v in scorer.calls)

    def test_insufficient_history_propagates(self, settings, history):
        with pytest.raises(InsufficientHistory):
            pipeline_for(settings, ConstantScorer(0.5)).predict(history[:4])

    def test_empty_history(self, settings):
        with pytest.raises(InsufficientHistory):
            pipeline_for(settings, ConstantScorer(0.5)).predict([])

    def test_short_draw_rejected(self, settings, history):
        broken = history + make_history(["123"], first_id=2000)
        with pytest.raises(InsufficientHistory):
            pipeline_for(settings, ConstantScorer(0.5)).predict(broken)

    def test_scorer_failure_aborts_whole_call(self, settings, history):
        ensemble = EnsembleScorer([ConstantScorer(0.5), FailingScorer()])
        with pytest.raises(ScorerError):
            pipeline_for(settings, ensemble).predict(history)


class TestEnsemble:
    def test_unweighted_mean(self):
        ensemble = EnsembleScorer([ConstantScorer(0.2), ConstantScorer(0.8), ConstantScorer(0.5)])
        assert ensemble.score(np.zeros(FEATURE_DIM)) == pytest.approx(0.5)

    @pytest.mark.parametrize("bad", [1.5, -0.1, float("nan")])
    def test_out_of_range_member_is_scorer_error(self, bad):
        with pytest.raises(ScorerError):
            EnsembleScorer([ConstantScorer(bad)]).score(np.zeros(FEATURE_DIM))

    def test_empty_ensemble_rejected(self):
        with pytest.raises(ValueError):
            EnsembleScorer([])


class TestScorers:
    def test_logistic_zero_weights_is_half(self):
        scorer = LogisticScorer([0.0] * FEATURE_DIM, bias=0.0)
        assert scorer.score(np.ones(FEATURE_DIM)) == pytest.approx(0.5)

    def test_logistic_weight_count_checked(self):
        with pytest.raises(ValueError):
            LogisticScorer([1.0, 2.0])

    def test_logistic_wrong_feature_length_fails_in_ensemble(self):
        ensemble = EnsembleScorer([LogisticScorer([0.1] * FEATURE_DIM)])
        with pytest.raises(ScorerError):
            ensemble.score(np.zeros(FEATURE_DIM - 1))

    def test_ratio_scorer_blends_ratio_features(self):
        vec = np.zeros(FEATURE_DIM)
        vec[0] = vec[7] = vec[8] = 0.6
        assert RatioScorer().score(vec) == pytest.approx(0.6)

    def test_default_ensemble_scores_in_unit_interval(self, settings, history):
        result = ScoringPipeline(settings, build_ensemble(settings), rng=random.Random(0)).predict(history)
        assert all(0.0 <= p <= 1.0 for p in result.probabilities)

    def test_unknown_scorer_name(self, settings):
        with pytest.raises(ValueError):
            build_ensemble(settings.model_copy(update={"SCORERS": ["ratio", "lstm"]}))
