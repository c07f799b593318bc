"""
test_feature_engineer.py - History series and per-slot feature vectors
"""

import math
import random
from datetime import datetime

import numpy as np
import pytest

from cycle_predictor.errors import InsufficientHistory
from cycle_predictor.ml.features.feature_engineer import (
    FEATURE_DIM,
    FEATURE_NAMES,
    FeatureEngineer,
)
from tests.conftest import FIXED_NOW, make_history


@pytest.fixture
def fe8(settings):
    return FeatureEngineer(settings.model_copy(update={"HISTORY_WINDOW": 8}))


def test_history_series_is_oldest_first_and_order_independent(history):
    expected = [1, 0, 1, 0, 1, 0, 1, 0, 1, 0, 1, 0]
    assert FeatureEngineer.history_series(history, 0) == expected

    shuffled = list(history)
    random.Random(7).shuffle(shuffled)
    assert FeatureEngineer.history_series(shuffled, 0) == expected


def test_history_series_uses_digit_threshold():
    draws = make_history(["40000", "50000", "90000", "00000"])
    assert FeatureEngineer.history_series(draws, 0) == [0, 1, 1, 0]


def test_feature_vector_example(fe8):
    series = [1, 0, 0, 1, 1, 0, 1, 0]
    vec = fe8.compute_features(series, slot=2, now=FIXED_NOW)

    assert vec.shape == (FEATURE_DIM,)
    assert len(FEATURE_NAMES) == 12
    values = dict(zip(FEATURE_NAMES, vec))
    assert values["high_ratio"] == pytest.approx(0.5)
    assert values["current_run"] == pytest.approx(0.1)
    assert values["longest_run"] == pytest.approx(0.2)
    assert values["hour"] == pytest.approx(14 / 24)
    assert values["minute"] == pytest.approx(0.5)
    assert values["hour_sin"] == pytest.approx(math.sin(2 * math.pi * 14 / 24))
    assert values["hour_cos"] == pytest.approx(math.cos(2 * math.pi * 14 / 24))
    assert values["ratio_last3"] == pytest.approx(1 / 3)
    assert values["ratio_short"] == pytest.approx(0.6)
    # slot 2 of 5 -> weight 0.6; medium ratio over the 8-long window is 0.5
    assert values["momentum_weighted"] == pytest.approx(0.1 * 0.6)
    assert values["short_weighted"] == pytest.approx(0.6 * 0.6)
    assert values["medium_weighted"] == pytest.approx(0.5 * 0.6)


def test_feature_extraction_is_bit_for_bit_repeatable(fe8):
    series = [1, 0, 0, 1, 1, 0, 1, 0]
    first = fe8.compute_features(series, 2, FIXED_NOW)
    second = fe8.compute_features(list(series), 2, FIXED_NOW)
    assert first.tobytes() == second.tobytes()


def test_only_newest_window_is_used(fe8):
    tail = [1, 0, 0, 1, 1, 0, 1, 0]
    a = fe8.compute_features([0] * 20 + tail, 0, FIXED_NOW)
    b = fe8.compute_features([1] * 3 + tail, 0, FIXED_NOW)
    np.testing.assert_array_equal(a, b)


def test_time_features_follow_wall_clock(fe8):
    """Time features come from the computation clock, not the draw time."""
    series = [1, 0, 0, 1, 1, 0, 1, 0]
    night = fe8.compute_features(series, 0, datetime(2026, 1, 1, 2, 5))
    noon = fe8.compute_features(series, 0, datetime(2026, 1, 1, 12, 5))
    assert not np.array_equal(night, noon)
    np.testing.assert_array_equal(night[:3], noon[:3])


def test_insufficient_history(fe8):
    with pytest.raises(InsufficientHistory):
        fe8.compute_features([1, 0, 1], 0, FIXED_NOW)


@pytest.mark.parametrize("window,expected", [
    ([1], (1, 1)),
    ([1, 1, 1], (3, 3)),
    ([1, 1, 1, 0], (1, 3)),
    ([0, 1, 1, 0, 0], (2, 2)),
    ([1, 0, 0, 0, 1, 1], (2, 3)),
    ([], (0, 0)),
])
def test_run_lengths(window, expected):
    assert FeatureEngineer.run_lengths(window) == expected


def test_positional_weight(settings):
    fe = FeatureEngineer(settings)
    assert [fe.positional_weight(s) for s in range(5)] == pytest.approx([0.2, 0.4, 0.6, 0.8, 1.0])


def test_trend_fraction_uses_newest_draws():
    draws = make_history(["0"] * 5 + ["9", "9", "9", "0", "9"], first_id=1)
    # newest five: 9,9,9,0,9
    assert FeatureEngineer.trend_fraction(draws, 0, 5) == pytest.approx(0.8)


def test_trend_fraction_needs_enough_draws():
    with pytest.raises(InsufficientHistory):
        FeatureEngineer.trend_fraction(make_history(["1", "2"]), 0, 5)
