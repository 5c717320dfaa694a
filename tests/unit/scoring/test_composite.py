"""
Unit tests for the weighted composite score.
"""
import pytest

from primer_thermo.scoring import classify_quality, composite_score


def test_weighted_mean():
    result = composite_score({"a": 1.0, "b": 0.0}, {"a": 1.0, "b": 1.0})

    assert result.score == pytest.approx(0.5)
    assert result.percent == 50
    assert result.quality == "marginal"
    assert result.total_weight == pytest.approx(2.0)
    assert result.breakdown["a"].contribution == pytest.approx(1.0)


def test_scale_invariance():
    """
    Scaling all weights by the same factor leaves the score unchanged.
    """
    subscores = {"a": 0.9, "b": 0.3, "c": 0.6}
    base = composite_score(subscores, {"a": 1.0, "b": 3.0, "c": 2.0})
    scaled = composite_score(subscores, {"a": 2.5, "b": 7.5, "c": 5.0})

    assert scaled.score == pytest.approx(base.score)


def test_missing_and_nan_subscores_count_as_neutral():
    assert composite_score({"a": None}, {"a": 1.0}).score == pytest.approx(0.5)
    assert composite_score({"a": float("nan")}, {"a": 1.0}).score == pytest.approx(0.5)


def test_out_of_range_subscores_are_clamped():
    assert composite_score({"a": 1.7, "b": -0.4}, {"a": 1.0, "b": 1.0}).score == pytest.approx(0.5)


def test_unweighted_keys_are_ignored():
    result = composite_score({"a": 1.0, "b": 0.0, "c": 0.0}, {"a": 1.0, "b": 0.0})

    assert result.score == 1.0
    assert set(result.breakdown) == {"a"}


def test_no_overlapping_keys_scores_zero():
    result = composite_score({"x": 1.0}, {"a": 1.0})

    assert result.score == 0.0
    assert result.quality == "poor"
    assert result.breakdown == {}


def test_default_preset_is_used_without_weights():
    result = composite_score({"tm_fwd": 1.0, "gc_fwd": 1.0})

    assert result.score == 1.0
    assert result.quality == "excellent"


@pytest.mark.parametrize(
    "score, quality",
    [(0.95, "excellent"), (0.90, "excellent"), (0.80, "good"), (0.60, "acceptable"), (0.45, "marginal"),
     (0.39, "poor")],
)
def test_classify_quality(score, quality):
    assert classify_quality(score) == quality
