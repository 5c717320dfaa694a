"""
Unit tests for off-target hit classification and the specificity penalty.
"""
import pytest

from primer_thermo.errors import InvalidConfigurationError
from primer_thermo.evaluation import (
    OffTargetHit,
    OffTargetSummary,
    classify_off_target_risk,
    off_target_penalty,
    summarize_off_targets,
)


@pytest.mark.parametrize("mismatches, risk", [(0, "high"), (1, "high"), (2, "medium"), (3, "low"), (7, "low")])
def test_classify_off_target_risk(mismatches, risk):
    """
    0-1 mismatches prime readily, 2 sometimes, 3+ rarely.
    """
    assert classify_off_target_risk(mismatches) == risk


def test_hit_validation():
    """
    Negative counts or positions and unknown strands are rejected.
    """
    with pytest.raises(InvalidConfigurationError):
        OffTargetHit(position=10, strand="+", mismatch_count=-1)
    with pytest.raises(InvalidConfigurationError):
        OffTargetHit(position=-1, strand="+", mismatch_count=0)
    with pytest.raises(InvalidConfigurationError):
        OffTargetHit(position=10, strand="x", mismatch_count=0)


def test_hit_from_record_accepts_both_spellings():
    """
    Records may use ``mismatch_count`` or ``mismatchCount``.
    """
    assert OffTargetHit.from_record({"position": 5, "strand": "-", "mismatchCount": 2}) == OffTargetHit(5, "-", 2)
    assert OffTargetHit.from_record({"position": 5, "strand": "+", "mismatch_count": 0}) == OffTargetHit(5, "+", 0)


@pytest.mark.parametrize(
    "record",
    [
        {"position": 5, "strand": "+"},
        {"strand": "+", "mismatchCount": 1},
        {"position": "five", "strand": "+", "mismatchCount": 1},
    ],
)
def test_malformed_records_raise(record):
    """
    Missing or non-numeric fields raise a configuration error.
    """
    with pytest.raises(InvalidConfigurationError):
        OffTargetHit.from_record(record)


def test_summarize_off_targets_drops_the_intended_site():
    """
    The intended binding site is not counted as an off-target.
    """
    hits = [
        {"position": 100, "strand": "+", "mismatchCount": 0},
        {"position": 2000, "strand": "-", "mismatchCount": 1},
        OffTargetHit(3000, "+", 2),
        OffTargetHit(4000, "+", 4),
    ]
    summary = summarize_off_targets(hits, intended=(100, "+"))

    assert summary.high_risk == 1
    assert summary.medium_risk == 1
    assert summary.low_risk == 1
    assert summary.total == 3
    assert all(hit.position != 100 for hit in summary.hits)


def test_summarize_with_no_hits():
    """
    No hits means an empty summary.
    """
    summary = summarize_off_targets([])
    assert summary == OffTargetSummary()
    assert summary.total == 0


@pytest.mark.parametrize(
    "summary, penalty",
    [
        (OffTargetSummary(), 0.0),
        (OffTargetSummary(high_risk=1), 0.7),
        (OffTargetSummary(high_risk=2, medium_risk=5), 0.9),
        (OffTargetSummary(high_risk=3), 1.0),
        (OffTargetSummary(medium_risk=2, low_risk=5), 0.4),
        (OffTargetSummary(medium_risk=10), 1.0),
    ],
)
def test_off_target_penalty(summary, penalty):
    """
    Near-perfect sites dominate the penalty; weaker sites accumulate.
    """
    assert off_target_penalty(summary) == pytest.approx(penalty)


@pytest.mark.parametrize(
    "base",
    [
        OffTargetSummary(),
        OffTargetSummary(medium_risk=7),
        OffTargetSummary(medium_risk=4, low_risk=3),
        OffTargetSummary(high_risk=1, medium_risk=2),
        OffTargetSummary(high_risk=2, low_risk=10),
    ],
)
@pytest.mark.parametrize("extra", ["high_risk", "medium_risk", "low_risk"])
def test_off_target_penalty_never_drops_when_a_hit_is_added(base, extra):
    """
    One more site of any class never makes a primer look more specific.
    """
    grown = OffTargetSummary(
        high_risk=base.high_risk + (extra == "high_risk"),
        medium_risk=base.medium_risk + (extra == "medium_risk"),
        low_risk=base.low_risk + (extra == "low_risk"),
    )
    assert off_target_penalty(grown) >= off_target_penalty(base)


def test_single_near_perfect_site_does_not_hide_many_weaker_sites():
    """
    Seven two-mismatch sites already saturate the penalty; a near-perfect site keeps it there.
    """
    assert off_target_penalty(OffTargetSummary(medium_risk=7)) == pytest.approx(1.0)
    assert off_target_penalty(OffTargetSummary(high_risk=1, medium_risk=7)) == pytest.approx(1.0)
    assert off_target_penalty(OffTargetSummary(high_risk=1, medium_risk=5)) == pytest.approx(0.75)
