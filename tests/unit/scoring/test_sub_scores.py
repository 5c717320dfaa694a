"""
Unit tests for the per-metric sub-scores.
"""
import math

import pytest

from primer_thermo.errors import InvalidConfigurationError
from primer_thermo.scoring import (
    longest_homopolymer,
    score_g_quadruplex,
    score_gc,
    score_gc_clamp,
    score_hairpin,
    score_heterodimer,
    score_homodimer,
    score_homopolymer,
    score_length,
    score_off_target,
    score_terminal_3prime_dg,
    score_three_prime_composition,
    score_tm,
    score_tm_diff,
)

NAN = float("nan")


@pytest.mark.parametrize(
    "scorer",
    [score_tm, score_gc, score_length, score_terminal_3prime_dg, score_hairpin, score_homodimer,
     score_heterodimer, score_off_target],
)
def test_missing_values_score_neutral(scorer):
    """
    Every continuous sub-score maps None and NaN to 0.5.
    """
    assert scorer(None) == 0.5
    assert scorer(NAN) == 0.5


def test_score_tm_with_custom_optimum():
    assert score_tm(57.0) == 1.0
    assert score_tm(62.0) < 1.0
    assert score_tm(62.0, optimal=(60.0, 64.0)) == 1.0


def test_score_gc_takes_percent():
    """
    Low GC percentages are scored as such, not rescaled as fractions.
    """
    assert score_gc(50.0) == 1.0
    assert score_gc(30.0) == pytest.approx(0.7)
    assert score_gc(1.0) < score_gc(30.0)
    assert score_gc(0.5) < 0.1


@pytest.mark.parametrize("gc", [-0.1, 100.5, 150.0])
def test_score_gc_rejects_values_outside_percent_range(gc):
    with pytest.raises(InvalidConfigurationError):
        score_gc(gc)


def test_score_length():
    assert score_length(20) == 1.0
    assert score_length(15) == pytest.approx(0.7)
    assert score_length(40) < score_length(30)


def test_score_terminal_3prime_dg():
    """
    Loose ends decay faster than overly tight ones.
    """
    assert score_terminal_3prime_dg(-8.0) == 1.0
    assert score_terminal_3prime_dg(-5.4) == pytest.approx(math.exp(-0.3 * 0.6))
    assert score_terminal_3prime_dg(-12.0) == pytest.approx(math.exp(-0.15))
    assert score_terminal_3prime_dg(-3.0) < score_terminal_3prime_dg(-14.0)


@pytest.mark.parametrize(
    "tm_rev, expected",
    [
        (60.0, 1.0),
        (63.0, 1.0),
        (64.0, 0.85),
        (66.5, 0.6),
        (78.0, 0.5 * math.exp(-2.0)),
    ],
)
def test_score_tm_diff(tm_rev, expected):
    assert score_tm_diff(60.0, tm_rev) == pytest.approx(expected)


def test_score_tm_diff_missing_tm():
    assert score_tm_diff(None, 60.0) == 0.5


def test_structure_scores_decay_below_threshold():
    assert score_hairpin(-2.0) == 1.0
    assert score_hairpin(-4.0) == pytest.approx(math.exp(-0.8))
    assert score_homodimer(-8.0) == pytest.approx(math.exp(-1.0))
    assert score_heterodimer(-8.0, threshold=-5.0) == pytest.approx(math.exp(-1.5))


def test_score_off_target():
    assert score_off_target(0.0) == 1.0
    assert score_off_target(0.7) == pytest.approx(0.3)


@pytest.mark.parametrize("seq, expected", [("ATAC", 1.0), ("ATGC", 0.85), ("ATAT", 0.5)])
def test_score_gc_clamp(seq, expected):
    assert score_gc_clamp(seq) == expected


def test_homopolymer_runs():
    assert longest_homopolymer("") == 0
    assert longest_homopolymer("AAAAGCCT") == 4
    assert score_homopolymer("ATGAAAG") == 1.0
    assert score_homopolymer("ATAAAAAG") == pytest.approx(0.7)
    assert score_homopolymer("GAAAAAAAAAAG") == pytest.approx(0.3)


def test_three_prime_composition_of_clamped_end():
    """
    A GC-clamped end with a slightly loose pentamer scores high.
    """
    assert score_three_prime_composition("ATGCGTACGTAGCTAGCTAGC", -5.4) == pytest.approx(0.915)


def test_three_prime_composition_of_at_rich_end():
    """
    An A/T run at the 3' end loses most of the pattern score.
    """
    assert score_three_prime_composition("GCGCGCAAAAT") == pytest.approx(0.6)


def test_score_g_quadruplex():
    assert score_g_quadruplex("ATGCGTACGTAGC") == 1.0
    assert score_g_quadruplex("GGGTTGGGTTGGGTTGGG") == 0.0
