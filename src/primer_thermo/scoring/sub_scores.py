"""
Per-metric sub-scores.

Each function maps one raw primer metric onto [0, 1]. Continuous metrics use
a `PiecewiseLogistic` curve or an exponential penalty beyond a threshold;
discrete ones use step or capped-penalty rules. Every function is total: a
NaN input scores 0.5 instead of raising.
"""
from __future__ import annotations
import math
import re
from typing import Optional, Tuple

from primer_thermo.errors import InvalidConfigurationError
from primer_thermo.mutagenesis.g_quadruplex import analyze_g_quadruplex
from primer_thermo.scoring.response_curves import NEUTRAL_SCORE, PiecewiseLogistic, clamp_unit

__all__ = [
    "TM_CURVE",
    "GC_CURVE",
    "LENGTH_CURVE",
    "score_tm",
    "score_gc",
    "score_length",
    "score_terminal_3prime_dg",
    "score_tm_diff",
    "score_hairpin",
    "score_homodimer",
    "score_heterodimer",
    "score_off_target",
    "score_gc_clamp",
    "score_homopolymer",
    "score_three_prime_composition",
    "score_g_quadruplex",
    "longest_homopolymer",
]

TM_CURVE = PiecewiseLogistic.symmetric((55.0, 60.0), (50.0, 65.0), steepness=0.5)
GC_CURVE = PiecewiseLogistic.symmetric((40.0, 60.0), (30.0, 70.0), steepness=0.15)
LENGTH_CURVE = PiecewiseLogistic.symmetric((18.0, 24.0), (15.0, 30.0), steepness=0.3)

# Optimal 3'-pentamer ΔG window (kcal/mol).
TERMINAL_DG_OPTIMAL = (-11.0, -6.0)


def _is_nan(value) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _widen(curve: PiecewiseLogistic, optimal: Optional[Tuple[float, float]]) -> PiecewiseLogistic:
    """Curve with ``optimal`` replacing the default optimum, keeping the band width."""
    if optimal is None:
        return curve
    low, high = float(optimal[0]), float(optimal[1])
    return PiecewiseLogistic(
        low,
        high,
        low - (curve.optimal_low - curve.acceptable_low),
        high + (curve.acceptable_high - curve.optimal_high),
        curve.steepness_low,
        curve.steepness_high,
        curve.floor,
    )


def score_tm(tm: Optional[float], optimal: Optional[Tuple[float, float]] = None) -> float:
    """Melting temperature: 55–60 °C optimal, 50–65 °C acceptable."""
    if _is_nan(tm):
        return NEUTRAL_SCORE
    return _widen(TM_CURVE, optimal).score(tm)


def score_gc(gc: Optional[float], optimal: Optional[Tuple[float, float]] = None) -> float:
    """
    GC content in percent: 40–60 % optimal, 30–70 % acceptable.

    Raises
    ------
    InvalidConfigurationError
        If ``gc`` lies outside [0, 100].
    """
    if _is_nan(gc):
        return NEUTRAL_SCORE
    if not 0.0 <= gc <= 100.0:
        raise InvalidConfigurationError(f"GC content must be a percentage in [0, 100], got {gc}.")
    return _widen(GC_CURVE, optimal).score(gc)


def score_length(length: Optional[float], optimal: Optional[Tuple[float, float]] = None) -> float:
    """Primer length: 18–24 nt optimal, 15–30 nt acceptable."""
    if _is_nan(length):
        return NEUTRAL_SCORE
    return _widen(LENGTH_CURVE, optimal).score(length)


def score_terminal_3prime_dg(delta_g: Optional[float]) -> float:
    """
    3'-end stability. −11 to −6 kcal/mol scores 1.0; looser ends decay with
    ``exp(-0.3 * excess)`` and tighter ones with the milder ``exp(-0.15 * excess)``.
    """
    if _is_nan(delta_g):
        return NEUTRAL_SCORE
    low, high = TERMINAL_DG_OPTIMAL
    if low <= delta_g <= high:
        return 1.0
    if delta_g > high:
        return clamp_unit(math.exp(-0.3 * (delta_g - high)))

    return clamp_unit(math.exp(-0.15 * (low - delta_g)))


def score_tm_diff(tm_fwd: Optional[float], tm_rev: Optional[float]) -> float:
    """
    Tm difference of a primer pair: no penalty up to 3 °C, mild to 5 °C,
    moderate to 8 °C and exponential beyond.
    """
    if _is_nan(tm_fwd) or _is_nan(tm_rev):
        return NEUTRAL_SCORE
    diff = abs(tm_fwd - tm_rev)
    if diff <= 3.0:
        return 1.0
    if diff <= 5.0:
        return 0.9 - 0.05 * (diff - 3.0)
    if diff <= 8.0:
        return 0.7 - 0.2 * (diff - 5.0) / 3.0

    return clamp_unit(0.5 * math.exp(-0.2 * (diff - 8.0)))


def _threshold_decay(delta_g: Optional[float], threshold: float, steepness: float) -> float:
    if _is_nan(delta_g):
        return NEUTRAL_SCORE
    if delta_g >= threshold:
        return 1.0
    return clamp_unit(math.exp(-steepness * (threshold - delta_g)))


def score_hairpin(delta_g: Optional[float], threshold: float = -3.0) -> float:
    """Hairpin ΔG: 1.0 at or above ``threshold``, ``exp(-0.8 * excess)`` below."""
    return _threshold_decay(delta_g, threshold, 0.8)


def score_homodimer(delta_g: Optional[float], threshold: float = -6.0) -> float:
    """Self-dimer ΔG: 1.0 at or above ``threshold``, ``exp(-0.5 * excess)`` below."""
    return _threshold_decay(delta_g, threshold, 0.5)


def score_heterodimer(delta_g: Optional[float], threshold: float = -6.0) -> float:
    """Cross-dimer ΔG: 1.0 at or above ``threshold``, ``exp(-0.5 * excess)`` below."""
    return _threshold_decay(delta_g, threshold, 0.5)


def score_off_target(penalty: Optional[float]) -> float:
    """``1 - penalty``."""
    if _is_nan(penalty):
        return NEUTRAL_SCORE
    return clamp_unit(1.0 - penalty)


def score_gc_clamp(seq: str) -> float:
    """One G/C in the last two bases scores 1.0, two 0.85, none 0.5."""
    gc_last2 = sum(1 for base in seq[-2:].upper() if base in "GC")
    if gc_last2 == 1:
        return 1.0
    if gc_last2 == 2:
        return 0.85

    return 0.5


def longest_homopolymer(seq: str) -> int:
    """Length of the longest run of one base (0 for an empty string)."""
    longest = 0
    run = 0
    previous = ""
    for base in seq.upper():
        run = run + 1 if base == previous else 1
        previous = base
        longest = max(longest, run)

    return longest


def score_homopolymer(seq: str, max_run: int = 3) -> float:
    """Runs longer than ``max_run`` lose 0.15 per extra base, down to 0.3."""
    excess = longest_homopolymer(seq) - max_run
    if excess <= 0:
        return 1.0

    return max(0.3, 1.0 - 0.15 * excess)


_POLY_AT = re.compile(r"[AT]{4,}")
_TRIPLE_A_OR_T = re.compile(r"AAA|TTT")


def score_three_prime_composition(seq: str, terminal_dg: Optional[float] = None) -> float:
    """
    Combined 3'-end quality.

    Weighted (0.40 / 0.35 / 0.25) mix of the GC clamp, a linear reading of
    the terminal ΔG and a pattern score penalizing A/T runs and an A/T-rich
    pentamer. Rounded to 0.001.
    """
    upper = seq.upper()
    last5 = upper[-5:]
    gc_last5 = sum(1 for base in last5 if base in "GC")

    clamp_score = score_gc_clamp(upper)

    dg_score = 1.0
    if not _is_nan(terminal_dg):
        low, high = TERMINAL_DG_OPTIMAL
        if terminal_dg > high:
            dg_score = max(0.2, 1.0 - 0.12 * (terminal_dg - high))
        elif terminal_dg < low:
            dg_score = max(0.5, 1.0 - 0.05 * (low - terminal_dg))

    pattern_score = 1.0
    if _POLY_AT.search(last5):
        pattern_score -= 0.40
    if not upper.endswith(("G", "C")):
        pattern_score -= 0.15
    if gc_last5 <= 1:
        pattern_score -= 0.15
    if _TRIPLE_A_OR_T.search(last5):
        pattern_score -= 0.10
    pattern_score = max(0.0, pattern_score)

    combined = 0.40 * clamp_score + 0.35 * dg_score + 0.25 * pattern_score

    return clamp_unit(round(combined, 3))


def score_g_quadruplex(seq: str) -> float:
    """G-quadruplex risk score (see `analyze_g_quadruplex`)."""
    return analyze_g_quadruplex(seq).score
