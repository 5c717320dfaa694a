from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Final, Mapping, Optional, Tuple

from primer_thermo.scoring.presets import WeightsLike, resolve_weights
from primer_thermo.scoring.response_curves import NEUTRAL_SCORE, clamp_unit

__all__ = ["QUALITY_BANDS", "CompositeScore", "ScoreContribution", "classify_quality", "composite_score"]

# Lower bound of each quality band on the [0, 1] score, best first.
QUALITY_BANDS: Final[Tuple[Tuple[float, str], ...]] = (
    (0.90, "excellent"),
    (0.75, "good"),
    (0.60, "acceptable"),
    (0.40, "marginal"),
)


@dataclass(frozen=True, slots=True)
class ScoreContribution:
    """Sub-score, its weight and ``score * weight``."""
    score: float
    weight: float
    contribution: float


@dataclass(frozen=True, slots=True)
class CompositeScore:
    """
    Weighted combination of sub-scores.

    Attributes
    ----------
    score : float
        Normalized score in [0, 1].
    percent : int
        ``score`` on a 0–100 scale, rounded.
    quality : str
        Band of ``score``: excellent, good, acceptable, marginal or poor.
    breakdown : dict
        Per-key `ScoreContribution` of every sub-score that was weighted.
    total_weight : float
        Sum of the weights actually used.
    """
    score: float
    percent: int
    quality: str
    breakdown: Dict[str, ScoreContribution] = field(default_factory=dict)
    total_weight: float = 0.0


def classify_quality(score: float) -> str:
    """Quality band of a [0, 1] score."""
    for lower, label in QUALITY_BANDS:
        if score >= lower:
            return label

    return "poor"


def composite_score(
    subscores: Mapping[str, Optional[float]],
    weights: Optional[WeightsLike] = None,
    *,
    application: Optional[str] = None,
) -> CompositeScore:
    """
    Normalized weighted mean of sub-scores.

    Only keys present in ``subscores`` with a positive weight count; the sum
    is divided by their total weight, so the result does not change when all
    weights are scaled by the same positive factor. Missing (``None``) or NaN
    sub-scores count as 0.5, out-of-range ones are clamped.

    Parameters
    ----------
    subscores : Mapping[str, float]
        Sub-score per key (see `build_primer_subscores`).
    weights : str or Mapping[str, float], optional
        Preset name or explicit weights; the default preset when omitted.
    application : str, optional
        Application whose multipliers are applied to the weights.

    Raises
    ------
    InvalidConfigurationError
        For a malformed weight configuration (negative weight, zero total,
        unknown preset).
    """
    resolved = resolve_weights(weights, application)

    total = 0.0
    total_weight = 0.0
    breakdown: Dict[str, ScoreContribution] = {}
    for key, raw in subscores.items():
        weight = resolved.get(key, 0.0)
        if weight <= 0:
            continue
        value = NEUTRAL_SCORE if raw is None else clamp_unit(float(raw))
        total += value * weight
        total_weight += weight
        breakdown[key] = ScoreContribution(round(value, 3), weight, round(value * weight, 3))

    normalized = clamp_unit(total / total_weight) if total_weight > 0 else 0.0

    return CompositeScore(
        score=round(normalized, 4),
        percent=int(round(normalized * 100)),
        quality=classify_quality(normalized),
        breakdown=breakdown,
        total_weight=round(total_weight, 6),
    )
