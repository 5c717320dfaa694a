from __future__ import annotations
import math
from dataclasses import dataclass

from primer_thermo.errors import InvalidConfigurationError

__all__ = ["PiecewiseLogistic", "ACCEPTABLE_EDGE_SCORE", "NEUTRAL_SCORE", "clamp_unit"]

# Score at the outer edge of the acceptable band.
ACCEPTABLE_EDGE_SCORE = 0.7

# Score given to a metric that could not be computed (NaN).
NEUTRAL_SCORE = 0.5


def clamp_unit(value: float) -> float:
    """Clamp ``value`` into [0, 1]; NaN becomes `NEUTRAL_SCORE`."""
    if math.isnan(value):
        return NEUTRAL_SCORE

    return min(1.0, max(0.0, value))


@dataclass(frozen=True, slots=True)
class PiecewiseLogistic:
    """
    Response curve mapping a raw metric onto a [0, 1] sub-score.

    Inside ``[optimal_low, optimal_high]`` the score is 1.0. Across the
    acceptable band it falls linearly to 0.7 at ``acceptable_low`` /
    ``acceptable_high``. Beyond the band a logistic tail
    ``1.4 * 0.7 / (1 + exp(k * excess))`` takes over; it equals 0.7 at the
    band edge and decays towards ``floor``. ``k`` is ``steepness_low`` below the
    band and ``steepness_high`` above it.

    Attributes
    ----------
    optimal_low, optimal_high : float
        Range scored 1.0.
    acceptable_low, acceptable_high : float
        Outer edges of the linear band.
    steepness_low, steepness_high : float
        Decay rates of the lower and upper logistic tails.
    floor : float
        Lowest score the tails reach.
    """
    optimal_low: float
    optimal_high: float
    acceptable_low: float
    acceptable_high: float
    steepness_low: float = 0.5
    steepness_high: float = 0.5
    floor: float = 0.0

    def __post_init__(self) -> None:
        if not (self.acceptable_low <= self.optimal_low <= self.optimal_high <= self.acceptable_high):
            raise InvalidConfigurationError(
                "PiecewiseLogistic requires acceptable_low <= optimal_low <= optimal_high <= acceptable_high."
            )
        if self.steepness_low < 0 or self.steepness_high < 0:
            raise InvalidConfigurationError("Steepness must be non-negative.")
        if not 0.0 <= self.floor <= ACCEPTABLE_EDGE_SCORE:
            raise InvalidConfigurationError(f"floor must lie in [0, {ACCEPTABLE_EDGE_SCORE}].")

    @classmethod
    def symmetric(
        cls, optimal: tuple, acceptable: tuple, steepness: float = 0.5, floor: float = 0.0
    ) -> "PiecewiseLogistic":
        """Curve with the same steepness on both tails."""
        return cls(optimal[0], optimal[1], acceptable[0], acceptable[1], steepness, steepness, floor)

    def _tail(self, excess: float, steepness: float) -> float:
        # exp overflows for very large arguments; the tail is at its floor there.
        exponent = steepness * excess
        if exponent > 700:
            return self.floor
        tail = 2.0 * ACCEPTABLE_EDGE_SCORE / (1.0 + math.exp(exponent))

        return max(self.floor, tail)

    def score(self, value: float) -> float:
        """Sub-score of ``value``; NaN scores `NEUTRAL_SCORE`."""
        if math.isnan(value):
            return NEUTRAL_SCORE

        if self.optimal_low <= value <= self.optimal_high:
            return 1.0

        edge_drop = 1.0 - ACCEPTABLE_EDGE_SCORE
        if value < self.optimal_low:
            if value >= self.acceptable_low:
                ratio = (value - self.acceptable_low) / (self.optimal_low - self.acceptable_low)
                return clamp_unit(ACCEPTABLE_EDGE_SCORE + edge_drop * ratio)
            return clamp_unit(self._tail(self.acceptable_low - value, self.steepness_low))

        if value <= self.acceptable_high:
            ratio = (self.acceptable_high - value) / (self.acceptable_high - self.optimal_high)
            return clamp_unit(ACCEPTABLE_EDGE_SCORE + edge_drop * ratio)

        return clamp_unit(self._tail(value - self.acceptable_high, self.steepness_high))

    __call__ = score
