from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Final, Iterable, Mapping, Optional, Tuple, Union

from primer_thermo.errors import InvalidConfigurationError

logger = logging.getLogger(__name__)

__all__ = [
    "OffTargetHit",
    "OffTargetSummary",
    "classify_off_target_risk",
    "off_target_penalty",
    "summarize_off_targets",
]

# Hits with at most this many mismatches are likely to prime.
HIGH_RISK_MAX_MISMATCHES: Final[int] = 1
MEDIUM_RISK_MISMATCHES: Final[int] = 2

_VALID_STRANDS = frozenset({"+", "-"})


@dataclass(frozen=True, slots=True)
class OffTargetHit:
    """
    One binding site reported by an external off-target search.

    Attributes
    ----------
    position : int
        Start of the site on the reference (0-based).
    strand : str
        ``"+"`` or ``"-"``.
    mismatch_count : int
        Mismatches between the primer and the site (``>= 0``).
    """
    position: int
    strand: str
    mismatch_count: int

    def __post_init__(self) -> None:
        if self.mismatch_count < 0:
            raise InvalidConfigurationError(f"mismatch_count must be >= 0, got {self.mismatch_count}.")
        if self.position < 0:
            raise InvalidConfigurationError(f"position must be >= 0, got {self.position}.")
        if self.strand not in _VALID_STRANDS:
            raise InvalidConfigurationError(f"strand must be '+' or '-', got {self.strand!r}.")

    @classmethod
    def from_record(cls, record: Mapping) -> "OffTargetHit":
        """Build a hit from a ``{position, strand, mismatchCount}`` mapping."""
        mismatches = record.get("mismatch_count", record.get("mismatchCount"))
        if mismatches is None:
            raise InvalidConfigurationError(f"Off-target record has no mismatch count: {dict(record)}")
        try:
            position = int(record["position"])
            strand = str(record["strand"])
            mismatch_count = int(mismatches)
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidConfigurationError(f"Malformed off-target record {dict(record)}: {exc}") from exc

        return cls(position=position, strand=strand, mismatch_count=mismatch_count)


@dataclass(frozen=True, slots=True)
class OffTargetSummary:
    """
    Off-target sites grouped by risk.

    Attributes
    ----------
    high_risk, medium_risk, low_risk : int
        Sites with 0–1, 2 and 3+ mismatches.
    hits : tuple of OffTargetHit
        Sites retained after removing the intended target.
    """
    high_risk: int = 0
    medium_risk: int = 0
    low_risk: int = 0
    hits: Tuple[OffTargetHit, ...] = field(default_factory=tuple)

    @property
    def total(self) -> int:
        return self.high_risk + self.medium_risk + self.low_risk


def classify_off_target_risk(mismatch_count: int) -> str:
    """``"high"`` for 0–1 mismatches, ``"medium"`` for 2, ``"low"`` otherwise."""
    if mismatch_count <= HIGH_RISK_MAX_MISMATCHES:
        return "high"
    if mismatch_count == MEDIUM_RISK_MISMATCHES:
        return "medium"

    return "low"


def summarize_off_targets(
    hits: Iterable[Union[OffTargetHit, Mapping]],
    intended: Optional[Tuple[int, str]] = None,
) -> OffTargetSummary:
    """
    Count off-target sites by risk class.

    Parameters
    ----------
    hits : iterable
        `OffTargetHit` objects or ``{position, strand, mismatchCount}`` records.
    intended : tuple, optional
        ``(position, strand)`` of the intended binding site, which is not an
        off-target and is dropped.

    Raises
    ------
    InvalidConfigurationError
        If a record has a negative mismatch count or is malformed.
    """
    counts = {"high": 0, "medium": 0, "low": 0}
    kept = []
    for raw in hits:
        hit = raw if isinstance(raw, OffTargetHit) else OffTargetHit.from_record(raw)
        if intended is not None and (hit.position, hit.strand) == tuple(intended):
            continue
        counts[classify_off_target_risk(hit.mismatch_count)] += 1
        kept.append(hit)

    return OffTargetSummary(
        high_risk=counts["high"], medium_risk=counts["medium"], low_risk=counts["low"], hits=tuple(kept)
    )


def off_target_penalty(summary: OffTargetSummary) -> float:
    """
    Specificity penalty in [0, 1]; 0 means no competing sites.

    Near-perfect sites set a floor: three or more give 1.0, two 0.9 and one
    0.7. The weaker sites add 0.15 per two-mismatch site and 0.02 per distant
    site, capped at 1.0. The penalty is the larger of the two, so adding a hit
    of any class never lowers it.
    """
    if summary.high_risk >= 3:
        floor = 1.0
    elif summary.high_risk == 2:
        floor = 0.9
    elif summary.high_risk == 1:
        floor = 0.7
    else:
        floor = 0.0

    return max(floor, min(1.0, 0.15 * summary.medium_risk + 0.02 * summary.low_risk))
