from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Final, Optional, Tuple

from primer_thermo.context import ThermoContext
from primer_thermo.folding import FoldingConfig, FoldResult, fold_dimer, fold_hairpin

logger = logging.getLogger(__name__)

__all__ = [
    "DimerSeverity",
    "DimerAssessment",
    "SEVERITY_THRESHOLDS",
    "THREE_PRIME_WINDOW",
    "classify_dimer_severity",
    "evaluate_hairpin",
    "evaluate_homodimer",
    "evaluate_heterodimer",
]

# Bases at the 3' end whose pairing makes a structure extendable by the polymerase.
THREE_PRIME_WINDOW: Final[int] = 3


class DimerSeverity(IntEnum):
    """Ordered risk level of a secondary structure or dimer."""
    NONE = 0
    MILD = 1
    MODERATE = 2
    SEVERE = 3


# (structure, involves 3' end) -> (ideal, warning, critical) ΔG bounds in kcal/mol.
SEVERITY_THRESHOLDS: Final[Dict[Tuple[str, bool], Tuple[float, float, float]]] = {
    ("hairpin", True): (-2.0, -3.0, -4.0),
    ("hairpin", False): (-3.0, -5.0, -6.0),
    ("homodimer", True): (-5.0, -6.0, -8.0),
    ("homodimer", False): (-6.0, -8.0, -9.0),
    ("heterodimer", True): (-5.0, -6.0, -8.0),
    ("heterodimer", False): (-6.0, -8.0, -9.0),
}

_STRUCTURE_ALIASES = {"self-dimer": "homodimer", "self_dimer": "homodimer", "cross-dimer": "heterodimer"}


@dataclass(frozen=True, slots=True)
class DimerAssessment:
    """
    Fold of a primer (or primer pair) with its risk classification.

    Attributes
    ----------
    fold : FoldResult
        The minimum-free-energy structure.
    severity : DimerSeverity
        Risk level from `classify_dimer_severity`.
    involves_3prime : bool
        True when one of the last three bases of a primer is paired.
    """
    fold: FoldResult
    severity: DimerSeverity
    involves_3prime: bool

    @property
    def delta_g(self) -> float:
        return self.fold.delta_g


def classify_dimer_severity(delta_g: float, structure: str = "homodimer", involves_3prime: bool = False) -> DimerSeverity:
    """
    Map a structure ΔG onto a severity level.

    A ΔG at or above the ideal bound is harmless, at or above the warning
    bound mild, at or above the critical bound moderate, and below it severe.
    More negative energies never give a lower severity.

    Parameters
    ----------
    delta_g : float
        Structure free energy in kcal/mol.
    structure : str
        ``"hairpin"``, ``"homodimer"`` (alias ``"self-dimer"``) or ``"heterodimer"``.
    involves_3prime : bool
        Whether the 3' end takes part; tightens the bounds.
    """
    kind = _STRUCTURE_ALIASES.get(structure, structure)
    try:
        ideal, warning, critical = SEVERITY_THRESHOLDS[(kind, bool(involves_3prime))]
    except KeyError:
        raise ValueError(f"Unknown structure type '{structure}'.") from None

    if delta_g >= ideal:
        return DimerSeverity.NONE
    if delta_g >= warning:
        return DimerSeverity.MILD
    if delta_g >= critical:
        return DimerSeverity.MODERATE

    return DimerSeverity.SEVERE


def _paired_in_3prime(positions, seq_len: int) -> bool:
    start = seq_len - THREE_PRIME_WINDOW
    return any(pos >= start for pos in positions)


def evaluate_hairpin(
    seq: str, config: Optional[FoldingConfig] = None, context: Optional[ThermoContext] = None
) -> DimerAssessment:
    """Fold ``seq`` on itself and classify the hairpin."""
    fold = fold_hairpin(seq, config, context)
    paired = [p for pr in fold.pairs for p in pr.as_tuple()]
    involves = _paired_in_3prime(paired, len(fold.sequences[0]))

    return DimerAssessment(fold, classify_dimer_severity(fold.delta_g, "hairpin", involves), involves)


def evaluate_homodimer(
    seq: str, config: Optional[FoldingConfig] = None, context: Optional[ThermoContext] = None
) -> DimerAssessment:
    """Fold ``seq`` against an antiparallel copy of itself and classify the self-dimer."""
    fold = fold_dimer(seq, seq, config, context)
    seq_len = len(fold.sequences[0])
    paired = [pr.base_i for pr in fold.pairs] + [pr.base_j for pr in fold.pairs]
    involves = _paired_in_3prime(paired, seq_len)

    return DimerAssessment(fold, classify_dimer_severity(fold.delta_g, "homodimer", involves), involves)


def evaluate_heterodimer(
    seq_a: str, seq_b: str, config: Optional[FoldingConfig] = None, context: Optional[ThermoContext] = None
) -> DimerAssessment:
    """Fold ``seq_a`` against an antiparallel ``seq_b`` and classify the cross-dimer."""
    fold = fold_dimer(seq_a, seq_b, config, context)
    len_a, len_b = (len(s) for s in fold.sequences)
    involves = _paired_in_3prime([pr.base_i for pr in fold.pairs], len_a) or _paired_in_3prime(
        [pr.base_j for pr in fold.pairs], len_b
    )
    severity = classify_dimer_severity(fold.delta_g, "heterodimer", involves)
    if severity >= DimerSeverity.MODERATE:
        logger.debug(f"Heterodimer {fold.sequences[0]}/{fold.sequences[1]} is {severity.name} ({fold.delta_g})")

    return DimerAssessment(fold, severity, involves)
