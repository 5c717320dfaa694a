from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from primer_thermo.rules import validate_sequence

__all__ = ["GQuadruplexAnalysis", "analyze_g_quadruplex", "G4_MOTIF"]

# Intramolecular quadruplex: four G-tracts of 3+ separated by loops of 1-7 nt.
G4_MOTIF = re.compile(r"G{3,}[ACGT]{1,7}G{3,}[ACGT]{1,7}G{3,}[ACGT]{1,7}G{3,}")
_GGGG = re.compile(r"GGGG")
_GGG_RUN = re.compile(r"GGG+")


@dataclass(frozen=True, slots=True)
class GQuadruplexAnalysis:
    """
    G-quadruplex risk of a primer.

    Attributes
    ----------
    score : float
        1.0 (ok), 0.6 (caution), 0.2 (warning) or 0.0 (critical).
    risk : str
        ``"ok"``, ``"caution"``, ``"warning"`` or ``"critical"``.
    motif : str, optional
        The matched quadruplex motif, when present.
    ggg_runs : tuple of str
        Every run of three or more G.
    """
    score: float
    risk: str
    motif: Optional[str]
    ggg_runs: Tuple[str, ...] = ()

    @property
    def has_g4_motif(self) -> bool:
        return self.motif is not None


def analyze_g_quadruplex(seq: str) -> GQuadruplexAnalysis:
    """
    Pattern-based G-quadruplex risk.

    A canonical four-tract motif is critical. Otherwise a GGGG run is a
    warning and two or more GGG runs a caution (inter-strand quadruplex).

    Raises
    ------
    InvalidSequenceError
        If ``seq`` is not a valid DNA sequence.
    """
    canonical = validate_sequence(seq)
    runs = tuple(_GGG_RUN.findall(canonical))

    match = G4_MOTIF.search(canonical)
    if match is not None:
        return GQuadruplexAnalysis(0.0, "critical", match.group(0), runs)
    if _GGGG.search(canonical):
        return GQuadruplexAnalysis(0.2, "warning", None, runs)
    if len(runs) >= 2:
        return GQuadruplexAnalysis(0.6, "caution", None, runs)

    return GQuadruplexAnalysis(1.0, "ok", None, runs)
