from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

from primer_thermo.context import ThermoContext
from primer_thermo.evaluation import DimerAssessment, evaluate_hairpin, evaluate_homodimer
from primer_thermo.folding import FoldingConfig

__all__ = ["MutantStructureComparison", "compare_mutant_structure"]


@dataclass(frozen=True, slots=True)
class MutantStructureComparison:
    """
    Secondary structure of a mutagenic primer, optionally against the original.

    Attributes
    ----------
    hairpin, homodimer : DimerAssessment
        Assessments of the mutant primer.
    original_hairpin, original_homodimer : DimerAssessment, optional
        Assessments of the original primer, when given.
    hairpin_ddg, homodimer_ddg : float, optional
        ``ΔG(mutant) − ΔG(original)``; negative means the mutant folds more stably.
    introduces_structure : bool
        The mutant's hairpin or self-dimer is more severe than the original's.
    """
    hairpin: DimerAssessment
    homodimer: DimerAssessment
    original_hairpin: Optional[DimerAssessment] = None
    original_homodimer: Optional[DimerAssessment] = None
    hairpin_ddg: Optional[float] = None
    homodimer_ddg: Optional[float] = None
    introduces_structure: bool = False


def compare_mutant_structure(
    mutant: str,
    original: Optional[str] = None,
    config: Optional[FoldingConfig] = None,
    context: Optional[ThermoContext] = None,
) -> MutantStructureComparison:
    """
    Fold a mutagenic primer and report whether the mutation adds structure.

    Raises
    ------
    InvalidSequenceError
        If either sequence is invalid.
    """
    hairpin = evaluate_hairpin(mutant, config, context)
    homodimer = evaluate_homodimer(mutant, config, context)
    if original is None:
        return MutantStructureComparison(hairpin=hairpin, homodimer=homodimer)

    orig_hairpin = evaluate_hairpin(original, config, context)
    orig_homodimer = evaluate_homodimer(original, config, context)
    worse = hairpin.severity > orig_hairpin.severity or homodimer.severity > orig_homodimer.severity

    return MutantStructureComparison(
        hairpin=hairpin,
        homodimer=homodimer,
        original_hairpin=orig_hairpin,
        original_homodimer=orig_homodimer,
        hairpin_ddg=round(hairpin.delta_g - orig_hairpin.delta_g, 2),
        homodimer_ddg=round(homodimer.delta_g - orig_homodimer.delta_g, 2),
        introduces_structure=worse,
    )
