from primer_thermo.folding.fold_result import (
    DG_TIE_EPSILON,
    NO_STRUCTURE_THRESHOLD,
    FoldingConfig,
    FoldResult,
    StructureElement,
    StructureKind,
    dimer_dotbracket,
    is_better_candidate,
    pairs_to_dotbracket,
)
from primer_thermo.folding.fold_api import (
    MODE_HAIRPIN,
    MODE_HETERODIMER,
    MODE_HOMODIMER,
    fold_dimer,
    fold_hairpin,
)

__all__ = [
    "DG_TIE_EPSILON",
    "NO_STRUCTURE_THRESHOLD",
    "FoldingConfig",
    "FoldResult",
    "StructureElement",
    "StructureKind",
    "MODE_HAIRPIN",
    "MODE_HETERODIMER",
    "MODE_HOMODIMER",
    "dimer_dotbracket",
    "fold_dimer",
    "fold_hairpin",
    "is_better_candidate",
    "pairs_to_dotbracket",
]
