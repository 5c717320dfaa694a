"""
Nearest-neighbor thermodynamics for PCR and mutagenesis primers.

Melting temperatures under salt corrections, minimum-free-energy hairpin and
dimer folding, and a composite primer quality score.
"""
from primer_thermo.errors import (
    InvalidConfigurationError,
    InvalidSequenceError,
    PrimerThermoError,
    UnsupportedParameterCombinationError,
)
from primer_thermo.context import ThermoContext, create_context, get_default_context, use_revised_parameters
from primer_thermo.thermo import TmConditions, ThermoResult, calculate_tm, terminal_3prime_dg
from primer_thermo.folding import FoldingConfig, FoldResult, fold_dimer, fold_hairpin
from primer_thermo.evaluation import classify_dimer_severity, evaluate_hairpin, evaluate_heterodimer, evaluate_homodimer
from primer_thermo.scoring import composite_score, evaluate_pair, evaluate_primer
from primer_thermo.mutagenesis import calculate_mismatch_tm, select_codon

__version__ = "0.1.0"

__all__ = [
    "InvalidConfigurationError",
    "InvalidSequenceError",
    "PrimerThermoError",
    "UnsupportedParameterCombinationError",
    "ThermoContext",
    "create_context",
    "get_default_context",
    "use_revised_parameters",
    "TmConditions",
    "ThermoResult",
    "calculate_tm",
    "terminal_3prime_dg",
    "FoldingConfig",
    "FoldResult",
    "fold_dimer",
    "fold_hairpin",
    "classify_dimer_severity",
    "evaluate_hairpin",
    "evaluate_heterodimer",
    "evaluate_homodimer",
    "composite_score",
    "evaluate_pair",
    "evaluate_primer",
    "calculate_mismatch_tm",
    "select_codon",
    "__version__",
]
