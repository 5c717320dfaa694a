from primer_thermo.folding.dimer.dimer_fold_state import DimerFoldState, make_dimer_state, pairable_mask
from primer_thermo.folding.dimer.dimer_recurrences import DimerFoldingConfig, DimerFoldingEngine, DimerOptimum
from primer_thermo.folding.dimer.dimer_traceback import DimerTraceResult, traceback_dimer

__all__ = [
    "DimerFoldState",
    "DimerFoldingConfig",
    "DimerFoldingEngine",
    "DimerOptimum",
    "DimerTraceResult",
    "make_dimer_state",
    "pairable_mask",
    "traceback_dimer",
]
