from primer_thermo.folding.zucker.zucker_back_pointer import ZuckerBacktrackOp, ZuckerBackPointer
from primer_thermo.folding.zucker.zucker_fold_state import ZuckerFoldState, make_fold_state
from primer_thermo.folding.zucker.zucker_recurrences import ZuckerFoldingConfig, ZuckerFoldingEngine
from primer_thermo.folding.zucker.zucker_traceback import ZuckerTraceResult, traceback_nested

__all__ = [
    "ZuckerBacktrackOp",
    "ZuckerBackPointer",
    "ZuckerFoldState",
    "ZuckerFoldingConfig",
    "ZuckerFoldingEngine",
    "ZuckerTraceResult",
    "make_fold_state",
    "traceback_nested",
]
