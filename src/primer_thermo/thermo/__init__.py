from primer_thermo.thermo.conditions import DEFAULT_CONDITIONS, TmConditions
from primer_thermo.thermo.salt import (
    free_magnesium,
    owczarzy_inverse_tm_correction,
    santalucia_entropy_correction,
    sodium_equivalent,
)
from primer_thermo.thermo.tm_calculator import (
    MIN_TM_LENGTH,
    ThermoResult,
    calculate_tm,
    classify_terminal_3prime,
    duplex_tm,
    gc_content,
    nearest_neighbor_sum,
    terminal_3prime_dg,
)

__all__ = [
    "DEFAULT_CONDITIONS",
    "MIN_TM_LENGTH",
    "ThermoResult",
    "TmConditions",
    "calculate_tm",
    "classify_terminal_3prime",
    "duplex_tm",
    "free_magnesium",
    "gc_content",
    "nearest_neighbor_sum",
    "owczarzy_inverse_tm_correction",
    "santalucia_entropy_correction",
    "sodium_equivalent",
    "terminal_3prime_dg",
]
