from primer_thermo.utils.energy_utils import (
    R_CAL,
    KELVIN_OFFSET,
    add_terms,
    calculate_delta_g,
    celsius_to_kelvin,
    lookup_loop_baseline_js,
)
from primer_thermo.utils.nucleotide_utils import (
    complement,
    complement_strand,
    flip_key,
    is_watson_crick,
    reverse_complement,
    stack_key,
)

__all__ = [
    "R_CAL",
    "KELVIN_OFFSET",
    "add_terms",
    "calculate_delta_g",
    "celsius_to_kelvin",
    "lookup_loop_baseline_js",
    "complement",
    "complement_strand",
    "flip_key",
    "is_watson_crick",
    "reverse_complement",
    "stack_key",
]
