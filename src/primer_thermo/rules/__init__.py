from primer_thermo.rules.constraints import (
    DNA_ALPHABET,
    MAX_LOOP_SIZE,
    MIN_HAIRPIN_UNPAIRED,
    can_pair,
    hairpin_size,
    is_min_hairpin_size,
    is_self_complementary,
    validate_sequence,
)

__all__ = [
    "DNA_ALPHABET",
    "MAX_LOOP_SIZE",
    "MIN_HAIRPIN_UNPAIRED",
    "can_pair",
    "hairpin_size",
    "is_min_hairpin_size",
    "is_self_complementary",
    "validate_sequence",
]
