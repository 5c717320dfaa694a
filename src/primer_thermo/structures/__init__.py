from primer_thermo.structures.pairing import Pair
from primer_thermo.structures.tri_matrix import TriMatrix

__all__ = [
    "Pair",
    "TriMatrix",
]
