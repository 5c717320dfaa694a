from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum
from typing import Final, List, Optional, Sequence, Tuple

from primer_thermo.errors import InvalidConfigurationError
from primer_thermo.rules.constraints import MAX_LOOP_SIZE, MIN_HAIRPIN_UNPAIRED
from primer_thermo.structures import Pair
from primer_thermo.utils.energy_utils import celsius_to_kelvin

__all__ = [
    "DG_TIE_EPSILON",
    "NO_STRUCTURE_THRESHOLD",
    "FoldingConfig",
    "FoldResult",
    "StructureElement",
    "StructureKind",
    "is_better_candidate",
    "pairs_to_dotbracket",
    "dimer_dotbracket",
]

# Two candidate energies closer than this are a tie (half the 0.01 kcal/mol reporting resolution).
DG_TIE_EPSILON: Final[float] = 0.005

# A fold is only reported as existing when its ΔG is at or below this value (kcal/mol).
NO_STRUCTURE_THRESHOLD: Final[float] = -1.0


class StructureKind(Enum):
    """
    Kinds of structural element reported in a fold descriptor.

    HAIRPIN       : Loop closed by a single pair ``(i, j)``.
    STACK         : Pair ``(i, j)`` stacked directly on ``inner``.
    BULGE         : Unpaired bases on one side between ``(i, j)`` and ``inner``.
    INTERNAL_LOOP : Unpaired bases on both sides between ``(i, j)`` and ``inner``.
    MULTILOOP     : Loop closed by ``(i, j)`` holding two or more helices.
    EXTERIOR      : Helix end exposed to the exterior (initiation and terminal terms).
    """
    HAIRPIN = "hairpin"
    STACK = "stack"
    BULGE = "bulge"
    INTERNAL_LOOP = "internal_loop"
    MULTILOOP = "multiloop"
    EXTERIOR = "exterior"


@dataclass(frozen=True, slots=True)
class StructureElement:
    """
    One element of a folded structure and its free-energy contribution.

    Attributes
    ----------
    kind : StructureKind
        Element type.
    i, j : int
        Closing pair. For dimers ``i`` indexes the first strand and ``j`` the
        second strand (both 5'→3').
    inner : tuple of int, optional
        Enclosed pair for stacks, bulges and internal loops.
    delta_g : float
        Contribution in kcal/mol, rounded to 0.01.
    """
    kind: StructureKind
    i: int
    j: int
    inner: Optional[Tuple[int, int]] = None
    delta_g: float = 0.0


@dataclass(frozen=True, slots=True)
class FoldingConfig:
    """
    Settings shared by the hairpin and dimer engines.

    Attributes
    ----------
    temp_c : float
        Folding temperature in °C.
    min_hairpin_loop : int
        Minimum number of unpaired bases in a hairpin loop.
    max_loop : int
        Largest bulge/internal loop (total unpaired nt) explored.
    no_structure_threshold : float
        ΔG (kcal/mol) a fold must reach to be reported as existing.
    verbose : bool
        Show progress bars regardless of log level.
    """
    temp_c: float = 37.0
    min_hairpin_loop: int = MIN_HAIRPIN_UNPAIRED
    max_loop: int = MAX_LOOP_SIZE
    no_structure_threshold: float = NO_STRUCTURE_THRESHOLD
    verbose: bool = False

    def __post_init__(self) -> None:
        if not math.isfinite(self.temp_c) or self.temp_c <= -273.15:
            raise InvalidConfigurationError(f"temp_c must be above absolute zero, got {self.temp_c}.")
        if self.min_hairpin_loop < MIN_HAIRPIN_UNPAIRED:
            raise InvalidConfigurationError(f"min_hairpin_loop must be >= {MIN_HAIRPIN_UNPAIRED}.")
        if self.max_loop < 0:
            raise InvalidConfigurationError("max_loop must be >= 0.")

    @property
    def temp_k(self) -> float:
        return celsius_to_kelvin(self.temp_c)


@dataclass(frozen=True, slots=True)
class FoldResult:
    """
    Minimum-free-energy structure of one strand (hairpin) or two strands (dimer).

    Attributes
    ----------
    delta_g : float
        ΔG of the MFE structure in kcal/mol, rounded to 0.01; 0.0 when no pair forms.
    structure : tuple of StructureElement
        Decomposition of the structure; the element energies add up to ``delta_g``
        up to rounding.
    exists : bool
        True when ``delta_g`` is at or below the configured threshold.
    mode : str
        ``"hairpin"``, ``"homodimer"`` or ``"heterodimer"``.
    sequences : tuple of str
        Folded sequence(s), 5'→3'.
    pairs : tuple of Pair
        Paired positions, sorted.
    dot_bracket : str
        ``"..((...))"`` for hairpins, ``"((..&..))"`` for dimers.
    parameter_set : str
        Identity of the parameter set used.
    """
    delta_g: float
    structure: Tuple[StructureElement, ...]
    exists: bool
    mode: str
    sequences: Tuple[str, ...]
    pairs: Tuple[Pair, ...]
    dot_bracket: str
    parameter_set: str

    @property
    def paired_bases(self) -> int:
        """Number of paired nucleotides (two per pair)."""
        return 2 * len(self.pairs)


def is_better_candidate(
    cand_energy: float,
    cand_pairs: int,
    cand_rank: float,
    best_energy: float,
    best_pairs: int,
    best_rank: float,
    epsilon: float = DG_TIE_EPSILON,
) -> bool:
    """
    Decide whether a DP candidate replaces the current best.

    Lower energy wins. Energies within ``epsilon`` are a tie, resolved in favour
    of fewer base pairs and then of the lower rank of the recursion case.
    """
    if math.isinf(cand_energy):
        return False
    if math.isinf(best_energy) or cand_energy < best_energy - epsilon:
        return True
    if cand_energy > best_energy + epsilon:
        return False
    if cand_pairs != best_pairs:
        return cand_pairs < best_pairs

    return cand_rank < best_rank


def pairs_to_dotbracket(seq_len: int, pairs: Sequence[Pair]) -> str:
    """Single-strand dot-bracket string for nested pairs."""
    chars = ["."] * seq_len
    for pr in pairs:
        i, j = pr.base_i, pr.base_j
        if 0 <= i < j < seq_len:
            chars[i] = "("
            chars[j] = ")"

    return "".join(chars)


def dimer_dotbracket(len_a: int, len_b: int, pairs: Sequence[Pair]) -> str:
    """
    Two-strand dot-bracket string ``"A&B"``.

    Strand A bases paired with strand B are ``(``, their partners on B are ``)``.
    """
    chars_a: List[str] = ["."] * len_a
    chars_b: List[str] = ["."] * len_b
    for pr in pairs:
        chars_a[pr.base_i] = "("
        chars_b[pr.base_j] = ")"

    return "".join(chars_a) + "&" + "".join(chars_b)
