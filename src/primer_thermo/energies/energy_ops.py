from __future__ import annotations

from primer_thermo.energies.energy_types import DuplexEnergies, DhDs
from primer_thermo.rules.constraints import MIN_HAIRPIN_UNPAIRED
from primer_thermo.utils import calculate_delta_g, lookup_loop_baseline_js, stack_key

DEFAULT_T_K = 310.15  # 37 °C in Kelvin

_AT_PAIRS = frozenset({"AT", "TA"})
_GC_PAIRS = frozenset({"GC", "CG"})


def terminal_term(base_x: str, base_y: str, energies: DuplexEnergies) -> DhDs:
    """
    ``(ΔH, ΔS)`` of a helix end closed by the pair ``base_x·base_y``.

    A·T ends take the terminal AT penalty, G·C ends the terminal GC term
    (zero in the revised set). Any other combination contributes nothing.
    """
    pair = base_x + base_y
    if pair in _AT_PAIRS:
        return energies.INIT_TERMINAL_AT
    if pair in _GC_PAIRS:
        return energies.INIT_TERMINAL_GC

    return 0.0, 0.0


def terminal_penalty(base_x: str, base_y: str, energies: DuplexEnergies, temp_k: float = DEFAULT_T_K) -> float:
    """Free energy of a helix end closed by ``base_x·base_y`` (see :func:`terminal_term`)."""
    return calculate_delta_g(terminal_term(base_x, base_y, energies), temp_k)


def _at_closure_penalty(base_x: str, base_y: str, energies: DuplexEnergies, temp_k: float) -> float:
    """Terminal AT penalty for loops closed by an A·T pair, zero otherwise."""
    if base_x + base_y in _AT_PAIRS:
        return calculate_delta_g(energies.INIT_TERMINAL_AT, temp_k)

    return 0.0


def stack_energy(top: str, bottom: str, energies: DuplexEnergies, temp_k: float = DEFAULT_T_K) -> float:
    """
    Calculates the stacking free energy of two adjacent Watson–Crick pairs.

    Parameters
    ----------
    top : str
        Two bases of one strand read 5'→3'.
    bottom : str
        The two partner bases read 3'→5'.
    energies : DuplexEnergies
        Parameter tables.
    temp_k : float
        Temperature in Kelvin.

    Returns
    -------
    float
        Stacking ΔG in kcal/mol, or positive infinity for a non-WC stack.
    """
    return calculate_delta_g(energies.NN_STACK.get(stack_key(top, bottom)), temp_k)


def hairpin_energy(
    base_i: int,
    base_j: int,
    seq: str,
    energies: DuplexEnergies,
    temp_k: float = DEFAULT_T_K,
) -> float:
    """
    Calculates the free energy (ΔG) of a hairpin loop closed by ``(base_i, base_j)``.

    The loop initiation comes from the hairpin table, with Jacobson–Stockmayer
    extrapolation past the last tabulated length. Triloops closed by an A·T
    pair take the terminal AT penalty.

    Returns
    -------
    float
        ΔG in kcal/mol, or positive infinity if the loop geometry is invalid.
    """
    if base_i < 0 or base_j >= len(seq) or base_i >= base_j:
        return float("inf")
    hairpin_len = base_j - base_i - 1
    if hairpin_len < MIN_HAIRPIN_UNPAIRED:
        return float("inf")

    base_hp_dh_ds = lookup_loop_baseline_js(energies.HAIRPIN, hairpin_len)
    if base_hp_dh_ds is None:
        return float("inf")
    delta_g = calculate_delta_g(base_hp_dh_ds, temp_k)

    if hairpin_len == 3:
        delta_g += _at_closure_penalty(seq[base_i], seq[base_j], energies, temp_k)

    return delta_g


def bulge_energy(top: str, bottom: str, energies: DuplexEnergies, temp_k: float = DEFAULT_T_K) -> float:
    """
    Calculates the free energy of a bulge loop between two helices.

    ``top`` runs 5'→3' from the outer pair base to the inner pair base and
    ``bottom`` runs 3'→5' over the partner bases; exactly one of them carries
    unpaired bases.

    A single-nucleotide bulge keeps the stack of the two flanking pairs, as if
    the bulged base were absent. Longer bulges interrupt stacking and instead
    take the AT closure penalty on each A·T closing pair.
    """
    bulge_size = (len(top) - 2) + (len(bottom) - 2)
    base_dh_ds = lookup_loop_baseline_js(energies.BULGE, bulge_size)
    if base_dh_ds is None:
        return float("inf")
    delta_g = calculate_delta_g(base_dh_ds, temp_k)

    if bulge_size == 1:
        return delta_g + stack_energy(top[0] + top[-1], bottom[0] + bottom[-1], energies, temp_k)

    delta_g += _at_closure_penalty(top[0], bottom[0], energies, temp_k)
    delta_g += _at_closure_penalty(top[-1], bottom[-1], energies, temp_k)

    return delta_g


def internal_loop_energy(top: str, bottom: str, energies: DuplexEnergies, temp_k: float = DEFAULT_T_K) -> float:
    """
    Calculates the free energy of an internal loop between two helices.

    A 1×1 loop is a single mismatch and is scored as the two mismatch stacks
    that flank it when both are tabulated. Any other loop takes the
    length-dependent initiation, an asymmetry penalty per nucleotide of
    length difference and the AT closure penalty on each A·T closing pair.
    """
    len_5 = len(top) - 2
    len_3 = len(bottom) - 2

    if len_5 == 1 and len_3 == 1:
        mm_left = energies.MISMATCH.get(stack_key(top[0:2], bottom[0:2]))
        mm_right = energies.MISMATCH.get(stack_key(top[1:3], bottom[1:3]))
        if mm_left is not None and mm_right is not None:
            return calculate_delta_g(mm_left, temp_k) + calculate_delta_g(mm_right, temp_k)

    base_dh_ds = lookup_loop_baseline_js(energies.INTERNAL, len_5 + len_3)
    if base_dh_ds is None:
        return float("inf")
    delta_g = calculate_delta_g(base_dh_ds, temp_k)
    delta_g += energies.LOOP_ASYMMETRY * abs(len_5 - len_3)
    delta_g += _at_closure_penalty(top[0], bottom[0], energies, temp_k)
    delta_g += _at_closure_penalty(top[-1], bottom[-1], energies, temp_k)

    return delta_g


def two_pair_loop_energy(top: str, bottom: str, energies: DuplexEnergies, temp_k: float = DEFAULT_T_K) -> float:
    """
    Free energy of the region closed by two base pairs: a stack, bulge or internal loop.

    Parameters
    ----------
    top : str
        Bases from the outer pair to the inner pair on one strand, 5'→3'.
    bottom : str
        Partner bases from the outer pair to the inner pair, 3'→5'.
    energies : DuplexEnergies
        Parameter tables.
    temp_k : float
        Temperature in Kelvin.

    Returns
    -------
    float
        ΔG in kcal/mol, or positive infinity for invalid geometry.
    """
    if len(top) < 2 or len(bottom) < 2:
        return float("inf")

    unpaired_5 = len(top) - 2
    unpaired_3 = len(bottom) - 2

    # Case 1: Stacked pairs.
    if unpaired_5 == 0 and unpaired_3 == 0:
        return stack_energy(top, bottom, energies, temp_k)

    # Case 2: Bulge (unpaired bases on one side only).
    if unpaired_5 == 0 or unpaired_3 == 0:
        return bulge_energy(top, bottom, energies, temp_k)

    # Case 3: Internal loop.
    return internal_loop_energy(top, bottom, energies, temp_k)


def multiloop_linear_energy(branches: int, unpaired_bases: int, energies: DuplexEnergies) -> float:
    """
    Calculates the free energy (ΔG) of a multiloop using a linear model.

    ``ΔG = a + b * branches + c * unpaired``, plus ``d`` when no unpaired
    nucleotides are enclosed.
    """
    coeff_a, coeff_b, coeff_c, coeff_d = energies.MULTILOOP
    bonus = coeff_d if unpaired_bases == 0 else 0.0

    return coeff_a + coeff_b * branches + coeff_c * unpaired_bases + bonus
