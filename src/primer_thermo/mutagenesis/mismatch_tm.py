"""
Melting temperature of a mutagenic primer against its unmodified template.

A primer carrying substitutions is scored with the mismatch nearest-neighbor
table; a primer carrying a short insertion or deletion is scored as two
helices joined by a bulge loop. Terminal-mismatch, dangling-end and
consecutive-mismatch corrections are added before the salt model and the
two-state Tm formula of `primer_thermo.thermo` are applied.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from primer_thermo.caching import make_cache_key
from primer_thermo.context import ThermoContext, get_default_context
from primer_thermo.energies.energy_ops import terminal_term
from primer_thermo.energies.energy_types import DhDs, DuplexEnergies
from primer_thermo.errors import InvalidSequenceError, UnsupportedParameterCombinationError
from primer_thermo.rules import validate_sequence
from primer_thermo.thermo import DEFAULT_CONDITIONS, TmConditions, calculate_tm, duplex_tm, gc_content
from primer_thermo.thermo.tm_calculator import nearest_neighbor_sum
from primer_thermo.utils import (
    add_terms,
    calculate_delta_g,
    celsius_to_kelvin,
    complement_strand,
    is_watson_crick,
    lookup_loop_baseline_js,
    stack_key,
)

logger = logging.getLogger(__name__)

__all__ = ["MismatchTmResult", "calculate_mismatch_tm", "MAX_INDEL_LENGTH", "MIN_BINDING_TM"]

# Longest insertion/deletion scored as a bulge.
MAX_INDEL_LENGTH = 3

# Below this Tm (°C) a primer is reported as not binding.
MIN_BINDING_TM = -50.0

# Maximum fraction of mismatched positions for a primer that can still bind.
MAX_MISMATCH_FRACTION = 0.5

# Mismatches within this many bases of the 3' end block extension.
THREE_PRIME_WINDOW = 3


@dataclass(frozen=True, slots=True)
class MismatchTmResult:
    """
    Outcome of `calculate_mismatch_tm`.

    Attributes
    ----------
    tm : float or None
        Melting temperature (°C, rounded to 0.01); ``None`` when the primer
        will not bind.
    delta_h, delta_s : float
        Duplex enthalpy (kcal/mol) and entropy (cal/(K·mol)).
    delta_g : float
        Duplex free energy (kcal/mol) at ``temp_c``.
    temp_c : float
        Temperature of ``delta_g``.
    mutation_type : str
        ``"match"``, ``"substitution"``, ``"insertion"`` or ``"deletion"``.
    mismatch_positions : tuple of int
        Primer positions that do not pair (substituted or inserted bases).
    consecutive_mismatches : int
        Adjacent-mismatch count, ``sum(run - 1)`` over runs of mismatches.
    has_3prime_mismatch : bool
        A mismatch lies within the last three primer bases.
    has_terminal_mismatch : bool
        A mismatch sits at either primer end.
    will_not_bind : bool
        More than half the positions mismatch, or Tm is below −50 °C.
    salt_correction : float
        Tm shift caused by the salt model (°C).
    parameter_set : str
        Identity of the parameter set.
    """
    tm: Optional[float]
    delta_h: float
    delta_s: float
    delta_g: float
    temp_c: float
    mutation_type: str
    mismatch_positions: Tuple[int, ...]
    consecutive_mismatches: int
    has_3prime_mismatch: bool
    has_terminal_mismatch: bool
    will_not_bind: bool
    salt_correction: float
    parameter_set: str

    @property
    def valid(self) -> bool:
        return not self.will_not_bind


def _consecutive_count(positions: List[int]) -> int:
    count = 0
    for prev, cur in zip(positions, positions[1:]):
        if cur == prev + 1:
            count += 1
    return count


def _substitution_terms(primer: str, bottom: str, energies: DuplexEnergies) -> DhDs:
    """NN sum for an equal-length duplex; steps with two mismatched pairs do not stack."""
    delta_h = 0.0
    delta_s = 0.0
    for k in range(len(primer) - 1):
        top2, bot2 = primer[k:k + 2], bottom[k:k + 2]
        left_ok = is_watson_crick(top2[0], bot2[0])
        right_ok = is_watson_crick(top2[1], bot2[1])
        if not left_ok and not right_ok:
            continue
        key = stack_key(top2, bot2)
        term = energies.NN_STACK.get(key) if (left_ok and right_ok) else energies.MISMATCH.get(key)
        if term is None:
            raise UnsupportedParameterCombinationError(
                f"Mismatch stack '{key}' at position {k} is not tabulated in {energies.identity}."
            )
        delta_h += term[0]
        delta_s += term[1]

    return delta_h, delta_s


def _bulge_terms(top: str, bottom: str, energies: DuplexEnergies) -> DhDs:
    """
    ``(ΔH, ΔS)`` of a bulge; ``top``/``bottom`` run from the outer to the inner pair.

    A single-base bulge keeps the stack of its flanking pairs; longer bulges
    take the AT closure penalty on each A·T closing pair.
    """
    size = (len(top) - 2) + (len(bottom) - 2)
    baseline = lookup_loop_baseline_js(energies.BULGE, size)
    if baseline is None:
        raise UnsupportedParameterCombinationError(f"No bulge parameters for size {size} in {energies.identity}.")
    if size == 1:
        return add_terms(baseline, energies.NN_STACK[stack_key(top[0] + top[-1], bottom[0] + bottom[-1])])

    terms = [baseline]
    for base_x, base_y in ((top[0], bottom[0]), (top[-1], bottom[-1])):
        if base_x + base_y in ("AT", "TA"):
            terms.append(energies.INIT_TERMINAL_AT)

    return add_terms(*terms)


def _locate_indel(longer: str, shorter: str) -> Optional[int]:
    """Position in ``shorter`` where ``longer`` carries its extra bases, ``None`` if it is not a clean indel."""
    extra = len(longer) - len(shorter)
    prefix = 0
    while prefix < len(shorter) and longer[prefix] == shorter[prefix]:
        prefix += 1
    if longer[prefix + extra:] == shorter[prefix:]:
        return prefix

    return None


def _end_terms(top: str, bottom: str, energies: DuplexEnergies) -> DhDs:
    terms = [energies.INIT_BASE]
    for base_x, base_y in ((top[0], bottom[0]), (top[-1], bottom[-1])):
        if is_watson_crick(base_x, base_y):
            terms.append(terminal_term(base_x, base_y, energies))

    return add_terms(*terms)


def _indel_terms(primer: str, template_bottom: str, energies: DuplexEnergies) -> Tuple[DhDs, str, List[int], int]:
    """Duplex ``(ΔH, ΔS)``, mutation type, unpaired primer positions and pair count of an indel duplex."""
    template_coding = complement_strand(template_bottom)
    insertion = len(primer) > len(template_coding)
    longer, shorter = (primer, template_coding) if insertion else (template_coding, primer)
    extra = len(longer) - len(shorter)

    pos = _locate_indel(longer, shorter)
    if pos is None:
        raise InvalidSequenceError(
            f"Primer and template differ by more than one {'insertion' if insertion else 'deletion'} "
            f"of {extra} nt."
        )

    mutation_type = "insertion" if insertion else "deletion"
    unpaired = list(range(pos, pos + extra)) if insertion else []
    n_pairs = len(shorter)

    if insertion:
        left_top, left_bot = primer[:pos], template_bottom[:pos]
        right_top, right_bot = primer[pos + extra:], template_bottom[pos:]
    else:
        left_top, left_bot = primer[:pos], template_bottom[:pos]
        right_top, right_bot = primer[pos:], template_bottom[pos + extra:]

    # Extra bases at an end overhang the duplex instead of forming a bulge.
    if not left_top or not right_top:
        top = left_top or right_top
        bot = left_bot or right_bot
        total = add_terms(nearest_neighbor_sum(top, bot, energies), _end_terms(top, bot, energies))
        return total, mutation_type, unpaired, n_pairs

    if insertion:
        bulge = _bulge_terms(primer[pos - 1:pos + extra + 1], template_bottom[pos - 1:pos + 1], energies)
    else:
        bulge = _bulge_terms(primer[pos - 1:pos + 1], template_bottom[pos - 1:pos + extra + 1], energies)

    total = add_terms(
        nearest_neighbor_sum(left_top, left_bot, energies),
        nearest_neighbor_sum(right_top, right_bot, energies),
        bulge,
        _end_terms(left_top + right_top, left_bot + right_bot, energies),
    )

    return total, mutation_type, unpaired, n_pairs


def calculate_mismatch_tm(
    primer: str,
    template: str,
    conditions: Optional[TmConditions] = None,
    *,
    use_dangling_ends: bool = True,
    temp_c: float = 37.0,
    context: Optional[ThermoContext] = None,
) -> MismatchTmResult:
    """
    Melting temperature of ``primer`` annealed to a template it does not fully match.

    Parameters
    ----------
    primer : str
        Mutagenic primer, 5'→3'.
    template : str
        Coding-sense template region aligned to the primer, 5'→3'. It is
        complemented internally to obtain the strand the primer binds.
    conditions : TmConditions, optional
        Solution conditions.
    use_dangling_ends : bool
        Add dangling-end terms for mismatched primer termini.
    temp_c : float
        Temperature (°C) of the reported ``delta_g``.
    context : ThermoContext, optional
        Evaluation context.

    Returns
    -------
    MismatchTmResult
        With a perfectly matching template the Tm, ΔH and ΔS equal those of
        `calculate_tm`.

    Raises
    ------
    InvalidSequenceError
        For invalid sequences, a length difference above three or a
        difference that is not a single insertion/deletion.
    UnsupportedParameterCombinationError
        For a mismatch stack the active set does not tabulate.
    """
    ctx = context if context is not None else get_default_context()
    cond = conditions if conditions is not None else DEFAULT_CONDITIONS
    energies = ctx.parameters
    primer_seq = validate_sequence(primer, min_length=2)
    template_seq = validate_sequence(template, min_length=2)

    key = make_cache_key(
        "mismatch_tm", ctx.parameter_identity, primer_seq, template_seq, cond, use_dangling_ends, temp_c
    )
    cached = ctx.tm_cache.get(key)
    if cached is not None:
        return cached

    length_diff = abs(len(primer_seq) - len(template_seq))
    if length_diff > MAX_INDEL_LENGTH:
        raise InvalidSequenceError(
            f"Primer ({len(primer_seq)} nt) and template ({len(template_seq)} nt) differ by more than "
            f"{MAX_INDEL_LENGTH} nt."
        )

    template_bottom = complement_strand(template_seq)
    n = len(primer_seq)

    if length_diff == 0:
        positions = [i for i in range(n) if not is_watson_crick(primer_seq[i], template_bottom[i])]
        if not positions:
            result = _from_perfect_match(primer_seq, cond, temp_c, ctx)
            ctx.tm_cache.put(key, result)
            return result
        mutation_type = "substitution"
        n_pairs = n - len(positions)
        delta_h, delta_s = add_terms(
            _substitution_terms(primer_seq, template_bottom, energies),
            _end_terms(primer_seq, template_bottom, energies),
        )
    else:
        (delta_h, delta_s), mutation_type, positions, n_pairs = _indel_terms(primer_seq, template_bottom, energies)

    consecutive = _consecutive_count(positions)
    if consecutive > 0:
        per, maximum = energies.CONSECUTIVE_MISMATCH
        delta_h += min(consecutive * per[0], maximum[0])
        delta_s += min(consecutive * per[1], maximum[1])

    at_5 = 0 in positions
    at_3 = (n - 1) in positions
    if at_5:
        delta_h, delta_s = add_terms((delta_h, delta_s), energies.TERMINAL_MISMATCH_5)
    if at_3:
        delta_h, delta_s = add_terms((delta_h, delta_s), energies.TERMINAL_MISMATCH_3)
    if use_dangling_ends:
        if at_5 and primer_seq[0] in energies.DANGLE_5:
            delta_h, delta_s = add_terms((delta_h, delta_s), energies.DANGLE_5[primer_seq[0]])
        if at_3 and primer_seq[-1] in energies.DANGLE_3:
            delta_h, delta_s = add_terms((delta_h, delta_s), energies.DANGLE_3[primer_seq[-1]])

    tm, salt_shift = duplex_tm(delta_h, delta_s, max(n_pairs, 2), gc_content(primer_seq), cond, energies, False)
    too_many = len(positions) / n > MAX_MISMATCH_FRACTION
    will_not_bind = too_many or tm is None or tm < MIN_BINDING_TM
    if will_not_bind:
        logger.debug(f"Primer {primer_seq} is not expected to bind (tm={tm}, mismatches={len(positions)})")

    result = MismatchTmResult(
        tm=None if will_not_bind else round(tm, 2),
        delta_h=round(delta_h, 4),
        delta_s=round(delta_s, 4),
        delta_g=round(calculate_delta_g((delta_h, delta_s), celsius_to_kelvin(temp_c)), 2),
        temp_c=temp_c,
        mutation_type=mutation_type,
        mismatch_positions=tuple(positions),
        consecutive_mismatches=consecutive,
        has_3prime_mismatch=any(p >= n - THREE_PRIME_WINDOW for p in positions),
        has_terminal_mismatch=at_5 or at_3,
        will_not_bind=will_not_bind,
        salt_correction=0.0 if will_not_bind else round(salt_shift, 2),
        parameter_set=energies.identity,
    )
    ctx.tm_cache.put(key, result)

    return result


def _from_perfect_match(primer: str, cond: TmConditions, temp_c: float, ctx: ThermoContext) -> MismatchTmResult:
    thermo = calculate_tm(primer, cond, context=ctx)
    if thermo.valid:
        delta_g = round(thermo.delta_g(temp_c), 2)
    else:
        delta_g = 0.0

    return MismatchTmResult(
        tm=thermo.tm,
        delta_h=thermo.delta_h,
        delta_s=thermo.delta_s,
        delta_g=delta_g,
        temp_c=temp_c,
        mutation_type="match",
        mismatch_positions=(),
        consecutive_mismatches=0,
        has_3prime_mismatch=False,
        has_terminal_mismatch=False,
        will_not_bind=not thermo.valid,
        salt_correction=thermo.salt_correction,
        parameter_set=thermo.parameter_set,
    )
