from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

from primer_thermo.caching import make_cache_key
from primer_thermo.context import ThermoContext, get_default_context
from primer_thermo.energies.energy_ops import terminal_term
from primer_thermo.energies.energy_types import DuplexEnergies, DhDs
from primer_thermo.errors import InvalidSequenceError, UnsupportedParameterCombinationError
from primer_thermo.rules.constraints import DNA_ALPHABET, is_self_complementary, validate_sequence
from primer_thermo.thermo.conditions import DEFAULT_CONDITIONS, TmConditions
from primer_thermo.thermo.salt import owczarzy_inverse_tm_correction, santalucia_entropy_correction
from primer_thermo.utils.energy_utils import KELVIN_OFFSET, R_CAL, calculate_delta_g, celsius_to_kelvin
from primer_thermo.utils.nucleotide_utils import complement_strand, is_watson_crick, stack_key

logger = logging.getLogger(__name__)

__all__ = [
    "MIN_TM_LENGTH",
    "ThermoResult",
    "calculate_tm",
    "classify_terminal_3prime",
    "duplex_tm",
    "gc_content",
    "nearest_neighbor_sum",
    "terminal_3prime_dg",
]

# Shortest sequence for which a Tm is reported.
MIN_TM_LENGTH = 3


@dataclass(frozen=True, slots=True)
class ThermoResult:
    """
    Outcome of a melting-temperature calculation.

    Attributes
    ----------
    delta_h : float
        Duplex enthalpy in kcal/mol (initiation and terminal terms included).
    delta_s : float
        Duplex entropy in cal/(K·mol) at 1 M Na⁺.
    tm : float or None
        Melting temperature in °C rounded to 0.01, ``None`` when not valid.
    valid : bool
        False when the input cannot produce a Tm.
    salt_correction : float
        Tm shift (°C) caused by the salt correction, relative to 1 M Na⁺.
    parameter_set : str
        Identity of the parameter set used.
    reason : str, optional
        Why the result is invalid.
    """
    delta_h: float
    delta_s: float
    tm: Optional[float]
    valid: bool
    salt_correction: float
    parameter_set: str
    reason: Optional[str] = None

    def delta_g(self, temp_c: float = 37.0) -> float:
        """Duplex free energy at ``temp_c`` (kcal/mol), ``inf`` for invalid results."""
        if not self.valid:
            return float("inf")
        return calculate_delta_g((self.delta_h, self.delta_s), celsius_to_kelvin(temp_c))


def _invalid(reason: str, identity: str) -> ThermoResult:
    logger.debug(f"Tm not computed: {reason}")
    return ThermoResult(
        delta_h=0.0, delta_s=0.0, tm=None, valid=False, salt_correction=0.0, parameter_set=identity, reason=reason
    )


@lru_cache(maxsize=4096)
def gc_content(seq: str) -> float:
    """
    Fraction of G and C bases in ``seq`` (0.0 for an empty string).

    Independent of the parameter set, so it is cached on the sequence alone.
    """
    if not seq:
        return 0.0
    upper = seq.upper()

    return (upper.count("G") + upper.count("C")) / len(upper)


def nearest_neighbor_sum(top: str, bottom: str, energies: DuplexEnergies) -> DhDs:
    """
    Sum the ``(ΔH, ΔS)`` of every nearest-neighbor step of an aligned duplex.

    Parameters
    ----------
    top : str
        Strand read 5'→3'.
    bottom : str
        Partner strand aligned base by base, read 3'→5'.
    energies : DuplexEnergies
        Active parameter set.

    Raises
    ------
    UnsupportedParameterCombinationError
        If a step holds a mismatch (or a mismatch pair) that the set does not tabulate.
    """
    delta_h = 0.0
    delta_s = 0.0
    for k in range(len(top) - 1):
        key = stack_key(top[k:k + 2], bottom[k:k + 2])
        term = energies.NN_STACK.get(key)
        if term is None:
            term = energies.MISMATCH.get(key)
        if term is None:
            raise UnsupportedParameterCombinationError(
                f"No nearest-neighbor parameters for step '{key}' at position {k} in {energies.identity}."
            )
        delta_h += term[0]
        delta_s += term[1]

    return delta_h, delta_s


def duplex_tm(
    delta_h: float,
    delta_s: float,
    n_bp: int,
    gc_fraction: float,
    conditions: TmConditions,
    energies: DuplexEnergies,
    self_complementary: bool,
) -> Tuple[Optional[float], float]:
    """
    Apply the set's salt model and the two-state Tm formula.

    ``Tm = 1000·ΔH / (ΔS + R·ln(Ct/x)) − 273.15`` with ``x = 4`` for
    self-complementary duplexes and ``x = 1`` otherwise.

    Returns
    -------
    tuple
        ``(tm, salt_shift)``: Tm in °C (unrounded, ``None`` when the duplex
        never melts in the physical sense) and the salt-induced Tm shift.
    """
    x_factor = 4.0 if self_complementary else 1.0
    conc_term = R_CAL * math.log(conditions.oligo_molar / x_factor)

    denominator_1m = delta_s + conc_term
    if delta_h >= 0 or denominator_1m >= 0:
        return None, 0.0
    tm_1m_k = 1000.0 * delta_h / denominator_1m

    salt = energies.SALT
    if salt.MODEL == "santalucia1998":
        denominator = delta_s + santalucia_entropy_correction(n_bp, conditions, salt) + conc_term
        if denominator >= 0:
            return None, 0.0
        tm_k = 1000.0 * delta_h / denominator
    else:
        inv_tm = 1.0 / tm_1m_k + owczarzy_inverse_tm_correction(n_bp, gc_fraction, conditions, salt)
        if inv_tm <= 0:
            return None, 0.0
        tm_k = 1.0 / inv_tm

    return tm_k - KELVIN_OFFSET, tm_k - tm_1m_k


def calculate_tm(
    seq: str,
    conditions: Optional[TmConditions] = None,
    *,
    complement: Optional[str] = None,
    context: Optional[ThermoContext] = None,
) -> ThermoResult:
    """
    Nearest-neighbor melting temperature of a primer against its target.

    Parameters
    ----------
    seq : str
        Primer sequence 5'→3'. Lower case is accepted.
    conditions : TmConditions, optional
        Solution conditions; defaults to `TmConditions()`.
    complement : str, optional
        Partner strand aligned to ``seq`` and read 3'→5'. Defaults to the
        perfect complement. A partner with mismatches is scored with the
        mismatch table.
    context : ThermoContext, optional
        Evaluation context; defaults to the shared context.

    Returns
    -------
    ThermoResult
        Memoized in ``context.tm_cache``. Sequences shorter than three bases or
        carrying symbols outside ``ACGT`` give ``valid=False``.

    Raises
    ------
    InvalidSequenceError
        If ``complement`` is malformed or not the same length as ``seq``.
    UnsupportedParameterCombinationError
        If ``complement`` creates a mismatch stack the set does not tabulate.
    """
    ctx = context if context is not None else get_default_context()
    cond = conditions if conditions is not None else DEFAULT_CONDITIONS
    identity = ctx.parameter_identity

    canonical = seq.strip().upper() if isinstance(seq, str) else ""
    if not canonical:
        return _invalid("empty sequence", identity)
    for pos, base in enumerate(canonical):
        if base not in DNA_ALPHABET:
            return _invalid(f"unsupported symbol '{base}' at position {pos}", identity)
    if len(canonical) < MIN_TM_LENGTH:
        return _invalid(f"sequence of length {len(canonical)} is shorter than {MIN_TM_LENGTH} nt", identity)

    partner = None
    if complement is not None:
        partner = validate_sequence(complement)
        if len(partner) != len(canonical):
            raise InvalidSequenceError(
                f"Complement length {len(partner)} does not match sequence length {len(canonical)}."
            )
        if partner == complement_strand(canonical):
            partner = None

    key = make_cache_key("tm", identity, canonical, partner, cond)
    cached = ctx.tm_cache.get(key)
    if cached is not None:
        return cached

    result = _compute_tm(canonical, partner, cond, ctx.parameters)
    ctx.tm_cache.put(key, result)

    return result


def _compute_tm(seq: str, partner: Optional[str], cond: TmConditions, energies: DuplexEnergies) -> ThermoResult:
    bottom = partner if partner is not None else complement_strand(seq)
    delta_h, delta_s = nearest_neighbor_sum(seq, bottom, energies)

    delta_h += energies.INIT_BASE[0]
    delta_s += energies.INIT_BASE[1]
    for base_x, base_y in ((seq[0], bottom[0]), (seq[-1], bottom[-1])):
        if is_watson_crick(base_x, base_y):
            term = terminal_term(base_x, base_y, energies)
            delta_h += term[0]
            delta_s += term[1]

    self_comp = partner is None and is_self_complementary(seq)
    if self_comp:
        delta_h += energies.SYMMETRY[0]
        delta_s += energies.SYMMETRY[1]

    tm, salt_shift = duplex_tm(delta_h, delta_s, len(seq), gc_content(seq), cond, energies, self_comp)
    if tm is None:
        return ThermoResult(
            delta_h=delta_h, delta_s=delta_s, tm=None, valid=False, salt_correction=0.0,
            parameter_set=energies.identity, reason="duplex is not stable at any temperature",
        )

    return ThermoResult(
        delta_h=round(delta_h, 4),
        delta_s=round(delta_s, 4),
        tm=round(tm, 2),
        valid=True,
        salt_correction=round(salt_shift, 2),
        parameter_set=energies.identity,
    )


def terminal_3prime_dg(
    seq: str,
    length: int = 5,
    temp_c: float = 37.0,
    *,
    context: Optional[ThermoContext] = None,
) -> float:
    """
    Nearest-neighbor ΔG (kcal/mol) of the last ``length`` bases of a primer.

    Only the Watson–Crick stacks of the 3' pentamer (by default) are summed;
    initiation is left out so values compare across primers.

    Raises
    ------
    InvalidSequenceError
        If the sequence is invalid or shorter than two bases.
    """
    ctx = context if context is not None else get_default_context()
    canonical = validate_sequence(seq, min_length=2)
    tail = canonical[-length:]
    delta_h, delta_s = nearest_neighbor_sum(tail, complement_strand(tail), ctx.parameters)

    return round(calculate_delta_g((delta_h, delta_s), celsius_to_kelvin(temp_c)), 2)


def classify_terminal_3prime(delta_g: float) -> str:
    """
    Qualitative 3'-end stability: ``loose`` (> −6), ``ideal`` (> −9),
    ``strong`` (> −11) or ``sticky``.
    """
    if delta_g > -6.0:
        return "loose"
    if delta_g > -9.0:
        return "ideal"
    if delta_g > -11.0:
        return "strong"

    return "sticky"
