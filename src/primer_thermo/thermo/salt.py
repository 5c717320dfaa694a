from __future__ import annotations
import math

from primer_thermo.energies.energy_types import SaltParameters
from primer_thermo.thermo.conditions import TmConditions

# Owczarzy et al. (2004) monovalent-only 1/Tm correction.
_MONO_GC = 4.29e-5
_MONO_LIN = -3.95e-5
_MONO_SQ = 9.40e-6

# Ratio sqrt([Mg2+]) / [Mon+] below which monovalent ions dominate.
MONOVALENT_DOMINANT_RATIO = 0.22
# Ratio above which Mg2+ dominates and the a, d, g coefficients are used unadjusted.
MAGNESIUM_DOMINANT_RATIO = 6.0

# SantaLucia (1998) entropic salt coefficient, cal/(K mol) per phosphate pair.
SANTALUCIA_SALT_COEFF = 0.368


def free_magnesium(mg_mm: float, dntp_mm: float, ka: float = 3.0e4) -> float:
    """
    Free Mg²⁺ (mM) left after 1:1 chelation by dNTPs.

    Solves ``Ka·x² + (1 + Ka·([dNTP] − [Mg]))·x − [Mg] = 0`` for the free
    concentration ``x`` in M, with ``Ka`` in M⁻¹.
    """
    if mg_mm <= 0:
        return 0.0
    if dntp_mm <= 0 or ka <= 0:
        return mg_mm

    mg = mg_mm * 1e-3
    dntp = dntp_mm * 1e-3
    b = 1.0 + ka * (dntp - mg)
    free = (-b + math.sqrt(b * b + 4.0 * ka * mg)) / (2.0 * ka)

    return free * 1e3


def monovalent_equivalent(conditions: TmConditions, salt: SaltParameters) -> float:
    """Monovalent cation concentration (mM) including the Tris contribution."""
    return conditions.monovalent_mm + salt.TRIS_MONOVALENT_FRACTION * conditions.tris_mm


def sodium_equivalent(conditions: TmConditions, salt: SaltParameters) -> float:
    """
    von Ahsen Na⁺ equivalent in mM: ``[Mon] + F·sqrt([free Mg²⁺])``.
    """
    mon = monovalent_equivalent(conditions, salt)
    mg_free = free_magnesium(conditions.mg_mm, conditions.dntp_mm, salt.MG_DNTP_KA)

    return mon + salt.NA_EQUIVALENT_MG_FACTOR * math.sqrt(mg_free)


def santalucia_entropy_correction(n_bp: int, conditions: TmConditions, salt: SaltParameters) -> float:
    """
    Entropy correction ``0.368·(N − 1)·ln[Na⁺eq]`` in cal/(K·mol).

    Parameters
    ----------
    n_bp : int
        Number of base pairs of the duplex.
    """
    na_eq_molar = sodium_equivalent(conditions, salt) * 1e-3

    return SANTALUCIA_SALT_COEFF * (n_bp - 1) * math.log(na_eq_molar)


def owczarzy_inverse_tm_correction(n_bp: int, gc_fraction: float, conditions: TmConditions,
                                   salt: SaltParameters) -> float:
    """
    Owczarzy (2008) correction to ``1/Tm`` (K⁻¹) relative to 1 M Na⁺.

    The regime is picked from ``R = sqrt([Mg²⁺free]) / [Mon⁺]``:

    - ``R < 0.22``: monovalent ions dominate; the 2004 monovalent formula is used.
    - ``0.22 <= R < 6``: Mg²⁺ formula with ``a``, ``d``, ``g`` adjusted for [Mon⁺].
    - ``R >= 6`` (or no monovalent ions): Mg²⁺ formula with the raw coefficients.
    """
    if salt.OWCZARZY is None:
        raise ValueError("Parameter set does not carry Owczarzy coefficients.")
    coeff_a, coeff_b, coeff_c, coeff_d, coeff_e, coeff_f, coeff_g = salt.OWCZARZY

    mon = monovalent_equivalent(conditions, salt) * 1e-3
    mg = free_magnesium(conditions.mg_mm, conditions.dntp_mm, salt.MG_DNTP_KA) * 1e-3

    ratio = math.inf if mon <= 0 else math.sqrt(mg) / mon
    if ratio < MONOVALENT_DOMINANT_RATIO:
        ln_mon = math.log(mon)
        return (_MONO_GC * gc_fraction + _MONO_LIN) * ln_mon + _MONO_SQ * ln_mon ** 2

    if ratio < MAGNESIUM_DOMINANT_RATIO:
        ln_mon = math.log(mon)
        coeff_a = coeff_a * (0.843 - 0.352 * math.sqrt(mon) * ln_mon)
        coeff_d = coeff_d * (1.279 - 4.03e-3 * ln_mon - 8.03e-3 * ln_mon ** 2)
        coeff_g = coeff_g * (0.486 - 0.258 * ln_mon + 5.25e-3 * ln_mon ** 3)

    ln_mg = math.log(mg)
    length_term = (coeff_e + coeff_f * ln_mg + coeff_g * ln_mg ** 2) / (2.0 * (n_bp - 1))

    return coeff_a + coeff_b * ln_mg + gc_fraction * (coeff_c + coeff_d * ln_mg) + length_term
