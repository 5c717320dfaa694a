from __future__ import annotations
from math import log
from typing import Mapping, Optional, Tuple

# Ideal gas constant in cal mol⁻¹ K⁻¹
# 8.3145112 J K⁻¹ mol⁻¹ = 1.9872159 cal mol⁻¹ K⁻¹
R_CAL = 1.98720425864083

# Absolute zero offset used for Celsius/Kelvin conversions.
KELVIN_OFFSET = 273.15

# Jacobson–Stockmayer loop-entropy coefficient for DNA loops (SantaLucia & Hicks 2004).
JS_ALPHA_DNA = 2.44


def celsius_to_kelvin(temp_c: float) -> float:
    """Convert a temperature from °C to K."""
    return temp_c + KELVIN_OFFSET


def calculate_delta_g(delta_h_delta_s: Optional[Tuple[float, float]], temp_k: float) -> float:
    """
    Compute the Gibbs free energy change ΔG from enthalpy/entropy at a temperature.

    Uses ``ΔG = ΔH − T * (ΔS / 1000)`` with ΔH in kcal/mol, ΔS in cal/(K·mol)
    and T in Kelvin.

    Parameters
    ----------
    delta_h_delta_s : tuple[float, float] or None
        Two-tuple ``(ΔH, ΔS)``. ``None`` means the term is unavailable.
    temp_k : float
        Absolute temperature in Kelvin.

    Returns
    -------
    float
        Free energy change in kcal/mol, or ``+inf`` when the term is unavailable.
    """
    if delta_h_delta_s is None:
        return float("inf")
    delta_h, delta_s = delta_h_delta_s

    return delta_h - temp_k * (delta_s / 1000.0)


def add_terms(*terms: Tuple[float, float]) -> Tuple[float, float]:
    """Sum any number of ``(ΔH, ΔS)`` tuples component-wise."""
    return sum(t[0] for t in terms), sum(t[1] for t in terms)


def lookup_loop_baseline_js(
    table: Mapping[int, Tuple[float, float]],
    size: int,
    *,
    alpha: float = JS_ALPHA_DNA,
) -> Optional[Tuple[float, float]]:
    """
    Fetch a loop baseline ``(ΔH, ΔS)`` for a loop size, extrapolating with
    Jacobson–Stockmayer when the size is not tabulated.

    - If ``size`` is tabulated, the stored value is returned.
    - Otherwise the largest tabulated size ``a <= size`` is used as anchor and
      the entropy is lowered by ``alpha · R · ln(size / a)``, which gives
      ``ΔG(n) = ΔG(a) + alpha · R · T · ln(n / a)`` at any temperature.
    - Sizes below the smallest tabulated entry are clamped to that entry.

    Parameters
    ----------
    table : Mapping[int, tuple[float, float]]
        Loop baseline table keyed by loop size (nt).
    size : int
        Requested loop size.
    alpha : float
        Loop-entropy coefficient.

    Returns
    -------
    Optional[tuple[float, float]]
        The ``(ΔH, ΔS)`` pair, or ``None`` if the table is empty or ``size < 1``.
    """
    if not table or size < 1:
        return None

    if size in table:
        return table[size]

    anchor = max((k for k in table.keys() if k <= size), default=None)
    if anchor is None:
        return table[min(table.keys())]

    delta_h_a, delta_s_a = table[anchor]

    return delta_h_a, delta_s_a - alpha * R_CAL * log(size / anchor)
