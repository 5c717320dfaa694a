"""
Unit tests for the thermodynamic arithmetic helpers.
"""
import math

import pytest

from primer_thermo.utils.energy_utils import (
    JS_ALPHA_DNA,
    KELVIN_OFFSET,
    R_CAL,
    add_terms,
    calculate_delta_g,
    celsius_to_kelvin,
    lookup_loop_baseline_js,
)


def test_celsius_to_kelvin():
    """
    37 °C is 310.15 K.
    """
    assert celsius_to_kelvin(37.0) == pytest.approx(310.15)
    assert celsius_to_kelvin(-KELVIN_OFFSET) == pytest.approx(0.0)


def test_calculate_delta_g_uses_kcal_and_cal_units():
    """
    ΔG = ΔH - T·ΔS/1000 with ΔH in kcal/mol and ΔS in cal/(K·mol).
    """
    # CG/GC stack of the unified set: -10.6 kcal/mol, -27.2 cal/(K·mol).
    delta_g = calculate_delta_g((-10.6, -27.2), 310.15)
    assert delta_g == pytest.approx(-10.6 + 310.15 * 0.0272)


def test_calculate_delta_g_of_missing_term_is_infinite():
    """
    An unavailable term is reported as +inf so it never wins a minimization.
    """
    assert math.isinf(calculate_delta_g(None, 310.15))


def test_add_terms_sums_componentwise():
    """
    Enthalpies and entropies are summed separately.
    """
    assert add_terms((1.0, 2.0), (-3.0, 4.5), (0.5, -0.5)) == (-1.5, 6.0)
    assert add_terms() == (0, 0)


def test_loop_baseline_returns_tabulated_values():
    """
    Tabulated loop sizes come back unchanged.
    """
    table = {3: (0.0, -10.0), 6: (0.0, -12.0)}
    assert lookup_loop_baseline_js(table, 3) == (0.0, -10.0)
    assert lookup_loop_baseline_js(table, 6) == (0.0, -12.0)


def test_loop_baseline_extrapolates_with_jacobson_stockmayer():
    """
    Sizes beyond the table lower the entropy by alpha·R·ln(n/anchor).
    """
    table = {3: (0.0, -10.0), 6: (0.0, -12.0)}
    delta_h, delta_s = lookup_loop_baseline_js(table, 12)
    assert delta_h == 0.0
    assert delta_s == pytest.approx(-12.0 - JS_ALPHA_DNA * R_CAL * math.log(2.0))


def test_loop_baseline_edge_cases():
    """
    Empty tables and non-positive sizes have no baseline; tiny sizes clamp to
    the smallest entry.
    """
    table = {3: (0.0, -10.0)}
    assert lookup_loop_baseline_js({}, 4) is None
    assert lookup_loop_baseline_js(table, 0) is None
    assert lookup_loop_baseline_js(table, 1) == (0.0, -10.0)
