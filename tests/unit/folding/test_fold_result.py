"""
Unit tests for the shared folding types: the candidate tie rule, folding
configuration validation and dot-bracket rendering.
"""
import math

import pytest

from primer_thermo.errors import InvalidConfigurationError
from primer_thermo.folding import (
    DG_TIE_EPSILON,
    FoldingConfig,
    dimer_dotbracket,
    is_better_candidate,
    pairs_to_dotbracket,
)
from primer_thermo.structures import Pair


def test_lower_energy_wins():
    """
    A clearly lower energy replaces the best regardless of pairs or rank.
    """
    assert is_better_candidate(-3.0, 10, 2, -2.0, 1, 0)
    assert not is_better_candidate(-2.0, 1, 0, -3.0, 10, 2)


def test_infinite_candidates_never_win():
    """
    Unreachable states are skipped; any finite value beats an infinite best.
    """
    assert not is_better_candidate(math.inf, 0, 0, math.inf, 0, 0)
    assert is_better_candidate(5.0, 3, 2, math.inf, 0, 0)


def test_ties_prefer_fewer_pairs_then_lower_rank():
    """
    Energies within the tie window fall back to pair count, then rank.
    """
    half = DG_TIE_EPSILON / 2
    assert is_better_candidate(-2.0 - half, 2, 1, -2.0, 3, 0)
    assert not is_better_candidate(-2.0 - half, 4, 0, -2.0, 3, 1)
    assert is_better_candidate(-2.0, 3, 0, -2.0, 3, 1)
    assert not is_better_candidate(-2.0, 3, 1, -2.0, 3, 1)


def test_folding_config_defaults():
    """
    Defaults fold at 37 °C with three-base hairpin loops.
    """
    cfg = FoldingConfig()
    assert cfg.temp_c == 37.0
    assert cfg.temp_k == pytest.approx(310.15)
    assert cfg.min_hairpin_loop == 3
    assert cfg.no_structure_threshold == -1.0


@pytest.mark.parametrize(
    "kwargs",
    [{"temp_c": -300.0}, {"temp_c": float("nan")}, {"min_hairpin_loop": 2}, {"max_loop": -1}],
)
def test_folding_config_rejects_bad_values(kwargs):
    """
    Non-physical temperatures and impossible loop limits raise.
    """
    with pytest.raises(InvalidConfigurationError):
        FoldingConfig(**kwargs)


def test_pairs_to_dotbracket():
    """
    Nested pairs render as matching brackets.
    """
    pairs = [Pair(0, 11), Pair(1, 10), Pair(2, 9)]
    assert pairs_to_dotbracket(12, pairs) == "(((......)))"
    assert pairs_to_dotbracket(4, []) == "...."


def test_dimer_dotbracket():
    """
    Strand A opens, strand B closes, separated by ``&``.
    """
    pairs = [Pair(0, 3), Pair(1, 2)]
    assert dimer_dotbracket(3, 4, pairs) == "((.&..))"
