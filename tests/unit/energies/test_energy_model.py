"""
Unit tests for `DuplexEnergyModel`, the lookup facade used by the Tm
calculators and the folding engines.
"""
import pytest

from primer_thermo.energies import (
    LEGACY_PARAMETER_SET,
    REVISED_PARAMETER_SET,
    DuplexEnergyModel,
    DuplexParameterLoader,
)
from primer_thermo.errors import UnsupportedParameterCombinationError


@pytest.fixture(scope="module")
def loader():
    return DuplexParameterLoader()


@pytest.fixture(scope="module")
def revised(loader):
    """Energy model over the revised set at 37 °C."""
    return DuplexEnergyModel(loader.load(REVISED_PARAMETER_SET))


@pytest.fixture(scope="module")
def legacy(loader):
    """Energy model over the legacy set at 37 °C."""
    return DuplexEnergyModel(loader.load(LEGACY_PARAMETER_SET))


def test_nn_param_accepts_dinucleotide_or_key(revised):
    """
    A bare dinucleotide is paired with its complement.
    """
    assert revised.nn_param("CA") == (-8.5, -22.7)
    assert revised.nn_param("CA/GT") == (-8.5, -22.7)
    assert revised.nn_param("ac") == (-8.4, -22.4)


def test_nn_param_rejects_mismatch_steps(revised):
    """
    Mismatched keys are not Watson-Crick stacks.
    """
    with pytest.raises(UnsupportedParameterCombinationError):
        revised.nn_param("CA/GG")


def test_mismatch_param_lookup(revised):
    """
    Mismatch stacks resolve from either orientation.
    """
    assert revised.mismatch_param("AG", "TT") == (1.0, 0.9)
    # Opposite-strand reading of the same stack.
    assert revised.mismatch_param("TT/GA") == (1.0, 0.9)
    assert revised.has_mismatch("GA", "CA")


def test_legacy_set_lacks_homo_mismatches(legacy):
    """
    The legacy set only tabulates heteromismatches, so A·A raises.
    """
    assert not legacy.has_mismatch("GA", "CA")
    with pytest.raises(UnsupportedParameterCombinationError):
        legacy.mismatch_param("GA", "CA")
    assert legacy.has_mismatch("AG", "TT")


def test_temperature_override(revised):
    """
    An explicit temperature overrides the model's reference temperature.
    """
    at_37 = revised.stack("CG", "GC")
    at_60 = revised.stack("CG", "GC", temp_k=333.15)

    assert at_37 == pytest.approx(-10.6 + 310.15 * 0.0272)
    assert at_60 > at_37


def test_structure_energies_delegate(revised):
    """
    Hairpin, loop, multiloop and terminal queries return finite free energies.
    """
    assert revised.hairpin(0, 4, "GCCCC") == pytest.approx(3.5, abs=1e-3)
    assert revised.loop("CAG", "GC") == pytest.approx(4.0 - 10.6 + 310.15 * 0.0272, abs=1e-3)
    assert revised.multiloop(2, 0) == pytest.approx(4.2)
    assert revised.terminal("G", "C") == 0.0
