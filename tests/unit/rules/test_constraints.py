"""
Unit tests for sequence validation and pairing rules.
"""
import pytest

from primer_thermo.errors import InvalidSequenceError, PrimerThermoError
from primer_thermo.rules.constraints import (
    can_pair,
    hairpin_size,
    is_min_hairpin_size,
    is_self_complementary,
    validate_sequence,
)


def test_validate_sequence_canonicalizes_input():
    """
    Surrounding whitespace is stripped and the sequence upper-cased.
    """
    assert validate_sequence("  acgTTa \n") == "ACGTTA"


@pytest.mark.parametrize("raw", ["", "   ", "ACGU", "ACGN", "AC GT", "ACG-T"])
def test_validate_sequence_rejects_invalid_input(raw):
    """
    Empty input and symbols outside ACGT (RNA bases, ambiguity codes, gaps)
    are rejected rather than substituted.
    """
    with pytest.raises(InvalidSequenceError):
        validate_sequence(raw)


def test_validate_sequence_rejects_non_strings_and_short_input():
    """
    Non-string input and sequences below ``min_length`` raise.
    """
    with pytest.raises(InvalidSequenceError):
        validate_sequence(None)
    with pytest.raises(InvalidSequenceError):
        validate_sequence("AC", min_length=3)
    assert validate_sequence("ACG", min_length=3) == "ACG"


def test_invalid_sequence_error_is_a_value_error():
    """
    Callers can catch the package's base error or plain ValueError.
    """
    with pytest.raises(PrimerThermoError):
        validate_sequence("XYZ")
    with pytest.raises(ValueError):
        validate_sequence("XYZ")


def test_can_pair_excludes_wobbles():
    """
    Only Watson-Crick pairs can close a helix.
    """
    assert can_pair("G", "C")
    assert can_pair("T", "A")
    assert not can_pair("G", "T")
    assert not can_pair("C", "C")


def test_hairpin_size_rules():
    """
    A closing pair (i, j) encloses j - i - 1 bases; at least three are needed.
    """
    assert hairpin_size(0, 4) == 3
    assert is_min_hairpin_size(0, 4)
    assert not is_min_hairpin_size(0, 3)
    assert is_min_hairpin_size(0, 3, min_unpaired=2)


def test_is_self_complementary():
    """
    Palindromic duplexes equal their own reverse complement.
    """
    assert is_self_complementary("GCGATCGC")
    assert is_self_complementary("AATT")
    assert not is_self_complementary("AAAA")
    assert not is_self_complementary("")
