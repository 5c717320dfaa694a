"""
Unit tests for the nucleotide helpers.

Covers complementing and reverse-complementing strands, and the ``"XY/ZW"``
nearest-neighbor key conventions used by every parameter table lookup.
"""
import pytest

from primer_thermo.utils.nucleotide_utils import (
    complement,
    complement_strand,
    flip_key,
    is_watson_crick,
    reverse_complement,
    stack_key,
)


def test_complement_of_each_base():
    """
    Watson-Crick complements for A, C, G, T; unknown symbols pass through.
    """
    assert complement("A") == "T"
    assert complement("T") == "A"
    assert complement("G") == "C"
    assert complement("C") == "G"
    assert complement("N") == "N"


def test_complement_strand_keeps_orientation():
    """
    `complement_strand` complements base by base without reversing.
    """
    assert complement_strand("ACGTT") == "TGCAA"


@pytest.mark.parametrize(
    "seq, expected",
    [
        ("ATGC", "GCAT"),
        ("AAAC", "GTTT"),
        ("GCGATCGC", "GCGATCGC"),
        ("", ""),
    ],
)
def test_reverse_complement(seq, expected):
    """
    Reverse complements read 5'->3'; palindromes map onto themselves.
    """
    assert reverse_complement(seq) == expected


def test_is_watson_crick_only_accepts_canonical_pairs():
    """
    A-T and G-C pair; G-T wobbles and mismatches do not.
    """
    assert is_watson_crick("A", "T")
    assert is_watson_crick("C", "G")
    assert not is_watson_crick("G", "T")
    assert not is_watson_crick("A", "A")


def test_stack_key_and_flip_key_describe_the_same_stack():
    """
    A key read from the opposite strand flips to ``"WZ/YX"`` and flips back.
    """
    key = stack_key("CA", "GT")
    assert key == "CA/GT"
    assert flip_key(key) == "TG/AC"
    # Flipping twice restores the original orientation.
    assert flip_key(flip_key(key)) == key
