"""
Unit tests for mutant versus original structure comparison.
"""
from primer_thermo.mutagenesis import compare_mutant_structure


def test_mutant_alone(context):
    """
    Without an original only the mutant is folded.
    """
    comparison = compare_mutant_structure("ATGCGTACGTAGCTAGCTAGC", context=context)

    assert comparison.original_hairpin is None
    assert comparison.hairpin_ddg is None
    assert not comparison.introduces_structure


def test_identical_primers_add_no_structure(context):
    seq = "ATGCGTACGTAGCTAGCTAGC"
    comparison = compare_mutant_structure(seq, seq, context=context)

    assert comparison.hairpin_ddg == 0.0
    assert comparison.homodimer_ddg == 0.0
    assert not comparison.introduces_structure


def test_mutation_creating_a_palindrome_adds_structure(context):
    """
    Turning a homopolymer into a palindrome creates a self-dimer.
    """
    comparison = compare_mutant_structure("GCGATCGC", "AAAAAAAA", context=context)

    assert comparison.homodimer_ddg < 0.0
    assert comparison.introduces_structure
