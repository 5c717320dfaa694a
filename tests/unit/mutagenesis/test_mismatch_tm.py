"""
Unit tests for the Tm of mutagenic primers against their template.
"""
import pytest

from primer_thermo.errors import InvalidSequenceError
from primer_thermo.mutagenesis import calculate_mismatch_tm
from primer_thermo.thermo import calculate_tm

PRIMER = "ATGCGTACGTAGCTAGCTAGC"


def _substitute(seq, index, base):
    return seq[:index] + base + seq[index + 1:]


def test_perfect_match_equals_calculate_tm(context):
    """
    A template identical to the primer gives the plain duplex Tm.
    """
    result = calculate_mismatch_tm(PRIMER, PRIMER, context=context)
    reference = calculate_tm(PRIMER, context=context)

    assert result.mutation_type == "match"
    assert result.tm == reference.tm
    assert result.delta_h == reference.delta_h
    assert result.delta_s == reference.delta_s
    assert result.mismatch_positions == ()
    assert result.valid


def test_central_substitution_lowers_tm(context):
    """
    One internal mismatch destabilizes the duplex without touching the 3' end.
    """
    template = _substitute(PRIMER, 10, "G")
    perfect = calculate_mismatch_tm(PRIMER, PRIMER, context=context)
    result = calculate_mismatch_tm(PRIMER, template, context=context)

    assert result.mutation_type == "substitution"
    assert result.mismatch_positions == (10,)
    assert result.consecutive_mismatches == 0
    assert not result.has_3prime_mismatch
    assert not result.has_terminal_mismatch
    assert result.tm is not None
    assert result.tm < perfect.tm


def test_adjacent_mismatches_are_counted(context):
    template = _substitute(_substitute(PRIMER, 9, "A"), 10, "G")
    result = calculate_mismatch_tm(PRIMER, template, context=context)

    assert result.mismatch_positions == (9, 10)
    assert result.consecutive_mismatches == 1


def test_three_prime_mismatch_is_flagged(context):
    """
    A mismatch at the last primer base is both 3'-proximal and terminal.
    """
    template = _substitute(PRIMER, len(PRIMER) - 1, "A")
    result = calculate_mismatch_tm(PRIMER, template, context=context)

    assert result.mismatch_positions == (len(PRIMER) - 1,)
    assert result.has_3prime_mismatch
    assert result.has_terminal_mismatch


def test_deletion_is_scored_as_bulge(context):
    """
    A primer lacking one template base reports a deletion with no unpaired primer bases.
    """
    primer = PRIMER[:10] + PRIMER[11:]
    perfect = calculate_mismatch_tm(PRIMER, PRIMER, context=context)
    result = calculate_mismatch_tm(primer, PRIMER, context=context)

    assert result.mutation_type == "deletion"
    assert result.mismatch_positions == ()
    assert result.tm is not None
    assert result.tm < perfect.tm


def test_insertion_reports_inserted_positions(context):
    template = PRIMER[:10] + PRIMER[11:]
    result = calculate_mismatch_tm(PRIMER, template, context=context)

    assert result.mutation_type == "insertion"
    assert result.mismatch_positions == (10,)


def test_mostly_mismatched_primer_will_not_bind(context):
    """
    More than half of the positions mismatching means no binding.
    """
    result = calculate_mismatch_tm("AAAAAAAAAA", "CCCCCCCCCC", context=context)

    assert result.will_not_bind
    assert result.tm is None
    assert not result.valid
    assert result.salt_correction == 0.0


def test_length_difference_above_three_raises(context):
    with pytest.raises(InvalidSequenceError):
        calculate_mismatch_tm(PRIMER, PRIMER[:-4], context=context)


def test_results_are_cached(context):
    """
    Repeated calls return the cached result object.
    """
    template = _substitute(PRIMER, 10, "G")
    first = calculate_mismatch_tm(PRIMER, template, context=context)
    second = calculate_mismatch_tm(PRIMER, template, context=context)

    assert first is second
