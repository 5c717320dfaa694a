"""
Unit tests for the nearest-neighbor melting-temperature calculator.

Reference values were derived by hand from the bundled tables: the 21-mer
``ATGCGTACGTAGCTAGCTAGC`` sums to ΔH = -166.7 kcal/mol and
ΔS = -451.3 cal/(K·mol) under the revised set (initiation and one terminal
A·T included), giving about 63.9 °C at the default PCR conditions.
"""
import math

import pytest

from primer_thermo.caching import make_cache_key
from primer_thermo.errors import InvalidSequenceError, UnsupportedParameterCombinationError
from primer_thermo.thermo import (
    DEFAULT_CONDITIONS,
    MIN_TM_LENGTH,
    TmConditions,
    calculate_tm,
    classify_terminal_3prime,
    gc_content,
    nearest_neighbor_sum,
    terminal_3prime_dg,
)

PRIMER = "ATGCGTACGTAGCTAGCTAGC"


def test_reference_primer_tm(context):
    """
    The reference 21-mer melts near 63.9 °C with the revised set.
    """
    result = calculate_tm(PRIMER, context=context)

    assert result.valid
    assert result.delta_h == pytest.approx(-166.7)
    assert result.delta_s == pytest.approx(-451.3)
    assert result.tm == pytest.approx(63.9, abs=0.3)
    assert result.parameter_set == "santalucia2004@2004.1"
    assert result.reason is None


def test_salt_correction_is_reported(context):
    """
    Tm at 50 mM Na+ lies below the 1 M reference, so the shift is negative.
    """
    result = calculate_tm(PRIMER, context=context)
    assert result.salt_correction < 0


def test_more_magnesium_raises_tm(context):
    """
    Extra Mg2+ stabilizes the duplex.
    """
    low = calculate_tm(PRIMER, TmConditions(mg_mm=0.0, dntp_mm=0.0), context=context)
    high = calculate_tm(PRIMER, TmConditions(mg_mm=3.0), context=context)
    assert high.tm > low.tm


def test_higher_oligo_concentration_raises_tm(context):
    """
    Tm grows with strand concentration.
    """
    low = calculate_tm(PRIMER, TmConditions(oligo_nm=50.0), context=context)
    high = calculate_tm(PRIMER, TmConditions(oligo_nm=1000.0), context=context)
    assert high.tm > low.tm


def test_legacy_set_uses_entropic_salt_model(legacy_context):
    """
    The legacy set gives a valid, different Tm for the same primer.
    """
    result = calculate_tm(PRIMER, context=legacy_context)
    assert result.valid
    assert result.parameter_set.startswith("santalucia1998")
    assert 50.0 < result.tm < 75.0


def test_lowercase_input_is_accepted(context):
    """
    Lower case and surrounding whitespace are normalized before lookup.
    """
    assert calculate_tm(f"  {PRIMER.lower()} ", context=context).tm == calculate_tm(PRIMER, context=context).tm


@pytest.mark.parametrize("seq", ["", "AC", "ACGNT", "ACGU"])
def test_invalid_inputs_give_invalid_results(context, seq):
    """
    Short or non-DNA input yields ``valid=False`` rather than raising.
    """
    result = calculate_tm(seq, context=context)
    assert not result.valid
    assert result.tm is None
    assert result.reason
    assert math.isinf(result.delta_g())


def test_minimum_length_is_three(context):
    """
    Three bases is the shortest sequence that gets a Tm.
    """
    assert MIN_TM_LENGTH == 3
    assert calculate_tm("GCG", context=context).valid
    assert not calculate_tm("GC", context=context).valid


def test_results_are_memoized(context):
    """
    Repeated calls hit the Tm cache.
    """
    first = calculate_tm(PRIMER, context=context)
    second = calculate_tm(PRIMER, context=context)

    assert first is second
    assert len(context.tm_cache) == 1


def test_tm_cache_key_is_built_from_the_parameter_identity(context):
    """
    Entries are stored under the shared composite key, so they are tied to one parameter set.
    """
    calculate_tm(PRIMER, context=context)

    assert make_cache_key("tm", context.parameter_identity, PRIMER, None, DEFAULT_CONDITIONS) in context.tm_cache


def test_self_complementary_duplex_uses_symmetry(context):
    """
    Palindromes take the symmetry term and the Ct/4 concentration factor,
    so they melt lower than the same stacks would suggest for a hetero-duplex.
    """
    palindrome = calculate_tm("GCGATCGC", context=context)
    assert palindrome.valid
    # Symmetry adds -1.4 cal/(K·mol) to the entropy.
    stacks_h, stacks_s = nearest_neighbor_sum("GCGATCGC", "CGCTAGCG", context.parameters)
    assert palindrome.delta_s == pytest.approx(stacks_s - 5.7 - 1.4)
    assert palindrome.delta_h == pytest.approx(stacks_h + 0.2)


def test_explicit_complement_with_mismatch(context):
    """
    A partner strand with one mismatch lowers the Tm.
    """
    perfect = calculate_tm(PRIMER, context=context)
    # Central A·C mismatch: position 10 of the bottom strand reads C instead of T.
    bottom = list("TACGCATGCATCGATCGATCG")
    bottom[10] = "C"
    mismatched = calculate_tm(PRIMER, complement="".join(bottom), context=context)

    assert mismatched.valid
    assert mismatched.tm < perfect.tm


def test_explicit_perfect_complement_matches_default(context):
    """
    Passing the perfect complement is the same as passing none.
    """
    assert calculate_tm(PRIMER, complement="TACGCATGCATCGATCGATCG", context=context) is calculate_tm(
        PRIMER, context=context
    )


def test_bad_complement_raises(context):
    """
    Partner strands of the wrong length or alphabet are rejected.
    """
    with pytest.raises(InvalidSequenceError):
        calculate_tm(PRIMER, complement="TACG", context=context)
    with pytest.raises(InvalidSequenceError):
        calculate_tm("ACGT", complement="TGCN", context=context)


def test_untabulated_mismatch_raises(legacy_context):
    """
    The legacy set has no A·A parameters.
    """
    with pytest.raises(UnsupportedParameterCombinationError):
        calculate_tm("GCGAGCGC", complement="CGCACGCG", context=legacy_context)


def test_gc_content():
    """
    GC fraction is case-insensitive and zero for an empty string.
    """
    assert gc_content("GGCC") == 1.0
    assert gc_content("atgc") == 0.5
    assert gc_content("") == 0.0


def test_terminal_3prime_dg(context):
    """
    The 3' pentamer CTAGC sums to about -5.40 kcal/mol, a loose end.
    """
    delta_g = terminal_3prime_dg(PRIMER, context=context)

    assert delta_g == pytest.approx(-5.40, abs=0.01)
    assert classify_terminal_3prime(delta_g) == "loose"


def test_terminal_3prime_dg_requires_two_bases(context):
    """
    A single base has no nearest-neighbor step.
    """
    with pytest.raises(InvalidSequenceError):
        terminal_3prime_dg("A", context=context)


@pytest.mark.parametrize(
    "delta_g, label",
    [(-5.0, "loose"), (-6.5, "ideal"), (-9.5, "strong"), (-12.0, "sticky")],
)
def test_classify_terminal_3prime(delta_g, label):
    """
    Bands are split at -6, -9 and -11 kcal/mol.
    """
    assert classify_terminal_3prime(delta_g) == label
