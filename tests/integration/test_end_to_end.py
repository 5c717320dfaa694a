"""
End-to-end checks across the public API: Tm, folding, mismatch Tm and scoring.
"""
import pytest

import primer_thermo
from primer_thermo import (
    TmConditions,
    calculate_mismatch_tm,
    calculate_tm,
    evaluate_pair,
    evaluate_primer,
    fold_dimer,
    fold_hairpin,
    select_codon,
)
from primer_thermo.scoring import (
    DEFAULT_PRESET,
    classify_quality,
    composite_score,
    get_preset,
    score_heterodimer,
    score_tm_diff,
)

PRIMER = "ATGCGTACGTAGCTAGCTAGC"


def test_typical_primer_has_pcr_range_tm(context):
    result = calculate_tm(PRIMER, context=context)

    assert result.valid
    assert 55.0 <= result.tm <= 65.0


def test_parameter_sets_give_close_tms(context, legacy_context):
    """
    Both parameter sets agree within a few degrees for a typical primer.
    """
    revised = calculate_tm(PRIMER, context=context)
    legacy = calculate_tm(PRIMER, context=legacy_context)

    assert revised.parameter_set != legacy.parameter_set
    assert abs(revised.tm - legacy.tm) < 3.0


def test_more_magnesium_raises_tm(context):
    low = calculate_tm(PRIMER, TmConditions(mg_mm=0.5), context=context)
    high = calculate_tm(PRIMER, TmConditions(mg_mm=5.0), context=context)

    assert high.tm > low.tm


def test_palindrome_dimer_and_hairpin(context):
    """
    A self-complementary primer dimerizes; a stem-loop folds back on itself.
    """
    dimer = fold_dimer("GCGATCGC", "GCGATCGC", context=context)
    hairpin = fold_hairpin("GGGGAAAACCCC", context=context)

    assert dimer.exists
    assert dimer.delta_g < -1.0
    assert hairpin.dot_bracket == "((((....))))"


def test_mutagenic_primer_workflow(context):
    """
    Choose a codon, build the mutagenic primer and compare its Tm to the wild type.
    """
    wild_type = "ATGCGTACGGCTAGCTAGCTAGC"
    selection = select_codon(wild_type[9:12], "G")
    mutant = wild_type[:9] + selection.codon + wild_type[12:]

    perfect = calculate_mismatch_tm(wild_type, wild_type, context=context)
    mutated = calculate_mismatch_tm(mutant, wild_type, context=context)

    assert selection.nucleotide_changes == 1
    assert mutated.mutation_type == "substitution"
    assert len(mutated.mismatch_positions) == 1
    assert mutated.tm < perfect.tm


def test_primer_and_pair_scoring(context):
    primer = evaluate_primer(PRIMER, context=context)
    pair = evaluate_pair(PRIMER, "GCATGCTAGCATCGATCGTAC", context=context)

    preset = get_preset(DEFAULT_PRESET)
    fwd_tm, rev_tm = pair.forward.metrics.tm, pair.reverse.metrics.tm

    assert primer.composite.quality in ("excellent", "good")
    assert pair.heterodimer.delta_g <= 0.0
    assert 50.0 <= rev_tm <= 72.0
    assert pair.tm_difference == pytest.approx(abs(fwd_tm - rev_tm), abs=0.01)
    assert pair.subscores["tm_diff"] == pytest.approx(score_tm_diff(fwd_tm, rev_tm))
    assert pair.subscores["heterodimer"] == pytest.approx(
        score_heterodimer(pair.heterodimer.delta_g, preset.heterodimer_threshold)
    )
    # Both strands are 21 nt at 52 % GC.
    assert pair.subscores["gc_fwd"] == 1.0
    assert pair.subscores["gc_rev"] == 1.0
    assert pair.subscores["length_fwd"] == 1.0
    assert all(0.0 <= value <= 1.0 for value in pair.subscores.values())
    assert pair.composite.score == pytest.approx(composite_score(pair.subscores, preset.weights).score)
    assert pair.composite.quality == classify_quality(pair.composite.score)
    # 21-mers at 52 % GC with a GC clamp; only the palindromic cores cost points.
    assert pair.composite.quality in ("excellent", "good", "acceptable")


def test_package_metadata():
    assert primer_thermo.__version__ == "0.1.0"
    assert "calculate_tm" in primer_thermo.__all__


def test_invalid_symbols_are_reported_not_substituted(context):
    """
    The Tm calculator reports bad input as invalid; folding raises for it.
    """
    result = calculate_tm("ATGXC", context=context)

    assert not result.valid
    assert result.tm is None
    assert "position 3" in result.reason
    with pytest.raises(primer_thermo.PrimerThermoError):
        fold_hairpin("ATGXC", context=context)
