"""
Unit tests for primer and pair evaluation.
"""
import pytest

from primer_thermo.errors import InvalidConfigurationError, InvalidSequenceError
from primer_thermo.scoring import PrimerMetrics, build_pair_subscores, build_primer_subscores, evaluate_pair, evaluate_primer

PRIMER = "ATGCGTACGTAGCTAGCTAGC"


@pytest.fixture
def ideal_metrics():
    return PrimerMetrics(sequence=PRIMER, tm=58.0, gc_percent=52.38, terminal_3prime_dg=-8.0)


def test_primer_subscores_use_forward_keys(ideal_metrics):
    """
    Per-primer keys carry ``_fwd``; shared keys carry no suffix.
    """
    subscores = build_primer_subscores(ideal_metrics)

    assert subscores["tm_fwd"] == 1.0
    assert subscores["gc_fwd"] == 1.0
    assert subscores["length_fwd"] == 1.0
    assert subscores["hairpin_fwd"] == 1.0
    assert subscores["terminal_3prime_dg"] == 1.0
    assert subscores["off_target"] == 1.0
    assert "tm" not in subscores


def test_pair_subscores_keep_worse_shared_score(ideal_metrics):
    reverse = PrimerMetrics(sequence="GCTAGCTAGCTACGTACGCAT", tm=59.0, gc_percent=52.38, terminal_3prime_dg=-3.0)
    subscores = build_pair_subscores(ideal_metrics, reverse, heterodimer_dg=-9.0)

    assert "tm_rev" in subscores and "tm_fwd" in subscores
    assert subscores["terminal_3prime_dg"] < 1.0
    assert subscores["tm_diff"] == 1.0
    assert subscores["heterodimer"] < 1.0


def test_metrics_properties(ideal_metrics):
    assert ideal_metrics.length == 21
    assert ideal_metrics.homopolymer_run == 1


def test_evaluate_primer(context):
    analysis = evaluate_primer(PRIMER, context=context)

    assert analysis.sequence == PRIMER
    assert analysis.metrics.tm == pytest.approx(63.9, abs=0.3)
    assert analysis.metrics.gc_percent == pytest.approx(52.38)
    assert analysis.composite.score >= 0.75
    assert analysis.composite.quality in ("excellent", "good")


def test_off_target_hits_lower_the_score(context):
    """
    A perfect off-target site costs specificity.
    """
    clean = evaluate_primer(PRIMER, context=context)
    hits = [{"position": 5, "strand": "+", "mismatchCount": 0}, {"position": 900, "strand": "-", "mismatchCount": 0}]
    risky = evaluate_primer(PRIMER, off_target_hits=hits, intended_site=(5, "+"), context=context)

    assert risky.off_targets.high_risk == 1
    assert risky.subscores["off_target"] == pytest.approx(0.3)
    assert risky.composite.score < clean.composite.score


def test_evaluate_primer_rejects_bad_input(context):
    with pytest.raises(InvalidSequenceError):
        evaluate_primer("ATGNNC", context=context)
    with pytest.raises(InvalidConfigurationError):
        evaluate_primer(PRIMER, preset="bogus", context=context)


def test_evaluate_pair(context):
    forward = PRIMER
    reverse = "GCATGCTAGCATCGATCGTAC"
    pair = evaluate_pair(forward, reverse, context=context)

    assert pair.forward.sequence == forward
    assert pair.reverse.sequence == reverse
    assert pair.tm_difference == pytest.approx(abs(pair.forward.metrics.tm - pair.reverse.metrics.tm), abs=0.01)
    assert "heterodimer" in pair.subscores
    assert "tm_diff" in pair.subscores
    assert 0.0 <= pair.composite.score <= 1.0
