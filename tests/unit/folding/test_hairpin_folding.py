"""
Unit tests for the single-strand (hairpin) folding engine and `fold_hairpin`.

The stem-loop ``GGGGAAAACCCC`` folds into four G·C pairs around a tetraloop:
three GG/CC stacks (-1.828 kcal/mol each) plus the 3.5 kcal/mol loop give
-1.98 kcal/mol at 37 °C.
"""
import math

import pytest

from primer_thermo.energies import DuplexEnergyModel
from primer_thermo.errors import InvalidSequenceError
from primer_thermo.folding import MODE_HAIRPIN, FoldingConfig, StructureKind, fold_hairpin
from primer_thermo.folding.zucker import (
    ZuckerBacktrackOp,
    ZuckerFoldingConfig,
    ZuckerFoldingEngine,
    make_fold_state,
    traceback_nested,
)
from primer_thermo.rules import is_min_hairpin_size
from primer_thermo.structures import Pair

STEM_LOOP = "GGGGAAAACCCC"


@pytest.fixture
def engine(context):
    """Hairpin engine over the revised set at 37 °C."""
    return ZuckerFoldingEngine(energy_model=DuplexEnergyModel(context.parameters), config=ZuckerFoldingConfig())


def test_make_fold_state_initial_values():
    """
    The W diagonal is 0.0; every other energy cell starts at +inf.
    """
    state = make_fold_state(4)
    assert state.w_matrix.get(2, 2) == 0.0
    assert math.isinf(state.w_matrix.get(0, 3))
    assert math.isinf(state.v_matrix.get(0, 3))
    assert math.isinf(state.wm_matrix.get(1, 1))
    assert state.w_back_ptr.get(0, 3).operation is ZuckerBacktrackOp.NONE


def test_engine_fills_stem_loop(engine):
    """
    W[0, N-1] holds the stem-loop energy; V follows the stem inward.
    """
    state = make_fold_state(len(STEM_LOOP))
    engine.fill_all_matrices(STEM_LOOP, state)

    assert state.w_matrix.get(0, 11) == pytest.approx(-1.984, abs=1e-3)
    assert state.w_pairs.get(0, 11) == 4
    assert state.v_back_ptr.get(0, 11).operation is ZuckerBacktrackOp.STACK
    assert state.v_back_ptr.get(0, 11).inner == (1, 10)
    assert state.v_back_ptr.get(3, 8).operation is ZuckerBacktrackOp.HAIRPIN


def test_traceback_recovers_pairs_and_elements(engine):
    """
    The traceback yields four nested pairs and one element per loop.
    """
    state = make_fold_state(len(STEM_LOOP))
    engine.fill_all_matrices(STEM_LOOP, state)
    trace = traceback_nested(STEM_LOOP, state)

    assert trace.pairs == [Pair(0, 11), Pair(1, 10), Pair(2, 9), Pair(3, 8)]
    assert trace.dot_bracket == "((((....))))"
    kinds = [el.kind for el in trace.elements]
    assert kinds == [
        StructureKind.EXTERIOR,
        StructureKind.STACK,
        StructureKind.STACK,
        StructureKind.STACK,
        StructureKind.HAIRPIN,
    ]
    assert sum(el.delta_g for el in trace.elements) == pytest.approx(state.w_matrix.get(0, 11))


def test_fold_hairpin_result(context):
    """
    `fold_hairpin` rounds the energy and flags the structure as existing.
    """
    result = fold_hairpin(STEM_LOOP, context=context)

    assert result.mode == MODE_HAIRPIN
    assert result.delta_g == pytest.approx(-1.98)
    assert result.exists
    assert result.dot_bracket == "((((....))))"
    assert result.paired_bases == 8
    assert result.sequences == (STEM_LOOP,)
    assert result.parameter_set == context.parameter_identity


def test_unstructured_sequence(context):
    """
    A homopolymer cannot pair: ΔG is exactly 0.0 and no structure exists.
    """
    result = fold_hairpin("AAAAAAAAAAAA", context=context)

    assert result.delta_g == 0.0
    assert not result.exists
    assert result.pairs == ()
    assert result.structure == ()
    assert result.dot_bracket == "." * 12


def test_short_sequence_has_no_room_for_a_loop(context):
    """
    Four bases cannot close a three-base loop with a stem.
    """
    result = fold_hairpin("GAAC", context=context)
    assert result.pairs == ()
    assert result.delta_g == 0.0


def test_weak_structure_is_not_reported_as_existing(context):
    """
    A single G·C pair closing a loop is unfavourable; folds above the
    threshold never count as existing.
    """
    result = fold_hairpin("GAAAC", context=context)
    assert not result.exists
    assert result.delta_g >= -1.0


def test_higher_temperature_destabilizes(context):
    """
    Stems melt as the folding temperature rises.
    """
    cold = fold_hairpin(STEM_LOOP, FoldingConfig(temp_c=25.0), context=context)
    warm = fold_hairpin(STEM_LOOP, FoldingConfig(temp_c=37.0), context=context)
    assert cold.delta_g < warm.delta_g


def test_results_are_cached(context):
    """
    Identical requests are served from the fold cache.
    """
    first = fold_hairpin(STEM_LOOP, context=context)
    second = fold_hairpin(STEM_LOOP.lower(), context=context)

    assert first is second
    assert len(context.fold_cache) == 1


def test_invalid_sequence_raises(context):
    """
    Non-DNA input is rejected.
    """
    with pytest.raises(InvalidSequenceError):
        fold_hairpin("GGGGAAAANCCCC", context=context)
    with pytest.raises(InvalidSequenceError):
        fold_hairpin("", context=context)


@pytest.mark.parametrize("min_loop", [3, 4, 5, 6])
def test_every_pair_respects_the_minimum_hairpin_loop(context, min_loop):
    """
    No reported pair encloses fewer unpaired bases than ``min_hairpin_loop`` allows.
    """
    result = fold_hairpin(
        "GGGGCAAAAGCCCCTTTGGGGAAAACCCC", FoldingConfig(min_hairpin_loop=min_loop), context=context
    )

    assert all(is_min_hairpin_size(p.base_i, p.base_j, min_loop) for p in result.pairs)
