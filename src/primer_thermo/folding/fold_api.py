"""
Entry points of the folding engine.

`fold_hairpin` runs the nested single-strand DP and `fold_dimer` the
two-strand duplex DP. Both validate their input, memoize the result in the
context's fold cache and return a `FoldResult`.
"""
from __future__ import annotations
import logging
from typing import List, Optional

from primer_thermo.caching import CacheKey, make_cache_key
from primer_thermo.context import ThermoContext, get_default_context
from primer_thermo.folding.dimer import (
    DimerFoldingConfig,
    DimerFoldingEngine,
    make_dimer_state,
    traceback_dimer,
)
from primer_thermo.folding.fold_result import FoldingConfig, FoldResult, StructureElement
from primer_thermo.folding.zucker import (
    ZuckerFoldingConfig,
    ZuckerFoldingEngine,
    make_fold_state,
    traceback_nested,
)
from primer_thermo.rules import validate_sequence

logger = logging.getLogger(__name__)

__all__ = ["fold_hairpin", "fold_dimer", "MODE_HAIRPIN", "MODE_HOMODIMER", "MODE_HETERODIMER"]

MODE_HAIRPIN = "hairpin"
MODE_HOMODIMER = "homodimer"
MODE_HETERODIMER = "heterodimer"

_DEFAULT_CONFIG = FoldingConfig()


def _fold_key(mode: str, sequences: tuple, cfg: FoldingConfig, identity: str) -> CacheKey:
    # Every field except `verbose` changes the result.
    return make_cache_key(
        "fold", identity, mode, sequences, cfg.temp_c, cfg.max_loop, cfg.min_hairpin_loop, cfg.no_structure_threshold
    )


def _round_elements(elements: List[StructureElement]) -> tuple:
    return tuple(
        StructureElement(el.kind, el.i, el.j, el.inner, round(el.delta_g, 2)) for el in elements
    )


def _finish(
    mode: str,
    sequences: tuple,
    raw_delta_g: float,
    trace,
    cfg: FoldingConfig,
    identity: str,
) -> FoldResult:
    delta_g = round(raw_delta_g, 2) if trace.pairs else 0.0
    # Avoid reporting -0.0.
    delta_g = delta_g + 0.0

    return FoldResult(
        delta_g=delta_g,
        structure=_round_elements(trace.elements),
        exists=bool(trace.pairs) and delta_g <= cfg.no_structure_threshold,
        mode=mode,
        sequences=sequences,
        pairs=tuple(trace.pairs),
        dot_bracket=trace.dot_bracket,
        parameter_set=identity,
    )


def fold_hairpin(
    seq: str,
    config: Optional[FoldingConfig] = None,
    context: Optional[ThermoContext] = None,
) -> FoldResult:
    """
    Minimum-free-energy secondary structure of a single strand.

    Parameters
    ----------
    seq : str
        DNA sequence, 5'→3'.
    config : FoldingConfig, optional
        Folding settings; defaults to `FoldingConfig()`.
    context : ThermoContext, optional
        Evaluation context; defaults to the shared context.

    Returns
    -------
    FoldResult
        ``mode == "hairpin"``. ``delta_g`` is 0.0 when no pair forms.

    Raises
    ------
    InvalidSequenceError
        If ``seq`` is empty or holds symbols outside ``ACGT``.
    """
    ctx = context if context is not None else get_default_context()
    cfg = config if config is not None else _DEFAULT_CONFIG
    canonical = validate_sequence(seq)
    identity = ctx.parameter_identity

    key = _fold_key(MODE_HAIRPIN, (canonical,), cfg, identity)
    cached = ctx.fold_cache.get(key)
    if cached is not None:
        return cached

    engine = ZuckerFoldingEngine(
        energy_model=ctx.energy_model(cfg.temp_c),
        config=ZuckerFoldingConfig(
            temp_k=cfg.temp_k,
            min_hairpin_loop=cfg.min_hairpin_loop,
            max_loop=cfg.max_loop,
            verbose=cfg.verbose,
        ),
    )
    state = make_fold_state(len(canonical))
    engine.fill_all_matrices(canonical, state)
    trace = traceback_nested(canonical, state)

    result = _finish(MODE_HAIRPIN, (canonical,), state.w_matrix.get(0, len(canonical) - 1), trace, cfg, identity)
    logger.debug(f"Hairpin fold of {canonical}: {result.dot_bracket} ΔG={result.delta_g}")
    ctx.fold_cache.put(key, result)

    return result


def fold_dimer(
    seq_a: str,
    seq_b: str,
    config: Optional[FoldingConfig] = None,
    context: Optional[ThermoContext] = None,
) -> FoldResult:
    """
    Most stable duplex formed between two strands.

    Strand B is laid antiparallel to strand A (read 3'→5'). When both strands
    are the same sequence the fold is a homodimer and takes the symmetry
    correction.

    Parameters
    ----------
    seq_a, seq_b : str
        DNA sequences, both 5'→3'.
    config : FoldingConfig, optional
        Folding settings; defaults to `FoldingConfig()`.
    context : ThermoContext, optional
        Evaluation context; defaults to the shared context.

    Returns
    -------
    FoldResult
        ``mode`` is ``"homodimer"`` or ``"heterodimer"``; the dot-bracket
        string has the form ``"A&B"``.

    Raises
    ------
    InvalidSequenceError
        If either strand is empty or holds symbols outside ``ACGT``.
    """
    ctx = context if context is not None else get_default_context()
    cfg = config if config is not None else _DEFAULT_CONFIG
    strand_a = validate_sequence(seq_a)
    strand_b = validate_sequence(seq_b)
    identity = ctx.parameter_identity

    mode = MODE_HOMODIMER if strand_a == strand_b else MODE_HETERODIMER
    sequences = (strand_a, strand_b)

    key = _fold_key(mode, sequences, cfg, identity)
    cached = ctx.fold_cache.get(key)
    if cached is not None:
        return cached

    strand_b_reversed = strand_b[::-1]
    engine = DimerFoldingEngine(
        energy_model=ctx.energy_model(cfg.temp_c),
        config=DimerFoldingConfig(temp_k=cfg.temp_k, max_loop=cfg.max_loop, verbose=cfg.verbose),
    )
    state = make_dimer_state(strand_a, strand_b_reversed)
    engine.fill_all_matrices(strand_a, strand_b_reversed, state)
    optimum = engine.best_duplex(strand_a, strand_b_reversed, state, symmetric=mode == MODE_HOMODIMER)
    trace = traceback_dimer(strand_a, strand_b, state, optimum)

    result = _finish(mode, sequences, optimum.delta_g, trace, cfg, identity)
    logger.debug(f"{mode} fold of {strand_a}/{strand_b}: {result.dot_bracket} ΔG={result.delta_g}")
    ctx.fold_cache.put(key, result)

    return result
