"""
Front end of the composite scorer.

`PrimerMetrics` is the raw metric bundle of one primer. `build_primer_subscores`
and `build_pair_subscores` map bundles onto the sub-score keys used by the
weight presets, and `evaluate_primer` / `evaluate_pair` run the Tm, folding
and specificity engines to produce the bundles in the first place.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Mapping, Optional, Tuple, Union

from primer_thermo.context import ThermoContext, get_default_context
from primer_thermo.evaluation import (
    DimerAssessment,
    OffTargetHit,
    OffTargetSummary,
    evaluate_hairpin,
    evaluate_heterodimer,
    evaluate_homodimer,
    off_target_penalty,
    summarize_off_targets,
)
from primer_thermo.folding import FoldingConfig
from primer_thermo.rules import validate_sequence
from primer_thermo.scoring.composite import CompositeScore, composite_score
from primer_thermo.scoring.presets import DEFAULT_PRESET, ScoringPreset, get_preset
from primer_thermo.scoring.sub_scores import (
    longest_homopolymer,
    score_g_quadruplex,
    score_gc,
    score_gc_clamp,
    score_hairpin,
    score_heterodimer,
    score_homodimer,
    score_homopolymer,
    score_length,
    score_off_target,
    score_terminal_3prime_dg,
    score_three_prime_composition,
    score_tm,
    score_tm_diff,
)
from primer_thermo.thermo import TmConditions, ThermoResult, calculate_tm, gc_content, terminal_3prime_dg

logger = logging.getLogger(__name__)

__all__ = [
    "PrimerMetrics",
    "PrimerAnalysis",
    "PairAnalysis",
    "build_primer_subscores",
    "build_pair_subscores",
    "evaluate_primer",
    "evaluate_pair",
]

# Sub-scores shared by both primers of a pair; the pair keeps the worse one.
_SHARED_KEYS = ("terminal_3prime_dg", "off_target")

HitsLike = Iterable[Union[OffTargetHit, Mapping]]


@dataclass(frozen=True, slots=True)
class PrimerMetrics:
    """
    Raw metrics of one primer.

    Attributes
    ----------
    sequence : str
        Primer, 5'→3'.
    tm : float, optional
        Melting temperature (°C); ``None`` when it could not be computed.
    gc_percent : float
        GC content in percent.
    terminal_3prime_dg : float, optional
        ΔG (kcal/mol) of the 3' pentamer.
    hairpin_dg, homodimer_dg : float
        MFE hairpin and self-dimer ΔG (kcal/mol); 0.0 for no structure.
    off_target_penalty : float
        Specificity penalty in [0, 1].
    """
    sequence: str
    tm: Optional[float]
    gc_percent: float
    terminal_3prime_dg: Optional[float]
    hairpin_dg: float = 0.0
    homodimer_dg: float = 0.0
    off_target_penalty: float = 0.0

    @property
    def length(self) -> int:
        return len(self.sequence)

    @property
    def homopolymer_run(self) -> int:
        return longest_homopolymer(self.sequence)


def _primer_scores(metrics: PrimerMetrics, preset: ScoringPreset) -> Dict[str, float]:
    return {
        "tm": score_tm(metrics.tm, preset.tm_range),
        "gc": score_gc(metrics.gc_percent, preset.gc_range),
        "length": score_length(float(metrics.length), preset.length_range),
        "hairpin": score_hairpin(metrics.hairpin_dg, preset.hairpin_threshold),
        "self_dimer": score_homodimer(metrics.homodimer_dg, preset.homodimer_threshold),
        "terminal_3prime_dg": score_terminal_3prime_dg(metrics.terminal_3prime_dg),
        "gc_clamp": score_gc_clamp(metrics.sequence),
        "three_prime_comp": score_three_prime_composition(metrics.sequence, metrics.terminal_3prime_dg),
        "off_target": score_off_target(metrics.off_target_penalty),
        "g_quadruplex": score_g_quadruplex(metrics.sequence),
        "homopolymer": score_homopolymer(metrics.sequence),
    }


def _suffixed(scores: Mapping[str, float], suffix: str) -> Dict[str, float]:
    return {key if key in _SHARED_KEYS else f"{key}_{suffix}": value for key, value in scores.items()}


def build_primer_subscores(metrics: PrimerMetrics, preset: Optional[ScoringPreset] = None) -> Dict[str, float]:
    """
    Sub-scores of a single primer under the ``*_fwd`` keys.

    ``terminal_3prime_dg`` and ``off_target`` carry no suffix.
    """
    active = preset if preset is not None else get_preset(DEFAULT_PRESET)

    return _suffixed(_primer_scores(metrics, active), "fwd")


def build_pair_subscores(
    forward: PrimerMetrics,
    reverse: PrimerMetrics,
    heterodimer_dg: float = 0.0,
    preset: Optional[ScoringPreset] = None,
) -> Dict[str, float]:
    """
    Sub-scores of a primer pair.

    Per-primer metrics go to ``*_fwd`` and ``*_rev`` keys. The 3'-stability
    and off-target scores take the minimum over both primers; ``heterodimer``
    and ``tm_diff`` describe the pair.
    """
    active = preset if preset is not None else get_preset(DEFAULT_PRESET)
    fwd_scores = _primer_scores(forward, active)
    rev_scores = _primer_scores(reverse, active)

    combined = _suffixed(fwd_scores, "fwd")
    combined.update(_suffixed(rev_scores, "rev"))
    for key in _SHARED_KEYS:
        combined[key] = min(fwd_scores[key], rev_scores[key])
    combined["heterodimer"] = score_heterodimer(heterodimer_dg, active.heterodimer_threshold)
    combined["tm_diff"] = score_tm_diff(forward.tm, reverse.tm)

    return combined


@dataclass(frozen=True)
class PrimerAnalysis:
    """
    Full evaluation of one primer.

    Attributes
    ----------
    metrics : PrimerMetrics
        Raw metrics.
    thermo : ThermoResult
        Melting-temperature result.
    hairpin, homodimer : DimerAssessment
        Self-structure assessments.
    off_targets : OffTargetSummary
        Off-target sites by risk class.
    subscores : dict
        Sub-scores under the preset keys.
    composite : CompositeScore
        Weighted score and quality band.
    """
    metrics: PrimerMetrics
    thermo: ThermoResult
    hairpin: DimerAssessment
    homodimer: DimerAssessment
    off_targets: OffTargetSummary
    subscores: Dict[str, float]
    composite: CompositeScore

    @property
    def sequence(self) -> str:
        return self.metrics.sequence


@dataclass(frozen=True)
class PairAnalysis:
    """Evaluation of a forward/reverse primer pair."""
    forward: PrimerAnalysis
    reverse: PrimerAnalysis
    heterodimer: DimerAssessment
    subscores: Dict[str, float]
    composite: CompositeScore

    @property
    def tm_difference(self) -> Optional[float]:
        tm_fwd, tm_rev = self.forward.metrics.tm, self.reverse.metrics.tm
        if tm_fwd is None or tm_rev is None:
            return None
        return round(abs(tm_fwd - tm_rev), 2)


def _analyze(
    seq: str,
    conditions: Optional[TmConditions],
    off_target_hits: Optional[HitsLike],
    intended_site: Optional[Tuple[int, str]],
    folding_config: Optional[FoldingConfig],
    ctx: ThermoContext,
) -> Tuple[PrimerMetrics, ThermoResult, DimerAssessment, DimerAssessment, OffTargetSummary]:
    canonical = validate_sequence(seq)
    thermo = calculate_tm(canonical, conditions, context=ctx)
    terminal_dg = terminal_3prime_dg(canonical, context=ctx) if len(canonical) >= 2 else None
    hairpin = evaluate_hairpin(canonical, folding_config, ctx)
    homodimer = evaluate_homodimer(canonical, folding_config, ctx)
    summary = summarize_off_targets(off_target_hits or (), intended_site)

    metrics = PrimerMetrics(
        sequence=canonical,
        tm=thermo.tm,
        gc_percent=round(100.0 * gc_content(canonical), 2),
        terminal_3prime_dg=terminal_dg,
        hairpin_dg=hairpin.delta_g,
        homodimer_dg=homodimer.delta_g,
        off_target_penalty=off_target_penalty(summary),
    )

    return metrics, thermo, hairpin, homodimer, summary


def evaluate_primer(
    seq: str,
    *,
    conditions: Optional[TmConditions] = None,
    preset: str = DEFAULT_PRESET,
    application: Optional[str] = None,
    off_target_hits: Optional[HitsLike] = None,
    intended_site: Optional[Tuple[int, str]] = None,
    folding_config: Optional[FoldingConfig] = None,
    context: Optional[ThermoContext] = None,
) -> PrimerAnalysis:
    """
    Evaluate a single primer and score it.

    Parameters
    ----------
    seq : str
        Primer, 5'→3'.
    conditions : TmConditions, optional
        Tm conditions.
    preset : str
        Scoring preset name.
    application : str, optional
        Application modifier applied to the preset weights.
    off_target_hits : iterable, optional
        Sites reported by an external off-target search.
    intended_site : tuple, optional
        ``(position, strand)`` of the intended target among the hits.
    folding_config : FoldingConfig, optional
        Folding settings for the hairpin and self-dimer.
    context : ThermoContext, optional
        Evaluation context.

    Raises
    ------
    InvalidSequenceError
        If ``seq`` is not a valid DNA sequence.
    InvalidConfigurationError
        For unknown presets/applications or malformed hits.
    """
    ctx = context if context is not None else get_default_context()
    scoring = get_preset(preset, application)
    metrics, thermo, hairpin, homodimer, summary = _analyze(
        seq, conditions, off_target_hits, intended_site, folding_config, ctx
    )

    subscores = build_primer_subscores(metrics, scoring)
    composite = composite_score(subscores, scoring.weights)
    logger.debug(f"Primer {metrics.sequence}: score={composite.score} ({composite.quality})")

    return PrimerAnalysis(metrics, thermo, hairpin, homodimer, summary, subscores, composite)


def evaluate_pair(
    forward: str,
    reverse: str,
    *,
    conditions: Optional[TmConditions] = None,
    preset: str = DEFAULT_PRESET,
    application: Optional[str] = None,
    forward_hits: Optional[HitsLike] = None,
    reverse_hits: Optional[HitsLike] = None,
    folding_config: Optional[FoldingConfig] = None,
    context: Optional[ThermoContext] = None,
) -> PairAnalysis:
    """
    Evaluate a forward/reverse primer pair, including their cross-dimer.

    Each primer is scored on its own (``composite`` of its `PrimerAnalysis`
    uses the ``*_fwd`` keys) and the pair is scored with
    `build_pair_subscores`.
    """
    ctx = context if context is not None else get_default_context()
    scoring = get_preset(preset, application)

    analyses = []
    for seq, hits in ((forward, forward_hits), (reverse, reverse_hits)):
        metrics, thermo, hairpin, homodimer, summary = _analyze(seq, conditions, hits, None, folding_config, ctx)
        subscores = build_primer_subscores(metrics, scoring)
        analyses.append(
            PrimerAnalysis(
                metrics, thermo, hairpin, homodimer, summary, subscores, composite_score(subscores, scoring.weights)
            )
        )
    fwd, rev = analyses

    heterodimer = evaluate_heterodimer(fwd.sequence, rev.sequence, folding_config, ctx)
    pair_scores = build_pair_subscores(fwd.metrics, rev.metrics, heterodimer.delta_g, scoring)
    composite = composite_score(pair_scores, scoring.weights)
    logger.info(f"Pair {fwd.sequence}/{rev.sequence}: score={composite.score} ({composite.quality})")

    return PairAnalysis(fwd, rev, heterodimer, pair_scores, composite)
