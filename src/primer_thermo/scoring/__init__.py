from primer_thermo.scoring.response_curves import NEUTRAL_SCORE, PiecewiseLogistic, clamp_unit
from primer_thermo.scoring.sub_scores import (
    GC_CURVE,
    LENGTH_CURVE,
    TM_CURVE,
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
from primer_thermo.scoring.presets import (
    DEFAULT_PRESET,
    ScoringPreset,
    apply_application,
    get_preset,
    list_applications,
    list_presets,
    load_presets,
    resolve_weights,
    validate_weights,
)
from primer_thermo.scoring.composite import QUALITY_BANDS, CompositeScore, ScoreContribution, classify_quality, composite_score
from primer_thermo.scoring.primer_scoring import (
    PairAnalysis,
    PrimerAnalysis,
    PrimerMetrics,
    build_pair_subscores,
    build_primer_subscores,
    evaluate_pair,
    evaluate_primer,
)

__all__ = [
    "DEFAULT_PRESET",
    "GC_CURVE",
    "LENGTH_CURVE",
    "NEUTRAL_SCORE",
    "QUALITY_BANDS",
    "TM_CURVE",
    "CompositeScore",
    "PairAnalysis",
    "PiecewiseLogistic",
    "PrimerAnalysis",
    "PrimerMetrics",
    "ScoreContribution",
    "ScoringPreset",
    "apply_application",
    "build_pair_subscores",
    "build_primer_subscores",
    "clamp_unit",
    "classify_quality",
    "composite_score",
    "evaluate_pair",
    "evaluate_primer",
    "get_preset",
    "list_applications",
    "list_presets",
    "load_presets",
    "longest_homopolymer",
    "resolve_weights",
    "score_g_quadruplex",
    "score_gc",
    "score_gc_clamp",
    "score_hairpin",
    "score_heterodimer",
    "score_homodimer",
    "score_homopolymer",
    "score_length",
    "score_off_target",
    "score_terminal_3prime_dg",
    "score_three_prime_composition",
    "score_tm",
    "score_tm_diff",
    "validate_weights",
]
