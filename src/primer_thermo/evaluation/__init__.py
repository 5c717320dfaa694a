from primer_thermo.evaluation.dimers import (
    SEVERITY_THRESHOLDS,
    THREE_PRIME_WINDOW,
    DimerAssessment,
    DimerSeverity,
    classify_dimer_severity,
    evaluate_hairpin,
    evaluate_heterodimer,
    evaluate_homodimer,
)
from primer_thermo.evaluation.specificity import (
    OffTargetHit,
    OffTargetSummary,
    classify_off_target_risk,
    off_target_penalty,
    summarize_off_targets,
)

__all__ = [
    "SEVERITY_THRESHOLDS",
    "THREE_PRIME_WINDOW",
    "DimerAssessment",
    "DimerSeverity",
    "OffTargetHit",
    "OffTargetSummary",
    "classify_dimer_severity",
    "classify_off_target_risk",
    "evaluate_hairpin",
    "evaluate_heterodimer",
    "evaluate_homodimer",
    "off_target_penalty",
    "summarize_off_targets",
]
