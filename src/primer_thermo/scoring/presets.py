from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from primer_thermo.energies import bundled_yaml_path
from primer_thermo.energies.data.yaml_io import read_yaml
from primer_thermo.errors import InvalidConfigurationError

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_PRESET",
    "PRESETS_FILE",
    "ScoringPreset",
    "apply_application",
    "get_preset",
    "list_applications",
    "list_presets",
    "load_presets",
    "resolve_weights",
    "validate_weights",
]

DEFAULT_PRESET = "default"
PRESETS_FILE = "scoring_presets"

WeightsLike = Union[str, Mapping[str, float]]


@dataclass(frozen=True)
class ScoringPreset:
    """
    Named scoring configuration.

    Attributes
    ----------
    name : str
        Preset name.
    description : str
        Free-text description.
    weights : dict
        Sub-score key -> non-negative weight.
    tm_range, gc_range, length_range : tuple of float
        Optimal windows of the Tm (°C), GC (%) and length (nt) curves.
    hairpin_threshold, homodimer_threshold, heterodimer_threshold : float
        ΔG (kcal/mol) below which the structure sub-scores start to decay.
    """
    name: str
    description: str = ""
    weights: Dict[str, float] = field(default_factory=dict)
    tm_range: Tuple[float, float] = (55.0, 60.0)
    gc_range: Tuple[float, float] = (40.0, 60.0)
    length_range: Tuple[float, float] = (18.0, 24.0)
    hairpin_threshold: float = -3.0
    homodimer_threshold: float = -6.0
    heterodimer_threshold: float = -6.0


def validate_weights(weights: Mapping[str, float]) -> Dict[str, float]:
    """
    Check a weight mapping and return it as a plain ``dict`` of floats.

    Raises
    ------
    InvalidConfigurationError
        If a weight is negative or not finite, or if the weights sum to zero.
    """
    checked: Dict[str, float] = {}
    for key, value in weights.items():
        try:
            weight = float(value)
        except (TypeError, ValueError):
            raise InvalidConfigurationError(f"Weight for '{key}' is not a number: {value!r}") from None
        if not math.isfinite(weight) or weight < 0:
            raise InvalidConfigurationError(f"Weight for '{key}' must be a finite non-negative number, got {value!r}.")
        checked[str(key)] = weight

    if sum(checked.values()) <= 0:
        raise InvalidConfigurationError("Weights must sum to a positive total.")

    return checked


def _range(raw: Any, default: Tuple[float, float], where: str) -> Tuple[float, float]:
    if raw is None:
        return default
    if not isinstance(raw, (list, tuple)) or len(raw) != 2:
        raise InvalidConfigurationError(f"{where} must be a two-element list.")
    low, high = float(raw[0]), float(raw[1])
    if low > high:
        raise InvalidConfigurationError(f"{where} has low > high: {raw}.")

    return low, high


def _resolve_preset(name: str, raw_presets: Mapping[str, Any], seen: Tuple[str, ...] = ()) -> ScoringPreset:
    if name in seen:
        raise InvalidConfigurationError(f"Preset inheritance cycle: {' -> '.join(seen + (name,))}")
    raw = raw_presets.get(name)
    if not isinstance(raw, Mapping):
        raise InvalidConfigurationError(f"Unknown preset '{name}'.")

    base_name = raw.get("base")
    base = _resolve_preset(base_name, raw_presets, seen + (name,)) if base_name else ScoringPreset(name=name)

    weights = dict(base.weights)
    weights.update(raw.get("weights") or {})

    return ScoringPreset(
        name=name,
        description=str(raw.get("description", base.description)),
        weights=validate_weights(weights),
        tm_range=_range(raw.get("tm_range"), base.tm_range, f"{name}.tm_range"),
        gc_range=_range(raw.get("gc_range"), base.gc_range, f"{name}.gc_range"),
        length_range=_range(raw.get("length_range"), base.length_range, f"{name}.length_range"),
        hairpin_threshold=float(raw.get("hairpin_threshold", base.hairpin_threshold)),
        homodimer_threshold=float(raw.get("homodimer_threshold", base.homodimer_threshold)),
        heterodimer_threshold=float(raw.get("heterodimer_threshold", base.heterodimer_threshold)),
    )


@lru_cache(maxsize=8)
def _load(path: str) -> Tuple[Dict[str, ScoringPreset], Dict[str, Dict[str, float]]]:
    data = read_yaml(path)
    raw_presets = data.get("presets")
    if not isinstance(raw_presets, Mapping) or not raw_presets:
        raise InvalidConfigurationError(f"No presets defined in {path}.")

    presets = {name: _resolve_preset(name, raw_presets) for name in raw_presets}

    applications: Dict[str, Dict[str, float]] = {}
    for app_name, multipliers in (data.get("applications") or {}).items():
        applications[app_name] = {str(k): float(v) for k, v in (multipliers or {}).items()}
        if any(v < 0 or not math.isfinite(v) for v in applications[app_name].values()):
            raise InvalidConfigurationError(f"Application '{app_name}' has a negative or non-finite multiplier.")

    logger.info(f"Loaded {len(presets)} scoring presets and {len(applications)} applications from {path}")

    return presets, applications


def load_presets(path: Optional[Union[str, Path]] = None) -> Dict[str, ScoringPreset]:
    """
    All presets of a preset file (the bundled one by default), inheritance resolved.

    Raises
    ------
    InvalidConfigurationError
        On unknown bases, inheritance cycles or invalid weights.
    ValueError
        If the file is missing or not a YAML mapping.
    """
    source = str(path) if path is not None else str(bundled_yaml_path(PRESETS_FILE))
    presets, _ = _load(source)

    return dict(presets)


def list_presets(path: Optional[Union[str, Path]] = None) -> Tuple[str, ...]:
    return tuple(load_presets(path))


def list_applications(path: Optional[Union[str, Path]] = None) -> Tuple[str, ...]:
    source = str(path) if path is not None else str(bundled_yaml_path(PRESETS_FILE))
    return tuple(_load(source)[1])


def apply_application(
    weights: Mapping[str, float], application: str, path: Optional[Union[str, Path]] = None
) -> Dict[str, float]:
    """
    Scale ``weights`` by an application's multipliers.

    A multiplier keyed by a metric family (``tm``) applies to the family key
    itself and to its ``_fwd`` / ``_rev`` variants.
    """
    source = str(path) if path is not None else str(bundled_yaml_path(PRESETS_FILE))
    applications = _load(source)[1]
    if application not in applications:
        raise InvalidConfigurationError(
            f"Unknown application '{application}'. Available: {', '.join(sorted(applications))}"
        )

    multipliers = applications[application]
    scaled: Dict[str, float] = {}
    for key, weight in weights.items():
        family = key[:-4] if key.endswith(("_fwd", "_rev")) else key
        scaled[key] = weight * multipliers.get(key, multipliers.get(family, 1.0))

    return scaled


def get_preset(
    name: str = DEFAULT_PRESET, application: Optional[str] = None, path: Optional[Union[str, Path]] = None
) -> ScoringPreset:
    """
    Look up a preset, optionally with an application's multipliers applied.

    Raises
    ------
    InvalidConfigurationError
        If the preset or application is unknown.
    """
    presets = load_presets(path)
    if name not in presets:
        raise InvalidConfigurationError(f"Unknown preset '{name}'. Available: {', '.join(sorted(presets))}")
    preset = presets[name]
    if application is None:
        return preset

    return ScoringPreset(
        name=f"{name}+{application}",
        description=preset.description,
        weights=validate_weights(apply_application(preset.weights, application, path)),
        tm_range=preset.tm_range,
        gc_range=preset.gc_range,
        length_range=preset.length_range,
        hairpin_threshold=preset.hairpin_threshold,
        homodimer_threshold=preset.homodimer_threshold,
        heterodimer_threshold=preset.heterodimer_threshold,
    )


def resolve_weights(weights: Optional[WeightsLike] = None, application: Optional[str] = None) -> Dict[str, float]:
    """
    Weight mapping from a preset name, an explicit mapping or ``None`` (default preset).

    Raises
    ------
    InvalidConfigurationError
        For unknown presets or applications, negative weights or a zero total.
    """
    if weights is None or isinstance(weights, str):
        return dict(get_preset(weights or DEFAULT_PRESET, application).weights)

    checked = validate_weights(weights)
    if application is not None:
        checked = validate_weights(apply_application(checked, application))

    return checked
