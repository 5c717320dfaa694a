from __future__ import annotations
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from primer_thermo.caching import DictCache, ResultCache
from primer_thermo.energies import (
    LEGACY_PARAMETER_SET,
    REVISED_PARAMETER_SET,
    DuplexEnergies,
    DuplexEnergyModel,
    DuplexParameterLoader,
)
from primer_thermo.utils.energy_utils import celsius_to_kelvin

logger = logging.getLogger(__name__)

__all__ = [
    "ThermoContext",
    "create_context",
    "get_default_context",
    "reset_default_context",
    "use_revised_parameters",
]

_LOADER = DuplexParameterLoader()


@dataclass(slots=True)
class ThermoContext:
    """
    Evaluation context threaded through every calculator call.

    It holds the active nearest-neighbor parameter set and the two result
    caches. Separate contexts can be used concurrently with different sets;
    switching the set of one context requires exclusive access to it.

    Attributes
    ----------
    parameters : DuplexEnergies
        Active parameter set.
    tm_cache : ResultCache
        Memoized melting-temperature results.
    fold_cache : ResultCache
        Memoized folding results.
    """
    parameters: DuplexEnergies
    tm_cache: ResultCache = field(default_factory=DictCache)
    fold_cache: ResultCache = field(default_factory=DictCache)

    @property
    def parameter_identity(self) -> str:
        return self.parameters.identity

    @property
    def uses_revised_parameters(self) -> bool:
        return self.parameters.NAME == REVISED_PARAMETER_SET

    def energy_model(self, temp_c: float = 37.0) -> DuplexEnergyModel:
        """Energy model over the active set at ``temp_c`` (°C)."""
        return DuplexEnergyModel(params=self.parameters, temp_k=celsius_to_kelvin(temp_c))

    def clear_caches(self) -> None:
        """Drop every memoized Tm and fold result."""
        self.tm_cache.clear()
        self.fold_cache.clear()

    def set_parameters(self, parameters: DuplexEnergies) -> bool:
        """
        Activate another parameter set.

        Returns
        -------
        bool
            True if the active set changed (caches were cleared), False if the
            requested set was already active.
        """
        if parameters.identity == self.parameters.identity:
            return False

        logger.info(f"Switching parameter set {self.parameters.identity} -> {parameters.identity}")
        self.parameters = parameters
        self.clear_caches()

        return True


def create_context(
    revised: bool = True,
    *,
    parameter_file: Optional[str | Path] = None,
    tm_cache: Optional[ResultCache] = None,
    fold_cache: Optional[ResultCache] = None,
) -> ThermoContext:
    """
    Build a fresh, independent context.

    Parameters
    ----------
    revised : bool
        Start with the revised (``santalucia2004``) set if True, else the legacy set.
    parameter_file : str | Path, optional
        Custom YAML parameter file; overrides ``revised``.
    tm_cache, fold_cache : ResultCache, optional
        Cache implementations. Default to unbounded `DictCache` instances.
    """
    source = parameter_file if parameter_file is not None else (
        REVISED_PARAMETER_SET if revised else LEGACY_PARAMETER_SET
    )

    return ThermoContext(
        parameters=_LOADER.load(source),
        tm_cache=tm_cache if tm_cache is not None else DictCache(),
        fold_cache=fold_cache if fold_cache is not None else DictCache(),
    )


_default_context: Optional[ThermoContext] = None
_default_lock = threading.Lock()


def get_default_context() -> ThermoContext:
    """Shared context used when a call does not pass one explicitly."""
    global _default_context
    with _default_lock:
        if _default_context is None:
            _default_context = create_context(revised=True)
        return _default_context


def reset_default_context() -> ThermoContext:
    """Replace the shared context with a fresh one on the revised set and empty caches."""
    global _default_context
    with _default_lock:
        _default_context = create_context(revised=True)
        return _default_context


def use_revised_parameters(flag: bool, context: Optional[ThermoContext] = None) -> ThermoContext:
    """
    Select the revised (True) or legacy (False) parameter set.

    The switch is idempotent: requesting the set that is already active
    neither reloads it nor clears any cache. A real switch clears both result
    caches of the context.

    Parameters
    ----------
    flag : bool
        True for ``santalucia2004``, False for ``santalucia1998``.
    context : ThermoContext, optional
        Context to switch. Defaults to the shared context.

    Returns
    -------
    ThermoContext
        The context that was switched.
    """
    ctx = context if context is not None else get_default_context()
    wanted = REVISED_PARAMETER_SET if flag else LEGACY_PARAMETER_SET
    if ctx.parameters.NAME == wanted:
        return ctx

    ctx.set_parameters(_LOADER.load(wanted))

    return ctx
