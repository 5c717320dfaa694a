from __future__ import annotations

__all__ = [
    "PrimerThermoError",
    "InvalidSequenceError",
    "InvalidConfigurationError",
    "UnsupportedParameterCombinationError",
]


class PrimerThermoError(ValueError):
    """Base class for all errors raised by the thermodynamic engine."""


class InvalidSequenceError(PrimerThermoError):
    """
    Raised for sequences the engine refuses to evaluate.

    Covers empty input, symbols outside the ``{A, C, G, T}`` alphabet and
    sequences shorter than an operation requires. Ambiguity codes (``N``,
    ``R``, ...) are rejected rather than treated as wildcards.
    """


class InvalidConfigurationError(PrimerThermoError):
    """
    Raised for malformed configuration values.

    Examples are negative or all-zero weight presets, unknown preset names and
    out-of-range salt or oligo concentrations.
    """


class UnsupportedParameterCombinationError(PrimerThermoError):
    """
    Raised when a nearest-neighbor lookup has no entry in the active parameter set.

    Typically a mismatch stack that the active set does not tabulate (e.g. an
    A·A mismatch under a set that only carries heteromismatch parameters).
    """
