from __future__ import annotations
import math
from dataclasses import dataclass

from primer_thermo.errors import InvalidConfigurationError

__all__ = ["TmConditions", "DEFAULT_CONDITIONS"]

# Upper bounds beyond which the salt models are not calibrated.
MAX_MG_MM = 1000.0
MAX_MONOVALENT_MM = 5000.0


@dataclass(frozen=True, slots=True)
class TmConditions:
    """
    Solution conditions of a melting-temperature calculation.

    Attributes
    ----------
    oligo_nm : float
        Total strand concentration Ct in nM.
    monovalent_mm : float
        Na⁺ + K⁺ concentration in mM.
    tris_mm : float
        Tris buffer concentration in mM (half of it counts as monovalent).
    mg_mm : float
        Total Mg²⁺ concentration in mM.
    dntp_mm : float
        Total dNTP concentration in mM (chelates Mg²⁺).

    Raises
    ------
    InvalidConfigurationError
        On negative or non-finite values, a non-positive oligo concentration,
        no cations at all, or concentrations beyond the model's range.
    """
    oligo_nm: float = 250.0
    monovalent_mm: float = 50.0
    tris_mm: float = 2.0
    mg_mm: float = 1.5
    dntp_mm: float = 0.2

    def __post_init__(self) -> None:
        for name in ("oligo_nm", "monovalent_mm", "tris_mm", "mg_mm", "dntp_mm"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
                raise InvalidConfigurationError(f"{name} must be a finite non-negative number, got {value!r}.")

        if self.oligo_nm <= 0:
            raise InvalidConfigurationError("oligo_nm must be > 0.")
        if self.monovalent_mm + self.tris_mm + self.mg_mm <= 0:
            raise InvalidConfigurationError("At least one cation concentration (monovalent, Tris or Mg2+) must be > 0.")
        if self.mg_mm > MAX_MG_MM:
            raise InvalidConfigurationError(f"mg_mm={self.mg_mm} exceeds {MAX_MG_MM} mM.")
        if self.monovalent_mm > MAX_MONOVALENT_MM:
            raise InvalidConfigurationError(f"monovalent_mm={self.monovalent_mm} exceeds {MAX_MONOVALENT_MM} mM.")

    @property
    def oligo_molar(self) -> float:
        """Strand concentration Ct in M."""
        return self.oligo_nm * 1e-9


DEFAULT_CONDITIONS = TmConditions()
