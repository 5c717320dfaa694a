from primer_thermo.energies.energy_types import DuplexEnergies, SaltParameters
from primer_thermo.energies.energy_loader import (
    BUNDLED_PARAMETER_SETS,
    LEGACY_PARAMETER_SET,
    REVISED_PARAMETER_SET,
    DuplexParameterLoader,
    bundled_yaml_path,
)
from primer_thermo.energies.energy_model import DuplexEnergyModel, DuplexEnergyModelProtocol

__all__ = [
    "BUNDLED_PARAMETER_SETS",
    "LEGACY_PARAMETER_SET",
    "REVISED_PARAMETER_SET",
    "DuplexEnergies",
    "DuplexEnergyModel",
    "DuplexEnergyModelProtocol",
    "DuplexParameterLoader",
    "SaltParameters",
    "bundled_yaml_path",
]
