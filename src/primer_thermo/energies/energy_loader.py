from __future__ import annotations
import logging
from importlib.resources import files as importlib_files
from pathlib import Path
from typing import Final

from primer_thermo.energies.data.yaml_io import read_yaml
from primer_thermo.energies.data.parsers import (
    get_metadata,
    get_temperature_kelvin,
    parse_complements,
    validate_dna_complements,
    parse_initiation,
    parse_pair_table,
    parse_loop_table,
    parse_multiloop,
    parse_terminal_mismatch,
    parse_dangles,
    parse_consecutive_mismatch,
    parse_salt,
)
from primer_thermo.energies.energy_types import DuplexEnergies

logger = logging.getLogger(__name__)

LEGACY_PARAMETER_SET: Final[str] = "santalucia1998"
REVISED_PARAMETER_SET: Final[str] = "santalucia2004"
BUNDLED_PARAMETER_SETS: Final[tuple[str, ...]] = (LEGACY_PARAMETER_SET, REVISED_PARAMETER_SET)


def bundled_yaml_path(name: str) -> Path:
    """Location of a parameter or preset file shipped in ``primer_thermo/data``."""
    return Path(str(importlib_files("primer_thermo") / "data" / f"{name}.yaml"))


class DuplexParameterLoader:
    """
    Loads and parses DNA/DNA nearest-neighbor parameters from a YAML file.

    The loader reads one parameter set (stacks, mismatches, loop tables, salt
    model, ...) and returns an immutable `DuplexEnergies` object. Loaded sets
    are kept per loader instance, so repeated loads of the same source do not
    re-read the file.
    """
    def __init__(self) -> None:
        self._loaded: dict[str, DuplexEnergies] = {}

    def load(self, source: str | Path = REVISED_PARAMETER_SET) -> DuplexEnergies:
        """
        Loads a parameter set by bundled name or from a YAML path.

        Parameters
        ----------
        source : str | Path
            ``"santalucia1998"``, ``"santalucia2004"`` or the path of a YAML
            file with the same layout.

        Returns
        -------
        DuplexEnergies
            The parsed parameter tables.

        Raises
        ------
        ValueError
            If the name is unknown, the file is not YAML or its content is
            malformed.

        Notes
        -----
        - Energies are stored as ``(ΔH [kcal/mol], ΔS [cal/(K·mol)])``.
        - Loop tables given as ΔG37 are stored with ΔH = 0, i.e. as purely
          entropic terms, so they scale with temperature.
        """
        source_str = str(source)
        if source_str in self._loaded:
            return self._loaded[source_str]

        if source_str in BUNDLED_PARAMETER_SETS:
            yaml_path = bundled_yaml_path(source_str)
        elif Path(source_str).suffix.lower() in {".yml", ".yaml"}:
            yaml_path = Path(source_str)
        else:
            raise ValueError(
                f"Unknown parameter set '{source_str}'. Use one of {BUNDLED_PARAMETER_SETS} or a YAML path."
            )

        energies = self._build_dna(yaml_path)
        logger.info(f"Loaded nearest-neighbor parameter set {energies.identity} from {yaml_path.name}")
        self._loaded[source_str] = energies

        return energies

    @staticmethod
    def _build_dna(yaml_path: Path) -> DuplexEnergies:
        """
        Constructs the DNA parameter tables from a YAML file.

        References
        ----------
        1. SantaLucia, J. (1998). A unified view of polymer, dumbbell, and
           oligonucleotide DNA nearest-neighbor thermodynamics. PNAS 95, 1460–1465.
        2. SantaLucia, J. & Hicks, D. (2004). The thermodynamics of DNA structural
           motifs. Annu. Rev. Biophys. Biomol. Struct. 33, 415–440.
        3. Owczarzy, R. et al. (2008). Predicting stability of DNA duplexes in
           solutions containing magnesium and monovalent cations. Biochemistry 47,
           5336–5353.
        """
        data = read_yaml(yaml_path)
        temp_k = get_temperature_kelvin(data)
        name, version, description = get_metadata(data)

        complements = parse_complements(data)
        validate_dna_complements(complements)
        init_base, init_at, init_gc, symmetry = parse_initiation(data, temp_k)
        nn_stack = parse_pair_table(data, "stacks", temp_k, required=True)
        mismatch = parse_pair_table(data, "mismatches", temp_k)
        hairpin = parse_loop_table(data, ("hairpin_loops", "hairpin_loop"), temp_k)
        bulge = parse_loop_table(data, ("bulge_loops", "bulge_loop"), temp_k)
        internal = parse_loop_table(data, ("internal_loops", "internal_loop"), temp_k)
        multiloop = parse_multiloop(data)
        term_mm_5, term_mm_3 = parse_terminal_mismatch(data, temp_k)
        dangle_5, dangle_3 = parse_dangles(data, temp_k)
        consecutive = parse_consecutive_mismatch(data, temp_k)
        salt = parse_salt(data)

        return DuplexEnergies(
            NAME=name,
            VERSION=version,
            DESCRIPTION=description,
            COMPLEMENT_BASES=complements,
            INIT_BASE=init_base,
            INIT_TERMINAL_AT=init_at,
            INIT_TERMINAL_GC=init_gc,
            SYMMETRY=symmetry,
            NN_STACK=nn_stack,
            MISMATCH=mismatch,
            HAIRPIN=hairpin,
            BULGE=bulge,
            INTERNAL=internal,
            LOOP_ASYMMETRY=float(data.get("loop_asymmetry", 0.3)),
            MULTILOOP=multiloop,
            TERMINAL_MISMATCH_5=term_mm_5,
            TERMINAL_MISMATCH_3=term_mm_3,
            DANGLE_5=dangle_5,
            DANGLE_3=dangle_3,
            CONSECUTIVE_MISMATCH=consecutive,
            SALT=salt,
        )
