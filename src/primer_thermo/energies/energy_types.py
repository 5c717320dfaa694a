from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

# A mapping from a base to its canonical complement, e.g., {"A": "T", "C": "G"}.
BasePairMap = Mapping[str, str]

# A single (ΔH [kcal/mol], ΔS [cal/(K·mol)]) term.
DhDs = Tuple[float, float]

# A tuple of the four linear model coefficients (a, b, c, d) for multiloop energy.
MultiLoopCoeffs = Tuple[float, float, float, float]

# A dictionary mapping a nearest-neighbor key (e.g., "CA/GT") to its (ΔH, ΔS) values.
PairEnergies = Dict[str, DhDs]

# A dictionary mapping a loop length (integer) to its (ΔH, ΔS) values.
LoopEnergies = Dict[int, DhDs]

# A dictionary mapping a single dangling base to its (ΔH, ΔS) values.
DangleEnergies = Dict[str, DhDs]


@dataclass(frozen=True, slots=True)
class SaltParameters:
    """
    Salt-correction block of a parameter set.

    Parameters
    ----------
    MODEL : str
        ``"owczarzy2008"`` (Mg²⁺-aware 1/Tm correction) or ``"santalucia1998"``
        (entropic correction on the Na⁺ equivalent).
    MG_DNTP_KA : float
        Association constant (M⁻¹) of Mg²⁺ with dNTPs used to compute free Mg²⁺.
    TRIS_MONOVALENT_FRACTION : float
        Fraction of the Tris concentration counted as monovalent cation.
    OWCZARZY : tuple of float, optional
        Coefficients ``(a, b, c, d, e, f, g)`` of the Owczarzy 2008 Mg²⁺ model.
    NA_EQUIVALENT_MG_FACTOR : float
        Factor of the von Ahsen Na⁺ equivalent, ``[Na⁺]eq = [Mon] + F·sqrt([Mg²⁺])``
        with concentrations in mM.
    """
    MODEL: str
    MG_DNTP_KA: float = 3.0e4
    TRIS_MONOVALENT_FRACTION: float = 0.5
    OWCZARZY: Optional[Tuple[float, float, float, float, float, float, float]] = None
    NA_EQUIVALENT_MG_FACTOR: float = 120.0


@dataclass(frozen=True, slots=True)
class DuplexEnergies:
    """
    Immutable container for one DNA/DNA nearest-neighbor parameter set.

    Both bundled sets expose exactly these fields, so calculators never branch
    on which set is active; only the values and the salt model differ.

    Energies are (ΔH [kcal/mol], ΔS [cal/(K·mol)]).

    Parameters
    ----------
    NAME : str
        Short identifier of the set, e.g. ``"santalucia2004"``.
    VERSION : str
        Version tag of the data file.
    DESCRIPTION : str
        Human readable summary.
    COMPLEMENT_BASES : BasePairMap
        Map of canonical complements.
    INIT_BASE : DhDs
        Duplex initiation term applied once per duplex.
    INIT_TERMINAL_AT : DhDs
        Penalty for each helix end closed by an A·T pair.
    INIT_TERMINAL_GC : DhDs
        Term for each helix end closed by a G·C pair.
    SYMMETRY : DhDs
        Symmetry correction for self-complementary duplexes.
    NN_STACK : PairEnergies
        Watson–Crick stacks keyed ``"XY/ZW"`` (top 5'→3', bottom 3'→5'),
        stored in both strand orientations.
    MISMATCH : PairEnergies
        Single internal mismatch stacks keyed like ``NN_STACK``, also stored
        in both orientations. Tandem mismatch keys, when present, are stored
        the same way.
    HAIRPIN : LoopEnergies
        Hairpin loop initiation by loop length (nt).
    BULGE : LoopEnergies
        Bulge loop initiation by loop length (nt).
    INTERNAL : LoopEnergies
        Internal loop initiation by total loop length (nt).
    LOOP_ASYMMETRY : float
        Internal loop asymmetry penalty per nucleotide of length difference (kcal/mol).
    MULTILOOP : MultiLoopCoeffs
        Linear multibranch coefficients ``(a, b, c, d)``.
    TERMINAL_MISMATCH_5 : DhDs
        Correction added when a duplex carries a mismatch at its 5' terminus.
    TERMINAL_MISMATCH_3 : DhDs
        Correction added when a duplex carries a mismatch at its 3' terminus.
    DANGLE_5 : DangleEnergies
        5' dangling-end contributions keyed by the dangling base.
    DANGLE_3 : DangleEnergies
        3' dangling-end contributions keyed by the dangling base.
    CONSECUTIVE_MISMATCH : tuple of DhDs
        ``(per_mismatch, maximum)`` penalty for runs of adjacent mismatches.
    SALT : SaltParameters
        Salt model selector and its coefficients.
    """
    NAME: str
    VERSION: str
    DESCRIPTION: str
    COMPLEMENT_BASES: BasePairMap
    INIT_BASE: DhDs
    INIT_TERMINAL_AT: DhDs
    INIT_TERMINAL_GC: DhDs
    SYMMETRY: DhDs
    NN_STACK: PairEnergies
    MISMATCH: PairEnergies
    HAIRPIN: LoopEnergies
    BULGE: LoopEnergies
    INTERNAL: LoopEnergies
    LOOP_ASYMMETRY: float
    MULTILOOP: MultiLoopCoeffs
    TERMINAL_MISMATCH_5: DhDs
    TERMINAL_MISMATCH_3: DhDs
    DANGLE_5: DangleEnergies
    DANGLE_3: DangleEnergies
    CONSECUTIVE_MISMATCH: Tuple[DhDs, DhDs]
    SALT: SaltParameters

    @property
    def identity(self) -> str:
        """Cache-key identity of the set, ``"<name>@<version>"``."""
        return f"{self.NAME}@{self.VERSION}"

    @staticmethod
    def delta_g(delta_h: float, delta_s: float, temp_k: float) -> float:
        """
        Calculates the free energy ΔG = ΔH − T·ΔS/1000 in kcal/mol.

        Returns positive infinity if either ΔH or ΔS is None.
        """
        if delta_h is None or delta_s is None:
            return float("inf")

        return delta_h - temp_k * (delta_s / 1000.0)
