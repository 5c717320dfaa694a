from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Protocol

from primer_thermo.energies.energy_types import DuplexEnergies, DhDs
from primer_thermo.energies.energy_ops import (
    hairpin_energy,
    multiloop_linear_energy,
    stack_energy,
    terminal_penalty,
    two_pair_loop_energy,
)
from primer_thermo.errors import UnsupportedParameterCombinationError
from primer_thermo.utils.nucleotide_utils import complement_strand, stack_key


class DuplexEnergyModelProtocol(Protocol):
    """
    Interface every energy model must implement to drive the folding engines
    and the melting-temperature calculators.
    """
    params: DuplexEnergies
    temp_k: float

    # --- Parameter lookups ---
    def nn_param(self, dinucleotide: str) -> DhDs: ...

    def mismatch_param(self, dinucleotide: str, mismatched_dinucleotide: Optional[str] = None) -> DhDs: ...

    def has_mismatch(self, dinucleotide: str, mismatched_dinucleotide: Optional[str] = None) -> bool: ...

    # --- Structure free energies ---
    def hairpin(self, base_i: int, base_j: int, seq: str, *, temp_k: Optional[float] = None) -> float: ...

    def stack(self, top: str, bottom: str, *, temp_k: Optional[float] = None) -> float: ...

    def loop(self, top: str, bottom: str, *, temp_k: Optional[float] = None) -> float: ...

    def multiloop(self, branches: int, unpaired_bases: int) -> float: ...

    def terminal(self, base_x: str, base_y: str, *, temp_k: Optional[float] = None) -> float: ...


def _split_key(dinucleotide: str, mismatched_dinucleotide: Optional[str]) -> str:
    """Normalize ``("XY", "ZW")``, ``("XY/ZW", None)`` or ``("XY", None)`` to ``"XY/ZW"``."""
    dinucleotide = dinucleotide.upper()
    if mismatched_dinucleotide is not None:
        return stack_key(dinucleotide, mismatched_dinucleotide.upper())
    if "/" in dinucleotide:
        return dinucleotide

    return stack_key(dinucleotide, complement_strand(dinucleotide))


@dataclass(frozen=True, slots=True)
class DuplexEnergyModel:
    """
    Concrete energy model over one `DuplexEnergies` parameter set.

    It answers raw ``(ΔH, ΔS)`` lookups for the Tm calculators and ΔG queries
    for the folding engines at a reference temperature.

    Attributes
    ----------
    params : DuplexEnergies
        The parsed parameter tables.
    temp_k : float
        Reference temperature in Kelvin, default 310.15 K (37 °C).
    """
    params: DuplexEnergies
    temp_k: float = 310.15  # 37 °C

    def _temp(self, temp_k: Optional[float]) -> float:
        return self.temp_k if temp_k is None else temp_k

    def nn_param(self, dinucleotide: str) -> DhDs:
        """
        ``(ΔH, ΔS)`` of a Watson–Crick nearest-neighbor stack.

        Parameters
        ----------
        dinucleotide : str
            ``"XY"`` (the partner strand is its complement) or ``"XY/ZW"``.

        Raises
        ------
        UnsupportedParameterCombinationError
            If the stack is not a tabulated Watson–Crick stack.
        """
        key = _split_key(dinucleotide, None)
        try:
            return self.params.NN_STACK[key]
        except KeyError:
            raise UnsupportedParameterCombinationError(
                f"No Watson-Crick stack '{key}' in parameter set {self.params.identity}."
            ) from None

    def mismatch_param(self, dinucleotide: str, mismatched_dinucleotide: Optional[str] = None) -> DhDs:
        """
        ``(ΔH, ΔS)`` of a stack that carries a single mismatch.

        Parameters
        ----------
        dinucleotide : str
            Top strand dinucleotide 5'→3' (or a full ``"XY/ZW"`` key).
        mismatched_dinucleotide : str, optional
            Bottom strand dinucleotide 3'→5'.

        Raises
        ------
        UnsupportedParameterCombinationError
            If the active set does not tabulate the stack in either orientation.
        """
        key = _split_key(dinucleotide, mismatched_dinucleotide)
        try:
            return self.params.MISMATCH[key]
        except KeyError:
            raise UnsupportedParameterCombinationError(
                f"Mismatch stack '{key}' is not tabulated in parameter set {self.params.identity}."
            ) from None

    def has_mismatch(self, dinucleotide: str, mismatched_dinucleotide: Optional[str] = None) -> bool:
        """True if :meth:`mismatch_param` would succeed for the same arguments."""
        return _split_key(dinucleotide, mismatched_dinucleotide) in self.params.MISMATCH

    def hairpin(self, base_i: int, base_j: int, seq: str, *, temp_k: Optional[float] = None) -> float:
        """ΔG of a hairpin loop closed by ``(base_i, base_j)`` in ``seq``."""
        return hairpin_energy(base_i, base_j, seq, self.params, self._temp(temp_k))

    def stack(self, top: str, bottom: str, *, temp_k: Optional[float] = None) -> float:
        """ΔG of two stacked pairs, ``top`` 5'→3' over ``bottom`` 3'→5'."""
        return stack_energy(top, bottom, self.params, self._temp(temp_k))

    def loop(self, top: str, bottom: str, *, temp_k: Optional[float] = None) -> float:
        """
        ΔG of the stack, bulge or internal loop between two closing pairs.

        ``top`` holds the bases from the outer to the inner pair on one strand
        (5'→3'), ``bottom`` the partner bases in the same direction (3'→5').
        """
        return two_pair_loop_energy(top, bottom, self.params, self._temp(temp_k))

    def multiloop(self, branches: int, unpaired_bases: int) -> float:
        """ΔG of a multiloop under the linear model."""
        return multiloop_linear_energy(branches, unpaired_bases, self.params)

    def terminal(self, base_x: str, base_y: str, *, temp_k: Optional[float] = None) -> float:
        """ΔG of the helix-end term for a pair ``base_x·base_y``."""
        return terminal_penalty(base_x, base_y, self.params, self._temp(temp_k))
