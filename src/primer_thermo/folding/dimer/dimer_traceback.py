from __future__ import annotations
from dataclasses import dataclass
from typing import List

from primer_thermo.folding.dimer.dimer_fold_state import DimerFoldState
from primer_thermo.folding.dimer.dimer_recurrences import DimerOptimum
from primer_thermo.folding.fold_result import StructureElement, StructureKind, dimer_dotbracket
from primer_thermo.structures import Pair


@dataclass(frozen=True, slots=True)
class DimerTraceResult:
    """
    Duplex recovered from the dimer tables.

    Attributes
    ----------
    pairs : List[Pair]
        ``Pair(i, j)`` with ``i`` on strand A and ``j`` on strand B, both
        indexed 5'→3', sorted by ``i``.
    dot_bracket : str
        ``"A&B"`` rendering of ``pairs``.
    elements : List[StructureElement]
        One exterior element followed by one element per step between
        consecutive pairs.
    """
    pairs: List[Pair]
    dot_bracket: str
    elements: List[StructureElement]


def traceback_dimer(seq_a: str, seq_b: str, state: DimerFoldState, optimum: DimerOptimum) -> DimerTraceResult:
    """
    Follows the back pointers from the optimum's end cell to the helix start.

    The exterior element collects the start term, the end term, initiation
    and symmetry, so element energies add up to ``optimum.delta_g``.
    """
    len_a, len_b = len(seq_a), len(seq_b)
    if optimum.end_cell is None:
        return DimerTraceResult(pairs=[], dot_bracket=dimer_dotbracket(len_a, len_b, []), elements=[])

    # Collect cells from the last pair back to the first.
    cells = []
    i, j = optimum.end_cell
    while i >= 0 and j >= 0:
        cells.append((i, j))
        i, j = int(state.prev_i[i, j]), int(state.prev_j[i, j])
    cells.reverse()

    def to_b(col: int) -> int:
        return len_b - 1 - col

    pairs = [Pair(a, to_b(col)) for a, col in cells]

    first_a, first_col = cells[0]
    elements: List[StructureElement] = [
        StructureElement(
            StructureKind.EXTERIOR,
            first_a,
            to_b(first_col),
            None,
            float(state.step_energy[first_a, first_col]) + optimum.exterior_energy,
        )
    ]

    for (p, q), (a, col) in zip(cells, cells[1:]):
        left, right = a - p - 1, col - q - 1
        if left == 0 and right == 0:
            kind = StructureKind.STACK
        elif left == 0 or right == 0:
            kind = StructureKind.BULGE
        else:
            kind = StructureKind.INTERNAL_LOOP
        elements.append(
            StructureElement(kind, p, to_b(q), (a, to_b(col)), float(state.step_energy[a, col]))
        )

    return DimerTraceResult(pairs=pairs, dot_bracket=dimer_dotbracket(len_a, len_b, pairs), elements=elements)
