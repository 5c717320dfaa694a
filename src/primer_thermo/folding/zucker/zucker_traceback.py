from __future__ import annotations
import math
from dataclasses import dataclass
from typing import List, Tuple

from primer_thermo.folding.fold_result import StructureElement, StructureKind, pairs_to_dotbracket
from primer_thermo.folding.zucker.zucker_back_pointer import ZuckerBacktrackOp, ZuckerBackPointer
from primer_thermo.folding.zucker.zucker_fold_state import ZuckerFoldState
from primer_thermo.structures import Pair


@dataclass(frozen=True, slots=True)
class ZuckerTraceResult:
    """
    Structure recovered from the filled matrices.

    Attributes
    ----------
    pairs : List[Pair]
        Base pairs sorted by 5' index.
    dot_bracket : str
        Dot-bracket rendering of ``pairs``.
    elements : List[StructureElement]
        Loop decomposition with per-element free energies (unrounded).
    """
    pairs: List[Pair]
    dot_bracket: str
    elements: List[StructureElement]


def _collect_branches(state: ZuckerFoldState, seed: List[Tuple[int, int]]) -> List[Tuple[int, int]]:
    """
    Walk WM back pointers from the ``seed`` intervals and return the branch
    helices ``(p, q)`` they contain.
    """
    branches: List[Tuple[int, int]] = []
    stack = list(seed)
    while stack:
        i, j = stack.pop()
        if i > j:
            continue
        bp: ZuckerBackPointer = state.wm_back_ptr.get(i, j)
        op = bp.operation

        if op is ZuckerBacktrackOp.UNPAIRED_LEFT:
            stack.append((i + 1, j))
        elif op is ZuckerBacktrackOp.UNPAIRED_RIGHT:
            stack.append((i, j - 1))
        elif op is ZuckerBacktrackOp.PAIR:
            branches.append((i, j))
        elif op is ZuckerBacktrackOp.BIFURCATION and bp.split_k is not None:
            stack.append((i, bp.split_k))
            stack.append((bp.split_k + 1, j))

    return sorted(branches)


def traceback_nested(seq: str, state: ZuckerFoldState) -> ZuckerTraceResult:
    """
    Reconstructs the MFE structure of ``seq`` from ``W[0, N-1]``.

    A stack of ``(matrix, i, j)`` frames is processed until empty: W frames
    walk the exterior loop, V frames follow each helix inwards and emit one
    structure element per loop.

    Parameters
    ----------
    seq : str
        The folded sequence.
    state : ZuckerFoldState
        Matrices filled by `ZuckerFoldingEngine.fill_all_matrices`.

    Returns
    -------
    ZuckerTraceResult
        Pairs, dot-bracket string and loop elements.
    """
    seq_len = len(seq)
    if seq_len == 0:
        return ZuckerTraceResult(pairs=[], dot_bracket="", elements=[])

    pairs: List[Pair] = []
    elements: List[StructureElement] = []
    stack: List[Tuple[str, int, int]] = [("W", 0, seq_len - 1)]

    v_matrix = state.v_matrix

    while stack:
        which, i, j = stack.pop()
        if i >= j:
            continue

        # --- 'W' Matrix Traceback ---
        if which == "W":
            bp: ZuckerBackPointer = state.w_back_ptr.get(i, j)
            op = bp.operation

            if op is ZuckerBacktrackOp.UNPAIRED_LEFT:
                stack.append(("W", i + 1, j))

            elif op is ZuckerBacktrackOp.UNPAIRED_RIGHT:
                stack.append(("W", i, j - 1))

            elif op is ZuckerBacktrackOp.PAIR:
                elements.append(StructureElement(StructureKind.EXTERIOR, i, j, None, bp.energy or 0.0))
                stack.append(("V", i, j))

            elif op is ZuckerBacktrackOp.BIFURCATION and bp.split_k is not None:
                stack.append(("W", i, bp.split_k))
                stack.append(("W", bp.split_k + 1, j))

        # --- 'V' Matrix Traceback ---
        elif which == "V":
            pairs.append(Pair(i, j))
            bp = state.v_back_ptr.get(i, j)
            op = bp.operation
            v_ij = v_matrix.get(i, j)

            # Terminal rule: (i,j) closes a hairpin.
            if op is ZuckerBacktrackOp.HAIRPIN:
                elements.append(StructureElement(StructureKind.HAIRPIN, i, j, None, v_ij))

            # (i,j) encloses (k,l): stack, bulge or internal loop.
            elif op in (ZuckerBacktrackOp.STACK, ZuckerBacktrackOp.INTERNAL) and bp.inner is not None:
                k, l = bp.inner
                left, right = k - i - 1, j - l - 1
                if left == 0 and right == 0:
                    kind = StructureKind.STACK
                elif left == 0 or right == 0:
                    kind = StructureKind.BULGE
                else:
                    kind = StructureKind.INTERNAL_LOOP
                elements.append(StructureElement(kind, i, j, (k, l), v_ij - v_matrix.get(k, l)))
                stack.append(("V", k, l))

            # (i,j) closes a multiloop; its energy is what the branches do not account for.
            elif op is ZuckerBacktrackOp.MULTILOOP and bp.split_k is not None:
                branches = _collect_branches(state, [(i + 1, bp.split_k), (bp.split_k + 1, j - 1)])
                branch_energy = sum(v_matrix.get(p, q) for p, q in branches)
                elements.append(StructureElement(StructureKind.MULTILOOP, i, j, None, v_ij - branch_energy))
                for p, q in branches:
                    if math.isfinite(v_matrix.get(p, q)):
                        stack.append(("V", p, q))

    ordered = sorted(pairs, key=lambda pr: (pr.base_i, pr.base_j))
    elements.sort(key=lambda el: (el.i, el.j, el.kind is not StructureKind.EXTERIOR))

    return ZuckerTraceResult(pairs=ordered, dot_bracket=pairs_to_dotbracket(seq_len, ordered), elements=elements)
