from __future__ import annotations
from dataclasses import dataclass

from primer_thermo.structures import TriMatrix
from primer_thermo.folding.zucker.zucker_back_pointer import ZuckerBackPointer


@dataclass(frozen=True, slots=True)
class ZuckerFoldState:
    """
    DP matrices of the single-strand folding algorithm.

    Attributes
    ----------
    w_matrix : TriMatrix[float]
        W[i, j], the minimum free energy of ``seq[i..j]`` in the exterior loop.
    v_matrix : TriMatrix[float]
        V[i, j], the minimum free energy of ``seq[i..j]`` given that i and j pair.
    wm_matrix : TriMatrix[float]
        WM[i, j], the minimum free energy of ``seq[i..j]`` inside a multiloop,
        holding at least one helix.
    w_pairs, v_pairs, wm_pairs : TriMatrix[int]
        Number of base pairs in the structure chosen for each cell, used to
        break energy ties in favour of fewer pairs.
    w_back_ptr, v_back_ptr, wm_back_ptr : TriMatrix[ZuckerBackPointer]
        Recursion case chosen for each cell.
    """
    w_matrix: TriMatrix[float]
    v_matrix: TriMatrix[float]
    wm_matrix: TriMatrix[float]
    w_pairs: TriMatrix[int]
    v_pairs: TriMatrix[int]
    wm_pairs: TriMatrix[int]
    w_back_ptr: TriMatrix[ZuckerBackPointer]
    v_back_ptr: TriMatrix[ZuckerBackPointer]
    wm_back_ptr: TriMatrix[ZuckerBackPointer]


def make_fold_state(seq_len: int, init_energy: float = float("inf")) -> ZuckerFoldState:
    """
    Allocates the folding matrices for a sequence of length ``seq_len``.

    Energy cells start at ``init_energy`` (positive infinity), so any finite
    candidate wins. The diagonal of W is the empty exterior loop with energy
    0.0; the diagonal of WM stays infinite because a single base cannot hold
    a helix.
    """
    w_matrix = TriMatrix[float](seq_len, init_energy)
    v_matrix = TriMatrix[float](seq_len, init_energy)
    wm_matrix = TriMatrix[float](seq_len, init_energy)

    w_pairs = TriMatrix[int](seq_len, 0)
    v_pairs = TriMatrix[int](seq_len, 0)
    wm_pairs = TriMatrix[int](seq_len, 0)

    w_back_ptr = TriMatrix[ZuckerBackPointer](seq_len, ZuckerBackPointer())
    v_back_ptr = TriMatrix[ZuckerBackPointer](seq_len, ZuckerBackPointer())
    wm_back_ptr = TriMatrix[ZuckerBackPointer](seq_len, ZuckerBackPointer())

    for i in range(seq_len):
        w_matrix.set(i, i, 0.0)

    return ZuckerFoldState(
        w_matrix=w_matrix,
        v_matrix=v_matrix,
        wm_matrix=wm_matrix,
        w_pairs=w_pairs,
        v_pairs=v_pairs,
        wm_pairs=wm_pairs,
        w_back_ptr=w_back_ptr,
        v_back_ptr=v_back_ptr,
        wm_back_ptr=wm_back_ptr,
    )
