from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

__all__ = ["ZuckerBacktrackOp", "ZuckerBackPointer"]


class ZuckerBacktrackOp(Enum):
    """
    Recursion cases of the single-strand (hairpin) DP.

    NONE            : Not set, or a base case.
    HAIRPIN         : V[i,j] closes a hairpin loop.
    STACK           : V[i,j] stacks directly on V[i+1,j-1].
    INTERNAL        : V[i,j] closes a bulge or internal loop with inner pair (k,l).
    MULTILOOP       : V[i,j] closes a multiloop WM[i+1,k] + WM[k+1,j-1].
    PAIR            : W[i,j] / WM[i,j] take the helix V[i,j].
    BIFURCATION     : W[i,j] / WM[i,j] split into [i,k] + [k+1,j].
    UNPAIRED_LEFT   : Base i left unpaired.
    UNPAIRED_RIGHT  : Base j left unpaired.
    """
    NONE = auto()
    HAIRPIN = auto()
    STACK = auto()
    INTERNAL = auto()
    MULTILOOP = auto()
    PAIR = auto()
    BIFURCATION = auto()
    UNPAIRED_LEFT = auto()
    UNPAIRED_RIGHT = auto()


@dataclass(frozen=True, slots=True)
class ZuckerBackPointer:
    """
    Decision stored for one DP cell.

    Attributes
    ----------
    operation : ZuckerBacktrackOp
        Recursion case chosen for the cell.
    split_k : Optional[int]
        Split index of a ``BIFURCATION`` or ``MULTILOOP``.
    inner : Optional[Tuple[int, int]]
        Inner pair ``(k, l)`` of a ``STACK`` or ``INTERNAL`` case.
    energy : Optional[float]
        Local free-energy term added by the case itself (loop, terminal or
        multiloop terms), excluding the sub-cells it refers to.
    """
    operation: ZuckerBacktrackOp = ZuckerBacktrackOp.NONE
    split_k: Optional[int] = None
    inner: Optional[Tuple[int, int]] = None
    energy: Optional[float] = None
