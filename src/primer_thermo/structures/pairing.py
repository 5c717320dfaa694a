from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Pair:
    """
    Immutable (i, j) index pair of two paired bases.

    For a hairpin both indices address the same strand and ``i < j``. For a
    dimer ``base_i`` addresses the first strand and ``base_j`` the second
    strand, both counted 5'→3'.

    Parameters
    ----------
    base_i : int
        Index on the first (or only) strand, 0-based.
    base_j : int
        Index of the partner base, 0-based.
    """
    base_i: int
    base_j: int

    @property
    def loop_len(self) -> int:
        """Number of unpaired nucleotides between ``i`` and ``j`` on one strand (``j - i - 1``)."""
        return self.base_j - self.base_i - 1

    def as_tuple(self) -> tuple[int, int]:
        """The pair ``(i, j)`` as a plain tuple."""
        return self.base_i, self.base_j
