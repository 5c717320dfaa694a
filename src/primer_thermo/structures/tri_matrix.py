from __future__ import annotations
from typing import Generic, Iterator, List, Tuple, TypeVar

T = TypeVar("T")


class TriMatrix(Generic[T]):
    """
    Upper-triangular matrix for interval DP tables.

    Only cells with ``i <= j`` are stored. Row ``i`` holds ``N - i`` cells,
    so column ``j`` lives at offset ``j - i``.
    """
    __slots__ = ("_seq_len", "_rows")

    def __init__(self, seq_len: int, fill: T):
        self._seq_len = seq_len
        self._rows: List[List[T]] = [[fill for _ in range(seq_len - i)] for i in range(seq_len)]

    @property
    def size(self) -> int:
        """Sequence length N that defines the matrix dimensions."""
        return self._seq_len

    @property
    def shape(self) -> Tuple[int, int]:
        return self._seq_len, self._seq_len

    def _offset(self, base_i: int, base_j: int) -> int:
        if base_i < 0 or base_j < 0 or base_i >= self._seq_len or base_j >= self._seq_len or base_j < base_i:
            raise IndexError(f"TriMatrix invalid index: (i={base_i}, j={base_j}) for N={self._seq_len}")
        return base_j - base_i

    def get(self, base_i: int, base_j: int) -> T:
        """
        Retrieves the value at cell ``(i, j)``.

        Raises
        ------
        IndexError
            If ``(i, j)`` lies outside the upper triangle.
        """
        return self._rows[base_i][self._offset(base_i, base_j)]

    def set(self, base_i: int, base_j: int, value: T) -> None:
        """Sets ``value`` at cell ``(i, j)``."""
        self._rows[base_i][self._offset(base_i, base_j)] = value

    def iter_upper_indices(self) -> Iterator[Tuple[int, int]]:
        """Yields every ``(i, j)`` with ``j >= i`` in row-major order."""
        n = self._seq_len
        for i in range(n):
            for j in range(i, n):
                yield i, j
