"""
Unit tests for the upper-triangular DP matrix.

The hairpin engine stores its W, V and WM tables in `TriMatrix`, where only
cells with ``j >= i`` exist.
"""
import math

import pytest

from primer_thermo.structures import TriMatrix


def test_trimatrix_init_shape_and_defaults():
    """
    Every upper-triangle cell starts at the fill value.
    """
    seq_len = 5
    tri_matrix = TriMatrix[float](seq_len, 1.5)

    assert tri_matrix.shape == (seq_len, seq_len)
    assert tri_matrix.size == seq_len
    for i, j in tri_matrix.iter_upper_indices():
        assert tri_matrix.get(i, j) == 1.5


def test_trimatrix_set_get_roundtrip():
    """
    Setting one cell leaves its neighbours untouched.
    """
    tri_matrix = TriMatrix[float](4, float("inf"))
    tri_matrix.set(1, 3, -7.25)

    assert tri_matrix.get(1, 3) == -7.25
    assert math.isinf(tri_matrix.get(0, 3))
    assert math.isinf(tri_matrix.get(1, 2))


@pytest.mark.parametrize("i, j", [(-1, 0), (0, -1), (3, 0), (0, 3), (2, 1)])
def test_trimatrix_invalid_indices_raise(i, j):
    """
    Indices outside the matrix or below the diagonal raise `IndexError`.
    """
    tri_matrix = TriMatrix[int](3, 0)
    with pytest.raises(IndexError):
        tri_matrix.get(i, j)
    with pytest.raises(IndexError):
        tri_matrix.set(i, j, 1)


def test_trimatrix_iter_upper_indices_row_major():
    """
    Indices are yielded row by row, diagonal first.
    """
    tri_matrix = TriMatrix[int](3, 0)
    assert list(tri_matrix.iter_upper_indices()) == [(0, 0), (0, 1), (0, 2), (1, 1), (1, 2), (2, 2)]
