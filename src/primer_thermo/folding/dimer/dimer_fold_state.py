from __future__ import annotations
from dataclasses import dataclass

import numpy as np

from primer_thermo.utils.nucleotide_utils import complement

_BASE_CODES = {"A": 0, "C": 1, "G": 2, "T": 3}


@dataclass(frozen=True, slots=True)
class DimerFoldState:
    """
    DP tables of the two-strand (dimer) folding algorithm.

    Rows index strand A (5'→3'); columns index strand B reversed, i.e. B read
    3'→5', so cell ``(i, j)`` is the pair ``A[i]·B[len(B)-1-j]`` and an
    uninterrupted antiparallel helix runs along the diagonal.

    Attributes
    ----------
    energy : np.ndarray
        float64 ``(n, m)``; best ΔG of a duplex whose last pair is ``(i, j)``,
        excluding the closing end term, initiation and symmetry.
    pairs : np.ndarray
        int64 ``(n, m)``; number of pairs in that duplex.
    prev_i, prev_j : np.ndarray
        int64 ``(n, m)``; previous pair of the duplex, ``-1`` for a helix start.
    step_energy : np.ndarray
        float64 ``(n, m)``; energy added by the step into ``(i, j)`` (the
        start term or the stack/bulge/internal loop energy).
    pairable : np.ndarray
        bool ``(n, m)``; Watson–Crick complementarity of ``A[i]`` and ``B'[j]``.
    """
    energy: np.ndarray
    pairs: np.ndarray
    prev_i: np.ndarray
    prev_j: np.ndarray
    step_energy: np.ndarray
    pairable: np.ndarray


def pairable_mask(seq_a: str, seq_b_reversed: str) -> np.ndarray:
    """Boolean matrix of Watson–Crick complementarity between two strands."""
    codes_a = np.array([_BASE_CODES[b] for b in seq_a], dtype=np.int64)
    codes_b = np.array([_BASE_CODES[complement(b)] for b in seq_b_reversed], dtype=np.int64)

    return codes_a[:, None] == codes_b[None, :]


def make_dimer_state(seq_a: str, seq_b_reversed: str) -> DimerFoldState:
    """Allocates dimer DP tables with every energy at +inf and no back pointers."""
    shape = (len(seq_a), len(seq_b_reversed))

    return DimerFoldState(
        energy=np.full(shape, np.inf, dtype=np.float64),
        pairs=np.zeros(shape, dtype=np.int64),
        prev_i=np.full(shape, -1, dtype=np.int64),
        prev_j=np.full(shape, -1, dtype=np.int64),
        step_energy=np.zeros(shape, dtype=np.float64),
        pairable=pairable_mask(seq_a, seq_b_reversed),
    )
