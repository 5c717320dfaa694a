from __future__ import annotations
import logging
from typing import Final

from primer_thermo.errors import InvalidSequenceError
from primer_thermo.utils.nucleotide_utils import is_watson_crick, reverse_complement

logger = logging.getLogger(__name__)

# Canonical DNA alphabet accepted by every calculator.
DNA_ALPHABET: Final[frozenset[str]] = frozenset("ACGT")

# Minimum number of unpaired nucleotides required in a hairpin loop.
MIN_HAIRPIN_UNPAIRED: Final[int] = 3

# Largest internal/bulge loop (total unpaired nt) explored by the DP engines.
MAX_LOOP_SIZE: Final[int] = 30


def validate_sequence(raw_sequence: str, *, min_length: int = 1) -> str:
    """
    Validate and canonicalize a DNA sequence.

    Strips surrounding whitespace and upper-cases the input. Symbols outside
    ``{A, C, G, T}`` are rejected, never substituted.

    Parameters
    ----------
    raw_sequence : str
        Input sequence.
    min_length : int
        Minimum accepted length after normalization.

    Returns
    -------
    str
        The canonical uppercase sequence.

    Raises
    ------
    InvalidSequenceError
        If the input is not a string, is shorter than ``min_length`` or contains
        a symbol outside the DNA alphabet.
    """
    if not isinstance(raw_sequence, str):
        raise InvalidSequenceError(f"Sequence must be a string, got {type(raw_sequence).__name__}.")

    seq = raw_sequence.strip().upper()
    if not seq:
        logger.error("Sequence is empty")
        raise InvalidSequenceError("Sequence is empty.")

    for pos, base in enumerate(seq):
        if base not in DNA_ALPHABET:
            logger.error(f"Invalid character at position {pos}: '{base}'")
            raise InvalidSequenceError(
                f"Invalid character at position {pos} ('{base}'). Only A, C, G, T are allowed."
            )

    if len(seq) < min_length:
        raise InvalidSequenceError(f"Sequence of length {len(seq)} is shorter than the required {min_length} nt.")

    return seq


def can_pair(base_i: str, base_j: str) -> bool:
    """
    Return True if two DNA bases form a Watson–Crick pair (A·T or G·C).

    G·T wobbles are not treated as pairs by the folding engines; they only
    enter through mismatch parameters.
    """
    return is_watson_crick(base_i, base_j)


def hairpin_size(i: int, j: int) -> int:
    """Number of unpaired nucleotides enclosed by a closing pair ``(i, j)``."""
    return j - i - 1


def is_min_hairpin_size(i: int, j: int, min_unpaired: int = MIN_HAIRPIN_UNPAIRED) -> bool:
    """True if ``(i, j)`` encloses at least ``min_unpaired`` nucleotides."""
    return hairpin_size(i, j) >= min_unpaired


def is_self_complementary(seq: str) -> bool:
    """True if a sequence equals its own reverse complement (palindromic duplex)."""
    return len(seq) > 0 and seq == reverse_complement(seq)
