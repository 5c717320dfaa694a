from __future__ import annotations
from typing import Final

_COMPLEMENT: Final[dict[str, str]] = {"A": "T", "T": "A", "G": "C", "C": "G"}


def complement(base: str) -> str:
    """Watson–Crick complement of a single DNA base (unknown symbols are returned as-is)."""
    return _COMPLEMENT.get(base, base)


def complement_strand(seq: str) -> str:
    """Base-wise complement of a strand, keeping its orientation (5'→3' becomes 3'→5')."""
    return "".join(complement(b) for b in seq)


def reverse_complement(seq: str) -> str:
    """Reverse complement of a DNA strand, both read 5'→3'."""
    return complement_strand(seq)[::-1]


def is_watson_crick(base_a: str, base_b: str) -> bool:
    """True if ``base_a`` and ``base_b`` form an A·T or G·C pair."""
    return _COMPLEMENT.get(base_a) == base_b


def stack_key(top: str, bottom: str) -> str:
    """
    Build the nearest-neighbor key ``"XY/ZW"`` for two adjacent base pairs.

    ``top`` is read 5'→3' and ``bottom`` is the opposite strand read 3'→5',
    aligned position by position, so ``X·Z`` and ``Y·W`` are the two pairs.

    Example
    -------
    top = "CA", bottom = "GT"  ->  "CA/GT"
    """
    return f"{top}/{bottom}"


def flip_key(key: str) -> str:
    """
    Re-express a ``"XY/ZW"`` key as read from the opposite strand, ``"WZ/YX"``.

    Both keys describe the same physical stack, so a lookup table only needs
    to store one orientation.
    """
    top, bottom = key.split("/")

    return f"{bottom[::-1]}/{top[::-1]}"
