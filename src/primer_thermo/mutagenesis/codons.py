from __future__ import annotations
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Final, Optional, Tuple

from primer_thermo.energies import bundled_yaml_path
from primer_thermo.energies.data.yaml_io import read_yaml
from primer_thermo.errors import InvalidSequenceError

logger = logging.getLogger(__name__)

__all__ = [
    "CODON_TABLE",
    "CODON_TO_AMINO_ACID",
    "CodonCandidate",
    "CodonSelection",
    "codon_usage",
    "select_codon",
]

# Standard genetic code, amino acid (one-letter, "*" for stop) -> codons.
CODON_TABLE: Final[Dict[str, Tuple[str, ...]]] = {
    "F": ("TTT", "TTC"),
    "L": ("TTA", "TTG", "CTT", "CTC", "CTA", "CTG"),
    "I": ("ATT", "ATC", "ATA"),
    "M": ("ATG",),
    "V": ("GTT", "GTC", "GTA", "GTG"),
    "S": ("TCT", "TCC", "TCA", "TCG", "AGT", "AGC"),
    "P": ("CCT", "CCC", "CCA", "CCG"),
    "T": ("ACT", "ACC", "ACA", "ACG"),
    "A": ("GCT", "GCC", "GCA", "GCG"),
    "Y": ("TAT", "TAC"),
    "H": ("CAT", "CAC"),
    "Q": ("CAA", "CAG"),
    "N": ("AAT", "AAC"),
    "K": ("AAA", "AAG"),
    "D": ("GAT", "GAC"),
    "E": ("GAA", "GAG"),
    "C": ("TGT", "TGC"),
    "W": ("TGG",),
    "R": ("CGT", "CGC", "CGA", "CGG", "AGA", "AGG"),
    "G": ("GGT", "GGC", "GGA", "GGG"),
    "*": ("TAA", "TAG", "TGA"),
}

CODON_TO_AMINO_ACID: Final[Dict[str, str]] = {
    codon: amino_acid for amino_acid, codons in CODON_TABLE.items() for codon in codons
}

# Usage assumed for every codon when no host organism is given.
NEUTRAL_USAGE = 0.5


@lru_cache(maxsize=1)
def _usage_tables() -> Dict[str, Dict[str, float]]:
    data = read_yaml(bundled_yaml_path("codon_usage"))
    tables = {}
    for organism, block in (data.get("organisms") or {}).items():
        tables[organism] = {str(codon).upper(): float(value) for codon, value in block["usage"].items()}
    logger.debug(f"Loaded codon usage for {', '.join(tables)}")

    return tables


def codon_usage(organism: str) -> Dict[str, float]:
    """
    Codon usage table of a host organism.

    Raises
    ------
    ValueError
        If the organism has no bundled table.
    """
    tables = _usage_tables()
    if organism not in tables:
        raise ValueError(f"No codon usage table for '{organism}'. Available: {', '.join(sorted(tables))}")

    return dict(tables[organism])


@dataclass(frozen=True, slots=True)
class CodonCandidate:
    """Synonymous codon with its distance to the original codon and host usage."""
    codon: str
    changes: int
    changed_positions: Tuple[int, ...]
    usage: float

    @property
    def rank_score(self) -> float:
        """``10 * changes - 5 * usage``; lower is better."""
        return 10.0 * self.changes - 5.0 * self.usage


@dataclass(frozen=True, slots=True)
class CodonSelection:
    """
    Result of `select_codon`.

    Attributes
    ----------
    codon : str
        Selected codon.
    nucleotide_changes : int
        Bases that differ from the original codon.
    usage : float
        Host usage of the selected codon.
    changed_positions : tuple of int
        1-based codon positions that change.
    candidates : tuple of CodonCandidate
        Every synonymous codon, best `rank_score` first.
    """
    codon: str
    nucleotide_changes: int
    usage: float
    changed_positions: Tuple[int, ...]
    candidates: Tuple[CodonCandidate, ...]


def select_codon(original_codon: str, target_amino_acid: str, organism: Optional[str] = "ecoli") -> CodonSelection:
    """
    Pick the codon for ``target_amino_acid`` that needs the fewest base changes.

    Every changed base is a mismatch the mutagenic primer must carry, so fewer
    changes destabilize the primer/template duplex less. Ties go to the codon
    the host uses most.

    Parameters
    ----------
    original_codon : str
        Codon currently in the template.
    target_amino_acid : str
        One-letter amino acid code, or ``"*"`` for a stop codon.
    organism : str, optional
        ``"ecoli"``, ``"human"`` or ``None`` (all codons weighted equally).

    Raises
    ------
    InvalidSequenceError
        For an unknown amino acid or a codon that is not three DNA bases.
    """
    codon = original_codon.strip().upper() if isinstance(original_codon, str) else ""
    if codon not in CODON_TO_AMINO_ACID:
        raise InvalidSequenceError(f"Invalid codon: {original_codon!r}")
    amino_acid = target_amino_acid.strip().upper() if isinstance(target_amino_acid, str) else ""
    if amino_acid not in CODON_TABLE:
        raise InvalidSequenceError(f"Invalid amino acid: {target_amino_acid!r}")

    usage_table = codon_usage(organism) if organism is not None else None

    candidates = []
    for synonym in CODON_TABLE[amino_acid]:
        positions = tuple(i + 1 for i in range(3) if synonym[i] != codon[i])
        usage = usage_table.get(synonym, 0.0) if usage_table is not None else NEUTRAL_USAGE
        candidates.append(CodonCandidate(synonym, len(positions), positions, usage))

    best = min(candidates, key=lambda c: (c.changes, -c.usage))
    ranked = tuple(sorted(candidates, key=lambda c: c.rank_score))

    return CodonSelection(
        codon=best.codon,
        nucleotide_changes=best.changes,
        usage=best.usage,
        changed_positions=best.changed_positions,
        candidates=ranked,
    )
