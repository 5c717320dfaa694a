from primer_thermo.mutagenesis.g_quadruplex import G4_MOTIF, GQuadruplexAnalysis, analyze_g_quadruplex
from primer_thermo.mutagenesis.codons import (
    CODON_TABLE,
    CODON_TO_AMINO_ACID,
    CodonCandidate,
    CodonSelection,
    codon_usage,
    select_codon,
)
from primer_thermo.mutagenesis.mismatch_tm import MismatchTmResult, calculate_mismatch_tm
from primer_thermo.mutagenesis.mutant_structure import MutantStructureComparison, compare_mutant_structure

__all__ = [
    "CODON_TABLE",
    "CODON_TO_AMINO_ACID",
    "G4_MOTIF",
    "CodonCandidate",
    "CodonSelection",
    "GQuadruplexAnalysis",
    "MismatchTmResult",
    "MutantStructureComparison",
    "analyze_g_quadruplex",
    "calculate_mismatch_tm",
    "codon_usage",
    "compare_mutant_structure",
    "select_codon",
]
