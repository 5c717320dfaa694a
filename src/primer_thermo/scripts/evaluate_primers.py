#!/usr/bin/env python3
"""
Evaluate PCR primers from the command line.

Every primer gets its melting temperature, 3' stability, hairpin and self-dimer
folds and a composite quality score. With ``--pair`` the first two primers are
treated as a forward/reverse pair and their cross-dimer is folded as well.

Examples:
  - primer-thermo ATGCGTACGTAGCTAGCTAGC
  - primer-thermo --pair --json GCTAGCTAGCTACGTACGCAT CGATCGATCGTAGCATGCAAT
  - primer-thermo -vv --legacy --mg-mm 3 --preset sequencing ACGTACGTTGCAGCATGCAT
"""

# --- Standard Library Imports ---
from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional

# --- Third-Party Imports ---
from tqdm import tqdm

# --- Local Application Imports ---
from primer_thermo.context import create_context
from primer_thermo.errors import PrimerThermoError
from primer_thermo.folding import FoldingConfig
from primer_thermo.scoring import DEFAULT_PRESET, PairAnalysis, PrimerAnalysis, evaluate_pair, evaluate_primer
from primer_thermo.scoring.presets import list_applications, list_presets
from primer_thermo.thermo import TmConditions, classify_terminal_3prime
from primer_thermo.utils.logging_utils import DEFAULT_LOG_DIR, setup_logger

logger = logging.getLogger(__name__)


# --------------------------
# Logging Configuration
# --------------------------
def setup_cli_logging(verbose_level: int, log_file: Optional[str] = None) -> None:
    """
    Configure logging for the CLI and the engine modules it drives.

    Parameters
    ----------
    verbose_level : int
        0 for WARNING, 1 for INFO, 2 for DEBUG.
    log_file : Optional[str]
        Explicit log file. Without one, a timestamped file is created under
        ``var/log/`` when verbosity is above 0.
    """
    level_map = {
        0: logging.WARNING,
        1: logging.INFO,
        2: logging.DEBUG,
    }
    log_level = level_map.get(verbose_level, logging.DEBUG)
    should_log_to_file = (verbose_level > 0) or (log_file is not None)

    loggers_to_configure = [
        __name__,
        "primer_thermo.folding.zucker.zucker_recurrences",
        "primer_thermo.folding.dimer.dimer_recurrences",
        "primer_thermo.scoring.primer_scoring",
        "primer_thermo.energies.energy_loader",
    ]

    for logger_name in loggers_to_configure:
        setup_logger(
            logger_name,
            level=log_level,
            log_file=log_file,
            enable_file_logging=should_log_to_file,
            enable_tqdm=True,
        )

    if should_log_to_file and log_file is None:
        logger.info(f"Logs will be saved to: {DEFAULT_LOG_DIR.resolve()}")


# --------------------------
# Helpers
# --------------------------
def build_conditions(cli_args: argparse.Namespace) -> TmConditions:
    """Solution conditions from the concentration flags."""
    return TmConditions(
        oligo_nm=cli_args.oligo_nm,
        monovalent_mm=cli_args.monovalent_mm,
        tris_mm=cli_args.tris_mm,
        mg_mm=cli_args.mg_mm,
        dntp_mm=cli_args.dntp_mm,
    )


def primer_record(analysis: PrimerAnalysis) -> Dict[str, Any]:
    """JSON-ready summary of one primer."""
    metrics = analysis.metrics
    return {
        "sequence": metrics.sequence,
        "length": metrics.length,
        "tm_c": metrics.tm,
        "gc_percent": metrics.gc_percent,
        "terminal_3prime_dg": metrics.terminal_3prime_dg,
        "terminal_3prime_class": (
            classify_terminal_3prime(metrics.terminal_3prime_dg) if metrics.terminal_3prime_dg is not None else None
        ),
        "hairpin": {
            "delta_g": analysis.hairpin.delta_g,
            "dot_bracket": analysis.hairpin.fold.dot_bracket,
            "severity": analysis.hairpin.severity.name.lower(),
        },
        "homodimer": {
            "delta_g": analysis.homodimer.delta_g,
            "dot_bracket": analysis.homodimer.fold.dot_bracket,
            "severity": analysis.homodimer.severity.name.lower(),
        },
        "score": analysis.composite.score,
        "quality": analysis.composite.quality,
    }


def pair_record(analysis: PairAnalysis) -> Dict[str, Any]:
    """JSON-ready summary of a primer pair."""
    return {
        "forward": primer_record(analysis.forward),
        "reverse": primer_record(analysis.reverse),
        "heterodimer": {
            "delta_g": analysis.heterodimer.delta_g,
            "dot_bracket": analysis.heterodimer.fold.dot_bracket,
            "severity": analysis.heterodimer.severity.name.lower(),
        },
        "tm_difference": analysis.tm_difference,
        "score": analysis.composite.score,
        "quality": analysis.composite.quality,
    }


def print_primer(record: Dict[str, Any]) -> None:
    tm = f"{record['tm_c']:.2f}" if record["tm_c"] is not None else "n/a"
    terminal = record["terminal_3prime_dg"]
    print(f"Sequence : {record['sequence']}")
    print(f"Length : {record['length']}")
    print(f"Tm (°C) : {tm}")
    print(f"GC (%) : {record['gc_percent']:.1f}")
    if terminal is not None:
        print(f"3' ΔG (kcal/mol) : {terminal:.2f} ({record['terminal_3prime_class']})")
    for label in ("hairpin", "homodimer"):
        fold = record[label]
        print(f"{label.capitalize()} : {fold['dot_bracket']} ΔG={fold['delta_g']:.2f} [{fold['severity']}]")
    print(f"Score : {record['score']:.4f} ({record['quality']})")


def print_pair(record: Dict[str, Any]) -> None:
    for role in ("forward", "reverse"):
        print(f"--- {role.capitalize()} primer ---")
        print_primer(record[role])
    hetero = record["heterodimer"]
    print("--- Pair ---")
    print(f"Heterodimer : {hetero['dot_bracket']} ΔG={hetero['delta_g']:.2f} [{hetero['severity']}]")
    if record["tm_difference"] is not None:
        print(f"ΔTm (°C) : {record['tm_difference']:.2f}")
    print(f"Pair score : {record['score']:.4f} ({record['quality']})")


# --------------------------
# Main CLI Logic
# --------------------------
def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments, evaluate the primers and print the results.

    Returns
    -------
    int
        0 on success, 1 when an evaluation fails, 2 for invalid input or options.
    """
    parser = argparse.ArgumentParser(description="Evaluate PCR primers: Tm, 3' stability, structure and score.")
    parser.add_argument("sequences", nargs="+", help="Primer sequences (A,C,G,T), 5'->3'")
    parser.add_argument("--pair", action="store_true",
                        help="Treat the first two sequences as a forward/reverse primer pair.")
    parser.add_argument("--legacy", action="store_true",
                        help="Use the legacy SantaLucia 1998 parameter set and entropic salt correction.")
    parser.add_argument("--preset", default=DEFAULT_PRESET, choices=list_presets(),
                        help="Scoring weight preset.")
    parser.add_argument("--application", default=None, choices=list_applications(),
                        help="Application modifier applied on top of the preset weights.")
    parser.add_argument("--temp-c", "--tempC", dest="temp_c", type=float, default=37.0,
                        help="Folding temperature in Celsius.")
    parser.add_argument("--oligo-nm", type=float, default=250.0, help="Oligo concentration (nM).")
    parser.add_argument("--monovalent-mm", type=float, default=50.0, help="Na+/K+ concentration (mM).")
    parser.add_argument("--tris-mm", type=float, default=2.0, help="Tris concentration (mM).")
    parser.add_argument("--mg-mm", type=float, default=1.5, help="Mg2+ concentration (mM).")
    parser.add_argument("--dntp-mm", type=float, default=0.2, help="dNTP concentration (mM).")
    parser.add_argument("--json", action="store_true",
                        help="Emit JSON instead of plain text.")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase verbosity (-v for INFO, -vv for DEBUG).")
    parser.add_argument("--log-file", default=None,
                        help="Write logs to this file.")

    cli_args = parser.parse_args(argv)

    # --- Setup ---
    setup_cli_logging(cli_args.verbose, cli_args.log_file)

    logger.info("=" * 60)
    logger.info("Primer Evaluation CLI")
    logger.info("=" * 60)

    if cli_args.pair and len(cli_args.sequences) != 2:
        message = f"--pair needs exactly two sequences, got {len(cli_args.sequences)}."
        logger.error(message)
        if not cli_args.json:
            print(f"Error: {message}", file=sys.stderr)
        return 2

    try:
        conditions = build_conditions(cli_args)
        folding_config = FoldingConfig(temp_c=cli_args.temp_c)
        context = create_context(revised=not cli_args.legacy)
    except PrimerThermoError as e:
        logger.error(f"Invalid options: {e}")
        if not cli_args.json:
            print(f"Error: {e}", file=sys.stderr)
        return 2

    logger.info(f"Parameter set: {context.parameter_identity}")

    # --- Evaluation ---
    shared = dict(
        conditions=conditions,
        preset=cli_args.preset,
        application=cli_args.application,
        folding_config=folding_config,
        context=context,
    )
    try:
        if cli_args.pair:
            forward, reverse = cli_args.sequences
            records: List[Dict[str, Any]] = [pair_record(evaluate_pair(forward, reverse, **shared))]
        else:
            records = [
                primer_record(evaluate_primer(seq, **shared))
                for seq in tqdm(cli_args.sequences, desc="Primers", disable=len(cli_args.sequences) < 2)
            ]
    except PrimerThermoError as e:
        logger.error(f"Evaluation rejected input: {e}")
        if not cli_args.json:
            print(f"Error: {e}", file=sys.stderr)
        return 2
    except Exception as e:
        logger.error(f"Evaluation failed: {e}", exc_info=True)
        if not cli_args.json:
            print(f"Evaluation failed: {e}", file=sys.stderr)
        return 1

    logger.info("=" * 60)
    logger.info("Evaluation successful")
    logger.info("=" * 60)

    # --- Output ---
    if cli_args.json:
        payload = records[0] if cli_args.pair else records
        print(json.dumps(payload, indent=2))
    elif cli_args.pair:
        print_pair(records[0])
    else:
        for index, record in enumerate(records):
            if index:
                print()
            print_primer(record)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
