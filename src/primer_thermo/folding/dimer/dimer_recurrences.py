from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple
import math
import time
import logging

import numpy as np
from tqdm import tqdm

from primer_thermo.energies.energy_model import DuplexEnergyModelProtocol
from primer_thermo.folding.dimer.dimer_fold_state import DimerFoldState
from primer_thermo.folding.fold_result import DG_TIE_EPSILON, is_better_candidate
from primer_thermo.rules import MAX_LOOP_SIZE
from primer_thermo.utils.energy_utils import calculate_delta_g

logger = logging.getLogger(__name__)

# Rank of each transition, used after energy and pair count to break ties.
RANK_START = 0
RANK_STACK = 1
RANK_LOOP = 2


@dataclass(frozen=True, slots=True)
class DimerFoldingConfig:
    """
    Configuration settings for the dimer folding algorithm.

    Attributes
    ----------
    temp_k : float
        Temperature in Kelvin. Defaults to 310.15 K (37 °C).
    max_loop : int
        Largest bulge/internal loop (total unpaired nt) between two pairs.
    tie_epsilon : float
        Energy window within which candidates count as tied.
    verbose : bool
        If True, show a progress bar whatever the log level.
    """
    temp_k: float = 310.15
    max_loop: int = MAX_LOOP_SIZE
    tie_epsilon: float = DG_TIE_EPSILON
    verbose: bool = False


@dataclass(frozen=True, slots=True)
class DimerOptimum:
    """
    Best duplex found by the dimer DP.

    Attributes
    ----------
    delta_g : float
        Total ΔG in kcal/mol; 0.0 when no duplex beats the unpaired state.
    end_cell : tuple of int, optional
        Table cell ``(i, j)`` of the last pair, ``None`` when nothing pairs.
    exterior_energy : float
        Initiation, both helix-end terms and symmetry, summed.
    pairs : int
        Number of base pairs.
    """
    delta_g: float
    end_cell: Optional[Tuple[int, int]]
    exterior_energy: float
    pairs: int


@dataclass(slots=True)
class DimerFoldingEngine:
    """
    Dynamic programming for the most stable duplex between two DNA strands.

    Cell ``(i, j)`` holds the best duplex ending in the pair ``A[i]·B'[j]``
    (``B'`` is strand B read 3'→5'). A duplex either starts at the cell or
    extends an earlier pair ``(p, q)`` with ``p < i`` and ``q < j`` through a
    stack, bulge or internal loop of at most ``max_loop`` unpaired bases.
    Rows are filled top to bottom, so every predecessor is final when read.

    Attributes
    ----------
    energy_model : DuplexEnergyModelProtocol
        Provides stack, loop and terminal free energies.
    config : DimerFoldingConfig
        Folding settings.
    """
    energy_model: DuplexEnergyModelProtocol
    config: DimerFoldingConfig

    def fill_all_matrices(self, seq_a: str, seq_b_reversed: str, state: DimerFoldState) -> None:
        """
        Fills every cell of ``state``.

        Parameters
        ----------
        seq_a : str
            Strand A, 5'→3'.
        seq_b_reversed : str
            Strand B reversed (3'→5').
        state : DimerFoldState
            Tables allocated by `make_dimer_state`.
        """
        start_time = time.perf_counter()
        n, m = len(seq_a), len(seq_b_reversed)
        cfg = self.config

        logger.info("=" * 60)
        logger.info(f"Dimer DP for strand lengths {n} x {m}")
        logger.info("=" * 60)

        show_progress = cfg.verbose or logger.isEnabledFor(logging.INFO)
        row_iter = tqdm(range(n), desc="Dimer DP", leave=False, disable=not show_progress)

        energy = state.energy
        pairs = state.pairs
        pairable = state.pairable

        for i in row_iter:
            for j in range(m):
                if not pairable[i, j]:
                    continue

                # Case 1: (i,j) starts a helix.
                start_term = self.energy_model.terminal(seq_a[i], seq_b_reversed[j], temp_k=cfg.temp_k)
                best_energy, best_pairs, best_rank = start_term, 1, RANK_START
                best_prev = (-1, -1)
                best_step = start_term

                # Case 2: (i,j) extends a duplex ending at (p,q) by a stack, bulge or internal loop.
                for p in range(i - 1, max(-1, i - cfg.max_loop - 2), -1):
                    left_unpaired = i - p - 1
                    q_min = max(0, j - 1 - (cfg.max_loop - left_unpaired))
                    for q in range(j - 1, q_min - 1, -1):
                        if not pairable[p, q]:
                            continue
                        prev_energy = energy[p, q]
                        if math.isinf(prev_energy):
                            continue

                        step = self.energy_model.loop(seq_a[p:i + 1], seq_b_reversed[q:j + 1], temp_k=cfg.temp_k)
                        if not math.isfinite(step):
                            continue

                        cand_energy = float(prev_energy) + step
                        cand_pairs = int(pairs[p, q]) + 1
                        cand_rank = RANK_STACK if (p == i - 1 and q == j - 1) else RANK_LOOP
                        if is_better_candidate(
                            cand_energy, cand_pairs, cand_rank, best_energy, best_pairs, best_rank, cfg.tie_epsilon
                        ):
                            best_energy, best_pairs, best_rank = cand_energy, cand_pairs, cand_rank
                            best_prev = (p, q)
                            best_step = step

                energy[i, j] = best_energy
                pairs[i, j] = best_pairs
                state.prev_i[i, j], state.prev_j[i, j] = best_prev
                state.step_energy[i, j] = best_step

        elapsed = time.perf_counter() - start_time
        logger.info(f"Dimer DP completed in {elapsed:.2f}s ({elapsed * 1000:.0f}ms)")

    def best_duplex(
        self, seq_a: str, seq_b_reversed: str, state: DimerFoldState, *, symmetric: bool = False
    ) -> DimerOptimum:
        """
        Close every candidate duplex and pick the most stable one.

        The total of a duplex ending at ``(i, j)`` adds duplex initiation, the
        helix-end term of its last pair and, for ``symmetric`` (homodimer)
        folds, the symmetry correction. The unpaired state (ΔG 0, no pairs)
        competes under the same tie rule, so marginal duplexes are dropped.
        """
        params = self.energy_model.params
        temp_k = self.config.temp_k
        init_dg = calculate_delta_g(params.INIT_BASE, temp_k)
        if symmetric:
            init_dg += calculate_delta_g(params.SYMMETRY, temp_k)

        best = DimerOptimum(delta_g=0.0, end_cell=None, exterior_energy=0.0, pairs=0)
        best_rank = math.inf

        for i, j in np.argwhere(np.isfinite(state.energy)):
            i, j = int(i), int(j)
            end_term = self.energy_model.terminal(seq_a[i], seq_b_reversed[j], temp_k=temp_k)
            total = float(state.energy[i, j]) + end_term + init_dg
            cand_pairs = int(state.pairs[i, j])
            if is_better_candidate(
                total, cand_pairs, 0, best.delta_g, best.pairs, best_rank, self.config.tie_epsilon
            ):
                best = DimerOptimum(
                    delta_g=total, end_cell=(i, j), exterior_energy=end_term + init_dg, pairs=cand_pairs
                )
                best_rank = 0

        logger.info(f"Best duplex ΔG = {best.delta_g:.3f} kcal/mol ({best.pairs} pairs)")

        return best
