from __future__ import annotations
from dataclasses import dataclass
import math
import time
import logging

from tqdm import tqdm

from primer_thermo.energies.energy_model import DuplexEnergyModelProtocol
from primer_thermo.folding.fold_result import DG_TIE_EPSILON, is_better_candidate
from primer_thermo.folding.zucker.zucker_back_pointer import ZuckerBacktrackOp, ZuckerBackPointer
from primer_thermo.folding.zucker.zucker_fold_state import ZuckerFoldState
from primer_thermo.rules import MAX_LOOP_SIZE, MIN_HAIRPIN_UNPAIRED, can_pair, is_min_hairpin_size

logger = logging.getLogger(__name__)

Candidate = tuple[float, int, float, ZuckerBackPointer]


@dataclass(frozen=True, slots=True)
class ZuckerFoldingConfig:
    """
    Configuration settings for the single-strand folding algorithm.

    Attributes
    ----------
    temp_k : float
        Temperature in Kelvin used for energy calculations. Defaults to 310.15 K (37 °C).
    min_hairpin_loop : int
        Minimum number of unpaired bases enclosed by a hairpin.
    max_loop : int
        Largest bulge/internal loop (total unpaired nt) considered.
    tie_epsilon : float
        Energy window within which candidates count as tied.
    verbose : bool
        If True, show a progress bar whatever the log level.
    """
    temp_k: float = 310.15
    min_hairpin_loop: int = MIN_HAIRPIN_UNPAIRED
    max_loop: int = MAX_LOOP_SIZE
    tie_epsilon: float = DG_TIE_EPSILON
    verbose: bool = False


@dataclass(slots=True)
class ZuckerFoldingEngine:
    """
    Zuker-style dynamic programming for the MFE structure of one DNA strand.

    The W, V and WM matrices are filled bottom-up by span. V[i, j] is the
    best structure closed by the pair (i, j); WM[i, j] the best multiloop
    interior segment; W[i, j] the best exterior-loop structure. Alongside each
    energy the engine keeps the number of base pairs of the chosen structure,
    so energy ties resolve towards the simpler structure.

    Attributes
    ----------
    energy_model : DuplexEnergyModelProtocol
        Provides hairpin, loop, multiloop and terminal free energies.
    config : ZuckerFoldingConfig
        Folding settings.
    """
    energy_model: DuplexEnergyModelProtocol
    config: ZuckerFoldingConfig

    def fill_all_matrices(self, seq: str, state: ZuckerFoldState) -> None:
        """
        Fills every DP cell of ``state`` for ``seq``.

        Parameters
        ----------
        seq : str
            Canonical DNA sequence to fold.
        state : ZuckerFoldState
            Freshly allocated matrices (see `make_fold_state`).
        """
        start_time = time.perf_counter()
        n = len(seq)

        if n == 0:
            logger.info("Hairpin DP: empty sequence; nothing to fill.")
            return

        logger.info("=" * 60)
        logger.info(f"Hairpin (nested) DP for sequence length N={n}")
        logger.info(f"Expected complexity: O(N³) ≈ {n ** 3:,} operations")
        logger.info("=" * 60)

        show_progress = self.config.verbose or logger.isEnabledFor(logging.INFO)
        span_iter = tqdm(range(1, n), desc="Hairpin DP", leave=False, disable=not show_progress)

        # Spans of length 1 are the base cases set by make_fold_state.
        for d in span_iter:
            for i in range(0, n - d):
                j = i + d
                self._fill_v_cell(seq, i, j, state)
                self._fill_wm_cell(seq, i, j, state)
                self._fill_w_cell(seq, i, j, state)

        elapsed = time.perf_counter() - start_time
        final_energy = state.w_matrix.get(0, n - 1)

        logger.info(f"Hairpin DP completed in {elapsed:.2f}s ({elapsed * 1000:.0f}ms)")
        logger.info(f"Final W[0,{n - 1}] = {final_energy:.3f} kcal/mol")

    def _fill_v_cell(self, seq: str, i: int, j: int, state: ZuckerFoldState) -> None:
        """
        Fills V[i, j], the best structure closed by the pair (i, j).

        Notes
        -----
        V[i, j] is the minimum of:
        1.  **Hairpin**: (i, j) closes a hairpin loop.
        2.  **Stack / bulge / internal loop**: (i, j) encloses an inner pair
            (k, l) with at most ``max_loop`` unpaired bases in between,
            ``loop(i, j, k, l) + V[k, l]``.
        3.  **Multiloop**: (i, j) closes a loop holding at least two helices,
            ``a + b + terminal(i, j) + WM[i+1, k] + WM[k+1, j-1]``.
        """
        v_matrix = state.v_matrix
        v_pairs = state.v_pairs
        v_back_ptr = state.v_back_ptr
        cfg = self.config

        if not can_pair(seq[i], seq[j]) or not is_min_hairpin_size(i, j, cfg.min_hairpin_loop):
            return

        best: Candidate = (math.inf, 0, math.inf, ZuckerBackPointer())

        # Case 1: (i,j) closes a hairpin loop.
        delta_g_hp = self.energy_model.hairpin(base_i=i, base_j=j, seq=seq, temp_k=cfg.temp_k)
        best = self._compare_candidates(
            (delta_g_hp, 1, 3, ZuckerBackPointer(operation=ZuckerBacktrackOp.HAIRPIN, energy=delta_g_hp)), best
        )

        # Case 2: (i,j) encloses an inner pair (k,l): stack, bulge or internal loop.
        k_max = min(j - cfg.min_hairpin_loop - 2, i + cfg.max_loop + 1)
        for k in range(i + 1, k_max + 1):
            left_unpaired = k - i - 1
            l_min = max(k + cfg.min_hairpin_loop + 1, j - 1 - (cfg.max_loop - left_unpaired))
            for l in range(j - 1, l_min - 1, -1):
                if not can_pair(seq[k], seq[l]):
                    continue
                v_kl = v_matrix.get(k, l)
                if math.isinf(v_kl):
                    continue

                delta_g_loop = self.energy_model.loop(seq[i:k + 1], seq[l:j + 1][::-1], temp_k=cfg.temp_k)
                if not math.isfinite(delta_g_loop):
                    continue

                is_stack = k == i + 1 and l == j - 1
                op = ZuckerBacktrackOp.STACK if is_stack else ZuckerBacktrackOp.INTERNAL
                best = self._compare_candidates(
                    (
                        delta_g_loop + v_kl,
                        1 + v_pairs.get(k, l),
                        0 if is_stack else 1,
                        ZuckerBackPointer(operation=op, inner=(k, l), energy=delta_g_loop),
                    ),
                    best,
                )

        # Case 3: (i,j) closes a multiloop with at least two branches.
        wm_matrix = state.wm_matrix
        wm_pairs = state.wm_pairs
        coeff_a, coeff_b, _, _ = self.energy_model.params.MULTILOOP
        closing = coeff_a + coeff_b + self.energy_model.terminal(seq[i], seq[j], temp_k=cfg.temp_k)
        for k in range(i + 1, j - 1):
            left = wm_matrix.get(i + 1, k)
            right = wm_matrix.get(k + 1, j - 1)
            if math.isinf(left) or math.isinf(right):
                continue
            best = self._compare_candidates(
                (
                    closing + left + right,
                    1 + wm_pairs.get(i + 1, k) + wm_pairs.get(k + 1, j - 1),
                    2,
                    ZuckerBackPointer(operation=ZuckerBacktrackOp.MULTILOOP, split_k=k, energy=closing),
                ),
                best,
            )

        energy, pairs, _, back_ptr = best
        v_matrix.set(i, j, energy)
        v_pairs.set(i, j, pairs)
        v_back_ptr.set(i, j, back_ptr)

    def _fill_wm_cell(self, seq: str, i: int, j: int, state: ZuckerFoldState) -> None:
        """
        Fills WM[i, j], a multiloop interior segment holding at least one helix.

        Notes
        -----
        WM[i, j] is the minimum of:
        1.  ``WM[i+1, j] + c``: base i unpaired.
        2.  ``WM[i, j-1] + c``: base j unpaired.
        3.  ``V[i, j] + b + terminal(i, j)``: a branch helix closed by (i, j).
        4.  ``min_k WM[i, k] + WM[k+1, j]``: two independent runs of branches.
        """
        wm_matrix = state.wm_matrix
        wm_pairs = state.wm_pairs
        _, coeff_b, coeff_c, _ = self.energy_model.params.MULTILOOP

        best: Candidate = (math.inf, 0, math.inf, ZuckerBackPointer())

        # Case 1: Add an unpaired base at the 5' end.
        best = self._compare_candidates(
            (
                wm_matrix.get(i + 1, j) + coeff_c,
                wm_pairs.get(i + 1, j),
                1,
                ZuckerBackPointer(operation=ZuckerBacktrackOp.UNPAIRED_LEFT, energy=coeff_c),
            ),
            best,
        )

        # Case 2: Add an unpaired base at the 3' end.
        best = self._compare_candidates(
            (
                wm_matrix.get(i, j - 1) + coeff_c,
                wm_pairs.get(i, j - 1),
                1,
                ZuckerBackPointer(operation=ZuckerBacktrackOp.UNPAIRED_RIGHT, energy=coeff_c),
            ),
            best,
        )

        # Case 3: The helix closed by (i,j) is a branch.
        v_ij = state.v_matrix.get(i, j)
        if math.isfinite(v_ij):
            branch = coeff_b + self.energy_model.terminal(seq[i], seq[j], temp_k=self.config.temp_k)
            best = self._compare_candidates(
                (
                    v_ij + branch,
                    state.v_pairs.get(i, j),
                    0,
                    ZuckerBackPointer(operation=ZuckerBacktrackOp.PAIR, energy=branch),
                ),
                best,
            )

        # Case 4: Bifurcation into two runs of branches.
        for k in range(i, j):
            left = wm_matrix.get(i, k)
            right = wm_matrix.get(k + 1, j)
            if math.isinf(left) or math.isinf(right):
                continue
            best = self._compare_candidates(
                (
                    left + right,
                    wm_pairs.get(i, k) + wm_pairs.get(k + 1, j),
                    2,
                    ZuckerBackPointer(operation=ZuckerBacktrackOp.BIFURCATION, split_k=k, energy=0.0),
                ),
                best,
            )

        energy, pairs, _, back_ptr = best
        wm_matrix.set(i, j, energy)
        wm_pairs.set(i, j, pairs)
        state.wm_back_ptr.set(i, j, back_ptr)

    def _fill_w_cell(self, seq: str, i: int, j: int, state: ZuckerFoldState) -> None:
        """
        Fills W[i, j], the best exterior-loop structure of ``seq[i..j]``.

        Notes
        -----
        W[i, j] is the minimum of:
        1.  ``W[i+1, j]``: base i unpaired.
        2.  ``W[i, j-1]``: base j unpaired.
        3.  ``V[i, j] + terminal(i, j)``: an exterior helix closed by (i, j).
        4.  ``min_k W[i, k] + W[k+1, j]``: two independent substructures.

        Leaving every base unpaired gives 0.0, so W is never positive.
        """
        w_matrix = state.w_matrix
        w_pairs = state.w_pairs

        best: Candidate = (math.inf, 0, math.inf, ZuckerBackPointer())

        # Case 1: Leave base 'i' unpaired.
        best = self._compare_candidates(
            (
                w_matrix.get(i + 1, j),
                w_pairs.get(i + 1, j),
                2,
                ZuckerBackPointer(operation=ZuckerBacktrackOp.UNPAIRED_LEFT, energy=0.0),
            ),
            best,
        )

        # Case 2: Leave base 'j' unpaired.
        best = self._compare_candidates(
            (
                w_matrix.get(i, j - 1),
                w_pairs.get(i, j - 1),
                2,
                ZuckerBackPointer(operation=ZuckerBacktrackOp.UNPAIRED_RIGHT, energy=0.0),
            ),
            best,
        )

        # Case 3: The pair (i,j) closes an exterior helix.
        v_ij = state.v_matrix.get(i, j)
        if math.isfinite(v_ij):
            end_term = self.energy_model.terminal(seq[i], seq[j], temp_k=self.config.temp_k)
            best = self._compare_candidates(
                (
                    v_ij + end_term,
                    state.v_pairs.get(i, j),
                    0,
                    ZuckerBackPointer(operation=ZuckerBacktrackOp.PAIR, energy=end_term),
                ),
                best,
            )

        # Case 4: Bifurcation into two independent subproblems.
        for k in range(i, j):
            best = self._compare_candidates(
                (
                    w_matrix.get(i, k) + w_matrix.get(k + 1, j),
                    w_pairs.get(i, k) + w_pairs.get(k + 1, j),
                    1,
                    ZuckerBackPointer(operation=ZuckerBacktrackOp.BIFURCATION, split_k=k, energy=0.0),
                ),
                best,
            )

        if i == 0 and j == len(seq) - 1:
            logger.debug(f"W[0,{j}] = {best[0]:.2f} via {best[3].operation} ({best[1]} pairs)")

        energy, pairs, _, back_ptr = best
        w_matrix.set(i, j, energy)
        w_pairs.set(i, j, pairs)
        state.w_back_ptr.set(i, j, back_ptr)

    def _compare_candidates(self, cand: Candidate, best: Candidate) -> Candidate:
        """
        Keep the better of a candidate and the current best.

        Lower energy wins; within ``tie_epsilon`` the candidate with fewer
        base pairs wins, then the one with the lower case rank.
        """
        cand_energy, cand_pairs, cand_rank, _ = cand
        best_energy, best_pairs, best_rank, _ = best
        if is_better_candidate(
            cand_energy, cand_pairs, cand_rank, best_energy, best_pairs, best_rank, self.config.tie_epsilon
        ):
            return cand

        return best
