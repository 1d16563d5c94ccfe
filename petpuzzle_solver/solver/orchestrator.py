"""
Staged solver loop.

Each stage applies a direct solve when one exists, otherwise searches for
setup moves (A* first, IDA* as fallback) that make one possible. The loop
ends when the board has no pets left, a search comes back empty handed, or
the stage budget runs out.
"""

import asyncio
import time
from typing import Callable, Generator, List, Optional, Sequence

from ..moves.move import Move
from ..moves.records import format_solution
from ..moves.transitions import apply_moves
from ..puzzle.state import PuzzleState
from ..puzzle.validator import StateValidator
from .astar import find_setup_sequence
from .config import DEFAULT_CONFIG, SolverConfig
from .core_types import CancelToken, SolveResult, SolverCancelled, SolverStats
from .direct_solve import find_best_direct_solve
from .ida_star import ida_star

CancelCheck = Callable[[], bool]


class PuzzleSolver:
    """Solves a puzzle snapshot into a list of move records."""

    def __init__(self, config: Optional[SolverConfig] = None):
        """
        Initialize the solver.

        Args:
            config: Search budgets and switches (default: DEFAULT_CONFIG)
        """
        self.config = config or DEFAULT_CONFIG

    def _log(self, msg: str) -> None:
        if self.config.verbose:
            print(msg)

    def solve(self, state: PuzzleState, hint: Optional[Sequence[str]] = None,
              should_cancel: Optional[CancelCheck] = None) -> SolveResult:
        """
        Solve a snapshot.

        Args:
            state: The puzzle to solve
            hint: Pre-recorded move records; returned verbatim when non-empty
            should_cancel: Predicate polled between stages and during searches

        Returns:
            SolveResult; ``success`` is False when no solution was found
        """
        stages = self._stages(state, hint, should_cancel)
        while True:
            try:
                next(stages)
            except StopIteration as stop:
                return stop.value

    async def solve_async(self, state: PuzzleState, hint: Optional[Sequence[str]] = None,
                          should_cancel: Optional[CancelCheck] = None) -> SolveResult:
        """Like ``solve``, handing control back to the event loop once per stage."""
        stages = self._stages(state, hint, should_cancel)
        while True:
            try:
                next(stages)
            except StopIteration as stop:
                return stop.value
            await asyncio.sleep(0)

    def _stages(self, state: PuzzleState, hint: Optional[Sequence[str]],
                should_cancel: Optional[CancelCheck]) -> Generator[None, None, SolveResult]:
        """Run the stage loop, yielding once per stage."""
        started = time.perf_counter()
        stats = SolverStats()

        def finish(result: SolveResult) -> SolveResult:
            stats.elapsed_ms = (time.perf_counter() - started) * 1000
            result.stats = stats
            return result

        def failure(error: str) -> SolveResult:
            self._log(f"[Solver] {error}")
            return finish(SolveResult(False, error=error))

        if hint:
            self._log("[Solver] Using provided hint as solution.")
            return finish(SolveResult(True, records=list(hint), used_hint=True))

        valid, errors = StateValidator.validate(state)
        if not valid:
            return failure("Invalid puzzle: " + "; ".join(errors))

        config = self.config
        cancel = CancelToken(config.time_limit, should_cancel, config.cancel_check_interval)
        current = state
        all_moves: List[Move] = []

        def accept(moves: List[Move]) -> None:
            nonlocal current
            all_moves.extend(moves)
            current = apply_moves(current, moves)

        try:
            for stage in range(1, config.max_stages + 1):
                if current.is_cleared:
                    return finish(SolveResult(True, format_solution(state, all_moves), list(all_moves)))

                stats.stages = stage
                yield
                cancel.check()

                direct = find_best_direct_solve(current)
                if direct:
                    self._log(f"[Stage {stage}] Direct solve found ({len(direct)} moves).")
                    stats.direct_solves += 1
                    accept(direct)
                    continue

                setup = find_setup_sequence(current, config, cancel)
                stats.add_astar(setup.stats)
                if setup.moves:
                    self._log(f"[Stage {stage}] A* setup found {len(setup.moves)} moves "
                              f"(nodes {setup.stats.nodes_expanded}).")
                    accept(setup.moves)
                    continue

                self._log(f"[Stage {stage}] A* failed, attempting IDA* fallback...")
                fallback = ida_star(current, config, cancel)
                stats.add_ida(fallback.stats)
                if fallback.moves is not None:
                    if fallback.moves:
                        self._log(f"[Stage {stage}] IDA* produced {len(fallback.moves)} setup moves.")
                        accept(fallback.moves)
                    # An empty sequence means a direct solve is available now
                    continue

                return failure(f"Search exhausted at stage {stage}")
        except SolverCancelled:
            stats.cancelled = True
            return failure("Solve cancelled")

        if current.is_cleared:
            return finish(SolveResult(True, format_solution(state, all_moves), list(all_moves)))
        return failure(f"No solution within {config.max_stages} stages")


def solve_level(state: PuzzleState, hint: Optional[Sequence[str]] = None,
                config: Optional[SolverConfig] = None,
                should_cancel: Optional[CancelCheck] = None) -> SolveResult:
    """Solve a snapshot with a fresh PuzzleSolver."""
    return PuzzleSolver(config).solve(state, hint, should_cancel)


async def solve_level_async(state: PuzzleState, hint: Optional[Sequence[str]] = None,
                            config: Optional[SolverConfig] = None,
                            should_cancel: Optional[CancelCheck] = None) -> SolveResult:
    """Asynchronous variant of ``solve_level``."""
    return await PuzzleSolver(config).solve_async(state, hint, should_cancel)
