"""
Iterative-deepening A* fallback for setup moves.

Used when A* runs out of nodes. Memory stays proportional to the depth of the
current pass plus that pass's best-g table.
"""

import time
from typing import Dict, List, Optional, Tuple

from ..moves.move import Move
from ..puzzle.state import PuzzleState
from .astar import expand_setup_moves
from .config import DEFAULT_CONFIG, SolverConfig
from .core_types import CancelToken, SearchStats, SetupSearchResult
from .direct_solve import has_direct_solve
from .heuristics import heuristic_distance
from .keys import state_key

# (found, smallest f above the bound, setup moves)
PassResult = Tuple[bool, Optional[int], Optional[List[Move]]]


def _depth_first(
    state: PuzzleState,
    h: int,
    g: int,
    path: List[Move],
    bound: int,
    seen_best: Dict[object, int],
    config: SolverConfig,
    stats: SearchStats,
    cancel: Optional[CancelToken],
) -> PassResult:
    """One depth-first pass below ``bound``; ``path`` is extended and restored in place."""
    stats.nodes_expanded += 1
    stats.max_depth = max(stats.max_depth, len(path))
    if cancel is not None:
        cancel.tick()

    f = g + h
    if f > bound:
        return False, f, None

    if has_direct_solve(state):
        return True, None, list(path)

    key = state_key(state)
    previous = seen_best.get(key)
    if previous is not None and previous <= g:
        return False, None, None
    seen_best[key] = g

    if g >= config.ida_max_depth:
        return False, None, None

    # Most promising children first
    children = [
        (heuristic_distance(child, config.missing_exit_penalty), move, child)
        for move, child in expand_setup_moves(state, path, config.oscillation_window)
    ]
    children.sort(key=lambda item: item[0])

    next_bound: Optional[int] = None
    for child_h, move, child in children:
        if child_h > h and g + 1 > config.progress_depth:
            continue

        path.append(move)
        try:
            found, child_bound, result = _depth_first(
                child, child_h, g + 1, path, bound, seen_best, config, stats, cancel
            )
        finally:
            path.pop()
        if found:
            return True, None, result
        if child_bound is not None and (next_bound is None or child_bound < next_bound):
            next_bound = child_bound

    return False, next_bound, None


def ida_star(
    state: PuzzleState,
    config: SolverConfig = DEFAULT_CONFIG,
    cancel: Optional[CancelToken] = None,
) -> SetupSearchResult:
    """
    Iterative-deepening search for setup moves.

    The first bound is the root heuristic; each further pass uses the
    smallest f that exceeded the previous bound, until it passes
    ``ida_max_bound`` or no node exceeded the bound.

    Returns:
        SetupSearchResult whose ``moves`` is the setup sequence, an empty
        list if the root already admits a direct solve, or None

    Raises:
        SolverCancelled: If the cancellation token fires
    """
    started = time.perf_counter()
    stats = SearchStats()
    h0 = heuristic_distance(state, config.missing_exit_penalty)
    bound = h0
    moves: Optional[List[Move]] = None

    while bound <= config.ida_max_bound:
        stats.iterations += 1
        seen_best: Dict[object, int] = {}
        found, next_bound, result = _depth_first(
            state, h0, 0, [], bound, seen_best, config, stats, cancel
        )
        stats.cache_size = len(seen_best)
        if config.verbose:
            print(f"      [IDA*] pass {stats.iterations} bound {bound}: nodes {stats.nodes_expanded}")
        if found:
            moves = result
            break
        if next_bound is None:
            break
        bound = next_bound

    stats.time_ms = (time.perf_counter() - started) * 1000
    return SetupSearchResult(moves, stats)
