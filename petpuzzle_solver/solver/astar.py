"""
A* search for setup moves.

Looks for the shortest-looking sequence of non-solving moves (pet
repositions and box pushes) after which some pet can solve directly. The
solve itself is left to the caller.
"""

import heapq
import itertools
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..moves.generator import generate_setup_moves, is_box_deadlocked
from ..moves.move import Move, MoveType, detect_oscillation
from ..moves.transitions import apply_move
from ..puzzle.state import PuzzleState
from .config import DEFAULT_CONFIG, SolverConfig
from .core_types import CancelToken, SearchStats, SetupSearchResult
from .direct_solve import has_direct_solve
from .heuristics import heuristic_distance
from .keys import state_key


@dataclass(order=True)
class SearchNode:
    """Node of the A* frontier; ordered by f, then by insertion."""
    priority: int
    order: int
    state: PuzzleState = field(compare=False)
    g: int = field(compare=False)
    h: int = field(compare=False)
    move: Optional[Move] = field(compare=False, default=None)
    parent: Optional["SearchNode"] = field(compare=False, default=None)

    def path(self) -> List[Move]:
        """Moves from the root to this node."""
        moves = []
        node = self
        while node.move is not None:
            moves.append(node.move)
            node = node.parent
        moves.reverse()
        return moves

    def recent_moves(self, count: int) -> List[Move]:
        """The last ``count`` moves leading here, oldest first."""
        moves = []
        node = self
        while node.move is not None and len(moves) < count:
            moves.append(node.move)
            node = node.parent
        moves.reverse()
        return moves


def leaves_box_deadlocked(state: PuzzleState, move: Move) -> bool:
    """Check whether a box push ended in a corner."""
    if move.move_type != MoveType.MOVE_BOX:
        return False
    box = state.find_box(move.entity_id)
    return box is not None and is_box_deadlocked(state, box)


def expand_setup_moves(
    state: PuzzleState, history: Sequence[Move], window: int
) -> List[Tuple[Move, PuzzleState]]:
    """
    Children of ``state`` worth searching, as (move, child) pairs.

    ``history`` holds the moves that led to ``state``, oldest first. A move
    that would complete a back-and-forth run of ``window`` moves, or that
    pushes a box into a corner, is dropped.
    """
    recent = list(history[-(window - 1):]) if window > 1 else []
    children = []
    for move in generate_setup_moves(state):
        if detect_oscillation(recent + [move], window):
            continue
        child = apply_move(state, move)
        if leaves_box_deadlocked(child, move):
            continue
        children.append((move, child))
    return children


def find_setup_sequence(
    state: PuzzleState,
    config: SolverConfig = DEFAULT_CONFIG,
    cancel: Optional[CancelToken] = None,
) -> SetupSearchResult:
    """
    Search for setup moves leading to a state with a direct solve.

    Children are pruned when they oscillate, corner a box, revisit a state
    already reached with no worse g and h, or (past ``progress_depth``)
    score a worse heuristic than their parent. Expansions are capped at
    ``max_astar_nodes``.

    Args:
        state: Snapshot to start from
        config: Search budgets
        cancel: Optional cancellation token, ticked once per expansion

    Returns:
        SetupSearchResult with the setup moves, or ``moves=None`` if the
        budget ran out first

    Raises:
        SolverCancelled: If the cancellation token fires
    """
    started = time.perf_counter()
    stats = SearchStats()
    penalty = config.missing_exit_penalty
    window = config.oscillation_window
    counter = itertools.count()

    h0 = heuristic_distance(state, penalty)
    open_set = [SearchNode(h0, next(counter), state, 0, h0)]
    cache: Dict[object, Tuple[int, int]] = {state_key(state): (0, h0)}

    def finish(moves: Optional[List[Move]]) -> SetupSearchResult:
        stats.cache_size = len(cache)
        stats.time_ms = (time.perf_counter() - started) * 1000
        if config.verbose:
            outcome = f"{len(moves)} setup moves" if moves is not None else "no setup found"
            print(f"      [A*] {outcome} (nodes {stats.nodes_expanded}, "
                  f"cache {stats.cache_size}, hits {stats.cache_hits}, {stats.time_ms:.0f}ms)")
        return SetupSearchResult(moves, stats)

    while open_set and stats.nodes_expanded < config.max_astar_nodes:
        node = heapq.heappop(open_set)
        stats.nodes_expanded += 1
        stats.max_depth = max(stats.max_depth, node.g)
        if cancel is not None:
            cancel.tick()

        if has_direct_solve(node.state):
            return finish(node.path())

        recent = node.recent_moves(window - 1)
        for move, child in expand_setup_moves(node.state, recent, window):
            g = node.g + 1
            h = heuristic_distance(child, penalty)
            key = state_key(child)

            previous = cache.get(key)
            if previous is not None:
                stats.cache_hits += 1
                if previous[0] <= g and previous[1] <= h:
                    continue

            # Past a few steps, only keep children that do not look worse
            if h > node.h and g > config.progress_depth:
                continue

            cache[key] = (g, h)
            heapq.heappush(open_set, SearchNode(g + h, next(counter), child, g, h, move, node))

    return finish(None)
