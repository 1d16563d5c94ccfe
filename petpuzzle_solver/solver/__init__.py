"""Solver module for pet puzzles.

Main components:
- pathfinder: full-body A* and the fast BFS used for direct solves
- direct_solve: shortest pet -> exit route in a snapshot
- astar / ida_star: searches for setup moves
- orchestrator: the staged solve loop
"""

from .config import SolverConfig, DEFAULT_CONFIG
from .core_types import (
    SolverCancelled, CancelToken, SearchStats, SetupSearchResult,
    SolverStats, SolveResult,
)
from .keys import state_key
from .heuristics import MISSING_EXIT_PENALTY, heuristic_distance
from .pathfinder import find_route, find_direct_route
from .direct_solve import find_best_direct_solve, has_direct_solve
from .astar import SearchNode, expand_setup_moves, find_setup_sequence
from .ida_star import ida_star
from .orchestrator import PuzzleSolver, solve_level, solve_level_async

__all__ = [
    # Configuration
    "SolverConfig",
    "DEFAULT_CONFIG",
    # Results and cancellation
    "SolverCancelled",
    "CancelToken",
    "SearchStats",
    "SetupSearchResult",
    "SolverStats",
    "SolveResult",
    # Search building blocks
    "state_key",
    "MISSING_EXIT_PENALTY",
    "heuristic_distance",
    "find_route",
    "find_direct_route",
    "find_best_direct_solve",
    "has_direct_solve",
    "SearchNode",
    "expand_setup_moves",
    "find_setup_sequence",
    "ida_star",
    # Entry points
    "PuzzleSolver",
    "solve_level",
    "solve_level_async",
]
