"""
Pet Puzzle Solver

Solves grid puzzles in which pets slide head- or tail-first into exits of
their own color, with boxes, keys, locks and layered pets in the way.
"""

__version__ = "0.1.0"

from .puzzle import PuzzleState, PuzzleLoader, StateValidator, PetEnd
from .moves import Move, MoveType, format_solution, parse_record, replay_records
from .solver import PuzzleSolver, SolverConfig, SolveResult, solve_level, solve_level_async

__all__ = [
    "PuzzleState",
    "PuzzleLoader",
    "StateValidator",
    "PetEnd",
    "Move",
    "MoveType",
    "format_solution",
    "parse_record",
    "replay_records",
    "PuzzleSolver",
    "SolverConfig",
    "SolveResult",
    "solve_level",
    "solve_level_async",
]
