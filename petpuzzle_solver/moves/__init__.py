"""Moves, their effects and the external record format."""

from .move import Move, MoveType, detect_oscillation
from .effects import SolveEffect, apply_global_decay, apply_solve_effects
from .transitions import apply_move, apply_move_with_effects, apply_moves
from .generator import generate_setup_moves, is_box_deadlocked
from .records import (
    MoveRecord, parse_record, format_solution, records_to_moves, replay_records,
)

__all__ = [
    "Move",
    "MoveType",
    "detect_oscillation",
    "SolveEffect",
    "apply_global_decay",
    "apply_solve_effects",
    "apply_move",
    "apply_move_with_effects",
    "apply_moves",
    "generate_setup_moves",
    "is_box_deadlocked",
    "MoveRecord",
    "parse_record",
    "format_solution",
    "records_to_moves",
    "replay_records",
]
