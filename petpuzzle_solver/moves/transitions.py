"""Applying moves to snapshots."""

from dataclasses import replace
from typing import Iterable

from ..puzzle.state import PuzzleState, shift_body
from .effects import SolveEffect, apply_solve_effects
from .move import Move, MoveType


def apply_move_with_effects(state: PuzzleState, move: Move) -> SolveEffect:
    """
    Apply one move and report the color walls a solve removed.

    Moves that reference a missing pet, exit or box leave the state unchanged.
    """
    if move.move_type == MoveType.MOVE_BOX:
        box = state.find_box(move.entity_id)
        if box is None:
            return SolveEffect(state)
        dx, dy = move.delta
        boxes = tuple(
            replace(b, positions=b.translated(dx, dy)) if b.box_id == box.box_id else b
            for b in state.boxes
        )
        return SolveEffect(state.evolve(boxes=boxes))

    pet = state.find_pet(move.entity_id)
    if pet is None:
        return SolveEffect(state)

    moved = replace(pet, positions=shift_body(pet.positions, move.end, move.target))
    pets = tuple(moved if p.pet_id == pet.pet_id else p for p in state.pets)
    next_state = state.evolve(pets=pets)

    if move.move_type == MoveType.REPOSITION:
        return SolveEffect(next_state)

    solved_exit = next_state.find_exit(move.target)
    if solved_exit is None:
        return SolveEffect(state)
    return apply_solve_effects(next_state, moved, solved_exit, pet.positions)


def apply_move(state: PuzzleState, move: Move) -> PuzzleState:
    """Apply one move, returning the new snapshot."""
    return apply_move_with_effects(state, move).state


def apply_moves(state: PuzzleState, moves: Iterable[Move]) -> PuzzleState:
    """Apply a sequence of moves in order."""
    for move in moves:
        state = apply_move(state, move)
    return state

