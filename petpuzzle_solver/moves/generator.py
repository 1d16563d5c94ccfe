"""Setup move generation and box deadlock detection."""

from typing import List

from ..puzzle.state import DIRECTIONS, Cell, MovableBox, Pet, PetEnd, PuzzleState
from .move import Move


def is_box_deadlocked(state: PuzzleState, box: MovableBox) -> bool:
    """
    Conservative corner test for a box.

    A box whose reference cell is not on an exit is deadlocked when two
    orthogonal neighbours of that cell are off the board or occupied by a
    wall, obstacle, pet or another box. Not exhaustive: a box can still be
    stuck without this returning True.
    """
    if not box.positions:
        return False
    ref = box.positions[0]
    if ref in state.exit_positions:
        return False

    def blocked(cell: Cell) -> bool:
        if not state.in_bounds(cell):
            return True
        if cell in state.static_blocked or cell in state.pet_cells:
            return True
        owner = state.box_cells.get(cell)
        return owner is not None and owner != box.box_id

    x, y = ref
    right, left = blocked((x + 1, y)), blocked((x - 1, y))
    up, down = blocked((x, y + 1)), blocked((x, y - 1))
    return (right or left) and (up or down)


def _pet_moves(state: PuzzleState, pet: Pet) -> List[Move]:
    moves = []
    for end in state.leading_ends(pet):
        start = pet.end_position(end)
        remaining = set(pet.positions[:-1] if end == PetEnd.HEAD else pet.positions[1:])

        for dx, dy in DIRECTIONS:
            target = (start[0] + dx, start[1] + dy)
            if not state.in_bounds(target) or target in remaining:
                continue
            if state.blocks_pet(target, pet.pet_id):
                continue
            path_color = state.colored_path_colors.get(target)
            if path_color is not None and path_color != pet.color:
                continue
            moves.append(Move.reposition(pet.pet_id, end, start, target))
    return moves


def _box_moves(state: PuzzleState, box: MovableBox) -> List[Move]:
    moves = []
    for dx, dy in DIRECTIONS:
        if not box.axis.allows(dx, dy):
            continue
        shifted = box.translated(dx, dy)
        if any(state.blocks_box(cell, box.box_id) for cell in shifted):
            continue
        moves.append(Move.move_box(box.box_id, box.positions[0], shifted[0]))
    return moves


def generate_setup_moves(state: PuzzleState) -> List[Move]:
    """
    Enumerate every legal non-solving single step.

    Pets that can move contribute one reposition per free neighbour of each
    leading end. Exits are never entered here; that is a solve. Boxes that
    are not deadlocked contribute one push per direction allowed by their axis.

    Returns:
        Moves in deterministic order: pets first (head before tail), then boxes
    """
    moves: List[Move] = []
    for pet in state.pets:
        if not pet.positions or not state.is_pet_movable(pet):
            continue
        moves.extend(_pet_moves(state, pet))

    for box in state.boxes:
        if not box.positions or is_box_deadlocked(state, box):
            continue
        moves.extend(_box_moves(state, box))
    return moves
