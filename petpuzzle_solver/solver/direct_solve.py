"""Greedy search for a pet that can reach its exit right now."""

from typing import List, Optional

from ..moves.move import Move
from ..puzzle.state import PuzzleState
from .pathfinder import find_direct_route


def find_best_direct_solve(state: PuzzleState) -> Optional[List[Move]]:
    """
    Find the cheapest pet -> exit route available in this snapshot.

    Considers every movable pet, every ice-free exit of the pet's current
    color and every end that may lead. The shortest route wins; on equal
    length the first one found is kept.

    Returns:
        Repositions for every intermediate step followed by one solve, or
        None when no pet can reach a matching exit
    """
    best = None  # (pet, end, exit position, route)

    for pet in state.pets:
        if not pet.positions or not state.is_pet_movable(pet):
            continue
        for ex in state.exits:
            if ex.color != pet.color or ex.is_frozen:
                continue
            for end in state.leading_ends(pet):
                route = find_direct_route(state, pet, end, ex.position)
                if route and (best is None or len(route) < len(best[3])):
                    best = (pet, end, ex.position, route)

    if best is None:
        return None

    pet, end, exit_position, route = best
    cells = [pet.end_position(end)] + route
    moves = [
        Move.reposition(pet.pet_id, end, cells[i], cells[i + 1])
        for i in range(len(cells) - 2)
    ]
    moves.append(Move.solve(pet.pet_id, end, cells[-2], exit_position))
    return moves


def has_direct_solve(state: PuzzleState) -> bool:
    return find_best_direct_solve(state) is not None
