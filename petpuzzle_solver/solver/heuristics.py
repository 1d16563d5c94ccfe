"""Heuristic scoring of snapshots."""

from ..puzzle.state import PuzzleState

MISSING_EXIT_PENALTY = 1000


def heuristic_distance(state: PuzzleState, missing_exit_penalty: int = MISSING_EXIT_PENALTY) -> int:
    """
    Sum over pets of the Manhattan distance from the head to the nearest exit
    of the pet's current color.

    Pets without any exit of their color add ``missing_exit_penalty``. This
    ignores walls and bodies, so it ranks nodes rather than bounding them;
    A* and IDA* built on it are not guaranteed to find shortest sequences.
    """
    total = 0
    for pet in state.pets:
        hx, hy = pet.head
        distances = [
            abs(e.position[0] - hx) + abs(e.position[1] - hy)
            for e in state.exits if e.color == pet.color
        ]
        total += min(distances) if distances else missing_exit_penalty
    return total
