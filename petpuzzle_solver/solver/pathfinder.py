"""
Constrained pathfinding for pet bodies.

Two fidelities are provided and both are needed:

- ``find_route`` tracks the whole body along the route (A* over body shapes).
  It backs interactive path preview.
- ``find_direct_route`` is a plain BFS over cells that only knows the body
  shape after the first step of the route. It backs the direct-solve finder,
  where it runs for every pet/exit/end combination of every search node.
  For bodies longer than a couple of segments it can accept routes that a
  full simulation would reject; solver output depends on this, so the two
  are kept separate.
"""

import heapq
import itertools
from collections import deque
from typing import Dict, List, Optional, Tuple

from ..puzzle.state import DIRECTIONS, Cell, Pet, PetEnd, PuzzleState, shift_body

Body = Tuple[Cell, ...]


def _enterable(state: PuzzleState, pet: Pet, cell: Cell, destination: Cell) -> bool:
    """Check bounds, obstacles and colored paths for one cell."""
    if not state.in_bounds(cell) or state.blocks_pet(cell, pet.pet_id, destination):
        return False
    path_color = state.colored_path_colors.get(cell)
    return path_color is None or path_color == pet.color


def _rebuild(parents: Dict[Cell, Optional[Cell]], cell: Cell) -> List[Cell]:
    path = []
    while parents[cell] is not None:
        path.append(cell)
        cell = parents[cell]
    path.reverse()
    return path


def find_route(state: PuzzleState, pet_id: int, end: PetEnd, destination: Cell) -> Optional[List[Cell]]:
    """
    Find a shortest route for one end of a pet, simulating the whole body.

    The search state is the full body; a step is legal when the new leading
    cell is in bounds, not an obstacle (the destination exit excepted), not a
    colored path of another color, and not covered by the rest of the body
    after the shift.

    Args:
        state: The snapshot to route in
        pet_id: The moving pet
        end: The leading end
        destination: Target cell

    Returns:
        Cells visited after the start, ending at ``destination``, or None
    """
    pet = state.find_pet(pet_id)
    if pet is None or not pet.positions:
        return None
    if not _enterable(state, pet, destination, destination):
        return None
    dest_exit = state.find_exit(destination)
    if dest_exit is not None and (dest_exit.color != pet.color or dest_exit.is_frozen):
        return None

    dest_x, dest_y = destination

    def heuristic(cell: Cell) -> int:
        return abs(cell[0] - dest_x) + abs(cell[1] - dest_y)

    start = pet.end_position(end)
    # nodes[i] = (leading cell, body, parent index)
    nodes: List[Tuple[Cell, Body, int]] = [(start, pet.positions, -1)]
    g_scores: Dict[Body, int] = {pet.positions: 0}
    counter = itertools.count()
    open_set = [(heuristic(start), next(counter), 0, 0)]

    while open_set:
        _, _, g, index = heapq.heappop(open_set)
        cell, body, _ = nodes[index]
        if g_scores.get(body, g) < g:
            continue

        if cell == destination:
            path = []
            while index > 0:
                path.append(nodes[index][0])
                index = nodes[index][2]
            path.reverse()
            return path

        for dx, dy in DIRECTIONS:
            neighbor = (cell[0] + dx, cell[1] + dy)
            if not _enterable(state, pet, neighbor, destination):
                continue

            next_body = shift_body(body, end, neighbor)
            rest = next_body[1:] if end == PetEnd.HEAD else next_body[:-1]
            if neighbor in rest:
                continue

            tentative = g + 1
            if g_scores.get(next_body, tentative + 1) <= tentative:
                continue
            g_scores[next_body] = tentative
            nodes.append((neighbor, next_body, index))
            heapq.heappush(
                open_set, (tentative + heuristic(neighbor), next(counter), tentative, len(nodes) - 1)
            )

    return None


def find_direct_route(state: PuzzleState, pet: Pet, end: PetEnd, destination: Cell) -> Optional[List[Cell]]:
    """
    Breadth-first route for one end of a pet with a one-step body model.

    Every partial route is checked against the body as it would be after the
    route's first step only (minus the cell being expanded).

    Returns:
        Cells visited after the start, ending at ``destination``, or None
    """
    start = pet.end_position(end)
    parents: Dict[Cell, Optional[Cell]] = {start: None}
    queue = deque([(start, None)])

    while queue:
        current, first_step = queue.popleft()
        if current == destination:
            return _rebuild(parents, current)

        body = pet.positions if first_step is None else shift_body(pet.positions, end, first_step)
        occupied = set(body)
        occupied.discard(current)

        for dx, dy in DIRECTIONS:
            nxt = (current[0] + dx, current[1] + dy)
            if nxt in parents or nxt in occupied:
                continue
            if not _enterable(state, pet, nxt, destination):
                continue
            parents[nxt] = current
            queue.append((nxt, nxt if first_step is None else first_step))

    return None
