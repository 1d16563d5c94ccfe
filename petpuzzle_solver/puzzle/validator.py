"""Sanity checks run on a snapshot before it is searched."""

from typing import Dict, FrozenSet, List, Set, Tuple

from .state import Cell, PuzzleState


class StateValidator:
    """Validator for puzzle snapshots."""

    @classmethod
    def validate(cls, state: PuzzleState) -> Tuple[bool, List[str]]:
        """
        Check a snapshot for malformed entities.

        Flags pets without cells, self-intersecting or out-of-bounds bodies,
        duplicate pet ids, duplicate or out-of-bounds boxes, and pets or boxes
        sharing a cell with each other or with a wall or obstacle.

        Returns:
            A tuple of (is_valid, list of error messages)
        """
        errors: List[str] = []

        pet_ids: Set[int] = set()
        for pet in state.pets:
            if pet.pet_id in pet_ids:
                errors.append(f"Duplicate pet id: {pet.pet_id}")
            pet_ids.add(pet.pet_id)

            if not pet.positions:
                errors.append(f"Pet {pet.pet_id} has no body cells")
                continue
            if len(set(pet.positions)) != len(pet.positions):
                errors.append(f"Pet {pet.pet_id} body intersects itself")
            errors.extend(
                f"Pet {pet.pet_id} cell {cell} is out of bounds"
                for cell in cls._out_of_bounds(state, pet.positions)
            )

        box_ids: Set[int] = set()
        for box in state.boxes:
            if box.box_id in box_ids:
                errors.append(f"Duplicate box id: {box.box_id}")
            box_ids.add(box.box_id)

            if not box.positions:
                errors.append(f"Box {box.box_id} has no cells")
            errors.extend(
                f"Box {box.box_id} cell {cell} is out of bounds"
                for cell in cls._out_of_bounds(state, box.positions)
            )

        errors.extend(cls._overlaps(state))
        return len(errors) == 0, errors

    @staticmethod
    def _out_of_bounds(state: PuzzleState, cells) -> List[Cell]:
        return [cell for cell in cells if not state.in_bounds(cell)]

    @staticmethod
    def _solid_cells(state: PuzzleState) -> FrozenSet[Cell]:
        """Static cells no pet or box may start on. Crates are left out: pets wait under them."""
        cells = set(state.grid.wall_cells)
        cells.update(s.position for s in state.stone_walls)
        cells.update(w.position for w in state.color_walls)
        for obstacle in state.obstacles:
            cells.update(obstacle.positions)
        for root in state.tree_roots:
            cells.update(root.segments)
        return frozenset(cells)

    @classmethod
    def _overlaps(cls, state: PuzzleState) -> List[str]:
        errors: List[str] = []
        solid = cls._solid_cells(state)
        owners: Dict[Cell, str] = {}

        entities = [(f"Pet {pet.pet_id}", pet.positions) for pet in state.pets]
        entities += [(f"Box {box.box_id}", box.positions) for box in state.boxes]
        for name, cells in entities:
            for cell in dict.fromkeys(cells):
                if cell in solid:
                    errors.append(f"{name} cell {cell} is inside a wall or obstacle")
                other = owners.get(cell)
                if other is not None and other != name:
                    errors.append(f"{name} overlaps {other} at {cell}")
                owners.setdefault(cell, name)
        return errors
