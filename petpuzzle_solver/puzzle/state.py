"""Core puzzle state data structures.

Every entity is a frozen dataclass and every collection is a tuple, so a
snapshot can never be changed once built. New snapshots are produced with
``dataclasses.replace``; untouched tuples (and the wall bitmap) are shared
between a parent snapshot and its children.

Coordinates are ``(x, y)`` tuples with ``y`` growing upward.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from functools import cached_property
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

import numpy as np

Cell = Tuple[int, int]

# Neighbour order used everywhere a search expands a cell: up, down, right, left
DIRECTIONS: Tuple[Cell, ...] = ((0, 1), (0, -1), (1, 0), (-1, 0))


class Color(Enum):
    """Pet, exit and tile colors, keyed by their level-file code."""
    LIGHT_GREEN = 0
    BLUE = 1
    RED = 2
    LIGHT_BLUE = 3
    INDIGO = 4
    VIOLET = 5
    YELLOW = 6
    ORANGE = 7
    BROWN = 8
    DARK_GREEN = 9
    DARK_BLUE = 10
    CYAN = 11
    PURPLE = 12
    DARK_MARINE = 13
    MOSS_GREEN = 14
    BURGUNDY = 15
    DARK_VIOLET = 16
    LAND_RED = 17
    GREY_BLUE = 18
    GREY_CYAN = 19
    PINK = 20
    UNKNOWN = -1
    HIDDEN = 99

    @classmethod
    def from_code(cls, code: int) -> "Color":
        """Parse a color from its integer code."""
        for color in cls:
            if color.value == code:
                return color
        raise ValueError(f"Unknown color code: {code}")


class KeyLockColor(Enum):
    """Key and lock colors. UNKNOWN means "no key" or "no lock"."""
    UNKNOWN = -1
    SILVER = 0
    GOLD = 1

    @classmethod
    def from_code(cls, code: int) -> "KeyLockColor":
        for color in cls:
            if color.value == code:
                return color
        raise ValueError(f"Unknown key/lock color code: {code}")


class BoxAxis(Enum):
    """Directions a movable box may be pushed along."""
    FREE = 0
    VERTICAL = 1
    HORIZONTAL = 2

    @classmethod
    def from_code(cls, code: int) -> "BoxAxis":
        for axis in cls:
            if axis.value == code:
                return axis
        raise ValueError(f"Unknown box direction code: {code}")

    def allows(self, dx: int, dy: int) -> bool:
        """Check whether a push by (dx, dy) is permitted on this axis."""
        if self == BoxAxis.HORIZONTAL:
            return dy == 0
        if self == BoxAxis.VERTICAL:
            return dx == 0
        return True


class PetEnd(Enum):
    """The end of a pet that leads a movement."""
    HEAD = "head"
    TAIL = "tail"

    @classmethod
    def from_code(cls, code: str) -> "PetEnd":
        for end in cls:
            if end.value == code:
                return end
        raise ValueError(f"Unknown pet end: {code}")


def shift_body(positions: Sequence[Cell], end: PetEnd, target: Cell) -> Tuple[Cell, ...]:
    """
    Move one end of a body onto ``target``; the opposite end vacates its cell.

    Args:
        positions: Body cells ordered head to tail
        end: Which end leads the movement
        target: The cell the leading end moves to

    Returns:
        The new body, still ordered head to tail
    """
    if end == PetEnd.HEAD:
        return (target,) + tuple(positions[:-1])
    return tuple(positions[1:]) + (target,)


def line_cells(start: Cell, end: Cell) -> List[Cell]:
    """All grid cells on the Bresenham line from ``start`` to ``end`` inclusive."""
    cells = []
    x0, y0 = start
    x1, y1 = end
    dx = abs(x1 - x0)
    sx = 1 if x0 < x1 else -1
    dy = -abs(y1 - y0)
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    while True:
        cells.append((x0, y0))
        if x0 == x1 and y0 == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy
    return cells


@dataclass(frozen=True)
class PetModifiers:
    """Per-pet modifier bundle."""
    layer_colors: Tuple[Color, ...] = ()
    ice_count: int = 0
    hidden_count: int = 0
    count: int = 0  # Hit counter; 0 behaves like a single hit
    key_color: KeyLockColor = KeyLockColor.UNKNOWN
    lock_color: KeyLockColor = KeyLockColor.UNKNOWN
    has_scissor: bool = False
    is_single_direction: bool = False
    time_explode: int = 0  # Bomb timer, not simulated

    @property
    def is_locked(self) -> bool:
        return self.lock_color != KeyLockColor.UNKNOWN


@dataclass(frozen=True)
class Pet:
    """A multi-segment body that has to reach an exit of its color."""
    pet_id: int
    positions: Tuple[Cell, ...]  # Head first
    color: Color
    special: PetModifiers = field(default_factory=PetModifiers)

    @property
    def head(self) -> Cell:
        return self.positions[0]

    @property
    def tail(self) -> Cell:
        return self.positions[-1]

    def end_position(self, end: PetEnd) -> Cell:
        """Get the cell of the given end."""
        return self.head if end == PetEnd.HEAD else self.tail

    def presents_color(self, color: Color) -> bool:
        """Check if this pet has, or will later have, the given color."""
        return self.color == color or color in self.special.layer_colors


@dataclass(frozen=True)
class ExitModifiers:
    """Per-exit modifier bundle."""
    count: int = 0  # Uses left; 0 behaves like a single use
    ice_count: int = 0
    layer_colors: Tuple[Color, ...] = ()
    is_permanent: bool = False


@dataclass(frozen=True)
class Exit:
    """A goal tile accepting pets of one color."""
    position: Cell
    color: Color
    special: ExitModifiers = field(default_factory=ExitModifiers)

    @property
    def is_frozen(self) -> bool:
        return self.special.ice_count > 0


@dataclass(frozen=True)
class StoneWall:
    """A wall that breaks after a number of solves."""
    position: Cell
    count: int
    ice_count: int = 0


@dataclass(frozen=True)
class ColoredPath:
    """A tile only pets of the same color may occupy."""
    position: Cell
    color: Color


@dataclass(frozen=True)
class ColorWall:
    """A wall that disappears once its color can no longer appear on a pet."""
    position: Cell
    color: Color


@dataclass(frozen=True)
class Crate:
    """A cover that pins the pets under it until enough solves happen."""
    crate_id: int
    positions: Tuple[Cell, ...]
    required_solves: int


@dataclass(frozen=True)
class MovableBox:
    """A rigid block that can be pushed one cell at a time."""
    box_id: int
    positions: Tuple[Cell, ...]
    axis: BoxAxis = BoxAxis.FREE

    def translated(self, dx: int, dy: int) -> Tuple[Cell, ...]:
        return tuple((x + dx, y + dy) for x, y in self.positions)


@dataclass(frozen=True)
class Obstacle:
    """A static group of blocked cells."""
    obstacle_id: int
    positions: Tuple[Cell, ...]


@dataclass(frozen=True)
class TreeRoot:
    """A root growing from its pole; loses one segment per solve."""
    root_id: int
    position: Cell
    direction: Cell
    length: int

    @property
    def segments(self) -> Tuple[Cell, ...]:
        """Cells covered by the root, pole included."""
        (x, y), (dx, dy) = self.position, self.direction
        return tuple((x + i * dx, y + i * dy) for i in range(self.length + 1))


@dataclass(frozen=True)
class Ribbon:
    """A cuttable ribbon stretched between up to two anchors."""
    anchors: Tuple[Cell, ...] = ()

    @property
    def cells(self) -> Tuple[Cell, ...]:
        if len(self.anchors) > 1:
            return tuple(line_cells(self.anchors[0], self.anchors[1]))
        return tuple(self.anchors)


@dataclass(frozen=True, eq=False)
class Grid:
    """Board dimensions and the wall bitmap (indexed ``[y, x]``, True = wall)."""
    width: int
    height: int
    walls: np.ndarray

    def __post_init__(self):
        walls = np.array(self.walls, dtype=bool)
        if walls.shape != (self.height, self.width):
            raise ValueError(
                f"Wall bitmap shape {walls.shape} does not match "
                f"{self.width}x{self.height} grid"
            )
        walls.setflags(write=False)
        object.__setattr__(self, "walls", walls)

    @classmethod
    def open(cls, width: int, height: int) -> "Grid":
        """Create a grid without walls."""
        return cls(width, height, np.zeros((height, width), dtype=bool))

    @classmethod
    def from_rows(cls, width: int, height: int, rows: Sequence[str]) -> "Grid":
        """
        Build a grid from level-file rows.

        Rows are listed top to bottom as comma separated cells, ``"0"`` marking
        a wall. Missing rows or cells are open.
        """
        walls = np.zeros((height, width), dtype=bool)
        for r, row in enumerate(rows[:height]):
            y = height - 1 - r
            for x, cell in enumerate(row.split(",")[:width]):
                if cell.strip() == "0":
                    walls[y, x] = True
        return cls(width, height, walls)

    def in_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.width and 0 <= y < self.height

    def is_wall(self, cell: Cell) -> bool:
        x, y = cell
        return bool(self.walls[y, x])

    @cached_property
    def wall_cells(self) -> FrozenSet[Cell]:
        ys, xs = np.nonzero(self.walls)
        return frozenset(zip(xs.tolist(), ys.tolist()))


@dataclass(frozen=True)
class PuzzleState:
    """One immutable puzzle configuration."""
    grid: Grid
    pets: Tuple[Pet, ...] = ()
    exits: Tuple[Exit, ...] = ()
    stone_walls: Tuple[StoneWall, ...] = ()
    colored_paths: Tuple[ColoredPath, ...] = ()
    color_walls: Tuple[ColorWall, ...] = ()
    crates: Tuple[Crate, ...] = ()
    boxes: Tuple[MovableBox, ...] = ()
    obstacles: Tuple[Obstacle, ...] = ()
    tree_roots: Tuple[TreeRoot, ...] = ()
    ribbon: Ribbon = field(default_factory=Ribbon)

    def evolve(self, **changes) -> "PuzzleState":
        """Return a new snapshot with the given fields replaced."""
        return replace(self, **changes)

    @property
    def is_cleared(self) -> bool:
        return len(self.pets) == 0

    def in_bounds(self, cell: Cell) -> bool:
        return self.grid.in_bounds(cell)

    # Lookups

    def find_pet(self, pet_id: int) -> Optional[Pet]:
        for pet in self.pets:
            if pet.pet_id == pet_id:
                return pet
        return None

    def find_exit(self, position: Cell) -> Optional[Exit]:
        return self.exit_positions.get(position)

    def find_box(self, box_id: int) -> Optional[MovableBox]:
        for box in self.boxes:
            if box.box_id == box_id:
                return box
        return None

    # Occupancy views. Snapshots never change, so each view is built once.

    @cached_property
    def static_blocked(self) -> FrozenSet[Cell]:
        """Cells no pet or box may enter, regardless of who is moving."""
        cells = set(self.grid.wall_cells)
        cells.update(s.position for s in self.stone_walls)
        cells.update(w.position for w in self.color_walls)
        for crate in self.crates:
            cells.update(crate.positions)
        for obstacle in self.obstacles:
            cells.update(obstacle.positions)
        for root in self.tree_roots:
            cells.update(root.segments)
        cells.update(self.ribbon.cells)
        return frozenset(cells)

    @cached_property
    def pet_cells(self) -> Dict[Cell, int]:
        """Map of occupied cell -> pet id."""
        return {pos: pet.pet_id for pet in self.pets for pos in pet.positions}

    @cached_property
    def box_cells(self) -> Dict[Cell, int]:
        """Map of occupied cell -> box id."""
        return {pos: box.box_id for box in self.boxes for pos in box.positions}

    @cached_property
    def exit_positions(self) -> Dict[Cell, Exit]:
        return {e.position: e for e in self.exits}

    @cached_property
    def colored_path_colors(self) -> Dict[Cell, Color]:
        return {p.position: p.color for p in self.colored_paths}

    @cached_property
    def pinned_cells(self) -> FrozenSet[Cell]:
        """Cells covered by crates that still require solves."""
        return frozenset(
            pos for crate in self.crates if crate.required_solves > 0
            for pos in crate.positions
        )

    # Movement rules

    def is_pet_movable(self, pet: Pet) -> bool:
        """A pet moves only when it is not frozen, not locked and not under a crate."""
        if pet.special.ice_count > 0:
            return False
        if pet.special.is_locked:
            return False
        pinned = self.pinned_cells
        return not any(pos in pinned for pos in pet.positions)

    def leading_ends(self, pet: Pet) -> Tuple[PetEnd, ...]:
        """Ends that may lead a movement of this pet."""
        if pet.special.is_single_direction or len(pet.positions) <= 1:
            return (PetEnd.HEAD,)
        return (PetEnd.HEAD, PetEnd.TAIL)

    def blocks_pet(self, cell: Cell, pet_id: int, destination: Optional[Cell] = None) -> bool:
        """
        Check whether ``cell`` is an obstacle for the given pet.

        The pet's own cells are not obstacles; body overlap is checked by the
        caller. Every exit except ``destination`` counts as an obstacle.
        Colored paths are not considered here.
        """
        if cell in self.static_blocked or cell in self.box_cells:
            return True
        owner = self.pet_cells.get(cell)
        if owner is not None and owner != pet_id:
            return True
        return cell in self.exit_positions and cell != destination

    def blocks_box(self, cell: Cell, box_id: int) -> bool:
        """Check whether ``cell`` is unavailable to the given box."""
        if not self.in_bounds(cell):
            return True
        if cell in self.static_blocked or cell in self.pet_cells:
            return True
        if cell in self.exit_positions or cell in self.colored_path_colors:
            return True
        owner = self.box_cells.get(cell)
        return owner is not None and owner != box_id

    def __repr__(self) -> str:
        return (
            f"PuzzleState({self.grid.width}x{self.grid.height}, "
            f"pets={len(self.pets)}, exits={len(self.exits)}, "
            f"boxes={len(self.boxes)})"
        )
