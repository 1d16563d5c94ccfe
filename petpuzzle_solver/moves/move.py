"""Single-step moves."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from ..puzzle.state import Cell, PetEnd


class MoveType(Enum):
    """Kinds of single-step moves."""
    REPOSITION = "reposition"  # A pet end steps onto a free cell
    SOLVE = "solve"            # A pet end steps onto a matching exit
    MOVE_BOX = "move_box"      # A box is pushed by one cell


@dataclass(frozen=True)
class Move:
    """
    One step of a solution.

    For pet moves ``start``/``target`` are the leading end's cells. For box
    moves they are the box's reference (first) cell before and after the push.
    """
    move_type: MoveType
    entity_id: int
    start: Cell
    target: Cell
    end: Optional[PetEnd] = None

    @classmethod
    def reposition(cls, pet_id: int, end: PetEnd, start: Cell, target: Cell) -> "Move":
        return cls(MoveType.REPOSITION, pet_id, start, target, end)

    @classmethod
    def solve(cls, pet_id: int, end: PetEnd, start: Cell, exit_position: Cell) -> "Move":
        return cls(MoveType.SOLVE, pet_id, start, exit_position, end)

    @classmethod
    def move_box(cls, box_id: int, start: Cell, target: Cell) -> "Move":
        return cls(MoveType.MOVE_BOX, box_id, start, target)

    @property
    def is_pet_move(self) -> bool:
        return self.move_type != MoveType.MOVE_BOX

    @property
    def delta(self) -> Tuple[int, int]:
        return (self.target[0] - self.start[0], self.target[1] - self.start[1])

    def is_inverse_of(self, other: "Move") -> bool:
        """Check whether ``other`` exactly undoes this move."""
        if self.move_type != other.move_type:
            return False
        if self.start != other.target or self.target != other.start:
            return False
        if self.is_pet_move:
            return self.entity_id == other.entity_id and self.end == other.end
        return self.entity_id == other.entity_id

    def __repr__(self) -> str:
        who = f"pet {self.entity_id} {self.end.value}" if self.is_pet_move else f"box {self.entity_id}"
        return f"Move({self.move_type.value}, {who}, {self.start}->{self.target})"


def detect_oscillation(moves: Sequence[Move], window: int = 3) -> bool:
    """
    Detect back-and-forth shuffling at the end of a move sequence.

    True when each of the last ``window`` moves exactly reverses the move
    before it (A->B, B->A, A->B for the default window).
    """
    if window < 2 or len(moves) < window:
        return False
    tail = moves[-window:]
    return all(tail[i].is_inverse_of(tail[i + 1]) for i in range(window - 1))
