"""Move record encoding, parsing and replay.

Records are the external solution format:

- ``PET:<petId>:<head|tail>:<x0,y0>x1,y1>...`` - a run of steps of one pet
  led by one end, starting at the end's cell before the run.
- ``BOX:<boxId>:<x,y;x,y...>><x,y;x,y...>`` - one box push, cells before and
  after.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from ..puzzle.state import Cell, PetEnd, PuzzleState
from .move import Move, MoveType
from .transitions import apply_move


@dataclass(frozen=True)
class MoveRecord:
    """A decoded move record."""
    kind: str  # "PET" or "BOX"
    entity_id: int
    cells: Tuple[Cell, ...]  # Pet run: visited cells. Box: cells before the push
    end: Optional[PetEnd] = None
    box_after: Tuple[Cell, ...] = ()

    def to_code(self) -> str:
        if self.kind == "BOX":
            return (
                f"BOX:{self.entity_id}:{_encode_cells(self.cells, ';')}"
                f">{_encode_cells(self.box_after, ';')}"
            )
        return f"PET:{self.entity_id}:{self.end.value}:{_encode_cells(self.cells, '>')}"


def _encode_cells(cells: Sequence[Cell], sep: str) -> str:
    return sep.join(f"{x},{y}" for x, y in cells)


def _parse_cell(text: str) -> Cell:
    parts = text.split(",")
    if len(parts) != 2:
        raise ValueError(f"Invalid cell in record: {text!r}")
    try:
        return (int(parts[0]), int(parts[1]))
    except ValueError:
        raise ValueError(f"Invalid cell in record: {text!r}")


def parse_record(text: str) -> MoveRecord:
    """
    Parse one move record.

    Raises:
        ValueError: If the record is malformed
    """
    text = text.strip()
    kind, _, rest = text.partition(":")

    if kind == "PET":
        parts = rest.split(":", 2)
        if len(parts) != 3:
            raise ValueError(f"Invalid pet record: {text!r}")
        pet_id, end, path = parts
        cells = tuple(_parse_cell(c) for c in path.split(">"))
        if len(cells) < 2:
            raise ValueError(f"Pet record needs at least two cells: {text!r}")
        return MoveRecord("PET", _parse_id(pet_id, text), cells, end=PetEnd.from_code(end))

    if kind == "BOX":
        box_id, sep, path = rest.partition(":")
        before, arrow, after = path.partition(">")
        if not sep or not arrow:
            raise ValueError(f"Invalid box record: {text!r}")
        cells_before = tuple(_parse_cell(c) for c in before.split(";"))
        cells_after = tuple(_parse_cell(c) for c in after.split(";"))
        if len(cells_before) != len(cells_after):
            raise ValueError(f"Box record changes the box size: {text!r}")
        return MoveRecord("BOX", _parse_id(box_id, text), cells_before, box_after=cells_after)

    raise ValueError(f"Unknown record type: {text!r}")


def _parse_id(raw: str, text: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"Invalid id in record: {text!r}")


def format_solution(initial_state: PuzzleState, moves: Iterable[Move]) -> List[str]:
    """
    Encode per-step moves as records.

    Consecutive steps of the same pet and end are merged into one run. A
    different pet or end, a step that does not continue from the run's last
    cell, or any box push starts a new record.
    """
    records: List[str] = []
    state = initial_state
    run: Optional[MoveRecord] = None

    def flush():
        nonlocal run
        if run is not None and len(run.cells) > 1:
            records.append(run.to_code())
        run = None

    for move in moves:
        if move.move_type == MoveType.MOVE_BOX:
            flush()
            box = state.find_box(move.entity_id)
            if box is not None:
                dx, dy = move.delta
                records.append(
                    MoveRecord("BOX", box.box_id, box.positions, box_after=box.translated(dx, dy)).to_code()
                )
        else:
            # A morphed pet restarts from its old cells, so its run breaks there too
            if run is not None and (
                run.entity_id != move.entity_id or run.end != move.end
                or run.cells[-1] != move.start
            ):
                flush()
            if run is None:
                run = MoveRecord("PET", move.entity_id, (move.start, move.target), end=move.end)
            else:
                run = MoveRecord("PET", run.entity_id, run.cells + (move.target,), end=run.end)
        state = apply_move(state, move)

    flush()
    return records


def records_to_moves(initial_state: PuzzleState, records: Iterable[str]) -> List[Move]:
    """
    Expand records back into per-step moves.

    Replays against ``initial_state`` so each step is checked against the
    current position of the pet or box; a step onto an exit is a solve.

    Raises:
        ValueError: If a record is malformed or does not fit the state
    """
    state = initial_state
    moves: List[Move] = []

    for text in records:
        record = parse_record(text)

        if record.kind == "BOX":
            box = state.find_box(record.entity_id)
            if box is None or box.positions != record.cells:
                raise ValueError(f"Box record does not match the board: {text!r}")
            move = Move.move_box(box.box_id, record.cells[0], record.box_after[0])
            moves.append(move)
            state = apply_move(state, move)
            continue

        for start, target in zip(record.cells, record.cells[1:]):
            pet = state.find_pet(record.entity_id)
            if pet is None or pet.end_position(record.end) != start:
                raise ValueError(f"Pet record does not match the board: {text!r}")
            if target in state.exit_positions:
                move = Move.solve(pet.pet_id, record.end, start, target)
            else:
                move = Move.reposition(pet.pet_id, record.end, start, target)
            moves.append(move)
            state = apply_move(state, move)

    return moves


def replay_records(initial_state: PuzzleState, records: Iterable[str]) -> PuzzleState:
    """Apply records to a snapshot and return the final snapshot."""
    state = initial_state
    for move in records_to_moves(initial_state, records):
        state = apply_move(state, move)
    return state
