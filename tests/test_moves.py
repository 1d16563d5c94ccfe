"""Tests for moves, oscillation detection and move generation."""

from petpuzzle_solver.puzzle.state import (
    BoxAxis, Color, Crate, Exit, ExitModifiers, Grid, KeyLockColor, MovableBox,
    Pet, PetEnd, PetModifiers, PuzzleState,
)
from petpuzzle_solver.moves.move import Move, MoveType, detect_oscillation
from petpuzzle_solver.moves.generator import generate_setup_moves, is_box_deadlocked


def board(*pets, **kwargs):
    """A 3x3 open board."""
    return PuzzleState(grid=Grid.open(3, 3), pets=tuple(pets), **kwargs)


class TestMove:
    """Tests for Move."""

    def test_constructors(self):
        move = Move.solve(1, PetEnd.TAIL, (0, 0), (1, 0))
        assert move.move_type == MoveType.SOLVE
        assert move.end == PetEnd.TAIL
        assert move.is_pet_move
        assert not Move.move_box(2, (0, 0), (0, 1)).is_pet_move

    def test_delta(self):
        assert Move.move_box(1, (2, 2), (2, 1)).delta == (0, -1)

    def test_inverse(self):
        there = Move.reposition(1, PetEnd.HEAD, (0, 0), (1, 0))
        back = Move.reposition(1, PetEnd.HEAD, (1, 0), (0, 0))
        assert there.is_inverse_of(back)
        assert not there.is_inverse_of(Move.reposition(2, PetEnd.HEAD, (1, 0), (0, 0)))
        assert not there.is_inverse_of(Move.reposition(1, PetEnd.TAIL, (1, 0), (0, 0)))
        assert not there.is_inverse_of(there)

    def test_box_inverse(self):
        push = Move.move_box(1, (1, 1), (2, 1))
        assert push.is_inverse_of(Move.move_box(1, (2, 1), (1, 1)))
        assert not push.is_inverse_of(Move.move_box(2, (2, 1), (1, 1)))


class TestOscillation:
    """Tests for detect_oscillation."""

    def test_back_and_forth(self):
        there = Move.reposition(1, PetEnd.HEAD, (0, 0), (1, 0))
        back = Move.reposition(1, PetEnd.HEAD, (1, 0), (0, 0))
        assert detect_oscillation([there, back, there])
        assert not detect_oscillation([there, back])

    def test_only_trailing_moves_count(self):
        there = Move.reposition(1, PetEnd.HEAD, (0, 0), (1, 0))
        back = Move.reposition(1, PetEnd.HEAD, (1, 0), (0, 0))
        onward = Move.reposition(1, PetEnd.HEAD, (1, 0), (2, 0))
        assert not detect_oscillation([there, back, there, onward])

    def test_different_pets(self):
        a = Move.reposition(1, PetEnd.HEAD, (0, 0), (1, 0))
        b = Move.reposition(2, PetEnd.HEAD, (1, 0), (0, 0))
        assert not detect_oscillation([a, b, a])

    def test_window(self):
        there = Move.reposition(1, PetEnd.HEAD, (0, 0), (1, 0))
        back = Move.reposition(1, PetEnd.HEAD, (1, 0), (0, 0))
        assert detect_oscillation([there, back], window=2)
        assert not detect_oscillation([there, back, there], window=4)


class TestPetMoves:
    """Tests for pet move generation."""

    def test_single_cell_pet(self):
        moves = generate_setup_moves(board(Pet(1, ((1, 1),), Color.RED)))
        assert [m.target for m in moves] == [(1, 2), (1, 0), (2, 1), (0, 1)]
        assert all(m.end == PetEnd.HEAD for m in moves)
        assert all(m.move_type == MoveType.REPOSITION for m in moves)

    def test_both_ends_lead(self):
        moves = generate_setup_moves(board(Pet(1, ((1, 1), (1, 0)), Color.RED)))
        ends = {m.end for m in moves}
        assert ends == {PetEnd.HEAD, PetEnd.TAIL}

    def test_no_self_overlap(self):
        pet = Pet(1, ((1, 1), (1, 0), (0, 0)), Color.RED)
        moves = generate_setup_moves(board(pet))
        head_targets = {m.target for m in moves if m.end == PetEnd.HEAD}
        assert (1, 0) not in head_targets
        assert head_targets == {(1, 2), (2, 1), (0, 1)}

    def test_exits_are_not_entered(self):
        state = board(Pet(1, ((1, 1),), Color.RED), exits=(Exit((1, 2), Color.RED),))
        targets = [m.target for m in generate_setup_moves(state)]
        assert (1, 2) not in targets
        assert len(targets) == 3

    def test_other_pets_block(self):
        state = board(Pet(1, ((1, 1),), Color.RED), Pet(2, ((2, 1),), Color.BLUE))
        pet_one = [m.target for m in generate_setup_moves(state) if m.entity_id == 1]
        assert (2, 1) not in pet_one

    def test_immobile_pets(self):
        frozen = Pet(1, ((0, 0),), Color.RED, PetModifiers(ice_count=1))
        locked = Pet(2, ((2, 2),), Color.RED, PetModifiers(lock_color=KeyLockColor.GOLD))
        pinned = Pet(3, ((2, 0),), Color.RED)
        state = board(frozen, locked, pinned, crates=(Crate(1, ((2, 0),), 1),))
        assert generate_setup_moves(state) == []

    def test_single_direction(self):
        pet = Pet(1, ((1, 1), (1, 0)), Color.RED, PetModifiers(is_single_direction=True))
        moves = generate_setup_moves(board(pet))
        assert {m.end for m in moves} == {PetEnd.HEAD}

    def test_pets_before_boxes(self):
        state = board(Pet(1, ((0, 0),), Color.RED), boxes=(MovableBox(1, ((1, 1),)),))
        kinds = [m.move_type for m in generate_setup_moves(state)]
        first_box = kinds.index(MoveType.MOVE_BOX)
        assert all(k == MoveType.REPOSITION for k in kinds[:first_box])
        assert all(k == MoveType.MOVE_BOX for k in kinds[first_box:])


class TestBoxMoves:
    """Tests for box move generation and deadlock detection."""

    def test_free_box(self):
        state = board(boxes=(MovableBox(1, ((1, 1),)),))
        moves = generate_setup_moves(state)
        assert [m.target for m in moves] == [(1, 2), (1, 0), (2, 1), (0, 1)]

    def test_horizontal_box(self):
        state = board(boxes=(MovableBox(1, ((1, 1),), BoxAxis.HORIZONTAL),))
        moves = generate_setup_moves(state)
        assert len(moves) == 2
        assert all(m.delta[1] == 0 for m in moves)

    def test_vertical_box(self):
        state = board(boxes=(MovableBox(1, ((1, 1),), BoxAxis.VERTICAL),))
        moves = generate_setup_moves(state)
        assert len(moves) == 2
        assert all(m.delta[0] == 0 for m in moves)

    def test_box_blocked_by_exit_and_pet(self):
        state = board(
            Pet(1, ((2, 1),), Color.RED, PetModifiers(ice_count=1)),
            exits=(Exit((1, 2), Color.RED, ExitModifiers(ice_count=1)),),
            boxes=(MovableBox(1, ((1, 1),)),),
        )
        assert [m.target for m in generate_setup_moves(state)] == [(1, 0), (0, 1)]

    def test_multi_cell_box_stays_in_bounds(self):
        state = board(boxes=(MovableBox(1, ((0, 1), (1, 1))),))
        targets = [m.target for m in generate_setup_moves(state)]
        # Right is allowed, left would leave the board
        assert targets == [(0, 2), (0, 0), (1, 1)]

    def test_corner_deadlock(self):
        box = MovableBox(1, ((0, 0),))
        state = board(boxes=(box,))
        assert is_box_deadlocked(state, box)
        assert generate_setup_moves(state) == []

    def test_box_on_exit_is_not_deadlocked(self):
        box = MovableBox(1, ((0, 0),))
        state = board(boxes=(box,), exits=(Exit((0, 0), Color.RED),))
        assert not is_box_deadlocked(state, box)

    def test_edge_is_not_a_corner(self):
        box = MovableBox(1, ((1, 0),))
        assert not is_box_deadlocked(board(boxes=(box,)), box)
