"""Tests for direct solves and the setup searches."""

import pytest
from petpuzzle_solver.puzzle.state import (
    Color, Exit, ExitModifiers, Grid, KeyLockColor, MovableBox, Pet, PetEnd, PetModifiers,
    PuzzleState,
)
from petpuzzle_solver.moves.move import Move
from petpuzzle_solver.moves.generator import generate_setup_moves
from petpuzzle_solver.solver.astar import expand_setup_moves, find_setup_sequence
from petpuzzle_solver.solver.config import DEFAULT_CONFIG, SolverConfig
from petpuzzle_solver.solver.core_types import CancelToken, SolverCancelled
from petpuzzle_solver.solver.direct_solve import find_best_direct_solve, has_direct_solve
from petpuzzle_solver.solver.ida_star import ida_star


def pocket_level():
    """
    Two pets in a corridor blocking each other, with one side pocket.

    Row y=0: RED exit, BLUE pet 1, RED pet 2, BLUE exit. The only open cell
    of row y=1 is the pocket above pet 2.
    """
    return PuzzleState(
        grid=Grid.from_rows(4, 2, ["0,0,1,0", "1,1,1,1"]),
        pets=(Pet(1, ((1, 0),), Color.BLUE), Pet(2, ((2, 0),), Color.RED)),
        exits=(Exit((0, 0), Color.RED), Exit((3, 0), Color.BLUE)),
    )


def step_into_pocket():
    return Move.reposition(2, PetEnd.HEAD, (2, 0), (2, 1))


class TestDirectSolve:
    """Tests for find_best_direct_solve."""

    def test_corridor(self):
        state = PuzzleState(
            grid=Grid.open(4, 1),
            pets=(Pet(1, ((0, 0),), Color.RED),),
            exits=(Exit((3, 0), Color.RED),),
        )
        assert find_best_direct_solve(state) == [
            Move.reposition(1, PetEnd.HEAD, (0, 0), (1, 0)),
            Move.reposition(1, PetEnd.HEAD, (1, 0), (2, 0)),
            Move.solve(1, PetEnd.HEAD, (2, 0), (3, 0)),
        ]

    def test_shortest_route_wins(self):
        state = PuzzleState(
            grid=Grid.open(5, 2),
            pets=(Pet(1, ((0, 0),), Color.RED), Pet(2, ((3, 1),), Color.BLUE)),
            exits=(Exit((4, 0), Color.RED), Exit((4, 1), Color.BLUE)),
        )
        assert find_best_direct_solve(state) == [Move.solve(2, PetEnd.HEAD, (3, 1), (4, 1))]

    def test_frozen_exit_ignored(self):
        state = PuzzleState(
            grid=Grid.open(3, 1),
            pets=(Pet(1, ((0, 0),), Color.RED),),
            exits=(Exit((2, 0), Color.RED, ExitModifiers(ice_count=1)),),
        )
        assert find_best_direct_solve(state) is None

    def test_locked_pet_cannot_solve(self):
        state = PuzzleState(
            grid=Grid.open(3, 1),
            pets=(Pet(1, ((0, 0),), Color.RED, PetModifiers(lock_color=KeyLockColor.GOLD)),),
            exits=(Exit((2, 0), Color.RED),),
        )
        assert not has_direct_solve(state)

    def test_blocked_pets(self):
        assert not has_direct_solve(pocket_level())


class TestAStar:
    """Tests for find_setup_sequence."""

    def test_finds_setup(self):
        result = find_setup_sequence(pocket_level())
        assert result.found
        assert result.moves == [step_into_pocket()]
        assert result.stats.nodes_expanded == 2

    def test_direct_root_needs_no_setup(self):
        state = pocket_level().evolve(exits=(Exit((2, 1), Color.RED),))
        assert find_setup_sequence(state).moves == []

    def test_node_budget(self):
        config = SolverConfig(max_astar_nodes=1)
        result = find_setup_sequence(pocket_level(), config)
        assert result.moves is None
        assert result.stats.nodes_expanded == 1

    def test_no_moves(self):
        state = PuzzleState(
            grid=Grid.open(3, 1),
            pets=(Pet(1, ((0, 0),), Color.RED, PetModifiers(lock_color=KeyLockColor.GOLD)),),
            exits=(Exit((2, 0), Color.RED),),
        )
        assert find_setup_sequence(state).moves is None

    def test_cancelled(self):
        token = CancelToken(should_cancel=lambda: True, interval=1)
        with pytest.raises(SolverCancelled):
            find_setup_sequence(pocket_level(), DEFAULT_CONFIG, token)

    def test_exhausts_small_board(self):
        # No exit: every reachable placement is visited once, then the search gives up
        state = PuzzleState(grid=Grid.open(3, 1), pets=(Pet(1, ((1, 0),), Color.RED),))
        result = find_setup_sequence(state, SolverConfig(max_astar_nodes=50))
        assert result.moves is None
        assert result.stats.nodes_expanded <= 50


class TestIDAStar:
    """Tests for the IDA* fallback."""

    def test_finds_setup(self):
        result = ida_star(pocket_level())
        assert result.moves == [step_into_pocket()]
        assert result.stats.iterations == 2

    def test_direct_root_gives_empty_sequence(self):
        state = PuzzleState(
            grid=Grid.open(3, 1),
            pets=(Pet(1, ((0, 0),), Color.RED),),
            exits=(Exit((2, 0), Color.RED),),
        )
        result = ida_star(state)
        assert result.found
        assert result.moves == []

    def test_exhausted(self):
        state = PuzzleState(
            grid=Grid.open(3, 1),
            pets=(Pet(1, ((0, 0),), Color.RED, PetModifiers(lock_color=KeyLockColor.GOLD)),),
            exits=(Exit((2, 0), Color.RED),),
        )
        result = ida_star(state)
        assert result.moves is None
        assert not result.found

    def test_bound_limit(self):
        config = SolverConfig(ida_max_bound=3)
        # The root heuristic is 4, above the allowed bound
        assert ida_star(pocket_level(), config).moves is None

    def test_cancelled(self):
        token = CancelToken(should_cancel=lambda: True, interval=1)
        with pytest.raises(SolverCancelled):
            ida_star(pocket_level(), DEFAULT_CONFIG, token)


class TestExpandSetupMoves:
    """Tests for the child filter shared by A* and IDA*."""

    def lone_pet(self):
        return PuzzleState(grid=Grid.open(3, 1), pets=(Pet(1, ((1, 0),), Color.RED),))

    def test_repeat_after_reversal_is_dropped(self):
        there = Move.reposition(1, PetEnd.HEAD, (1, 0), (2, 0))
        back = Move.reposition(1, PetEnd.HEAD, (2, 0), (1, 0))
        children = expand_setup_moves(self.lone_pet(), [there, back], window=3)
        assert [move for move, _ in children] == [Move.reposition(1, PetEnd.HEAD, (1, 0), (0, 0))]

    def test_single_reversal_is_allowed(self):
        back = Move.reposition(1, PetEnd.HEAD, (2, 0), (1, 0))
        children = expand_setup_moves(self.lone_pet(), [back], window=3)
        assert Move.reposition(1, PetEnd.HEAD, (1, 0), (2, 0)) in [move for move, _ in children]
        assert len(children) == 2

    def test_children_are_applied(self):
        children = expand_setup_moves(self.lone_pet(), [], window=3)
        for move, child in children:
            assert child.pets[0].head == move.target

    def test_cornered_box_is_dropped(self):
        state = PuzzleState(grid=Grid.open(3, 1), boxes=(MovableBox(1, ((1, 0),)),))
        assert len(generate_setup_moves(state)) == 2
        assert expand_setup_moves(state, [], window=3) == []


class TestCancelToken:
    """Tests for CancelToken."""

    def test_interval(self):
        calls = []

        def should_cancel():
            calls.append(1)
            return False

        token = CancelToken(should_cancel=should_cancel, interval=3)
        for _ in range(7):
            token.tick()
        assert len(calls) == 2

    def test_no_limits(self):
        token = CancelToken()
        assert not token.is_cancelled()
        token.check()
