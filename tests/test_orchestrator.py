"""End-to-end tests for the staged solver."""

import asyncio

from petpuzzle_solver.puzzle.state import (
    Color, ColorWall, Exit, ExitModifiers, Grid, KeyLockColor, MovableBox, Pet, PetModifiers,
    PuzzleState,
)
from petpuzzle_solver.puzzle.loader import PuzzleLoader
from petpuzzle_solver.moves.move import detect_oscillation
from petpuzzle_solver.moves.records import replay_records
from petpuzzle_solver.solver.config import SolverConfig
from petpuzzle_solver.solver.orchestrator import PuzzleSolver, solve_level, solve_level_async


def corridor():
    """A single pet three cells left of its exit."""
    return PuzzleState(
        grid=Grid.open(4, 1),
        pets=(Pet(1, ((0, 0),), Color.RED),),
        exits=(Exit((3, 0), Color.RED),),
    )


def pocket_level():
    """Two pets blocking each other in a corridor with a pocket above pet 2."""
    return PuzzleState(
        grid=Grid.from_rows(4, 2, ["0,0,1,0", "1,1,1,1"]),
        pets=(Pet(1, ((1, 0),), Color.BLUE), Pet(2, ((2, 0),), Color.RED)),
        exits=(Exit((0, 0), Color.RED), Exit((3, 0), Color.BLUE)),
    )


POCKET_SOLUTION = [
    "PET:2:head:2,0>2,1",
    "PET:1:head:1,0>2,0>3,0",
    "PET:2:head:2,1>2,0>1,0>0,0",
]


class TestSolve:
    """Tests for PuzzleSolver.solve."""

    def test_corridor(self):
        result = solve_level(corridor())
        assert result.success
        assert result.records == ["PET:1:head:0,0>1,0>2,0>3,0"]
        assert len(result.moves) == 3
        assert result.stats.direct_solves == 1
        assert result.stats.astar_searches == 0

    def test_setup_then_solves(self):
        result = solve_level(pocket_level())
        assert result.success
        assert result.records == POCKET_SOLUTION
        assert result.stats.astar_searches == 1
        assert result.stats.direct_solves == 2

    def test_replay_clears_board(self):
        state = pocket_level()
        result = solve_level(state)
        assert replay_records(state, result.records).is_cleared

    def test_no_back_and_forth_in_solution(self):
        moves = solve_level(pocket_level()).moves
        assert not any(detect_oscillation(moves[:i]) for i in range(1, len(moves) + 1))

    def test_ida_fallback(self):
        result = solve_level(pocket_level(), config=SolverConfig(max_astar_nodes=1))
        assert result.success
        assert result.records == POCKET_SOLUTION
        assert result.stats.ida_searches == 1

    def test_shared_color_wall(self):
        state = PuzzleState(
            grid=Grid.open(3, 2),
            pets=(
                Pet(1, ((0, 1),), Color.RED),
                Pet(2, ((2, 1),), Color.RED),
                Pet(3, ((0, 0),), Color.BLUE),
            ),
            exits=(
                Exit((1, 1), Color.RED, ExitModifiers(count=2)),
                Exit((2, 0), Color.BLUE),
            ),
            color_walls=(ColorWall((1, 0), Color.RED),),
        )
        result = solve_level(state)
        assert result.success
        # The blue pet only gets through once both red pets are gone
        assert result.records == [
            "PET:1:head:0,1>1,1",
            "PET:2:head:2,1>1,1",
            "PET:3:head:0,0>1,0>2,0",
        ]

    def test_layered_pet_restarts_run(self):
        state = PuzzleState(
            grid=Grid.open(5, 1),
            pets=(Pet(1, ((0, 0),), Color.RED, PetModifiers(layer_colors=(Color.BLUE,))),),
            exits=(Exit((2, 0), Color.RED), Exit((4, 0), Color.BLUE)),
        )
        result = solve_level(state)
        assert result.success
        # After turning blue the pet is back on (1, 0), not on the used exit
        assert result.records == [
            "PET:1:head:0,0>1,0>2,0",
            "PET:1:head:1,0>2,0>3,0>4,0",
        ]
        assert result.stats.direct_solves == 2
        assert replay_records(state, result.records).is_cleared

    def test_box_push_setup(self):
        # The box sits in the corridor; the only way on is to push it up the shaft
        state = PuzzleState(
            grid=Grid.from_rows(4, 3, ["0,0,1,0", "0,0,1,0", "1,1,1,1"]),
            pets=(Pet(1, ((0, 0),), Color.RED),),
            exits=(Exit((3, 0), Color.RED),),
            boxes=(MovableBox(5, ((2, 0),)),),
        )
        result = solve_level(state)
        assert result.success
        assert result.records == [
            "BOX:5:2,0>2,1",
            "PET:1:head:0,0>1,0>2,0>3,0",
        ]
        assert result.stats.astar_searches == 1
        assert replay_records(state, result.records).is_cleared

    def test_empty_board(self):
        result = solve_level(PuzzleState(grid=Grid.open(2, 2)))
        assert result.success
        assert result.records == []


class TestFailures:
    """Tests for unsolvable and malformed input."""

    def test_gold_lock_without_key(self):
        state = PuzzleState(
            grid=Grid.open(3, 1),
            pets=(Pet(1, ((0, 0),), Color.RED, PetModifiers(lock_color=KeyLockColor.GOLD)),),
            exits=(Exit((2, 0), Color.RED),),
        )
        result = solve_level(state)
        assert not result.success
        assert "exhausted" in result.error
        assert result.stats.astar_searches == 1
        assert result.stats.ida_searches == 1
        assert "No solution found" in str(result)

    def test_invalid_snapshot(self):
        state = PuzzleState(grid=Grid.open(2, 2), pets=(Pet(1, ((5, 5),), Color.RED),))
        result = solve_level(state)
        assert not result.success
        assert result.error.startswith("Invalid puzzle")

    def test_stage_limit(self):
        result = solve_level(pocket_level(), config=SolverConfig(max_stages=1))
        assert not result.success
        assert "1 stages" in result.error

    def test_cancelled(self):
        result = solve_level(corridor(), should_cancel=lambda: True)
        assert not result.success
        assert result.stats.cancelled
        assert result.records == []


class TestHints:
    """Tests for pre-recorded solutions."""

    def test_hint_returned_verbatim(self):
        hint = ["PET:1:head:0,0>1,0>2,0>3,0"]
        result = PuzzleSolver().solve(corridor(), hint=hint)
        assert result.success
        assert result.used_hint
        assert result.records == hint
        assert result.stats.stages == 0

    def test_empty_hint_is_ignored(self):
        result = PuzzleSolver().solve(corridor(), hint=[])
        assert result.success
        assert not result.used_hint

    def test_hint_from_level(self):
        level = {
            "gridData": {"width": 4, "height": 1},
            "pets": [{"id": 1, "color": 2, "positions": [{"x": 0, "y": 0}]}],
            "exits": [{"position": {"x": 3, "y": 0}, "color": 2}],
            "solution": ["PET:1:head:0,0>1,0>2,0>3,0"],
        }
        state = PuzzleLoader.from_dict(level)
        result = solve_level(state, hint=PuzzleLoader.hint_from_dict(level))
        assert result.used_hint
        assert replay_records(state, result.records).is_cleared


class TestAsync:
    """Tests for the asynchronous entry points."""

    def test_solve_async(self):
        result = asyncio.run(solve_level_async(pocket_level()))
        assert result.success
        assert result.records == POCKET_SOLUTION

    def test_async_cancel(self):
        result = asyncio.run(PuzzleSolver().solve_async(corridor(), should_cancel=lambda: True))
        assert result.stats.cancelled


class TestVerbose:
    """Tests for progress output."""

    def test_stage_lines(self, capsys):
        solve_level(corridor(), config=SolverConfig(verbose=True))
        out = capsys.readouterr().out
        assert "[Stage 1] Direct solve found" in out

    def test_quiet_by_default(self, capsys):
        solve_level(corridor())
        assert capsys.readouterr().out == ""
