#!/usr/bin/env python3
"""
Pet Puzzle Solver - Main Entry Point

A tool for solving pet/exit tile puzzles from level files.
"""

import argparse
import sys


def run_solve(args):
    """Solve a level and print its move records."""
    from petpuzzle_solver.puzzle.loader import PuzzleLoader
    from petpuzzle_solver.solver.config import DEFAULT_CONFIG
    from petpuzzle_solver.solver.orchestrator import PuzzleSolver

    try:
        state = PuzzleLoader.from_json(args.level)
        hint = PuzzleLoader.hint_from_json(args.level) if args.use_hint else None
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    config = DEFAULT_CONFIG.with_overrides(
        max_astar_nodes=args.max_nodes,
        time_limit=args.time_limit,
        verbose=args.verbose or None,
    )

    print("=" * 60)
    print("  Pet Puzzle Solver")
    print("=" * 60)
    print(f"Level: {args.level}")
    print(f"Grid: {state.grid.width}x{state.grid.height}")
    print(f"Pets: {len(state.pets)}")
    print(f"Exits: {len(state.exits)}")
    print(f"Boxes: {len(state.boxes)}")
    print("=" * 60)

    result = PuzzleSolver(config).solve(state, hint)

    if not result.success:
        print(f"\n✗ No solution found ({result.error})")
        return 1

    print(f"\n✓ {result}")
    print(f"Stages: {result.stats.stages}")
    print(f"Time: {result.stats.elapsed_ms:.0f}ms")
    print()
    for record in result.records:
        print(record)
    return 0


def run_path(args):
    """Preview the route of one pet end to a cell."""
    from petpuzzle_solver.puzzle.loader import PuzzleLoader
    from petpuzzle_solver.puzzle.state import PetEnd
    from petpuzzle_solver.solver.pathfinder import find_route

    try:
        state = PuzzleLoader.from_json(args.level)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    if state.find_pet(args.pet_id) is None:
        print(f"Error: No pet with id {args.pet_id}")
        return 1

    route = find_route(state, args.pet_id, PetEnd.from_code(args.end), (args.x, args.y))
    if route is None:
        print("No route found")
        return 1

    print(" > ".join(f"{x},{y}" for x, y in route))
    return 0


def run_key(args):
    """Print the canonical key of a level."""
    from petpuzzle_solver.puzzle.loader import PuzzleLoader
    from petpuzzle_solver.solver.keys import state_key

    try:
        state = PuzzleLoader.from_json(args.level)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    print(state_key(state))
    return 0


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Pet Puzzle Solver - Find move sequences that clear a level"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Solve command
    solve_parser = subparsers.add_parser("solve", help="Solve a level file")
    solve_parser.add_argument("level", help="Path to the level JSON file")
    solve_parser.add_argument(
        "--use-hint",
        action="store_true",
        help="Return the level's stored solution if it has one"
    )
    solve_parser.add_argument(
        "--max-nodes",
        type=int,
        default=None,
        help="Node budget per A* setup search (default: 40000)"
    )
    solve_parser.add_argument(
        "--time-limit",
        type=float,
        default=None,
        help="Give up after this many seconds (default: no limit)"
    )
    solve_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print search progress"
    )

    # Path command
    path_parser = subparsers.add_parser("path", help="Preview a pet route")
    path_parser.add_argument("level", help="Path to the level JSON file")
    path_parser.add_argument("pet_id", type=int, help="Pet id")
    path_parser.add_argument("end", choices=["head", "tail"], help="Leading end")
    path_parser.add_argument("x", type=int, help="Target column")
    path_parser.add_argument("y", type=int, help="Target row (0 = bottom)")

    # Key command
    key_parser = subparsers.add_parser("key", help="Print the canonical state key")
    key_parser.add_argument("level", help="Path to the level JSON file")

    args = parser.parse_args()

    if args.command == "solve":
        return run_solve(args)
    elif args.command == "path":
        return run_path(args)
    elif args.command == "key":
        return run_key(args)
    else:
        parser.print_help()
        return 0


if __name__ == "__main__":
    sys.exit(main())
