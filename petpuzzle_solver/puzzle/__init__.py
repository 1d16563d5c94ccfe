"""Puzzle state model, loading and validation."""

from .state import (
    Cell, DIRECTIONS, Color, KeyLockColor, BoxAxis, PetEnd,
    PetModifiers, Pet, ExitModifiers, Exit, StoneWall, ColoredPath, ColorWall,
    Crate, MovableBox, Obstacle, TreeRoot, Ribbon, Grid, PuzzleState,
    shift_body, line_cells,
)
from .loader import PuzzleLoader
from .validator import StateValidator

__all__ = [
    "Cell",
    "DIRECTIONS",
    "Color",
    "KeyLockColor",
    "BoxAxis",
    "PetEnd",
    "PetModifiers",
    "Pet",
    "ExitModifiers",
    "Exit",
    "StoneWall",
    "ColoredPath",
    "ColorWall",
    "Crate",
    "MovableBox",
    "Obstacle",
    "TreeRoot",
    "Ribbon",
    "Grid",
    "PuzzleState",
    "shift_body",
    "line_cells",
    "PuzzleLoader",
    "StateValidator",
]
