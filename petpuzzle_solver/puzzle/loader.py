"""Build puzzle snapshots from level dictionaries."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .state import (
    BoxAxis, Cell, Color, ColoredPath, ColorWall, Crate, Exit, ExitModifiers,
    Grid, KeyLockColor, MovableBox, Obstacle, Pet, PetModifiers, PuzzleState,
    Ribbon, StoneWall, TreeRoot,
)


class PuzzleLoader:
    """Loader for the level dictionaries produced by the level editor."""

    @staticmethod
    def from_json(source: Union[str, Path]) -> PuzzleState:
        """
        Load a level from a JSON file path or a JSON string.

        Raises:
            ValueError: If the document is not a valid level
        """
        return PuzzleLoader.from_dict(PuzzleLoader._read_json(source))

    @staticmethod
    def hint_from_json(source: Union[str, Path]) -> List[str]:
        """Get the stored solution records of a level, if any."""
        return PuzzleLoader.hint_from_dict(PuzzleLoader._read_json(source))

    @staticmethod
    def hint_from_dict(data: Dict[str, Any]) -> List[str]:
        solution = data.get("solution") or []
        return [str(record) for record in solution]

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> PuzzleState:
        """
        Build a PuzzleState from a level dictionary.

        Expected keys follow the editor format: ``gridData`` (``width``,
        ``height``, ``strGrid``), ``pets``, ``exits``, ``stoneWalls``,
        ``coloredPaths``, ``colorWalls``, ``crateInfos``, ``movableBoxes``,
        ``obstacleInfos``, ``treeRoots`` and ``ribbonInfo``. Only ``gridData``
        is required. Pets without any body cell are skipped.

        Args:
            data: The level dictionary

        Returns:
            The parsed snapshot

        Raises:
            ValueError: If the dictionary is malformed
        """
        if not isinstance(data, dict):
            raise ValueError("Level data must be an object")

        grid_data = data.get("gridData")
        if not isinstance(grid_data, dict):
            raise ValueError("Level data is missing gridData")
        try:
            width = int(grid_data["width"])
            height = int(grid_data["height"])
        except (KeyError, TypeError, ValueError):
            raise ValueError("gridData must define integer width and height")
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid grid size: {width}x{height}")
        grid = Grid.from_rows(width, height, grid_data.get("strGrid") or [])

        try:
            return PuzzleLoader._build_state(grid, data)
        except (KeyError, TypeError, AttributeError) as e:
            raise ValueError(f"Malformed level data: {e!r}")

    @staticmethod
    def _build_state(grid: Grid, data: Dict[str, Any]) -> PuzzleState:
        pets = []
        for i, raw in enumerate(data.get("pets") or []):
            pet = PuzzleLoader._parse_pet(raw, i)
            if pet is not None:
                pets.append(pet)

        ribbon_data = data.get("ribbonInfo") or {}

        return PuzzleState(
            grid=grid,
            pets=tuple(pets),
            exits=tuple(PuzzleLoader._parse_exit(e) for e in data.get("exits") or []),
            stone_walls=tuple(
                StoneWall(
                    PuzzleLoader._parse_cell(s.get("position")),
                    int(s.get("count", 1)),
                    int(s.get("iceCount") or 0),
                )
                for s in data.get("stoneWalls") or []
            ),
            colored_paths=tuple(
                ColoredPath(PuzzleLoader._parse_cell(p.get("position")), Color.from_code(int(p["color"])))
                for p in data.get("coloredPaths") or []
            ),
            color_walls=tuple(
                ColorWall(PuzzleLoader._parse_cell(w.get("position")), Color.from_code(int(w["color"])))
                for w in data.get("colorWalls") or []
            ),
            crates=tuple(
                Crate(
                    int(c.get("id", i + 1)),
                    PuzzleLoader._parse_cells(c.get("listPositions")),
                    int(c.get("requiredSnake") or 0),
                )
                for i, c in enumerate(data.get("crateInfos") or [])
            ),
            boxes=tuple(
                PuzzleLoader._parse_box(b, i) for i, b in enumerate(data.get("movableBoxes") or [])
            ),
            obstacles=tuple(
                Obstacle(int(o.get("id", i + 1)), PuzzleLoader._parse_cells(o.get("listPositions")))
                for i, o in enumerate(data.get("obstacleInfos") or [])
            ),
            tree_roots=tuple(
                TreeRoot(
                    int(r.get("id", i + 1)),
                    PuzzleLoader._parse_cell(r.get("position")),
                    PuzzleLoader._parse_cell(r.get("direction")),
                    int(r.get("length") or 0),
                )
                for i, r in enumerate(data.get("treeRoots") or [])
            ),
            ribbon=Ribbon(PuzzleLoader._parse_cells(ribbon_data.get("listPositions"))),
        )

    @staticmethod
    def _read_json(source: Union[str, Path]) -> Dict[str, Any]:
        text = str(source)
        if isinstance(source, Path) or not text.lstrip().startswith("{"):
            try:
                text = Path(source).read_text()
            except OSError as e:
                raise ValueError(f"Cannot read level file {source}: {e}")
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid level JSON: {e}")

    @staticmethod
    def _parse_cell(raw: Any) -> Cell:
        if isinstance(raw, dict) and "x" in raw and "y" in raw:
            return (int(raw["x"]), int(raw["y"]))
        if isinstance(raw, (list, tuple)) and len(raw) == 2:
            return (int(raw[0]), int(raw[1]))
        raise ValueError(f"Invalid coordinates: {raw!r}")

    @staticmethod
    def _parse_cells(raw: Any) -> Tuple[Cell, ...]:
        return tuple(PuzzleLoader._parse_cell(c) for c in raw or [])

    @staticmethod
    def _parse_layer_colors(raw: Any) -> Tuple[Color, ...]:
        """
        Parse layer colors.

        Accepts a list of color codes, a single code, or the packed asset
        string where every 8 characters hold one color as a 2-digit hex prefix.
        """
        if raw is None or raw == "":
            return ()
        if isinstance(raw, (list, tuple)):
            return tuple(Color.from_code(int(c)) for c in raw)
        if isinstance(raw, int):
            return (Color.from_code(raw),)

        text = str(raw)
        if len(text) < 8 and text.isdigit():
            return (Color.from_code(int(text)),)
        if len(text) % 8 != 0:
            raise ValueError(f"Invalid layer colors: {raw!r}")
        try:
            return tuple(
                Color.from_code(int(text[i:i + 2], 16)) for i in range(0, len(text), 8)
            )
        except ValueError:
            raise ValueError(f"Invalid layer colors: {raw!r}")

    @staticmethod
    def _parse_pet(raw: Dict[str, Any], index: int) -> Optional[Pet]:
        positions = PuzzleLoader._parse_cells(raw.get("positions"))
        if not positions:
            return None

        special = raw.get("special") or {}
        key_lock = special.get("keyLock") or {}
        modifiers = PetModifiers(
            layer_colors=PuzzleLoader._parse_layer_colors(special.get("layerColors")),
            ice_count=int(special.get("iceCount") or 0),
            hidden_count=int(special.get("hiddenCount") or 0),
            count=int(special.get("count") or 0),
            key_color=KeyLockColor.from_code(int(key_lock.get("keyColor", -1))),
            lock_color=KeyLockColor.from_code(int(key_lock.get("lockColor", -1))),
            has_scissor=bool(special.get("hasScissor")),
            is_single_direction=bool(special.get("isSingleDirection")),
            time_explode=int(special.get("timeExplode") or 0),
        )
        return Pet(
            pet_id=int(raw.get("id", index + 1)),
            positions=positions,
            color=Color.from_code(int(raw["color"])),
            special=modifiers,
        )

    @staticmethod
    def _parse_exit(raw: Dict[str, Any]) -> Exit:
        special = raw.get("special") or {}
        return Exit(
            position=PuzzleLoader._parse_cell(raw.get("position")),
            color=Color.from_code(int(raw["color"])),
            special=ExitModifiers(
                count=int(special.get("count") or 0),
                ice_count=int(special.get("iceCount") or 0),
                layer_colors=PuzzleLoader._parse_layer_colors(special.get("layerColors")),
                is_permanent=bool(special.get("isPermanent")),
            ),
        )

    @staticmethod
    def _parse_box(raw: Dict[str, Any], index: int) -> MovableBox:
        cells = raw.get("listPositions") or raw.get("points") or raw.get("offsetPoints")
        return MovableBox(
            box_id=int(raw.get("id", index + 1)),
            positions=PuzzleLoader._parse_cells(cells),
            axis=BoxAxis.from_code(int(raw.get("direction") or 0)),
        )
