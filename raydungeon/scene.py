"""Loading and validation of scene files: header, map grid and entities."""

from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from .elements import Element, ElementState, ElementType, POTION_HEALTH
from .metadata import Metadata, SceneError, read_metadata
from .vector import Vector

_WHITESPACE = frozenset(" \t\n\v\f\r")
_VALID_CHARS = frozenset("10 SNEWXIH")
_PLAYER_CHARS = frozenset("SNEW")
_OPEN_CHARS = ("0", "X", "I", "H", "S", "N", "E", "W")
_ELEMENT_KINDS = {
    "X": ElementType.ENEMY,
    "I": ElementType.ITEM,
    "H": ElementType.HEALTH,
}


@dataclass
class Scene:
    """A validated scene ready to be played."""

    metadata: Metadata
    grid: list[list[str]]
    pov: str
    player_pos: Vector
    elements: list[Element]
    total_items: int


def is_valid_char(c: str) -> bool:
    """Tell whether ``c`` may appear in the map."""
    return c in _VALID_CHARS


def check_extension(path) -> None:
    """Raise SceneError unless the path ends with ``.cub``."""
    if not str(path).endswith(".cub"):
        raise SceneError("Map extension is invalid")


def _is_start_line(line: str) -> bool:
    if "1" not in line and "0" not in line:
        return False
    return all(ch in "10" or ch in _WHITESPACE for ch in line)


def find_map_start(lines: Sequence[str]) -> int | None:
    """Return the index of the first line made only of walls, floor and blanks."""
    return next((i for i, line in enumerate(lines) if _is_start_line(line)), None)


def _counts_for_width(line: str) -> bool:
    return line.endswith("\n") and all(
        is_valid_char(ch) or ch in _WHITESPACE for ch in line
    )


def pad_rows(rows: Sequence[str]) -> list[str]:
    """Strip newlines, pad rows with spaces to the map width, drop blank tail rows."""
    width = max((len(row) for row in rows if _counts_for_width(row)), default=0)
    padded = [row.strip("\n")[:width].ljust(width) for row in rows]
    while padded and all(ch in _WHITESPACE for ch in padded[-1]):
        padded.pop()
    return padded


def _is_blank(row: Sequence[str]) -> bool:
    return all(ch in _WHITESPACE for ch in row)


def check_map_chars(grid: Sequence[Sequence[str]]) -> None:
    """Raise SceneError on an empty line inside the map or an unknown character."""
    for i, row in enumerate(grid):
        if len(row) == 0 and not all(_is_blank(rest) for rest in grid[i:]):
            raise SceneError("empty line in map")
        if not all(is_valid_char(ch) for ch in row):
            raise SceneError("invalid character in map")


def _cell(grid: Sequence[Sequence[str]], i: int, j: int) -> str:
    if 0 <= i < len(grid) and 0 <= j < len(grid[i]):
        return grid[i][j]
    return " "


def check_enclosed(grid: Sequence[Sequence[str]]) -> None:
    """Raise SceneError if any walkable cell touches the border or a blank."""
    last_row = len(grid) - 1
    for i, row in enumerate(grid):
        for j, ch in enumerate(row):
            if ch not in _OPEN_CHARS:
                continue
            on_border = i in (0, last_row) or j in (0, len(row) - 1)
            neighbours = (
                _cell(grid, i - 1, j),
                _cell(grid, i + 1, j),
                _cell(grid, i, j - 1),
                _cell(grid, i, j + 1),
            )
            if on_border or any(n in _WHITESPACE for n in neighbours):
                raise SceneError(
                    f"map is not surrounded by walls at y:{i}, x:{j}"
                )


def check_player_count(grid: Sequence[Sequence[str]]) -> None:
    """Raise SceneError unless exactly one player start is present."""
    count = sum(ch in _PLAYER_CHARS for row in grid for ch in row)
    if count != 1:
        raise SceneError("invalid number of player positions")


def count_items(grid: Sequence[Sequence[str]]) -> int:
    """Count the collectable items on the map."""
    return sum(ch == "I" for row in grid for ch in row)


def _texture_paths(kind: ElementType, metadata: Metadata) -> dict[ElementState, str]:
    if kind is ElementType.ENEMY:
        candidates = {
            ElementState.IDLE: metadata.enemy_idle,
            ElementState.SHOOTING: metadata.enemy_shooting,
            ElementState.HIT: metadata.enemy_hit,
        }
    elif kind is ElementType.HEALTH:
        candidates = {ElementState.IDLE: metadata.health}
    else:
        candidates = {ElementState.IDLE: metadata.item}
    return {state: path for state, path in candidates.items() if path is not None}


def locate_entities(
    grid: list[list[str]], metadata: Metadata
) -> tuple[str, Vector, list[Element]]:
    """Find the player and the elements; the player's cell becomes floor."""
    pov: str | None = None
    position = Vector(0.0, 0.0)
    elements: list[Element] = []
    for y, row in enumerate(grid):
        for x, ch in enumerate(row):
            if ch in _PLAYER_CHARS:
                pov = ch
                position = Vector(x + 0.5, y + 0.5)
                row[x] = "0"
            kind = _ELEMENT_KINDS.get(ch)
            if kind is None:
                continue
            element = Element(
                kind=kind,
                x=x + 0.5,
                y=y + 0.5,
                index=len(elements),
                texture_paths=_texture_paths(kind, metadata),
            )
            if kind is ElementType.HEALTH:
                element.health = POTION_HEALTH
            elements.append(element)
    if pov is None:
        raise SceneError("invalid number of player positions")
    return pov, position, elements


def parse_scene(text: str) -> Scene:
    """Parse and validate the full text of a scene file."""
    lines = list(io.StringIO(text))
    metadata = read_metadata(lines)
    start = find_map_start(lines)
    raw_rows = [] if start is None else lines[start:]
    grid = [list(row) for row in pad_rows(raw_rows)]
    check_map_chars(grid)
    check_enclosed(grid)
    check_player_count(grid)
    pov, position, elements = locate_entities(grid, metadata)
    return Scene(
        metadata=metadata,
        grid=grid,
        pov=pov,
        player_pos=position,
        elements=elements,
        total_items=count_items(grid),
    )


def load_scene(path) -> Scene:
    """Read a ``.cub`` file from disk and parse it."""
    check_extension(path)
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SceneError("failed to open file") from exc
    return parse_scene(text)