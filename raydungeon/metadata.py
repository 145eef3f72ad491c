"""Parsing of the texture and colour header of a scene file."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .texture import convert_rgb
from .vector import Direction

_WHITESPACE = " \t\n\v\f\r"
_DIGITS = frozenset("0123456789")
_MAP_CHARS = frozenset("10SNEWXIH")
_REQUIRED_ENTRIES = 11

_WALL_KEYS = {
    "NO": Direction.NORTH,
    "SO": Direction.SOUTH,
    "EA": Direction.EAST,
    "WE": Direction.WEST,
}
_SPRITE_KEYS = {
    "EH": "enemy_hit",
    "ES": "enemy_shooting",
    "EI": "enemy_idle",
    "IT": "item",
    "HE": "health",
}


class SceneError(Exception):
    """Raised when a scene file is malformed."""


@dataclass
class Metadata:
    """Texture paths and colours declared before the map."""

    walls: dict[Direction, str] = field(default_factory=dict)
    enemy_hit: str | None = None
    enemy_shooting: str | None = None
    enemy_idle: str | None = None
    item: str | None = None
    health: str | None = None
    ceiling_rgb: tuple[int, int, int] | None = None
    floor_rgb: tuple[int, int, int] | None = None
    ceiling: int = 0
    floor: int = 0


def extract_value(line: str) -> str | None:
    """Return the second word of an ``ID value`` line, or None if malformed."""
    tokens = [token for token in line.strip(" \n").split(" ") if token]
    if len(tokens) == 2:
        return tokens[1]
    return None


def parse_colour(value: str) -> tuple[int, int, int]:
    """Parse ``R,G,B`` made of decimal digits into a tuple."""
    parts = [part for part in value.split(",") if part]
    if len(parts) != 3 or not all(set(part) <= _DIGITS for part in parts):
        raise SceneError("invalid colour info")
    r, g, b = (int(part) for part in parts)
    return r, g, b


def is_map_line(line: str) -> bool:
    """Tell whether a line looks like the first row of the map."""
    if "1" not in line:
        return False
    found = False
    for ch in line.lstrip(_WHITESPACE):
        if ch == "\n":
            break
        if ch in _MAP_CHARS or ch in _WHITESPACE:
            found = True
        else:
            return False
    return found


def _texture_path(line: str) -> str:
    path = extract_value(line)
    if path is None:
        raise SceneError("invalid texture/colour info")
    if not path.startswith("./"):
        raise SceneError("invalid texture path")
    return path


class _HeaderReader:
    def __init__(self) -> None:
        self.metadata = Metadata()
        self.count = 0
        self.colours_read = 0

    def feed(self, line: str) -> None:
        entry = line.lstrip(_WHITESPACE)
        if not entry:
            return
        for key, direction in _WALL_KEYS.items():
            if entry.startswith(key):
                self._store_wall(direction, entry)
                return
        if entry.startswith("C"):
            self._store_colour("ceiling", entry)
            return
        if entry.startswith("F"):
            self._store_colour("floor", entry)
            return
        for key, attr in _SPRITE_KEYS.items():
            if entry.startswith(key):
                self._store_sprite(attr, entry)
                return
        raise SceneError("invalid texture/colour info")

    def _store_wall(self, direction: Direction, line: str) -> None:
        path = _texture_path(line)
        if direction in self.metadata.walls:
            raise SceneError("Duplicated texture")
        self.metadata.walls[direction] = path
        self.count += 1

    def _store_sprite(self, attr: str, line: str) -> None:
        path = _texture_path(line)
        if getattr(self.metadata, attr) is not None:
            raise SceneError("Duplicated texture")
        setattr(self.metadata, attr, path)
        self.count += 1

    def _store_colour(self, kind: str, line: str) -> None:
        value = extract_value(line)
        if value is None:
            raise SceneError("invalid colour info")
        rgb = parse_colour(value)
        if self.colours_read > 1:
            raise SceneError("duplicated colour info")
        rgb_attr = f"{kind}_rgb"
        if getattr(self.metadata, rgb_attr) is None:
            setattr(self.metadata, rgb_attr, rgb)
        setattr(self.metadata, kind, convert_rgb(*getattr(self.metadata, rgb_attr)))
        self.colours_read += 1
        self.count += 1

    def check_complete(self) -> None:
        m = self.metadata
        complete = (
            self.count == _REQUIRED_ENTRIES
            and len(m.walls) == len(Direction)
            and all(getattr(m, attr) is not None for attr in _SPRITE_KEYS.values())
        )
        if not complete:
            raise SceneError("missing or duplicated texture/colour info")


def read_metadata(lines: Iterable[str]) -> Metadata:
    """Read header lines up to the first map line and validate them."""
    reader = _HeaderReader()
    empty = True
    for line in lines:
        empty = False
        if is_map_line(line):
            break
        reader.feed(line)
    if empty:
        raise SceneError("file is empty")
    reader.check_complete()
    return reader.metadata