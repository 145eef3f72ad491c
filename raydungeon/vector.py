"""Two-dimensional vectors and compass directions."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum


class Direction(IntEnum):
    """Compass direction of a wall face, used to index wall textures."""

    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3


@dataclass(frozen=True)
class Vector:
    """An immutable 2D vector."""

    x: float
    y: float

    def __add__(self, other: object) -> Vector:
        if not isinstance(other, Vector):
            return NotImplemented
        return Vector(self.x + other.x, self.y + other.y)

    def scaled(self, factor: float) -> Vector:
        """Return this vector multiplied by ``factor``."""
        return Vector(self.x * factor, self.y * factor)

    def rotated(self, degrees: float) -> Vector:
        """Return this vector rotated by ``degrees`` (clockwise on screen)."""
        rad = math.radians(degrees)
        cos_a = math.cos(rad)
        sin_a = math.sin(rad)
        return Vector(
            self.x * cos_a - self.y * sin_a,
            self.x * sin_a + self.y * cos_a,
        )