"""Wall ray casting with the DDA algorithm and textured wall columns."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Mapping, Sequence

import numpy as np

from .frame import Frame
from .texture import Texture
from .vector import Direction, Vector

_MIN_DISTANCE = 1e-6


class Side(IntEnum):
    """Which kind of grid line a ray crossed when it hit a wall."""

    VERTICAL = 0
    HORIZONTAL = 1


@dataclass(frozen=True)
class RayHit:
    """Where a ray met a wall and how far away it was."""

    ray_dir: Vector
    map_x: int
    map_y: int
    step_x: int
    step_y: int
    side: Side
    perp_wall_dist: float


def _step(component: float) -> int:
    return -1 if component < 0 else 1


def _delta(component: float) -> float:
    return math.inf if component == 0 else abs(1 / component)


def _cell(grid: Sequence[Sequence[str]], x: int, y: int) -> str:
    if 0 <= y < len(grid) and 0 <= x < len(grid[y]):
        return grid[y][x]
    raise ValueError(f"ray left the map at x:{x}, y:{y}")


def cast_ray(grid: Sequence[Sequence[str]], position: Vector, ray_dir: Vector) -> RayHit:
    """Walk the grid from ``position`` along ``ray_dir`` until a wall is met."""
    step_x, step_y = _step(ray_dir.x), _step(ray_dir.y)
    delta_x, delta_y = _delta(ray_dir.x), _delta(ray_dir.y)
    map_x, map_y = int(position.x), int(position.y)
    if ray_dir.x < 0:
        side_x = (position.x - map_x) * delta_x
    else:
        side_x = (map_x + 1.0 - position.x) * delta_x
    if ray_dir.y < 0:
        side_y = (position.y - map_y) * delta_y
    else:
        side_y = (map_y + 1.0 - position.y) * delta_y
    side = Side.VERTICAL
    while _cell(grid, map_x, map_y) != "1":
        if side_x < side_y:
            side_x += delta_x
            map_x += step_x
            side = Side.VERTICAL
        else:
            side_y += delta_y
            map_y += step_y
            side = Side.HORIZONTAL
    if side is Side.VERTICAL:
        perp = side_x - delta_x
    else:
        perp = side_y - delta_y
    return RayHit(ray_dir, map_x, map_y, step_x, step_y, side, perp)


def wall_texture_for(hit: RayHit, textures: Mapping[Direction, Texture]) -> Texture:
    """Pick the wall texture for the face the ray struck."""
    if hit.side is Side.HORIZONTAL:
        return textures[Direction.NORTH if hit.step_y < 0 else Direction.SOUTH]
    return textures[Direction.WEST if hit.step_x < 0 else Direction.EAST]


def _texels(texture: Texture) -> np.ndarray:
    return np.frombuffer(texture.pixels, dtype=">u4").reshape(
        texture.height, texture.width
    )


def draw_wall(
    frame: Frame, hit: RayHit, texture: Texture, position: Vector, column: int
) -> None:
    """Draw the textured wall slice for one screen column."""
    if not 0 <= column < frame.width:
        return
    screen_h = frame.height
    height = int(screen_h / max(hit.perp_wall_dist, _MIN_DISTANCE))
    if height <= 0:
        return
    half = screen_h // 2
    start = max(half - height // 2, 0)
    end = min(half + height // 2, screen_h - 1)
    if end <= start:
        return
    if hit.side is Side.VERTICAL:
        point = position.y + hit.perp_wall_dist * hit.ray_dir.y
    else:
        point = position.x + hit.perp_wall_dist * hit.ray_dir.x
    point -= math.floor(point)
    tex_x = int(point * texture.width)
    count = end - start
    if texture.height == 0 or not 0 <= tex_x < texture.width:
        frame.pixels[start:end, column] = 0
        return
    resize = texture.height / height
    tex_pos = (start - half + height // 2) * resize
    rows = (tex_pos + resize * np.arange(count)).astype(np.int64)
    tex_y = np.clip(rows, 0, texture.height - 1)
    frame.pixels[start:end, column] = _texels(texture)[tex_y, tex_x]


def draw_walls(
    frame: Frame,
    grid: Sequence[Sequence[str]],
    position: Vector,
    direction: Vector,
    plane: Vector,
    textures: Mapping[Direction, Texture],
) -> list[float]:
    """Cast one ray per column, draw the walls and return the depth of each column."""
    z_buffer: list[float] = []
    for column in range(frame.width):
        multiply = (2 * column) / float(frame.width) - 1
        ray_dir = direction + plane.scaled(multiply)
        hit = cast_ray(grid, position, ray_dir)
        draw_wall(frame, hit, wall_texture_for(hit, textures), position, column)
        z_buffer.append(hit.perp_wall_dist)
    return z_buffer