"""Projection, depth sorting and drawing of map elements as billboards."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, MutableSequence

import numpy as np

from .elements import Element, ElementType
from .frame import Frame
from .texture import Texture
from .vector import Vector

_RGB_MASK = 0x00FFFFFF


@dataclass(frozen=True)
class SpriteProjection:
    """Screen placement of an element in front of the camera."""

    transform_x: float
    transform_y: float
    screen_x: int
    width: int
    height: int
    draw_start_x: int
    draw_end_x: int
    draw_start_y: int
    draw_end_y: int


def _tdiv(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return -quotient if (a < 0) != (b < 0) else quotient


def _tdiv_array(a: np.ndarray, b: int) -> np.ndarray:
    quotient = np.abs(a) // abs(b)
    return np.where((a < 0) != (b < 0), -quotient, quotient)


def _clamp(start: int, end: int, limit: int) -> tuple[int, int]:
    return max(start, 0), min(end, limit - 1)


def project_sprite(
    element: Element,
    position: Vector,
    direction: Vector,
    plane: Vector,
    width: int,
    height: int,
) -> SpriteProjection | None:
    """Project an element onto a screen of the given size; None if it is behind."""
    det = plane.x * direction.y - direction.x * plane.y
    if det == 0:
        raise ValueError("camera plane is parallel to the view direction")
    inv_det = 1.0 / det
    rel_x = element.x - position.x
    rel_y = element.y - position.y
    transform_x = inv_det * (direction.y * rel_x - direction.x * rel_y)
    transform_y = inv_det * (-plane.y * rel_x + plane.x * rel_y)
    if transform_y <= 0:
        return None
    screen_x = int((width // 2) * (1 + transform_x / transform_y))
    size = abs(int(height / transform_y))
    start_y, end_y = _clamp(-(size // 2) + height // 2, size // 2 + height // 2, height)
    start_x, end_x = _clamp(-(size // 2) + screen_x, size // 2 + screen_x, width)
    return SpriteProjection(
        transform_x=transform_x,
        transform_y=transform_y,
        screen_x=screen_x,
        width=size,
        height=size,
        draw_start_x=start_x,
        draw_end_x=end_x,
        draw_start_y=start_y,
        draw_end_y=end_y,
    )


def sort_elements(elements: Iterable[Element], position: Vector) -> list[Element]:
    """Store each element's squared distance and rank them farthest first."""
    elements = list(elements)
    for element in elements:
        dx = element.x - position.x
        dy = element.y - position.y
        element.distance = dx * dx + dy * dy
    ordered = sorted(elements, key=lambda e: e.distance, reverse=True)
    for rank, element in enumerate(ordered):
        element.dist_rank = rank
    return ordered


def _texels(texture: Texture) -> np.ndarray:
    return np.frombuffer(texture.pixels, dtype=">u4").reshape(
        texture.height, texture.width
    )


def _column_colours(texture: Texture, tex_x: int, tex_y: np.ndarray) -> np.ndarray:
    colours = np.zeros(tex_y.shape, dtype=np.uint32)
    if not 0 <= tex_x < texture.width:
        return colours
    valid = (tex_y >= 0) & (tex_y < texture.height)
    colours[valid] = _texels(texture)[tex_y[valid], tex_x]
    return colours


def _render_stripes(
    frame: Frame,
    element: Element,
    texture: Texture,
    proj: SpriteProjection,
    z_buffer: MutableSequence[float],
) -> None:
    element.visible = False
    rows = np.arange(proj.draw_start_y, proj.draw_end_y, dtype=np.int64)
    if proj.height > 0:
        d = rows * 256 - frame.height * 128 + proj.height * 128
        tex_y = _tdiv_array(_tdiv_array(d * texture.height, proj.height), 256)
    else:
        tex_y = rows
    for stripe in range(proj.draw_start_x, proj.draw_end_x):
        if not (0 <= stripe < frame.width and proj.transform_y < z_buffer[stripe]):
            continue
        element.visible = True
        offset = stripe + proj.width // 2 - proj.screen_x
        tex_x = _tdiv(_tdiv(256 * offset * texture.width, proj.width), 256)
        colours = _column_colours(texture, tex_x, tex_y)
        opaque = (colours & _RGB_MASK) != 0
        if not opaque.any():
            continue
        if element.kind is ElementType.ENEMY:
            z_buffer[stripe] = proj.transform_y
        frame.pixels[rows[opaque], stripe] = colours[opaque]


def render_elements(
    frame: Frame,
    elements: Iterable[Element],
    textures: Callable[[Element], Texture],
    position: Vector,
    direction: Vector,
    plane: Vector,
    z_buffer: MutableSequence[float],
) -> None:
    """Draw living elements farthest first, hidden behind nearer walls.

    ``textures`` returns the texture an element currently shows. Columns
    covered by an enemy take its depth in ``z_buffer``.
    """
    for element in sort_elements(elements, position):
        if not element.alive:
            continue
        proj = project_sprite(
            element, position, direction, plane, frame.width, frame.height
        )
        if proj is None:
            continue
        _render_stripes(frame, element, textures(element), proj, z_buffer)