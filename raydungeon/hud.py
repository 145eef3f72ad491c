"""Overlays drawn on top of the 3D view: weapon, minimap, bars and crosshair."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from .frame import Frame
from .game import Game
from .texture import Texture, convert_rgb
from .vector import Vector

WEAPON_SCALE = 2.5
MAP_SIZE = 8
MAP_IND = 10
AIM_RADIUS = 10
AIM_THICK = 2

BAR_WIDTH = 208
BAR_HEIGHT = 23
BAR_BORDER = 4
BAR_INNER_WIDTH = 200
BAR_INNER_BOTTOM = 19
HEALTH_BAR_Y = 10
PROGRESS_BAR_Y = 40
DIVISION_WIDTH = 5

WHITE = convert_rgb(255, 255, 255)
RED = convert_rgb(255, 0, 0)
GREEN = convert_rgb(0, 255, 0)
YELLOW = convert_rgb(255, 255, 0)
TILE_BLACK = convert_rgb(0, 0, 0)
ITEM_BLUE = convert_rgb(20, 130, 255)
GOLD = convert_rgb(250, 206, 15)

_RGB_MASK = 0x00FFFFFF
_COLOUR_MASK = 0xFFFFFFFF
_TILE_COLOURS = {
    "1": WHITE,
    "I": ITEM_BLUE,
    "H": GREEN,
    "0": TILE_BLACK,
}


def _fill_rect(frame: Frame, x0: int, y0: int, x1: int, y1: int, colour: int) -> None:
    x0, y0 = max(x0, 0), max(y0, 0)
    x1, y1 = min(x1, frame.width), min(y1, frame.height)
    if x0 < x1 and y0 < y1:
        frame.pixels[y0:y1, x0:x1] = colour & _COLOUR_MASK


def draw_weapon(frame: Frame, texture: Texture) -> None:
    """Draw the weapon mirrored and enlarged from the centre of the frame."""
    if texture.width == 0 or texture.height == 0:
        return
    texels = np.frombuffer(texture.pixels, dtype=">u4").reshape(
        texture.height, texture.width
    )[:, ::-1]
    # Transposed so texels come in column order; later blocks overwrite earlier ones.
    xs, ys = np.nonzero((texels.T & _RGB_MASK) != 0)
    if xs.size == 0:
        return
    colours = texels[ys, xs].astype(np.uint32)
    base_x = (frame.width // 2 + xs * WEAPON_SCALE).astype(np.int64)
    base_y = (frame.height // 2 + ys * WEAPON_SCALE).astype(np.int64)
    steps = np.arange(math.ceil(WEAPON_SCALE))
    off_x = np.repeat(steps, steps.size)
    off_y = np.tile(steps, steps.size)
    screen_x = (base_x[:, None] + off_x[None, :]).ravel()
    screen_y = (base_y[:, None] + off_y[None, :]).ravel()
    block_colours = np.repeat(colours, off_x.size)
    inside = (
        (screen_x >= 0)
        & (screen_x < frame.width)
        & (screen_y >= 0)
        & (screen_y < frame.height)
    )
    frame.pixels[screen_y[inside], screen_x[inside]] = block_colours[inside]


def _tile_colour(ch: str, show_enemies: bool) -> int | None:
    if ch == "X":
        return RED if show_enemies else TILE_BLACK
    return _TILE_COLOURS.get(ch)


def _print_tile(frame: Frame, x: int, y: int, rows: int, colour: int) -> None:
    left = x * MAP_SIZE + MAP_IND
    top = y * MAP_SIZE - MAP_IND + frame.height - rows * MAP_SIZE
    _fill_rect(frame, left, top, left + MAP_SIZE, top + MAP_SIZE, colour)


def draw_minimap(
    frame: Frame,
    grid: Sequence[Sequence[str]],
    player_pos: Vector,
    show_enemies: bool,
) -> None:
    """Draw the map in the lower-left corner with the player in yellow."""
    rows = len(grid)
    for y, row in enumerate(grid):
        for x, ch in enumerate(row):
            colour = _tile_colour(ch, show_enemies)
            if colour is not None:
                _print_tile(frame, x, y, rows, colour)
    _print_tile(frame, int(player_pos.x), int(player_pos.y), rows, YELLOW)


def _draw_bar_outline(frame: Frame, start_x: int, start_y: int) -> None:
    right = start_x + BAR_WIDTH
    bottom = start_y + BAR_HEIGHT
    inner_top = start_y + BAR_BORDER
    inner_bottom = start_y + BAR_INNER_BOTTOM
    _fill_rect(frame, start_x, start_y, right, inner_top, WHITE)
    _fill_rect(frame, start_x, inner_bottom, right, bottom, WHITE)
    _fill_rect(frame, start_x, inner_top, start_x + BAR_BORDER, inner_bottom, WHITE)
    _fill_rect(
        frame, start_x + BAR_BORDER + BAR_INNER_WIDTH, inner_top, right, inner_bottom, WHITE
    )


def _draw_bar_fill(
    frame: Frame, start_x: int, start_y: int, ratio: float, colour: int
) -> None:
    inner_x = start_x + BAR_BORDER
    filled = min(int(BAR_INNER_WIDTH * ratio), BAR_INNER_WIDTH)
    if filled > 0:
        _fill_rect(
            frame,
            inner_x,
            start_y + BAR_BORDER,
            inner_x + filled,
            start_y + BAR_INNER_BOTTOM,
            colour,
        )


def draw_progress_bar(frame: Frame, item_count: int, total_items: int) -> None:
    """Draw the collected-items bar, split into one sector per item."""
    if total_items <= 0:
        raise ValueError("progress bar needs at least one item")
    start_x = (frame.width - BAR_WIDTH) // 2
    start_y = PROGRESS_BAR_Y
    _draw_bar_outline(frame, start_x, start_y)
    _draw_bar_fill(frame, start_x, start_y, item_count / total_items, GOLD)
    inner_x = start_x + BAR_BORDER
    sector = BAR_INNER_WIDTH // total_items
    for i in range(1, total_items):
        division_x = inner_x + i * sector - 2
        _fill_rect(
            frame,
            max(division_x, inner_x),
            start_y + BAR_BORDER,
            min(division_x + DIVISION_WIDTH, inner_x + BAR_INNER_WIDTH),
            start_y + BAR_INNER_BOTTOM,
            WHITE,
        )


def draw_aim(frame: Frame) -> None:
    """Draw a ring crosshair with a dot in the centre of the frame."""
    cx, cy = frame.width // 2, frame.height // 2
    reach = AIM_RADIUS + AIM_THICK
    low = AIM_RADIUS - AIM_THICK // 2
    high = AIM_RADIUS + AIM_THICK // 2
    for y in range(cy - reach, cy + reach + 1):
        for x in range(cx - reach, cx + reach + 1):
            if low <= math.hypot(x - cx, y - cy) <= high:
                frame.put_pixel(x, y, YELLOW)
    frame.put_pixel(cx, cy, YELLOW)


def draw_health_bar(frame: Frame, health: int) -> None:
    """Draw the player's health as a red bar at the top of the frame."""
    start_x = (frame.width - BAR_WIDTH) // 2
    _draw_bar_outline(frame, start_x, HEALTH_BAR_Y)
    _draw_bar_fill(frame, start_x, HEALTH_BAR_Y, health / 100.0, RED)


def draw_ui(frame: Frame, game: Game) -> None:
    """Draw every overlay that depends on the game state."""
    if game.minimap:
        draw_minimap(frame, game.grid, game.player_pos, game.minimap_enemies)
    draw_aim(frame)
    draw_health_bar(frame, game.player_health)
    if game.total_items > 0:
        draw_progress_bar(frame, game.item_count, game.total_items)