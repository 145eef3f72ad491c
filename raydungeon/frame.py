"""An off-screen RGBA frame buffer that the renderer draws into."""

from __future__ import annotations

import numpy as np

WINDOW_WIDTH = 1900
WINDOW_HEIGHT = 1200
BLACK = 0x000000FF

_COLOUR_MASK = 0xFFFFFFFF


class Frame:
    """A width by height grid of packed 32-bit RGBA colours.

    ``pixels`` is a numpy array indexed as ``pixels[y, x]``.
    """

    def __init__(self, width: int = WINDOW_WIDTH, height: int = WINDOW_HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"invalid frame size {width}x{height}")
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width), dtype=np.uint32)

    def _contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def put_pixel(self, x: int, y: int, colour: int) -> None:
        """Set one pixel; writes outside the frame are ignored."""
        if self._contains(x, y):
            self.pixels[y, x] = colour & _COLOUR_MASK

    def get_pixel(self, x: int, y: int) -> int:
        """Return the packed colour at (x, y)."""
        if not self._contains(x, y):
            raise IndexError(f"pixel ({x}, {y}) is outside the frame")
        return int(self.pixels[y, x])

    def fill(self, colour: int) -> None:
        """Paint the whole frame with one colour."""
        self.pixels.fill(colour & _COLOUR_MASK)

    def draw_background(self, ceiling: int, floor: int) -> None:
        """Paint the upper half with the ceiling colour and the rest with the floor."""
        half = self.height // 2
        self.pixels[:half] = ceiling & _COLOUR_MASK
        self.pixels[half:] = floor & _COLOUR_MASK

    def to_rgba_bytes(self) -> bytes:
        """Return the frame as row-major R, G, B, A bytes."""
        return self.pixels.astype(">u4").tobytes()