"""RGBA textures and colour packing."""

from __future__ import annotations

from dataclasses import dataclass

from PIL import Image

BYTES_PER_PIXEL = 4


class TextureError(Exception):
    """Raised when a texture cannot be built or loaded."""


def convert_rgb(r: int, g: int, b: int) -> int:
    """Pack an opaque colour into a 32-bit RGBA integer."""
    return ((r << 24) | (g << 16) | (b << 8) | 255) & 0xFFFFFFFF


@dataclass(frozen=True)
class Texture:
    """A width by height image stored as row-major RGBA bytes."""

    width: int
    height: int
    pixels: bytes

    def __post_init__(self) -> None:
        expected = self.width * self.height * BYTES_PER_PIXEL
        if self.width < 0 or self.height < 0 or len(self.pixels) != expected:
            raise TextureError(
                f"pixel data of {len(self.pixels)} bytes does not match "
                f"{self.width}x{self.height} RGBA"
            )

    def pixel(self, x: int, y: int) -> int:
        """Return the packed RGBA value at (x, y), or 0 outside the image."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            return 0
        pos = (y * self.width + x) * BYTES_PER_PIXEL
        r, g, b, a = self.pixels[pos:pos + BYTES_PER_PIXEL]
        return (r << 24) | (g << 16) | (b << 8) | a


def load_texture(path) -> Texture:
    """Load an image file as an RGBA texture."""
    try:
        with Image.open(path) as image:
            rgba = image.convert("RGBA")
            return Texture(rgba.width, rgba.height, rgba.tobytes())
    except OSError as exc:
        raise TextureError(f"Error loading texture: {path}") from exc