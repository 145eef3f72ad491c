"""First-person raycasting dungeon shooter played from .cub scene files."""

__version__ = "0.1.0"
__all__ = ["__version__"]