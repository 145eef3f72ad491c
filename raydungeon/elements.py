"""Sprites placed on the map: enemies, items and health potions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum

from .vector import Vector

ENEMY_DAMAGE = 11
ENEMY_ATKSPEED = 1300
PLAYER_DAMAGE = 50
POTION_HEALTH = 25
FULL_HEALTH = 100
CLOSE_DISTANCE_SQ = 1.0


class ElementType(IntEnum):
    """What a map element is."""

    ENEMY = 1
    HEALTH = 2
    ITEM = 3
    EXIT = 4


class ElementState(Enum):
    """Which texture an element currently shows."""

    IDLE = "idle"
    SHOOTING = "shooting"
    HIT = "hit"


@dataclass
class Element:
    """A sprite standing in the middle of a map cell."""

    kind: ElementType
    x: float
    y: float
    index: int = 0
    health: int = FULL_HEALTH
    alive: bool = True
    distance: float = 0.0
    dist_rank: int = 0
    visible: bool = False
    shooting: bool = False
    got_hit: bool = False
    state: ElementState = ElementState.IDLE
    last_hit_time: int = 0
    last_shot_time: int = 0
    first_visible_time: int = 0
    texture_paths: dict[ElementState, str] = field(default_factory=dict)

    def is_close_to(self, position: Vector) -> bool:
        """Store the squared distance to ``position`` and tell if it is under one."""
        dx = self.x - position.x
        dy = self.y - position.y
        self.distance = dx * dx + dy * dy
        return self.distance < CLOSE_DISTANCE_SQ