"""Game state: player movement, shooting, enemies, pickups and objectives."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass

from .elements import (
    ENEMY_ATKSPEED,
    ENEMY_DAMAGE,
    FULL_HEALTH,
    PLAYER_DAMAGE,
    POTION_HEALTH,
    Element,
    ElementState,
    ElementType,
)
from .frame import WINDOW_HEIGHT, WINDOW_WIDTH
from .scene import Scene
from .vector import Vector

MOVE_SPEED = 0.04
ROTATE_SPEED = 2.8
SENSITIVITY = 0.02
SPRINT_MULTIPLIER = 2
HIT_FLASH_MS = 100
SHOT_ANIMATION_MS = 500
BEAM_FACTOR = 0.8
ENEMY_DEPTH_MARGIN = 0.5

GAME_OVER_TEXT = "GAME OVER"
VICTORY_TEXT = "DUNGEON COMPLETE"
WELCOME_TEXT = "WELCOME TO CUB3D"
CONTINUE_TEXT = "Press ENTER to continue"
START_TEXT = "Press ENTER to START"

_INITIAL_VIEW = {
    "N": (Vector(0, -1), Vector(0.66, 0)),
    "S": (Vector(0, 1), Vector(-0.66, 0)),
    "W": (Vector(-1, 0), Vector(0, -0.66)),
    "E": (Vector(1, 0), Vector(0, 0.66)),
}


def now_ms() -> int:
    """Return the wall-clock time in milliseconds."""
    return int(time.time() * 1000)


@dataclass
class Keys:
    """Which controls are currently held down."""

    w: bool = False
    a: bool = False
    s: bool = False
    d: bool = False
    left: bool = False
    right: bool = False
    shift: bool = False
    mouse_left: bool = False


class Game:
    """The mutable state of one play session on a scene."""

    def __init__(self, scene: Scene) -> None:
        if scene.pov not in _INITIAL_VIEW:
            raise ValueError(f"unknown starting direction {scene.pov!r}")
        self.scene = scene
        self.grid = scene.grid
        self.elements: list[Element] = scene.elements
        self.total_items = scene.total_items
        self.item_count = 0
        self.player_health = FULL_HEALTH
        self.player_initial_pos = scene.player_pos
        self.player_pos = scene.player_pos
        direction, plane = _INITIAL_VIEW[scene.pov]
        self.player_initial_dir = direction
        self.player_initial_plane = plane
        self.player_dir = direction
        self.camera_plane = plane
        self.keys = Keys()
        self.screen_width = WINDOW_WIDTH
        self.screen_height = WINDOW_HEIGHT
        self.z_buffer: list[float] = [0.0] * WINDOW_WIDTH
        self.minimap = False
        self.minimap_enemies = False
        self.menu_active = False
        self.game_won = False
        self.game_lost = False
        self.message: str | None = None
        self.continue_message: str | None = None

    # Movement -----------------------------------------------------------

    def _is_wall(self, x: float, y: float) -> bool:
        return self.grid[int(y)][int(x)] == "1"

    def _try_move(self, direction: Vector, speed: float) -> None:
        new_x = self.player_pos.x + direction.x * speed
        new_y = self.player_pos.y + direction.y * speed
        x, y = self.player_pos.x, self.player_pos.y
        if not self._is_wall(new_x, y):
            x += direction.x * speed
        if not self._is_wall(x, new_y):
            y += direction.y * speed
        self.player_pos = Vector(x, y)

    def _rotate(self, degrees: float) -> None:
        self.player_dir = self.player_dir.rotated(degrees)
        self.camera_plane = self.camera_plane.rotated(degrees)

    def move_player(self) -> None:
        """Apply held movement and turning keys for one frame."""
        speed = MOVE_SPEED * SPRINT_MULTIPLIER if self.keys.shift else MOVE_SPEED
        if self.keys.w:
            self._try_move(self.player_dir, speed)
        if self.keys.s:
            self._try_move(self.player_dir, -speed)
        if self.keys.a:
            self._try_move(self.camera_plane, -speed)
        if self.keys.d:
            self._try_move(self.camera_plane, speed)
        if self.keys.left:
            self._rotate(-ROTATE_SPEED)
        if self.keys.right:
            self._rotate(ROTATE_SPEED)

    def rotate_by_mouse(self, delta_x: int) -> None:
        """Turn the view by a horizontal mouse movement in pixels."""
        if delta_x != 0:
            self._rotate(delta_x * SENSITIVITY)

    # Shooting -----------------------------------------------------------

    def _transform(self, element: Element) -> tuple[float, float]:
        d, p = self.player_dir, self.camera_plane
        inv_det = 1.0 / (p.x * d.y - d.x * p.y)
        rel_x = element.x - self.player_pos.x
        rel_y = element.y - self.player_pos.y
        tr_x = inv_det * (d.y * rel_x - d.x * rel_y)
        tr_y = inv_det * (-p.y * rel_x + p.x * rel_y)
        return tr_x, tr_y

    def check_target(self, index: int) -> float | None:
        """Return the depth of element ``index`` if it is under the crosshair."""
        element = self.elements[index]
        if not element.alive:
            return None
        tr_x, tr_y = self._transform(element)
        if tr_y <= 0.0:
            return None
        half = self.screen_width // 2
        sprite_x = int(half * (1 + tr_x / tr_y))
        margin = int((self.screen_height / tr_y) * BEAM_FACTOR) // 2
        if abs(sprite_x - half) > margin:
            return None
        if element.kind is ElementType.ENEMY and not (
            tr_y - ENEMY_DEPTH_MARGIN < self.z_buffer[half]
        ):
            return None
        return tr_y

    def shoot(self, now: int) -> Element | None:
        """Fire at the nearest target; damage it if it is an enemy."""
        best: Element | None = None
        best_depth = math.inf
        for index, element in enumerate(self.elements):
            depth = self.check_target(index)
            if depth is not None and depth < best_depth:
                best, best_depth = element, depth
        if best is None or best.kind is not ElementType.ENEMY:
            return None
        best.health -= PLAYER_DAMAGE
        best.got_hit = True
        best.state = ElementState.HIT
        best.last_hit_time = now
        if best.health <= 0:
            best.alive = False
            self.grid[int(best.y)][int(best.x)] = "0"
        return best

    def reset_hit_textures(self, now: int) -> None:
        """End the hit flash of elements struck more than a moment ago."""
        for element in self.elements:
            if now - element.last_hit_time > HIT_FLASH_MS:
                element.got_hit = False
                if element.state is ElementState.HIT:
                    element.state = ElementState.IDLE

    # Enemies ------------------------------------------------------------

    def _update_enemy_animation(self, enemy: Element, now: int) -> None:
        if enemy.shooting and now - enemy.last_shot_time >= SHOT_ANIMATION_MS:
            enemy.state = ElementState.IDLE
            enemy.shooting = False

    def _update_enemy_shooting(self, enemy: Element, now: int) -> None:
        if not enemy.alive:
            return
        if not enemy.visible:
            enemy.first_visible_time = 0
        if enemy.first_visible_time == 0:
            enemy.first_visible_time = now
            return
        if now - enemy.first_visible_time < ENEMY_ATKSPEED:
            return
        if now - enemy.last_shot_time < ENEMY_ATKSPEED:
            return
        if self.menu_active or self.game_won or self.game_lost:
            return
        if enemy.visible:
            enemy.state = ElementState.SHOOTING
            self.player_health -= ENEMY_DAMAGE
            enemy.shooting = True
        enemy.last_shot_time = now

    def enemy_shots(self, now: int) -> None:
        """Let living enemies that see the player fire at their rate."""
        for element in self.elements:
            if element.alive and element.kind is ElementType.ENEMY:
                self._update_enemy_animation(element, now)
                self._update_enemy_shooting(element, now)

    # Pickups and objectives ---------------------------------------------

    def _collect(self, kind: ElementType) -> Element | None:
        for element in self.elements:
            if (
                element.kind is kind
                and element.health > 0
                and element.is_close_to(self.player_pos)
            ):
                element.health = 0
                element.alive = False
                self.grid[int(element.y)][int(element.x)] = "0"
                return element
        return None

    def detect_potion(self) -> None:
        """Drink the first potion within reach."""
        for element in self.elements:
            if (
                element.kind is ElementType.HEALTH
                and element.health > 0
                and element.is_close_to(self.player_pos)
            ):
                self.player_health += element.health
                element.health = 0
                element.alive = False
                self.grid[int(element.y)][int(element.x)] = "0"
                return

    def check_player_life(self) -> None:
        """Pick up potions, cap health and end the game when it runs out."""
        self.detect_potion()
        if self.player_health > FULL_HEALTH:
            self.player_health = FULL_HEALTH
        if self.player_health > 0:
            return
        self.player_health = 0
        self.message = GAME_OVER_TEXT
        self.continue_message = CONTINUE_TEXT
        self.game_lost = True

    def detect_item(self) -> None:
        """Collect the first item within reach."""
        if self._collect(ElementType.ITEM) is not None:
            self.item_count += 1

    def count_enemies(self) -> int:
        """Return the number of enemies with health left."""
        return sum(
            e.kind is ElementType.ENEMY and e.health > 0 for e in self.elements
        )

    def objective_check(self) -> None:
        """Collect items and declare victory once enemies and items are done."""
        self.detect_item()
        remaining = self.count_enemies()
        if remaining == 0 and self.item_count == 0:
            return
        if remaining > 0:
            return
        if self.item_count < self.total_items:
            return
        self.message = VICTORY_TEXT
        self.continue_message = CONTINUE_TEXT
        self.game_won = True

    # Session control ----------------------------------------------------

    def reset(self) -> None:
        """Revive elements and put the player back at the start."""
        for element in self.elements:
            element.alive = True
            if element.kind is ElementType.HEALTH:
                element.health = POTION_HEALTH
            elif element.kind in (ElementType.ENEMY, ElementType.ITEM):
                element.health = FULL_HEALTH
        self.player_health = FULL_HEALTH
        self.item_count = 0
        self.game_won = False
        self.game_lost = False
        self.player_dir = self.player_initial_dir
        self.camera_plane = self.player_initial_plane
        self.player_pos = self.player_initial_pos

    def press_enter(self) -> None:
        """Leave the menu, or open it after the game has ended."""
        if self.menu_active:
            self.message = None
            self.continue_message = None
            self.menu_active = False
            self.game_won = False
            self.game_lost = False
        elif self.game_won or self.game_lost:
            self.message = WELCOME_TEXT
            self.continue_message = START_TEXT
            self.reset()
            self.menu_active = True

    def update(self, now: int) -> None:
        """Advance the game logic by one frame."""
        self.check_player_life()
        self.reset_hit_textures(now)
        self.objective_check()
        self.move_player()
        self.enemy_shots(now)