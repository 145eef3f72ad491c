"""Asset loading, frame composition and the interactive window."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Sequence

import pygame

from .elements import Element, ElementState, ElementType
from .frame import BLACK, WINDOW_HEIGHT, WINDOW_WIDTH, Frame
from .game import Game, now_ms
from .hud import draw_ui, draw_weapon
from .metadata import SceneError
from .raycast import draw_walls
from .scene import Scene, load_scene
from .sprites import render_elements
from .texture import Texture, TextureError, load_texture
from .vector import Direction

DEFAULT_WEAPON = "./assets/wand.png"
DEFAULT_WEAPON_SHOOTING = "./assets/wand_shooting.png"
WINDOW_TITLE = "Ray Dungeon"
FPS = 60

BPINK = "\033[1;35m"
RST = "\033[0m"

_REQUIRED_STATES = {
    ElementType.ENEMY: (ElementState.IDLE, ElementState.SHOOTING, ElementState.HIT),
}
_KEY_FLAGS = {
    pygame.K_LEFT: "left",
    pygame.K_RIGHT: "right",
    pygame.K_w: "w",
    pygame.K_s: "s",
    pygame.K_d: "d",
    pygame.K_a: "a",
    pygame.K_LSHIFT: "shift",
}
_ENTER_KEYS = (pygame.K_RETURN, pygame.K_KP_ENTER)
_LEFT_BUTTON = 1


@dataclass
class Assets:
    """Every texture the renderer needs."""

    walls: dict[Direction, Texture]
    weapon: Texture
    weapon_shooting: Texture
    sprites: dict[ElementType, dict[ElementState, Texture]]

    def element_texture(self, element: Element) -> Texture:
        """Return the texture matching the element's current state."""
        states = self.sprites[element.kind]
        texture = states.get(element.state)
        return texture if texture is not None else states[ElementState.IDLE]


def check_args(argv: Sequence[str]) -> str:
    """Return the single map path, or raise ValueError on a wrong count."""
    if len(argv) < 1:
        raise ValueError("Too few arguments: please provide a path to a map")
    if len(argv) > 1:
        raise ValueError("Too many arguments")
    return argv[0]


def load_assets(
    scene: Scene,
    weapon_path: str = DEFAULT_WEAPON,
    weapon_shooting_path: str = DEFAULT_WEAPON_SHOOTING,
) -> Assets:
    """Load the weapon, wall and element textures a scene refers to."""
    try:
        weapon = load_texture(weapon_path)
        weapon_shooting = load_texture(weapon_shooting_path)
    except TextureError as exc:
        raise TextureError("Error loading weapon textures") from exc
    walls = {
        direction: load_texture(scene.metadata.walls[direction])
        for direction in Direction
    }
    cache: dict[str, Texture] = {}
    sprites: dict[ElementType, dict[ElementState, Texture]] = {}
    for element in scene.elements:
        if element.kind in sprites:
            continue
        required = _REQUIRED_STATES.get(element.kind, (ElementState.IDLE,))
        try:
            if any(state not in element.texture_paths for state in required):
                raise TextureError("missing texture path")
            textures = {}
            for state, path in element.texture_paths.items():
                if path not in cache:
                    cache[path] = load_texture(path)
                textures[state] = cache[path]
        except TextureError as exc:
            raise TextureError(
                f"Error loading texture for {element.kind.name} element"
            ) from exc
        sprites[element.kind] = textures
    return Assets(walls, weapon, weapon_shooting, sprites)


def render_frame(frame: Frame, game: Game, assets: Assets) -> None:
    """Compose one complete picture of the game into ``frame``."""
    game.screen_width, game.screen_height = frame.width, frame.height
    metadata = game.scene.metadata
    frame.draw_background(metadata.ceiling, metadata.floor)
    z_buffer = draw_walls(
        frame,
        game.grid,
        game.player_pos,
        game.player_dir,
        game.camera_plane,
        assets.walls,
    )
    render_elements(
        frame,
        game.elements,
        assets.element_texture,
        game.player_pos,
        game.player_dir,
        game.camera_plane,
        z_buffer,
    )
    game.z_buffer = z_buffer
    draw_weapon(frame, assets.weapon_shooting if game.keys.mouse_left else assets.weapon)
    draw_ui(frame, game)
    if game.game_won or game.game_lost or game.menu_active:
        frame.fill(BLACK)


def _handle_event(game: Game, event: pygame.event.Event) -> bool:
    """Apply one window event; return False when the game should close."""
    if event.type == pygame.QUIT:
        return False
    if event.type == pygame.KEYDOWN:
        if event.key == pygame.K_ESCAPE:
            return False
        if event.key == pygame.K_m:
            game.minimap = not game.minimap
        elif event.key == pygame.K_i:
            game.minimap_enemies = not game.minimap_enemies
        elif event.key in _ENTER_KEYS:
            game.press_enter()
        if event.key in _KEY_FLAGS:
            setattr(game.keys, _KEY_FLAGS[event.key], True)
    elif event.type == pygame.KEYUP:
        if event.key == pygame.K_ESCAPE:
            return False
        if event.key in _KEY_FLAGS:
            setattr(game.keys, _KEY_FLAGS[event.key], False)
    elif event.type == pygame.MOUSEBUTTONDOWN and event.button == _LEFT_BUTTON:
        game.shoot(now_ms())
        game.keys.mouse_left = True
    elif event.type == pygame.MOUSEBUTTONUP and event.button == _LEFT_BUTTON:
        game.keys.mouse_left = False
    return True


def _draw_messages(screen: pygame.Surface, font: pygame.font.Font, game: Game) -> None:
    placements = (
        (game.message, WINDOW_HEIGHT // 2 - 10),
        (game.continue_message, WINDOW_HEIGHT - WINDOW_HEIGHT // 10),
    )
    for text, top in placements:
        if text:
            rendered = font.render(text, True, (255, 255, 255))
            screen.blit(rendered, ((WINDOW_WIDTH - rendered.get_width()) // 2, top))


def _run_window(game: Game, assets: Assets) -> None:
    pygame.init()
    try:
        screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        pygame.display.set_caption(WINDOW_TITLE)
        pygame.mouse.set_visible(False)
        pygame.event.set_grab(True)
        pygame.mouse.get_rel()
        font = pygame.font.Font(None, 32)
        frame = Frame(WINDOW_WIDTH, WINDOW_HEIGHT)
        clock = pygame.time.Clock()
        running = True
        while running:
            for event in pygame.event.get():
                if not _handle_event(game, event):
                    running = False
            if not running:
                break
            game.update(now_ms())
            render_frame(frame, game, assets)
            game.rotate_by_mouse(pygame.mouse.get_rel()[0])
            surface = pygame.image.frombuffer(
                frame.to_rgba_bytes(), (frame.width, frame.height), "RGBA"
            )
            screen.blit(surface, (0, 0))
            _draw_messages(screen, font, game)
            pygame.display.flip()
            clock.tick(FPS)
    finally:
        pygame.quit()


def main(argv: Sequence[str] | None = None) -> int:
    """Load the scene named on the command line and play it."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        path = check_args(args)
        scene = load_scene(path)
        assets = load_assets(scene)
        game = Game(scene)
    except (ValueError, SceneError, TextureError) as exc:
        print(f"{BPINK}Error: {exc}{RST}")
        return 1
    _run_window(game, assets)
    return 0