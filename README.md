# raydungeon

A first-person dungeon shooter drawn with a grid raycaster.
Levels are plain-text `.cub` scene files that name the wall textures,
the enemy and pickup sprites, the ceiling and floor colours, and hold
the map grid.

## Installing

```
pip install .
```

## Playing

```
raydungeon path/to/level.cub
```

Exactly one argument is expected, and it must end in `.cub`. On a bad
argument, an unreadable or invalid scene, or a texture that cannot be
loaded, the command prints the error and exits with status 1.

The weapon sprites are read from `./assets/wand.png` and
`./assets/wand_shooting.png`, relative to the working directory.
The game opens a 1900x1200 window titled "Ray Dungeon", hides and
grabs the mouse, and runs at up to 60 frames per second.

### Controls

| Key / input        | Action                              |
|--------------------|-------------------------------------|
| W / S              | move forward / backward             |
| A / D              | strafe left / right                 |
| Left / Right arrow | turn                                |
| Mouse movement     | turn                                |
| Left Shift         | sprint (double speed)               |
| Left mouse button  | shoot                               |
| M                  | toggle the minimap                  |
| I                  | show enemies on the minimap         |
| Enter              | restart after the game ends / start |
| Escape             | quit                                |

### Rules

- Each shot takes 50 health from the nearest enemy under the crosshair;
  enemies start with 100.
- An enemy that has seen you for 1.3 seconds fires every 1.3 seconds
  while it stays visible, for 11 damage each time.
- Walking onto a health potion (`H`) restores 25 health, up to 100.
- Walking onto an item (`I`) collects it; the bar at the top of the
  screen shows how many of them you have.
- The dungeon is complete once every enemy is dead and every item is
  collected. At 0 health the game is over. Either way the screen turns
  black with a message; Enter shows the welcome screen and resets the
  level, and Enter again starts playing.

The minimap sits in the lower-left corner: walls are white, items
blue, potions green, enemies red (when shown with I) and the player
yellow.

## Scene files

Before the map, each non-empty line sets one value. Texture paths must
start with `./` and name an image file Pillow can open. Colours are
three comma-separated decimal numbers.

```
NO ./textures/north.png
SO ./textures/south.png
EA ./textures/east.png
WE ./textures/west.png
EH ./textures/enemy_hit.png
ES ./textures/enemy_shooting.png
EI ./textures/enemy_idle.png
IT ./textures/item.png
HE ./textures/potion.png
F 90,60,30
C 120,180,255
```

All eleven entries are required, each exactly once. The map follows:

```
111111
1N0X01
10I0H1
111111
```

Map characters:

- `1` wall, `0` floor, space for outside the map
- `N`, `S`, `E`, `W` the player's start and facing (exactly one)
- `X` enemy, `I` collectable item, `H` health potion

Every walkable cell must be enclosed by walls, and empty lines inside
the map are rejected.

## Using the library

```python
from raydungeon.scene import load_scene
from raydungeon.game import Game, now_ms

scene = load_scene("level.cub")
game = Game(scene)
game.update(now_ms())
print(game.count_enemies(), game.player_health)
```

`raydungeon.scene.parse_scene` validates scene text without a file.
Invalid scenes raise `raydungeon.metadata.SceneError` with a message
describing the problem.

A picture can be drawn without opening a window:

```python
from raydungeon.app import load_assets, render_frame
from raydungeon.frame import Frame

frame = Frame(640, 400)
render_frame(frame, game, load_assets(scene))
data = frame.to_rgba_bytes()
```

`load_assets` raises `raydungeon.texture.TextureError` when a texture
cannot be loaded.

## Running the tests

```
pip install .[test]
pytest
```