import numpy as np
import pytest
from PIL import Image

from raydungeon.app import check_args, load_assets, main, render_frame
from raydungeon.elements import ElementState, ElementType
from raydungeon.frame import BLACK, Frame
from raydungeon.game import Game
from raydungeon.scene import parse_scene
from raydungeon.texture import TextureError, convert_rgb
from raydungeon.vector import Direction

SCENE_TEXT = """NO ./n.png
SO ./s.png
WE ./w.png
EA ./e.png
EH ./eh.png
ES ./es.png
EI ./ei.png
IT ./it.png
HE ./he.png
F 10,20,30
C 40,50,60

111111
1N0X01
1000I1
111111
"""

COLOURS = {
    "n.png": (200, 0, 0),
    "s.png": (0, 200, 0),
    "w.png": (0, 0, 200),
    "e.png": (200, 200, 0),
    "eh.png": (10, 0, 0),
    "es.png": (20, 0, 0),
    "ei.png": (30, 0, 0),
    "it.png": (40, 0, 0),
    "he.png": (50, 0, 0),
    "wand.png": (60, 0, 0),
    "wand_shooting.png": (70, 0, 0),
}


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    for name, rgb in COLOURS.items():
        size = (4, 8) if name.startswith("wand") else (4, 4)
        Image.new("RGBA", size, rgb + (255,)).save(tmp_path / name)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _assets(scene):
    return load_assets(scene, "./wand.png", "./wand_shooting.png")


def test_check_args_returns_single_path():
    assert check_args(["maps/a.cub"]) == "maps/a.cub"


def test_check_args_rejects_wrong_counts():
    with pytest.raises(ValueError, match="Too few arguments"):
        check_args([])
    with pytest.raises(ValueError, match="Too many arguments"):
        check_args(["a.cub", "b.cub"])


def test_load_assets_reads_every_texture(workdir):
    scene = parse_scene(SCENE_TEXT)
    assets = _assets(scene)
    assert assets.walls[Direction.NORTH].pixel(0, 0) == convert_rgb(*COLOURS["n.png"])
    assert assets.walls[Direction.EAST].pixel(0, 0) == convert_rgb(*COLOURS["e.png"])
    assert assets.weapon.pixel(0, 0) == convert_rgb(*COLOURS["wand.png"])
    assert set(assets.sprites) == {ElementType.ENEMY, ElementType.ITEM}


def test_element_texture_follows_state(workdir):
    scene = parse_scene(SCENE_TEXT)
    assets = _assets(scene)
    enemy = next(e for e in scene.elements if e.kind is ElementType.ENEMY)
    enemy.state = ElementState.HIT
    assert assets.element_texture(enemy).pixel(0, 0) == convert_rgb(*COLOURS["eh.png"])
    enemy.state = ElementState.SHOOTING
    assert assets.element_texture(enemy).pixel(0, 0) == convert_rgb(*COLOURS["es.png"])
    item = next(e for e in scene.elements if e.kind is ElementType.ITEM)
    item.state = ElementState.SHOOTING
    assert assets.element_texture(item).pixel(0, 0) == convert_rgb(*COLOURS["it.png"])


def test_missing_enemy_texture_raises(workdir):
    (workdir / "eh.png").unlink()
    with pytest.raises(TextureError, match="ENEMY"):
        _assets(parse_scene(SCENE_TEXT))


def test_missing_weapon_texture_raises(workdir):
    with pytest.raises(TextureError, match="weapon"):
        load_assets(parse_scene(SCENE_TEXT), "./nope.png", "./wand_shooting.png")


def test_render_frame_draws_walls_floor_and_depths(workdir):
    scene = parse_scene(SCENE_TEXT)
    game = Game(scene)
    frame = Frame(64, 48)
    render_frame(frame, game, _assets(scene))
    assert frame.get_pixel(0, 0) == convert_rgb(*COLOURS["n.png"])
    assert frame.get_pixel(0, 47) == scene.metadata.floor
    assert len(game.z_buffer) == frame.width
    assert all(depth > 0 for depth in game.z_buffer)


def test_render_frame_shows_shooting_weapon(workdir):
    scene = parse_scene(SCENE_TEXT)
    game = Game(scene)
    assets = _assets(scene)
    frame = Frame(64, 48)
    render_frame(frame, game, assets)
    assert frame.get_pixel(33, 36) == convert_rgb(*COLOURS["wand.png"])
    game.keys.mouse_left = True
    render_frame(frame, game, assets)
    assert frame.get_pixel(33, 36) == convert_rgb(*COLOURS["wand_shooting.png"])


def test_render_frame_blacks_out_when_game_over(workdir):
    scene = parse_scene(SCENE_TEXT)
    game = Game(scene)
    game.game_lost = True
    frame = Frame(64, 48)
    render_frame(frame, game, _assets(scene))
    assert frame.get_pixel(0, 0) == BLACK
    assert frame.get_pixel(33, 36) == BLACK
    assert frame.get_pixel(63, 47) == BLACK
    data = np.frombuffer(frame.to_rgba_bytes(), dtype=np.uint8).reshape(48, 64, 4)
    assert np.array_equal(data[..., :3], np.zeros((48, 64, 3), dtype=np.uint8))


def test_main_without_arguments_fails(capsys):
    assert main([]) == 1
    assert "Too few arguments" in capsys.readouterr().out


def test_main_with_too_many_arguments_fails(capsys):
    assert main(["a.cub", "b.cub"]) == 1
    assert "Too many arguments" in capsys.readouterr().out


def test_main_rejects_bad_extension(capsys):
    assert main(["map.txt"]) == 1
    assert "extension" in capsys.readouterr().out


def test_main_reports_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "absent.cub")]) == 1
    assert "failed to open file" in capsys.readouterr().out


def test_main_reports_missing_textures(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "level.cub").write_text(SCENE_TEXT, encoding="utf-8")
    assert main(["level.cub"]) == 1
    assert "weapon" in capsys.readouterr().out


def test_frame_pixels_are_packed_rgba(workdir):
    scene = parse_scene(SCENE_TEXT)
    game = Game(scene)
    frame = Frame(64, 48)
    render_frame(frame, game, _assets(scene))
    data = np.frombuffer(frame.to_rgba_bytes(), dtype=np.uint8).reshape(48, 64, 4)
    assert tuple(data[0, 0]) == COLOURS["n.png"] + (255,)