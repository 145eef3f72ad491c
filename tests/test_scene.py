import pytest

from raydungeon.elements import POTION_HEALTH, ElementState, ElementType
from raydungeon.metadata import SceneError
from raydungeon.scene import (
    check_enclosed,
    check_extension,
    check_map_chars,
    check_player_count,
    count_items,
    find_map_start,
    is_valid_char,
    load_scene,
    locate_entities,
    pad_rows,
    parse_scene,
)
from raydungeon.metadata import Metadata
from raydungeon.vector import Vector

HEADER = (
    "NO ./n.png\n"
    "SO ./s.png\n"
    "WE ./w.png\n"
    "EA ./e.png\n"
    "EH ./eh.png\n"
    "ES ./es.png\n"
    "EI ./ei.png\n"
    "IT ./it.png\n"
    "HE ./he.png\n"
    "F 10,20,30\n"
    "C 40,50,60\n"
    "\n"
)

MAP = "111111\n1N0XI1\n10H0I1\n111111\n"


def scene_text(map_text=MAP):
    return HEADER + map_text


def test_parse_scene_player():
    scene = parse_scene(scene_text())
    assert scene.pov == "N"
    assert scene.player_pos == Vector(1.5, 1.5)
    assert scene.grid[1][1] == "0"


def test_parse_scene_elements_in_row_major_order():
    scene = parse_scene(scene_text())
    kinds = [e.kind for e in scene.elements]
    assert kinds == [
        ElementType.ENEMY,
        ElementType.ITEM,
        ElementType.HEALTH,
        ElementType.ITEM,
    ]
    assert [e.index for e in scene.elements] == list(range(len(kinds)))
    assert scene.total_items == kinds.count(ElementType.ITEM)


def test_parse_scene_element_details():
    scene = parse_scene(scene_text())
    enemy, _, potion, _ = scene.elements
    assert (enemy.x, enemy.y) == (3.5, 1.5)
    assert potion.health == POTION_HEALTH
    assert enemy.texture_paths == {
        ElementState.IDLE: "./ei.png",
        ElementState.SHOOTING: "./es.png",
        ElementState.HIT: "./eh.png",
    }
    assert potion.texture_paths == {ElementState.IDLE: "./he.png"}


def test_parse_scene_rows_have_equal_width_and_keep_metadata():
    scene = parse_scene(scene_text())
    widths = {len(row) for row in scene.grid}
    assert len(widths) == 1
    assert len(scene.grid) == MAP.count("\n")
    assert scene.metadata.floor_rgb == (10, 20, 30)


def test_trailing_blank_lines_are_dropped():
    scene = parse_scene(scene_text(MAP + "\n   \n\n"))
    assert len(scene.grid) == MAP.count("\n")


def test_open_map_is_rejected():
    with pytest.raises(SceneError, match="surrounded"):
        parse_scene(scene_text("111111\n1N0XI1\n10H0I1\n110111\n"))


def test_two_players_are_rejected():
    with pytest.raises(SceneError, match="player"):
        parse_scene(scene_text("111111\n1NS0I1\n111111\n"))


def test_missing_player_is_rejected():
    with pytest.raises(SceneError, match="player"):
        parse_scene(scene_text("111111\n100001\n111111\n"))


def test_invalid_character_is_rejected():
    with pytest.raises(SceneError, match="invalid character"):
        parse_scene(scene_text("111111\n1NZ001\n111111\n"))


@pytest.mark.parametrize(
    "char, expected",
    [("1", True), ("0", True), (" ", True), ("X", True), ("W", True),
     ("\t", False), ("Z", False), ("2", False)],
)
def test_is_valid_char(char, expected):
    assert is_valid_char(char) is expected


def test_check_extension_accepts_cub():
    with pytest.raises(SceneError):
        check_extension("map.cube")
    with pytest.raises(SceneError):
        check_extension("map.cu")


def test_find_map_start():
    lines = ["NO ./a.png\n", "\n", "  1101\n", "1N01\n"]
    assert find_map_start(lines) == 2
    assert find_map_start(["NO ./a.png\n", "1N1\n"]) is None


def test_pad_rows_pads_and_trims():
    rows = pad_rows(["11\n", "1\n", "\n"])
    assert len(rows) == 2
    assert rows[0].startswith("11")
    assert rows[1].startswith("1")
    assert len(rows[0]) == len(rows[1]) == len("11\n")
    assert rows[1].strip() == "1"


def test_pad_rows_of_nothing():
    assert pad_rows([]) == []


def test_check_map_chars_empty_line_inside_map():
    with pytest.raises(SceneError, match="empty line"):
        check_map_chars(["111", "", "111"])


def test_check_enclosed_space_neighbour():
    with pytest.raises(SceneError, match="surrounded"):
        check_enclosed(["1111", "10 1", "1111"])


def test_check_player_count_rejects_many():
    with pytest.raises(SceneError):
        check_player_count(["1N1", "1S1"])


def test_count_items():
    assert count_items(["1I1", "I0I"]) == 3
    assert count_items(["111"]) == 0


def test_locate_entities_turns_player_into_floor():
    grid = [list("111"), list("1E1"), list("111")]
    pov, position, elements = locate_entities(grid, Metadata())
    assert pov == "E"
    assert position == Vector(1.5, 1.5)
    assert grid[1][1] == "0"
    assert elements == []


def test_load_scene_from_file(tmp_path):
    path = tmp_path / "level.cub"
    path.write_text(scene_text(), encoding="utf-8")
    scene = load_scene(path)
    assert scene.pov == "N"
    assert scene.total_items == 2


def test_load_scene_missing_file(tmp_path):
    with pytest.raises(SceneError, match="open"):
        load_scene(tmp_path / "absent.cub")


def test_load_scene_wrong_extension(tmp_path):
    path = tmp_path / "level.txt"
    path.write_text(scene_text(), encoding="utf-8")
    with pytest.raises(SceneError, match="extension"):
        load_scene(path)


def test_empty_file_is_rejected():
    with pytest.raises(SceneError, match="empty"):
        parse_scene("")