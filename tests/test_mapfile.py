import pytest
from engine.mapfile import load, parse, parse_lines, render
from engine.model import BoardError, Faction, Position, Unit

def test_parse_places_units_on_open_cells():
    board = parse_lines(["#####", "#.GE#", "#####"])

    assert board.units == frozenset({
        Unit(Faction.GOBLIN, Position(2, 1)),
        Unit(Faction.ELF, Position(3, 1)),
    })
    assert "".join(board.cells[1]) == "#...#"
    assert board.cells.shape == (3, 5)

def test_parse_hp_annotations_in_line_order():
    board = parse_lines([
        "#######",
        "#..GEG#   G(200), E(188), G(194)",
        "#.....#   ",
        "#######",
    ])
    hp = {u.position: u.hp for u in board.units}
    assert hp == {Position(3, 1): 200, Position(4, 1): 188, Position(5, 1): 194}

def test_partial_annotations_keep_defaults():
    board = parse_lines(["#####", "#EG.#   E(5)", "#####"])
    assert board.unit_at(Position(1, 1)).hp == 5
    assert board.unit_at(Position(2, 1)).hp == 200

def test_attack_power_override():
    board = parse_lines(["#####", "#EG.#", "#####"], attack_power={Faction.ELF: 15})
    assert board.unit_at(Position(1, 1)).attack_power == 15
    assert board.unit_at(Position(2, 1)).attack_power == 3

def test_parse_ignores_trailing_blank_lines():
    board = parse("###\n#E#\n###\n\n")
    assert board.height == 3

@pytest.mark.parametrize("lines, message", [
    (["#####", "#EX.#", "#####"], "Unknown map character"),
    (["#####", "#E.#", "#####"], "wide"),
    (["#####", "#EG.#   G(10), E(10)", "#####"], "does not match"),
    (["#####", "#EG.#   E(1), G(2), G(3)", "#####"], "annotations for"),
    (["#####", "#EG.#   lots of hp", "#####"], "Unreadable"),
    ([], "empty"),
    (["", ""], "empty"),
])
def test_malformed_maps_rejected(lines, message):
    with pytest.raises(BoardError, match=message):
        parse_lines(lines)

def test_render_annotated_reparses_to_same_board():
    lines = [
        "#######",
        "#..GEG#   G(200), E(188), G(194)",
        "#.#.#G#   G(194)",
        "#######",
    ]
    board = parse_lines(lines)
    assert render(board, annotate=True) == "\n".join(lines) + "\n"
    assert parse(render(board, annotate=True)) == board

def test_load_reads_file(tmp_path):
    path = tmp_path / "cave.txt"
    path.write_text("#####\n#E.G#\n#####\n", encoding="utf-8")

    board = load(path, attack_power={Faction.GOBLIN: 7})
    assert len(board.units) == 2
    assert board.unit_at(Position(3, 1)).attack_power == 7
