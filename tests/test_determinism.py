"""Test that the engine produces deterministic results."""
from engine.engine import Engine
from engine.mapfile import parse_lines
from engine.model import Faction

def make_test_lines():
    """A mid-sized battle with several routes to each enemy."""
    return [
        "#########",
        "#G......#",
        "#.E.#...#",
        "#..##..G#",
        "#...##..#",
        "#...#...#",
        "#.G...G.#",
        "#.....G.#",
        "#########",
    ]

def test_engine_determinism():
    """Same board should produce identical rounds, events and outcome."""
    eng1 = Engine(parse_lines(make_test_lines()))
    eng2 = Engine(parse_lines(make_test_lines()))

    while not eng1.is_over():
        events1 = eng1.step()
        events2 = eng2.step()

        assert eng1.snapshot() == eng2.snapshot()
        assert len(events1) == len(events2)
        for e1, e2 in zip(events1, events2):
            assert e1.kind == e2.kind
            assert e1.round_num == e2.round_num
            assert e1.data == e2.data

    assert eng2.is_over()
    assert eng1.outcome() == eng2.outcome()
    assert eng1.outcome().total == 18740

def test_attack_power_changes_result():
    """An elf that kills with every blow wins where the default one loses."""
    weak = Engine(parse_lines(make_test_lines())).run()
    strong_engine = Engine(parse_lines(make_test_lines(), attack_power={Faction.ELF: 200}))
    strong = strong_engine.run()

    assert weak != strong
    assert strong_engine.snapshot().factions() == {Faction.ELF}
