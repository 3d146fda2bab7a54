"""Text form of a board.

A map is a rectangle of ``#`` (wall), ``.`` (open), ``E`` (elf) and ``G``
(goblin). Any line may be followed by whitespace and HP annotations for the
units on it, in left-to-right order::

    #..GEG#   G(200), E(188), G(194)

Units without an annotation start with their faction's default HP.
"""
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union
import numpy as np
from .model import FACTIONS, Board, BoardError, Cell, Faction, Position, Unit

_ROW = re.compile(r"^(\S*)\s*(.*)$")
_ANNOTATION = re.compile(r"([A-Z])\((\d+)\)")
_TERRAIN = {c.value for c in Cell}

def _parse_row(y: int, terrain: str, notes: str, attack_power: Dict[Faction, int]) -> List[Unit]:
    units: List[Unit] = []
    for x, ch in enumerate(terrain):
        if ch in FACTIONS:
            faction = Faction(ch)
            defaults = FACTIONS[ch]
            units.append(Unit(faction, Position(x, y), defaults.hp,
                              attack_power.get(faction, defaults.attack_power)))
        elif ch not in _TERRAIN:
            raise BoardError(f"Unknown map character {ch!r} at {x},{y}")

    tokens = _ANNOTATION.findall(notes)
    if notes.strip() and not tokens:
        raise BoardError(f"Unreadable HP annotation on line {y}: {notes!r}")
    if len(tokens) > len(units):
        raise BoardError(f"Line {y} has {len(tokens)} HP annotations for {len(units)} units")
    for i, (letter, hp) in enumerate(tokens):
        if letter != units[i].faction.letter:
            raise BoardError(f"HP annotation {letter}({hp}) on line {y} does not match unit {units[i].faction.letter}")
        units[i] = units[i].with_hp(int(hp))
    return units

def parse_lines(lines: Iterable[str], attack_power: Optional[Dict[Faction, int]] = None) -> Board:
    """Build a board from map lines, optionally overriding attack power per faction."""
    rows = [line.rstrip("\r\n") for line in lines]
    while rows and not rows[-1].strip():
        rows.pop()
    if not rows:
        raise BoardError("Map is empty")

    overrides = attack_power or {}
    terrain_rows: List[str] = []
    units: List[Unit] = []
    for y, line in enumerate(rows):
        terrain, notes = _ROW.match(line).groups()
        if terrain_rows and len(terrain) != len(terrain_rows[0]):
            raise BoardError(f"Line {y} is {len(terrain)} wide, expected {len(terrain_rows[0])}")
        units.extend(_parse_row(y, terrain, notes, overrides))
        terrain_rows.append(terrain)

    if not terrain_rows[0]:
        raise BoardError("Map has no columns")

    cells = np.array([list(row) for row in terrain_rows], dtype="<U1")
    cells[np.isin(cells, list(FACTIONS))] = Cell.OPEN.value
    cells.setflags(write=False)
    return Board(cells, frozenset(units))

def parse(text: str, attack_power: Optional[Dict[Faction, int]] = None) -> Board:
    return parse_lines(text.splitlines(), attack_power)

def load(path: Union[str, Path], attack_power: Optional[Dict[Faction, int]] = None) -> Board:
    """Read a map file from disk."""
    return parse(Path(path).read_text(encoding="utf-8"), attack_power)

def render(board: Board, annotate: bool = False) -> str:
    """Draw the board back as map text, units shown by faction letter.

    With ``annotate`` each row carrying units is followed by their HP, in the
    same format ``parse_lines`` reads.
    """
    by_row: Dict[int, List[Unit]] = {}
    for u in board.in_reading_order():
        by_row.setdefault(u.position.y, []).append(u)

    out = []
    for y in range(board.height):
        row = [str(c) for c in board.cells[y]]
        on_row = by_row.get(y, [])
        for u in on_row:
            row[u.position.x] = u.faction.letter
        line = "".join(row)
        if annotate and on_row:
            line += "   " + ", ".join(f"{u.faction.letter}({u.hp})" for u in on_row)
        out.append(line)
    return "\n".join(out) + "\n"
