from dataclasses import dataclass, field, replace
from enum import Enum
from functools import total_ordering
from typing import Dict, FrozenSet, Iterator, List, Optional, Set
import numpy as np

DEFAULT_HP = 200
DEFAULT_ATTACK_POWER = 3

class BoardError(ValueError):
    """Map text or initial board that cannot be simulated."""

class TurnOrderError(RuntimeError):
    """Round bookkeeping lost track of a unit."""

class StalemateError(RuntimeError):
    """Both factions remain but a full round changed nothing."""

    def __init__(self, message: str, events: Optional[List["Event"]] = None):
        super().__init__(message)
        self.events = events or []

class Cell(Enum):
    """Terrain of one grid square"""
    WALL = "#"
    OPEN = "."

class Faction(Enum):
    """Side a unit fights for"""
    ELF = "E"
    GOBLIN = "G"

    @property
    def letter(self) -> str:
        return self.value

@dataclass(frozen=True)
class FactionDefaults:
    """Starting statistics for every unit of a faction"""
    name: str
    hp: int
    attack_power: int

# Per-faction defaults, keyed by map letter
FACTIONS = {
    "E": FactionDefaults(name="Elf", hp=DEFAULT_HP, attack_power=DEFAULT_ATTACK_POWER),
    "G": FactionDefaults(name="Goblin", hp=DEFAULT_HP, attack_power=DEFAULT_ATTACK_POWER),
}

@total_ordering
@dataclass(frozen=True)
class Position:
    """Grid coordinate. Sorts in reading order: top-to-bottom, then left-to-right."""
    x: int
    y: int

    def __lt__(self, other: "Position") -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (self.y, self.x) < (other.y, other.x)

    def neighbors(self) -> Iterator["Position"]:
        """Orthogonal neighbours in reading order (may fall outside the grid)."""
        yield Position(self.x, self.y - 1)
        yield Position(self.x - 1, self.y)
        yield Position(self.x + 1, self.y)
        yield Position(self.x, self.y + 1)

    def __str__(self) -> str:
        return f"{self.x},{self.y}"

@dataclass(frozen=True)
class Unit:
    faction: Faction
    position: Position
    hp: int = DEFAULT_HP
    attack_power: int = DEFAULT_ATTACK_POWER

    def is_adjacent(self, position: Position) -> bool:
        """True if this unit is directly above, below, left or right of position."""
        return abs(self.position.x - position.x) + abs(self.position.y - position.y) == 1

    def is_enemy_of(self, other: "Unit") -> bool:
        return self.faction is not other.faction

    def with_hp(self, hp: int) -> "Unit":
        return replace(self, hp=hp)

    def with_position(self, position: Position) -> "Unit":
        return replace(self, position=position)

    def describe(self) -> Dict:
        """Plain dict form used in events and API payloads"""
        return {"faction": self.faction.letter, "pos": [self.position.x, self.position.y],
                "hp": self.hp, "attack_power": self.attack_power}

@dataclass(frozen=True, eq=False)
class Board:
    """Wall layout plus the set of living units.

    ``cells`` is a read-only 2D array of cell characters (``#`` or ``.``), indexed
    ``[y, x]``. Unit occupancy is never written into it.
    """
    cells: np.ndarray
    units: FrozenSet[Unit] = field(default_factory=frozenset)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return np.array_equal(self.cells, other.cells) and self.units == other.units

    @property
    def height(self) -> int:
        return int(self.cells.shape[0])

    @property
    def width(self) -> int:
        return int(self.cells.shape[1])

    def factions(self) -> Set[Faction]:
        return {u.faction for u in self.units}

    def is_over(self) -> bool:
        """Whether at most one faction has units left."""
        return len(self.factions()) <= 1

    def total_hp(self) -> int:
        return sum(u.hp for u in self.units)

    def count(self, faction: Faction) -> int:
        return sum(1 for u in self.units if u.faction is faction)

    def with_attack_power(self, faction: Faction, attack_power: int) -> "Board":
        """Same board with every unit of faction hitting for attack_power."""
        units = frozenset(replace(u, attack_power=attack_power) if u.faction is faction else u
                          for u in self.units)
        return Board(self.cells, units)

    def unit_at(self, position: Position):
        for u in self.units:
            if u.position == position:
                return u
        return None

    def in_reading_order(self) -> List[Unit]:
        return sorted(self.units, key=lambda u: u.position)

@dataclass
class Event:
    kind: str
    round_num: int
    data: Dict

@dataclass
class Round:
    board: Board
    completed: bool
    events: List[Event] = field(default_factory=list)

@dataclass(frozen=True)
class Outcome:
    rounds: int  # Full rounds completed before combat ended
    hp: int  # Total hit points of the survivors
    total: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "total", self.rounds * self.hp)
