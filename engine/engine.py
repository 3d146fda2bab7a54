import heapq
from itertools import chain
from typing import Dict, List, Tuple
from .combat import select_target, strike
from .grid import passable
from .model import (DEFAULT_ATTACK_POWER, DEFAULT_HP, Board, BoardError, Event, Faction, Outcome, Position, Round,
                    StalemateError, TurnOrderError, Unit)
from .movement import next_position

def _xy(pos: Position) -> List[int]:
    return [pos.x, pos.y]

def _enemies(unit: Unit, acted: Dict[Position, Unit], waiting: Dict[Position, Unit]) -> List[Unit]:
    """Enemies of unit among units that have acted and units still waiting."""
    return [u for u in chain(acted.values(), waiting.values()) if u.is_enemy_of(unit)]

def _land_hit(target: Unit, hit: Unit, acted: Dict[Position, Unit], waiting: Dict[Position, Unit]) -> None:
    """Swap the damaged target into whichever collection holds it, or drop it if dead."""
    for units in (waiting, acted):
        if units.get(target.position) == target:
            if hit.hp > 0:
                units[target.position] = hit
            else:
                del units[target.position]
            return
    raise TurnOrderError(f"Attacked unit {target} is neither waiting nor done this round")

def play_round(board: Board, round_num: int = 0) -> Round:
    """Simulate one round on board and return the resulting board.

    Turn order is fixed by reading order at the start of the round. Each unit
    moves and attacks against the board as it stands at its turn, so it sees
    units that already acted at their new positions and waiting units where
    they started. ``completed`` is False when combat ended before every
    scheduled unit had its turn.
    """
    waiting: Dict[Position, Unit] = {u.position: u for u in board.units}
    acted: Dict[Position, Unit] = {}
    turn_order = list(waiting)
    heapq.heapify(turn_order)
    evts: List[Event] = []

    def result(completed: bool) -> Round:
        units = frozenset(chain(acted.values(), waiting.values()))
        return Round(Board(board.cells, units), completed, evts)

    while turn_order:
        unit = waiting.pop(heapq.heappop(turn_order), None)
        if unit is None:
            continue  # fell before its turn

        enemies = _enemies(unit, acted, waiting)
        if not enemies:
            # Nothing to fight: the round counts only if this was the last unit to act
            acted[unit.position] = unit
            completed = not waiting
            evts.append(Event("CombatEnded", round_num,
                              {"winner": unit.faction.letter, "completed": completed}))
            return result(completed)

        grid = passable(board.cells, chain(acted.values(), waiting.values(), (unit,)))
        new_pos = next_position(grid, unit, enemies)
        if new_pos != unit.position:
            evts.append(Event("UnitMoved", round_num,
                              {"faction": unit.faction.letter, "from": _xy(unit.position), "to": _xy(new_pos)}))
            unit = unit.with_position(new_pos)
        assert new_pos not in acted and new_pos not in waiting, f"{new_pos} already occupied"
        acted[new_pos] = unit

        target = select_target(new_pos, _enemies(unit, acted, waiting))
        if target is None:
            continue

        hit = strike(unit, target)
        _land_hit(target, hit, acted, waiting)
        evts.append(Event("Attack", round_num,
                          {"attacker": _xy(new_pos), "target": _xy(target.position),
                           "dmg": unit.attack_power, "hp": max(0, hit.hp)}))
        if hit.hp > 0:
            continue

        evts.append(Event("Destroyed", round_num,
                          {"faction": target.faction.letter, "pos": _xy(target.position), "killer": _xy(new_pos)}))

        # Last enemy gone: the round counts only if nobody is left to act
        if not _enemies(unit, acted, waiting):
            completed = not waiting
            evts.append(Event("CombatEnded", round_num,
                              {"winner": unit.faction.letter, "completed": completed}))
            return result(completed)

    evts.append(Event("RoundCompleted", round_num, {"units": len(acted)}))
    return result(True)

class Engine:
    """Pure, deterministic round-by-round combat engine."""

    def __init__(self, initial_board: Board):
        if len(initial_board.factions()) < 2:
            raise BoardError("Board needs units of both factions to start combat")
        self.board = initial_board
        self.round_num = 0  # Rounds played, including a final partial round
        self.rounds_completed = 0

    def is_over(self) -> bool:
        return self.board.is_over()

    def step(self) -> List[Event]:
        """Play one round and return its events. No-op once combat is over."""
        if self.board.is_over():
            return []
        self.round_num += 1
        rnd = play_round(self.board, self.round_num)
        if rnd.completed and rnd.board == self.board and not rnd.board.is_over():
            raise StalemateError(f"Round {self.round_num} changed nothing; no unit can reach an enemy", rnd.events)
        if rnd.completed:
            self.rounds_completed += 1
        self.board = rnd.board
        return rnd.events

    def run(self) -> Outcome:
        """Play rounds until one faction remains and return the outcome."""
        while not self.board.is_over():
            self.step()
        return self.outcome()

    def outcome(self) -> Outcome:
        """Outcome as it stands after the rounds played so far."""
        return Outcome(self.rounds_completed, self.board.total_hp())

    def snapshot(self) -> Board:
        """Return current board."""
        return self.board

def outcome(board: Board) -> Outcome:
    """Run combat on board to the end. ``outcome(board).total`` is rounds x remaining hp."""
    return Engine(board).run()

def minimum_elf_attack(board: Board, start: int = DEFAULT_ATTACK_POWER,
                       limit: int = DEFAULT_HP) -> Tuple[int, Outcome]:
    """Find the lowest elf attack power at which every elf survives.

    Tries start, start + 1, ... up to limit, abandoning a battle as soon as an
    elf falls. Returns that attack power and the outcome of its battle.
    """
    elves = board.count(Faction.ELF)
    for attack_power in range(start, limit + 1):
        eng = Engine(board.with_attack_power(Faction.ELF, attack_power))
        while not eng.is_over() and eng.board.count(Faction.ELF) == elves:
            eng.step()
        if eng.board.count(Faction.ELF) == elves:
            return attack_power, eng.outcome()
    raise BoardError(f"No elf attack power up to {limit} keeps all {elves} elves alive")
