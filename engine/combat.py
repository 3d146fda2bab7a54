from typing import Iterable, Optional
from .model import Position, Unit

def select_target(position: Position, enemies: Iterable[Unit]) -> Optional[Unit]:
    """Pick the adjacent enemy with the fewest hit points, ties broken in reading order."""
    in_reach = [e for e in enemies if e.is_adjacent(position)]
    return min(in_reach, key=lambda e: (e.hp, e.position), default=None)

def strike(attacker: Unit, target: Unit) -> Unit:
    """Return the target after taking the attacker's hit. May be left at hp <= 0."""
    return target.with_hp(target.hp - attacker.attack_power)
