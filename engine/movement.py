from typing import Iterable
import numpy as np
from .grid import closest, is_open
from .model import Position, Unit

def next_position(grid: np.ndarray, unit: Unit, enemies: Iterable[Unit]) -> Position:
    """Return where the unit should stand after moving this turn.

    ``grid`` must reflect every unit's position at this instant of the round.
    The unit stays put when it is already next to an enemy, when no square next
    to an enemy is free, or when none of those squares can be reached.
    Otherwise it takes one step: the reading-order first neighbour that lies on
    a shortest path to one of the nearest in-range squares.
    """
    enemy_positions = {e.position for e in enemies}

    if any(n in enemy_positions for n in unit.position.neighbors()):
        return unit.position

    in_range = {n for pos in enemy_positions for n in pos.neighbors() if is_open(grid, n)}
    if not in_range:
        return unit.position

    targets = closest(grid, {unit.position}, in_range)
    if not targets:
        return unit.position

    # Search back from the nearest squares to find which first steps lie on a shortest path
    first_steps = {n for n in unit.position.neighbors() if is_open(grid, n)}
    moves = closest(grid, targets, first_steps)

    return min(moves, default=unit.position)
