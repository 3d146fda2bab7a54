"""Occupancy snapshots and the breadth-first reachability search over them."""
from typing import Iterable, Set, FrozenSet
import numpy as np
from .model import Cell, Position, Unit

def passable(cells: np.ndarray, units: Iterable[Unit]) -> np.ndarray:
    """Boolean grid of squares a unit may step onto right now.

    Walls and every occupied square are False, whichever faction holds them.
    """
    grid = cells == Cell.OPEN.value
    for u in units:
        grid[u.position.y, u.position.x] = False
    return grid

def is_open(grid: np.ndarray, pos: Position) -> bool:
    """True if pos is inside the grid and free to enter."""
    rows, cols = grid.shape
    return 0 <= pos.y < rows and 0 <= pos.x < cols and bool(grid[pos.y, pos.x])

def closest(grid: np.ndarray, start: Iterable[Position], end: Iterable[Position]) -> FrozenSet[Position]:
    """Return the end positions reachable from any start position in the fewest steps.

    Start positions count as visited whether or not they are open, so a unit's
    own square can seed the search. Expansion stops at the first layer that
    touches the end set; an empty set means nothing in ``end`` is reachable.
    """
    targets = frozenset(end)
    visited: Set[Position] = set()
    frontier = set(start)

    while frontier and visited.isdisjoint(targets):
        visited |= frontier
        frontier = {
            n for pos in frontier for n in pos.neighbors()
            if n not in visited and is_open(grid, n)
        }

    return frozenset(visited & targets)
