"""Cell coordinates and 4-connectivity helpers shared by the engine."""

from collections import deque
from typing import Iterable, Iterator, List, NamedTuple, Set, FrozenSet, Tuple


class Cell(NamedTuple):
    """A unit grid cell. ``x`` is the column, ``y`` the row."""
    x: int
    y: int


def neighbors(cell: Cell) -> Iterator[Cell]:
    """Yield the four edge-adjacent cells."""
    x, y = cell
    yield Cell(x, y - 1)
    yield Cell(x + 1, y)
    yield Cell(x, y + 1)
    yield Cell(x - 1, y)


def components(cells: Iterable[Tuple[int, int]]) -> List[FrozenSet[Cell]]:
    """Split a cell set into its 4-connected components."""
    remaining: Set[Cell] = {Cell(*c) for c in cells}
    result: List[FrozenSet[Cell]] = []

    while remaining:
        start = remaining.pop()
        seen = {start}
        queue = deque([start])
        while queue:
            for nb in neighbors(queue.popleft()):
                if nb in remaining:
                    remaining.discard(nb)
                    seen.add(nb)
                    queue.append(nb)
        result.append(frozenset(seen))

    return result


def is_connected(cells: Iterable[Tuple[int, int]]) -> bool:
    """True if the cells form exactly one 4-connected region."""
    return len(components(cells)) == 1


def bounding_origin(cells: Iterable[Tuple[int, int]]) -> Cell:
    """Top-left corner of the cells' bounding box."""
    cells = list(cells)
    return Cell(min(c[0] for c in cells), min(c[1] for c in cells))
