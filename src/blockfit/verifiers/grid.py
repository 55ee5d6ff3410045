"""Occupancy and reachability helpers over the target grid."""

from collections import Counter, deque
from typing import Dict, Iterable, Optional, Set

from ..engine.geometry import Cell, neighbors
from ..engine.models import Piece, TargetGrid


def pieces_on_board(pieces: Iterable[Piece], target_grid: TargetGrid) -> Iterable[Piece]:
    """Pieces that are not resting in the dock."""
    return (p for p in pieces if not p.is_in_dock(target_grid.rows))


def build_occupancy(
    pieces: Iterable[Piece],
    target_grid: TargetGrid,
    exclude_id: Optional[int] = None,
) -> Set[Cell]:
    """Cells covered by pieces on the board, optionally ignoring one piece."""
    occupied: Set[Cell] = set()
    for piece in pieces_on_board(pieces, target_grid):
        if piece.id == exclude_id:
            continue
        occupied.update(piece.cells())
    return occupied


def coverage_counts(pieces: Iterable[Piece]) -> Dict[Cell, int]:
    """How many piece cells land on each grid cell."""
    counts: Counter = Counter()
    for piece in pieces:
        counts.update(piece.cells())
    return dict(counts)


def find_enclosed_cells(target_grid: TargetGrid) -> Set[Cell]:
    """
    Non-FILLABLE cells that cannot reach the board edge without crossing a
    FILLABLE cell. Renderers draw these as holes rather than background.
    """
    rows, cols = target_grid.rows, target_grid.cols
    open_cells = {
        Cell(x, y)
        for y in range(rows)
        for x in range(cols)
        if not target_grid.is_fillable(x, y)
    }

    reachable = {c for c in open_cells if c.x in (0, cols - 1) or c.y in (0, rows - 1)}
    queue = deque(reachable)
    while queue:
        for nb in neighbors(queue.popleft()):
            if nb in open_cells and nb not in reachable:
                reachable.add(nb)
                queue.append(nb)

    return open_cells - reachable
