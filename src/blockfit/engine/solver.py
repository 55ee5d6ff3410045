"""Exact-cover solution counter, used to diagnose how ambiguous a puzzle is."""

from functools import lru_cache
from typing import List, Optional, Sequence, Set, Tuple

from .geometry import Cell
from .models import Piece, TargetGrid
from .shapes import Shape, variants


@lru_cache(maxsize=256)
def unique_orientations(shape: Shape) -> Tuple[Shape, ...]:
    """All distinct orientations of a shape, cached across calls."""
    return tuple(v.cells for v in variants(shape))


def count_solutions(target_grid: TargetGrid, pieces: Sequence[Piece], limit: int = 10) -> int:
    """
    Count the ways the pieces exactly tile the grid, stopping at ``limit``.

    Pieces of identical shape are counted as distinct, so swapping two equal
    pieces yields a separate solution.
    """
    fillable = target_grid.fillable_cells()
    if sum(p.size for p in pieces) != len(fillable):
        return 0

    orientations = [unique_orientations(tuple(p.shape)) for p in pieces]
    # Row-major scan order for the "first empty cell" heuristic
    order = sorted(fillable, key=lambda c: (c.y, c.x))
    occupied: Set[Cell] = set()
    used = [False] * len(pieces)

    def first_empty() -> Optional[Cell]:
        for cell in order:
            if cell not in occupied:
                return cell
        return None

    def fits(shape: Shape, start_x: int, start_y: int) -> Optional[List[Cell]]:
        cells = [Cell(start_x + c.x, start_y + c.y) for c in shape]
        for cell in cells:
            if cell not in fillable or cell in occupied:
                return None
        return cells

    def solve(placed: int, remaining_limit: int) -> int:
        if placed == len(pieces):
            return 1
        target = first_empty()
        if target is None:
            return 0

        count = 0
        for i, shapes in enumerate(orientations):
            if used[i]:
                continue
            for shape in shapes:
                # anchor each block of the shape on the target cell
                for block in shape:
                    cells = fits(shape, target.x - block.x, target.y - block.y)
                    if cells is None:
                        continue
                    occupied.update(cells)
                    used[i] = True
                    count += solve(placed + 1, remaining_limit - count)
                    used[i] = False
                    occupied.difference_update(cells)
                    if count >= remaining_limit:
                        return count
        return count

    return solve(0, limit)
