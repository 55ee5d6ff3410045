"""
Win evaluation.

Any exact tiling wins: pieces do not have to sit on their recorded solution
slots, so symmetric or interchangeable pieces may swap places.
"""

from typing import Iterable, List

from ..engine.geometry import Cell
from ..engine.models import Piece, TargetGrid
from .grid import coverage_counts, pieces_on_board
from .models import WinResult


def evaluate_win(pieces: Iterable[Piece], target_grid: TargetGrid) -> WinResult:
    """Describe how far the current arrangement is from an exact tiling."""
    pieces = list(pieces)
    in_dock = [p.id for p in pieces if p.is_in_dock(target_grid.rows)]
    counts = coverage_counts(pieces_on_board(pieces, target_grid))

    overlaps: List[Cell] = sorted(c for c, n in counts.items() if n > 1)
    outside: List[Cell] = sorted(c for c in counts if not target_grid.is_fillable(c.x, c.y))
    uncovered: List[Cell] = sorted(c for c in target_grid.fillable_cells() if c not in counts)

    solved = bool(pieces) and not (in_dock or overlaps or outside or uncovered)
    return WinResult(
        solved=solved,
        uncovered=uncovered,
        overlaps=overlaps,
        outside=outside,
        in_dock=in_dock,
    )


def check_win(pieces: Iterable[Piece], target_grid: TargetGrid) -> bool:
    """True iff every FILLABLE cell is covered exactly once and nothing else is."""
    return evaluate_win(pieces, target_grid).solved
