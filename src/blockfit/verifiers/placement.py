"""
Placement validation.

A placement is legal when every cell of the piece's effective shape lands on
a FILLABLE cell that no other on-board piece covers. Illegal placements are an
expected outcome reported through ``PlacementResult``, never an exception.
"""

from typing import Iterable, Optional, Set

from ..engine.geometry import Cell
from ..engine.models import Piece, TargetGrid
from .grid import build_occupancy
from .models import PlacementResult


def validate_placement(
    piece: Piece,
    x: int,
    y: int,
    rotation: int,
    flipped: bool,
    target_grid: Optional[TargetGrid],
    other_pieces: Iterable[Piece] = (),
    occupied: Optional[Set[Cell]] = None,
) -> PlacementResult:
    """
    Check whether a piece may be dropped at a position and orientation.

    Args:
        piece: The piece being moved
        x: Proposed column of the piece's bounding-box origin
        y: Proposed row of the piece's bounding-box origin
        rotation: Proposed clockwise quarter turns
        flipped: Proposed mirror state
        target_grid: The puzzle's target grid
        other_pieces: All other pieces; those in the dock are ignored
        occupied: Precomputed occupancy (see ``build_occupancy``); takes
            precedence over ``other_pieces``

    Returns:
        PlacementResult with ``legal`` and, when illegal, the first reason
    """
    if target_grid is None:
        return PlacementResult(legal=False, reason="NO_GRID")

    cells = piece.cells_at(x, y, rotation % 4, flipped)
    if not cells:
        return PlacementResult(legal=False, reason="EMPTY_SHAPE")

    if occupied is None:
        others = [p for p in other_pieces if p.id != piece.id]
        occupied = build_occupancy(others, target_grid)

    for cell in cells:
        if not target_grid.in_bounds(cell.x, cell.y):
            return PlacementResult(legal=False, reason="OUT_OF_BOUNDS", cells=cells)
        if not target_grid.is_fillable(cell.x, cell.y):
            return PlacementResult(legal=False, reason="WALL", cells=cells)
        if cell in occupied:
            return PlacementResult(legal=False, reason="OCCUPIED", cells=cells)

    return PlacementResult(legal=True, cells=cells)


def is_valid_placement(
    piece: Piece,
    x: int,
    y: int,
    rotation: int,
    flipped: bool,
    target_grid: Optional[TargetGrid],
    other_pieces: Iterable[Piece] = (),
) -> bool:
    """Boolean shorthand for ``validate_placement(...).legal``."""
    return validate_placement(piece, x, y, rotation, flipped, target_grid, other_pieces).legal
