from typing import Dict, Iterable, List, Optional

from ..engine.geometry import Cell
from ..engine.models import Piece, TargetGrid
from ..engine.shapes import shape_dimensions
from ..verifiers.grid import find_enclosed_cells

PIECE_LABELS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def piece_label(piece_id: int) -> str:
    return PIECE_LABELS[piece_id % len(PIECE_LABELS)]


def render_board(target_grid: TargetGrid, pieces: Optional[Iterable[Piece]] = None) -> str:
    """
    Render the target grid and any on-board pieces as text.

    ``.`` is an empty FILLABLE cell, ``#`` a wall, ``o`` an enclosed hole,
    letters are pieces and ``*`` marks cells covered more than once.
    """
    enclosed = find_enclosed_cells(target_grid)
    covered: Dict[Cell, str] = {}
    for piece in pieces or ():
        if piece.is_in_dock(target_grid.rows):
            continue
        for cell in piece.cells():
            covered[cell] = "*" if cell in covered else piece_label(piece.id)

    lines = []
    for y in range(target_grid.rows):
        row = ""
        for x in range(target_grid.cols):
            cell = Cell(x, y)
            if cell in covered:
                row += covered[cell]
            elif target_grid.is_fillable(x, y):
                row += "."
            elif cell in enclosed:
                row += "o"
            else:
                row += "#"
        lines.append(row)
    return "\n".join(lines)


def render_piece(piece: Piece, rotation: Optional[int] = None, flipped: Optional[bool] = None) -> str:
    """Render one piece's effective shape in its bounding box."""
    shape = piece.effective_shape(rotation, flipped)
    width, height = shape_dimensions(shape)
    label = piece_label(piece.id)
    cells = set(shape)
    lines: List[str] = []
    for y in range(height):
        lines.append("".join(label if (x, y) in cells else " " for x in range(width)).rstrip())
    return "\n".join(lines)


def render_dock(pieces: Iterable[Piece]) -> str:
    """Render every piece in its base orientation, one after another."""
    blocks = []
    for piece in pieces:
        blocks.append(f"{piece_label(piece.id)} {piece.shape_name} ({piece.size} cells)\n{render_piece(piece, 0, False)}")
    return "\n\n".join(blocks)
