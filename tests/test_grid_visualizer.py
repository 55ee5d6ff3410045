"""Tests for text rendering."""

from blockfit.engine import Piece, Solution, TargetGrid
from blockfit.utils.grid_visualizer import render_board, render_dock, render_piece


def make_piece(piece_id, x, y, rotation=0):
    return Piece(
        id=piece_id,
        shape_name="Domino",
        shape=[(0, 0), (0, 1)],
        solution=Solution(x=0, y=0),
        x=x,
        y=y,
        rotation=rotation,
    )


class TestRenderBoard:
    """Test cases for board rendering."""

    def test_empty_board_with_hole(self):
        grid = TargetGrid(cells=[[1, 1, 1], [1, 0, 1], [1, 1, 1]])
        assert render_board(grid) == "...\n.o.\n..."

    def test_walls_and_pieces(self):
        grid = TargetGrid(cells=[[0, 1, 1], [1, 1, 1]])
        pieces = [make_piece(0, 1, 0, rotation=1), make_piece(1, 0, 5)]
        assert render_board(grid, pieces) == "#AA\n..."

    def test_overlap_marked(self):
        grid = TargetGrid(cells=[[1, 1, 1]])
        pieces = [make_piece(0, 0, 0, rotation=1), make_piece(1, 1, 0, rotation=1)]
        assert render_board(grid, pieces) == "A*B"


class TestRenderPieces:
    """Test cases for piece rendering."""

    def test_render_piece(self):
        piece = Piece(id=2, shape=[(0, 0), (0, 1), (1, 1)], solution=Solution(x=0, y=0))
        assert render_piece(piece) == "C\nCC"

    def test_render_piece_uses_rotated_bounding_box(self):
        """A rotated I-piece renders as one row as wide as the piece."""
        piece = Piece(id=0, shape=[(0, 0), (0, 1), (0, 2)], solution=Solution(x=0, y=0))
        assert render_piece(piece) == "A\nA\nA"
        assert render_piece(piece, rotation=1) == "AAA"

    def test_render_dock(self):
        text = render_dock([make_piece(0, 0, 5)])
        assert text == "A Domino (2 cells)\nA\nA"
