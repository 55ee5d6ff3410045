"""Tests for occupancy and enclosed-cell helpers."""

from blockfit.engine import Cell, Piece, Solution, TargetGrid
from blockfit.verifiers import build_occupancy, coverage_counts, find_enclosed_cells


def domino(piece_id, x, y, rotation=1):
    return Piece(id=piece_id, shape=[(0, 0), (0, 1)], solution=Solution(x=0, y=0), x=x, y=y, rotation=rotation)


class TestOccupancy:
    """Test cases for occupancy maps."""

    def test_build_occupancy(self):
        grid = TargetGrid(cells=[[1, 1, 1, 1], [1, 1, 1, 1]])
        pieces = [domino(0, 0, 0), domino(1, 2, 1), domino(2, 0, 5)]
        occupied = build_occupancy(pieces, grid)
        assert occupied == {Cell(0, 0), Cell(1, 0), Cell(2, 1), Cell(3, 1)}

    def test_exclude_piece(self):
        grid = TargetGrid(cells=[[1, 1, 1, 1]])
        pieces = [domino(0, 0, 0), domino(1, 2, 0)]
        assert build_occupancy(pieces, grid, exclude_id=0) == {Cell(2, 0), Cell(3, 0)}

    def test_coverage_counts(self):
        counts = coverage_counts([domino(0, 0, 0), domino(1, 1, 0)])
        assert counts == {Cell(0, 0): 1, Cell(1, 0): 2, Cell(2, 0): 1}


class TestEnclosedCells:
    """Test cases for hole detection."""

    def test_ring_encloses_center(self):
        grid = TargetGrid(cells=[[1, 1, 1], [1, 0, 1], [1, 1, 1]])
        assert find_enclosed_cells(grid) == {Cell(1, 1)}

    def test_edge_walls_are_not_enclosed(self):
        grid = TargetGrid(cells=[[0, 1, 1], [1, 1, 0], [1, 1, 1]])
        assert find_enclosed_cells(grid) == set()

    def test_connected_hole(self):
        """A hole of several cells is reported whole."""
        grid = TargetGrid(cells=[
            [1, 1, 1, 1],
            [1, 0, 0, 1],
            [1, 1, 1, 1],
        ])
        assert find_enclosed_cells(grid) == {Cell(1, 1), Cell(2, 1)}

    def test_full_board(self):
        grid = TargetGrid(cells=[[1, 1], [1, 1]])
        assert find_enclosed_cells(grid) == set()
