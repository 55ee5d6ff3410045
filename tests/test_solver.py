"""Tests for the solution counter."""

from blockfit.engine import Piece, Solution, TargetGrid, count_solutions, generate_level


def dominoes(count):
    return [Piece(id=i, shape=[(0, 0), (0, 1)], solution=Solution(x=2 * i, y=0, rotation=1)) for i in range(count)]


class TestCountSolutions:
    """Test cases for exact-cover counting."""

    def test_swapped_pieces_count_separately(self):
        """Two dominoes in a 1x4 strip tile it two ways."""
        grid = TargetGrid(cells=[[1, 1, 1, 1]])
        assert count_solutions(grid, dominoes(2)) == 2

    def test_limit_stops_early(self):
        grid = TargetGrid(cells=[[1, 1, 1, 1]])
        assert count_solutions(grid, dominoes(2), limit=1) == 1

    def test_area_mismatch(self):
        """Pieces whose area differs from the region have no solution."""
        grid = TargetGrid(cells=[[1, 1, 1]])
        assert count_solutions(grid, dominoes(2)) == 0

    def test_no_fit(self):
        """A vertical region cannot hold pieces that do not fit its shape."""
        grid = TargetGrid(cells=[[1, 0], [0, 1]])
        assert count_solutions(grid, dominoes(1)) == 0

    def test_generated_puzzle_has_solution(self):
        puzzle = generate_level(3, seed=21)
        assert count_solutions(puzzle.target_grid, puzzle.pieces, limit=1) == 1
