"""
Tests for the generation pipeline.

Covers:
- Area conservation and tiling correctness of generated puzzles
- Piece layout in the dock
- Retry termination on configurations that can never succeed
"""

import pytest
from blockfit.config import EngineSettings
from blockfit.engine import LevelConfig, check_tiling, generate_level, generate_puzzle
from blockfit.errors import GenerationFailed, PartitionFailure
from blockfit.verifiers import check_win


def place_at_solutions(puzzle):
    pieces = [p.model_copy(deep=True) for p in puzzle.pieces]
    for piece in pieces:
        s = piece.solution
        piece.x, piece.y, piece.rotation, piece.flipped = s.x, s.y, s.rotation, s.flipped
    return pieces


def impossible_config(**overrides):
    """A config that skips validation so the generator sees bad dimensions."""
    values = dict(
        level_number=1,
        piece_count=3,
        board_rows=-1,
        board_cols=5,
        min_piece_cells=3,
        max_piece_cells=4,
        irregularity=0.0,
        template=None,
        categories=("easy", "medium"),
    )
    values.update(overrides)
    return LevelConfig.model_construct(**values)


class TestGeneratedPuzzles:
    """Test cases for puzzle invariants."""

    @pytest.mark.parametrize("level", [1, 4, 15, 35, 50, 60, 100, 150, 200, 250])
    def test_area_conservation(self, level):
        """FILLABLE cells equal the total piece area."""
        puzzle = generate_level(level, seed=level)
        assert puzzle.target_grid.fillable_count == sum(p.size for p in puzzle.pieces)
        assert puzzle.target_grid.is_connected()

    @pytest.mark.parametrize("level", [1, 4, 15, 50, 120, 200, 250])
    def test_tiling_correctness(self, level):
        """Placing every piece at its solution solves the puzzle."""
        puzzle = generate_level(level, seed=level * 7)
        pieces = place_at_solutions(puzzle)
        assert check_win(pieces, puzzle.target_grid)

    @pytest.mark.parametrize("level,count", [(1, 3), (10, 4), (20, 5), (75, 6)])
    def test_piece_count(self, level, count):
        assert generate_level(level, seed=3).piece_count == count

    def test_repeated_level_250(self):
        """Level 250 keeps generating valid puzzles across many requests."""
        for seed in range(10):
            puzzle = generate_level(250, seed=seed)
            assert puzzle.piece_count == 6
            assert puzzle.board_rows > 5
            assert puzzle.board_cols > 5
            assert check_win(place_at_solutions(puzzle), puzzle.target_grid)

    def test_pieces_start_in_dock(self):
        """Pieces start in dock slots in id order, below the board."""
        puzzle = generate_level(5, seed=11)
        rows, cols = puzzle.board_rows, puzzle.board_cols
        n = puzzle.piece_count
        for index, piece in enumerate(puzzle.pieces):
            assert piece.id == index
            assert piece.dock_position == ((index * cols) // n, rows + 1)
            assert (piece.x, piece.y) == piece.dock_position
            assert piece.rotation == 0
            assert piece.flipped is False
            assert piece.is_in_dock(rows)

    def test_deterministic_for_seed(self):
        """Same config and seed, same puzzle."""
        config = LevelConfig(level_number=8, piece_count=4, max_piece_cells=5)
        a = generate_puzzle(config, seed=1234)
        b = generate_puzzle(config, seed=1234)
        assert a.target_grid == b.target_grid
        assert a.pieces == b.pieces

    def test_state_transitions(self):
        """A successful run moves IDLE -> CARVING -> PARTITIONING -> SUCCESS."""
        states = []
        generate_puzzle(LevelConfig(), seed=5, on_state=lambda state, attempt: states.append(state))
        assert states[0] == "IDLE"
        assert states[-1] == "SUCCESS"
        assert "CARVING" in states
        assert "PARTITIONING" in states
        assert "FAILED" not in states

    def test_check_tiling_rejects_missing_piece(self):
        """Dropping a piece breaks area conservation."""
        puzzle = generate_level(2, seed=8)
        with pytest.raises(PartitionFailure):
            check_tiling(puzzle.target_grid, puzzle.pieces[1:])


class TestRetryTermination:
    """Test cases for bounded retries."""

    def test_negative_rows_fail_within_bound(self):
        """An always-failing config stops after max_generation_retries attempts."""
        states = []
        settings = EngineSettings(max_generation_retries=7)
        with pytest.raises(GenerationFailed) as exc_info:
            generate_puzzle(
                impossible_config(),
                seed=1,
                settings=settings,
                on_state=lambda state, attempt: states.append((state, attempt)),
            )
        assert exc_info.value.attempts == 7
        assert exc_info.value.kind == "GENERATION_EXHAUSTED"
        assert states.count(("FAILED", 7)) == 1
        assert sum(1 for state, _ in states if state == "RETRYING") == 7

    def test_default_bound(self):
        """The default bound also terminates."""
        with pytest.raises(GenerationFailed) as exc_info:
            generate_puzzle(impossible_config(board_rows=-3), seed=2)
        assert exc_info.value.attempts == EngineSettings().max_generation_retries
