"""Tests for the difficulty curve."""

import random

import pytest
from blockfit.engine import BOARD_TEMPLATES, LevelConfig
from blockfit.engine.difficulty import (
    derive_level_config,
    irregularity_for_level,
    log_prob,
    next_level,
    perturb_config,
    piece_count_for_level,
)
from blockfit.errors import InvalidConfig


class TestPieceCount:
    """Test cases for the piece-count step function."""

    @pytest.mark.parametrize("level,expected", [
        (1, 3), (3, 3),
        (4, 4), (14, 4),
        (15, 5), (49, 5),
        (50, 6), (250, 6), (1000, 6),
    ])
    def test_piece_count_by_level(self, level, expected):
        """1-3 -> 3, 4-14 -> 4, 15-49 -> 5, 50+ -> 6."""
        assert piece_count_for_level(level) == expected
        assert derive_level_config(level, random.Random(level)).piece_count == expected

    def test_piece_count_monotone(self):
        """Piece count never decreases as levels rise."""
        counts = [piece_count_for_level(level) for level in range(1, 400)]
        assert counts == sorted(counts)


class TestDeriveLevelConfig:
    """Test cases for level parameter derivation."""

    def test_first_level_baseline(self):
        """Level 1 is a 5x5 board with easy and medium shapes."""
        config = derive_level_config(1, random.Random(0))
        assert (config.board_rows, config.board_cols) == (5, 5)
        assert config.categories == ("easy", "medium")
        assert config.template is None

    def test_hard_shapes_from_level_15(self):
        """Hard shapes join the pool at level 15."""
        assert "hard" not in derive_level_config(14, random.Random(0)).categories
        assert "hard" in derive_level_config(15, random.Random(0)).categories

    def test_large_boards_from_level_200(self):
        """From level 200 boards exceed 5 cells in both dimensions."""
        for seed in range(20):
            config = derive_level_config(200, random.Random(seed))
            assert config.board_rows > 5
            assert config.board_cols > 5
            assert config.template is None

    def test_templates_match_board(self):
        """When a template is picked the board takes its dimensions."""
        seen = 0
        for seed in range(100):
            config = derive_level_config(120, random.Random(seed))
            if config.template is None:
                continue
            seen += 1
            template = BOARD_TEMPLATES[config.template]
            assert (config.board_rows, config.board_cols) == (template.rows, template.cols)
            assert config.piece_count * config.min_piece_cells <= template.open_cells
        assert seen > 0

    def test_every_level_yields_valid_config(self):
        """Derived configs pass LevelConfig validation across many levels."""
        rng = random.Random(9)
        for level in range(1, 301):
            config = derive_level_config(level, rng)
            assert isinstance(config, LevelConfig)
            assert config.level_number == level
            assert 0.0 <= config.irregularity <= 1.0

    @pytest.mark.parametrize("level", [0, -3])
    def test_non_positive_level_rejected(self, level):
        """Levels below 1 are an invalid config."""
        with pytest.raises(InvalidConfig):
            derive_level_config(level)

    def test_perturb_keeps_level(self):
        """Perturbation only jitters irregularity, within [0, 1]."""
        config = derive_level_config(30, random.Random(1))
        rng = random.Random(2)
        for _ in range(20):
            perturbed = perturb_config(config, rng, spread=0.5)
            assert perturbed.level_number == config.level_number
            assert perturbed.piece_count == config.piece_count
            assert 0.0 <= perturbed.irregularity <= 1.0


class TestCurveHelpers:
    """Test cases for the probability ramp and resume helper."""

    def test_log_prob_ramp(self):
        """Zero before and at the intro level, max_prob 200 levels later."""
        assert log_prob(10, 35, 0.4) == 0.0
        assert log_prob(35, 35, 0.4) == 0.0
        assert log_prob(235, 35, 0.4) == pytest.approx(0.4)
        assert 0.0 < log_prob(60, 35, 0.4) < 0.4

    def test_irregularity_bounded(self):
        """Irregularity starts low and never exceeds 1."""
        assert irregularity_for_level(1) == pytest.approx(0.1)
        assert all(0.0 <= irregularity_for_level(level) <= 1.0 for level in range(1, 2000))

    @pytest.mark.parametrize("last_completed,expected", [
        (None, 1),
        (0, 1),
        (7, 8),
        (199, 200),
    ])
    def test_next_level(self, last_completed, expected):
        """Resume at the level after the last completed one."""
        assert next_level(last_completed) == expected
