"""
Difficulty curve: maps a level number to generation parameters.

Milestones:
- Level 4: 4 pieces
- Level 15: 5 pieces, hard (asymmetric) shapes allowed
- Level 35: wide/tall boards introduced
- Level 50: 6 pieces
- Level 60: irregular board templates (L, T, cross, U, steps)
- Level 100: extreme boards (3x8, 8x3)
- Level 200: boards larger than 5 in both dimensions
"""

import math
import random
from typing import Dict, Optional, Tuple

from ..constants import GRID_COLS, GRID_ROWS
from ..errors import InvalidConfig
from .models import LevelConfig
from .templates import BOARD_TEMPLATES

# (rows, cols)
BOARD_SHAPES: Dict[str, Tuple[int, int]] = {
    "square": (GRID_ROWS, GRID_COLS),
    "wide": (4, 6),
    "tall": (6, 4),
    "long": (3, 8),
    "narrow": (8, 3),
    # level 200+
    "large_square": (6, 6),
    "large_wide": (6, 7),
    "large_tall": (7, 6),
}

# piece_count -> (min_piece_cells, max_piece_cells)
PIECE_CELLS: Dict[int, Tuple[int, int]] = {
    3: (3, 4),
    4: (3, 5),
    5: (4, 5),
    6: (4, 5),
}

TEMPLATE_LEVEL = 60
TEMPLATE_PROBABILITY = 0.25


def log_prob(level: int, intro_level: int, max_prob: float, scale: float = 50) -> float:
    """
    Logarithmic ramp: 0 at ``intro_level``, rising quickly and then
    plateauing towards ``max_prob`` around 200 levels later.
    """
    if level < intro_level:
        return 0.0
    x = level - intro_level
    return max_prob * math.log(1 + x / scale) / math.log(1 + 200 / scale)


def piece_count_for_level(level: int) -> int:
    """Piece count step function: 3, 4, 5 then 6 pieces."""
    if level <= 3:
        return 3
    if level < 15:
        return 4
    if level < 50:
        return 5
    return 6


def next_level(last_completed: Optional[int]) -> int:
    """Level to resume at, given the persisted last completed level."""
    if not last_completed or last_completed < 1:
        return 1
    return last_completed + 1


def _board_shape(level: int, rng: random.Random) -> Tuple[int, int]:
    if level >= 200:
        return BOARD_SHAPES[rng.choice(["large_square", "large_wide", "large_tall"])]
    if level < 35:
        return BOARD_SHAPES["square"]

    roll = rng.random()
    wide_tall = log_prob(level, 35, 0.4, 40)
    extreme = log_prob(level, 100, 0.25, 60)
    if roll < extreme:
        return BOARD_SHAPES[rng.choice(["long", "narrow"])]
    if roll < extreme + wide_tall:
        return BOARD_SHAPES[rng.choice(["wide", "tall"])]
    return BOARD_SHAPES["square"]


def _pick_template(level: int, piece_count: int, min_cells: int, rng: random.Random) -> Optional[str]:
    if level < TEMPLATE_LEVEL or level >= 200 or rng.random() >= TEMPLATE_PROBABILITY:
        return None
    fitting = sorted(
        name for name, template in BOARD_TEMPLATES.items()
        if template.open_cells >= piece_count * min_cells
    )
    return rng.choice(fitting) if fitting else None


def irregularity_for_level(level: int) -> float:
    return min(1.0, 0.1 + log_prob(level, 10, 0.6, 60))


def derive_level_config(level: int, rng: Optional[random.Random] = None) -> LevelConfig:
    """
    Calculate generation parameters for a level.

    Args:
        level: Level number (1-based)
        rng: Random source for board-shape rolls (fresh if None)

    Returns:
        An immutable LevelConfig

    Raises:
        InvalidConfig: If the level number is not positive
    """
    if level < 1:
        raise InvalidConfig(f"Level must be >= 1, got {level}")
    rng = rng or random.Random()

    piece_count = piece_count_for_level(level)
    min_cells, max_cells = PIECE_CELLS[piece_count]
    rows, cols = _board_shape(level, rng)

    # Templates have fewer open cells, so allow smaller pieces on them
    template = _pick_template(level, piece_count, 3, rng)
    if template is not None:
        rows, cols = BOARD_TEMPLATES[template].rows, BOARD_TEMPLATES[template].cols
        min_cells = 3

    categories = ("easy", "medium") if level < 15 else ("easy", "medium", "hard")

    return LevelConfig(
        level_number=level,
        piece_count=piece_count,
        board_rows=rows,
        board_cols=cols,
        min_piece_cells=min_cells,
        max_piece_cells=max_cells,
        irregularity=irregularity_for_level(level),
        template=template,
        categories=categories,
    )


def perturb_config(config: LevelConfig, rng: random.Random, spread: float = 0.1) -> LevelConfig:
    """Same level with slightly different irregularity, for retries."""
    jitter = (rng.random() - 0.5) * 2 * spread
    irregularity = max(0.0, min(1.0, config.irregularity + jitter))
    return config.model_copy(update={"irregularity": irregularity})
