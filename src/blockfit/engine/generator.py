"""
Puzzle generation pipeline: carve a region, partition it, build pieces.

State machine per call:
    IDLE -> CARVING -> PARTITIONING -> SUCCESS
    IDLE -> CARVING -> (fail) -> RETRYING -> CARVING ... -> FAILED
"""

import logging
import random
from typing import Callable, List, Optional

from ..config import EngineSettings
from ..constants import get_dock_y
from ..errors import GenerationFailed, PartitionFailure, RETRYABLE, CarveFailure
from .carver import carve_for_template
from .difficulty import derive_level_config, perturb_config
from .geometry import Cell
from .models import GenerationState, GeneratedPuzzle, LevelConfig, Piece, TargetGrid
from .partitioner import PartitionSlot, partition_region
from .shapes import COLORS, ShapeCatalog

logger = logging.getLogger(__name__)

StateCallback = Callable[[GenerationState, int], None]


def _attempt_seed(base_seed: int, attempt: int) -> int:
    return (base_seed * 1_000_003 + attempt) % (2 ** 32)


def target_cell_count(config: LevelConfig, rng: random.Random) -> int:
    """
    Pick how many cells to carve for this attempt.

    The count lies between ``piece_count * min_piece_cells`` and
    ``piece_count * max_piece_cells``, capped by the open board area.

    Raises:
        CarveFailure: If no count in that range fits the board
    """
    low = config.piece_count * config.min_piece_cells
    high = min(config.piece_count * config.max_piece_cells, config.open_cells)
    if low < 1 or high < low:
        raise CarveFailure(
            f"Cannot fit {config.piece_count} pieces of "
            f"{config.min_piece_cells}-{config.max_piece_cells} cells on a "
            f"{config.board_rows}x{config.board_cols} board"
        )
    return rng.randint(low, high)


def build_pieces(slots: List[PartitionSlot], grid: TargetGrid) -> List[Piece]:
    """Turn partition slots into pieces resting in their dock slots, in id order."""
    dock_y = get_dock_y(grid.rows)
    pieces = []
    for index, slot in enumerate(slots):
        dock = Cell((index * grid.cols) // len(slots), dock_y)
        pieces.append(Piece(
            id=index,
            shape_name=slot.shape_name,
            shape=list(slot.shape),
            color=COLORS[index % len(COLORS)],
            dock_position=dock,
            solution=slot.solution,
            x=dock.x,
            y=dock.y,
        ))
    return pieces


def check_tiling(grid: TargetGrid, pieces: List[Piece]) -> None:
    """
    Verify area conservation and that the solutions exactly tile the grid.

    Raises:
        PartitionFailure: If the pieces do not reproduce the FILLABLE region
    """
    fillable = grid.fillable_cells()
    total = sum(p.size for p in pieces)
    if total != len(fillable):
        raise PartitionFailure(
            f"Target/blocks mismatch: {len(fillable)} target cells, {total} piece cells"
        )

    covered = set()
    for piece in pieces:
        for cell in piece.solution_cells():
            if cell in covered or cell not in fillable:
                raise PartitionFailure(
                    f"Solution of piece {piece.id} ({piece.shape_name}) does not fit at {cell}"
                )
            covered.add(cell)

    if covered != fillable:
        raise PartitionFailure("Solutions do not recreate the target grid")


def generate_puzzle(
    config: LevelConfig,
    seed: Optional[int] = None,
    settings: Optional[EngineSettings] = None,
    on_state: Optional[StateCallback] = None,
) -> GeneratedPuzzle:
    """
    Generate a solvable puzzle for a level configuration.

    Args:
        config: Level parameters
        seed: Base seed; each attempt derives its own seed from it
        settings: Retry and search bounds
        on_state: Optional callback receiving (state, attempt) transitions

    Returns:
        The generated puzzle, pieces in their dock slots

    Raises:
        GenerationFailed: After ``max_generation_retries`` failed attempts
    """
    settings = settings or EngineSettings()
    base_seed = seed if seed is not None else random.randrange(2 ** 32)
    catalog = ShapeCatalog.for_config(config.max_piece_cells, config.categories)
    last_error: Optional[Exception] = None

    def transition(state: GenerationState, attempt: int) -> None:
        logger.debug("Level %d attempt %d: %s", config.level_number, attempt, state)
        if on_state:
            on_state(state, attempt)

    transition("IDLE", 0)
    attempts = settings.max_generation_retries

    for attempt in range(1, attempts + 1):
        rng = random.Random(_attempt_seed(base_seed, attempt))
        attempt_config = config if attempt == 1 else perturb_config(config, rng)

        try:
            transition("CARVING", attempt)
            grid = carve_for_template(
                attempt_config.template,
                attempt_config.board_rows,
                attempt_config.board_cols,
                target_cell_count(attempt_config, rng),
                attempt_config.irregularity,
                rng,
            )

            transition("PARTITIONING", attempt)
            slots = partition_region(
                grid.fillable_cells(),
                config.piece_count,
                seed=rng.randrange(2 ** 32),
                catalog=catalog,
                max_steps=settings.partition_max_steps,
                growth_attempts=settings.growth_attempts,
                allow_free_form=settings.allow_free_form,
            )
            pieces = build_pieces(slots, grid)
            check_tiling(grid, pieces)
        except RETRYABLE as exc:
            last_error = exc
            transition("RETRYING", attempt)
            logger.debug("Attempt %d failed: %s", attempt, exc)
            continue

        transition("SUCCESS", attempt)
        if attempt > 1:
            logger.info("Level %d generated after %d attempts", config.level_number, attempt)
        return GeneratedPuzzle(
            level_number=config.level_number,
            pieces=pieces,
            target_grid=grid,
            seed=base_seed,
            attempts=attempt,
        )

    transition("FAILED", attempts)
    logger.warning("Level %d: giving up after %d attempts", config.level_number, attempts)
    raise GenerationFailed(
        f"Failed to generate puzzle after {attempts} attempts: {last_error}",
        attempts=attempts,
        kind="GENERATION_EXHAUSTED",
    )


def generate_level(
    level: int,
    seed: Optional[int] = None,
    settings: Optional[EngineSettings] = None,
) -> GeneratedPuzzle:
    """Derive the level's parameters and generate a puzzle for it."""
    rng = random.Random(seed)
    config = derive_level_config(level, rng)
    return generate_puzzle(config, seed=seed, settings=settings)
