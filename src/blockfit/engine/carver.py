"""
Board carver: selects which board cells are FILLABLE.

The region grows from a random seed cell one frontier cell at a time, so it
is 4-connected by construction.
"""

import logging
import random
from typing import Dict, FrozenSet, Iterable, Optional, Set, Tuple

from ..errors import CarveFailure
from .geometry import Cell, neighbors
from .models import TargetGrid
from .templates import BOARD_TEMPLATES, BoardTemplate

logger = logging.getLogger(__name__)


def template_mask(name: str) -> BoardTemplate:
    """Return a board template by name."""
    try:
        return BOARD_TEMPLATES[name]
    except KeyError as exc:
        raise KeyError(f"Unknown board template '{name}'") from exc


def carve_region(
    rows: int,
    cols: int,
    target_cells: int,
    irregularity: float,
    rng: random.Random,
    blocked: Iterable[Tuple[int, int]] = (),
) -> TargetGrid:
    """
    Carve a connected region of exactly ``target_cells`` cells.

    Args:
        rows: Board height
        cols: Board width
        target_cells: Number of FILLABLE cells to produce
        irregularity: Probability of growing into any frontier cell instead of
            the most enclosed ones; high values leave notches and concave edges
        rng: Random source, seeded by the caller
        blocked: Cells that must stay WALL (template cutouts)

    Returns:
        TargetGrid whose FILLABLE cells are the carved region

    Raises:
        CarveFailure: If the region cannot be carved within the board
    """
    if rows < 1 or cols < 1:
        raise CarveFailure(f"Invalid board dimensions {rows}x{cols}")
    if target_cells < 1:
        raise CarveFailure(f"Cannot carve {target_cells} cells")

    blocked_set: FrozenSet[Cell] = frozenset(Cell(*c) for c in blocked)
    available: Set[Cell] = {
        Cell(x, y)
        for y in range(rows)
        for x in range(cols)
        if (x, y) not in blocked_set
    }
    if target_cells > len(available):
        raise CarveFailure(
            f"Requested {target_cells} cells but only {len(available)} are available "
            f"on a {rows}x{cols} board"
        )

    seed = rng.choice(sorted(available))
    region: Set[Cell] = {seed}
    # frontier cell -> number of neighbours already in the region
    frontier: Dict[Cell, int] = {}
    _extend_frontier(seed, region, available, frontier)

    while len(region) < target_cells:
        if not frontier:
            raise CarveFailure(
                f"Growth stalled at {len(region)}/{target_cells} cells"
            )
        cell = _pick_frontier_cell(frontier, irregularity, rng)
        del frontier[cell]
        region.add(cell)
        _extend_frontier(cell, region, available, frontier)

    logger.debug("Carved %d/%d cells on %dx%d board", len(region), len(available), rows, cols)
    return TargetGrid.from_cells(rows, cols, frozenset(region))


def _extend_frontier(
    cell: Cell,
    region: Set[Cell],
    available: Set[Cell],
    frontier: Dict[Cell, int],
) -> None:
    for nb in neighbors(cell):
        if nb in available and nb not in region:
            frontier[nb] = frontier.get(nb, 0) + 1


def _pick_frontier_cell(
    frontier: Dict[Cell, int],
    irregularity: float,
    rng: random.Random,
) -> Cell:
    candidates = sorted(frontier)
    if rng.random() < irregularity:
        return rng.choice(candidates)
    best = max(frontier.values())
    return rng.choice([c for c in candidates if frontier[c] == best])


def carve_for_template(
    template: Optional[str],
    rows: int,
    cols: int,
    target_cells: int,
    irregularity: float,
    rng: random.Random,
) -> TargetGrid:
    """Carve on a plain board, or inside a named irregular template."""
    blocked: FrozenSet[Cell] = frozenset()
    if template is not None:
        mask = template_mask(template)
        rows, cols, blocked = mask.rows, mask.cols, mask.cutouts
    return carve_region(rows, cols, target_cells, irregularity, rng, blocked)
