"""
Tiling partitioner: splits a carved region into connected pieces.

The search is a pure function of ``(region, piece_count, seed)``: every random
choice comes from one seeded ``random.Random`` and candidates are sorted
before being drawn from, so a failed seed can be replayed exactly.
"""

import logging
import random
from typing import FrozenSet, Iterable, List, NamedTuple, Optional, Set, Tuple

from ..constants import GROWTH_ATTEMPTS, PARTITION_MAX_STEPS
from ..errors import PartitionFailure
from .geometry import Cell, bounding_origin, is_connected, neighbors
from .models import Solution
from .shapes import Shape, ShapeCatalog, normalize_shape

logger = logging.getLogger(__name__)

FREE_FORM = "Free"


class PartitionSlot(NamedTuple):
    """One piece of a partition and the transform that places it."""
    cells: FrozenSet[Cell]
    shape_name: str
    shape: Shape
    solution: Solution


def piece_sizes(region_size: int, piece_count: int) -> List[int]:
    """Balanced piece sizes: the remainder is spread one cell at a time."""
    base, remainder = divmod(region_size, piece_count)
    return [base + 1] * remainder + [base] * (piece_count - remainder)


def partition_region(
    region: Iterable[Tuple[int, int]],
    piece_count: int,
    seed: Optional[int] = None,
    catalog: Optional[ShapeCatalog] = None,
    max_steps: int = PARTITION_MAX_STEPS,
    growth_attempts: int = GROWTH_ATTEMPTS,
    allow_free_form: bool = False,
) -> List[PartitionSlot]:
    """
    Partition a region into ``piece_count`` connected catalog shapes.

    Args:
        region: The FILLABLE cells to cover
        piece_count: Number of pieces to produce
        seed: Seed for every random choice in the search
        catalog: Shapes pieces must match (full catalog if None)
        max_steps: Growth attempts allowed before giving up
        growth_attempts: Distinct growths tried per piece before backtracking
        allow_free_form: Accept grown pieces that match no catalog shape

    Returns:
        Slots in placement order; their cells are disjoint and cover the region

    Raises:
        PartitionFailure: If no partition was found within ``max_steps``
    """
    cells = frozenset(Cell(*c) for c in region)
    if piece_count < 1 or piece_count > len(cells):
        raise PartitionFailure(f"Cannot split {len(cells)} cells into {piece_count} pieces")
    if not is_connected(cells):
        raise PartitionFailure("Region is not connected")

    catalog = catalog if catalog is not None else ShapeCatalog()
    rng = random.Random(seed)
    sizes = piece_sizes(len(cells), piece_count)
    rng.shuffle(sizes)

    if not allow_free_form:
        missing = sorted(set(sizes) - set(catalog.sizes))
        if missing:
            raise PartitionFailure(f"No catalog shapes of size {missing}")

    search = _PartitionSearch(rng, sizes, catalog, max_steps, growth_attempts, allow_free_form)
    pieces = search.solve(set(cells), 0)
    if pieces is None:
        raise PartitionFailure(
            f"No partition of {len(cells)} cells into sizes {sizes} (seed={seed})"
        )

    logger.debug("Partitioned %d cells into %s in %d steps", len(cells), sizes, search.steps)
    return [_slot_for(piece, catalog) for piece in pieces]


class _PartitionSearch:
    """Depth-first search with bounded randomized growth."""

    def __init__(
        self,
        rng: random.Random,
        sizes: List[int],
        catalog: ShapeCatalog,
        max_steps: int,
        growth_attempts: int,
        allow_free_form: bool,
    ):
        self.rng = rng
        self.sizes = sizes
        self.catalog = catalog
        self.max_steps = max_steps
        self.growth_attempts = growth_attempts
        self.allow_free_form = allow_free_form
        self.steps = 0

    def solve(self, uncovered: Set[Cell], index: int) -> Optional[List[FrozenSet[Cell]]]:
        if index == len(self.sizes):
            return [] if not uncovered else None

        # The last piece is whatever remains
        if index == len(self.sizes) - 1:
            self._spend()
            piece = frozenset(uncovered)
            return [piece] if self._acceptable(piece) else None

        start = self._pick_start(uncovered)
        tried: Set[FrozenSet[Cell]] = set()

        for _ in range(self.growth_attempts):
            self._spend()
            piece = self._grow(start, self.sizes[index], uncovered)
            if piece is None or piece in tried:
                continue
            tried.add(piece)
            if not self._acceptable(piece):
                continue

            rest = uncovered - piece
            if not is_connected(rest):
                continue

            tail = self.solve(rest, index + 1)
            if tail is not None:
                return [piece] + tail

        return None

    def _spend(self) -> None:
        self.steps += 1
        if self.steps > self.max_steps:
            raise PartitionFailure(f"Backtracking budget of {self.max_steps} steps exhausted")

    def _pick_start(self, uncovered: Set[Cell]) -> Cell:
        """Uncovered cell with the fewest uncovered neighbours."""
        degree = {
            cell: sum(1 for nb in neighbors(cell) if nb in uncovered)
            for cell in uncovered
        }
        fewest = min(degree.values())
        return self.rng.choice(sorted(c for c, d in degree.items() if d == fewest))

    def _grow(self, start: Cell, size: int, uncovered: Set[Cell]) -> Optional[FrozenSet[Cell]]:
        piece = {start}
        while len(piece) < size:
            frontier = sorted({
                nb
                for cell in piece
                for nb in neighbors(cell)
                if nb in uncovered and nb not in piece
            })
            if not frontier:
                return None
            piece.add(self.rng.choice(frontier))
        return frozenset(piece)

    def _acceptable(self, piece: FrozenSet[Cell]) -> bool:
        return self.allow_free_form or self.catalog.match(piece) is not None


def _slot_for(piece: FrozenSet[Cell], catalog: ShapeCatalog) -> PartitionSlot:
    origin = bounding_origin(piece)
    match = catalog.match(piece)
    if match is None:
        return PartitionSlot(
            cells=piece,
            shape_name=FREE_FORM,
            shape=normalize_shape(piece),
            solution=Solution(x=origin.x, y=origin.y),
        )
    return PartitionSlot(
        cells=piece,
        shape_name=match.name,
        shape=match.shape,
        solution=Solution(x=origin.x, y=origin.y, rotation=match.rotation, flipped=match.flipped),
    )
