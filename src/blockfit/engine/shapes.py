"""
Shape catalog: named polyominoes and their rotated/flipped variants.

A shape is a tuple of cells relative to its bounding-box origin. Transforms
follow one convention everywhere: flip first, then rotate clockwise
``rotation`` times, then normalize.
"""

from typing import Dict, Iterable, List, Literal, NamedTuple, Optional, Sequence, Tuple

from .geometry import Cell

Shape = Tuple[Cell, ...]
Category = Literal["easy", "medium", "hard"]


def rotate_shape(cells: Iterable[Tuple[int, int]]) -> List[Cell]:
    """Rotate 90 degrees clockwise (y axis points down)."""
    return [Cell(-y, x) for x, y in cells]


def flip_shape(cells: Iterable[Tuple[int, int]]) -> List[Cell]:
    """Mirror horizontally."""
    return [Cell(-x, y) for x, y in cells]


def normalize_shape(cells: Iterable[Tuple[int, int]]) -> Shape:
    """Translate so the bounding box starts at (0, 0); row-major order."""
    cells = list(cells)
    if not cells:
        return ()
    min_x = min(c[0] for c in cells)
    min_y = min(c[1] for c in cells)
    moved = {Cell(x - min_x, y - min_y) for x, y in cells}
    return tuple(sorted(moved, key=lambda c: (c.y, c.x)))


def apply_transform(cells: Iterable[Tuple[int, int]], rotation: int = 0, flipped: bool = False) -> Shape:
    """Effective shape: ``rotate(flip(cells, flipped), rotation)``, normalized."""
    out = list(cells)
    if flipped:
        out = flip_shape(out)
    for _ in range(rotation % 4):
        out = rotate_shape(out)
    return normalize_shape(out)


def shape_dimensions(cells: Optional[Sequence[Tuple[int, int]]]) -> Tuple[int, int]:
    """Return (width, height) of a normalized shape; (0, 0) when empty."""
    if not cells:
        return 0, 0
    return max(c[0] for c in cells) + 1, max(c[1] for c in cells) + 1


def _shape(*coords: Tuple[int, int]) -> Shape:
    return normalize_shape(coords)


# Every free polyomino of 2-5 cells
SHAPES: Dict[str, Shape] = {
    # 2 blocks
    "Domino": _shape((0, 0), (0, 1)),

    # 3 blocks
    "Line3": _shape((0, 0), (0, 1), (0, 2)),
    "Corner3": _shape((0, 0), (0, 1), (1, 1)),

    # 4 blocks
    "T": _shape((0, 0), (1, 0), (2, 0), (1, 1)),
    "L": _shape((0, 0), (0, 1), (0, 2), (1, 2)),
    "S": _shape((1, 0), (2, 0), (0, 1), (1, 1)),
    "Square": _shape((0, 0), (1, 0), (0, 1), (1, 1)),
    "Line4": _shape((0, 0), (0, 1), (0, 2), (0, 3)),

    # 5 blocks
    "C": _shape((0, 0), (1, 0), (0, 1), (0, 2), (1, 2)),
    "P": _shape((0, 0), (1, 0), (0, 1), (1, 1), (0, 2)),
    "L5": _shape((0, 0), (0, 1), (0, 2), (0, 3), (1, 3)),
    "Y": _shape((0, 0), (0, 1), (1, 1), (0, 2), (0, 3)),
    "N": _shape((0, 0), (0, 1), (0, 2), (1, 2), (1, 3)),
    "F": _shape((1, 0), (2, 0), (0, 1), (1, 1), (1, 2)),
    "W": _shape((0, 0), (0, 1), (1, 1), (1, 2), (2, 2)),
    "Z5": _shape((0, 0), (1, 0), (1, 1), (1, 2), (2, 2)),
    "T5": _shape((0, 0), (1, 0), (2, 0), (1, 1), (1, 2)),
    "V": _shape((0, 0), (0, 1), (0, 2), (1, 2), (2, 2)),
    "X": _shape((1, 0), (0, 1), (1, 1), (2, 1), (1, 2)),
    "Line5": _shape((0, 0), (0, 1), (0, 2), (0, 3), (0, 4)),
}

# Piece categories by difficulty
PIECE_CATEGORIES: Dict[Category, Tuple[str, ...]] = {
    # symmetric or simple
    "easy": ("Domino", "Line3", "Square", "Line4"),
    # slightly asymmetric
    "medium": ("Corner3", "T", "L", "Line5", "X", "T5", "V"),
    # highly asymmetric, tricky to place
    "hard": ("S", "C", "P", "L5", "Y", "N", "F", "W", "Z5"),
}

COLORS: Tuple[str, ...] = (
    "#F92672",  # pink
    "#00E5FF",  # cyan
    "#A6E22E",  # lime
    "#FD971F",  # orange
    "#AE81FF",  # purple
    "#E6DB74",  # yellow
    "#FF3333",  # red
    "#F8F8F2",  # white
)


def category_of(name: str) -> Optional[Category]:
    for category, names in PIECE_CATEGORIES.items():
        if name in names:
            return category
    return None


def base_shapes(
    max_cells: int,
    categories: Optional[Iterable[Category]] = None,
    min_cells: int = 1,
) -> Dict[str, Shape]:
    """
    Canonical catalog shapes within a size range.

    Args:
        max_cells: Largest shape size to include
        categories: Restrict to these difficulty categories (all if None)
        min_cells: Smallest shape size to include

    Returns:
        Mapping of shape name to its canonical cells
    """
    allowed = set(categories) if categories is not None else None
    result: Dict[str, Shape] = {}
    for name, cells in SHAPES.items():
        if not min_cells <= len(cells) <= max_cells:
            continue
        if allowed is not None and category_of(name) not in allowed:
            continue
        result[name] = cells
    return result


class ShapeVariant(NamedTuple):
    """One distinct orientation of a shape."""
    rotation: int
    flipped: bool
    cells: Shape


def variants(cells: Iterable[Tuple[int, int]]) -> List[ShapeVariant]:
    """
    All distinct orientations of a shape (at most 8).

    Orientations that normalize to the same cell set are reported once, using
    the first transform that produced them (unflipped before flipped, fewer
    rotations first). A square has 1 variant, an L tetromino 8.
    """
    base = list(cells)
    seen = set()
    result: List[ShapeVariant] = []
    for flipped in (False, True):
        for rotation in range(4):
            shape = apply_transform(base, rotation, flipped)
            if shape in seen:
                continue
            seen.add(shape)
            result.append(ShapeVariant(rotation, flipped, shape))
    return result


class ShapeMatch(NamedTuple):
    """A catalog shape plus the transform that turns it into a given cell set."""
    name: str
    shape: Shape
    rotation: int
    flipped: bool


class ShapeCatalog:
    """
    Lookup from any orientation of a shape to its catalog entry.

    Matching is structural: the cells are normalized, so position does not
    matter.
    """

    def __init__(self, shapes: Optional[Dict[str, Shape]] = None):
        self.shapes: Dict[str, Shape] = dict(SHAPES if shapes is None else shapes)
        self._index: Dict[Shape, ShapeMatch] = {}
        for name, shape in self.shapes.items():
            for variant in variants(shape):
                self._index.setdefault(
                    variant.cells,
                    ShapeMatch(name, shape, variant.rotation, variant.flipped),
                )

    @classmethod
    def for_config(cls, max_cells: int, categories: Optional[Iterable[Category]] = None) -> "ShapeCatalog":
        return cls(base_shapes(max_cells, categories))

    @property
    def sizes(self) -> List[int]:
        """Distinct shape sizes present in the catalog."""
        return sorted({len(s) for s in self.shapes.values()})

    def match(self, cells: Iterable[Tuple[int, int]]) -> Optional[ShapeMatch]:
        """Find the catalog shape and transform for a cell set, if any."""
        return self._index.get(normalize_shape(cells))

    def __contains__(self, name: str) -> bool:
        return name in self.shapes

    def __len__(self) -> int:
        return len(self.shapes)
