"""Procedural puzzle generation: shapes, carving, partitioning."""

from .geometry import Cell, neighbors, components, is_connected
from .models import (
    CellState,
    LevelConfig,
    TargetGrid,
    Solution,
    Piece,
    GeneratedPuzzle,
    GenerationState,
)
from .shapes import (
    SHAPES,
    PIECE_CATEGORIES,
    COLORS,
    ShapeCatalog,
    ShapeMatch,
    ShapeVariant,
    apply_transform,
    base_shapes,
    flip_shape,
    normalize_shape,
    rotate_shape,
    shape_dimensions,
    variants,
)
from .templates import BOARD_TEMPLATES, BoardTemplate
from .carver import carve_region, carve_for_template, template_mask
from .partitioner import PartitionSlot, partition_region, piece_sizes
from .difficulty import derive_level_config, next_level, perturb_config, piece_count_for_level
from .generator import generate_level, generate_puzzle, check_tiling
from .solver import count_solutions

__all__ = [
    # Geometry
    "Cell",
    "neighbors",
    "components",
    "is_connected",
    # Models
    "CellState",
    "LevelConfig",
    "TargetGrid",
    "Solution",
    "Piece",
    "GeneratedPuzzle",
    "GenerationState",
    # Shape catalog
    "SHAPES",
    "PIECE_CATEGORIES",
    "COLORS",
    "ShapeCatalog",
    "ShapeMatch",
    "ShapeVariant",
    "apply_transform",
    "base_shapes",
    "flip_shape",
    "normalize_shape",
    "rotate_shape",
    "shape_dimensions",
    "variants",
    # Board carving
    "BOARD_TEMPLATES",
    "BoardTemplate",
    "carve_region",
    "carve_for_template",
    "template_mask",
    # Partitioning
    "PartitionSlot",
    "partition_region",
    "piece_sizes",
    # Levels and generation
    "derive_level_config",
    "next_level",
    "perturb_config",
    "piece_count_for_level",
    "generate_level",
    "generate_puzzle",
    "check_tiling",
    "count_solutions",
]
