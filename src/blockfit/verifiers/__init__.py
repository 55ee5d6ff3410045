"""Placement validation and win evaluation."""

from .models import PlacementResult, WinResult
from .placement import validate_placement, is_valid_placement
from .win import evaluate_win, check_win
from .grid import build_occupancy, coverage_counts, find_enclosed_cells, pieces_on_board

__all__ = [
    # Validation
    "validate_placement",
    "is_valid_placement",
    "evaluate_win",
    "check_win",
    # Models
    "PlacementResult",
    "WinResult",
    # Grid utilities
    "build_occupancy",
    "coverage_counts",
    "find_enclosed_cells",
    "pieces_on_board",
]
