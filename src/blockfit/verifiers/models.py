"""Result models for placement validation and win evaluation."""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ..engine.geometry import Cell

PlacementReason = Literal["NO_GRID", "UNKNOWN_PIECE", "EMPTY_SHAPE", "OUT_OF_BOUNDS", "WALL", "OCCUPIED"]


class PlacementResult(BaseModel):
    """Outcome of validating a proposed piece placement."""
    legal: bool
    reason: Optional[PlacementReason] = None
    cells: List[Cell] = Field(default_factory=list)  # absolute cells the piece would cover


class WinResult(BaseModel):
    """Outcome of evaluating the current arrangement."""
    solved: bool
    uncovered: List[Cell] = Field(default_factory=list)
    overlaps: List[Cell] = Field(default_factory=list)
    outside: List[Cell] = Field(default_factory=list)  # piece cells on walls or off the board
    in_dock: List[int] = Field(default_factory=list)  # ids of pieces still in the dock
