"""
Pydantic models for the puzzle engine.

LevelConfig and TargetGrid are created once per generation attempt; Piece
carries both its fixed solution and the runtime state mutated by the player.
"""

from enum import IntEnum
from typing import FrozenSet, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .geometry import Cell, is_connected
from .shapes import Category, Shape, apply_transform
from .templates import BOARD_TEMPLATES


MAX_BOARD_SIZE = 16
MAX_PIECE_COUNT = 12


class CellState(IntEnum):
    """State of a target grid cell."""
    WALL = 0
    FILLABLE = 1


class LevelConfig(BaseModel):
    """
    Generation parameters derived from a level number.

    Attributes:
        level_number: The level these parameters were derived for
        piece_count: Number of pieces in the puzzle
        board_rows: Board height in cells
        board_cols: Board width in cells
        min_piece_cells: Smallest piece size the carver plans for
        max_piece_cells: Largest piece size the carver plans for
        irregularity: 0 = compact regions, 1 = notched, concave regions
        template: Optional irregular board mask name
        categories: Shape difficulty categories the partitioner may emit
    """
    # Accepts both level_number and levelNumber style keys from the worker protocol
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    level_number: int = Field(default=1, ge=1)
    piece_count: int = Field(default=3, ge=1, le=MAX_PIECE_COUNT)
    board_rows: int = Field(default=5, ge=1, le=MAX_BOARD_SIZE)
    board_cols: int = Field(default=5, ge=1, le=MAX_BOARD_SIZE)
    min_piece_cells: int = Field(default=3, ge=1)
    max_piece_cells: int = Field(default=4, ge=1)
    irregularity: float = Field(default=0.0, ge=0.0, le=1.0)
    template: Optional[str] = None
    categories: Tuple[Category, ...] = ("easy", "medium")

    @model_validator(mode="after")
    def _check_sizes(self) -> "LevelConfig":
        if self.min_piece_cells > self.max_piece_cells:
            raise ValueError(
                f"min_piece_cells ({self.min_piece_cells}) exceeds "
                f"max_piece_cells ({self.max_piece_cells})"
            )
        if self.piece_count * self.min_piece_cells > self.open_cells:
            raise ValueError(
                f"{self.piece_count} pieces of {self.min_piece_cells}+ cells "
                f"do not fit a {self.board_rows}x{self.board_cols} board"
            )
        return self

    @field_validator("template")
    @classmethod
    def _check_template(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in BOARD_TEMPLATES:
            raise ValueError(f"Unknown board template '{value}'")
        return value

    @model_validator(mode="after")
    def _check_template_dimensions(self) -> "LevelConfig":
        if self.template is not None:
            template = BOARD_TEMPLATES[self.template]
            if (template.rows, template.cols) != (self.board_rows, self.board_cols):
                raise ValueError(
                    f"Template '{self.template}' is {template.rows}x{template.cols}, "
                    f"board is {self.board_rows}x{self.board_cols}"
                )
        return self

    @property
    def open_cells(self) -> int:
        """Cells the carver may use: board area minus template cutouts."""
        if self.template is not None:
            return BOARD_TEMPLATES[self.template].open_cells
        return self.board_rows * self.board_cols


class TargetGrid(BaseModel):
    """Rectangular matrix of CellState values, indexed ``cells[y][x]``."""
    cells: List[List[int]]

    @field_validator("cells")
    @classmethod
    def _check_shape(cls, value: List[List[int]]) -> List[List[int]]:
        if not value or not value[0]:
            raise ValueError("Target grid must have at least one row and one column")
        width = len(value[0])
        for row in value:
            if len(row) != width:
                raise ValueError("Target grid rows must all have the same length")
            for v in row:
                if v not in (CellState.WALL, CellState.FILLABLE):
                    raise ValueError(f"Invalid cell state {v!r}")
        return value

    @classmethod
    def from_cells(cls, rows: int, cols: int, fillable: FrozenSet[Tuple[int, int]]) -> "TargetGrid":
        """Build a grid where exactly ``fillable`` cells are FILLABLE."""
        cells = [
            [int(CellState.FILLABLE if (x, y) in fillable else CellState.WALL) for x in range(cols)]
            for y in range(rows)
        ]
        return cls(cells=cells)

    @property
    def rows(self) -> int:
        return len(self.cells)

    @property
    def cols(self) -> int:
        return len(self.cells[0])

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.cols and 0 <= y < self.rows

    def is_fillable(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self.cells[y][x] == CellState.FILLABLE

    def fillable_cells(self) -> FrozenSet[Cell]:
        return frozenset(
            Cell(x, y)
            for y, row in enumerate(self.cells)
            for x, v in enumerate(row)
            if v == CellState.FILLABLE
        )

    @property
    def fillable_count(self) -> int:
        return sum(1 for row in self.cells for v in row if v == CellState.FILLABLE)

    def is_connected(self) -> bool:
        """True if the FILLABLE cells form a single 4-connected region."""
        return is_connected(self.fillable_cells())


class Solution(BaseModel):
    """The transform that puts a piece on its designated tiling slot."""
    x: int
    y: int
    rotation: int = Field(default=0, ge=0, le=3)
    flipped: bool = False


class Piece(BaseModel):
    """
    A puzzle piece.

    ``shape`` is the catalog shape the player is handed; the player must find
    ``solution.rotation``/``solution.flipped`` themselves. ``x``, ``y``,
    ``rotation`` and ``flipped`` are runtime state.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: int = Field(ge=0)
    shape_name: str = ""
    shape: List[Cell]
    color: str = "#F8F8F2"
    dock_position: Cell = Cell(0, 0)
    solution: Solution
    x: int = 0
    y: int = 0
    rotation: int = Field(default=0, ge=0, le=3)
    flipped: bool = False

    @property
    def size(self) -> int:
        return len(self.shape)

    def effective_shape(self, rotation: Optional[int] = None, flipped: Optional[bool] = None) -> Shape:
        """Current (or hypothetical) shape after flip and rotation."""
        return apply_transform(
            self.shape,
            self.rotation if rotation is None else rotation,
            self.flipped if flipped is None else flipped,
        )

    def cells_at(self, x: int, y: int, rotation: int, flipped: bool) -> List[Cell]:
        return [Cell(x + c.x, y + c.y) for c in self.effective_shape(rotation, flipped)]

    def cells(self) -> List[Cell]:
        """Absolute cells covered at the current runtime state."""
        return self.cells_at(self.x, self.y, self.rotation, self.flipped)

    def solution_cells(self) -> List[Cell]:
        s = self.solution
        return self.cells_at(s.x, s.y, s.rotation, s.flipped)

    def is_in_dock(self, board_rows: int) -> bool:
        """Pieces resting below the board are in the dock."""
        return self.y >= board_rows

    def reset_to_dock(self) -> None:
        self.x, self.y = self.dock_position


class GeneratedPuzzle(BaseModel):
    """Output of one successful generation."""
    level_number: int
    pieces: List[Piece]
    target_grid: TargetGrid
    seed: Optional[int] = None
    attempts: int = 1

    @property
    def piece_count(self) -> int:
        return len(self.pieces)

    @property
    def board_rows(self) -> int:
        return self.target_grid.rows

    @property
    def board_cols(self) -> int:
        return self.target_grid.cols


GenerationState = Literal["IDLE", "CARVING", "PARTITIONING", "RETRYING", "SUCCESS", "FAILED"]
