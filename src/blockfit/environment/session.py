"""
Puzzle session: the piece and grid state for one puzzle in play.

All runtime piece mutation goes through ``update_piece_state`` so the
occupancy cache used while dragging stays consistent.
"""

import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from ..engine.geometry import Cell
from ..engine.models import GeneratedPuzzle, Piece, TargetGrid
from ..verifiers.grid import build_occupancy
from ..verifiers.models import PlacementResult, WinResult
from ..verifiers.placement import validate_placement
from ..verifiers.win import check_win, evaluate_win

logger = logging.getLogger(__name__)


class Hint(BaseModel):
    """Where one not-yet-placed piece belongs."""
    piece_id: int
    x: int
    y: int
    rotation: int
    flipped: bool
    shape: List[Cell]
    color: str


class PuzzleSession(BaseModel):
    """
    Owns the pieces and target grid of the puzzle being played.

    Attributes:
        level_number: Level of the puzzle
        pieces: Pieces with their runtime state
        target_grid: The region to tile
        moves: Number of accepted drops
        is_complete: Set once an exact tiling has been reached
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    level_number: int = 1
    pieces: List[Piece] = Field(default_factory=list)
    target_grid: TargetGrid
    moves: int = 0
    is_complete: bool = False

    _dragging: Optional[int] = PrivateAttr(default=None)
    _occupancy: Optional[Set[Cell]] = PrivateAttr(default=None)

    @classmethod
    def from_puzzle(cls, puzzle: GeneratedPuzzle) -> "PuzzleSession":
        """
        Start a session from a generated puzzle.

        Args:
            puzzle: Output of the generator; its pieces are copied

        Returns:
            A new PuzzleSession with every piece in the dock
        """
        pieces = [p.model_copy(deep=True) for p in puzzle.pieces]
        for piece in pieces:
            piece.reset_to_dock()
        return cls(
            level_number=puzzle.level_number,
            pieces=pieces,
            target_grid=puzzle.target_grid.model_copy(deep=True),
        )

    @property
    def board_rows(self) -> int:
        return self.target_grid.rows

    @property
    def board_cols(self) -> int:
        return self.target_grid.cols

    @property
    def board_center(self) -> Tuple[float, float]:
        """Center of the board in grid units, as (x, y)."""
        return (self.board_cols / 2, self.board_rows / 2)

    def get_piece(self, piece_id: int) -> Optional[Piece]:
        for piece in self.pieces:
            if piece.id == piece_id:
                return piece
        return None

    def update_piece_state(
        self,
        piece_id: int,
        x: Optional[int] = None,
        y: Optional[int] = None,
        rotation: Optional[int] = None,
        flipped: Optional[bool] = None,
    ) -> Optional[Piece]:
        """
        Apply a partial runtime state to a piece without validating it.

        This is the single mutation entry point used by input handlers and
        automation alike.

        Returns:
            The updated piece, or None if no piece has that id
        """
        piece = self.get_piece(piece_id)
        if piece is None:
            logger.warning("update_piece_state: unknown piece id %s", piece_id)
            return None
        if x is not None:
            piece.x = x
        if y is not None:
            piece.y = y
        if rotation is not None:
            piece.rotation = rotation % 4
        if flipped is not None:
            piece.flipped = flipped
        if self._dragging != piece_id:
            self._occupancy = None
        return piece

    # -- dragging

    def begin_drag(self, piece_id: int) -> None:
        """Cache the cells covered by every other piece for the drag."""
        self._dragging = piece_id
        self._occupancy = build_occupancy(self.pieces, self.target_grid, exclude_id=piece_id)

    def end_drag(self) -> None:
        self._dragging = None
        self._occupancy = None

    def _occupied_excluding(self, piece_id: int) -> Set[Cell]:
        if self._dragging == piece_id and self._occupancy is not None:
            return self._occupancy
        return build_occupancy(self.pieces, self.target_grid, exclude_id=piece_id)

    # -- validation

    def validate_move(
        self,
        piece_id: int,
        x: int,
        y: int,
        rotation: Optional[int] = None,
        flipped: Optional[bool] = None,
    ) -> PlacementResult:
        """Check a proposed drop; rotation and flip default to the piece's current state."""
        piece = self.get_piece(piece_id)
        if piece is None:
            return PlacementResult(legal=False, reason="UNKNOWN_PIECE")
        return validate_placement(
            piece,
            x,
            y,
            piece.rotation if rotation is None else rotation,
            piece.flipped if flipped is None else flipped,
            self.target_grid,
            occupied=self._occupied_excluding(piece_id),
        )

    def drop_piece(
        self,
        piece_id: int,
        x: int,
        y: int,
        rotation: Optional[int] = None,
        flipped: Optional[bool] = None,
    ) -> PlacementResult:
        """
        Drop a piece on the board.

        A legal drop is applied; an illegal one sends the piece back to its
        dock slot. Ends any drag in progress.

        Returns:
            The placement result for the attempted drop
        """
        result = self.validate_move(piece_id, x, y, rotation, flipped)
        self.end_drag()
        if result.legal:
            self.update_piece_state(piece_id, x=x, y=y, rotation=rotation, flipped=flipped)
            self.moves += 1
            if self.check_win():
                self.is_complete = True
                logger.info("Level %d solved in %d moves", self.level_number, self.moves)
        else:
            self.return_to_dock(piece_id)
        return result

    def return_to_dock(self, piece_id: int) -> None:
        piece = self.get_piece(piece_id)
        if piece is not None:
            dock_x, dock_y = piece.dock_position
            self.update_piece_state(piece_id, x=dock_x, y=dock_y)

    # -- win and hints

    def check_win(self) -> bool:
        return check_win(self.pieces, self.target_grid)

    def evaluate_win(self) -> WinResult:
        return evaluate_win(self.pieces, self.target_grid)

    def get_hint(self) -> Optional[Hint]:
        """
        Point at the first piece not covering its solution cells.

        Returns:
            A Hint with the piece's solution position, orientation and cells,
            or None when every piece sits on its solution
        """
        for piece in self.pieces:
            solution_cells = piece.solution_cells()
            on_board = not piece.is_in_dock(self.board_rows)
            if on_board and sorted(piece.cells()) == sorted(solution_cells):
                continue
            s = piece.solution
            return Hint(
                piece_id=piece.id,
                x=s.x,
                y=s.y,
                rotation=s.rotation,
                flipped=s.flipped,
                shape=solution_cells,
                color=piece.color,
            )
        return None

    def solve(self) -> None:
        """Place every piece on its solution slot."""
        self.end_drag()
        for piece in self.pieces:
            s = piece.solution
            self.update_piece_state(piece.id, x=s.x, y=s.y, rotation=s.rotation, flipped=s.flipped)
        self.is_complete = self.check_win()

    def reset(self) -> None:
        """Send every piece back to the dock."""
        self.end_drag()
        for piece in self.pieces:
            self.update_piece_state(piece.id, x=piece.dock_position.x, y=piece.dock_position.y, rotation=0, flipped=False)
        self.moves = 0
        self.is_complete = False

    def get_state(self) -> Dict[str, Any]:
        """
        Get a snapshot of the session for renderers and logging.

        Returns:
            Dictionary containing the level, grid, pieces and progress
        """
        return {
            "level_number": self.level_number,
            "board_rows": self.board_rows,
            "board_cols": self.board_cols,
            "board_center": self.board_center,
            "target_grid": [list(row) for row in self.target_grid.cells],
            "pieces": [
                {
                    "id": p.id,
                    "shape_name": p.shape_name,
                    "color": p.color,
                    "x": p.x,
                    "y": p.y,
                    "rotation": p.rotation,
                    "flipped": p.flipped,
                    "in_dock": p.is_in_dock(self.board_rows),
                }
                for p in self.pieces
            ],
            "moves": self.moves,
            "is_complete": self.is_complete,
        }
