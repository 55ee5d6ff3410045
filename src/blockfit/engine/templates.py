"""
Irregular board templates.

Each template is a base rectangle plus cutout cells that can never be
carved. They add variety rather than difficulty.
"""

from typing import Dict, FrozenSet, NamedTuple

from .geometry import Cell


class BoardTemplate(NamedTuple):
    rows: int
    cols: int
    cutouts: FrozenSet[Cell]

    @property
    def open_cells(self) -> int:
        return self.rows * self.cols - len(self.cutouts)


def _cutouts(*coords) -> FrozenSet[Cell]:
    return frozenset(Cell(x, y) for x, y in coords)


BOARD_TEMPLATES: Dict[str, BoardTemplate] = {
    # ##...
    # ##...
    # #####
    # #####
    # #####
    "L": BoardTemplate(5, 5, _cutouts(
        (2, 0), (3, 0), (4, 0),
        (2, 1), (3, 1), (4, 1),
    )),
    # #####
    # #####
    # #####
    # .###.
    # .###.
    "T": BoardTemplate(5, 5, _cutouts((0, 3), (4, 3), (0, 4), (4, 4))),
    # ..##..
    # ..##..
    # ######
    # ######
    # ..##..
    # ..##..
    "cross": BoardTemplate(6, 6, _cutouts(
        (0, 0), (1, 0), (4, 0), (5, 0),
        (0, 1), (1, 1), (4, 1), (5, 1),
        (0, 4), (1, 4), (4, 4), (5, 4),
        (0, 5), (1, 5), (4, 5), (5, 5),
    )),
    # ##.##
    # ##.##
    # #####
    # #####
    "U": BoardTemplate(4, 5, _cutouts((2, 0), (2, 1))),
    # #....
    # ##...
    # ###..
    # ####.
    # #####
    "steps": BoardTemplate(5, 5, _cutouts(
        (1, 0), (2, 0), (3, 0), (4, 0),
        (2, 1), (3, 1), (4, 1),
        (3, 2), (4, 2),
        (4, 3),
    )),
}
