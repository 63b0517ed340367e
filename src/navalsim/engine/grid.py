"""Fixed 10×10 cell-state matrix."""

from __future__ import annotations

import logging
from enum import IntEnum

import numpy as np
import numpy.typing as npt

from .coordinates import BOARD_SIZE, Coordinate

logger = logging.getLogger(__name__)


class CellState(IntEnum):
    """Status of a grid cell. Values are the codes used when rendering."""

    EMPTY = 0
    HIT_WATER = 1
    HIT = 2
    SHIP = 3


class Grid:
    """Square board of :class:`CellState` values backed by a numpy array."""

    size = BOARD_SIZE

    def __init__(self) -> None:
        self._cells: npt.NDArray[np.int8] = np.full(
            (self.size, self.size), CellState.EMPTY, dtype=np.int8
        )

    def is_in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def is_available(self, row: int, col: int) -> bool:
        """True when the cell exists and nothing has been put or fired there."""
        return self.is_in_bounds(row, col) and self.get_state(row, col) is CellState.EMPTY

    def get_state(self, row: int, col: int) -> CellState:
        self._require_in_bounds(row, col)
        return CellState(int(self._cells[row, col]))

    def set_state(self, row: int, col: int, state: CellState) -> None:
        """Overwrite a cell. Transition rules are enforced by the callers."""
        self._require_in_bounds(row, col)
        self._cells[row, col] = state

    def cells_in_state(self, state: CellState) -> list[Coordinate]:
        """Row-major list of every coordinate currently in ``state``."""
        return [Coordinate(int(row), int(col)) for row, col in np.argwhere(self._cells == state)]

    def count(self, state: CellState) -> int:
        return int(np.count_nonzero(self._cells == state))

    def snapshot(self) -> npt.NDArray[np.int8]:
        view = self._cells.copy()
        view.setflags(write=False)
        return view

    def to_matrix(self) -> list[list[int]]:
        """Rows of integer state codes, as consumed by the text renderer."""
        return self._cells.tolist()

    def _require_in_bounds(self, row: int, col: int) -> None:
        # numpy would silently wrap negative indices
        if not self.is_in_bounds(row, col):
            logger.error("grid_access_out_of_bounds", extra={"row": row, "col": col})
            raise ValueError(f"Cell ({row}, {col}) is outside the {self.size}x{self.size} grid.")
