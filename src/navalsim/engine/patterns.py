"""Fixed 5×5 area-of-effect masks for the special attacks.

Each mask is centred on local cell (2, 2); an affected cell ``(i, j)`` lands on
board cell ``(center_row - 2 + i, center_col - 2 + j)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Iterable

import numpy as np
import numpy.typing as npt

PATTERN_SIZE = 5
PATTERN_CENTER = PATTERN_SIZE // 2

CONE_CELLS: tuple[tuple[int, int], ...] = (
    (0, 2),
    (1, 1), (1, 2), (1, 3),
    (2, 0), (2, 1), (2, 2), (2, 3), (2, 4),
)

OCTAHEDRON_CELLS: tuple[tuple[int, int], ...] = (
    (0, 2),
    (1, 1), (1, 2), (1, 3),
    (2, 2),
)


class PatternKind(Enum):
    """Named special attacks."""

    CONE = "cone"
    CROSS = "cross"
    OCTAHEDRON = "octahedron"

    @property
    def title(self) -> str:
        return self.name


@dataclass(frozen=True, eq=False)
class AttackPattern:
    """Read-only boolean mask; ``True`` marks an affected cell."""

    kind: PatternKind
    mask: npt.NDArray[np.bool_]

    @property
    def name(self) -> str:
        return self.kind.title

    @property
    def affected_count(self) -> int:
        return int(np.count_nonzero(self.mask))

    def affected_offsets(self) -> list[tuple[int, int]]:
        """Row-major ``(d_row, d_col)`` offsets of affected cells from the centre."""
        return [
            (int(row) - PATTERN_CENTER, int(col) - PATTERN_CENTER)
            for row, col in np.argwhere(self.mask)
        ]

    def to_matrix(self) -> list[list[bool]]:
        return self.mask.tolist()


def _freeze(kind: PatternKind, mask: npt.NDArray[np.bool_]) -> AttackPattern:
    mask.setflags(write=False)
    return AttackPattern(kind, mask)


def _mask_from_cells(cells: Iterable[tuple[int, int]]) -> npt.NDArray[np.bool_]:
    mask = np.zeros((PATTERN_SIZE, PATTERN_SIZE), dtype=bool)
    for row, col in cells:
        mask[row, col] = True
    return mask


def build_cone() -> AttackPattern:
    """1-3-5 widening triangle in the top three rows."""
    return _freeze(PatternKind.CONE, _mask_from_cells(CONE_CELLS))


def build_cross() -> AttackPattern:
    """Full middle row and full middle column."""
    mask = np.zeros((PATTERN_SIZE, PATTERN_SIZE), dtype=bool)
    mask[PATTERN_CENTER, :] = True
    mask[:, PATTERN_CENTER] = True
    return _freeze(PatternKind.CROSS, mask)


def build_octahedron() -> AttackPattern:
    """Compact five-cell diamond."""
    return _freeze(PatternKind.OCTAHEDRON, _mask_from_cells(OCTAHEDRON_CELLS))


_BUILDERS = {
    PatternKind.CONE: build_cone,
    PatternKind.CROSS: build_cross,
    PatternKind.OCTAHEDRON: build_octahedron,
}


@lru_cache(maxsize=None)
def get_pattern(kind: PatternKind) -> AttackPattern:
    """Shared, cached instance of the pattern for ``kind``."""
    return _BUILDERS[kind]()
