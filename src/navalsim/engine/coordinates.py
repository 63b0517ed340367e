"""Coordinate value type and the letter/digit text codec."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

BOARD_SIZE = 10
COLUMN_LETTERS = "ABCDEFGHIJ"


@dataclass(frozen=True)
class Coordinate:
    """Immutable board coordinate."""

    row: int
    col: int

    def offset(self, d_row: int, d_col: int) -> Coordinate:
        return Coordinate(self.row + d_row, self.col + d_col)

    @property
    def label(self) -> str:
        """Board notation such as ``A5`` (column letter then row)."""
        return f"{column_to_letter(self.col)}{self.row}"


class InputError(Enum):
    """Reasons a coordinate or orientation token is rejected."""

    INVALID_FORMAT = "invalid_format"
    INVALID_COLUMN = "invalid_column"
    INVALID_ROW = "invalid_row"
    INVALID_ORIENTATION = "invalid_orientation"


def column_to_letter(col: int) -> str:
    if not 0 <= col < BOARD_SIZE:
        raise ValueError(f"Column index {col} is outside the board.")
    return COLUMN_LETTERS[col]


def letter_to_column(letter: str) -> int | None:
    """Map ``A``-``J`` (either case) to 0-9; anything else gives ``None``."""
    if len(letter) != 1:
        return None
    index = COLUMN_LETTERS.find(letter.upper())
    return index if index >= 0 else None


def parse_coordinate(text: str) -> Coordinate | InputError:
    """Parse ``<letter><row>`` notation, e.g. ``A5`` -> row 5, column 0.

    The whole token after the letter must be a base-10 row in ``[0, 9]``;
    trailing characters are rejected as an invalid row.
    """
    token = text.strip()
    if len(token) < 2:
        return InputError.INVALID_FORMAT

    col = letter_to_column(token[0])
    if col is None:
        return InputError.INVALID_COLUMN

    digits = token[1:]
    if not (digits.isascii() and digits.isdigit()):
        return InputError.INVALID_ROW
    row = int(digits)
    if row >= BOARD_SIZE:
        return InputError.INVALID_ROW
    return Coordinate(row, col)
