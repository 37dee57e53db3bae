"""Grid primitives: the fixed 10x10 coordinate space and coordinate text."""

from __future__ import annotations

import enum
import re
from typing import NamedTuple

from .errors import CoordinateParseError

GRID_SIZE = 10
CELL_COUNT = GRID_SIZE * GRID_SIZE

# Column letter A-J (any case) then row 1-10; "B01" is accepted as row 1.
COORD_RE = re.compile(r"([A-Ja-j])(10|0?[1-9])")


class Coord(NamedTuple):
    """Zero-based cell position; *x* is the column letter, *y* the row number."""

    x: int
    y: int

    def on_grid(self) -> bool:
        return 0 <= self.x < GRID_SIZE and 0 <= self.y < GRID_SIZE

    @property
    def index(self) -> int:
        """Linear cell index used by the hit matrix."""
        return self.x + self.y * GRID_SIZE

    def __str__(self) -> str:
        return format_coordinate(self)


class Rotation(int, enum.Enum):
    """Axis a ship extends along from its anchor."""

    HORIZONTAL = 0
    VERTICAL = 1


def parse_coordinate(text: str) -> Coord:
    """Translate text like 'B4' into ``Coord(1, 3)``.

    Only the exact 2-3 character form is accepted: no surrounding whitespace,
    no signs, nothing outside ASCII.
    """
    if not isinstance(text, str) or not 2 <= len(text) <= 3 or not text.isascii():
        raise CoordinateParseError(f"Invalid coordinate: {text!r}")
    match = COORD_RE.fullmatch(text)
    if match is None:
        raise CoordinateParseError(f"Invalid coordinate: {text!r}")
    column, row = match.groups()
    return Coord(ord(column.upper()) - ord("A"), int(row) - 1)


def format_coordinate(coord: Coord) -> str:
    """Convert a zero-based coordinate to text like 'B4'."""
    return f"{chr(ord('A') + coord.x)}{coord.y + 1}"
