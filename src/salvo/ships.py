"""Ship model: the fixed roster and the one-byte packed ship state.

A packed ship is a single byte::

    bit 7     : rotation (0 = horizontal, 1 = vertical)
    bits 0-6  : anchor linearized over a 9-wide line

The 9-wide line runs along the axis the ship extends on, since a ship of
length >= 2 can never be anchored in the last column (horizontal) or last row
(vertical). Every legal anchor therefore has exactly one byte.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .grid import GRID_SIZE, Coord, Rotation

LINE_WIDTH: Final[int] = GRID_SIZE - 1
ROTATION_BIT: Final[int] = 0x80
ANCHOR_MASK: Final[int] = 0x7F


@dataclass(frozen=True, slots=True)
class ShipType:
    """Static descriptor of one roster entry."""

    label: str
    index: int
    length: int
    letter: str


# Fixed roster; ships are always referenced by their index in this table.
ROSTER: Final[tuple[ShipType, ...]] = (
    ShipType("Carrier", 0, 5, "A"),
    ShipType("Battleship", 1, 4, "B"),
    ShipType("Cruiser", 2, 3, "C"),
    ShipType("Submarine", 3, 3, "S"),
    ShipType("Destroyer", 4, 2, "D"),
)
FLEET_SIZE: Final[int] = len(ROSTER)


def pack_ship(anchor: Coord, rotation: Rotation, length: int) -> int:
    """Pack *anchor*/*rotation* into one byte, asserting the ship fits the grid."""
    assert 0 <= anchor.x < GRID_SIZE and 0 <= anchor.y < GRID_SIZE, f"anchor {anchor} off grid"
    if rotation is Rotation.HORIZONTAL:
        assert anchor.x + length <= GRID_SIZE, f"length {length} overruns row at {anchor}"
        assert anchor.x < LINE_WIDTH
        return anchor.x + anchor.y * LINE_WIDTH
    assert anchor.y + length <= GRID_SIZE, f"length {length} overruns column at {anchor}"
    assert anchor.y < LINE_WIDTH
    return (anchor.y + anchor.x * LINE_WIDTH) | ROTATION_BIT


def unpack_ship(packed: int) -> tuple[Coord, Rotation]:
    """Inverse of :func:`pack_ship`; performs no range checks."""
    rotation = Rotation(packed >> 7 & 1)
    major, minor = divmod(packed & ANCHOR_MASK, LINE_WIDTH)
    if rotation is Rotation.HORIZONTAL:
        return Coord(minor, major), rotation
    return Coord(major, minor), rotation


def boxes_intersect(a: tuple[Coord, Coord], b: tuple[Coord, Coord]) -> bool:
    """Axis-aligned overlap test on two inclusive (top-left, bottom-right) boxes."""
    (a_lo, a_hi), (b_lo, b_hi) = a, b
    return a_lo.x <= b_hi.x and b_lo.x <= a_hi.x and a_lo.y <= b_hi.y and b_lo.y <= a_hi.y


@dataclass(frozen=True, slots=True)
class Ship:
    """A roster entry together with its packed placement."""

    kind: ShipType
    packed: int

    @property
    def anchor(self) -> Coord:
        return unpack_ship(self.packed)[0]

    @property
    def rotation(self) -> Rotation:
        return unpack_ship(self.packed)[1]

    def bounds(self) -> tuple[Coord, Coord]:
        """Inclusive bounding box (first tile, last tile)."""
        anchor, rotation = unpack_ship(self.packed)
        span = self.kind.length - 1
        if rotation is Rotation.HORIZONTAL:
            return anchor, Coord(anchor.x + span, anchor.y)
        return anchor, Coord(anchor.x, anchor.y + span)

    def tiles(self) -> list[Coord]:
        """Occupied tiles in order, starting at the anchor."""
        anchor, rotation = unpack_ship(self.packed)
        if rotation is Rotation.HORIZONTAL:
            return [Coord(anchor.x + i, anchor.y) for i in range(self.kind.length)]
        return [Coord(anchor.x, anchor.y + i) for i in range(self.kind.length)]

    def contains(self, coord: Coord) -> bool:
        lo, hi = self.bounds()
        return lo.x <= coord.x <= hi.x and lo.y <= coord.y <= hi.y

    def overlaps(self, other: Ship) -> bool:
        return boxes_intersect(self.bounds(), other.bounds())

    def on_grid(self) -> bool:
        lo, hi = self.bounds()
        return lo.on_grid() and hi.on_grid()
