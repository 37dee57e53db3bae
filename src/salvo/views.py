"""Board views: per-cell flag grids and plain-text rows for one player.

The presentation layer renders these however it likes; the engine only
decides what each cell *is*. Grids are indexed ``[y, x]``.

``reveal=True`` is the owner's view. ``reveal=False`` is what the opponent
may see: ships appear only where they have been hit.
"""

from __future__ import annotations

import enum
import logging

import numpy as np

from .grid import CELL_COUNT, GRID_SIZE
from .ships import ShipType
from .state import PlayerState

logger = logging.getLogger(__name__)


class CellFlag(enum.IntFlag):
    NONE = 0
    HIT = 1
    SUNK = 2
    SHIP = 4
    SHIP_START = 8
    SHIP_END = 16


class Cell(enum.Enum):
    EMPTY = "empty"
    MISS = "miss"
    SHIP = "ship"
    SHIP_START = "ship_start"
    SHIP_END = "ship_end"
    SHIP_HIT = "ship_hit"
    SUNK = "sunk"


SYMBOLS = {
    Cell.EMPTY: ".",
    Cell.MISS: "o",
    Cell.SHIP_HIT: "X",
    Cell.SUNK: "#",
}


def hit_grid(player: PlayerState) -> np.ndarray:
    """Boolean (10, 10) grid of cells fired upon."""
    bits = player.hits.bits
    return np.array([bits >> i & 1 for i in range(CELL_COUNT)], dtype=bool).reshape(GRID_SIZE, GRID_SIZE)


def cell_flags(player: PlayerState, *, reveal: bool = True) -> np.ndarray:
    """Return a (10, 10) uint8 grid of :class:`CellFlag` bits."""
    hits = hit_grid(player)
    flags = np.zeros((GRID_SIZE, GRID_SIZE), dtype=np.uint8)
    flags[hits] |= CellFlag.HIT.value

    for ship in player.fleet():
        sunk = player.is_sunk(ship)
        last = ship.kind.length - 1
        for i, tile in enumerate(ship.tiles()):
            if not tile.on_grid():
                continue
            if not reveal and not hits[tile.y, tile.x]:
                continue
            flag = CellFlag.SHIP
            if i == 0:
                flag |= CellFlag.SHIP_START
            elif i == last:
                flag |= CellFlag.SHIP_END
            if sunk:
                flag |= CellFlag.SUNK
            flags[tile.y, tile.x] |= flag.value
    return flags


def classify(flags: int) -> Cell:
    """Collapse a flag value into the one thing a renderer draws."""
    flags = CellFlag(int(flags))
    if flags == CellFlag.NONE:
        return Cell.EMPTY
    if flags == CellFlag.HIT:
        return Cell.MISS
    if CellFlag.SUNK in flags:
        return Cell.SUNK
    if CellFlag.HIT in flags:
        return Cell.SHIP_HIT
    if CellFlag.SHIP_START in flags:
        return Cell.SHIP_START
    if CellFlag.SHIP_END in flags:
        return Cell.SHIP_END
    return Cell.SHIP


def grid_rows(player: PlayerState, *, reveal: bool = False) -> list[str]:
    """Header plus ten text rows; unhit ships show their roster letter when revealed."""
    logger.debug("grid_rows() start – user=%d reveal=%s", player.user_id, reveal)
    flags = cell_flags(player, reveal=reveal)
    letters = np.full((GRID_SIZE, GRID_SIZE), ".", dtype="<U1")
    for ship in player.fleet():
        for tile in ship.tiles():
            if tile.on_grid():
                letters[tile.y, tile.x] = ship.kind.letter

    rows = ["   " + " ".join(chr(ord("A") + x) for x in range(GRID_SIZE))]
    for y in range(GRID_SIZE):
        cells = []
        for x in range(GRID_SIZE):
            cell = classify(flags[y, x])
            cells.append(SYMBOLS.get(cell) or str(letters[y, x]))
        rows.append(f"{y + 1:>2} " + " ".join(cells))
    return rows


def fleet_status(player: PlayerState) -> list[tuple[ShipType, int, bool]]:
    """(ship type, tiles hit, sunk) per roster entry."""
    status = []
    for ship in player.fleet():
        hit = sum(player.hits.get(tile) for tile in ship.tiles() if tile.on_grid())
        status.append((ship.kind, hit, hit == ship.kind.length))
    return status
