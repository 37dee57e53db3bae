"""Randomized, collision-free fleet placement."""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Any

from . import config as _cfg
from .errors import PlacementExhausted
from .grid import GRID_SIZE, Coord, Rotation
from .ships import ROSTER, Ship, ShipType, pack_ship
from .state import HitMatrix, PlayerState

logger = logging.getLogger(__name__)


def _draw(kind: ShipType, rng: Any) -> int:
    """Draw one candidate placement for *kind* and return it packed."""
    short = rng.randrange(GRID_SIZE - kind.length)
    full = rng.randrange(GRID_SIZE)
    if rng.random() < 0.5:
        return pack_ship(Coord(short, full), Rotation.HORIZONTAL, kind.length)
    return pack_ship(Coord(full, short), Rotation.VERTICAL, kind.length)


def random_fleet(rng: Any = None, *, max_attempts: int | None = None) -> tuple[int, ...]:
    """Randomly position the whole roster without overlaps.

    Ships are placed in roster order; each candidate is redrawn until its
    bounding box is clear of every ship placed before it. *rng* is anything
    with ``random()``/``randrange()`` and defaults to the :mod:`random` module.
    """
    rng = rng if rng is not None else random
    limit = max_attempts if max_attempts is not None else _cfg.PLACEMENT_ATTEMPTS
    placed: list[Ship] = []
    for kind in ROSTER:
        for attempt in range(1, limit + 1):
            candidate = Ship(kind, _draw(kind, rng))
            if not any(candidate.overlaps(other) for other in placed):
                placed.append(candidate)
                logger.debug("placed %s at %s (%s) after %d draw(s)",
                             kind.label, candidate.anchor, candidate.rotation.name, attempt)
                break
        else:
            logger.error("placement of %s exhausted after %d attempts", kind.label, limit)
            raise PlacementExhausted(f"could not place {kind.label} in {limit} attempts")
    return tuple(ship.packed for ship in placed)


def new_player(user_id: int, rng: Any = None) -> PlayerState:
    """Fresh player with no hits and a random fleet."""
    return PlayerState(user_id, HitMatrix(), random_fleet(rng))


def reroll(player: PlayerState, rng: Any = None) -> PlayerState:
    """Same player and hits, fresh fleet."""
    return replace(player, ships=random_fleet(rng))
