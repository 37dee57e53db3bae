import logging
import random

import pytest

from salvo import sealing
from salvo.grid import Coord, Rotation
from salvo.ships import ROSTER, pack_ship
from salvo.state import GameState, HitMatrix, PlayerState

# Keep test output quiet unless a test asks for more
logging.basicConfig(level=logging.WARNING)

# Known layout used across tests:
#   Carrier    A1-E1   Battleship A3-D3   Cruiser A5-C5
#   Submarine  A7-C7   Destroyer  J9-J10
FIXED_LAYOUT = [
    (Coord(0, 0), Rotation.HORIZONTAL),
    (Coord(0, 2), Rotation.HORIZONTAL),
    (Coord(0, 4), Rotation.HORIZONTAL),
    (Coord(0, 6), Rotation.HORIZONTAL),
    (Coord(9, 8), Rotation.VERTICAL),
]


def fixed_fleet() -> tuple[int, ...]:
    return tuple(pack_ship(anchor, rot, kind.length) for (anchor, rot), kind in zip(FIXED_LAYOUT, ROSTER))


def hits_on(*coords: Coord) -> HitMatrix:
    hits = HitMatrix()
    for coord in coords:
        hits = hits.set(coord)
    return hits


def make_state(p1: int = 1, p2: int = 2, turn: int = 1, hits_1: HitMatrix = None, hits_2: HitMatrix = None) -> GameState:
    """Game between *p1* and *p2*, both on the fixed layout."""
    return GameState(
        PlayerState(p1, hits_1 or HitMatrix(), fixed_fleet()),
        PlayerState(p2, hits_2 or HitMatrix(), fixed_fleet()),
        turn=turn,
    )


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def state() -> GameState:
    return make_state()


@pytest.fixture(autouse=True)
def _plain_tokens():
    """Every test starts and ends with sealing off."""
    sealing.disable_sealing()
    yield
    sealing.disable_sealing()
