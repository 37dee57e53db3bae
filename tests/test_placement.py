import random

import pytest

from salvo.errors import PlacementExhausted
from salvo.grid import Coord
from salvo.placement import new_player, random_fleet, reroll
from salvo.ships import FLEET_SIZE, ROSTER
from salvo.state import HitMatrix, PlayerState


class StuckRng:
    """Always draws the same horizontal placement at A1."""

    def randrange(self, stop):
        return 0

    def random(self):
        return 0.0


@pytest.mark.timeout(10)  # type: ignore[arg-type]
def test_random_fleets_are_valid():
    for seed in range(300):
        player = PlayerState(seed, HitMatrix(), random_fleet(random.Random(seed)))
        player.validate()
        tiles = [tile for ship in player.fleet() for tile in ship.tiles()]
        assert len(tiles) == sum(kind.length for kind in ROSTER)
        assert len(set(tiles)) == len(tiles)
        assert all(tile.on_grid() for tile in tiles)


def test_seeded_placement_is_deterministic():
    assert random_fleet(random.Random(42)) == random_fleet(random.Random(42))


def test_default_rng():
    assert len(random_fleet()) == FLEET_SIZE


def test_exhaustion_raises():
    with pytest.raises(PlacementExhausted):
        random_fleet(StuckRng(), max_attempts=3)


def test_new_player_has_no_hits(rng):
    player = new_player(77, rng)
    assert player.user_id == 77
    assert player.hits == HitMatrix()
    assert len(player.ships) == FLEET_SIZE


def test_reroll_keeps_identity_and_hits(rng):
    player = new_player(5, rng).with_hit(Coord(4, 4))
    rolled = reroll(player, random.Random(99))
    assert rolled.user_id == 5
    assert rolled.hits == player.hits
    rolled.validate()
