"""Hit matrix, player state and game state.

Every type here is an immutable value: transitions build a new state with
``dataclasses.replace`` and never touch the one they were given.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Final

from .errors import CorruptStateError
from .grid import CELL_COUNT, Coord
from .ships import FLEET_SIZE, ROSTER, Ship

MAX_USER_ID: Final[int] = (1 << 64) - 1
HIT_MASK: Final[int] = (1 << CELL_COUNT) - 1
TURNS: Final[tuple[int, int]] = (1, 2)


@dataclass(frozen=True, slots=True)
class HitMatrix:
    """100-bit set of fired-upon cells, bit index ``x + y * 10``."""

    bits: int = 0

    def get(self, coord: Coord) -> bool:
        return bool(self.bits >> coord.index & 1)

    def set(self, coord: Coord) -> HitMatrix:
        return HitMatrix(self.bits | 1 << coord.index)

    def unset(self, coord: Coord) -> HitMatrix:
        return HitMatrix(self.bits & ~(1 << coord.index))

    def count(self) -> int:
        return bin(self.bits & HIT_MASK).count("1")


@dataclass(frozen=True, slots=True)
class PlayerState:
    """One side of the board: identity, shots received and packed fleet."""

    user_id: int
    hits: HitMatrix
    ships: tuple[int, ...]

    def fleet(self) -> tuple[Ship, ...]:
        return tuple(Ship(kind, packed) for kind, packed in zip(ROSTER, self.ships))

    def ship_at(self, coord: Coord) -> Ship | None:
        """Return the ship whose bounding box contains *coord*, if any."""
        for ship in self.fleet():
            if ship.contains(coord):
                return ship
        return None

    def is_sunk(self, ship: Ship) -> bool:
        return all(self.hits.get(tile) for tile in ship.tiles())

    def all_sunk(self) -> bool:
        return all(self.is_sunk(ship) for ship in self.fleet())

    def with_hit(self, coord: Coord) -> PlayerState:
        return replace(self, hits=self.hits.set(coord))

    def with_ships(self, ships: tuple[int, ...]) -> PlayerState:
        return replace(self, ships=tuple(ships))

    def validate(self) -> None:
        """Raise :class:`CorruptStateError` unless the player is well formed."""
        if not 0 <= self.user_id <= MAX_USER_ID:
            raise CorruptStateError(f"user id {self.user_id} out of range")
        if self.hits.bits & ~HIT_MASK:
            raise CorruptStateError(f"hit matrix of user {self.user_id} has bits beyond the grid")
        if len(self.ships) != FLEET_SIZE:
            raise CorruptStateError(f"user {self.user_id} has {len(self.ships)} ships")
        fleet = self.fleet()
        for i, ship in enumerate(fleet):
            if not 0 <= ship.packed <= 0xFF or not ship.on_grid():
                raise CorruptStateError(f"{ship.kind.label} of user {self.user_id} is off grid ({ship.packed:#04x})")
            for earlier in fleet[:i]:
                if ship.overlaps(earlier):
                    raise CorruptStateError(
                        f"{ship.kind.label} overlaps {earlier.kind.label} for user {self.user_id}"
                    )


def flip_turn(turn: int) -> int:
    """Hand the turn to the other player."""
    if turn == 1:
        return 2
    if turn == 2:
        return 1
    raise CorruptStateError(f"invalid turn value {turn}")


@dataclass(frozen=True, slots=True)
class GameState:
    """Both players plus whose turn it is (1 or 2)."""

    player_1: PlayerState
    player_2: PlayerState
    turn: int = 1

    @property
    def current(self) -> PlayerState:
        return self.turns[0]

    @property
    def target(self) -> PlayerState:
        return self.turns[1]

    @property
    def turns(self) -> tuple[PlayerState, PlayerState]:
        """``(current, target)``."""
        if self.turn == 1:
            return self.player_1, self.player_2
        if self.turn == 2:
            return self.player_2, self.player_1
        raise CorruptStateError(f"invalid turn value {self.turn}")

    def swap_turn(self) -> GameState:
        return replace(self, turn=flip_turn(self.turn))

    def with_current(self, player: PlayerState) -> GameState:
        if self.turn == 1:
            return replace(self, player_1=player)
        if self.turn == 2:
            return replace(self, player_2=player)
        raise CorruptStateError(f"invalid turn value {self.turn}")

    def with_target(self, player: PlayerState) -> GameState:
        if self.turn == 1:
            return replace(self, player_2=player)
        if self.turn == 2:
            return replace(self, player_1=player)
        raise CorruptStateError(f"invalid turn value {self.turn}")

    def validate(self) -> None:
        if self.turn not in TURNS:
            raise CorruptStateError(f"invalid turn value {self.turn}")
        self.player_1.validate()
        self.player_2.validate()
