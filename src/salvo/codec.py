"""Fixed-width binary codec for game state.

State layout (59 bytes):
0-28  : player 1 record
29-57 : player 2 record
58    : turn (1 or 2)

Player record (29 bytes):
0-7   : user id u64 (big-endian)
8-23  : hit matrix u128 (big-endian, low 100 bits used)
24-28 : packed ships, roster order
"""

from __future__ import annotations

import struct
from typing import Final

from .errors import StateLengthError
from .ships import FLEET_SIZE
from .state import GameState, HitMatrix, PlayerState

PLAYER_STRUCT: Final = struct.Struct(f">Q16s{FLEET_SIZE}B")
PLAYER_SIZE: Final[int] = PLAYER_STRUCT.size
STATE_SIZE: Final[int] = 2 * PLAYER_SIZE + 1

HITS_WIDTH: Final[int] = 16


def encode_player(player: PlayerState) -> bytes:
    return PLAYER_STRUCT.pack(
        player.user_id,
        player.hits.bits.to_bytes(HITS_WIDTH, "big"),
        *player.ships,
    )


def decode_player(data: bytes) -> PlayerState:
    if len(data) != PLAYER_SIZE:
        raise StateLengthError(f"player record must be {PLAYER_SIZE} bytes, got {len(data)}")
    user_id, hits, *ships = PLAYER_STRUCT.unpack(data)
    return PlayerState(user_id, HitMatrix(int.from_bytes(hits, "big")), tuple(ships))


def encode_state(state: GameState) -> bytes:
    """Serialize *state* into exactly :data:`STATE_SIZE` bytes."""
    data = encode_player(state.player_1) + encode_player(state.player_2) + bytes((state.turn,))
    assert len(data) == STATE_SIZE
    return data


def decode_state(data: bytes) -> GameState:
    """Deserialize a state; the length check is the only structural check."""
    if len(data) != STATE_SIZE:
        raise StateLengthError(f"state must be {STATE_SIZE} bytes, got {len(data)}")
    return GameState(
        player_1=decode_player(data[:PLAYER_SIZE]),
        player_2=decode_player(data[PLAYER_SIZE : 2 * PLAYER_SIZE]),
        turn=data[-1],
    )
