"""Outcome variants and the outbound message model.

Each transition yields exactly one outcome value; the presentation layer
matches on its type instead of the engine calling into presentation code.
Messages list what should be delivered, in delivery order, together with the
action tokens each one carries as controls.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Union

from .errors import StartFailure
from .grid import Coord
from .ships import ShipType
from .state import GameState
from .tokens import ActionKind


class Delivery(Enum):
    """How the presentation layer should deliver a message."""

    SEND = auto()  # new message in the channel
    REPLY = auto()  # direct response to the acting user
    UPDATE = auto()  # replace the message whose control was used
    RETRACT = auto()  # disable the controls of the message whose control was used
    FOLLOW_UP = auto()  # new message after the interaction response
    PROMPT = auto()  # form asking the acting user for coordinate text


class ShotResult(Enum):
    MISS = "miss"
    HIT = "hit"
    SUNK = "sunk"


class FireProblem(Enum):
    """Why a shot was refused without consuming the turn."""

    INVALID_COORDINATE = "invalid_coordinate"
    ALREADY_HIT = "already_hit"


class RejectReason(Enum):
    NOT_YOUR_TURN = "not_your_turn"
    NOT_INVOLVED = "not_involved"


# ---------------------------------------------------------------------------
# Outcome variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GameStarted:
    player_1: int
    player_2: int


@dataclass(frozen=True, slots=True)
class FleetShown:
    """The acting player's fleet is up for review."""

    user_id: int
    rerolled: bool = False


@dataclass(frozen=True, slots=True)
class NextPlacement:
    """First player confirmed; *user_id* places next."""

    user_id: int


@dataclass(frozen=True, slots=True)
class BattleStarted:
    """Both fleets confirmed; *user_id* fires first."""

    user_id: int


@dataclass(frozen=True, slots=True)
class TurnStarted:
    user_id: int


@dataclass(frozen=True, slots=True)
class TargetPrompt:
    user_id: int


@dataclass(frozen=True, slots=True)
class ShotResolved:
    shooter: int
    coord: Coord
    result: ShotResult
    ship: ShipType | None  # only named when sunk
    next_player: int


@dataclass(frozen=True, slots=True)
class GameOver:
    coord: Coord
    ship: ShipType
    winner: int
    loser: int


@dataclass(frozen=True, slots=True)
class FireRejected:
    user_id: int
    reason: FireProblem
    text: str | None = None


@dataclass(frozen=True, slots=True)
class Rejected:
    user_id: int
    reason: RejectReason


@dataclass(frozen=True, slots=True)
class Dropped:
    """The token could not be parsed; the interaction is ignored."""

    error: str
    detail: str = ""


@dataclass(frozen=True, slots=True)
class StartRefused:
    reason: StartFailure
    user_id: int | None = None


Outcome = Union[
    GameStarted,
    FleetShown,
    NextPlacement,
    BattleStarted,
    TurnStarted,
    TargetPrompt,
    ShotResolved,
    GameOver,
    FireRejected,
    Rejected,
    Dropped,
    StartRefused,
]


# ---------------------------------------------------------------------------
# Outbound messages
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Control:
    """An action token to render as a button or form."""

    kind: ActionKind
    token: str


@dataclass(frozen=True, slots=True)
class Message:
    delivery: Delivery
    outcome: Outcome
    controls: tuple[Control, ...] = ()
    private: bool = False

    def control(self, kind: ActionKind) -> Control | None:
        for ctrl in self.controls:
            if ctrl.kind is kind:
                return ctrl
        return None


@dataclass(frozen=True, slots=True)
class Resolution:
    """Everything the presentation layer needs after one interaction.

    *state* is the resulting state, the unchanged decoded state on a
    rejection, or ``None`` when there was no valid state to begin with.
    """

    state: GameState | None
    outcome: Outcome
    messages: tuple[Message, ...] = ()

    @property
    def finished(self) -> bool:
        return isinstance(self.outcome, GameOver)

    def tokens(self) -> list[str]:
        """All control tokens, in message then control order."""
        return [ctrl.token for msg in self.messages for ctrl in msg.controls]
