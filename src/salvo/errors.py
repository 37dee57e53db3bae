"""Exception hierarchy shared by every layer of the engine."""

from __future__ import annotations

import enum


class SalvoError(Exception):
    """Base for all engine errors."""


# ---------------------------------------------------------------------------
# Token parsing (non-fatal: the caller drops the interaction)
# ---------------------------------------------------------------------------


class TokenParseError(SalvoError):
    """Base for problems decoding an action token."""


class UnrecognizedPrefix(TokenParseError):
    """Raised when a token does not start with the configured prefix."""


class UnknownKind(TokenParseError):
    """Raised when the kind character maps to no known action."""


class MalformedPayload(TokenParseError):
    """Raised when the state segment is not valid base64 of exactly one state."""


class EmptyPayload(TokenParseError):
    """Raised when nothing follows the prefix."""


class StateLengthError(SalvoError):
    """Raised when a byte buffer has the wrong size for the codec."""


class CoordinateParseError(SalvoError):
    """Raised when free text cannot be parsed as a grid coordinate."""


# ---------------------------------------------------------------------------
# Authorization (surfaced to the acting user, state untouched)
# ---------------------------------------------------------------------------


class AuthorizationError(SalvoError):
    """Base for actors that may not perform the requested action."""

    def __init__(self, actor: int) -> None:
        super().__init__(f"user {actor} may not act on this game")
        self.actor = actor


class NotYourTurn(AuthorizationError):
    """The actor is the opponent of the player whose turn it is."""


class NotInvolved(AuthorizationError):
    """The actor is neither of the two players."""


# ---------------------------------------------------------------------------
# Defects and corruption (fail fast)
# ---------------------------------------------------------------------------


class PlacementExhausted(SalvoError):
    """Raised when random placement hits its retry ceiling."""


class CorruptStateError(SalvoError):
    """Raised when a decoded state violates an invariant no valid flow can break."""


class StartFailure(enum.Enum):
    """Why a game could not be started."""

    SAME_PLAYER = "same_player"
    BOT_PLAYER = "bot_player"


class StartError(SalvoError):
    """Raised when two participants cannot be paired into a game."""

    def __init__(self, reason: StartFailure, user_id: int | None = None) -> None:
        super().__init__(f"cannot start game: {reason.value}" + (f" ({user_id})" if user_id is not None else ""))
        self.reason = reason
        self.user_id = user_id
