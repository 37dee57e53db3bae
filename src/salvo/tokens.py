"""Opaque action tokens: an action kind plus the complete game state.

Token layout::

    <prefix><kind char><base64url, no padding, of the 59-byte state>

The token is the only store of record; every control rendered for a game
carries one, so the next inbound interaction is self-sufficient. Kind
characters are part of the wire format and must never be reassigned.
"""

from __future__ import annotations

import base64
import binascii
import enum
import logging
import re
from dataclasses import dataclass

from cryptography.exceptions import InvalidTag

from . import config as _cfg
from . import sealing
from .codec import STATE_SIZE, decode_state, encode_state
from .errors import EmptyPayload, MalformedPayload, UnknownKind, UnrecognizedPrefix
from .state import GameState

logger = logging.getLogger(__name__)

_B64URL_RE = re.compile(r"[A-Za-z0-9_-]+")


class ActionKind(str, enum.Enum):
    """Action carried by a token, keyed by its stable kind character."""

    START_TURN = "T"
    FIRE = "F"
    PLACE = "P"
    RANDOMIZE_PLACE = "R"
    CONFIRM_PLACE = "C"


@dataclass(frozen=True, slots=True)
class Action:
    """An action kind bound to a full state snapshot."""

    kind: ActionKind
    state: GameState

    def to_token(self, *, prefix: str | None = None) -> str:
        return encode_token(self, prefix=prefix)

    @classmethod
    def from_token(cls, token: str, *, prefix: str | None = None) -> Action:
        return decode_token(token, prefix=prefix)


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64decode(text: str) -> bytes:
    if not text:
        raise MalformedPayload("token carries no state")
    if not _B64URL_RE.fullmatch(text) or len(text) % 4 == 1:
        raise MalformedPayload("state segment is not unpadded base64url")
    try:
        return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))
    except (binascii.Error, ValueError) as exc:
        raise MalformedPayload(f"state segment is not base64url: {exc}") from exc


def _aad(prefix: str, kind: ActionKind) -> bytes:
    return (prefix + kind.value).encode()


def encode_token(action: Action, *, prefix: str | None = None) -> str:
    """Serialize *action* into a token string."""
    prefix = _cfg.TOKEN_PREFIX if prefix is None else prefix
    raw = encode_state(action.state)
    if sealing.is_enabled():
        raw = sealing.seal(raw, _aad(prefix, action.kind))
    return prefix + action.kind.value + _b64encode(raw)


def decode_token(token: str, *, prefix: str | None = None) -> Action:
    """Parse a token back into an :class:`Action`.

    Every failure raises a :class:`~salvo.errors.TokenParseError` subclass.
    """
    prefix = _cfg.TOKEN_PREFIX if prefix is None else prefix
    if not token.startswith(prefix):
        raise UnrecognizedPrefix(f"token does not start with {prefix!r}")
    body = token[len(prefix) :]
    if not body:
        raise EmptyPayload("nothing follows the token prefix")
    try:
        kind = ActionKind(body[0])
    except ValueError:
        raise UnknownKind(f"unknown action kind {body[0]!r}") from None

    raw = _b64decode(body[1:])
    if sealing.is_enabled():
        if len(raw) != sealing.sealed_size(STATE_SIZE):
            raise MalformedPayload(f"sealed state must be {sealing.sealed_size(STATE_SIZE)} bytes, got {len(raw)}")
        try:
            raw = sealing.unseal(raw, _aad(prefix, kind))
        except InvalidTag:
            raise MalformedPayload("sealed state failed authentication") from None
    if len(raw) != STATE_SIZE:
        raise MalformedPayload(f"state must be {STATE_SIZE} bytes, got {len(raw)}")
    logger.debug("decoded %s token (%d state bytes)", kind.name, len(raw))
    return Action(kind, decode_state(raw))
