import base64

import pytest

from conftest import make_state
from salvo import config, sealing
from salvo.codec import STATE_SIZE, encode_state
from salvo.errors import EmptyPayload, MalformedPayload, TokenParseError, UnknownKind, UnrecognizedPrefix
from salvo.tokens import Action, ActionKind, decode_token, encode_token

KEY = bytes(range(16))


def _b64(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def test_kind_characters():
    assert {k.value for k in ActionKind} == {"T", "F", "P", "R", "C"}


@pytest.mark.parametrize("kind", list(ActionKind))
def test_roundtrip(kind):
    action = Action(kind, make_state(111, 222, turn=2))
    token = action.to_token()
    assert token.startswith(config.TOKEN_PREFIX + kind.value)
    assert "=" not in token
    assert Action.from_token(token) == action


def test_token_is_deterministic_and_url_safe(state):
    token = encode_token(Action(ActionKind.FIRE, state))
    assert token == encode_token(Action(ActionKind.FIRE, state))
    body = token[len(config.TOKEN_PREFIX) + 1 :]
    assert len(body) == 79
    assert set(body) <= set("ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_")


def test_custom_prefix(state):
    token = encode_token(Action(ActionKind.PLACE, state), prefix="#sv#")
    assert decode_token(token, prefix="#sv#").kind is ActionKind.PLACE
    with pytest.raises(UnrecognizedPrefix):
        decode_token(token, prefix="#xx#")


def test_unrecognized_prefix():
    with pytest.raises(UnrecognizedPrefix):
        decode_token("button-1")


def test_empty_payload():
    with pytest.raises(EmptyPayload):
        decode_token(config.TOKEN_PREFIX)


def test_unknown_kind(state):
    with pytest.raises(UnknownKind):
        decode_token(config.TOKEN_PREFIX + "Z" + _b64(encode_state(state)))


@pytest.mark.parametrize(
    "segment",
    [
        "",
        "!!!!",
        "abc=",
        "a",
        "A" * 77 + "é",
        _b64(bytes(STATE_SIZE - 1)),
        _b64(bytes(STATE_SIZE + 1)),
    ],
)
def test_malformed_payload(segment):
    with pytest.raises(MalformedPayload):
        decode_token(config.TOKEN_PREFIX + "F" + segment)


def test_errors_share_a_base():
    for exc in (UnrecognizedPrefix, UnknownKind, MalformedPayload, EmptyPayload):
        assert issubclass(exc, TokenParseError)


# ---------------------------------------------------------------------------
# Sealed tokens
# ---------------------------------------------------------------------------


def test_sealed_roundtrip(state):
    sealing.enable_sealing(KEY)
    action = Action(ActionKind.CONFIRM_PLACE, state)
    token = action.to_token()
    assert decode_token(token) == action
    # random nonce per token
    assert token != action.to_token()
    assert len(token) == len(config.TOKEN_PREFIX) + 1 + 116


def test_sealed_kind_swap_fails(state):
    sealing.enable_sealing(KEY)
    token = encode_token(Action(ActionKind.START_TURN, state))
    cut = len(config.TOKEN_PREFIX)
    forged = token[:cut] + ActionKind.FIRE.value + token[cut + 1 :]
    with pytest.raises(MalformedPayload):
        decode_token(forged)


def test_sealed_wrong_key(state):
    sealing.enable_sealing(KEY)
    token = encode_token(Action(ActionKind.FIRE, state))
    sealing.enable_sealing(bytes(b ^ 0xFF for b in KEY))
    with pytest.raises(MalformedPayload):
        decode_token(token)


def test_plain_token_refused_when_sealing(state):
    token = encode_token(Action(ActionKind.FIRE, state))
    sealing.enable_sealing(KEY)
    with pytest.raises(MalformedPayload):
        decode_token(token)


def test_bad_key_size():
    with pytest.raises(ValueError):
        sealing.enable_sealing(b"short")
    assert not sealing.is_enabled()
