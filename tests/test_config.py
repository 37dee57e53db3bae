import pytest

from salvo.config import parse_token_key


def test_token_key_unset():
    assert parse_token_key(None) is None
    assert parse_token_key("") is None


@pytest.mark.parametrize("size", [16, 24, 32])
def test_token_key_sizes(size):
    assert parse_token_key("ab" * size) == b"\xab" * size


def test_token_key_bad_hex():
    with pytest.raises(ValueError, match="SALVO_TOKEN_KEY"):
        parse_token_key("not-hex")


def test_token_key_bad_length():
    with pytest.raises(ValueError, match="SALVO_TOKEN_KEY"):
        parse_token_key("00" * 10)
