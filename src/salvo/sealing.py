# token sealing abstraction module

import os

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from . import config as _cfg

NONCE_SIZE = 12
TAG_SIZE = 16

_secret_key: bytes | None = None


def enable_sealing(key: bytes) -> None:
    """Set the AES key used to seal token payloads"""
    global _secret_key
    if len(key) not in (16, 24, 32):
        raise ValueError("AES key must be 16/24/32 bytes")
    _secret_key = key


def disable_sealing() -> None:
    """Revert to plain token payloads."""
    global _secret_key
    _secret_key = None


def is_enabled() -> bool:
    return _secret_key is not None


def sealed_size(plain_size: int) -> int:
    return NONCE_SIZE + plain_size + TAG_SIZE


def seal(payload: bytes, aad: bytes) -> bytes:
    """AEAD seal: nonce + ciphertext+tag, authenticated over *aad*"""
    if _secret_key is None:
        raise ValueError("Sealing key not set")
    nonce = os.urandom(NONCE_SIZE)
    return nonce + AESGCM(_secret_key).encrypt(nonce, payload, aad)


def unseal(blob: bytes, aad: bytes) -> bytes:
    """AEAD unseal; raises cryptography's InvalidTag on tampering or a wrong key"""
    if _secret_key is None:
        raise ValueError("Sealing key not set")
    nonce, ciphertext = blob[:NONCE_SIZE], blob[NONCE_SIZE:]
    return AESGCM(_secret_key).decrypt(nonce, ciphertext, aad)


if _cfg.TOKEN_KEY is not None:
    enable_sealing(_cfg.TOKEN_KEY)
