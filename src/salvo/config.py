"""Central configuration for runtime-tunable parameters.

All constants can be overridden via environment variables so that a
deployment can change the token prefix or enable sealing without code
changes, while the automated test-suite can tighten limits if necessary.
"""

from __future__ import annotations

import os


def parse_token_key(text: str | None) -> bytes | None:
    """Decode a hex AES key from ``SALVO_TOKEN_KEY``; empty means no sealing."""
    if not text:
        return None
    try:
        key = bytes.fromhex(text)
    except ValueError as exc:
        raise ValueError(f"SALVO_TOKEN_KEY is not valid hex: {exc}") from exc
    if len(key) not in (16, 24, 32):
        raise ValueError(f"SALVO_TOKEN_KEY must decode to 16/24/32 bytes, got {len(key)}")
    return key


# ===========================================================================
# Action Tokens
# ===========================================================================
# SALVO_TOKEN_PREFIX: Fixed prefix every action token starts with.
#   The presentation layer uses it to tell game tokens apart from its own ids.
#   Defaults to "#bs#". Changing it invalidates every token already rendered.
#   Example: export SALVO_TOKEN_PREFIX="#sv#"
TOKEN_PREFIX: str = os.getenv("SALVO_TOKEN_PREFIX", "#bs#")

# SALVO_TOKEN_KEY: AES key (hex, 16/24/32 bytes) used to seal token payloads.
#   When unset, tokens carry the plain 59-byte state.
#   Example: export SALVO_TOKEN_KEY=00112233445566778899AABBCCDDEEFF
TOKEN_KEY_HEX: str | None = os.getenv("SALVO_TOKEN_KEY") or None
TOKEN_KEY: bytes | None = parse_token_key(TOKEN_KEY_HEX)


# ===========================================================================
# Fleet Placement
# ===========================================================================
# SALVO_PLACEMENT_ATTEMPTS: Maximum candidate draws per ship before random
#   placement gives up with PlacementExhausted.
#   Defaults to 10000, far above what a 10x10 board ever needs.
#   Example: export SALVO_PLACEMENT_ATTEMPTS=500
PLACEMENT_ATTEMPTS: int = int(os.getenv("SALVO_PLACEMENT_ATTEMPTS", "10000"))


# ===========================================================================
# Debugging and Logging
# ===========================================================================
# SALVO_DEBUG: If "1", the CLI enables detailed debug logging across modules.
#   Defaults to "0" (disabled).
#   Example: export SALVO_DEBUG=1
DEBUG: bool = os.getenv("SALVO_DEBUG", "0") == "1"
