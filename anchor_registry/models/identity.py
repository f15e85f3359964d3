"""Identity and fixed-size hash primitives.

Identities are opaque strings (account addresses, DIDs, service names).
They are normalized once at the edge so role lookups never disagree on
case or stray whitespace.

Hashes (credential ids, holder references, commitments) are exactly 32
bytes.  On the wire they travel as 0x-prefixed hex.
"""

from __future__ import annotations

import hashlib

NULL_IDENTITY = "0x" + "0" * 40

HASH_SIZE = 32
ZERO_HASH = bytes(HASH_SIZE)


def normalize_identity(identity: str | None) -> str:
    """Trim and lower-case an identity; every null spelling maps to NULL_IDENTITY."""
    value = (identity or "").strip().lower()
    if not value or value == NULL_IDENTITY:
        return NULL_IDENTITY
    return value


def is_null_identity(identity: str | None) -> bool:
    return normalize_identity(identity) == NULL_IDENTITY


def parse_hash(value: str) -> bytes:
    """Decode a 0x-prefixed (or bare) 64-char hex string into 32 bytes.

    Raises ValueError on anything else.
    """
    text = value.strip()
    if text[:2].lower() == "0x":
        text = text[2:]
    if len(text) != HASH_SIZE * 2:
        raise ValueError(f"hash must be {HASH_SIZE} bytes of hex (got {value!r})")
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise ValueError(f"hash is not valid hex (got {value!r})") from None


def format_hash(value: bytes) -> str:
    return "0x" + value.hex()


def digest32(text: str) -> bytes:
    """SHA-256 of a UTF-8 string, for deriving ids and commitments from labels."""
    return hashlib.sha256(text.encode("utf-8")).digest()
