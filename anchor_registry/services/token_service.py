"""Caller tokens (ES256 JWT).

The registry does not run a login flow.  Callers present a bearer JWT
whose ``sub`` is their registry identity; whatever roles they hold are
looked up in the role store per request.  Tokens deliberately carry no
role claims, so granting or withdrawing a role takes effect immediately
instead of when the token expires.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime, timedelta

import jwt
from cryptography.hazmat.primitives.asymmetric import ec

# Dev/test: ephemeral EC key pair generated on import.
_private_key = ec.generate_private_key(ec.SECP256R1())
_public_key = _private_key.public_key()

ALGORITHM = "ES256"
ISSUER = "anchor-registry"
AUDIENCE = "anchor-registry"
ACCESS_TOKEN_TTL_MIN = 15


def create_access_token(*, sub: str, ttl_minutes: int = ACCESS_TOKEN_TTL_MIN) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": sub,
        "iss": ISSUER,
        "aud": AUDIENCE,
        "exp": now + timedelta(minutes=ttl_minutes),
        "iat": now,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, _private_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Verify signature and claims, return the payload.

    Pins the algorithm to ES256; exp, iss and aud are validated by PyJWT.
    Raises jwt.ExpiredSignatureError, jwt.InvalidTokenError on failure.
    """
    return jwt.decode(
        token,
        _public_key,
        algorithms=[ALGORITHM],
        issuer=ISSUER,
        audience=AUDIENCE,
        options={"require": ["sub", "exp", "iat", "jti"]},
    )
