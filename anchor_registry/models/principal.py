from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller extracted from a validated JWT.

    Carries only the identity.  What the caller may do is decided by the
    registry's role store at call time, never by claims in the token, so
    a revoked attester loses access on the very next request.
    """

    identity: str
