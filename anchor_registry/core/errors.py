"""Registry rejection hierarchy.

Every failed registry operation raises exactly one of these.  A rejection
means the requested transition did not happen and state is exactly as it
was before the call; nothing is retried internally.

Each error carries:
  code      stable machine-readable identifier (clients switch on this)
  category  authorization | integrity | state, so callers can tell a
            permission problem from bad input from a stale/duplicate request
  http_status  what the API layer returns for it
"""

from __future__ import annotations

from typing import ClassVar, Literal

ErrorCategory = Literal["authorization", "integrity", "state"]


class RegistryError(Exception):
    code: ClassVar[str] = "REGISTRY_ERROR"
    category: ClassVar[ErrorCategory] = "state"
    http_status: ClassVar[int] = 400

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.code.replace("_", " ").lower()
        super().__init__(self.message)

    def to_response(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category,
            }
        }


# ---------------------------------------------------------------------------
# Authorization
# ---------------------------------------------------------------------------


class NotAuthorized(RegistryError):
    code = "NOT_AUTHORIZED"
    category = "authorization"
    http_status = 403


class IssuerNotAccredited(RegistryError):
    code = "ISSUER_NOT_ACCREDITED"
    category = "authorization"
    http_status = 403


class IssuerNotYetValid(RegistryError):
    code = "ISSUER_NOT_YET_VALID"
    category = "authorization"
    http_status = 403


class IssuerExpired(RegistryError):
    code = "ISSUER_EXPIRED"
    category = "authorization"
    http_status = 403


# ---------------------------------------------------------------------------
# Data integrity
# ---------------------------------------------------------------------------


class InvalidIdentity(RegistryError):
    code = "INVALID_IDENTITY"
    category = "integrity"
    http_status = 422


class InvalidValidityWindow(RegistryError):
    code = "INVALID_VALIDITY_WINDOW"
    category = "integrity"
    http_status = 422


class InvalidHash(RegistryError):
    code = "INVALID_HASH"
    category = "integrity"
    http_status = 422


class EmptyCommitment(RegistryError):
    code = "EMPTY_COMMITMENT"
    category = "integrity"
    http_status = 422


# ---------------------------------------------------------------------------
# Duplicate / stale state
# ---------------------------------------------------------------------------


class DuplicateCredential(RegistryError):
    code = "DUPLICATE_CREDENTIAL"
    category = "state"
    http_status = 409


class UnknownCredential(RegistryError):
    code = "UNKNOWN_CREDENTIAL"
    category = "state"
    http_status = 404


class AlreadyAttested(RegistryError):
    code = "ALREADY_ATTESTED"
    category = "state"
    http_status = 409


class AlreadyRevoked(RegistryError):
    code = "ALREADY_REVOKED"
    category = "state"
    http_status = 409
