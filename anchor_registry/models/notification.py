"""Notification records emitted by successful registry mutations.

Each record is immutable.  The NotificationLog wraps every event in a
Notification envelope carrying its position in the log, so consumers can
resume from the last sequence number they processed.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Union

from anchor_registry.models.identity import format_hash


@dataclass(frozen=True, slots=True)
class IssuerRegistered:
    issuer: str
    name: str
    valid_from: int
    valid_to: int
    accredited: bool

    kind = "issuer_registered"


@dataclass(frozen=True, slots=True)
class AccreditationChanged:
    issuer: str
    accredited: bool

    kind = "accreditation_changed"


@dataclass(frozen=True, slots=True)
class RoleGranted:
    role: str
    account: str
    sender: str

    kind = "role_granted"


@dataclass(frozen=True, slots=True)
class RoleRevoked:
    role: str
    account: str
    sender: str

    kind = "role_revoked"


@dataclass(frozen=True, slots=True)
class CredentialAnchored:
    cred_id: bytes
    issuer: str
    holder_id_hash: bytes
    commitment: bytes
    pointer: str
    issued_at: int

    kind = "credential_anchored"


@dataclass(frozen=True, slots=True)
class CredentialAttested:
    cred_id: bytes
    attester: str
    attested_at: int

    kind = "credential_attested"


@dataclass(frozen=True, slots=True)
class CredentialRevoked:
    cred_id: bytes
    revoker: str
    revoked_at: int
    reason: str

    kind = "credential_revoked"


Event = Union[
    IssuerRegistered,
    AccreditationChanged,
    RoleGranted,
    RoleRevoked,
    CredentialAnchored,
    CredentialAttested,
    CredentialRevoked,
]


@dataclass(frozen=True, slots=True)
class Notification:
    sequence: int
    event: Event

    @property
    def kind(self) -> str:
        return self.event.kind

    def to_dict(self) -> dict:
        """JSON-friendly view: hashes rendered as 0x-hex."""
        data = {
            key: format_hash(value) if isinstance(value, bytes) else value
            for key, value in asdict(self.event).items()
        }
        return {"sequence": self.sequence, "kind": self.kind, "data": data}
