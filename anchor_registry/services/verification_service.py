"""Read-only views for external verifiers.

Nothing here mutates state.  For an unknown credential get_anchor raises
UnknownCredential, while verify and is_revoked return all-false.
"""

from __future__ import annotations

from dataclasses import dataclass

from anchor_registry.core.errors import UnknownCredential
from anchor_registry.models.anchor import CredentialAnchor
from anchor_registry.models.identity import NULL_IDENTITY, format_hash, normalize_identity
from anchor_registry.models.issuer import IssuerInfo
from anchor_registry.models.roles import Role
from anchor_registry.repos.anchor_repo import AnchorStore
from anchor_registry.repos.role_repo import RoleStore


@dataclass(frozen=True, slots=True)
class VerifyResult:
    match: bool
    attested: bool
    revoked: bool
    issuer: str


NOT_FOUND = VerifyResult(match=False, attested=False, revoked=False, issuer=NULL_IDENTITY)


class VerificationService:
    def __init__(self, anchors: AnchorStore, roles: RoleStore) -> None:
        self._anchors = anchors
        self._roles = roles

    def get_anchor(self, cred_id: bytes) -> CredentialAnchor:
        anchor = self._anchors.get(cred_id)
        if anchor is None:
            raise UnknownCredential(f"credential {format_hash(cred_id)} is not anchored")
        return anchor

    def verify(self, cred_id: bytes, expected_commitment: bytes) -> VerifyResult:
        anchor = self._anchors.get(cred_id)
        if anchor is None:
            return NOT_FOUND
        return VerifyResult(
            match=anchor.commitment == expected_commitment,
            attested=anchor.attested,
            revoked=anchor.revoked,
            issuer=anchor.issuer,
        )

    def is_revoked(self, cred_id: bytes) -> bool:
        anchor = self._anchors.get(cred_id)
        return anchor is not None and anchor.revoked

    def issuer_status(self, issuer: str) -> IssuerInfo:
        return self._roles.get_issuer(normalize_identity(issuer))

    def has_role(self, role: Role, identity: str) -> bool:
        return self._roles.has_role(role, normalize_identity(identity))

    def role_members(self, role: Role) -> list[str]:
        return self._roles.members(role)

    def anchor_count(self) -> int:
        return self._anchors.count()
