from __future__ import annotations

from dataclasses import dataclass, replace

from anchor_registry.models.identity import NULL_IDENTITY


@dataclass(frozen=True, slots=True)
class CredentialAnchor:
    """On-record commitment binding a pseudonymous holder and an issuer to a credential.

    Immutable after creation: cred_id, issuer, holder_id_hash, commitment,
    pointer, issued_at.  attested and revoked only ever flip False -> True,
    each exactly once, together with their audit fields.
    """

    cred_id: bytes
    issuer: str
    holder_id_hash: bytes
    commitment: bytes
    pointer: str
    issued_at: int
    attested: bool = False
    attested_at: int = 0
    attested_by: str = NULL_IDENTITY
    revoked: bool = False
    revoked_at: int = 0
    revoke_reason: str = ""
    revoked_by: str = NULL_IDENTITY

    @staticmethod
    def new(
        *,
        cred_id: bytes,
        issuer: str,
        holder_id_hash: bytes,
        commitment: bytes,
        pointer: str,
        issued_at: int,
    ) -> CredentialAnchor:
        return CredentialAnchor(
            cred_id=cred_id,
            issuer=issuer,
            holder_id_hash=holder_id_hash,
            commitment=commitment,
            pointer=pointer,
            issued_at=issued_at,
        )

    def with_attestation(self, *, attester: str, at: int) -> CredentialAnchor:
        return replace(self, attested=True, attested_at=at, attested_by=attester)

    def with_revocation(
        self, *, revoker: str, at: int, reason: str
    ) -> CredentialAnchor:
        return replace(
            self,
            revoked=True,
            revoked_at=at,
            revoke_reason=reason,
            revoked_by=revoker,
        )
