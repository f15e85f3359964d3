"""Credential anchor endpoints.

Writes (authenticated, admitted through the sequencer):
- POST /v1/anchors                      issue
- POST /v1/anchors/{cred_id}/attest     attest
- POST /v1/anchors/{cred_id}/revoke     revoke

Reads (public, never sequenced):
- GET  /v1/anchors/{cred_id}            full record, 404 if unknown
- GET  /v1/anchors/{cred_id}/verify     match/attested/revoked/issuer, all-false if unknown
- GET  /v1/anchors/{cred_id}/revoked    false for unknown too

All hashes travel as 0x-prefixed hex.  The off-chain artifact behind
``pointer`` is never fetched here.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from anchor_registry.api.dependencies import cred_id_path, hash_param, require_caller
from anchor_registry.models.anchor import CredentialAnchor
from anchor_registry.models.identity import format_hash
from anchor_registry.models.principal import Principal
from anchor_registry.services.registry import Registry, get_registry
from anchor_registry.services.sequencer import sequencer

router = APIRouter(prefix="/v1/anchors", tags=["anchors"])


class IssueIn(BaseModel):
    cred_id: str
    holder_id_hash: str
    commitment: str
    pointer: str = ""


class RevokeIn(BaseModel):
    reason: str = ""


class AnchorOut(BaseModel):
    cred_id: str
    issuer: str
    holder_id_hash: str
    commitment: str
    pointer: str
    issued_at: int
    attested: bool
    attested_at: int
    attested_by: str
    revoked: bool
    revoked_at: int
    revoke_reason: str
    revoked_by: str

    @staticmethod
    def from_anchor(anchor: CredentialAnchor) -> AnchorOut:
        return AnchorOut(
            cred_id=format_hash(anchor.cred_id),
            issuer=anchor.issuer,
            holder_id_hash=format_hash(anchor.holder_id_hash),
            commitment=format_hash(anchor.commitment),
            pointer=anchor.pointer,
            issued_at=anchor.issued_at,
            attested=anchor.attested,
            attested_at=anchor.attested_at,
            attested_by=anchor.attested_by,
            revoked=anchor.revoked,
            revoked_at=anchor.revoked_at,
            revoke_reason=anchor.revoke_reason,
            revoked_by=anchor.revoked_by,
        )


class VerifyOut(BaseModel):
    match: bool
    attested: bool
    revoked: bool
    issuer: str


class RevokedOut(BaseModel):
    revoked: bool


# --- writes ---


@router.post("", response_model=AnchorOut, status_code=status.HTTP_201_CREATED)
def issue_anchor(
    body: IssueIn,
    principal: Annotated[Principal, Depends(require_caller)],
    registry: Annotated[Registry, Depends(get_registry)],
) -> AnchorOut:
    admitted = sequencer.submit(
        "issue",
        registry.lifecycle.issue,
        principal.identity,
        hash_param(body.cred_id, field="cred_id"),
        hash_param(body.holder_id_hash, field="holder_id_hash"),
        hash_param(body.commitment, field="commitment"),
        body.pointer,
    )
    return AnchorOut.from_anchor(admitted.result)


@router.post("/{cred_id}/attest", response_model=AnchorOut)
def attest_anchor(
    cred_id: Annotated[bytes, Depends(cred_id_path)],
    principal: Annotated[Principal, Depends(require_caller)],
    registry: Annotated[Registry, Depends(get_registry)],
) -> AnchorOut:
    admitted = sequencer.submit(
        "attest", registry.lifecycle.attest, principal.identity, cred_id
    )
    return AnchorOut.from_anchor(admitted.result)


@router.post("/{cred_id}/revoke", response_model=AnchorOut)
def revoke_anchor(
    cred_id: Annotated[bytes, Depends(cred_id_path)],
    body: RevokeIn,
    principal: Annotated[Principal, Depends(require_caller)],
    registry: Annotated[Registry, Depends(get_registry)],
) -> AnchorOut:
    admitted = sequencer.submit(
        "revoke", registry.lifecycle.revoke, principal.identity, cred_id, body.reason
    )
    return AnchorOut.from_anchor(admitted.result)


# --- reads ---


@router.get("/{cred_id}", response_model=AnchorOut)
def get_anchor(
    cred_id: Annotated[bytes, Depends(cred_id_path)],
    registry: Annotated[Registry, Depends(get_registry)],
) -> AnchorOut:
    return AnchorOut.from_anchor(registry.verification.get_anchor(cred_id))


@router.get("/{cred_id}/verify", response_model=VerifyOut)
def verify_anchor(
    cred_id: Annotated[bytes, Depends(cred_id_path)],
    commitment: Annotated[str, Query(description="0x-hex commitment to compare")],
    registry: Annotated[Registry, Depends(get_registry)],
) -> VerifyOut:
    result = registry.verification.verify(
        cred_id, hash_param(commitment, field="commitment")
    )
    return VerifyOut(
        match=result.match,
        attested=result.attested,
        revoked=result.revoked,
        issuer=result.issuer,
    )


@router.get("/{cred_id}/revoked", response_model=RevokedOut)
def anchor_revoked(
    cred_id: Annotated[bytes, Depends(cred_id_path)],
    registry: Annotated[Registry, Depends(get_registry)],
) -> RevokedOut:
    return RevokedOut(revoked=registry.verification.is_revoked(cred_id))
