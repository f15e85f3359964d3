"""Governance endpoints: issuer accreditation and attester membership.

Every route here is administrator-only.  The check happens inside the
governance service against the role store, not in a route dependency,
so the HTTP layer and in-process callers are held to the same rule.

- POST   /v1/governance/issuers                          register_issuer
- PATCH  /v1/governance/issuers/{issuer}/accreditation   set_issuer_accreditation
- PUT    /v1/governance/attesters/{identity}             grant_attester
- DELETE /v1/governance/attesters/{identity}             revoke_attester
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, Field

from anchor_registry.api.dependencies import require_caller
from anchor_registry.api.issuers import IssuerOut
from anchor_registry.models.identity import normalize_identity
from anchor_registry.models.principal import Principal
from anchor_registry.services.registry import Registry, get_registry
from anchor_registry.services.sequencer import sequencer

router = APIRouter(prefix="/v1/governance", tags=["governance"])


class RegisterIssuerIn(BaseModel):
    issuer: str
    name: str
    valid_from: int = Field(default=0, ge=0)
    valid_to: int = Field(default=0, ge=0)
    accredited: bool = True


class AccreditationIn(BaseModel):
    accredited: bool


@router.post("/issuers", response_model=IssuerOut, status_code=status.HTTP_201_CREATED)
def register_issuer(
    body: RegisterIssuerIn,
    principal: Annotated[Principal, Depends(require_caller)],
    registry: Annotated[Registry, Depends(get_registry)],
) -> IssuerOut:
    admitted = sequencer.submit(
        "register_issuer",
        registry.governance.register_issuer,
        principal.identity,
        body.issuer,
        body.name,
        body.valid_from,
        body.valid_to,
        body.accredited,
    )
    return IssuerOut.from_info(normalize_identity(body.issuer), admitted.result)


@router.patch("/issuers/{issuer}/accreditation", response_model=IssuerOut)
def set_issuer_accreditation(
    issuer: str,
    body: AccreditationIn,
    principal: Annotated[Principal, Depends(require_caller)],
    registry: Annotated[Registry, Depends(get_registry)],
) -> IssuerOut:
    admitted = sequencer.submit(
        "set_issuer_accreditation",
        registry.governance.set_issuer_accreditation,
        principal.identity,
        issuer,
        body.accredited,
    )
    return IssuerOut.from_info(normalize_identity(issuer), admitted.result)


@router.put("/attesters/{identity}", status_code=status.HTTP_204_NO_CONTENT)
def grant_attester(
    identity: str,
    principal: Annotated[Principal, Depends(require_caller)],
    registry: Annotated[Registry, Depends(get_registry)],
) -> Response:
    sequencer.submit(
        "grant_attester", registry.governance.grant_attester, principal.identity, identity
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/attesters/{identity}", status_code=status.HTTP_204_NO_CONTENT)
def revoke_attester(
    identity: str,
    principal: Annotated[Principal, Depends(require_caller)],
    registry: Annotated[Registry, Depends(get_registry)],
) -> Response:
    sequencer.submit(
        "revoke_attester", registry.governance.revoke_attester, principal.identity, identity
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
