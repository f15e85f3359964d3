"""Public issuer status view.

GET /v1/issuers/{issuer} never 404s: an identity that was never
registered reports the zeroed default (not accredited, no window).
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from anchor_registry.models.identity import normalize_identity
from anchor_registry.models.issuer import IssuerInfo
from anchor_registry.models.roles import ATTESTER, ISSUER
from anchor_registry.services.registry import Registry, get_registry

router = APIRouter(prefix="/v1/issuers", tags=["issuers"])


class IssuerOut(BaseModel):
    issuer: str
    accredited: bool
    name: str
    valid_from: int
    valid_to: int

    @staticmethod
    def from_info(issuer: str, info: IssuerInfo) -> IssuerOut:
        return IssuerOut(
            issuer=issuer,
            accredited=info.accredited,
            name=info.name,
            valid_from=info.valid_from,
            valid_to=info.valid_to,
        )


class IssuerStatusOut(IssuerOut):
    holds_issuer_role: bool
    holds_attester_role: bool


@router.get("/{issuer}", response_model=IssuerStatusOut)
def issuer_status(
    issuer: str,
    registry: Annotated[Registry, Depends(get_registry)],
) -> IssuerStatusOut:
    verification = registry.verification
    identity = normalize_identity(issuer)
    info = verification.issuer_status(identity)
    return IssuerStatusOut(
        issuer=identity,
        accredited=info.accredited,
        name=info.name,
        valid_from=info.valid_from,
        valid_to=info.valid_to,
        holds_issuer_role=verification.has_role(ISSUER, identity),
        holds_attester_role=verification.has_role(ATTESTER, identity),
    )
