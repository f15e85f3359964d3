"""Health and readiness endpoints.

  /health (liveness): is the process alive?  Always 200 while it can
    answer; the body reports registry counters for a quick look.

  /ready (readiness): can this instance take traffic?  Ready once the
    process-wide registry exists with an administrator.  There is no
    external dependency to wait for; state is in-process.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from anchor_registry.models.roles import ADMIN, ATTESTER, ISSUER
from anchor_registry.services.registry import Registry, get_registry
from anchor_registry.services.sequencer import sequencer

router = APIRouter(tags=["health"])


@router.get("/health")
def health(registry: Annotated[Registry, Depends(get_registry)]) -> dict:
    verification = registry.verification
    return {
        "status": "ok",
        "checks": {"registry": "ok"},
        "registry": {
            "anchors": verification.anchor_count(),
            "issuers": len(verification.role_members(ISSUER)),
            "attesters": len(verification.role_members(ATTESTER)),
            "notifications": registry.notifications.last_sequence,
            "sequencer_position": sequencer.position,
        },
    }


@router.get("/ready")
def ready(registry: Annotated[Registry, Depends(get_registry)]) -> Response:
    if not registry.verification.has_role(ADMIN, registry.admin):
        return Response(status_code=503)
    return Response(status_code=200)
