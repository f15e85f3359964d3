"""Prometheus metrics endpoint (text exposition format, not JSON)."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from anchor_registry.core.metrics import REGISTRY_ANCHORS
from anchor_registry.services.registry import get_registry

router = APIRouter(tags=["observability"])


@router.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    REGISTRY_ANCHORS.set(get_registry().verification.anchor_count())
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )
