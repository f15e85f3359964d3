"""Notification feed.

GET /v1/notifications?after=N&limit=M returns records with sequence > N,
oldest first.  Consumers poll with the last sequence they processed, so
a restart on their side loses nothing the process still holds.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from anchor_registry.services.registry import Registry, get_registry

router = APIRouter(prefix="/v1/notifications", tags=["notifications"])


class NotificationOut(BaseModel):
    sequence: int
    kind: str
    data: dict


class NotificationPageOut(BaseModel):
    items: list[NotificationOut]
    last_sequence: int


@router.get("", response_model=NotificationPageOut)
def list_notifications(
    registry: Annotated[Registry, Depends(get_registry)],
    after: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=1000)] = 100,
) -> NotificationPageOut:
    log = registry.notifications
    return NotificationPageOut(
        items=[NotificationOut(**n.to_dict()) for n in log.since(after, limit)],
        last_sequence=log.last_sequence,
    )
