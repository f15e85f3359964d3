"""Seed initial roles at startup.

A fresh registry only knows its administrator.  Deployments that want a
working issuer/attester pair out of the box (local dev, demo
environments, benchmark runs) list them in SEED_ATTESTERS / SEED_ISSUERS
and this runs them through the governance service as the administrator,
so seeding produces the same notifications as doing it by hand.

Seeded issuers are accredited with an unbounded validity window.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from anchor_registry.core.config import DEFAULT_SEED_ISSUER_NAME, Settings
from anchor_registry.services.registry import Registry

logger = logging.getLogger(__name__)


def bootstrap_roles(
    registry: Registry,
    *,
    attesters: Iterable[str] = (),
    issuers: Iterable[tuple[str, str] | str] = (),
) -> None:
    for identity in attesters:
        registry.governance.grant_attester(registry.admin, identity)

    for entry in issuers:
        if isinstance(entry, str):
            identity, name = entry, DEFAULT_SEED_ISSUER_NAME
        else:
            identity, name = entry
        registry.governance.register_issuer(registry.admin, identity, name, 0, 0, True)


def bootstrap_from_settings(registry: Registry, settings: Settings) -> None:
    if not settings.seed_attesters and not settings.seed_issuers:
        return
    bootstrap_roles(
        registry,
        attesters=settings.seed_attesters,
        issuers=settings.seed_issuers,
    )
    logger.info(
        "Bootstrap complete  attesters=%d issuers=%d",
        len(settings.seed_attesters),
        len(settings.seed_issuers),
    )
