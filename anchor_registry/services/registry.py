"""Composition root for the registry core.

Registry wires one RoleStore, one AnchorStore and one NotificationLog to
the three services around an administrator identity and a clock.  It
holds no behavior of its own.

The module-level ``registry`` is the process-wide instance the API
serves.  It starts empty and lives as long as the process; there is no
teardown.  Tests build their own ``Registry(...)`` per case, or call
``reset_registry()`` to swap the process-wide one for a fresh instance.
"""

from __future__ import annotations

import time

from anchor_registry.core.config import SETTINGS
from anchor_registry.models.identity import is_null_identity, normalize_identity
from anchor_registry.models.roles import ADMIN
from anchor_registry.repos.anchor_repo import InMemoryAnchorStore
from anchor_registry.repos.role_repo import InMemoryRoleStore
from anchor_registry.services.authorization import AuthorizationContext
from anchor_registry.services.governance_service import GovernanceService
from anchor_registry.services.lifecycle_service import Clock, LifecycleService
from anchor_registry.services.notifications import NotificationLog
from anchor_registry.services.verification_service import VerificationService


def system_clock() -> int:
    return int(time.time())


class Registry:
    def __init__(self, admin: str, *, clock: Clock = system_clock) -> None:
        if is_null_identity(admin):
            raise ValueError("registry administrator must not be the null identity")
        self.admin = normalize_identity(admin)
        self.clock = clock

        self.roles = InMemoryRoleStore()
        self.anchors = InMemoryAnchorStore()
        self.notifications = NotificationLog()
        self.roles.grant(ADMIN, self.admin)

        self.auth = AuthorizationContext(self.roles)
        self.governance = GovernanceService(self.roles, self.auth, self.notifications)
        self.lifecycle = LifecycleService(
            self.anchors, self.roles, self.auth, self.notifications, clock
        )
        self.verification = VerificationService(self.anchors, self.roles)


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

registry = Registry(SETTINGS.registry_admin)


def get_registry() -> Registry:
    return registry


def reset_registry(admin: str | None = None, *, clock: Clock = system_clock) -> Registry:
    """Replace the process-wide registry with an empty one."""
    global registry
    registry = Registry(admin or SETTINGS.registry_admin, clock=clock)
    return registry
