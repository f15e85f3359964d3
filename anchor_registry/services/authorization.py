"""Capability lookups consulted at the start of every mutating operation.

The services never decide permissions by what kind of object the caller
is.  They ask this context an explicit question ("does X hold role R
right now?") against the role store, and the answer is whatever the
store says at call time.
"""

from __future__ import annotations

import logging

from anchor_registry.core.errors import NotAuthorized
from anchor_registry.models.roles import ADMIN, Role
from anchor_registry.repos.role_repo import RoleStore

logger = logging.getLogger(__name__)


class AuthorizationContext:
    def __init__(self, roles: RoleStore) -> None:
        self._roles = roles

    def has_role(self, role: Role, identity: str) -> bool:
        return self._roles.has_role(role, identity)

    def is_admin(self, identity: str) -> bool:
        return self._roles.has_role(ADMIN, identity)

    def require_role(self, role: Role, caller: str, *, operation: str) -> None:
        """Raise NotAuthorized unless caller currently holds role."""
        if not self._roles.has_role(role, caller):
            logger.warning(
                "Access denied: caller=%s missing role=%s operation=%s",
                caller,
                role,
                operation,
            )
            raise NotAuthorized(f"{operation} requires the {role} role")

    def require_admin(self, caller: str, *, operation: str) -> None:
        self.require_role(ADMIN, caller, operation=operation)
