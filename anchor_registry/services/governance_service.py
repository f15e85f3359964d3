"""Issuer accreditation and attester membership: administrator only.

The issuer role is never granted or revoked directly.  It follows the
accreditation flag: accrediting an identity grants the role, withdrawing
accreditation strips it.  That keeps ``accredited == holds issuer role``
true for every identity at every point in the log.

Attesters have no accreditation record; their role is a plain toggle.

Guard order for every operation: caller must be the administrator
(NotAuthorized), then the target must not be the null identity
(InvalidIdentity).  All guards run before the first write.
"""

from __future__ import annotations

import logging

from anchor_registry.core.errors import InvalidIdentity, InvalidValidityWindow
from anchor_registry.models.identity import is_null_identity, normalize_identity
from anchor_registry.models.issuer import IssuerInfo
from anchor_registry.models.notification import (
    AccreditationChanged,
    IssuerRegistered,
    RoleGranted,
    RoleRevoked,
)
from anchor_registry.models.roles import ATTESTER, ISSUER, Role
from anchor_registry.repos.role_repo import RoleStore
from anchor_registry.services.authorization import AuthorizationContext
from anchor_registry.services.notifications import NotificationLog

logger = logging.getLogger(__name__)


class GovernanceService:
    def __init__(
        self,
        roles: RoleStore,
        auth: AuthorizationContext,
        log: NotificationLog,
    ) -> None:
        self._roles = roles
        self._auth = auth
        self._log = log

    # --- issuers ---

    def register_issuer(
        self,
        caller: str,
        issuer: str,
        name: str,
        valid_from: int,
        valid_to: int,
        accredited: bool,
    ) -> IssuerInfo:
        """Create or fully replace the IssuerInfo for ``issuer``."""
        caller = normalize_identity(caller)
        self._auth.require_admin(caller, operation="register_issuer")
        issuer = self._require_target(issuer, operation="register_issuer")
        if valid_from < 0 or valid_to < 0:
            raise InvalidValidityWindow("validity bounds must be >= 0")
        if valid_from and valid_to and valid_to < valid_from:
            raise InvalidValidityWindow(
                f"valid_to ({valid_to}) is before valid_from ({valid_from})"
            )

        info = IssuerInfo(
            accredited=accredited,
            name=name,
            valid_from=valid_from,
            valid_to=valid_to,
        )
        self._roles.put_issuer(issuer, info)
        self._sync_issuer_role(caller, issuer, accredited)

        self._log.publish(
            IssuerRegistered(
                issuer=issuer,
                name=name,
                valid_from=valid_from,
                valid_to=valid_to,
                accredited=accredited,
            )
        )
        self._log.publish(AccreditationChanged(issuer=issuer, accredited=accredited))
        logger.info(
            "Registered issuer=%s name=%r accredited=%s window=[%d, %d]",
            issuer,
            name,
            accredited,
            valid_from,
            valid_to,
        )
        return info

    def set_issuer_accreditation(
        self, caller: str, issuer: str, accredited: bool
    ) -> IssuerInfo:
        """Flip only the accreditation flag; name and validity window are kept."""
        caller = normalize_identity(caller)
        self._auth.require_admin(caller, operation="set_issuer_accreditation")
        issuer = self._require_target(issuer, operation="set_issuer_accreditation")

        current = self._roles.get_issuer(issuer)
        info = IssuerInfo(
            accredited=accredited,
            name=current.name,
            valid_from=current.valid_from,
            valid_to=current.valid_to,
        )
        self._roles.put_issuer(issuer, info)
        self._sync_issuer_role(caller, issuer, accredited)

        self._log.publish(AccreditationChanged(issuer=issuer, accredited=accredited))
        logger.info("Set accreditation issuer=%s accredited=%s", issuer, accredited)
        return info

    # --- attesters ---

    def grant_attester(self, caller: str, identity: str) -> bool:
        caller = normalize_identity(caller)
        self._auth.require_admin(caller, operation="grant_attester")
        identity = self._require_target(identity, operation="grant_attester")
        changed = self._grant(caller, ATTESTER, identity)
        logger.info("Granted attester=%s changed=%s", identity, changed)
        return changed

    def revoke_attester(self, caller: str, identity: str) -> bool:
        caller = normalize_identity(caller)
        self._auth.require_admin(caller, operation="revoke_attester")
        identity = self._require_target(identity, operation="revoke_attester")
        changed = self._revoke(caller, ATTESTER, identity)
        logger.info("Revoked attester=%s changed=%s", identity, changed)
        return changed

    # --- internals ---

    def _require_target(self, identity: str, *, operation: str) -> str:
        if is_null_identity(identity):
            logger.warning("Rejected null identity operation=%s", operation)
            raise InvalidIdentity(f"{operation} target must not be the null identity")
        return normalize_identity(identity)

    def _sync_issuer_role(self, sender: str, issuer: str, accredited: bool) -> None:
        if accredited:
            self._grant(sender, ISSUER, issuer)
        else:
            self._revoke(sender, ISSUER, issuer)

    def _grant(self, sender: str, role: Role, account: str) -> bool:
        changed = self._roles.grant(role, account)
        if changed:
            self._log.publish(RoleGranted(role=role, account=account, sender=sender))
        return changed

    def _revoke(self, sender: str, role: Role, account: str) -> bool:
        changed = self._roles.revoke(role, account)
        if changed:
            self._log.publish(RoleRevoked(role=role, account=account, sender=sender))
        return changed
