"""Credential anchor lifecycle: issue, attest, revoke.

Per credential id the state machine is::

    Unknown --issue--> Anchored --attest--> Attested
                          |                     |
                          +------revoke---------+--> Revoked (terminal)

Every operation runs all of its guards before touching the anchor store,
so a rejection leaves the store and the notification log exactly as they
were.  A successful transition writes one new record version and then
publishes one notification.

Revocation is a status flag on the record, never a delete.  The original
issuance fields stay readable forever.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from anchor_registry.core.errors import (
    AlreadyAttested,
    AlreadyRevoked,
    DuplicateCredential,
    EmptyCommitment,
    InvalidHash,
    IssuerExpired,
    IssuerNotAccredited,
    IssuerNotYetValid,
    NotAuthorized,
    UnknownCredential,
)
from anchor_registry.models.anchor import CredentialAnchor
from anchor_registry.models.identity import HASH_SIZE, format_hash, normalize_identity
from anchor_registry.models.notification import (
    CredentialAnchored,
    CredentialAttested,
    CredentialRevoked,
)
from anchor_registry.models.roles import ATTESTER, ISSUER
from anchor_registry.repos.anchor_repo import AnchorStore
from anchor_registry.repos.role_repo import RoleStore
from anchor_registry.services.authorization import AuthorizationContext
from anchor_registry.services.notifications import NotificationLog

logger = logging.getLogger(__name__)

Clock = Callable[[], int]


class LifecycleService:
    def __init__(
        self,
        anchors: AnchorStore,
        roles: RoleStore,
        auth: AuthorizationContext,
        log: NotificationLog,
        clock: Clock,
    ) -> None:
        self._anchors = anchors
        self._roles = roles
        self._auth = auth
        self._log = log
        self._clock = clock

    def issue(
        self,
        caller: str,
        cred_id: bytes,
        holder_id_hash: bytes,
        commitment: bytes,
        pointer: str = "",
    ) -> CredentialAnchor:
        """Anchor a new credential under the caller's issuer identity."""
        caller = normalize_identity(caller)
        self._require_issuer(caller)
        _require_hash32(cred_id=cred_id, holder_id_hash=holder_id_hash, commitment=commitment)

        if self._anchors.exists(cred_id):
            logger.warning("Rejected duplicate cred_id=%s", format_hash(cred_id))
            raise DuplicateCredential(f"credential {format_hash(cred_id)} already anchored")
        if not any(commitment):
            raise EmptyCommitment("commitment must be non-zero")

        info = self._roles.get_issuer(caller)
        now = self._clock()
        if not info.accredited:
            raise IssuerNotAccredited(f"issuer {caller} is not accredited")
        if info.not_yet_valid(now):
            raise IssuerNotYetValid(
                f"issuer {caller} is valid from {info.valid_from} (now {now})"
            )
        if info.expired(now):
            raise IssuerExpired(f"issuer {caller} expired at {info.valid_to} (now {now})")

        anchor = CredentialAnchor.new(
            cred_id=cred_id,
            issuer=caller,
            holder_id_hash=holder_id_hash,
            commitment=commitment,
            pointer=pointer,
            issued_at=now,
        )
        self._anchors.add(anchor)

        self._log.publish(
            CredentialAnchored(
                cred_id=anchor.cred_id,
                issuer=anchor.issuer,
                holder_id_hash=anchor.holder_id_hash,
                commitment=anchor.commitment,
                pointer=anchor.pointer,
                issued_at=anchor.issued_at,
            )
        )
        logger.info("Anchored cred_id=%s issuer=%s", format_hash(cred_id), caller)
        return anchor

    def attest(self, caller: str, cred_id: bytes) -> CredentialAnchor:
        caller = normalize_identity(caller)
        self._auth.require_role(ATTESTER, caller, operation="attest")

        anchor = self._require_anchor(cred_id)
        if anchor.revoked:
            raise AlreadyRevoked(f"credential {format_hash(cred_id)} is revoked")
        if anchor.attested:
            raise AlreadyAttested(f"credential {format_hash(cred_id)} is already attested")

        now = self._clock()
        updated = anchor.with_attestation(attester=caller, at=now)
        self._anchors.replace(updated)

        self._log.publish(
            CredentialAttested(cred_id=cred_id, attester=caller, attested_at=now)
        )
        logger.info("Attested cred_id=%s attester=%s", format_hash(cred_id), caller)
        return updated

    def revoke(self, caller: str, cred_id: bytes, reason: str) -> CredentialAnchor:
        """Mark an anchor revoked.

        Allowed for an attester, or for the anchor's own issuer while that
        identity still holds the issuer role.  An issuer whose role was
        withdrawn later has to go through an attester.
        """
        caller = normalize_identity(caller)
        anchor = self._require_anchor(cred_id)
        if anchor.revoked:
            raise AlreadyRevoked(f"credential {format_hash(cred_id)} is already revoked")

        as_issuer = anchor.issuer == caller and self._auth.has_role(ISSUER, caller)
        if not as_issuer and not self._auth.has_role(ATTESTER, caller):
            logger.warning(
                "Access denied: caller=%s may not revoke cred_id=%s issuer=%s",
                caller,
                format_hash(cred_id),
                anchor.issuer,
            )
            raise NotAuthorized("revoke requires the issuer of record or an attester")

        now = self._clock()
        updated = anchor.with_revocation(revoker=caller, at=now, reason=reason)
        self._anchors.replace(updated)

        self._log.publish(
            CredentialRevoked(cred_id=cred_id, revoker=caller, revoked_at=now, reason=reason)
        )
        logger.info(
            "Revoked cred_id=%s revoker=%s reason=%r", format_hash(cred_id), caller, reason
        )
        return updated

    # --- internals ---

    def _require_issuer(self, caller: str) -> None:
        if self._auth.has_role(ISSUER, caller):
            return
        # Withdrawing accreditation strips the issuer role, so a registered
        # but unaccredited issuer lands here; report the accreditation
        # problem rather than a bare permission failure.
        if self._roles.is_registered(caller) and not self._roles.get_issuer(caller).accredited:
            logger.warning("Rejected issue by unaccredited issuer=%s", caller)
            raise IssuerNotAccredited(f"issuer {caller} is not accredited")
        self._auth.require_role(ISSUER, caller, operation="issue")

    def _require_anchor(self, cred_id: bytes) -> CredentialAnchor:
        anchor = self._anchors.get(cred_id)
        if anchor is None:
            raise UnknownCredential(f"credential {format_hash(cred_id)} is not anchored")
        return anchor


def _require_hash32(**fields: bytes) -> None:
    for name, value in fields.items():
        if len(value) != HASH_SIZE:
            raise InvalidHash(f"{name} must be {HASH_SIZE} bytes (got {len(value)})")
