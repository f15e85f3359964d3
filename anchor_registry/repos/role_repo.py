from __future__ import annotations

from typing import Protocol

from anchor_registry.models.issuer import UNREGISTERED_ISSUER, IssuerInfo
from anchor_registry.models.roles import Role


class RoleStore(Protocol):
    def has_role(self, role: Role, identity: str) -> bool: ...
    def grant(self, role: Role, identity: str) -> bool: ...
    def revoke(self, role: Role, identity: str) -> bool: ...
    def members(self, role: Role) -> list[str]: ...
    def get_issuer(self, identity: str) -> IssuerInfo: ...
    def is_registered(self, identity: str) -> bool: ...
    def put_issuer(self, identity: str, info: IssuerInfo) -> None: ...


class InMemoryRoleStore:
    """Role memberships plus issuer accreditation records.

    grant/revoke return whether membership actually changed, so callers
    can emit role-change notifications only for real transitions.  Each
    change swaps in a new frozenset, so unsequenced readers iterate a
    stable membership.
    """

    def __init__(self) -> None:
        self._members: dict[str, frozenset[str]] = {}
        self._issuers: dict[str, IssuerInfo] = {}

    def has_role(self, role: Role, identity: str) -> bool:
        return identity in self._members.get(role, ())

    def grant(self, role: Role, identity: str) -> bool:
        members = self._members.get(role, frozenset())
        if identity in members:
            return False
        self._members[role] = members | {identity}
        return True

    def revoke(self, role: Role, identity: str) -> bool:
        members = self._members.get(role, frozenset())
        if identity not in members:
            return False
        self._members[role] = members - {identity}
        return True

    def members(self, role: Role) -> list[str]:
        return sorted(self._members.get(role, ()))

    def get_issuer(self, identity: str) -> IssuerInfo:
        return self._issuers.get(identity, UNREGISTERED_ISSUER)

    def is_registered(self, identity: str) -> bool:
        return identity in self._issuers

    def put_issuer(self, identity: str, info: IssuerInfo) -> None:
        self._issuers[identity] = info
