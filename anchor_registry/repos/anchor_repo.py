from __future__ import annotations

from typing import Protocol

from anchor_registry.models.anchor import CredentialAnchor


class AnchorStore(Protocol):
    def get(self, cred_id: bytes) -> CredentialAnchor | None: ...
    def exists(self, cred_id: bytes) -> bool: ...
    def add(self, anchor: CredentialAnchor) -> None: ...
    def replace(self, anchor: CredentialAnchor) -> None: ...
    def count(self) -> int: ...


class InMemoryAnchorStore:
    """Anchor records keyed by credential id.

    There is no delete.  add() refuses an existing key and replace()
    refuses a missing one, so a record can only be created once and then
    swapped for its next version.
    """

    def __init__(self) -> None:
        self._by_id: dict[bytes, CredentialAnchor] = {}

    def get(self, cred_id: bytes) -> CredentialAnchor | None:
        return self._by_id.get(cred_id)

    def exists(self, cred_id: bytes) -> bool:
        return cred_id in self._by_id

    def add(self, anchor: CredentialAnchor) -> None:
        if anchor.cred_id in self._by_id:
            raise ValueError("anchor already exists")
        self._by_id[anchor.cred_id] = anchor

    def replace(self, anchor: CredentialAnchor) -> None:
        if anchor.cred_id not in self._by_id:
            raise KeyError("anchor does not exist")
        self._by_id[anchor.cred_id] = anchor

    def count(self) -> int:
        return len(self._by_id)
