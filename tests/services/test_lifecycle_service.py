from __future__ import annotations

import pytest

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
from anchor_registry.models.identity import ZERO_HASH
from anchor_registry.services.registry import Registry
from tests.conftest import (
    ADMIN,
    ATTESTER_B,
    ISSUER_A,
    ISSUER_B,
    NOW,
    OUTSIDER,
    FakeClock,
    accredit,
    h,
    issue,
)


@pytest.fixture
def ready(registry: Registry) -> Registry:
    """Registry with accredited issuer A and attester B."""
    accredit(registry, ISSUER_A)
    registry.governance.grant_attester(ADMIN, ATTESTER_B)
    return registry


# ---- issue ----


def test_issue_creates_unattested_unrevoked_anchor(ready: Registry) -> None:
    anchor = issue(ready, "X", pointer="ipfs://bafy-example")

    assert anchor.issuer == ISSUER_A
    assert anchor.cred_id == h("cred:X")
    assert anchor.holder_id_hash == h("holder:X")
    assert anchor.commitment == h("commit:X")
    assert anchor.pointer == "ipfs://bafy-example"
    assert anchor.issued_at == NOW
    assert anchor.attested is False
    assert anchor.revoked is False
    assert ready.verification.get_anchor(h("cred:X")) == anchor


def test_issue_allows_empty_pointer(ready: Registry) -> None:
    assert issue(ready, "X").pointer == ""


def test_issue_rejects_duplicate_and_keeps_original(ready: Registry) -> None:
    original = issue(ready, "X")

    with pytest.raises(DuplicateCredential):
        issue(ready, "X", commitment=h("something else"))

    assert ready.verification.get_anchor(h("cred:X")) == original


def test_issue_rejects_zero_commitment(ready: Registry) -> None:
    with pytest.raises(EmptyCommitment):
        issue(ready, "X", commitment=ZERO_HASH)
    assert ready.anchors.exists(h("cred:X")) is False


def test_issue_rejects_short_zero_commitment(ready: Registry) -> None:
    with pytest.raises(InvalidHash, match="commitment"):
        issue(ready, "X", commitment=bytes(16))
    assert ready.anchors.count() == 0


@pytest.mark.parametrize(
    "field,value",
    [
        ("cred_id", b"short"),
        ("cred_id", bytes(33)),
        ("holder_id_hash", h("holder:X")[:31]),
        ("commitment", h("commit:X") + b"\x01"),
    ],
)
def test_issue_rejects_wrong_size_hashes(ready: Registry, field: str, value: bytes) -> None:
    args = {
        "cred_id": h("cred:X"),
        "holder_id_hash": h("holder:X"),
        "commitment": h("commit:X"),
    }
    args[field] = value
    before = ready.notifications.last_sequence

    with pytest.raises(InvalidHash, match=field):
        ready.lifecycle.issue(ISSUER_A, args["cred_id"], args["holder_id_hash"], args["commitment"], "")

    assert ready.anchors.count() == 0
    assert ready.notifications.last_sequence == before


def test_issue_checks_role_before_hash_size(ready: Registry) -> None:
    with pytest.raises(NotAuthorized):
        ready.lifecycle.issue(OUTSIDER, b"short", h("holder:X"), h("commit:X"), "")


def test_issue_rejects_caller_without_issuer_role(ready: Registry) -> None:
    with pytest.raises(NotAuthorized):
        issue(ready, "X", issuer=OUTSIDER)


def test_issue_rejects_attester_without_issuer_role(ready: Registry) -> None:
    with pytest.raises(NotAuthorized):
        issue(ready, "X", issuer=ATTESTER_B)


def test_issue_rejects_issuer_registered_unaccredited(registry: Registry) -> None:
    registry.governance.register_issuer(ADMIN, ISSUER_B, "Pending College", 0, 0, False)
    with pytest.raises(IssuerNotAccredited):
        issue(registry, "X", issuer=ISSUER_B)


def test_issue_rejects_after_accreditation_withdrawn(ready: Registry) -> None:
    ready.governance.set_issuer_accreditation(ADMIN, ISSUER_A, False)
    with pytest.raises(IssuerNotAccredited):
        issue(ready, "X")


def test_issue_rejects_before_valid_from(registry: Registry, clock: FakeClock) -> None:
    accredit(registry, ISSUER_A, valid_from=NOW + 100)
    with pytest.raises(IssuerNotYetValid):
        issue(registry, "X")

    clock.advance(100)
    assert issue(registry, "X").issued_at == NOW + 100


def test_issue_rejects_after_valid_to(registry: Registry, clock: FakeClock) -> None:
    accredit(registry, ISSUER_A, valid_to=NOW + 10)
    assert issue(registry, "early").issued_at == NOW

    clock.advance(10)
    issue(registry, "boundary")

    clock.advance(1)
    with pytest.raises(IssuerExpired):
        issue(registry, "late")


@pytest.mark.parametrize(
    "valid_from,valid_to,offset,expected",
    [
        (0, 0, 0, None),
        (0, 0, 10**9, None),
        (NOW, 0, 0, None),
        (NOW + 1, 0, 0, IssuerNotYetValid),
        (0, NOW, 0, None),
        (0, NOW - 1, 0, IssuerExpired),
        (NOW - 5, NOW + 5, 0, None),
        (NOW - 5, NOW + 5, 6, IssuerExpired),
        (NOW - 5, NOW + 5, -6, IssuerNotYetValid),
    ],
)
def test_issue_validity_window(
    registry: Registry,
    clock: FakeClock,
    valid_from: int,
    valid_to: int,
    offset: int,
    expected: type[Exception] | None,
) -> None:
    accredit(registry, ISSUER_A, valid_from=valid_from, valid_to=valid_to)
    clock.advance(offset)

    if expected is None:
        issue(registry, "X")
        assert registry.anchors.exists(h("cred:X"))
    else:
        with pytest.raises(expected):
            issue(registry, "X")
        assert not registry.anchors.exists(h("cred:X"))


def test_failed_issue_publishes_nothing(ready: Registry) -> None:
    before = ready.notifications.last_sequence
    with pytest.raises(EmptyCommitment):
        issue(ready, "X", commitment=ZERO_HASH)
    assert ready.notifications.last_sequence == before


def test_issue_publishes_anchored_notification(ready: Registry) -> None:
    issue(ready, "X", pointer="ipfs://p")
    last = ready.notifications.records()[-1]
    assert last.kind == "credential_anchored"
    assert last.event.cred_id == h("cred:X")
    assert last.event.issuer == ISSUER_A
    assert last.event.holder_id_hash == h("holder:X")
    assert last.event.commitment == h("commit:X")
    assert last.event.pointer == "ipfs://p"
    assert last.event.issued_at == NOW


def test_issue_normalizes_caller_identity(ready: Registry) -> None:
    anchor = issue(ready, "X", issuer="  " + ISSUER_A.upper().replace("0X", "0x") + " ")
    assert anchor.issuer == ISSUER_A


# ---- attest ----


def test_attest_sets_flag_and_audit_fields(ready: Registry, clock: FakeClock) -> None:
    issue(ready, "X")
    clock.advance(30)

    anchor = ready.lifecycle.attest(ATTESTER_B, h("cred:X"))

    assert anchor.attested is True
    assert anchor.attested_at == NOW + 30
    assert anchor.attested_by == ATTESTER_B
    last = ready.notifications.records()[-1]
    assert last.kind == "credential_attested"
    assert last.event.attested_at == NOW + 30


def test_attest_requires_attester_role(ready: Registry) -> None:
    issue(ready, "X")
    with pytest.raises(NotAuthorized):
        ready.lifecycle.attest(ISSUER_A, h("cred:X"))
    assert ready.verification.get_anchor(h("cred:X")).attested is False


def test_attest_role_checked_before_existence(ready: Registry) -> None:
    with pytest.raises(NotAuthorized):
        ready.lifecycle.attest(OUTSIDER, h("cred:missing"))


def test_attest_unknown_credential(ready: Registry) -> None:
    with pytest.raises(UnknownCredential):
        ready.lifecycle.attest(ATTESTER_B, h("cred:missing"))


def test_second_attest_rejected_and_state_unchanged(ready: Registry, clock: FakeClock) -> None:
    issue(ready, "X")
    first = ready.lifecycle.attest(ATTESTER_B, h("cred:X"))
    seq = ready.notifications.last_sequence

    clock.advance(60)
    with pytest.raises(AlreadyAttested):
        ready.lifecycle.attest(ATTESTER_B, h("cred:X"))

    assert ready.verification.get_anchor(h("cred:X")) == first
    assert ready.notifications.last_sequence == seq


def test_attest_rejected_on_revoked_anchor(ready: Registry) -> None:
    issue(ready, "X")
    ready.lifecycle.revoke(ISSUER_A, h("cred:X"), "withdrawn")
    with pytest.raises(AlreadyRevoked):
        ready.lifecycle.attest(ATTESTER_B, h("cred:X"))


# ---- revoke ----


def test_issuer_of_record_can_revoke(ready: Registry, clock: FakeClock) -> None:
    issue(ready, "X")
    clock.advance(5)

    anchor = ready.lifecycle.revoke(ISSUER_A, h("cred:X"), "issued in error")

    assert anchor.revoked is True
    assert anchor.revoked_at == NOW + 5
    assert anchor.revoke_reason == "issued in error"
    assert anchor.revoked_by == ISSUER_A
    last = ready.notifications.records()[-1]
    assert last.kind == "credential_revoked"
    assert last.event.reason == "issued in error"


def test_attester_can_revoke_any_anchor(ready: Registry) -> None:
    issue(ready, "X")
    anchor = ready.lifecycle.revoke(ATTESTER_B, h("cred:X"), "fraud")
    assert anchor.revoked is True
    assert anchor.revoked_by == ATTESTER_B


def test_other_issuer_cannot_revoke(ready: Registry) -> None:
    accredit(ready, ISSUER_B, name="Other University")
    issue(ready, "X")
    with pytest.raises(NotAuthorized):
        ready.lifecycle.revoke(ISSUER_B, h("cred:X"), "not mine")
    assert ready.verification.is_revoked(h("cred:X")) is False


def test_outsider_cannot_revoke(ready: Registry) -> None:
    issue(ready, "X")
    with pytest.raises(NotAuthorized):
        ready.lifecycle.revoke(OUTSIDER, h("cred:X"), "nope")


def test_issuer_without_role_cannot_revoke_own_anchor(ready: Registry) -> None:
    issue(ready, "X")
    ready.governance.set_issuer_accreditation(ADMIN, ISSUER_A, False)

    with pytest.raises(NotAuthorized):
        ready.lifecycle.revoke(ISSUER_A, h("cred:X"), "too late")

    # An attester still can.
    assert ready.lifecycle.revoke(ATTESTER_B, h("cred:X"), "on behalf").revoked


def test_reaccredited_issuer_can_revoke_again(ready: Registry) -> None:
    issue(ready, "X")
    ready.governance.set_issuer_accreditation(ADMIN, ISSUER_A, False)
    ready.governance.set_issuer_accreditation(ADMIN, ISSUER_A, True)
    assert ready.lifecycle.revoke(ISSUER_A, h("cred:X"), "back").revoked


def test_revoke_unknown_credential(ready: Registry) -> None:
    with pytest.raises(UnknownCredential):
        ready.lifecycle.revoke(ATTESTER_B, h("cred:missing"), "x")


def test_revoke_is_terminal(ready: Registry, clock: FakeClock) -> None:
    issue(ready, "X")
    ready.lifecycle.attest(ATTESTER_B, h("cred:X"))
    revoked = ready.lifecycle.revoke(ISSUER_A, h("cred:X"), "first")
    seq = ready.notifications.last_sequence

    clock.advance(100)
    with pytest.raises(AlreadyRevoked):
        ready.lifecycle.revoke(ATTESTER_B, h("cred:X"), "second")
    with pytest.raises(AlreadyRevoked):
        ready.lifecycle.attest(ATTESTER_B, h("cred:X"))

    assert ready.verification.get_anchor(h("cred:X")) == revoked
    assert ready.notifications.last_sequence == seq


def test_revoked_state_checked_before_authorization(ready: Registry) -> None:
    issue(ready, "X")
    ready.lifecycle.revoke(ISSUER_A, h("cred:X"), "first")
    with pytest.raises(AlreadyRevoked):
        ready.lifecycle.revoke(OUTSIDER, h("cred:X"), "second")


def test_revoke_keeps_issuance_fields(ready: Registry) -> None:
    original = issue(ready, "X", pointer="ipfs://keep")
    revoked = ready.lifecycle.revoke(ATTESTER_B, h("cred:X"), "r")

    for field in ("cred_id", "issuer", "holder_id_hash", "commitment", "pointer", "issued_at"):
        assert getattr(revoked, field) == getattr(original, field)
