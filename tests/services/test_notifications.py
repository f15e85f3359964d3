from __future__ import annotations

import logging

import pytest

from anchor_registry.models.identity import format_hash
from anchor_registry.models.notification import (
    AccreditationChanged,
    CredentialAnchored,
    Notification,
)
from anchor_registry.services.notifications import NotificationLog
from tests.conftest import ISSUER_A, h


def test_sequence_starts_at_one_and_increments() -> None:
    log = NotificationLog()
    first = log.publish(AccreditationChanged(issuer=ISSUER_A, accredited=True))
    second = log.publish(AccreditationChanged(issuer=ISSUER_A, accredited=False))
    assert (first.sequence, second.sequence) == (1, 2)
    assert log.last_sequence == 2


def test_since_returns_records_after_sequence() -> None:
    log = NotificationLog()
    for flag in (True, False, True):
        log.publish(AccreditationChanged(issuer=ISSUER_A, accredited=flag))

    assert [n.sequence for n in log.since(0)] == [1, 2, 3]
    assert [n.sequence for n in log.since(1)] == [2, 3]
    assert [n.sequence for n in log.since(1, limit=1)] == [2]
    assert log.since(3) == []


def test_subscribers_receive_each_record() -> None:
    log = NotificationLog()
    seen: list[Notification] = []
    log.subscribe(seen.append)

    record = log.publish(AccreditationChanged(issuer=ISSUER_A, accredited=True))

    assert seen == [record]


def test_unsubscribe_stops_delivery() -> None:
    log = NotificationLog()
    seen: list[Notification] = []
    unsubscribe = log.subscribe(seen.append)
    unsubscribe()
    unsubscribe()  # second call is harmless

    log.publish(AccreditationChanged(issuer=ISSUER_A, accredited=True))
    assert seen == []


def test_failing_subscriber_does_not_break_publish(caplog: pytest.LogCaptureFixture) -> None:
    log = NotificationLog()
    seen: list[Notification] = []

    def _broken(_n: Notification) -> None:
        raise RuntimeError("sink down")

    log.subscribe(_broken)
    log.subscribe(seen.append)

    with caplog.at_level(logging.ERROR):
        record = log.publish(AccreditationChanged(issuer=ISSUER_A, accredited=True))

    assert log.records() == (record,)
    assert seen == [record]
    assert "Notification subscriber failed" in caplog.text


def test_records_is_a_snapshot() -> None:
    log = NotificationLog()
    snapshot = log.records()
    log.publish(AccreditationChanged(issuer=ISSUER_A, accredited=True))
    assert snapshot == ()


def test_to_dict_renders_hashes_as_hex() -> None:
    event = CredentialAnchored(
        cred_id=h("cred:X"),
        issuer=ISSUER_A,
        holder_id_hash=h("holder:X"),
        commitment=h("commit:X"),
        pointer="",
        issued_at=42,
    )
    data = Notification(sequence=7, event=event).to_dict()
    assert data["sequence"] == 7
    assert data["kind"] == "credential_anchored"
    assert data["data"]["cred_id"] == format_hash(h("cred:X"))
    assert data["data"]["issued_at"] == 42


def test_notifications_are_frozen() -> None:
    event = AccreditationChanged(issuer=ISSUER_A, accredited=True)
    with pytest.raises(AttributeError):
        event.accredited = False  # type: ignore[misc]
