"""Table-driven access-control tests.

Each row: endpoint, method, caller, expected HTTP status.  Callers are
identities, not token roles; what they may do is decided by the registry
role store, so these also prove tokens carry no authority of their own.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from anchor_registry.services.registry import Registry
from tests.conftest import (
    ADMIN,
    ATTESTER_B,
    ISSUER_A,
    ISSUER_B,
    OUTSIDER,
    accredit,
    auth,
    hx,
    issue,
)

_ANCHORED = hx("cred:X")
_FRESH = hx("cred:fresh")

_ISSUE_BODY = {
    "cred_id": _FRESH,
    "holder_id_hash": hx("holder:fresh"),
    "commitment": hx("commit:fresh"),
}

_RBAC_CASES = [
    # (endpoint, method, caller, body, expected_status)
    # governance: admin only
    ("/v1/governance/issuers", "POST", ADMIN, {"issuer": ISSUER_B, "name": "B"}, 201),
    ("/v1/governance/issuers", "POST", ISSUER_A, {"issuer": ISSUER_B, "name": "B"}, 403),
    ("/v1/governance/issuers", "POST", ATTESTER_B, {"issuer": ISSUER_B, "name": "B"}, 403),
    ("/v1/governance/issuers", "POST", None, {"issuer": ISSUER_B, "name": "B"}, 401),
    (f"/v1/governance/issuers/{ISSUER_A}/accreditation", "PATCH", ADMIN, {"accredited": False}, 200),
    (f"/v1/governance/issuers/{ISSUER_A}/accreditation", "PATCH", ISSUER_A, {"accredited": False}, 403),
    (f"/v1/governance/issuers/{ISSUER_A}/accreditation", "PATCH", None, {"accredited": False}, 401),
    (f"/v1/governance/attesters/{OUTSIDER}", "PUT", ADMIN, None, 204),
    (f"/v1/governance/attesters/{OUTSIDER}", "PUT", ATTESTER_B, None, 403),
    (f"/v1/governance/attesters/{OUTSIDER}", "PUT", None, None, 401),
    (f"/v1/governance/attesters/{ATTESTER_B}", "DELETE", ADMIN, None, 204),
    (f"/v1/governance/attesters/{ATTESTER_B}", "DELETE", ISSUER_A, None, 403),
    # issue: accredited issuers only
    ("/v1/anchors", "POST", ISSUER_A, _ISSUE_BODY, 201),
    ("/v1/anchors", "POST", ATTESTER_B, _ISSUE_BODY, 403),
    ("/v1/anchors", "POST", ADMIN, _ISSUE_BODY, 403),
    ("/v1/anchors", "POST", OUTSIDER, _ISSUE_BODY, 403),
    ("/v1/anchors", "POST", None, _ISSUE_BODY, 401),
    # attest: attesters only
    (f"/v1/anchors/{_ANCHORED}/attest", "POST", ATTESTER_B, None, 200),
    (f"/v1/anchors/{_ANCHORED}/attest", "POST", ISSUER_A, None, 403),
    (f"/v1/anchors/{_ANCHORED}/attest", "POST", ADMIN, None, 403),
    (f"/v1/anchors/{_ANCHORED}/attest", "POST", None, None, 401),
    # revoke: issuer of record or any attester
    (f"/v1/anchors/{_ANCHORED}/revoke", "POST", ISSUER_A, {"reason": "r"}, 200),
    (f"/v1/anchors/{_ANCHORED}/revoke", "POST", ATTESTER_B, {"reason": "r"}, 200),
    (f"/v1/anchors/{_ANCHORED}/revoke", "POST", ISSUER_B, {"reason": "r"}, 403),
    (f"/v1/anchors/{_ANCHORED}/revoke", "POST", ADMIN, {"reason": "r"}, 403),
    (f"/v1/anchors/{_ANCHORED}/revoke", "POST", None, {"reason": "r"}, 401),
    # reads: public
    (f"/v1/anchors/{_ANCHORED}", "GET", None, None, 200),
    (f"/v1/anchors/{_ANCHORED}/revoked", "GET", None, None, 200),
    (f"/v1/anchors/{_ANCHORED}/verify?commitment={hx('commit:X')}", "GET", None, None, 200),
    (f"/v1/issuers/{ISSUER_A}", "GET", None, None, 200),
    ("/v1/notifications", "GET", None, None, 200),
]


def _case_id(case: tuple) -> str:
    endpoint, method, caller, _body, expected = case
    labels = {ADMIN: "admin", ISSUER_A: "issuer-a", ISSUER_B: "issuer-b", ATTESTER_B: "attester", OUTSIDER: "outsider"}
    return f"{method} {endpoint.split('?')[0]} [{labels.get(caller, 'anon')}] -> {expected}"


@pytest.fixture
def seeded(registry: Registry) -> Registry:
    """Issuer A and B accredited, attester B granted, anchor X issued by A."""
    accredit(registry, ISSUER_A)
    accredit(registry, ISSUER_B, name="Other University")
    registry.governance.grant_attester(ADMIN, ATTESTER_B)
    issue(registry, "X")
    return registry


@pytest.mark.parametrize(
    "endpoint,method,caller,body,expected",
    _RBAC_CASES,
    ids=[_case_id(c) for c in _RBAC_CASES],
)
def test_rbac(
    client: TestClient,
    seeded: Registry,
    endpoint: str,
    method: str,
    caller: str | None,
    body: dict | None,
    expected: int,
) -> None:
    resp = client.request(method, endpoint, json=body, headers=auth(caller))

    assert resp.status_code == expected, (
        f"{method} {endpoint} caller={caller}: expected {expected}, got {resp.status_code}"
    )
    if expected == 403:
        assert resp.json()["error"]["category"] == "authorization"
