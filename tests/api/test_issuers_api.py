from __future__ import annotations

from fastapi.testclient import TestClient

from anchor_registry.services.registry import Registry
from tests.conftest import ADMIN, ISSUER_A


def test_unregistered_issuer_reports_defaults(client: TestClient) -> None:
    resp = client.get(f"/v1/issuers/{ISSUER_A}")
    assert resp.status_code == 200
    assert resp.json() == {
        "issuer": ISSUER_A,
        "accredited": False,
        "name": "",
        "valid_from": 0,
        "valid_to": 0,
        "holds_issuer_role": False,
        "holds_attester_role": False,
    }


def test_registered_issuer_status(client: TestClient, registry: Registry) -> None:
    registry.governance.register_issuer(ADMIN, ISSUER_A, "Uni A", 5, 50, True)
    registry.governance.grant_attester(ADMIN, ISSUER_A)

    data = client.get(f"/v1/issuers/{ISSUER_A.upper().replace('0X', '0x')}").json()
    assert data["issuer"] == ISSUER_A
    assert (data["accredited"], data["name"], data["valid_from"], data["valid_to"]) == (
        True,
        "Uni A",
        5,
        50,
    )
    assert data["holds_issuer_role"] is True
    assert data["holds_attester_role"] is True
