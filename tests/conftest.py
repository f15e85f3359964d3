from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure repo root is on sys.path so `import anchor_registry` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from anchor_registry.core.config import SETTINGS  # noqa: E402
from anchor_registry.main import app  # noqa: E402
from anchor_registry.models.identity import digest32  # noqa: E402
from anchor_registry.services import registry as registry_module  # noqa: E402
from anchor_registry.services import token_service  # noqa: E402
from anchor_registry.services.registry import Registry  # noqa: E402

ADMIN = SETTINGS.registry_admin
ISSUER_A = "0x00000000000000000000000000000000000000a1"
ISSUER_B = "0x00000000000000000000000000000000000000b2"
ATTESTER_B = "0x00000000000000000000000000000000000000b0"
OUTSIDER = "0x00000000000000000000000000000000000000ee"

NOW = 1_700_000_000


class FakeClock:
    """Controllable clock: call it for the current time, assign .now to move it."""

    def __init__(self, now: int = NOW) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture(autouse=True)
def registry(clock: FakeClock) -> Registry:
    """Fresh process-wide registry per test, driven by the fake clock."""
    return registry_module.reset_registry(clock=clock)


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


def mint_token(identity: str) -> str:
    return token_service.create_access_token(sub=identity)


def auth(identity: str | None) -> dict[str, str]:
    if identity is None:
        return {}
    return {"Authorization": f"Bearer {mint_token(identity)}"}


def h(label: str) -> bytes:
    """Deterministic 32-byte hash for a label."""
    return digest32(label)


def hx(label: str) -> str:
    return "0x" + digest32(label).hex()


# ---------------------------------------------------------------------------
# Registry setup helpers
# ---------------------------------------------------------------------------


def accredit(
    registry: Registry,
    issuer: str = ISSUER_A,
    *,
    name: str = "Test University",
    valid_from: int = 0,
    valid_to: int = 0,
) -> None:
    registry.governance.register_issuer(ADMIN, issuer, name, valid_from, valid_to, True)


def issue(
    registry: Registry,
    label: str = "X",
    issuer: str = ISSUER_A,
    *,
    commitment: bytes | None = None,
    pointer: str = "",
):
    return registry.lifecycle.issue(
        issuer,
        h(f"cred:{label}"),
        h(f"holder:{label}"),
        commitment if commitment is not None else h(f"commit:{label}"),
        pointer,
    )
