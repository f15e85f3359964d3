from __future__ import annotations

from typing import Literal

Role = Literal["admin", "issuer", "attester"]

ADMIN: Role = "admin"
ISSUER: Role = "issuer"
ATTESTER: Role = "attester"
