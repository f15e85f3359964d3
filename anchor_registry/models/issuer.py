from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class IssuerInfo:
    """Accreditation metadata for one candidate issuer identity.

    valid_from / valid_to are epoch seconds; 0 means "no bound" on that side.
    An identity that was never registered reads as the zeroed default.
    """

    accredited: bool = False
    name: str = ""
    valid_from: int = 0
    valid_to: int = 0

    def not_yet_valid(self, now: int) -> bool:
        return self.valid_from != 0 and now < self.valid_from

    def expired(self, now: int) -> bool:
        return self.valid_to != 0 and now > self.valid_to


UNREGISTERED_ISSUER = IssuerInfo()
