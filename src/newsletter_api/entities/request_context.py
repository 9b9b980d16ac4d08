"""Request-scoped identity."""

from dataclasses import dataclass

from .identity_claims import IdentityClaims


@dataclass(frozen=True)
class RequestContext:
    """Verified caller identity, passed explicitly through the handler chain."""

    claims: IdentityClaims

    @property
    def subject_id(self) -> int:
        return self.claims.subject_id
