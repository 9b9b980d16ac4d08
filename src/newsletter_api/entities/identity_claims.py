"""Identity claim domain entities."""

from dataclasses import dataclass
from enum import Enum

SESSION_PURPOSE = "session"
EMAIL_CONFIRM_PURPOSE = "email-confirm"


class AuthError(str, Enum):
    """Reason a token failed verification."""

    MISSING = "missing"
    MALFORMED = "malformed"
    EXPIRED = "expired"
    WRONG_PURPOSE = "wrong_purpose"


@dataclass(frozen=True)
class IdentityClaims:
    """Decoded payload of an identity token.

    Attributes:
        subject_id: ID of the user the token was issued for
        purpose: ``session`` or a single-purpose flow such as ``email-confirm``
        issued_at: Unix timestamp (seconds) of issuance
        expires_at: Unix timestamp (seconds) after which the claim is invalid
    """

    subject_id: int
    purpose: str
    issued_at: int
    expires_at: int

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at
