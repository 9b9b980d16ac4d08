"""Identity token service.

Issues and verifies signed, time-bounded claims (HS256 JWTs). Tokens are
stateless: nothing is stored at issuance and there is no revocation, a token
is trusted until it expires.
"""

import time
from typing import Any, Callable

import jwt

from newsletter_api.config import Settings, settings
from newsletter_api.entities import EMAIL_CONFIRM_PURPOSE, SESSION_PURPOSE, AuthError, IdentityClaims
from newsletter_api.logging import get_logger

logger = get_logger(__name__)

Clock = Callable[[], float]

_DECODE_OPTIONS = {
    "require": ["sub", "iat", "exp"],
    # expiry is checked against the injected clock in verify()
    "verify_exp": False,
    "verify_iat": False,
    "verify_nbf": False,
}


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header.

    Returns None when no header (or an empty one) was sent. A header with a
    different scheme is returned as-is so verification reports it malformed.
    """
    if not authorization or not authorization.strip():
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return authorization
    return token.strip() or None


class TokenService:
    """Issues and verifies identity tokens.

    ``verify`` returns either ``IdentityClaims`` or an ``AuthError`` member,
    callers branch on the type:

    Example:
        ```python
        tokens = TokenService.create()
        token = tokens.issue(42)

        result = tokens.verify(token, purpose=SESSION_PURPOSE)
        if isinstance(result, AuthError):
            ...
        else:
            result.subject_id  # 42
        ```
    """

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        ttls: dict[str, int] | None = None,
        clock: Clock = time.time,
    ) -> None:
        """Initialize the token service.

        Args:
            secret: Signing secret. Never leaves the service.
            algorithm: HMAC algorithm understood by PyJWT.
            ttls: Default time-to-live in seconds per purpose.
            clock: Returns the current Unix time; injectable for tests.
        """
        self._secret = secret
        self._algorithm = algorithm
        self._ttls = ttls or {SESSION_PURPOSE: 604800, EMAIL_CONFIRM_PURPOSE: 3600}
        self._clock = clock

    @classmethod
    def create(cls, config: Settings | None = None, clock: Clock = time.time) -> "TokenService":
        """Factory method to create a TokenService from settings."""
        config = config or settings
        return cls(
            secret=config.jwt_secret,
            algorithm=config.jwt_algorithm,
            ttls={
                SESSION_PURPOSE: config.session_token_ttl,
                EMAIL_CONFIRM_PURPOSE: config.confirm_token_ttl,
            },
            clock=clock,
        )

    def default_ttl(self, purpose: str) -> int:
        try:
            return self._ttls[purpose]
        except KeyError:
            raise ValueError(f"No default TTL for token purpose {purpose!r}") from None

    def issue(self, subject_id: int, purpose: str = SESSION_PURPOSE, ttl: int | None = None) -> str:
        """Issue a signed token.

        Args:
            subject_id: User ID the claims are about
            purpose: ``session`` or a single-purpose flow name
            ttl: Lifetime in seconds. Defaults to the purpose's default TTL.

        Returns:
            The encoded token
        """
        ttl = ttl if ttl is not None else self.default_ttl(purpose)
        if ttl <= 0:
            raise ValueError("Token TTL must be positive")

        issued_at = int(self._clock())
        payload = {
            "sub": str(subject_id),
            "purpose": purpose,
            "iat": issued_at,
            "exp": issued_at + ttl,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str | None, purpose: str | None = None) -> IdentityClaims | AuthError:
        """Verify a token and return its claims.

        Args:
            token: The encoded token, or None if the caller sent none
            purpose: When given, the claims must carry this purpose

        Returns:
            IdentityClaims on success, otherwise the AuthError reason
        """
        if not token:
            return AuthError.MISSING

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options=_DECODE_OPTIONS,
            )
            claims = self._claims_from(payload)
        except (jwt.InvalidTokenError, ValueError, TypeError) as e:
            logger.info("token_rejected", reason=AuthError.MALFORMED.value, error=str(e))
            return AuthError.MALFORMED

        if claims.is_expired(self._clock()):
            logger.info("token_rejected", reason=AuthError.EXPIRED.value, subject_id=claims.subject_id)
            return AuthError.EXPIRED

        if purpose is not None and claims.purpose != purpose:
            logger.info(
                "token_rejected",
                reason=AuthError.WRONG_PURPOSE.value,
                expected=purpose,
                actual=claims.purpose,
            )
            return AuthError.WRONG_PURPOSE

        return claims

    @staticmethod
    def _claims_from(payload: dict[str, Any]) -> IdentityClaims:
        purpose = payload.get("purpose", SESSION_PURPOSE)
        if not isinstance(purpose, str):
            raise TypeError("purpose claim must be a string")
        return IdentityClaims(
            subject_id=int(payload["sub"]),
            purpose=purpose,
            issued_at=int(payload["iat"]),
            expires_at=int(payload["exp"]),
        )
