"""Account service: registration, sign-in, profile and email confirmation.

The resend-confirmation flow is non-enumerating: an unknown email gets the
same success-shaped reply as a known one, and the cooldown is only consulted
(and armed) for emails that belong to a user.
"""

from urllib.parse import urlencode

from newsletter_api.entities import EMAIL_CONFIRM_PURPOSE, AuthError, Blocked, RequestContext
from newsletter_api.errors import ConflictError, NotFoundError, RateLimitedError, UnauthenticatedError, ValidationError
from newsletter_api.logging import get_logger
from newsletter_api.protocols import DuplicateRecordError, Record, RecordStore

from .cooldown_limiter import CooldownLimiter, cooldown_key
from .password_hasher import PasswordHasher
from .token_service import TokenService

logger = get_logger(__name__)

USERS = "users"
RESEND_ACTION = "resend"


def public_user(record: Record) -> Record:
    """Fields of a user record that may leave the service."""
    return {
        "id": record["id"],
        "name": record["name"],
        "email": record["email"],
        "avatar_url": record.get("avatar_url"),
    }


class AccountService:
    """User account operations."""

    def __init__(
        self,
        records: RecordStore,
        tokens: TokenService,
        limiter: CooldownLimiter,
        hasher: PasswordHasher,
        app_base_url: str = "http://localhost",
        resend_cooldown: int = 60,
    ) -> None:
        self._records = records
        self._tokens = tokens
        self._limiter = limiter
        self._hasher = hasher
        self._app_base_url = app_base_url.rstrip("/")
        self._resend_cooldown = resend_cooldown

    @property
    def resend_cooldown(self) -> int:
        return self._resend_cooldown

    async def register(self, name: str, email: str, password: str) -> Record:
        """Create a user with a hashed password.

        Raises:
            ConflictError: If the email is already registered
            ValidationError: If the password cannot be hashed
        """
        if await self._records.find_one(USERS, email=email) is not None:
            raise ConflictError("Email already registered")

        try:
            hashed = await self._hasher.hash(password)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        try:
            user = await self._records.create(
                USERS,
                {"name": name, "email": email, "password": hashed, "email_verified": False},
            )
        except DuplicateRecordError as e:
            # lost a race with a concurrent registration
            raise ConflictError("Email already registered") from e

        logger.info("user_registered", user_id=user["id"])
        return user

    async def sign_in(self, email: str, password: str) -> tuple[str, Record]:
        """Check credentials and issue a session token.

        Returns:
            (token, user record)

        Raises:
            UnauthenticatedError: If the email is unknown or the password is wrong
        """
        user = await self._records.find_one(USERS, email=email)
        if user is None or not await self._hasher.verify(password, user["password"]):
            logger.info("sign_in_failed")
            raise UnauthenticatedError("Invalid email or password")

        token = self._tokens.issue(user["id"])
        logger.info("sign_in_succeeded", user_id=user["id"])
        return token, user

    async def profile(self, context: RequestContext) -> Record:
        user = await self._records.find_by_key(USERS, context.subject_id)
        if user is None:
            raise NotFoundError("User")
        return user

    async def resend_confirmation(self, email: str) -> str | None:
        """Issue a new email-confirmation link, at most once per cooldown window.

        The link is returned to the caller; no email is sent.

        Returns:
            The verification URL, or None when no user has this email

        Raises:
            RateLimitedError: If a link was issued for this email within the window
        """
        user = await self._records.find_one(USERS, email=email)
        if user is None:
            return None

        decision = await self._limiter.check_and_arm(cooldown_key(RESEND_ACTION, email), self._resend_cooldown)
        if isinstance(decision, Blocked):
            raise RateLimitedError(decision.remaining_seconds)

        token = self._tokens.issue(user["id"], purpose=EMAIL_CONFIRM_PURPOSE)
        logger.info("confirmation_link_issued", user_id=user["id"])
        return f"{self._app_base_url}/verify-email?{urlencode({'token': token})}"

    async def verify_email(self, token: str | None) -> Record:
        """Mark the email of the token's subject as verified.

        Raises:
            UnauthenticatedError: If the token is missing, invalid, expired or
                not an email-confirmation token
            NotFoundError: If the user no longer exists
        """
        claims = self._tokens.verify(token, purpose=EMAIL_CONFIRM_PURPOSE)
        if isinstance(claims, AuthError):
            raise UnauthenticatedError(reason=claims)

        user = await self._records.update(USERS, claims.subject_id, {"email_verified": True})
        if user is None:
            raise NotFoundError("User")
        logger.info("email_verified", user_id=user["id"])
        return user
