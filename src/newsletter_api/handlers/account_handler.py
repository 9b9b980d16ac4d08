"""HTTP handlers for accounts and authentication."""

from newsletter_api.dto import (
    RegisteredUserResponse,
    RegisterRequest,
    ResendConfirmationRequest,
    ResendConfirmationResponse,
    SignInRequest,
    SignInResponse,
    UserResponse,
    VerifyEmailResponse,
)
from newsletter_api.entities import RequestContext
from newsletter_api.services import AccountService, public_user

# Same reply whether or not the email belongs to a user
UNKNOWN_EMAIL_MESSAGE = "If the email exists, we will send instructions."
RESENT_MESSAGE = "Confirmation email resent"


class AccountHandler:
    """HTTP handlers for registration, sign-in, profile and email confirmation."""

    def __init__(self, account_service: AccountService) -> None:
        self._accounts = account_service

    async def register(self, request: RegisterRequest) -> RegisteredUserResponse:
        user = await self._accounts.register(request.name, request.email, request.password)
        return RegisteredUserResponse.model_validate(public_user(user))

    async def sign_in(self, request: SignInRequest) -> SignInResponse:
        token, user = await self._accounts.sign_in(request.email, request.password)
        return SignInResponse(token=token, user=UserResponse.model_validate(public_user(user)))

    async def profile(self, context: RequestContext) -> UserResponse:
        user = await self._accounts.profile(context)
        return UserResponse.model_validate(public_user(user))

    async def resend_confirmation(self, request: ResendConfirmationRequest) -> ResendConfirmationResponse:
        """Handle POST /auth/resend-confirmation.

        Raises:
            RateLimitedError: If the cooldown for this email is active
        """
        verify_url = await self._accounts.resend_confirmation(request.email)
        if verify_url is None:
            return ResendConfirmationResponse(message=UNKNOWN_EMAIL_MESSAGE)
        return ResendConfirmationResponse(
            message=RESENT_MESSAGE,
            verify_url=verify_url,
            cooldown=self._accounts.resend_cooldown,
        )

    async def verify_email(self, token: str | None) -> VerifyEmailResponse:
        user = await self._accounts.verify_email(token)
        return VerifyEmailResponse(message="Email verified", id=user["id"], email=user["email"])
