"""Service layer: business logic and orchestration.

Services depend on protocols and repositories, never on HTTP concerns.
"""

from .account_service import AccountService, public_user
from .collection_service import CollectionService, NewsletterService, TaskService
from .cooldown_limiter import CooldownLimiter, cooldown_key
from .password_hasher import PasswordHasher
from .token_service import TokenService, bearer_token

__all__ = [
    "AccountService",
    "CollectionService",
    "CooldownLimiter",
    "NewsletterService",
    "PasswordHasher",
    "TaskService",
    "TokenService",
    "bearer_token",
    "cooldown_key",
    "public_user",
]
