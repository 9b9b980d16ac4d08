"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - One AppContainer built during lifespan (or injected by tests)
    - Dependency functions retrieve it from request.app.state
    - The verified caller identity is a RequestContext dependency, passed
      explicitly into handlers; nothing is attached to the request object
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Annotated, Any, Awaitable, Callable

from fastapi import Depends, FastAPI, Header, Request

from newsletter_api.config import Settings, get_settings
from newsletter_api.db import DatabaseSessionManager
from newsletter_api.entities import SESSION_PURPOSE, AuthError, RequestContext
from newsletter_api.errors import UnauthenticatedError
from newsletter_api.handlers import AccountHandler, NewsletterHandler, TaskHandler
from newsletter_api.logging import get_logger
from newsletter_api.protocols import CacheStore, RecordStore
from newsletter_api.repositories import CacheAsideRepository, RedisCacheStore, SqlRecordStore
from newsletter_api.services import (
    AccountService,
    CooldownLimiter,
    NewsletterService,
    PasswordHasher,
    TaskService,
    TokenService,
    bearer_token,
)

logger = get_logger(__name__)


@dataclass
class AppContainer:
    """Process-wide dependencies, built once at start-up.

    Attributes:
        cache_store: Shared key-value cache client
        record_store: Shared persistent store adapter
        tokens: Identity token service
        task_handler / newsletter_handler / account_handler: HTTP handlers
        closers: Shutdown hooks, run in reverse order by ``close()``
    """

    cache_store: CacheStore
    record_store: RecordStore
    tokens: TokenService
    task_handler: TaskHandler
    newsletter_handler: NewsletterHandler
    account_handler: AccountHandler
    closers: list[Callable[[], Awaitable[Any]]] = field(default_factory=list)

    @classmethod
    def assemble(
        cls,
        config: Settings,
        cache_store: CacheStore,
        record_store: RecordStore,
        tokens: TokenService | None = None,
        hasher: PasswordHasher | None = None,
    ) -> "AppContainer":
        """Wire services and handlers on top of the two shared stores."""
        tokens = tokens or TokenService.create(config)
        cache = CacheAsideRepository(cache_store)
        account_service = AccountService(
            records=record_store,
            tokens=tokens,
            limiter=CooldownLimiter(cache_store),
            hasher=hasher or PasswordHasher(rounds=config.bcrypt_rounds),
            app_base_url=config.app_base_url,
            resend_cooldown=config.resend_cooldown_seconds,
        )
        return cls(
            cache_store=cache_store,
            record_store=record_store,
            tokens=tokens,
            task_handler=TaskHandler(TaskService(record_store, cache, config.list_cache_ttl)),
            newsletter_handler=NewsletterHandler(NewsletterService(record_store, cache, config.list_cache_ttl)),
            account_handler=AccountHandler(account_service),
        )

    async def close(self) -> None:
        """Run shutdown hooks, most recently registered first."""
        while self.closers:
            closer = self.closers.pop()
            await closer()


async def build_container(config: Settings) -> AppContainer:
    """Connect to Redis and the database and assemble the container."""
    cache_store = RedisCacheStore.create(config)

    engine_kwargs: dict[str, Any] = {}
    if not config.is_sqlite:
        engine_kwargs = {"pool_size": config.database_pool_size, "max_overflow": 10, "pool_recycle": 3600}
    db = DatabaseSessionManager(config.database_url, **engine_kwargs)
    await db.create_tables()

    container = AppContainer.assemble(config, cache_store, SqlRecordStore(db))
    container.closers.extend([cache_store.close, db.close])
    return container


def get_container(request: Request) -> AppContainer:
    """Dependency injection for the AppContainer from app.state.

    Raises:
        RuntimeError: If the container is not initialized
    """
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise RuntimeError("AppContainer not initialized. Check lifespan setup.")
    return container


ContainerDep = Annotated[AppContainer, Depends(get_container)]


def get_task_handler(container: ContainerDep) -> TaskHandler:
    return container.task_handler


def get_newsletter_handler(container: ContainerDep) -> NewsletterHandler:
    return container.newsletter_handler


def get_account_handler(container: ContainerDep) -> AccountHandler:
    return container.account_handler


async def require_session(
    container: ContainerDep,
    authorization: Annotated[str | None, Header()] = None,
) -> RequestContext:
    """Verify the bearer session token and build the request context.

    Raises:
        UnauthenticatedError: If the token is missing, invalid, expired or
            was issued for another purpose
    """
    result = container.tokens.verify(bearer_token(authorization), purpose=SESSION_PURPOSE)
    if isinstance(result, AuthError):
        raise UnauthenticatedError(reason=result)
    return RequestContext(claims=result)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Builds the AppContainer unless one was injected (tests), stores it in
    app.state and closes the shared clients on shutdown.
    """
    injected = getattr(app.state, "container", None)
    if injected is not None:
        yield
        return

    config = get_settings()
    container = await build_container(config)
    app.state.container = container

    logger.info(
        "app_started",
        cache_healthy=await container.cache_store.health_check(),
        database_healthy=await container.record_store.health_check(),
    )
    if config.jwt_secret == "dev-secret-change-me":
        logger.warning("default_jwt_secret", hint="set JWT_SECRET")

    try:
        yield
    finally:
        await container.close()
        del app.state.container
        logger.info("app_stopped")


# Type aliases for cleaner dependency injection
TaskHandlerDep = Annotated[TaskHandler, Depends(get_task_handler)]
NewsletterHandlerDep = Annotated[NewsletterHandler, Depends(get_newsletter_handler)]
AccountHandlerDep = Annotated[AccountHandler, Depends(get_account_handler)]
SessionDep = Annotated[RequestContext, Depends(require_session)]
