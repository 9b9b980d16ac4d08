from typing import Annotated, Any

from fastapi import FastAPI, Path, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from newsletter_api.api.dependencies import (
    AccountHandlerDep,
    AppContainer,
    ContainerDep,
    NewsletterHandlerDep,
    SessionDep,
    TaskHandlerDep,
    lifespan,
)
from newsletter_api.config import Settings, get_settings
from newsletter_api.dto import (
    CreateNewsletterRequest,
    CreateTaskRequest,
    ErrorResponse,
    HealthCheckResponse,
    NewsletterItem,
    NewsletterListResponse,
    RegisteredUserResponse,
    RegisterRequest,
    ResendConfirmationRequest,
    ResendConfirmationResponse,
    SignInRequest,
    SignInResponse,
    TaskItem,
    TaskListResponse,
    UpdateNewsletterRequest,
    UpdateTaskRequest,
    UserResponse,
    VerifyEmailResponse,
)
from newsletter_api.errors import AppError, InternalError, RateLimitedError, ValidationError
from newsletter_api.logging import bind_request_id, clear_request_context, configure_logging, get_logger
from newsletter_api.protocols import CacheUnavailableError, RecordStoreError

logger = get_logger(__name__)

API_TITLE = "Newsletter API"
API_VERSION = "0.1.0"

# Primary keys are signed 64-bit integers in every supported database
RecordId = Annotated[int, Path(ge=1, le=2**63 - 1)]

_ERRORS: dict[int | str, dict[str, Any]] = {
    code: {"model": ErrorResponse} for code in (400, 401, 403, 404, 409, 429, 500)
}


def _error_response(error: AppError) -> JSONResponse:
    headers = None
    if isinstance(error, RateLimitedError):
        headers = {"Retry-After": str(error.retry_after)}
    return JSONResponse(status_code=error.status_code, content=error.to_response(), headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Map the error taxonomy onto HTTP responses."""

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("request_failed", path=request.url.path, code=exc.code, error=exc.message)
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        fields = sorted({".".join(str(part) for part in err["loc"] if part != "body") for err in exc.errors()})
        return _error_response(ValidationError("Missing or invalid fields", {"fields": fields}))

    @app.exception_handler(RecordStoreError)
    async def handle_record_store_error(request: Request, exc: RecordStoreError) -> JSONResponse:
        logger.error("record_store_failed", path=request.url.path, error=str(exc))
        return _error_response(InternalError("Persistent store unavailable"))

    @app.exception_handler(CacheUnavailableError)
    async def handle_cache_error(request: Request, exc: CacheUnavailableError) -> JSONResponse:
        logger.error("cache_store_failed", path=request.url.path, error=str(exc))
        return _error_response(InternalError("Cache store unavailable"))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_error", path=request.url.path)
        return _error_response(InternalError())


def register_routes(app: FastAPI) -> None:
    """Attach all API routes."""

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": API_TITLE,
            "version": API_VERSION,
            "endpoints": {
                "tasks": "/tasks",
                "newsletters": "/newsletters",
                "auth": ["/register", "/signin", "/profile", "/auth/resend-confirmation", "/auth/verify-email"],
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(container: ContainerDep) -> JSONResponse:
        """Health check endpoint."""
        cache_healthy = await container.cache_store.health_check()
        database_healthy = await container.record_store.health_check()
        healthy = cache_healthy and database_healthy
        body = HealthCheckResponse(
            status="healthy" if healthy else "unhealthy",
            cache_healthy=cache_healthy,
            database_healthy=database_healthy,
        )
        return JSONResponse(
            status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
            content=body.model_dump(),
        )

    # Tasks
    @app.get("/tasks", response_model=TaskListResponse)
    async def list_tasks(handler: TaskHandlerDep) -> TaskListResponse:
        return await handler.list_tasks()

    @app.get("/tasks/{task_id}", response_model=TaskItem, responses=_ERRORS)
    async def get_task(task_id: RecordId, handler: TaskHandlerDep) -> TaskItem:
        return await handler.get_task(task_id)

    @app.post("/tasks", response_model=TaskItem, status_code=status.HTTP_201_CREATED, responses=_ERRORS)
    async def create_task(request: CreateTaskRequest, handler: TaskHandlerDep) -> TaskItem:
        return await handler.create_task(request)

    @app.put("/tasks/{task_id}", response_model=TaskItem, responses=_ERRORS)
    async def update_task(task_id: RecordId, request: UpdateTaskRequest, handler: TaskHandlerDep) -> TaskItem:
        return await handler.update_task(task_id, request)

    @app.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT, responses=_ERRORS)
    async def delete_task(task_id: RecordId, handler: TaskHandlerDep) -> Response:
        await handler.delete_task(task_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # Newsletters
    @app.get("/newsletters", response_model=NewsletterListResponse)
    async def list_newsletters(handler: NewsletterHandlerDep) -> NewsletterListResponse:
        return await handler.list_newsletters()

    @app.get("/newsletters/{newsletter_id}", response_model=NewsletterItem, responses=_ERRORS)
    async def get_newsletter(newsletter_id: RecordId, handler: NewsletterHandlerDep) -> NewsletterItem:
        return await handler.get_newsletter(newsletter_id)

    @app.post(
        "/newsletters",
        response_model=NewsletterItem,
        status_code=status.HTTP_201_CREATED,
        responses=_ERRORS,
    )
    async def create_newsletter(
        request: CreateNewsletterRequest,
        context: SessionDep,
        handler: NewsletterHandlerDep,
    ) -> NewsletterItem:
        return await handler.create_newsletter(context, request)

    @app.put("/newsletters/{newsletter_id}", response_model=NewsletterItem, responses=_ERRORS)
    async def update_newsletter(
        newsletter_id: RecordId,
        request: UpdateNewsletterRequest,
        context: SessionDep,
        handler: NewsletterHandlerDep,
    ) -> NewsletterItem:
        return await handler.update_newsletter(context, newsletter_id, request)

    @app.delete("/newsletters/{newsletter_id}", status_code=status.HTTP_204_NO_CONTENT, responses=_ERRORS)
    async def delete_newsletter(newsletter_id: RecordId, context: SessionDep, handler: NewsletterHandlerDep) -> Response:
        await handler.delete_newsletter(context, newsletter_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # Accounts
    @app.post(
        "/register",
        response_model=RegisteredUserResponse,
        status_code=status.HTTP_201_CREATED,
        responses=_ERRORS,
    )
    async def register(request: RegisterRequest, handler: AccountHandlerDep) -> RegisteredUserResponse:
        return await handler.register(request)

    @app.post("/signin", response_model=SignInResponse, responses=_ERRORS)
    async def sign_in(request: SignInRequest, handler: AccountHandlerDep) -> SignInResponse:
        return await handler.sign_in(request)

    @app.get("/profile", response_model=UserResponse, responses=_ERRORS)
    async def profile(context: SessionDep, handler: AccountHandlerDep) -> UserResponse:
        return await handler.profile(context)

    @app.post(
        "/auth/resend-confirmation",
        response_model=ResendConfirmationResponse,
        response_model_exclude_none=True,
        responses=_ERRORS,
    )
    async def resend_confirmation(
        request: ResendConfirmationRequest,
        handler: AccountHandlerDep,
    ) -> ResendConfirmationResponse:
        return await handler.resend_confirmation(request)

    @app.get("/auth/verify-email", response_model=VerifyEmailResponse, responses=_ERRORS)
    async def verify_email(handler: AccountHandlerDep, token: str | None = None) -> VerifyEmailResponse:
        return await handler.verify_email(token)


def create_app(container: AppContainer | None = None, config: Settings | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        container: Pre-built dependencies. When given, lifespan does not
            connect to Redis or the database (used by tests).
        config: Settings for logging and CORS. Defaults to global settings.
    """
    config = config or get_settings()
    configure_logging(config.log_level, config.log_json)

    app = FastAPI(
        title=API_TITLE,
        description="Newsletter and task API with a Redis cache-aside layer",
        version=API_VERSION,
        lifespan=lifespan,
    )
    if container is not None:
        app.state.container = container

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=list(config.cors_origins),
        allow_credentials="*" not in config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = bind_request_id(request.headers.get("x-request-id"))
        try:
            try:
                response = await call_next(request)
            except Exception:
                # logged here while request_id is still bound
                logger.exception("unhandled_error", path=request.url.path, request_id=request_id)
                response = _error_response(InternalError())
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_request_context()

    register_exception_handlers(app)
    register_routes(app)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "newsletter_api.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
