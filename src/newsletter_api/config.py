import os
from dataclasses import dataclass, field
from functools import lru_cache

import redis.asyncio as redis
from dotenv import load_dotenv

load_dotenv()

# Tokens are signed with a shared secret, so only HMAC algorithms apply
JWT_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in value.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./newsletters.db")
    database_pool_size: int = int(os.getenv("DATABASE_POOL_SIZE", "10"))

    # Tokens
    jwt_secret: str = os.getenv("JWT_SECRET", "dev-secret-change-me")
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    session_token_ttl: int = int(os.getenv("SESSION_TOKEN_TTL", "604800"))  # 7 days
    confirm_token_ttl: int = int(os.getenv("CONFIRM_TOKEN_TTL", "3600"))  # 1 hour

    # Cache / rate limiting
    list_cache_ttl: int = int(os.getenv("LIST_CACHE_TTL", "60"))
    resend_cooldown_seconds: int = int(os.getenv("RESEND_COOLDOWN_SECONDS", "60"))

    # Accounts
    app_base_url: str = os.getenv("APP_BASE_URL", "http://localhost")
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "10"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "info")
    log_json: bool = os.getenv("LOG_JSON", "true").lower() == "true"

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "3000"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"
    cors_origins: tuple[str, ...] = field(
        default_factory=lambda: _split_csv(os.getenv("CORS_ORIGINS", "*"))
    )

    @property
    def is_sqlite(self) -> bool:
        """Check if the configured database is SQLite."""
        return self.database_url.startswith("sqlite")

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        for name in ("session_token_ttl", "confirm_token_ttl", "list_cache_ttl", "resend_cooldown_seconds"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name.upper()} must be a positive number of seconds")

        if not 4 <= self.bcrypt_rounds <= 20:
            raise ValueError(f"BCRYPT_ROUNDS must be between 4 and 20, got {self.bcrypt_rounds}")

        if not self.jwt_secret:
            raise ValueError("JWT_SECRET must not be empty")

        if self.jwt_algorithm not in JWT_ALGORITHMS:
            raise ValueError(f"JWT_ALGORITHM must be one of {sorted(JWT_ALGORITHMS)}, got {self.jwt_algorithm!r}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def get_redis_client(config: Settings | None = None) -> redis.Redis:
    """Create an asyncio Redis client instance."""
    config = config or settings
    return redis.from_url(
        config.redis_url,
        password=config.redis_password,
        decode_responses=False,
    )
