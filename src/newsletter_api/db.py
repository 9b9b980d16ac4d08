"""Database session manager - async engine, session factory and error mapping.

Invariants:
    - One engine per process, created at start-up and disposed at shutdown
    - Every session rolls back on exception (no partial commits leak)
    - IntegrityError maps to DuplicateRecordError, any other database failure
      (out-of-range integer parameters included) maps to RecordStoreError
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from newsletter_api.logging import get_logger
from newsletter_api.models import Base
from newsletter_api.protocols import DuplicateRecordError, RecordStoreError

logger = get_logger(__name__)


class DatabaseSessionManager:
    """Manages async database sessions with rollback and health checks."""

    def __init__(self, database_url: str, **engine_kwargs: Any) -> None:
        self.engine = create_async_engine(database_url, pool_pre_ping=True, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide a session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.warning("db_integrity_error", error=str(e.orig))
            raise DuplicateRecordError("Integrity constraint violated") from e
        except (SQLAlchemyError, OSError, OverflowError) as e:
            await session.rollback()
            logger.error("db_error", error=str(e))
            raise RecordStoreError("Database operation failed") from e
        finally:
            await session.close()

    async def create_tables(self) -> None:
        """Create missing tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        """Check database connectivity."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except RecordStoreError:
            return False

    async def close(self) -> None:
        """Dispose of the engine and its connection pool."""
        await self.engine.dispose()
