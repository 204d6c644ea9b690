"""
Database handle: engine, session factory and transaction scope.

A Database is constructed explicitly, opened at application start-up and
closed at shutdown. Repositories receive it at construction time.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from jobboard.config import Settings
from jobboard.exceptions import Conflict, StorageFailure

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE for unique_violation
UNIQUE_VIOLATION = "23505"

# Seconds a SQLite connection waits for the write lock
SQLITE_BUSY_TIMEOUT = 30


class Base(DeclarativeBase):
    pass


def is_unique_violation(exc: IntegrityError) -> bool:
    """Tell unique-constraint violations apart from other integrity errors."""
    orig = getattr(exc, "orig", None)
    for candidate in (orig, getattr(orig, "__cause__", None)):
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code:
            return code == UNIQUE_VIOLATION
    return "UNIQUE constraint failed" in str(orig)


def _configure_sqlite(engine) -> None:
    """
    Enable foreign keys and make every transaction take the write lock
    up front (BEGIN IMMEDIATE), so concurrent writers queue on the busy
    timeout instead of failing when they upgrade a read lock.
    """
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Let SQLAlchemy's "begin" event emit BEGIN instead of the driver
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


class Database:
    """Owns the async engine and hands out transactional sessions."""

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        pool_size: Optional[int] = None,
        max_overflow: Optional[int] = None,
    ):
        self.url = make_url(url)
        self.is_sqlite = self.url.get_backend_name() == "sqlite"

        engine_kwargs = {"echo": echo, "pool_pre_ping": True}
        if self.is_sqlite:
            engine_kwargs["connect_args"] = {"timeout": SQLITE_BUSY_TIMEOUT}
        else:
            if pool_size is not None:
                engine_kwargs["pool_size"] = pool_size
            if max_overflow is not None:
                engine_kwargs["max_overflow"] = max_overflow

        self.engine = create_async_engine(self.url, **engine_kwargs)
        if self.is_sqlite:
            _configure_sqlite(self.engine)

        self.sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url,
            echo=settings.database_echo,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )

    async def open(self) -> None:
        """Check connectivity; raises StorageFailure if the database is unreachable."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Database connectivity check failed: {e}", exc_info=True)
            raise StorageFailure("Database unavailable", detail=str(e)) from e
        logger.info(f"Database opened ({self.url.get_backend_name()})")

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("Database closed")

    async def create_all(self) -> None:
        """Create all tables (tests and local development; production uses Alembic)."""
        # Register models on Base.metadata
        import jobboard.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self) -> None:
        import jobboard.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    @asynccontextmanager
    async def transaction(
        self,
        conflict_message: str = "Record already exists",
    ) -> AsyncIterator[AsyncSession]:
        """
        Yield a session inside a single transaction.

        Commits when the block exits cleanly and rolls back on any error.
        Unique violations surface as Conflict, other database errors as
        StorageFailure; anything else propagates unchanged.
        """
        async with self.sessionmaker() as session:
            try:
                async with session.begin():
                    yield session
            except IntegrityError as e:
                if is_unique_violation(e):
                    logger.info(f"Unique constraint violated: {conflict_message}")
                    raise Conflict(conflict_message) from e
                logger.error(f"Integrity error: {e}", exc_info=True)
                raise StorageFailure("Integrity constraint violated", detail=str(e.orig)) from e
            except SQLAlchemyError as e:
                logger.error(f"Database error: {e}", exc_info=True)
                raise StorageFailure("Database operation failed", detail=str(e)) from e


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the application's Database."""
    return request.app.state.database
