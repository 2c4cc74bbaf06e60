"""
Async Database Manager for the lead-capture backend with SQLAlchemy
- Automatic database creation if missing (PostgreSQL)
- Idempotent table initialization, safe to run on every boot
- Lazy schema setup when the database was down at startup
- Classification of driver errors into actionable diagnostics
"""
import logging
from importlib import import_module
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Iterator, Optional, Union

from fastapi import Request
from sqlalchemy import inspect, text
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
    AsyncEngine
)

from app.constants.constants import DatabaseErrorType
from app.core.config import Settings
from app.models.base import Base

logger = logging.getLogger(__name__)

DB_MODELS = [
    "app.models.formsubmission",
    "app.models.adminuser",
    "app.models.seometadata",
    "app.models.emailtemplate",
]

# SQLSTATE codes (PostgreSQL) and server error numbers (MySQL)
_ERROR_CODES = {
    "3D000": DatabaseErrorType.database_not_found,
    "28P01": DatabaseErrorType.access_denied,
    "28000": DatabaseErrorType.access_denied,
    "42P01": DatabaseErrorType.table_not_found,
    "08001": DatabaseErrorType.connection_refused,
    "08006": DatabaseErrorType.connection_refused,
    1049: DatabaseErrorType.database_not_found,
    1045: DatabaseErrorType.access_denied,
    1146: DatabaseErrorType.table_not_found,
    2003: DatabaseErrorType.connection_refused,
}

_ERROR_MESSAGES = {
    DatabaseErrorType.connection_refused: "Database connection refused. Check if the database server is running.",
    DatabaseErrorType.access_denied: "Database access denied. Check DB_USER and DB_PASSWORD in .env file.",
    DatabaseErrorType.database_not_found: "Database does not exist. Check DB_NAME in .env file.",
    DatabaseErrorType.table_not_found: "Table does not exist. Run database initialization.",
}


class PersistenceError(Exception):
    """A database failure with a discriminator callers can report on."""

    def __init__(self, error_type: DatabaseErrorType, message: str, code: Optional[Union[str, int]] = None):
        super().__init__(message)
        self.error_type = error_type
        self.message = message
        self.code = code

    def to_dict(self) -> dict:
        return {
            "type": self.error_type.value,
            "message": self.message,
            "code": self.code,
        }


def _iter_error_chain(exc: BaseException) -> Iterator[BaseException]:
    seen = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        yield exc
        exc = getattr(exc, "orig", None) or exc.__cause__ or exc.__context__


def _error_code(exc: BaseException) -> Optional[Union[str, int]]:
    code = getattr(exc, "sqlstate", None) or getattr(exc, "pgcode", None)
    if code:
        return code
    if exc.args and isinstance(exc.args[0], int):
        return exc.args[0]
    return None


def classify_db_error(exc: BaseException) -> PersistenceError:
    """Map a driver/SQLAlchemy exception to a PersistenceError.

    Walks the wrapped exception chain so the SQLAlchemy wrapper, the DBAPI
    adapter and the raw driver error are all considered. Credentials never
    appear in the resulting message.
    """
    if isinstance(exc, PersistenceError):
        return exc

    first_code = None
    for error in _iter_error_chain(exc):
        if isinstance(error, ConnectionRefusedError):
            return PersistenceError(
                DatabaseErrorType.connection_refused,
                _ERROR_MESSAGES[DatabaseErrorType.connection_refused],
                "ECONNREFUSED",
            )
        code = _error_code(error)
        if first_code is None:
            first_code = code
        if code in _ERROR_CODES:
            error_type = _ERROR_CODES[code]
            return PersistenceError(error_type, _ERROR_MESSAGES[error_type], code)
        if "no such table" in str(error):
            return PersistenceError(
                DatabaseErrorType.table_not_found,
                _ERROR_MESSAGES[DatabaseErrorType.table_not_found],
                first_code,
            )

    return PersistenceError(
        DatabaseErrorType.database_error,
        str(exc) or "Unknown database error",
        first_code or type(exc).__name__,
    )


class DatabaseSessionManager:
    """Manages async database sessions with auto-creation and setup."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker] = None
        self.schema_ready = False

    def _create_engine(self) -> AsyncEngine:
        url = make_url(self.settings.database_url)
        engine_kwargs = {
            "echo": self.settings.DB_ECHO,
            "pool_pre_ping": True,
        }
        if url.get_backend_name() != "sqlite":
            engine_kwargs.update(
                pool_size=self.settings.DB_POOL_SIZE,
                max_overflow=0,
                pool_timeout=30,
                pool_recycle=300,
            )
        return create_async_engine(url, **engine_kwargs)

    def _ensure_engine(self):
        if self.engine is None:
            self.engine = self._create_engine()
            self.session_factory = async_sessionmaker(
                bind=self.engine,
                expire_on_commit=False,
                autoflush=False
            )

    async def init(self) -> bool:
        """Connect and create missing tables. Never raises; returns whether the schema is ready."""
        self._ensure_engine()
        try:
            await self.ensure_schema()
            return True
        except Exception as e:
            error = classify_db_error(e)
            if error.error_type == DatabaseErrorType.database_not_found and await self._create_database():
                try:
                    await self.ensure_schema()
                    return True
                except Exception as retry_error:
                    error = classify_db_error(retry_error)
            logger.error(f"❌ Database initialization failed ({error.error_type.value}): {error.message}")
            return False

    async def ensure_schema(self):
        """Create tables if absent. Guarded by IF NOT EXISTS semantics, so concurrent calls are harmless."""
        if self.schema_ready:
            return
        self._ensure_engine()
        async with self.engine.begin() as conn:
            await self._setup_database(conn)
        self.schema_ready = True

    async def _setup_database(self, conn):
        """Initialize database schema"""
        for model in DB_MODELS:
            import_module(model)

        await conn.run_sync(Base.metadata.create_all)
        created_tables = await conn.run_sync(
            lambda sync_conn: inspect(sync_conn).get_table_names()
        )
        logger.info(f"✅ Tables ready: {created_tables}")

    async def _create_database(self) -> bool:
        """Create the database if it does not exist (PostgreSQL only)"""
        db_url = make_url(self.settings.database_url)
        if db_url.get_backend_name() != "postgresql":
            return False

        db_name = db_url.database
        default_url = db_url.set(database="postgres")
        engine = create_async_engine(default_url, isolation_level="AUTOCOMMIT")
        try:
            async with engine.connect() as conn:
                quoted_name = conn.dialect.identifier_preparer.quote(db_name)
                await conn.execute(text(f"CREATE DATABASE {quoted_name}"))
            logger.info(f"✅ Database '{db_name}' created successfully.")
            return True
        except Exception as e:
            logger.error(f"❌ Failed to create database: {classify_db_error(e).message}")
            return False
        finally:
            await engine.dispose()

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Context manager for safe session handling"""
        await self.ensure_schema()
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def close(self):
        """Cleanup connection pool"""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None
            self.schema_ready = False


async def aget_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency for database sessions
    Usage:
    @router.get("/")
    async def endpoint(db: AsyncSession = Depends(aget_db)):
        ...
    """
    async with request.app.state.session_manager.get_session() as session:
        yield session
