"""Database engine and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import getLogger

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlmodel import SQLModel

from blogcms.configs import engine_kwargs, file_logger, settings
from blogcms.errors.database import DatabaseInitializationError

logger = file_logger(getLogger(__name__))


def _configure_engine_events(engine: AsyncEngine) -> None:
    """Configure connection pool events for monitoring."""

    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(dbapi_connection: object, connection_record: object) -> None:
        logger.debug("New database connection established")

    @event.listens_for(engine.sync_engine, "checkout")
    def on_checkout(
        dbapi_connection: object,
        connection_record: object,
        connection_proxy: object,
    ) -> None:
        logger.debug("Connection checked out from pool")

    @event.listens_for(engine.sync_engine, "checkin")
    def on_checkin(dbapi_connection: object, connection_record: object) -> None:
        logger.debug("Connection returned to pool")


def _enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores foreign keys unless asked per connection."""

    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(dbapi_connection: object, connection_record: object) -> None:
        cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


class Database:
    """
    Relational storage client.

    The engine and its connection pool are created on first use and then
    shared by every repository for the lifetime of the process.

    Attributes:
        url: Async SQLAlchemy database URL
    """

    def __init__(self, url: str | None = None) -> None:
        self.url = url or settings.DATABASE_URL
        self._engine: AsyncEngine | None = None
        self._session_maker: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        """Get the engine, creating it on first access."""
        if self._engine is None:
            self._engine = create_async_engine(self.url, **engine_kwargs(self.url))
            if self._engine.dialect.name == "sqlite":
                _enable_sqlite_foreign_keys(self._engine)
            if settings.DEBUG:
                _configure_engine_events(self._engine)
            logger.info(f"Database engine created for dialect {self._engine.dialect.name}")
        return self._engine

    @property
    def session_maker(self) -> async_sessionmaker[AsyncSession]:
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autoflush=False,
            )
        return self._session_maker

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession]:
        """
        Open a session for read-only work.

        Yields:
            AsyncSession: Database session, closed on exit
        """
        async with self.session_maker() as session:
            yield session

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession]:
        """
        Context manager for explicit transaction management.

        Every statement issued through the yielded session commits together
        on successful exit or is rolled back if anything raises.

        Yields:
            AsyncSession: Database session within a transaction

        Example:
            ```python
            async with database.transaction() as session:
                session.add(PostDB(...))
                # Commits on successful exit, rolls back on exception
            ```
        """
        async with self.session_maker() as session:
            try:
                async with session.begin():
                    yield session
            except Exception:
                logger.exception("Transaction rolled back")
                raise

    async def init_db(self) -> None:
        """
        Create all tables defined in SQLModel models.

        Note:
            This is a simple initialization for development and tests.
            For production, use the Alembic migrations.

        Raises:
            DatabaseInitializationError: If the schema cannot be created
        """
        # Import all models to ensure they are registered
        import blogcms.models  # noqa: F401, PLC0415

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)
        except SQLAlchemyError as e:
            logger.exception("Database initialization failed")
            raise DatabaseInitializationError from e
        logger.info("Database initialized successfully!")

    async def ping(self) -> bool:
        """Check that a pooled connection can run a trivial query."""
        try:
            async with self.session() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError:
            logger.exception("Database ping failed")
            return False
        return True

    async def dispose(self) -> None:
        """Close all pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_maker = None
            logger.info("Database connections closed")
