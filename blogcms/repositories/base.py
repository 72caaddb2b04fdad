"""Base repository for database operations."""

from asyncio import gather
from collections.abc import AsyncGenerator, Mapping, Sequence
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Column, Select, delete, func, inspect, select
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import InstrumentedAttribute
from sqlalchemy.sql.base import ExecutableOption
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import SQLModel

from blogcms.db import Database
from blogcms.errors.database import to_repository_error
from blogcms.models.base import SoftDeleteModel, TimestampModel
from blogcms.schemas.pagination import Page, PageMeta, PageParams
from blogcms.utils.helpers import utcnow

type FilterValue = str | int | float | bool | UUID | datetime | None
type Condition = ColumnElement[bool]
type Ordering = ColumnElement[Any] | InstrumentedAttribute[Any]


class BaseRepository[ModelT: SQLModel]:
    """
    Base repository implementing common CRUD operations.

    This class provides a generic implementation of database operations
    that can be extended by specific entity repositories. Each operation
    opens its own session from the shared pool; writes run inside one
    transaction. Known constraint errors are re-raised as
    ``RepositoryError`` subclasses carrying the driver error code, anything
    else propagates unchanged.

    Soft-deleted rows (models with ``deleted_at``) are hidden from reads and
    counts unless ``include_deleted`` is passed.

    Attributes:
        model: The SQLModel database model type.
    """

    model: type[ModelT]

    def __init__(self, database: Database) -> None:
        """
        Initialize repository with the shared database client.

        Args:
            database: Relational storage client
        """
        self.database = database

    @property
    def id_column(self) -> Column[Any]:
        return inspect(self.model).primary_key[0]

    @property
    def soft_deletes(self) -> bool:
        return issubclass(self.model, SoftDeleteModel)

    @asynccontextmanager
    async def _read(self) -> AsyncGenerator[AsyncSession]:
        try:
            async with self.database.session() as session:
                yield session
        except (IntegrityError, DataError) as e:
            raise to_repository_error(e) from e

    @asynccontextmanager
    async def _write(self) -> AsyncGenerator[AsyncSession]:
        """Run the block in one transaction, translating known errors after rollback."""
        try:
            async with self.database.transaction() as session:
                yield session
        except (IntegrityError, DataError) as e:
            raise to_repository_error(e) from e

    def _visible(self, include_deleted: bool = False) -> list[Condition]:
        if include_deleted or not self.soft_deletes:
            return []
        # pyrefly: ignore [missing-attribute]
        return [self.model.deleted_at.is_(None)]

    async def get_by_id(
        self,
        record_id: UUID,
        *,
        include_deleted: bool = False,
        options: Sequence[ExecutableOption] = (),
    ) -> ModelT | None:
        """
        Get a record by its ID.

        Args:
            record_id: Record UUID
            include_deleted: Also return soft-deleted records
            options: Loader options such as ``selectinload``

        Returns:
            ModelT | None: Record if found, None otherwise
        """
        statement = (
            select(self.model)
            .where(self.id_column == record_id, *self._visible(include_deleted))
            .options(*options)
        )
        async with self._read() as session:
            result = await session.execute(statement)
            return result.scalar_one_or_none()

    async def get_by_field(
        self,
        field: InstrumentedAttribute[Any],
        value: FilterValue,
        *,
        include_deleted: bool = False,
    ) -> ModelT | None:
        """
        Get a record by a specific column value.

        Args:
            field: Mapped column to match, e.g. ``PostDB.slug``
            value: Value to search for
            include_deleted: Also return soft-deleted records

        Returns:
            ModelT | None: Record if found, None otherwise
        """
        statement = select(self.model).where(field == value, *self._visible(include_deleted))
        async with self._read() as session:
            result = await session.execute(statement)
            return result.scalars().first()

    async def find_many(
        self,
        where: Sequence[Condition] = (),
        *,
        skip: int = 0,
        limit: int | None = None,
        order_by: Sequence[Ordering] = (),
        options: Sequence[ExecutableOption] = (),
        include_deleted: bool = False,
    ) -> list[ModelT]:
        """
        Get records matching all conditions.

        Args:
            where: Conditions combined with AND
            skip: Number of records to skip
            limit: Maximum number of records to return
            order_by: Ordering clauses
            options: Loader options
            include_deleted: Also return soft-deleted records

        Returns:
            list[ModelT]: Matching records
        """
        statement = (
            select(self.model)
            .where(*where, *self._visible(include_deleted))
            .order_by(*order_by)
            .offset(skip)
            .limit(limit)
            .options(*options)
        )
        async with self._read() as session:
            result = await session.execute(statement)
            return list(result.scalars().all())

    async def count(
        self,
        where: Sequence[Condition] = (),
        *,
        include_deleted: bool = False,
    ) -> int:
        """
        Count records matching all conditions.

        Returns:
            int: Number of matching records
        """
        statement = (
            select(func.count())
            .select_from(self.model)
            .where(*where, *self._visible(include_deleted))
        )
        async with self._read() as session:
            result = await session.execute(statement)
            count = result.scalar()
            return count if count is not None else 0

    async def exists(self, record_id: UUID, *, include_deleted: bool = False) -> bool:
        """Check if a record exists without loading it."""
        statement = (
            select(1)
            .select_from(self.model)
            .where(self.id_column == record_id, *self._visible(include_deleted))
            .limit(1)
        )
        async with self._read() as session:
            result = await session.execute(statement)
            return result.scalar_one_or_none() is not None

    async def paginate(
        self,
        params: PageParams,
        where: Sequence[Condition] = (),
        *,
        order_by: Sequence[Ordering] = (),
        options: Sequence[ExecutableOption] = (),
        include_deleted: bool = False,
    ) -> Page[ModelT]:
        """
        Get one page of records plus the total count.

        The count and the page query are independent and run concurrently,
        each on its own pooled connection.

        Args:
            params: Page number (1-indexed) and page size
            where: Conditions combined with AND
            order_by: Ordering clauses
            options: Loader options
            include_deleted: Also include soft-deleted records

        Returns:
            Page[ModelT]: Records of the requested page and pagination metadata
        """
        total, data = await gather(
            self.count(where, include_deleted=include_deleted),
            self.find_many(
                where,
                skip=params.offset,
                limit=params.page_size,
                order_by=order_by,
                options=options,
                include_deleted=include_deleted,
            ),
        )
        return Page(data=data, meta=PageMeta.build(total, params))

    async def create(self, data: Mapping[str, Any]) -> ModelT:
        """
        Create a new record in the database.

        Args:
            data: Column values

        Returns:
            ModelT: Created database model

        Raises:
            DuplicateEntryError: If a unique constraint is violated
            RepositoryError: For other integrity errors
        """
        record = self.model.model_validate(dict(data))
        async with self._write() as session:
            session.add(record)
            await session.flush()
            await session.refresh(record)
            return record

    async def update(self, record_id: UUID, data: Mapping[str, Any]) -> ModelT | None:
        """
        Update a record.

        Args:
            record_id: Record UUID
            data: Column values to assign

        Returns:
            ModelT | None: Updated record if found, None otherwise
        """
        async with self._write() as session:
            record = await self._get_for_update(session, record_id)
            if record is None:
                return None

            for key, value in data.items():
                setattr(record, key, value)
            if isinstance(record, TimestampModel):
                record.updated_at = utcnow()

            await session.flush()
            await session.refresh(record)
            return record

    async def soft_delete(self, record_id: UUID) -> bool:
        """
        Mark a record as deleted by stamping ``deleted_at``.

        Returns:
            bool: True if the record was deleted, False if missing or already deleted
        """
        if not self.soft_deletes:
            mssg = f"{self.model.__name__} does not support soft delete"
            raise TypeError(mssg)

        async with self._write() as session:
            record = await self._get_for_update(session, record_id)
            if record is None:
                return False
            # pyrefly: ignore [missing-attribute]
            record.deleted_at = utcnow()
            await session.flush()
            return True

    async def hard_delete(self, record_id: UUID) -> bool:
        """
        Delete a record row, soft-deleted or not.

        Runs as a single DELETE statement so no relationship is loaded.

        Returns:
            bool: True if record was deleted, False if not found
        """
        async with self._write() as session:
            result = await session.execute(delete(self.model).where(self.id_column == record_id))
            # pyrefly: ignore [missing-attribute]
            return result.rowcount == 1

    async def _get_for_update(
        self,
        session: AsyncSession,
        record_id: UUID,
        *,
        include_deleted: bool = False,
        options: Sequence[ExecutableOption] = (),
    ) -> ModelT | None:
        """
        Load and row-lock a record inside an open transaction so it can be modified.

        Concurrent writers of the same row wait until this transaction ends
        and then see its committed state.
        """
        result = await session.execute(
            self._locked_select(record_id, include_deleted=include_deleted, options=options),
        )
        return result.scalar_one_or_none()

    def _locked_select(
        self,
        record_id: UUID,
        *,
        include_deleted: bool = False,
        options: Sequence[ExecutableOption] = (),
    ) -> Select[tuple[ModelT]]:
        # SQLite has no row locks and renders no FOR UPDATE clause
        return (
            select(self.model)
            .where(self.id_column == record_id, *self._visible(include_deleted))
            .options(*options)
            .with_for_update()
        )
