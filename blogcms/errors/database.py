from logging import getLogger
from typing import Any

from pymongo.errors import PyMongoError
from sqlalchemy.exc import DataError, DBAPIError, IntegrityError
from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from blogcms.configs import file_logger
from blogcms.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))

# PostgreSQL SQLSTATE codes
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"
NOT_NULL_VIOLATION = "23502"
CHECK_VIOLATION = "23514"
INTEGRITY_VIOLATION = "23000"
DATA_EXCEPTION = "22000"


class DatabaseError(BaseAppError):
    """Base exception for database errors."""

    def __init__(
        self,
        detail: str = "Database Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail, status_code)


class DatabaseConnectionError(DatabaseError):
    """Exception raised when database connection fails."""

    def __init__(
        self,
        detail: str = "Failed to connect to the database",
    ) -> None:
        super().__init__(detail, HTTP_503_SERVICE_UNAVAILABLE)


class DatabaseInitializationError(DatabaseError):
    """Exception raised when database initialization fails."""

    def __init__(
        self,
        detail: str = "Failed to initialize database",
    ) -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)


class RecordNotFoundError(DatabaseError):
    """Exception raised when a referenced record does not exist."""

    def __init__(
        self,
        detail: str = "Record not found",
    ) -> None:
        super().__init__(detail, HTTP_404_NOT_FOUND)


class RepositoryError(DatabaseError):
    """
    Known database error raised by the storage layer.

    Carries the driver error code and any extra metadata so callers can
    react to constraint violations without parsing messages.
    """

    def __init__(
        self,
        detail: str = "Database request failed",
        code: str | None = None,
        meta: dict[str, Any] | None = None,
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail, status_code)
        self.code = code
        self.meta = meta or {}


class DuplicateEntryError(RepositoryError):
    """Exception raised when a unique constraint is violated."""

    def __init__(
        self,
        detail: str = "A record with this value already exists",
        code: str | None = UNIQUE_VIOLATION,
        meta: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail, code, meta, HTTP_409_CONFLICT)


class ForeignKeyViolationError(RepositoryError):
    """Exception raised when a referenced row does not exist."""

    def __init__(
        self,
        detail: str = "Referenced record does not exist",
        code: str | None = FOREIGN_KEY_VIOLATION,
        meta: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(detail, code, meta, HTTP_409_CONFLICT)


class DocumentStoreError(DatabaseError):
    """Exception raised when a document store operation fails."""

    def __init__(
        self,
        detail: str = "Document store request failed",
        code: int | None = None,
    ) -> None:
        super().__init__(detail, HTTP_500_INTERNAL_SERVER_ERROR)
        self.code = code


def _error_code(error: DBAPIError, message: str) -> str:
    """Extract the SQLSTATE code, falling back to message inspection."""
    if sqlstate := getattr(error.orig, "sqlstate", None) or getattr(error.orig, "pgcode", None):
        return str(sqlstate)

    lowered = message.lower()
    if "unique" in lowered or "duplicate" in lowered:
        return UNIQUE_VIOLATION
    if "foreign key" in lowered:
        return FOREIGN_KEY_VIOLATION
    if "not null" in lowered:
        return NOT_NULL_VIOLATION
    if "check constraint" in lowered:
        return CHECK_VIOLATION
    if isinstance(error, DataError):
        return DATA_EXCEPTION
    return INTEGRITY_VIOLATION


def to_repository_error(error: IntegrityError | DataError) -> RepositoryError:
    """
    Wrap a known SQLAlchemy error into the matching repository error.

    Args:
        error: Integrity or data error raised by the driver

    Returns:
        RepositoryError: Error carrying the code, message and statement metadata
    """
    message = str(error.orig) if error.orig else str(error)
    code = _error_code(error, message)
    meta: dict[str, Any] = {"statement": error.statement}
    if constraint := getattr(error.orig, "constraint_name", None):
        meta["constraint"] = constraint

    if code == UNIQUE_VIOLATION:
        return DuplicateEntryError(detail=message, meta=meta)
    if code == FOREIGN_KEY_VIOLATION:
        return ForeignKeyViolationError(detail=message, meta=meta)
    return RepositoryError(detail=f"Database integrity error: {message}", code=code, meta=meta)


def to_document_store_error(error: PyMongoError) -> DocumentStoreError:
    """Wrap a PyMongo error, keeping its server error code when present."""
    return DocumentStoreError(detail=str(error), code=getattr(error, "code", None))


database_exception_handler = create_exception_handler(logger)
