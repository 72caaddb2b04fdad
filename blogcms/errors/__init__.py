from blogcms.errors.base import BaseAppError, create_exception_handler
from blogcms.errors.database import (
    DatabaseConnectionError,
    DatabaseError,
    DatabaseInitializationError,
    DocumentStoreError,
    DuplicateEntryError,
    ForeignKeyViolationError,
    RecordNotFoundError,
    RepositoryError,
    database_exception_handler,
    to_document_store_error,
    to_repository_error,
)

__all__ = [
    "BaseAppError",
    "DatabaseConnectionError",
    "DatabaseError",
    "DatabaseInitializationError",
    "DocumentStoreError",
    "DuplicateEntryError",
    "ForeignKeyViolationError",
    "RecordNotFoundError",
    "RepositoryError",
    "create_exception_handler",
    "database_exception_handler",
    "to_document_store_error",
    "to_repository_error",
]
