"""Root application error and the factory for its FastAPI exception handlers."""

from collections.abc import Awaitable, Callable
from logging import Logger

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from blogcms.utils.helpers import host

type ErrorHandler = Callable[[Request, Exception], Awaitable[ORJSONResponse]]


class BaseAppError(Exception):
    """
    Error that maps onto an HTTP response.

    Attributes:
        detail: Message returned to the client
        status_code: HTTP status of the response
    """

    def __init__(
        self,
        detail: str = "Internal Server Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    def __str__(self) -> str:
        return self.detail


def _public_fields(exc: Exception) -> dict[str, object]:
    # Scalar extras only, e.g. a repository error's SQLSTATE ``code``; ``meta`` stays server-side
    return {
        key: value
        for key, value in vars(exc).items()
        if key not in ("status_code", "detail") and isinstance(value, str | int | None)
    }


def create_exception_handler(logger: Logger) -> ErrorHandler:
    """
    Build the handler registered for a family of application errors.

    ``BaseAppError`` subclasses answer with their own status and detail; any
    other exception becomes a bare 500 so driver messages never leak.

    Args:
        logger: Logger of the module that owns the error family

    Returns:
        ErrorHandler: Handler for ``app.add_exception_handler``
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        if not isinstance(exc, BaseAppError):
            logger.warning(f"Unhandled {type(exc).__name__} on {request.url.path}")
            return ORJSONResponse(
                content={"detail": "Internal Server Error"},
                status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            )

        logger.warning(f"{exc.detail} for ip: {host(request)} for endpoint {request.url.path}")
        return ORJSONResponse(
            content={"detail": exc.detail, **_public_fields(exc)},
            status_code=exc.status_code,
        )

    return handler
