# blogcms/main.py

"""blogcms Backend - repository layer over PostgreSQL and MongoDB served by FastAPI."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from logging import getLogger

from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_200_OK, HTTP_503_SERVICE_UNAVAILABLE

from blogcms.clients import MongoClient
from blogcms.configs import configure_logging, file_logger, settings
from blogcms.db import Database
from blogcms.errors import DatabaseError, DocumentStoreError, database_exception_handler
from blogcms.repositories import build_repositories
from blogcms.routes import posts_router
from blogcms.utils.helpers import utcnow

configure_logging()
logger = file_logger(getLogger(__name__))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Open the storage clients, build the repository container and close both on shutdown."""
    logger.info(f"Starting {app.title}...")

    database = Database()
    mongo = MongoClient()
    try:
        await mongo.connect()
        repositories = build_repositories(database, mongo)
        try:
            await repositories.activity.ensure_indexes()
        except DocumentStoreError:
            logger.warning("Activity log indexes could not be ensured; continuing without them")

        app.state.database = database
        app.state.mongo = mongo
        app.state.repositories = repositories
        logger.info("Services initialized successfully")
    except Exception:
        logger.exception("Failed to initialize services")
        raise

    yield

    logger.info(f"Shutting down {app.title}...")
    try:
        await mongo.disconnect()
        await database.dispose()
        logger.info("Services cleaned up successfully")
    except Exception:
        logger.exception("Error during service cleanup")


app = FastAPI(
    title=settings.APP_NAME,
    description="Blog/CMS repository layer API",
    version="1.0.0",
    lifespan=lifespan,
    swagger_ui_parameters={"docExpansion": "none", "operationsSorter": "method"},
)

app.include_router(posts_router)

errors = [(DatabaseError, database_exception_handler)]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_class=ORJSONResponse,
    operation_id="health_check",
)
async def health_check(request: Request) -> ORJSONResponse:
    """
    Report whether both storage backends answer.

    Returns
    -------
    ORJSONResponse
        ``{"version", "status", "timestamp", "services": {"database", "mongodb"}}``;
        503 when either backend is down.
    """
    database_ok = await request.app.state.database.ping()
    mongo_ok = await request.app.state.mongo.ping()
    healthy = database_ok and mongo_ok

    return ORJSONResponse(
        {
            "version": app.version,
            "status": "ok" if healthy else "degraded",
            "timestamp": utcnow().isoformat(),
            "services": {
                "database": "healthy" if database_ok else "unavailable",
                "mongodb": "healthy" if mongo_ok else "unavailable",
            },
        },
        status_code=HTTP_200_OK if healthy else HTTP_503_SERVICE_UNAVAILABLE,
    )
