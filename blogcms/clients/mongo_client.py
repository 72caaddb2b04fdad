"""MongoDB client module for the activity log store."""

from logging import getLogger

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from blogcms.configs import file_logger, mongo_kwargs, settings
from blogcms.errors.database import DatabaseConnectionError

logger = file_logger(getLogger(__name__))


class MongoClient:
    """Async MongoDB client wrapper with connection pooling."""

    def __init__(self, uri: str | None = None, database: str | None = None) -> None:
        """Initialize MongoDB client settings; no connection is opened yet."""
        self.uri = uri or settings.MONGODB_URI
        self.database_name = database or settings.MONGODB_DB
        self.config = mongo_kwargs()
        self._client: AsyncMongoClient | None = None

    async def connect(self) -> None:
        """Create the client once and verify the server answers a ping."""
        if self._client is not None:
            return
        try:
            self._client = AsyncMongoClient(self.uri, **self.config)
            await self._client.admin.command("ping")
            logger.info(f"MongoDB connection successful. Using database '{self.database_name}'.")
        except PyMongoError as e:
            logger.exception("Failed to connect to MongoDB")
            if self._client is not None:
                await self._client.close()
                self._client = None
            mssg = f"Cannot connect to MongoDB database '{self.database_name}'"
            raise DatabaseConnectionError(mssg) from e

    async def disconnect(self) -> None:
        """Close MongoDB connection pool."""
        if self._client is not None:
            await self._client.close()
            self._client = None
            logger.info("MongoDB connection closed.")

    @property
    def client(self) -> AsyncMongoClient:
        """Get MongoDB client instance."""
        if self._client is None:
            mssg = "MongoDB client not initialized. Call connect() first."
            raise RuntimeError(mssg)
        return self._client

    @property
    def database(self) -> AsyncDatabase:
        """Get the application database handle."""
        return self.client[self.database_name]

    async def ping(self) -> bool:
        """Ping MongoDB server."""
        try:
            result = await self.client.admin.command("ping")
        except PyMongoError:
            logger.exception("Failed to ping MongoDB")
            return False
        return bool(result.get("ok"))
