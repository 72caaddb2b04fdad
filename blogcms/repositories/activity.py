"""User activity log repository backed by MongoDB."""

from asyncio import gather
from datetime import timedelta
from logging import getLogger
from typing import Any

from pymongo import ASCENDING, DESCENDING
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from blogcms.clients import MongoClient
from blogcms.configs import ACTIVITY_LOG_COLLECTION, file_logger, settings
from blogcms.errors.database import to_document_store_error
from blogcms.schemas.activity import (
    ActivityLog,
    ActivityLogCreate,
    ActivityOrder,
    ActivityPage,
    ActivityPagination,
)
from blogcms.utils.helpers import utcnow

logger = file_logger(getLogger(__name__))


class ActivityRepository:
    """
    Append-only store of user actions.

    Documents expire through a TTL index on ``created_at``; ``cleanup_old_logs``
    removes older entries on demand. Every PyMongo failure is re-raised as
    ``DocumentStoreError``.
    """

    def __init__(self, mongo: MongoClient, collection: str = ACTIVITY_LOG_COLLECTION) -> None:
        self.mongo = mongo
        self.collection_name = collection

    @property
    def collection(self) -> AsyncCollection[dict[str, Any]]:
        return self.mongo.database[self.collection_name]

    async def ensure_indexes(self) -> None:
        """Create the user lookup index and the TTL index."""
        try:
            await self.collection.create_index([("user_id", ASCENDING)])
            await self.collection.create_index(
                [("created_at", ASCENDING)],
                expireAfterSeconds=settings.activity_log_ttl_seconds,
            )
        except PyMongoError as e:
            logger.exception("Failed to create activity log indexes")
            raise to_document_store_error(e) from e

    async def log_activity(self, data: ActivityLogCreate) -> ActivityLog:
        """
        Store one activity entry.

        Args:
            data: Activity to record; missing optional fields are stored as null

        Returns:
            ActivityLog: Stored entry with its generated id
        """
        now = utcnow()
        document = {**data.model_dump(), "created_at": now, "updated_at": now}
        try:
            result = await self.collection.insert_one(document)
        except PyMongoError as e:
            raise to_document_store_error(e) from e
        return ActivityLog.from_document({**document, "_id": result.inserted_id})

    async def get_user_activities(
        self,
        user_id: str,
        skip: int = 0,
        take: int = 20,
        order: ActivityOrder = "desc",
    ) -> ActivityPage:
        """
        Get a user's activity entries by creation time.

        The page and the total count are fetched concurrently.

        Args:
            user_id: User whose entries to read
            skip: Entries to skip
            take: Maximum entries to return
            order: ``desc`` for newest first, ``asc`` for oldest first

        Returns:
            ActivityPage: Entries plus ``{total, skip, take, has_more}``
        """
        if skip < 0 or take < 1:
            mssg = "skip must be >= 0 and take must be >= 1"
            raise ValueError(mssg)

        query = {"user_id": user_id}
        cursor = (
            self.collection.find(query)
            .sort("created_at", ASCENDING if order == "asc" else DESCENDING)
            .skip(skip)
            .limit(take)
        )
        try:
            documents, total = await gather(
                cursor.to_list(),
                self.collection.count_documents(query),
            )
        except PyMongoError as e:
            raise to_document_store_error(e) from e

        return ActivityPage(
            data=[ActivityLog.from_document(document) for document in documents],
            pagination=ActivityPagination(
                total=total,
                skip=skip,
                take=take,
                has_more=skip + take < total,
            ),
        )

    async def cleanup_old_logs(self, days_to_keep: int | None = None) -> int:
        """
        Delete entries older than the retention window.

        Args:
            days_to_keep: Retention in days, defaults to ``ACTIVITY_LOG_RETENTION_DAYS``

        Returns:
            int: Number of deleted entries
        """
        days = settings.ACTIVITY_LOG_RETENTION_DAYS if days_to_keep is None else days_to_keep
        cutoff = utcnow() - timedelta(days=days)
        try:
            result = await self.collection.delete_many({"created_at": {"$lt": cutoff}})
        except PyMongoError as e:
            raise to_document_store_error(e) from e

        logger.info(f"Removed {result.deleted_count} activity logs older than {days} days")
        return result.deleted_count
