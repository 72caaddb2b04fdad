"""Database models for the application."""

from blogcms.models.base import SoftDeleteModel, TimestampModel
from blogcms.models.links import PostCategoryLink, PostTagLink
from blogcms.models.post import CommentDB, PostDB, PostStatus
from blogcms.models.taxonomy import CategoryDB, TagDB
from blogcms.models.user import UserDB, UserRole

__all__ = [
    "CategoryDB",
    "CommentDB",
    "PostCategoryLink",
    "PostDB",
    "PostStatus",
    "PostTagLink",
    "SoftDeleteModel",
    "TagDB",
    "TimestampModel",
    "UserDB",
    "UserRole",
]
