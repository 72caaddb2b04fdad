from blogcms.schemas.activity import (
    ActivityLog,
    ActivityLogCreate,
    ActivityOrder,
    ActivityPage,
    ActivityPagination,
)
from blogcms.schemas.pagination import Page, PageMeta, PageMetaResponse, PageParams
from blogcms.schemas.post import (
    AuthorResponse,
    PostCreate,
    PostListResponse,
    PostQuery,
    PostResponse,
    PostStatusUpdate,
    PostUpdate,
    TaxonomyResponse,
)
from blogcms.schemas.user import UserCreate, UserProfileUpdate, UserQuery

__all__ = [
    "ActivityLog",
    "ActivityLogCreate",
    "ActivityOrder",
    "ActivityPage",
    "ActivityPagination",
    "AuthorResponse",
    "Page",
    "PageMeta",
    "PageMetaResponse",
    "PageParams",
    "PostCreate",
    "PostListResponse",
    "PostQuery",
    "PostResponse",
    "PostStatusUpdate",
    "PostUpdate",
    "TaxonomyResponse",
    "UserCreate",
    "UserProfileUpdate",
    "UserQuery",
]
