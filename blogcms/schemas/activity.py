"""User activity log documents."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ActivityLogCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: str = Field(min_length=1)
    action: str = Field(min_length=1, max_length=100)
    metadata: dict[str, Any] | None = None
    ip_address: str | None = None
    user_agent: str | None = None


class ActivityLog(BaseModel):
    """Stored activity document with its id rendered as a string."""

    id: str
    user_id: str
    action: str
    metadata: dict[str, Any] | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "ActivityLog":
        return cls(
            id=str(document["_id"]),
            user_id=document["user_id"],
            action=document["action"],
            metadata=document.get("metadata"),
            ip_address=document.get("ip_address"),
            user_agent=document.get("user_agent"),
            created_at=document["created_at"],
            updated_at=document["updated_at"],
        )


class ActivityPagination(BaseModel):
    total: int
    skip: int
    take: int
    has_more: bool


class ActivityPage(BaseModel):
    data: list[ActivityLog]
    pagination: ActivityPagination


ActivityOrder = Literal["asc", "desc"]
