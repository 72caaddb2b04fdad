from datetime import UTC, datetime
from math import ceil
from re import sub

from fastapi import Request

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


def slugify(text: str) -> str:
    """Lowercase, strip punctuation and join words with single hyphens."""
    slug = text.lower()
    slug = sub(r"[^a-z0-9\s-]", "", slug)
    slug = sub(r"\s+", "-", slug)
    slug = sub(r"-+", "-", slug)
    return slug.strip("-")


def host(request: Request) -> str:
    """Return the host IP address."""
    return request.client.host if request.client else "unknown"


def utcnow() -> datetime:
    """Return the current timezone-aware UTC time."""
    return datetime.now(tz=UTC)


def total_pages(total: int, page_size: int) -> int:
    """Number of pages needed to show ``total`` items ``page_size`` at a time."""
    if page_size <= 0:
        return 0
    return ceil(total / page_size)
