"""Utility helper functions."""

from blogcms.utils.helpers import SLUG_PATTERN, host, slugify, total_pages, utcnow

__all__ = ["SLUG_PATTERN", "host", "slugify", "total_pages", "utcnow"]
