"""Relational storage client."""

from blogcms.db.database import Database

__all__ = ["Database"]
