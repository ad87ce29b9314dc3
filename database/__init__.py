"""Database package - models and connection management."""
from database.db import Database, db
from database.models import (
    Base,
    PicarImage,
    PicarTag,
)

__all__ = [
    "Database",
    "db",
    "Base",
    "PicarImage",
    "PicarTag",
]
