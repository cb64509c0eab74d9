"""Record store implementations for database persistence.

This module provides a record store abstraction for data persistence,
enabling:
- Clean separation between periodization logic and data access
- Easy swapping of storage backends
- Atomic multi-record operations (cascade delete, template instantiation)
"""

from .base import RecordStore
from .sqlite_store import SQLiteRecordStore, TABLES

__all__ = [
    "RecordStore",
    "SQLiteRecordStore",
    "TABLES",
]
