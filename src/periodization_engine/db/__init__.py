"""Persistence layer for the periodization engine."""

from .repositories import RecordStore, SQLiteRecordStore
from .schema import SCHEMA

__all__ = ["RecordStore", "SQLiteRecordStore", "SCHEMA"]
