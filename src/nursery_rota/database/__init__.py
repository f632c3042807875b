"""Database connection and shift store access."""

from .connection import SCHEMA_ERRORS, STORAGE_ERRORS, DatabaseManager
from .shift_store import QueryHandle, ShiftSnapshot, ShiftStoreAdapter

__all__ = [
    "DatabaseManager",
    "QueryHandle",
    "SCHEMA_ERRORS",
    "STORAGE_ERRORS",
    "ShiftSnapshot",
    "ShiftStoreAdapter",
]
