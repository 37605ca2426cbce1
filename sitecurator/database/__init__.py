"""Record stores backing the site content."""

from .base import (
    RecordStore,
    StoreError,
    RecordNotFoundError,
    DuplicateRecordError,
    NAVIGATION_TABLE,
    PAGES_TABLE,
    BLOCKS_TABLE,
)
from .memory import MemoryStore
from .manager import DatabaseManager

__all__ = [
    "RecordStore",
    "StoreError",
    "RecordNotFoundError",
    "DuplicateRecordError",
    "NAVIGATION_TABLE",
    "PAGES_TABLE",
    "BLOCKS_TABLE",
    "MemoryStore",
    "DatabaseManager"
]
