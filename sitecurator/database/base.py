"""
Record store interface for SiteCurator.

This module defines the abstract interface every persistence backend must
implement. Records are plain dictionaries keyed by column name; each call is
synchronous and independently fallible.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional


NAVIGATION_TABLE = "site_navigation"
PAGES_TABLE = "cms_pages"
BLOCKS_TABLE = "cms_content_blocks"

# Column names per table, in storage order. "id" is always first.
TABLE_COLUMNS: Dict[str, List[str]] = {
    NAVIGATION_TABLE: [
        "id", "parent_id", "title", "href", "position",
        "is_active", "menu_location", "icon",
    ],
    PAGES_TABLE: [
        "id", "slug", "title", "status", "description", "page_type",
        "template_id", "meta_title", "meta_description",
        "created_at", "updated_at",
    ],
    BLOCKS_TABLE: [
        "id", "page_id", "block_type", "block_key", "position",
        "content", "custom_css", "is_active",
    ],
}

UNIQUE_COLUMNS: Dict[str, List[str]] = {
    PAGES_TABLE: ["slug"],
}


class StoreError(RuntimeError):
    """Base class for record store failures."""


class RecordNotFoundError(StoreError):
    """Raised when a record id does not exist in its table."""

    def __init__(self, table: str, record_id: str):
        super().__init__(f"No record '{record_id}' in {table}")
        self.table = table
        self.record_id = record_id


class DuplicateRecordError(StoreError):
    """Raised when a write violates a uniqueness constraint."""


def check_columns(table: str, columns) -> None:
    """
    Validate a table name and a set of column names.

    Raises:
        ValueError: If the table or any column is unknown
    """
    if table not in TABLE_COLUMNS:
        raise ValueError(f"Unknown table: {table}")
    unknown = set(columns) - set(TABLE_COLUMNS[table])
    if unknown:
        raise ValueError(f"Unknown columns for {table}: {sorted(unknown)}")


class RecordStore(ABC):
    """
    Abstract base class for all record stores.
    """

    @abstractmethod
    def list(self, table: str, order_by: Optional[str] = None, **filters: Any) -> List[Dict[str, Any]]:
        """
        List records matching every equality filter.

        A filter value of None matches records whose column is null.

        Args:
            table: Table to read
            order_by: Optional column to sort by (ascending, then by id)
            **filters: Column equality filters

        Returns:
            List of records
        """
        pass

    @abstractmethod
    def get_by_id(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        """
        Retrieve one record by id.

        Returns:
            The record if found, None otherwise
        """
        pass

    @abstractmethod
    def insert(self, table: str, record: Dict[str, Any]) -> str:
        """
        Insert a record. An id is generated when the record has none.

        Returns:
            The id of the new record
        """
        pass

    @abstractmethod
    def update(self, table: str, record_id: str, fields: Dict[str, Any]) -> None:
        """
        Update some columns of an existing record.

        Raises:
            RecordNotFoundError: If the id does not exist
        """
        pass

    @abstractmethod
    def delete(self, table: str, record_id: str) -> None:
        """
        Delete a record by id.

        Raises:
            RecordNotFoundError: If the id does not exist
        """
        pass

    @contextmanager
    def transaction(self) -> Iterator["RecordStore"]:
        """
        Group several calls into one unit of work.

        Stores without transaction support run the calls directly.
        """
        yield self
