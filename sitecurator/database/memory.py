"""
In-memory record store for SiteCurator.

This module provides a dictionary-backed store with the same contract as the
DuckDB store, for tests and dry runs.
"""

import copy
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from .base import (
    RecordStore,
    RecordNotFoundError,
    DuplicateRecordError,
    TABLE_COLUMNS,
    UNIQUE_COLUMNS,
    check_columns,
)


class MemoryStore(RecordStore):
    """
    Record store that keeps every table in a dictionary.

    Returned records are copies, so callers cannot mutate stored state.
    """

    def __init__(self):
        """Initialize an empty store with all known tables."""
        self._tables: Dict[str, Dict[str, Dict[str, Any]]] = {
            table: {} for table in TABLE_COLUMNS
        }

    def list(self, table: str, order_by: Optional[str] = None, **filters: Any) -> List[Dict[str, Any]]:
        check_columns(table, filters)
        records = [
            record for record in self._tables[table].values()
            if all(record.get(column) == value for column, value in filters.items())
        ]
        if order_by:
            check_columns(table, [order_by])
            records.sort(key=lambda r: (r.get(order_by) is None, r.get(order_by), r["id"]))
        return copy.deepcopy(records)

    def get_by_id(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        check_columns(table, [])
        record = self._tables[table].get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def insert(self, table: str, record: Dict[str, Any]) -> str:
        check_columns(table, record)
        row = {column: None for column in TABLE_COLUMNS[table]}
        row.update(copy.deepcopy(record))
        if not row["id"]:
            row["id"] = str(uuid.uuid4())
        if row["id"] in self._tables[table]:
            raise DuplicateRecordError(f"Duplicate id '{row['id']}' in {table}")
        self._check_unique(table, row)
        self._tables[table][row["id"]] = row
        return row["id"]

    def update(self, table: str, record_id: str, fields: Dict[str, Any]) -> None:
        check_columns(table, fields)
        current = self._tables[table].get(record_id)
        if current is None:
            raise RecordNotFoundError(table, record_id)
        updated = dict(current)
        updated.update(copy.deepcopy(fields))
        updated["id"] = record_id
        self._check_unique(table, updated)
        self._tables[table][record_id] = updated

    def delete(self, table: str, record_id: str) -> None:
        check_columns(table, [])
        if record_id not in self._tables[table]:
            raise RecordNotFoundError(table, record_id)
        del self._tables[table][record_id]

    @contextmanager
    def transaction(self) -> Iterator["MemoryStore"]:
        """Snapshot every table and restore it if the block raises."""
        snapshot = copy.deepcopy(self._tables)
        try:
            yield self
        except Exception:
            self._tables = snapshot
            raise

    def _check_unique(self, table: str, row: Dict[str, Any]) -> None:
        for column in UNIQUE_COLUMNS.get(table, []):
            value = row.get(column)
            if value is None:
                continue
            for other in self._tables[table].values():
                if other["id"] != row["id"] and other.get(column) == value:
                    raise DuplicateRecordError(f"Duplicate {column} '{value}' in {table}")
