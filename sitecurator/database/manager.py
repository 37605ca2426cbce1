"""
Database manager for SiteCurator.

This module persists navigation items, pages and content blocks in DuckDB.
"""

import duckdb
import json
import logging
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from .base import (
    RecordStore,
    RecordNotFoundError,
    DuplicateRecordError,
    NAVIGATION_TABLE,
    PAGES_TABLE,
    BLOCKS_TABLE,
    TABLE_COLUMNS,
    check_columns,
)

# Columns holding structured values, stored as JSON text
JSON_COLUMNS = {"content"}


class DatabaseManager(RecordStore):
    """
    Manages the DuckDB database backing the site content.
    """

    def __init__(self, db_path: str = "sitecurator.db"):
        """
        Initialize the database manager.

        Args:
            db_path: Path to the DuckDB database file (":memory:" for a scratch database)
        """
        self.db_path = db_path
        self.connection = None

    def connect(self):
        """Establish connection to the database."""
        self.connection = duckdb.connect(self.db_path)

    def disconnect(self):
        """Close the database connection."""
        if self.connection:
            self.connection.close()
            self.connection = None

    def __enter__(self):
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.disconnect()

    def initialize_database(self):
        """
        Create all necessary tables if they don't exist.

        Blocks reference pages and navigation items reference their parents
        without foreign keys: parents may be deleted while children stay
        behind, and block cascades are handled by the repository.
        """
        if not self.connection:
            raise RuntimeError("Database connection not established")

        self.connection.execute(f"""
            CREATE TABLE IF NOT EXISTS {NAVIGATION_TABLE} (
                id VARCHAR PRIMARY KEY,
                parent_id VARCHAR,
                title VARCHAR NOT NULL,
                href VARCHAR,
                position INTEGER NOT NULL DEFAULT 0,
                is_active BOOLEAN NOT NULL DEFAULT true,
                menu_location VARCHAR NOT NULL DEFAULT 'primary',
                icon VARCHAR
            )
        """)

        self.connection.execute(f"""
            CREATE TABLE IF NOT EXISTS {PAGES_TABLE} (
                id VARCHAR PRIMARY KEY,
                slug VARCHAR NOT NULL UNIQUE,
                title VARCHAR NOT NULL,
                status VARCHAR NOT NULL DEFAULT 'draft',
                description VARCHAR,
                page_type VARCHAR NOT NULL DEFAULT 'standard',
                template_id VARCHAR,
                meta_title VARCHAR,
                meta_description VARCHAR,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        self.connection.execute(f"""
            CREATE TABLE IF NOT EXISTS {BLOCKS_TABLE} (
                id VARCHAR PRIMARY KEY,
                page_id VARCHAR NOT NULL,
                block_type VARCHAR NOT NULL,
                block_key VARCHAR,
                position INTEGER NOT NULL DEFAULT 0,
                content VARCHAR NOT NULL DEFAULT '{{}}',
                custom_css VARCHAR,
                is_active BOOLEAN NOT NULL DEFAULT true
            )
        """)

        logging.info(f"Database initialized at {self.db_path}")

    def list(self, table: str, order_by: Optional[str] = None, **filters: Any) -> List[Dict[str, Any]]:
        if not self.connection:
            raise RuntimeError("Database connection not established")
        check_columns(table, filters)

        columns = TABLE_COLUMNS[table]
        query = f"SELECT {', '.join(columns)} FROM {table} WHERE 1=1"
        params = []

        for column, value in filters.items():
            if value is None:
                query += f" AND {column} IS NULL"
            else:
                query += f" AND {column} = ?"
                params.append(self._encode(column, value))

        if order_by:
            check_columns(table, [order_by])
            query += f" ORDER BY {order_by} NULLS LAST, id"

        results = self.connection.execute(query, params).fetchall()
        return [self._decode_row(columns, row) for row in results]

    def get_by_id(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        if not self.connection:
            raise RuntimeError("Database connection not established")
        check_columns(table, [])

        columns = TABLE_COLUMNS[table]
        result = self.connection.execute(
            f"SELECT {', '.join(columns)} FROM {table} WHERE id = ?",
            [record_id]
        ).fetchone()

        if result:
            return self._decode_row(columns, result)
        return None

    def insert(self, table: str, record: Dict[str, Any]) -> str:
        if not self.connection:
            raise RuntimeError("Database connection not established")
        check_columns(table, record)

        row = dict(record)
        if not row.get("id"):
            row["id"] = str(uuid.uuid4())
        # Let column defaults apply to missing values
        row = {column: value for column, value in row.items() if value is not None or column == "id"}

        columns = list(row)
        placeholders = ", ".join("?" for _ in columns)
        try:
            self.connection.execute(
                f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})",
                [self._encode(column, row[column]) for column in columns]
            )
        except duckdb.IntegrityError as e:
            raise DuplicateRecordError(str(e)) from e
        return row["id"]

    def update(self, table: str, record_id: str, fields: Dict[str, Any]) -> None:
        if not self.connection:
            raise RuntimeError("Database connection not established")
        check_columns(table, fields)

        if self.get_by_id(table, record_id) is None:
            raise RecordNotFoundError(table, record_id)

        values = {column: value for column, value in fields.items() if column != "id"}
        if not values:
            return

        assignments = ", ".join(f"{column} = ?" for column in values)
        params = [self._encode(column, value) for column, value in values.items()]
        params.append(record_id)
        try:
            self.connection.execute(f"UPDATE {table} SET {assignments} WHERE id = ?", params)
        except duckdb.IntegrityError as e:
            raise DuplicateRecordError(str(e)) from e

    def delete(self, table: str, record_id: str) -> None:
        if not self.connection:
            raise RuntimeError("Database connection not established")
        check_columns(table, [])

        if self.get_by_id(table, record_id) is None:
            raise RecordNotFoundError(table, record_id)
        self.connection.execute(f"DELETE FROM {table} WHERE id = ?", [record_id])

    @contextmanager
    def transaction(self) -> Iterator["DatabaseManager"]:
        """Run the enclosed calls in one DuckDB transaction."""
        if not self.connection:
            raise RuntimeError("Database connection not established")

        self.connection.begin()
        try:
            yield self
        except Exception:
            self.connection.rollback()
            raise
        self.connection.commit()

    def _encode(self, column: str, value: Any) -> Any:
        if column in JSON_COLUMNS:
            return json.dumps(value, ensure_ascii=False)
        return value

    def _decode_row(self, columns: List[str], row) -> Dict[str, Any]:
        record = dict(zip(columns, row))
        for column in JSON_COLUMNS.intersection(record):
            if record[column] is not None:
                record[column] = json.loads(record[column])
        return record
