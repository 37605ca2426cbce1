"""
Typed access to the site content for SiteCurator.

This module converts between record store dictionaries and the pydantic
models, and owns the page to block cascade.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from .database.base import RecordStore, NAVIGATION_TABLE, PAGES_TABLE, BLOCKS_TABLE
from .models import NavigationItem, Page, ContentBlock


class SiteRepository:
    """
    Reads and writes navigation items, pages and content blocks.
    """

    def __init__(self, store: RecordStore):
        """
        Initialize the repository.

        Args:
            store: Record store holding the site tables
        """
        self.store = store

    # Navigation

    def list_navigation(self) -> List[NavigationItem]:
        """List every navigation item ordered by position."""
        return [
            NavigationItem.model_validate(record)
            for record in self.store.list(NAVIGATION_TABLE, order_by="position")
        ]

    def get_navigation(self, item_id: str) -> Optional[NavigationItem]:
        record = self.store.get_by_id(NAVIGATION_TABLE, item_id)
        return NavigationItem.model_validate(record) if record else None

    def add_navigation(self, item: NavigationItem) -> NavigationItem:
        """Insert a navigation item and return it with its assigned id."""
        item_id = self.store.insert(NAVIGATION_TABLE, item.model_dump())
        return item.model_copy(update={"id": item_id})

    def update_navigation(self, item_id: str, fields: Dict[str, Any]) -> NavigationItem:
        self.store.update(NAVIGATION_TABLE, item_id, fields)
        return self.get_navigation(item_id)

    def delete_navigation(self, item_id: str) -> None:
        self.store.delete(NAVIGATION_TABLE, item_id)

    # Pages

    def list_pages(self) -> List[Page]:
        """List every page, most recently updated first."""
        pages = [Page.model_validate(record) for record in self.store.list(PAGES_TABLE)]
        return sorted(pages, key=lambda page: page.updated_at, reverse=True)

    def get_page(self, page_id: str) -> Optional[Page]:
        record = self.store.get_by_id(PAGES_TABLE, page_id)
        return Page.model_validate(record) if record else None

    def find_page_by_slug(self, slug: str) -> Optional[Page]:
        """
        Look up a page by slug.

        Returns:
            The page if found, None otherwise
        """
        records = self.store.list(PAGES_TABLE, slug=slug)
        return Page.model_validate(records[0]) if records else None

    def add_page(self, page: Page) -> Page:
        page_id = self.store.insert(PAGES_TABLE, page.model_dump())
        return page.model_copy(update={"id": page_id})

    def update_page(self, page_id: str, fields: Dict[str, Any]) -> Page:
        values = dict(fields)
        values.setdefault("updated_at", datetime.now())
        self.store.update(PAGES_TABLE, page_id, values)
        return self.get_page(page_id)

    def delete_page(self, page_id: str) -> int:
        """
        Delete a page together with all of its content blocks.

        Returns:
            Number of blocks deleted with the page
        """
        removed = self.delete_blocks_for_page(page_id)
        self.store.delete(PAGES_TABLE, page_id)
        logging.info(f"Deleted page {page_id} and {removed} content blocks")
        return removed

    # Content blocks

    def list_blocks(self, page_id: Optional[str] = None) -> List[ContentBlock]:
        """List content blocks ordered by position, optionally for one page."""
        if page_id is None:
            records = self.store.list(BLOCKS_TABLE, order_by="position")
        else:
            records = self.store.list(BLOCKS_TABLE, order_by="position", page_id=page_id)
        return [ContentBlock.model_validate(record) for record in records]

    def get_block(self, block_id: str) -> Optional[ContentBlock]:
        record = self.store.get_by_id(BLOCKS_TABLE, block_id)
        return ContentBlock.model_validate(record) if record else None

    def find_blocks(self, page_id: str, block_type: str, block_key: Optional[str]) -> List[ContentBlock]:
        """
        Find the blocks of a page with a given type and key.

        An empty key and a missing key are the same key. Results are ordered
        by position, then id.
        """
        candidates = self.store.list(
            BLOCKS_TABLE, order_by="position", page_id=page_id, block_type=block_type
        )
        wanted = block_key or None
        return [
            ContentBlock.model_validate(record)
            for record in candidates
            if (record.get("block_key") or None) == wanted
        ]

    def add_block(self, block: ContentBlock) -> ContentBlock:
        block_id = self.store.insert(BLOCKS_TABLE, block.model_dump())
        return block.model_copy(update={"id": block_id})

    def update_block(self, block_id: str, fields: Dict[str, Any]) -> None:
        self.store.update(BLOCKS_TABLE, block_id, fields)

    def delete_block(self, block_id: str) -> None:
        self.store.delete(BLOCKS_TABLE, block_id)

    def delete_blocks_for_page(self, page_id: str) -> int:
        """Delete every block of a page and return how many were removed."""
        records = self.store.list(BLOCKS_TABLE, page_id=page_id)
        for record in records:
            self.store.delete(BLOCKS_TABLE, record["id"])
        return len(records)
