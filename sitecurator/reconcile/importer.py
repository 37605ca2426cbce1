"""
Bulk export and import of site content for SiteCurator.

Ties the CSV codecs to the merge policies and reports one success or failure
per call. Malformed rows are dropped by the codec and do not fail an import.
"""

import logging
from typing import List, Optional, Tuple

from ..codec.content import decode_blocks, decode_rows, encode_blocks
from ..codec.navigation import decode_navigation, encode_navigation
from ..models import ContentBlock
from ..repository import SiteRepository
from .policies import (
    ImportResult,
    MergePolicy,
    field_merge_local,
    replace_all_blocks,
    replace_all_navigation,
    upsert_by_key,
)


class ContentImporter:
    """
    Exports and imports pages, content blocks and navigation as CSV.
    """

    def __init__(self, repository: SiteRepository):
        """
        Initialize the importer.

        Args:
            repository: Site repository to read from and write to
        """
        self.repository = repository

    def export_page(self, page_id: str) -> str:
        """Export the blocks of one page, without a page_slug column."""
        return encode_blocks(self.repository.list_blocks(page_id))

    def export_site(self) -> str:
        """Export the blocks of every page, with a page_slug column."""
        page_slugs = {page.id: page.slug for page in self.repository.list_pages()}
        return encode_blocks(self.repository.list_blocks(), page_slugs=page_slugs)

    def export_navigation(self) -> str:
        return encode_navigation(self.repository.list_navigation())

    def import_page(self, text: str, page_id: str, policy: MergePolicy = MergePolicy.UPSERT_BY_KEY) -> ImportResult:
        """
        Import one page's blocks with a store-backed policy.

        Args:
            text: CSV produced by export_page (a page_slug column is ignored)
            page_id: Page receiving the blocks
            policy: REPLACE_ALL or UPSERT_BY_KEY

        Raises:
            ValueError: For FIELD_MERGE_LOCAL, which works on in-memory blocks (see merge_into)
        """
        if policy == MergePolicy.FIELD_MERGE_LOCAL:
            raise ValueError("FIELD_MERGE_LOCAL does not write to the store; use merge_into()")

        result = ImportResult(policy)
        try:
            if self.repository.get_page(page_id) is None:
                return result.fail(f"page {page_id} not found")

            decoded = decode_blocks(text)
            for block in decoded:
                block.page_slug = None

            if policy == MergePolicy.REPLACE_ALL:
                result = replace_all_blocks(self.repository, page_id, decoded)
            else:
                result = upsert_by_key(self.repository, decoded, page_id=page_id)
        except Exception as e:
            logging.error(f"Import into page {page_id} failed: {e}")
            return result.fail(str(e))

        return result

    def import_site(self, text: str) -> ImportResult:
        """Import a site-wide export, upserting blocks by key into existing pages."""
        result = ImportResult(MergePolicy.UPSERT_BY_KEY)
        try:
            result = upsert_by_key(self.repository, decode_blocks(text))
        except Exception as e:
            logging.error(f"Site import failed: {e}")
            return result.fail(str(e))
        return result

    def import_navigation(self, text: str) -> ImportResult:
        """Replace the whole navigation with an imported navigation CSV."""
        result = ImportResult(MergePolicy.REPLACE_ALL)
        try:
            result = replace_all_navigation(self.repository, decode_navigation(text))
        except Exception as e:
            logging.error(f"Navigation import failed: {e}")
            return result.fail(str(e))
        return result

    def merge_into(self, blocks: List[ContentBlock], text: str) -> Tuple[List[ContentBlock], ImportResult]:
        """
        Patch in-memory blocks from CSV without writing to the store.

        Persist the returned blocks with ContentService.save_blocks().
        """
        return field_merge_local(blocks, decode_rows(text))

    def import_with(self, policy: MergePolicy, text: str, page_id: Optional[str] = None) -> ImportResult:
        """
        Dispatch a store-backed import by policy.

        With a page_id the CSV is imported into that page; without one it is
        treated as a site-wide export (UPSERT_BY_KEY only).
        """
        if page_id is not None:
            return self.import_page(text, page_id, policy)
        if policy != MergePolicy.UPSERT_BY_KEY:
            return ImportResult(policy).fail("site-wide imports only support upsert_by_key")
        return self.import_site(text)
