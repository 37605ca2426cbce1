"""
Page and block editing operations for SiteCurator.
"""

import logging
from typing import List, Optional

from .models import ContentBlock, Page, PageStatus, default_content
from .repository import SiteRepository
from .slugs import normalize_page_slug


class ContentService:
    """
    Editor-level operations on pages and their content blocks.
    """

    def __init__(self, repository: SiteRepository):
        self.repository = repository

    def create_page(
        self,
        title: str,
        slug: str,
        description: Optional[str] = None,
        status: PageStatus = PageStatus.DRAFT,
        template_id: Optional[str] = None,
        meta_title: Optional[str] = None,
        meta_description: Optional[str] = None
    ) -> Page:
        """
        Create a page. The slug is lowercased and its spaces become hyphens.

        Raises:
            DuplicateRecordError: If another page already uses the slug
        """
        page = self.repository.add_page(Page(
            title=title,
            slug=normalize_page_slug(slug),
            description=description or None,
            status=status,
            template_id=template_id,
            meta_title=meta_title or None,
            meta_description=meta_description or None,
        ))
        logging.info(f"Created page '{page.slug}' ({page.id})")
        return page

    def delete_page(self, page_id: str) -> int:
        """Delete a page and its blocks. Returns the number of blocks removed."""
        return self.repository.delete_page(page_id)

    def add_block(self, page_id: str, block_type: str) -> ContentBlock:
        """
        Append a new block with the catalog's empty fields to a page.

        Raises:
            ValueError: If the block type is not in the catalog
        """
        content = default_content(block_type)
        position = len(self.repository.list_blocks(page_id))
        return self.repository.add_block(ContentBlock(
            page_id=page_id,
            block_type=block_type,
            position=position,
            content=content,
        ))

    def save_blocks(self, blocks: List[ContentBlock]) -> int:
        """
        Persist the content, custom CSS and position of edited blocks.

        Blocks are written one by one; a failure stops the loop and leaves
        earlier blocks saved.

        Returns:
            Number of blocks saved
        """
        saved = 0
        for block in blocks:
            self.repository.update_block(block.id, {
                "content": block.content,
                "custom_css": block.custom_css,
                "position": block.position,
            })
            saved += 1
        logging.info(f"Saved {saved} content blocks")
        return saved

    def delete_block(self, block_id: str) -> None:
        self.repository.delete_block(block_id)
