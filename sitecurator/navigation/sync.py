"""
Navigation to page lifecycle synchronization for SiteCurator.

Every navigation item that links inside the site mirrors a CMS page. The page
is created when the item is created and deleted when the item is deleted.
The link between them is the derived slug: no foreign key is stored, so
editing an item's href or title between creation and deletion makes the
delete target whatever page the new values derive to.

Synchronization is best effort. Store failures are logged and reported in the
returned SyncResult; they never fail the navigation operation itself unless
the caller asks for strict mode.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..config import config
from ..models import NavigationItem, Page, PageStatus
from ..repository import SiteRepository
from ..slugs import PAGE_PREFIX, derive_slug, generate_slug, is_external


class SyncAction(str, Enum):
    """What the synchronizer did to the mirrored page."""

    CREATE = "create"
    DELETE = "delete"
    NOOP = "noop"


@dataclass
class SyncResult:
    """
    Outcome of one synchronization step.

    A result with an error is partially applied: the navigation change went
    through but the mirrored page was not created or deleted.
    """
    action: SyncAction
    slug: Optional[str] = None
    page_id: Optional[str] = None
    error: Optional[str] = None
    orphaned_ids: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def partially_applied(self) -> bool:
        return self.error is not None


class PageSynchronizer:
    """
    Creates and deletes the pages mirrored by navigation items.
    """

    def __init__(self, repository: SiteRepository, site_name: Optional[str] = None):
        """
        Initialize the synchronizer.

        Args:
            repository: Site repository holding navigation and pages
            site_name: Name appended to generated page descriptions (defaults to config)
        """
        self.repository = repository
        self.site_name = site_name or config.site_name

    def on_create(self, item: NavigationItem, strict: bool = False) -> SyncResult:
        """
        Create the draft page for a new navigation item if it has none.

        Items without an href mirror the page "/page/<title slug>". When a
        page with the derived slug already exists nothing is created, so
        items sharing a target share one page.
        """
        if is_external(item.href):
            return SyncResult(SyncAction.NOOP)

        href = item.href or f"{PAGE_PREFIX}{generate_slug(item.title)}"
        slug = derive_slug(href, item.title)

        try:
            existing = self.repository.find_page_by_slug(slug)
            if existing:
                logging.debug(f"Page '{slug}' already exists, not creating a duplicate")
                return SyncResult(SyncAction.NOOP, slug=slug, page_id=existing.id)

            description = f"{item.title} - {self.site_name}"
            page = self.repository.add_page(Page(
                slug=slug,
                title=item.title,
                status=PageStatus.DRAFT,
                description=description,
                page_type=config.default_page_type,
                meta_title=item.title,
                meta_description=description,
            ))
        except Exception as e:
            if strict:
                raise
            logging.error(f"Failed to create page '{slug}' for navigation item '{item.title}': {e}")
            return SyncResult(SyncAction.CREATE, slug=slug, error=str(e))

        logging.info(f"Created draft page '{slug}' for navigation item '{item.title}'")
        return SyncResult(SyncAction.CREATE, slug=slug, page_id=page.id)

    def on_delete(self, item: NavigationItem, strict: bool = False) -> SyncResult:
        """
        Delete the page mirrored by a deleted navigation item, with its blocks.

        The slug is derived from the item's stored href and title. Items
        without an href or with an external href have no page to delete.
        """
        if not item.href or is_external(item.href):
            return SyncResult(SyncAction.NOOP)

        slug = derive_slug(item.href, item.title)

        try:
            page = self.repository.find_page_by_slug(slug)
            if page is None:
                logging.warning(f"No page '{slug}' to delete for navigation item '{item.title}'")
                return SyncResult(SyncAction.NOOP, slug=slug)
            self.repository.delete_page(page.id)
        except Exception as e:
            if strict:
                raise
            logging.error(f"Failed to delete page '{slug}' for navigation item '{item.title}': {e}")
            return SyncResult(SyncAction.DELETE, slug=slug, error=str(e))

        logging.info(f"Deleted page '{slug}' mirrored by navigation item '{item.title}'")
        return SyncResult(SyncAction.DELETE, slug=slug, page_id=page.id)

    def on_update(self, item: NavigationItem) -> SyncResult:
        """Updates are not synchronized: the mirrored page is left as it is."""
        return SyncResult(SyncAction.NOOP)
