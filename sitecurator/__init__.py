"""
SiteCurator: content management core for a multi-page site.

Keeps a navigation tree and its mirrored pages in step, and moves page
content in and out of quoted CSV under explicit merge policies.
"""

__version__ = "0.1.0"
__author__ = "SiteCurator Project"

# Import main components
from .database import DatabaseManager, MemoryStore, RecordStore
from .models import NavigationItem, Page, ContentBlock
from .repository import SiteRepository
from .navigation import NavigationService, NavigationTree, PageSynchronizer
from .pages import ContentService
from .reconcile import ContentImporter, MergePolicy, ImportResult
from .slugs import derive_slug

__all__ = [
    "DatabaseManager",
    "MemoryStore",
    "RecordStore",
    "NavigationItem",
    "Page",
    "ContentBlock",
    "SiteRepository",
    "NavigationService",
    "NavigationTree",
    "PageSynchronizer",
    "ContentService",
    "ContentImporter",
    "MergePolicy",
    "ImportResult",
    "derive_slug"
]
