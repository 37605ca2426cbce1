"""Data models for SiteCurator."""

from .navigation import NavigationItem, MenuLocation
from .content import Page, PageStatus, ContentBlock
from .catalog import BLOCK_CATALOG, BlockDefinition, block_label, default_content, list_block_types

__all__ = [
    "NavigationItem",
    "MenuLocation",
    "Page",
    "PageStatus",
    "ContentBlock",
    "BLOCK_CATALOG",
    "BlockDefinition",
    "block_label",
    "default_content",
    "list_block_types"
]
