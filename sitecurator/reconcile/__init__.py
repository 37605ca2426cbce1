"""Reconciliation of imported content with stored content."""

from .policies import (
    MergePolicy,
    ImportResult,
    replace_all_blocks,
    replace_all_navigation,
    field_merge_local,
    upsert_by_key,
)
from .importer import ContentImporter

__all__ = [
    "MergePolicy",
    "ImportResult",
    "replace_all_blocks",
    "replace_all_navigation",
    "field_merge_local",
    "upsert_by_key",
    "ContentImporter"
]
