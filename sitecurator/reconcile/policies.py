"""
Merge policies for SiteCurator imports.

Imported content is reconciled with existing content under one of three
policies. They match on different keys and must not be substituted for one
another:

* REPLACE_ALL drops everything in scope and inserts the import.
* FIELD_MERGE_LOCAL patches single fields of in-memory blocks matched on
  (block_type, position) and never touches the store.
* UPSERT_BY_KEY matches stored blocks on (page_id, block_type, block_key),
  ignoring position, and updates or inserts.

None of the store-backed policies roll back earlier writes when a later one
fails; re-running the same import converges on the same result.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..codec.content import DecodedBlock, TabularRow
from ..models import ContentBlock, NavigationItem
from ..repository import SiteRepository


class MergePolicy(str, Enum):
    """How imported content is reconciled with existing content."""

    REPLACE_ALL = "replace_all"
    FIELD_MERGE_LOCAL = "field_merge_local"
    UPSERT_BY_KEY = "upsert_by_key"


@dataclass
class ImportResult:
    """Outcome of one import call."""
    policy: MergePolicy
    success: bool = True
    message: str = "import succeeded"
    inserted: int = 0
    updated: int = 0
    deleted: int = 0
    merged: int = 0
    skipped: int = 0

    def fail(self, reason: str) -> "ImportResult":
        self.success = False
        self.message = f"import failed: {reason}"
        return self


def replace_all_blocks(repository: SiteRepository, page_id: str, decoded: List[DecodedBlock]) -> ImportResult:
    """
    Replace every content block of a page with the imported blocks.

    Blocks not present in the import, including ones added since the last
    export, are lost.
    """
    result = ImportResult(MergePolicy.REPLACE_ALL)
    result.deleted = repository.delete_blocks_for_page(page_id)

    for block in decoded:
        repository.add_block(ContentBlock(
            page_id=page_id,
            block_type=block.block_type,
            block_key=block.block_key,
            position=block.position,
            content=block.content,
        ))
        result.inserted += 1

    logging.info(
        f"Replaced blocks of page {page_id}: {result.deleted} deleted, {result.inserted} inserted"
    )
    return result


def replace_all_navigation(repository: SiteRepository, items: List[NavigationItem]) -> ImportResult:
    """
    Replace the whole navigation with the imported items.

    Imported items get fresh ids. Parent links that point at another
    imported item are remapped to its new id; links to anything else are
    kept as they are and may dangle.
    """
    result = ImportResult(MergePolicy.REPLACE_ALL)

    for existing in repository.list_navigation():
        repository.delete_navigation(existing.id)
        result.deleted += 1

    new_ids: Dict[str, str] = {}
    created: List[Tuple[NavigationItem, Optional[str]]] = []
    for item in items:
        stored = repository.add_navigation(item.model_copy(update={"id": None, "parent_id": None}))
        if item.id:
            new_ids[item.id] = stored.id
        created.append((stored, item.parent_id))
        result.inserted += 1

    for stored, old_parent_id in created:
        if old_parent_id:
            repository.update_navigation(stored.id, {"parent_id": new_ids.get(old_parent_id, old_parent_id)})

    logging.info(
        f"Replaced navigation: {result.deleted} deleted, {result.inserted} inserted"
    )
    return result


def field_merge_local(blocks: List[ContentBlock], rows: List[TabularRow]) -> Tuple[List[ContentBlock], ImportResult]:
    """
    Patch fields of in-memory blocks from imported rows.

    Each row overwrites one field of the first block with the same
    (block_type, position). Rows matching no block are skipped; no block
    is created. The input blocks are not modified.

    Returns:
        The patched copies of the blocks and the import result
    """
    result = ImportResult(MergePolicy.FIELD_MERGE_LOCAL)
    merged = [block.model_copy(deep=True) for block in blocks]

    for row in rows:
        target = next(
            (b for b in merged if b.block_type == row.block_type and b.position == row.position),
            None
        )
        if target is None:
            logging.debug(f"No block {row.block_type}@{row.position} for field '{row.field_name}'")
            result.skipped += 1
            continue
        target.content[row.field_name] = row.value
        result.merged += 1

    return merged, result


def upsert_by_key(
    repository: SiteRepository,
    decoded: List[DecodedBlock],
    page_id: Optional[str] = None
) -> ImportResult:
    """
    Update or insert stored blocks matched on (page_id, block_type, block_key).

    The page comes from each block's page_slug, or from page_id when the
    import has no page_slug column. Blocks for unknown pages are skipped.
    Position is not part of the key: a match gets its content and position
    replaced. When several stored blocks share a key the first by
    (position, id) is used.
    """
    result = ImportResult(MergePolicy.UPSERT_BY_KEY)
    page_ids: Dict[str, Optional[str]] = {}

    for block in decoded:
        target_page_id = page_id
        if block.page_slug is not None:
            if block.page_slug not in page_ids:
                page = repository.find_page_by_slug(block.page_slug)
                page_ids[block.page_slug] = page.id if page else None
            target_page_id = page_ids[block.page_slug]

        if target_page_id is None:
            logging.warning(f"Skipping {block.block_type} block: unknown page '{block.page_slug}'")
            result.skipped += 1
            continue

        matches = repository.find_blocks(target_page_id, block.block_type, block.block_key)
        if len(matches) > 1:
            logging.warning(
                f"{len(matches)} blocks share key ({target_page_id}, {block.block_type}, "
                f"{block.block_key}); updating {matches[0].id}"
            )

        if matches:
            repository.update_block(matches[0].id, {"content": block.content, "position": block.position})
            result.updated += 1
        else:
            repository.add_block(ContentBlock(
                page_id=target_page_id,
                block_type=block.block_type,
                block_key=block.block_key,
                position=block.position,
                content=block.content,
            ))
            result.inserted += 1

    logging.info(
        f"Upserted blocks: {result.updated} updated, {result.inserted} inserted, {result.skipped} skipped"
    )
    return result
