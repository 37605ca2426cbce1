"""
Content block codec for SiteCurator.

Flattens content blocks into one CSV row per (block, field) pair and
rebuilds blocks by grouping rows on (page_slug, block_type, block_key,
position). The page_slug column only exists in site-wide exports.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..models import ContentBlock
from .tabular import coerce_value, parse_int, read_table, stringify_value, write_table

PAGE_COLUMNS = ["block_type", "block_key", "position", "field_name", "value"]
SITE_COLUMNS = ["page_slug"] + PAGE_COLUMNS

REQUIRED_COLUMNS = ("block_type", "field_name")


@dataclass
class TabularRow:
    """One decoded (block, field) row."""
    block_type: str
    block_key: Optional[str]
    position: int
    field_name: str
    value: Any
    page_slug: Optional[str] = None


@dataclass
class DecodedBlock:
    """A block rebuilt from the rows sharing its composite key."""
    block_type: str
    block_key: Optional[str]
    position: int
    content: Dict[str, Any] = field(default_factory=dict)
    page_slug: Optional[str] = None

    @property
    def key(self) -> Tuple[Optional[str], str, Optional[str], int]:
        return (self.page_slug, self.block_type, self.block_key, self.position)


def encode_blocks(blocks: List[ContentBlock], page_slugs: Optional[Mapping[str, str]] = None) -> str:
    """
    Export content blocks as CSV.

    Args:
        blocks: Blocks to export
        page_slugs: page_id to slug mapping. When given, a page_slug column is
            written and blocks whose page is not in the mapping are skipped.

    Returns:
        The CSV text
    """
    columns = SITE_COLUMNS if page_slugs is not None else PAGE_COLUMNS
    rows = []

    for block in sorted(blocks, key=lambda b: b.position):
        prefix = []
        if page_slugs is not None:
            slug = page_slugs.get(block.page_id)
            if slug is None:
                logging.warning(f"Skipping block {block.id}: page {block.page_id} not exported")
                continue
            prefix = [slug]

        for field_name, value in block.content.items():
            rows.append(prefix + [
                block.block_type,
                block.block_key or "",
                str(block.position),
                field_name,
                stringify_value(value),
            ])

    return write_table(columns, rows)


def decode_rows(text: str) -> List[TabularRow]:
    """
    Parse exported CSV into typed rows.

    Column order comes from the header. Rows missing a block type or field
    name are dropped; an unparsable position becomes 0.
    """
    header, raw_rows = read_table(text)
    if not header:
        return []

    missing = [column for column in REQUIRED_COLUMNS if column not in header]
    if missing:
        logging.warning(f"CSV header lacks required columns: {missing}")
        return []

    has_page_slug = "page_slug" in header
    rows = []

    for raw in raw_rows:
        if not raw.get("block_type") or not raw.get("field_name"):
            logging.warning(f"Skipping CSV row without block type or field name: {raw}")
            continue
        rows.append(TabularRow(
            page_slug=raw.get("page_slug") if has_page_slug else None,
            block_type=raw["block_type"],
            block_key=raw.get("block_key") or None,
            position=parse_int(raw.get("position", "")),
            field_name=raw["field_name"],
            value=coerce_value(raw.get("value", "")),
        ))

    return rows


def group_rows(rows: List[TabularRow]) -> List[DecodedBlock]:
    """
    Group rows into blocks by (page_slug, block_type, block_key, position).

    Blocks come out in the order their first row was seen. A field repeated
    within a group keeps its last value.
    """
    groups: Dict[Tuple, DecodedBlock] = {}

    for row in rows:
        key = (row.page_slug, row.block_type, row.block_key, row.position)
        block = groups.get(key)
        if block is None:
            block = DecodedBlock(
                page_slug=row.page_slug,
                block_type=row.block_type,
                block_key=row.block_key,
                position=row.position,
            )
            groups[key] = block
        block.content[row.field_name] = row.value

    return list(groups.values())


def decode_blocks(text: str) -> List[DecodedBlock]:
    """Parse exported CSV straight into grouped blocks."""
    return group_rows(decode_rows(text))
