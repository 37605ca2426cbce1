"""Catalog of the content block types an editor can add to a page."""

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple


@dataclass(frozen=True)
class BlockDefinition:
    """A block type with its label and the fields a new block starts with."""
    block_type: str
    label: str
    fields: Tuple[str, ...]


BLOCK_CATALOG: Dict[str, BlockDefinition] = {
    definition.block_type: definition
    for definition in (
        BlockDefinition("hero_stats", "Hero with Stats", (
            "stat1_title", "stat1_value", "stat2_title", "stat2_value",
            "stat3_title", "stat3_value", "stat4_title", "stat4_value",
        )),
        BlockDefinition("overview", "Overview Section", (
            "heading", "paragraph",
            "sidebar_title1", "sidebar_content1",
            "sidebar_title2", "sidebar_content2",
            "sidebar_title3", "sidebar_content3",
        )),
        BlockDefinition("departments", "Departments Grid", ("title", "items")),
        BlockDefinition("programs", "Programs List", ("title", "items")),
        BlockDefinition("research_centers", "Research Centers", ("title", "items")),
        BlockDefinition("alumni", "Alumni Section", ("title", "items")),
        BlockDefinition("hero", "Hero Banner", ("title", "subtitle", "image_url", "cta_text", "cta_link")),
        BlockDefinition("content", "Rich Content", ("body",)),
        BlockDefinition("features", "Features Grid", ("title", "items")),
        BlockDefinition("cta", "Call to Action", ("title", "subtitle", "button_text", "button_link")),
        BlockDefinition("custom_html", "Custom HTML/CSS", ("html", "css")),
    )
}


def list_block_types() -> List[str]:
    """Return the catalog's block types in declaration order."""
    return list(BLOCK_CATALOG)


def block_label(block_type: str) -> str:
    """Human readable label for a block type, or the type itself if unknown."""
    definition = BLOCK_CATALOG.get(block_type)
    return definition.label if definition else block_type


def default_content(block_type: str) -> Dict[str, Any]:
    """
    Build the empty content map of a new block.

    Raises:
        ValueError: If the block type is not in the catalog
    """
    definition = BLOCK_CATALOG.get(block_type)
    if definition is None:
        raise ValueError(f"Unknown block type: {block_type}")
    return {field: "" for field in definition.fields}
