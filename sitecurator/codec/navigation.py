"""Navigation CSV codec for SiteCurator."""

import logging
from typing import List

from ..models import MenuLocation, NavigationItem
from .tabular import parse_bool, parse_int, read_table, write_table

NAVIGATION_COLUMNS = [
    "id", "title", "href", "parent_id", "position", "menu_location", "is_active", "icon",
]

_MENU_LOCATIONS = {location.value for location in MenuLocation}


def encode_navigation(items: List[NavigationItem]) -> str:
    """Export navigation items as CSV, one row per item, ordered by position."""
    rows = []
    for item in sorted(items, key=lambda i: i.position):
        rows.append([
            item.id or "",
            item.title,
            item.href or "",
            item.parent_id or "",
            str(item.position),
            item.menu_location,
            "true" if item.is_active else "false",
            item.icon or "",
        ])
    return write_table(NAVIGATION_COLUMNS, rows)


def decode_navigation(text: str) -> List[NavigationItem]:
    """
    Parse a navigation CSV export.

    Missing titles become "Untitled", empty links become None, and unknown
    menu locations fall back to the primary menu.
    """
    header, raw_rows = read_table(text)
    items = []

    for raw in raw_rows:
        location = raw.get("menu_location") or MenuLocation.PRIMARY.value
        if location not in _MENU_LOCATIONS:
            logging.warning(f"Unknown menu location '{location}', using primary")
            location = MenuLocation.PRIMARY.value

        items.append(NavigationItem(
            id=raw.get("id") or None,
            title=raw.get("title") or "Untitled",
            href=raw.get("href") or None,
            parent_id=raw.get("parent_id") or None,
            position=parse_int(raw.get("position", "")),
            menu_location=location,
            is_active=parse_bool(raw.get("is_active", "")),
            icon=raw.get("icon") or None,
        ))

    return items
