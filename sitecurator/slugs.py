"""
Slug derivation for SiteCurator.

A navigation item's page is identified by a slug computed from the item's
link, or from its title when the link is not a site path. These functions
are pure: the same inputs always give the same slug.
"""

import re
from typing import Optional

PAGE_PREFIX = "/page/"

_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9]+")
_WHITESPACE = re.compile(r"\s+")


def is_external(href: Optional[str]) -> bool:
    """Whether a link points outside the site. No page is ever mirrored for it."""
    return bool(href) and href.startswith("http")


def generate_slug(title: str) -> str:
    """
    Build a slug from a title.

    Examples:
        generate_slug("School of Arts")  # "school-of-arts"
        generate_slug("  R&D / Labs!")   # "r-d-labs"
    """
    return _NON_ALPHANUMERIC.sub("-", title.lower()).strip("-")


def derive_slug(href: Optional[str], title: str) -> Optional[str]:
    """
    Derive the slug of the page mirrored by a navigation item.

    Args:
        href: The item's link, may be None
        title: The item's title, used when the link is not a site path

    Returns:
        The slug, or None for external links
    """
    if is_external(href):
        return None
    if href and href.startswith(PAGE_PREFIX):
        return href[len(PAGE_PREFIX):]
    if href and href.startswith("/"):
        return href[1:]
    return generate_slug(title)


def normalize_page_slug(slug: str) -> str:
    """Normalize a slug typed into the page form: lowercase, spaces to hyphens."""
    return _WHITESPACE.sub("-", slug.strip().lower())
