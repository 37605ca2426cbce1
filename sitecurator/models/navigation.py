"""
Navigation models for SiteCurator.

This module defines the menu entries that make up the site navigation tree.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class MenuLocation(str, Enum):
    """Menus a navigation item can be placed in."""

    PRIMARY = "primary"
    FOOTER = "footer"
    SIDEBAR = "sidebar"


class NavigationItem(BaseModel):
    """
    One entry of the site navigation.

    The parent link is owned by the tree: an item only stores the id of its
    parent, never the parent itself.
    """

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    id: Optional[str] = Field(
        None,
        description="Primary key, assigned by the record store"
    )

    parent_id: Optional[str] = Field(
        None,
        description="Id of the parent navigation item, None for root items"
    )

    title: str = Field(
        ...,
        description="Display title of the menu entry"
    )

    href: Optional[str] = Field(
        None,
        description="Internal path (/about, /page/contact), external URL, or None"
    )

    position: int = Field(
        0,
        description="Sort order among siblings"
    )

    is_active: bool = Field(
        True,
        description="Whether the entry is visible"
    )

    menu_location: MenuLocation = Field(
        MenuLocation.PRIMARY,
        description="Menu the entry belongs to"
    )

    icon: Optional[str] = Field(
        None,
        description="Symbolic icon name"
    )
