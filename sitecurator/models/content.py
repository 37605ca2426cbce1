"""
Page and content block models for SiteCurator.

A page is an ordered collection of typed content blocks. Each block carries a
free-form content mapping whose values may be scalars or nested structures.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field


class PageStatus(str, Enum):
    """Publication state of a page."""

    DRAFT = "draft"
    PUBLISHED = "published"


class Page(BaseModel):
    """
    A CMS page, addressed by its unique slug.
    """

    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    id: Optional[str] = Field(
        None,
        description="Primary key, assigned by the record store"
    )

    slug: str = Field(
        ...,
        description="Canonical, unique URL path identifier"
    )

    title: str = Field(
        ...,
        description="Page title"
    )

    status: PageStatus = Field(
        PageStatus.DRAFT,
        description="Publication state"
    )

    description: Optional[str] = Field(
        None,
        description="Short description of the page"
    )

    page_type: str = Field(
        "standard",
        description="Layout family of the page"
    )

    template_id: Optional[str] = Field(
        None,
        description="Optional template the page was built from"
    )

    meta_title: Optional[str] = Field(
        None,
        description="SEO title"
    )

    meta_description: Optional[str] = Field(
        None,
        description="SEO description"
    )

    created_at: datetime = Field(
        default_factory=datetime.now,
        description="Creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.now,
        description="Last modification timestamp"
    )


class ContentBlock(BaseModel):
    """
    One typed, positioned unit of page content.

    Within a page, (block_type, block_key, position) acts as the block's
    effective identity when imported rows are matched. Nothing enforces
    its uniqueness.
    """

    id: Optional[str] = Field(
        None,
        description="Primary key, assigned by the record store"
    )

    page_id: str = Field(
        ...,
        description="Id of the owning page"
    )

    block_type: str = Field(
        ...,
        description="Block type from the block catalog"
    )

    block_key: Optional[str] = Field(
        None,
        description="Discriminates several blocks of the same type on one page"
    )

    position: int = Field(
        0,
        description="Order of the block within its page"
    )

    content: Dict[str, Any] = Field(
        default_factory=dict,
        description="Field name to value; values may be nested lists or records"
    )

    custom_css: Optional[str] = Field(
        None,
        description="Scoped style fragment for free-form blocks"
    )

    is_active: bool = Field(
        True,
        description="Whether the block is rendered"
    )
