"""CSV codecs for bulk export and import."""

from .tabular import coerce_value, stringify_value, read_table, write_table
from .content import (
    TabularRow,
    DecodedBlock,
    PAGE_COLUMNS,
    SITE_COLUMNS,
    encode_blocks,
    decode_rows,
    group_rows,
    decode_blocks,
)
from .navigation import NAVIGATION_COLUMNS, encode_navigation, decode_navigation

__all__ = [
    "coerce_value",
    "stringify_value",
    "read_table",
    "write_table",
    "TabularRow",
    "DecodedBlock",
    "PAGE_COLUMNS",
    "SITE_COLUMNS",
    "encode_blocks",
    "decode_rows",
    "group_rows",
    "decode_blocks",
    "NAVIGATION_COLUMNS",
    "encode_navigation",
    "decode_navigation"
]
