"""
Quoted CSV primitives shared by the SiteCurator codecs.

Every field is written inside double quotes, embedded double quotes are
doubled, fields are separated by commas and rows by newlines. Readers take
column order from the header row and accept quoted or unquoted fields.
"""

import csv
import io
import json
import logging
import sys
from typing import Any, Dict, Iterable, List, Sequence, Tuple


def _allow_large_fields() -> None:
    # Block bodies can exceed the csv module's default 128 KiB field limit
    limit = sys.maxsize
    while True:
        try:
            csv.field_size_limit(limit)
            return
        except OverflowError:
            limit //= 10


def stringify_value(value: Any) -> str:
    """
    Render a content value as a single CSV field.

    Strings are written as they are; numbers, booleans, None and nested
    structures are written as compact JSON.
    """
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"))


def coerce_value(text: str) -> Any:
    """
    Read a CSV field back into a content value.

    The field is parsed as JSON when possible and kept as the raw string
    otherwise. A string that happens to be valid JSON comes back typed:
    "123" becomes 123 and "true" becomes True.
    """
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return text


def parse_int(text: str, default: int = 0) -> int:
    """Parse an integer field, falling back to default."""
    try:
        return int(text.strip())
    except (ValueError, AttributeError):
        return default


def parse_bool(text: str) -> bool:
    """Only the exact literal "true" is true."""
    return text == "true"


def write_table(columns: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    """
    Serialize a header and data rows with every field quoted.

    Args:
        columns: Header names
        rows: Data rows, one value per column

    Returns:
        The CSV text, newline separated, without a trailing newline
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(columns)
    writer.writerows(rows)
    return buffer.getvalue().rstrip("\n")


def read_table(text: str) -> Tuple[List[str], List[Dict[str, str]]]:
    """
    Parse CSV text into a header and one column-to-field map per row.

    Blank lines are ignored. Rows the csv module cannot parse, and rows whose
    field count differs from the header, are dropped with a warning.

    Returns:
        (header, rows)
    """
    _allow_large_fields()
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    header: List[str] = []
    rows: List[Dict[str, str]] = []

    line_number = 0
    while True:
        line_number += 1
        try:
            tokens = next(reader)
        except StopIteration:
            break
        except csv.Error as e:
            logging.warning(f"Skipping unparsable CSV row {line_number}: {e}")
            continue

        if not tokens or all(not token.strip() for token in tokens):
            continue
        if not header:
            header = [token.strip() for token in tokens]
            continue
        if len(tokens) != len(header):
            logging.warning(
                f"Skipping CSV row {line_number}: expected {len(header)} fields, got {len(tokens)}"
            )
            continue
        rows.append(dict(zip(header, tokens)))

    return header, rows
