"""
Plain-text to grid helpers.

Extracted text has no column structure. These functions turn it into rows:
either one cell per line, or columns split on runs of two or more
whitespace characters (the usual gap between columns in a text layout).
"""

from __future__ import annotations

import re

from .models import Grid

COLUMN_GAP = re.compile(r"\s{2,}")


def _lines(text: str) -> list[str]:
    if not text:
        return []
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    return [line for line in normalized.split("\n") if line.strip()]


def split_lines(text: str) -> Grid:
    """One row per non-blank line, the line itself as the only cell."""
    return [[line] for line in _lines(text)]


def split_by_spaces(text: str) -> Grid:
    """
    Split each non-blank line into cells on 2+ consecutive whitespace chars.

    Cells that are blank after trimming are dropped, so leading and trailing
    gaps do not create empty columns. Cells are not trimmed otherwise.
    """
    rows: Grid = []
    for line in _lines(text):
        rows.append([cell for cell in COLUMN_GAP.split(line) if cell.strip()])
    return rows


def text_to_rows(text: str, split_columns: bool = False) -> Grid:
    return split_by_spaces(text) if split_columns else split_lines(text)
