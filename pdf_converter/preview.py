from __future__ import annotations

from .models import Grid, Preview

DEFAULT_PREVIEW_ROWS = 50


def build_preview(rows: Grid, limit: int = DEFAULT_PREVIEW_ROWS) -> Preview:
    """First `limit` rows of a grid, with the note shown under a cut-off table."""
    if limit < 1:
        raise ValueError(f"Preview limit must be positive, got {limit}")

    total = len(rows)
    truncated = total > limit
    message = f"Showing first {limit} rows of {total} total rows" if truncated else ""
    return Preview(
        rows=[list(row) for row in rows[:limit]],
        total_rows=total,
        truncated=truncated,
        message=message,
    )
