"""
Output formatters — render a Sheet snapshot as Markdown or JSON.
"""

import json
import math

from .coordinates import column_to_number, make_cell_id, number_to_column, parse_cell_id
from .formula_functions import to_text
from .models import Sheet


def used_bounds(sheet: Sheet):
    """Return ``(max_col, max_row)`` of written cells, or ``(0, 0)`` for an empty sheet."""
    max_col = max_row = 0
    for cell_id in sheet.cells:
        col, row = parse_cell_id(cell_id)
        max_col = max(max_col, column_to_number(col))
        max_row = max(max_row, row)
    return max_col, max_row


# ---------------------------------------------------------------------------
# Markdown
# ---------------------------------------------------------------------------

def to_markdown(sheet: Sheet) -> str:
    """Render the grid from A1 to the last written cell as a markdown table."""
    max_col, max_row = used_bounds(sheet)
    if not max_col:
        return "_empty sheet_\n"

    columns = [number_to_column(c) for c in range(1, max_col + 1)]
    lines = ["|   | " + " | ".join(columns) + " |"]
    lines.append("| --- | " + " | ".join(["---"] * len(columns)) + " |")
    for r in range(1, max_row + 1):
        vals = []
        for col in columns:
            cell = sheet.cells.get(make_cell_id(col, r))
            text = to_text(cell.display_value) if cell is not None else ""
            vals.append(text.replace("|", "\\|"))
        lines.append(f"| {r} | " + " | ".join(vals) + " |")
    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------

def _json_safe(val):
    if isinstance(val, float) and not math.isfinite(val):
        return to_text(val)
    return val


def to_json(sheet: Sheet, indent: int = 2) -> str:
    """Dump cells, column widths and row heights as a JSON string."""

    def _sort_key(cell_id):
        col, row = parse_cell_id(cell_id)
        return row, column_to_number(col)

    cells = {}
    for cell_id in sorted(sheet.cells, key=_sort_key):
        data = sheet.cells[cell_id].to_dict()
        if "computed" in data:
            data["computed"] = _json_safe(data["computed"])
        cells[cell_id] = data

    payload = {
        "cells": cells,
        "column_widths": dict(sorted(sheet.column_widths.items(),
                                     key=lambda kv: column_to_number(kv[0]))),
        "row_heights": {str(k): v for k, v in sorted(sheet.row_heights.items())},
    }
    return json.dumps(payload, indent=indent)
