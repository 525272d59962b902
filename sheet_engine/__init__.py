"""Sheet Engine.

The calculation core behind a browser spreadsheet editor:

  * **coordinates** – column letters <-> numbers, ``(column, row)`` <-> ``B12``.
  * **ranges** – expands ``A1:B2`` into the cell ids it covers.
  * **formula_evaluator** – evaluates ``=SUM(A1:A3)``-style formulas against
    the stored cells, returning ``#ERROR!`` / ``#NAME?`` instead of raising.
  * **store** – :class:`SheetStore`, which owns the sheet and applies cell
    writes, row/column inserts and deletes, sizing and formatting.

A formula is recomputed only when its own cell is written; there is no
dependency graph, and structural edits do not rewrite formula text.
"""

from .coordinates import (
    column_to_number,
    number_to_column,
    parse_cell_id,
    make_cell_id,
    normalize_cell_id,
)
from .ranges import expand_range
from .formula_evaluator import evaluate, ERROR, NAME_ERROR
from .models import Cell, CellFormat, Sheet
from .store import SheetStore

__all__ = [
    "column_to_number",
    "number_to_column",
    "parse_cell_id",
    "make_cell_id",
    "normalize_cell_id",
    "expand_range",
    "evaluate",
    "ERROR",
    "NAME_ERROR",
    "Cell",
    "CellFormat",
    "Sheet",
    "SheetStore",
]
