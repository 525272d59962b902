"""
Sheet Store Module
==================
Owns the current ``Sheet`` snapshot and implements every mutation on it:
cell writes (with formula recompute), structural row/column edits,
column/row sizing, formatting and find & replace.

Each operation builds new mappings and publishes a new ``Sheet`` in one
assignment, so a reader holding ``store.sheet`` always sees a complete
state. Formulas are recomputed only when their own cell is written; moved
cells keep their formula text and computed value as they were.
"""

import logging
import re
from dataclasses import replace

from .config import DEFAULT_CONFIG
from .coordinates import (
    column_to_number,
    make_cell_id,
    normalize_cell_id,
    number_to_column,
    parse_cell_id,
)
from .formula_evaluator import evaluate
from .models import Cell, CellFormat, Sheet
from .ranges import expand_range

logger = logging.getLogger(__name__)

_HEX_COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")


def _normalize_column(col):
    """Accept column letters (any case) or a 1-based number; return letters."""
    if isinstance(col, int):
        return number_to_column(col)
    letters = str(col).strip().upper()
    column_to_number(letters)
    return letters


def _validate_format(cell_format):
    size = cell_format.font_size
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise ValueError(f"Font size must be a positive integer, got {size!r}")
    if not isinstance(cell_format.color, str) or not _HEX_COLOR_PATTERN.match(cell_format.color):
        raise ValueError(f"Color must be a #RRGGBB hex string, got {cell_format.color!r}")


def _axis_position(cell_id, axis):
    col, row = parse_cell_id(cell_id)
    return row if axis == "row" else column_to_number(col)


def _shifted_id(cell_id, axis, delta):
    col, row = parse_cell_id(cell_id)
    if axis == "row":
        return make_cell_id(col, row + delta)
    return make_cell_id(number_to_column(column_to_number(col) + delta), row)


def shift_cells(cells, axis, after, delta, removed=None):
    """Return a copy of *cells* with every cell past *after* moved by *delta*.

    Cells whose position on *axis* equals *removed* are dropped. Moves run
    away from the gap (highest first when inserting, lowest first when
    deleting) so a cell never lands on a slot that is still occupied.
    """
    new_cells = dict(cells)
    candidates = [
        cid for cid in cells
        if _axis_position(cid, axis) > after or _axis_position(cid, axis) == removed
    ]
    candidates.sort(key=lambda cid: _axis_position(cid, axis), reverse=delta > 0)

    for cid in candidates:
        cell = new_cells.pop(cid)
        if _axis_position(cid, axis) == removed:
            continue
        new_id = _shifted_id(cid, axis, delta)
        new_cells[new_id] = cell.moved_to(new_id)
    return new_cells


class SheetStore:
    """Holds the spreadsheet state and applies edits to it."""

    def __init__(self, config=None, sheet=None):
        self.config = dict(DEFAULT_CONFIG)
        if config:
            self.config.update(config)
        self.default_format = CellFormat(
            font_size=self.config["default_font_size"],
            color=self.config["default_color"],
        )
        _validate_format(self.default_format)
        self._sheet = sheet if sheet is not None else Sheet()

    @property
    def sheet(self):
        """The current snapshot. Never mutated after it is published."""
        return self._sheet

    @property
    def cells(self):
        return self._sheet.cells

    def _publish(self, **changes):
        self._sheet = replace(self._sheet, **changes)

    # ------------------------------------------------------------------
    # Cell reads and writes
    # ------------------------------------------------------------------

    def get_cell(self, cell_id):
        """The stored cell, or a blank default cell if it was never written."""
        cell_id = normalize_cell_id(cell_id)
        cell = self._sheet.cells.get(cell_id)
        if cell is None:
            return Cell.blank(cell_id, self.default_format)
        return cell

    def display_value(self, cell_id):
        return self.get_cell(cell_id).display_value

    def _build_cell(self, cells, cell_id, value=None, formula=None, format=None):
        """Merge an update into the cell at *cell_id* and recompute it against *cells*."""
        cell = cells.get(cell_id) or Cell.blank(cell_id, self.default_format)
        changes = {}
        if value is not None:
            changes["value"] = value
            if formula is None:
                formula = value if value.startswith("=") else ""
        if formula is not None:
            changes["formula"] = formula
        if format is not None:
            changes["format"] = cell.format.merged(format)
            _validate_format(changes["format"])

        updated = replace(cell, **changes)
        if updated.formula:
            computed = evaluate(updated.formula, cells)
        else:
            computed = None
        return replace(updated, computed=computed)

    def update_cell(self, cell_id, value=None, formula=None, format=None):
        """Write to a cell and return the stored result.

        Only the arguments that are given change. Giving ``value`` without
        ``formula`` sets the formula from the value (the value itself when it
        starts with ``=``, otherwise empty). A formula is evaluated against
        the sheet as it was before this write.
        """
        cell_id = normalize_cell_id(cell_id)
        cells = self._sheet.cells
        new_cells = dict(cells)
        new_cells[cell_id] = self._build_cell(cells, cell_id, value, formula, format)
        self._publish(cells=new_cells)
        logger.debug(f"Updated {cell_id}: {new_cells[cell_id]}")
        return new_cells[cell_id]

    # ------------------------------------------------------------------
    # Structural edits
    # ------------------------------------------------------------------

    def insert_row(self, after_row):
        """Insert an empty row below *after_row* (0 inserts above row 1)."""
        if after_row < 0:
            raise ValueError(f"Row must be >= 0, got {after_row}")
        self._publish(cells=shift_cells(self._sheet.cells, "row", after_row, 1))
        logger.info(f"Inserted row after {after_row}")

    def delete_row(self, row):
        """Delete *row* and move the rows below it up by one."""
        if row < 1:
            raise ValueError(f"Row must be >= 1, got {row}")
        self._publish(cells=shift_cells(self._sheet.cells, "row", row, -1, removed=row))
        logger.info(f"Deleted row {row}")

    def insert_column(self, after_col):
        """Insert an empty column right of *after_col* (letters or number; 0 inserts before A)."""
        after = 0 if after_col == 0 else column_to_number(_normalize_column(after_col))
        self._publish(cells=shift_cells(self._sheet.cells, "column", after, 1))
        logger.info(f"Inserted column after {after_col}")

    def delete_column(self, col):
        """Delete column *col* and move the columns right of it left by one."""
        index = column_to_number(_normalize_column(col))
        self._publish(cells=shift_cells(self._sheet.cells, "column", index, -1, removed=index))
        logger.info(f"Deleted column {col}")

    # ------------------------------------------------------------------
    # Column widths / row heights
    # ------------------------------------------------------------------

    def column_width(self, col):
        return self._sheet.column_widths.get(
            _normalize_column(col), self.config["default_column_width"])

    def row_height(self, row):
        return self._sheet.row_heights.get(row, self.config["default_row_height"])

    def set_column_width(self, col, width):
        col = _normalize_column(col)
        width = max(self.config["min_column_width"], width)
        self._publish(column_widths={**self._sheet.column_widths, col: width})
        return width

    def set_row_height(self, row, height):
        if row < 1:
            raise ValueError(f"Row must be >= 1, got {row}")
        height = max(self.config["min_row_height"], height)
        self._publish(row_heights={**self._sheet.row_heights, row: height})
        return height

    def resize_column(self, col, delta):
        """Apply a drag of *delta* pixels to a column's current width."""
        return self.set_column_width(col, self.column_width(col) + delta)

    def resize_row(self, row, delta):
        return self.set_row_height(row, self.row_height(row) + delta)

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def _format_existing(self, cell_id, **fields):
        # Formatting applies to written cells only; blank cells are left alone.
        cell_id = normalize_cell_id(cell_id)
        if cell_id not in self._sheet.cells:
            logger.debug(f"Ignoring format change on empty cell {cell_id}")
            return None
        return self.update_cell(cell_id, format=fields)

    def toggle_bold(self, cell_id):
        return self._format_existing(cell_id, bold=not self.get_cell(cell_id).format.bold)

    def toggle_italic(self, cell_id):
        return self._format_existing(cell_id, italic=not self.get_cell(cell_id).format.italic)

    def set_font_size(self, cell_id, size):
        return self._format_existing(cell_id, font_size=size)

    def set_color(self, cell_id, color):
        return self._format_existing(cell_id, color=color)

    # ------------------------------------------------------------------
    # Find & replace
    # ------------------------------------------------------------------

    def find_replace(self, range_expr, find_text, replace_text):
        """Replace *find_text* in the value and formula of written cells in a range.

        Cells are rewritten in range order, each one evaluated against the
        rewrites before it; the result is published once. Returns the ids of
        the changed cells.
        """
        if not find_text:
            return []

        cells = dict(self._sheet.cells)
        changed = []
        for ref in expand_range(range_expr.strip().upper()):
            cell = cells.get(ref)
            if cell is None or find_text not in cell.value:
                continue
            cells[ref] = self._build_cell(
                cells, ref,
                value=cell.value.replace(find_text, replace_text),
                formula=cell.formula.replace(find_text, replace_text),
            )
            changed.append(ref)

        if changed:
            self._publish(cells=cells)
            logger.info(f"Replaced {find_text!r} with {replace_text!r} in {len(changed)} cells")
        return changed
