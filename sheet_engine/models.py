"""
Sheet data model.

Cells and formats are immutable; the store replaces them rather than
editing them in place, so a ``Sheet`` snapshot handed to a reader never
changes underneath it.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Union

DEFAULT_FONT_SIZE = 12
DEFAULT_COLOR = "#000000"
DEFAULT_COLUMN_WIDTH = 100
MIN_COLUMN_WIDTH = 50
DEFAULT_ROW_HEIGHT = 24
MIN_ROW_HEIGHT = 20

ComputedValue = Union[int, float, str]


@dataclass(frozen=True)
class CellFormat:
    """Per-cell text formatting."""
    bold: bool = False
    italic: bool = False
    font_size: int = DEFAULT_FONT_SIZE
    color: str = DEFAULT_COLOR

    def merged(self, updates):
        """Return a copy with the fields in *updates* (dict or CellFormat) applied."""
        if isinstance(updates, CellFormat):
            return updates
        unknown = set(updates) - {"bold", "italic", "font_size", "color"}
        if unknown:
            raise ValueError(f"Unknown format fields: {sorted(unknown)}")
        return replace(self, **updates)

    def to_dict(self):
        return {
            "bold": self.bold,
            "italic": self.italic,
            "font_size": self.font_size,
            "color": self.color,
        }


@dataclass(frozen=True)
class Cell:
    """A single written cell.

    ``formula`` is non-empty only when ``value`` is a formula (starts with
    ``=``). ``computed`` holds the result of the last evaluation of that
    formula and is ``None`` for plain cells.
    """
    id: str
    value: str = ""
    formula: str = ""
    format: CellFormat = field(default_factory=CellFormat)
    computed: Optional[ComputedValue] = None

    @classmethod
    def blank(cls, cell_id, cell_format=None):
        return cls(id=cell_id, format=cell_format or CellFormat())

    @property
    def display_value(self):
        """What the grid shows: the computed result, else the raw value."""
        if self.computed is not None:
            return self.computed
        return self.value

    def moved_to(self, new_id):
        return replace(self, id=new_id)

    def to_dict(self):
        data = {
            "value": self.value,
            "formula": self.formula,
            "format": self.format.to_dict(),
        }
        if self.computed is not None:
            data["computed"] = self.computed
        return data


@dataclass(frozen=True)
class Sheet:
    """One consistent snapshot of the spreadsheet.

    cells: cell id -> Cell, only for cells that have been written.
    column_widths: column letters -> width in pixels.
    row_heights: row number -> height in pixels.
    """
    cells: dict = field(default_factory=dict)
    column_widths: dict = field(default_factory=dict)
    row_heights: dict = field(default_factory=dict)
