"""
Coordinate Codec
================
Converts between column letters and 1-based column numbers, and between
``(column, row)`` pairs and cell identifiers such as ``B12``.

Column letters use bijective base-26: ``A`` = 1 ... ``Z`` = 26, ``AA`` = 27.
There is no zero digit, so every positive integer has exactly one spelling.
"""

import re

# Wire format for a cell identifier: uppercase letters then a row number
# without leading zeros.
CELL_ID_PATTERN = re.compile(r"([A-Z]+)([1-9][0-9]*)")

# Looser split used by parse_cell_id (letters then digits).
_CELL_PARTS_PATTERN = re.compile(r"([A-Z]+)([0-9]+)")


def column_to_number(letters):
    """Convert column letter(s) to 1-based index. A=1, B=2, ..., Z=26, AA=27."""
    if not letters:
        raise ValueError("Column letters must not be empty")
    result = 0
    for char in letters:
        if not "A" <= char <= "Z":
            raise ValueError(f"Invalid column letters: {letters!r}")
        result = result * 26 + (ord(char) - ord("A") + 1)
    return result


def number_to_column(index):
    """Convert 1-based column index to letter(s). 1=A, 2=B, ..., 26=Z, 27=AA."""
    if index < 1:
        raise ValueError(f"Column number must be >= 1, got {index}")
    result = ""
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        result = chr(ord("A") + remainder) + result
    return result


def parse_cell_id(cell_id):
    """Split ``"B12"`` into ``("B", 12)``."""
    m = _CELL_PARTS_PATTERN.fullmatch(cell_id)
    if not m:
        raise ValueError(f"Invalid cell id: {cell_id!r}")
    return m.group(1), int(m.group(2))


def make_cell_id(column, row):
    """Join column letters and a row number into a cell id."""
    return f"{column}{row}"


def is_cell_id(text):
    """Return True if *text* is a well-formed (uppercase) cell id."""
    return isinstance(text, str) and CELL_ID_PATTERN.fullmatch(text) is not None


def normalize_cell_id(cell_id):
    """Uppercase and validate a user-supplied cell id (``b12`` -> ``B12``)."""
    normalized = str(cell_id).strip().upper()
    if not is_cell_id(normalized):
        raise ValueError(f"Invalid cell id: {cell_id!r}")
    return normalized
