"""
Range expansion: turns ``A1:B2`` into the cell ids it covers.
"""

from .coordinates import column_to_number, number_to_column, parse_cell_id, make_cell_id


def range_bounds(range_expr):
    """Return ``(min_col, min_row, max_col, max_row)`` for a range expression.

    The two corners may be given in any order; each axis is normalised
    independently. Column bounds are 1-based numbers.
    """
    parts = range_expr.split(":")
    if len(parts) == 1:
        parts = parts * 2
    if len(parts) != 2:
        raise ValueError(f"Invalid range expression: {range_expr!r}")

    col1, row1 = parse_cell_id(parts[0].strip())
    col2, row2 = parse_cell_id(parts[1].strip())
    ci1 = column_to_number(col1)
    ci2 = column_to_number(col2)
    return min(ci1, ci2), min(row1, row2), max(ci1, ci2), max(row1, row2)


def expand_range(range_expr):
    """Expand a range expression into cell ids, row-major.

    ``"B2:A1"`` -> ``["A1", "B1", "A2", "B2"]``. An expression without a
    colon is returned as a single-element list untouched.
    """
    if ":" not in range_expr:
        return [range_expr]

    min_col, min_row, max_col, max_row = range_bounds(range_expr)
    refs = []
    for r in range(min_row, max_row + 1):
        for c in range(min_col, max_col + 1):
            refs.append(make_cell_id(number_to_column(c), r))
    return refs
