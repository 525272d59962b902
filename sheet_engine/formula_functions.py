"""
Formula Functions Module
========================
Implementations of the spreadsheet functions a formula can call.

Every function receives the already-resolved, flattened argument values
(strings from raw cell text, numbers from computed results, or literal
argument text). Numeric coercion follows the browser grid's rules: blank
text counts as 0, anything that is not a plain number is non-numeric.
"""

import math
import re

from .ranges import expand_range

_DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_HEX_PATTERN = re.compile(r"0[xX][0-9a-fA-F]+")
_INFINITY_PATTERN = re.compile(r"([+-]?)Infinity")

# Largest magnitude where every whole float is exactly an integer
MAX_SAFE_INTEGER = 2 ** 53 - 1


def _num(val):
    """Coerce a value to a number, or None when it is not numeric."""
    if isinstance(val, bool):
        return 1 if val else 0
    if isinstance(val, (int, float)):
        return None if isinstance(val, float) and math.isnan(val) else val
    if val is None:
        return 0
    text = str(val).strip()
    if not text:
        return 0
    if _DECIMAL_PATTERN.fullmatch(text):
        return float(text)
    if _HEX_PATTERN.fullmatch(text):
        return int(text, 16)
    m = _INFINITY_PATTERN.fullmatch(text)
    if m:
        return -math.inf if m.group(1) == "-" else math.inf
    return None


def to_text(val):
    """String form of a value, printing whole floats without a trailing .0."""
    if isinstance(val, float):
        if math.isinf(val):
            return "-Infinity" if val < 0 else "Infinity"
        if val.is_integer() and abs(val) <= MAX_SAFE_INTEGER:
            return str(int(val))
    return str(val)


def normalize_number(val):
    """Collapse whole floats in the safe-integer range to int so 5.0 reads as 5."""
    if (isinstance(val, float) and math.isfinite(val) and val.is_integer()
            and abs(val) <= MAX_SAFE_INTEGER):
        return int(val)
    return val


# ============================================================
# Math Functions
# ============================================================

def xl_sum(*args):
    """SUM function - non-numeric values count as 0."""
    total = 0
    for v in args:
        n = _num(v)
        total += n if n is not None else 0
    return total


def xl_average(*args):
    """AVERAGE function - non-numeric values are left out entirely."""
    nums = [n for n in (_num(v) for v in args) if n is not None]
    return sum(nums) / len(nums) if nums else 0


def xl_max(*args):
    """MAX function. Non-numeric values become -inf, so MAX("x") is -inf."""
    return max(n if n is not None else -math.inf for n in map(_num, args))


def xl_min(*args):
    """MIN function. Non-numeric values become +inf."""
    return min(n if n is not None else math.inf for n in map(_num, args))


def xl_count(*args):
    """COUNT function - count values that coerce to a number."""
    return sum(1 for v in args if _num(v) is not None)


# ============================================================
# Text Functions
# ============================================================

def xl_trim(*args):
    return to_text(args[0]).strip()


def xl_upper(*args):
    return to_text(args[0]).upper()


def xl_lower(*args):
    return to_text(args[0]).lower()


# ============================================================
# Range Functions (receive the raw range text, not resolved values)
# ============================================================

def xl_remove_duplicates(range_expr, cells):
    """Unique raw values of the cells in *range_expr*, joined with commas.

    Reads ``value`` rather than ``computed``; first occurrence wins.
    """
    values = []
    for ref in expand_range(range_expr.strip()):
        cell = cells.get(ref)
        values.append(cell.value if cell is not None else "")
    return ",".join(dict.fromkeys(values))


FORMULA_FUNCTIONS = {
    "SUM": xl_sum,
    "AVERAGE": xl_average,
    "MAX": xl_max,
    "MIN": xl_min,
    "COUNT": xl_count,
    "TRIM": xl_trim,
    "UPPER": xl_upper,
    "LOWER": xl_lower,
}

RANGE_FUNCTIONS = {
    "REMOVE_DUPLICATES": xl_remove_duplicates,
}
