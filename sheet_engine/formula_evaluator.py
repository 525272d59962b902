"""
Formula Evaluator Module
========================
Evaluates a formula string such as ``=SUM(A1:A3)`` against a mapping of
cell id -> Cell.

Evaluation is a single pass: referenced cells are read as they are stored
(``computed`` first, then ``value``) and never re-evaluated, so a result
can be stale when the cells it reads have changed since they were last
written. Faults never raise; they come back as the ``#ERROR!`` or
``#NAME?`` sentinels.
"""

import logging
import math
import re

from .formula_functions import FORMULA_FUNCTIONS, RANGE_FUNCTIONS, normalize_number
from .ranges import expand_range

logger = logging.getLogger(__name__)

ERROR = "#ERROR!"
NAME_ERROR = "#NAME?"

# =NAME(args) where the parenthesised list runs to the end of the formula
FUNCTION_CALL_PATTERN = re.compile(r"=([A-Z_]+)\((.*)\)")

# =A1
CELL_REF_FORMULA_PATTERN = re.compile(r"=([A-Z]+[0-9]+)")


def _cell_content(cells, ref):
    """The value a reference resolves to: computed, else value, else ''."""
    cell = cells.get(ref)
    if cell is None:
        return ""
    if cell.computed is not None:
        return cell.computed
    return cell.value


def split_arguments(args_str):
    """Split the text between the parentheses into argument pieces.

    Text containing a colon is a single range expression; otherwise the
    pieces are comma separated and stripped.
    """
    if ":" in args_str:
        return [args_str]
    return [arg.strip() for arg in args_str.split(",")]


def resolve_arguments(args, cells):
    """Replace references with cell contents and flatten ranges."""
    resolved = []
    for arg in args:
        if ":" in arg:
            resolved.extend(_cell_content(cells, ref) for ref in expand_range(arg))
        elif arg in cells:
            resolved.append(_cell_content(cells, arg))
        else:
            resolved.append(arg)
    return resolved


def evaluate(formula, cells):
    """Evaluate *formula* against *cells* and return a number or string.

    Text that does not start with ``=`` is returned unchanged.
    """
    if not formula.startswith("="):
        return formula

    m = FUNCTION_CALL_PATTERN.fullmatch(formula)
    if not m:
        ref = CELL_REF_FORMULA_PATTERN.fullmatch(formula)
        if ref:
            return _cell_content(cells, ref.group(1))
        logger.debug(f"Malformed formula: {formula!r}")
        return ERROR

    func_name, args_str = m.group(1), m.group(2)

    try:
        if func_name in RANGE_FUNCTIONS:
            return RANGE_FUNCTIONS[func_name](args_str, cells)

        func = FORMULA_FUNCTIONS.get(func_name)
        if func is None:
            logger.debug(f"Unknown function {func_name} in {formula!r}")
            return NAME_ERROR

        result = func(*resolve_arguments(split_arguments(args_str), cells))
    except (ArithmeticError, TypeError, ValueError) as e:
        logger.debug(f"Evaluation of {formula!r} failed: {e}")
        return ERROR

    if isinstance(result, float) and math.isnan(result):
        logger.debug(f"Evaluation of {formula!r} produced NaN")
        return ERROR
    return normalize_number(result)
