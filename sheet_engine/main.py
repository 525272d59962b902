#!/usr/bin/env python
"""
Sheet Engine – CLI entry point.

Usage:
    # Evaluate a single formula against a few cells
    python -m sheet_engine.main eval "=SUM(A1:A3)" --cell A1=1 --cell A2=x --cell A3=3

    # Replay a YAML script of edits and print the resulting sheet
    python -m sheet_engine.main run edits.yaml [--format markdown|json] [--config config.yaml]

A script is a YAML list of single-key mappings, one per edit:

    - update: {cell: A1, value: "5"}
    - update: {cell: A2, value: "=SUM(A1,10)"}
    - insert_row: 1
    - delete_column: B
    - set_column_width: {column: A, width: 80}
    - toggle_bold: A2
    - find_replace: {range: "A1:C5", find: "x", replace: "y"}
"""

import argparse
import logging
import os
import sys

import yaml

from sheet_engine.config import load_config
from sheet_engine.formatters import to_json, to_markdown
from sheet_engine.formula_evaluator import evaluate
from sheet_engine.store import SheetStore

logger = logging.getLogger(__name__)


def setup_logging(level_str: str = "INFO"):
    """Configure logging."""
    level = getattr(logging, level_str.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )


def _text(val):
    return "" if val is None else str(val)


def apply_operation(store: SheetStore, operation: dict):
    """Apply one script entry (a single-key mapping) to *store*."""
    if not isinstance(operation, dict) or len(operation) != 1:
        raise ValueError(f"Each operation must be a single-key mapping, got {operation!r}")

    (name, args), = operation.items()

    if name == "update":
        fmt = args.get("format")
        store.update_cell(
            args["cell"],
            value=_text(args["value"]) if "value" in args else None,
            formula=_text(args["formula"]) if "formula" in args else None,
            format=fmt,
        )
    elif name == "insert_row":
        store.insert_row(int(args))
    elif name == "delete_row":
        store.delete_row(int(args))
    elif name == "insert_column":
        store.insert_column(args)
    elif name == "delete_column":
        store.delete_column(args)
    elif name == "set_column_width":
        store.set_column_width(args["column"], args["width"])
    elif name == "set_row_height":
        store.set_row_height(int(args["row"]), args["height"])
    elif name == "toggle_bold":
        store.toggle_bold(args)
    elif name == "toggle_italic":
        store.toggle_italic(args)
    elif name == "set_font_size":
        store.set_font_size(args["cell"], args["size"])
    elif name == "set_color":
        store.set_color(args["cell"], args["color"])
    elif name == "find_replace":
        store.find_replace(args["range"], _text(args["find"]), _text(args["replace"]))
    else:
        raise ValueError(f"Unknown operation: {name!r}")


def run_script(script_path: str, store: SheetStore):
    """Apply every operation in a YAML script to *store* and return its sheet."""
    with open(script_path, "r") as f:
        operations = yaml.safe_load(f) or []
    if not isinstance(operations, list):
        raise ValueError("A script must be a YAML list of operations")

    for i, operation in enumerate(operations, start=1):
        logger.debug(f"Step {i}: {operation}")
        apply_operation(store, operation)
    logger.info(f"Applied {len(operations)} operations, {len(store.cells)} cells written")
    return store.sheet


def _parse_cell_args(cell_args):
    store = SheetStore()
    for item in cell_args or []:
        cell_id, sep, value = item.partition("=")
        if not sep:
            raise ValueError(f"Expected ID=VALUE, got {item!r}")
        store.update_cell(cell_id, value=value)
    return store


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Evaluate formulas and replay edits with the sheet engine"
    )
    parser.add_argument("--config", default="config.yaml",
                        help="Path to config YAML file (default: config.yaml)")
    parser.add_argument("--log-level", default=None,
                        help="Logging level: DEBUG, INFO, WARNING, ERROR")
    sub = parser.add_subparsers(dest="command", required=True)

    # ---- eval ----
    p_eval = sub.add_parser("eval", help="Evaluate one formula")
    p_eval.add_argument("formula", help='Formula text, e.g. "=SUM(A1,A2)"')
    p_eval.add_argument(
        "--cell", action="append", default=[],
        help="Cell content as ID=VALUE (repeatable; written in the order given)",
    )

    # ---- run ----
    p_run = sub.add_parser("run", help="Replay a YAML script of edits")
    p_run.add_argument("script", help="Path to the YAML script")
    p_run.add_argument("--format", choices=("markdown", "json"), default="markdown",
                       help="Output format (default: markdown)")

    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(args.log_level or config["log_level"])

    try:
        if args.command == "eval":
            store = _parse_cell_args(args.cell)
            print(evaluate(args.formula, store.cells))
        else:
            if not os.path.exists(args.script):
                logger.error(f"Script not found: {args.script}")
                return 1
            sheet = run_script(args.script, SheetStore(config))
            if args.format == "json":
                print(to_json(sheet))
            else:
                print(to_markdown(sheet), end="")
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
