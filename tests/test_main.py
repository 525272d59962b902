"""Tests for configuration loading, formatters and the CLI."""

import json
import os
import sys
import tempfile
import unittest

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from sheet_engine.config import load_config
from sheet_engine.formatters import to_json, to_markdown, used_bounds
from sheet_engine.main import apply_operation, main, run_script
from sheet_engine.store import SheetStore


SCRIPT = """\
- update: {cell: A1, value: 2}
- update: {cell: A2, value: "3"}
- update: {cell: B1, value: "=SUM(A1:A2)"}
- toggle_bold: B1
- set_column_width: {column: B, width: 20}
- insert_row: 0
"""


class TestLoadConfig(unittest.TestCase):
    def test_default_config(self):
        config = load_config(None)
        self.assertEqual(config["default_column_width"], 100)
        self.assertEqual(config["min_row_height"], 20)
        self.assertEqual(config["log_level"], "INFO")

    def test_missing_file_gives_defaults(self):
        config = load_config("/nonexistent/config.yaml")
        self.assertEqual(config["default_font_size"], 12)

    def test_custom_config(self):
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write("default_column_width: 120\nlog_level: DEBUG\n")
            f.flush()
            config = load_config(f.name)
        self.assertEqual(config["default_column_width"], 120)
        self.assertEqual(config["log_level"], "DEBUG")
        self.assertEqual(config["min_column_width"], 50)
        os.unlink(f.name)

    def test_unknown_key_rejected(self):
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write("colour: blue\n")
            f.flush()
            with self.assertRaises(ValueError):
                load_config(f.name)
        os.unlink(f.name)


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------

class TestFormatters:
    def test_empty_sheet(self):
        store = SheetStore()
        assert used_bounds(store.sheet) == (0, 0)
        assert to_markdown(store.sheet) == "_empty sheet_\n"

    def test_markdown_grid(self):
        store = SheetStore()
        store.update_cell("A1", value="1")
        store.update_cell("B2", value="=SUM(A1,4)")
        lines = to_markdown(store.sheet).splitlines()
        assert lines[0] == "|   | A | B |"
        assert lines[2] == "| 1 | 1 |  |"
        assert lines[3] == "| 2 |  | 5 |"

    def test_markdown_infinity(self):
        store = SheetStore()
        store.update_cell("A1", value="=MAX(x)")
        assert "-Infinity" in to_markdown(store.sheet)

    def test_json(self):
        store = SheetStore()
        store.update_cell("B1", value="=MIN(x)")
        store.update_cell("A1", value="x", format={"bold": True})
        store.set_row_height(1, 30)
        data = json.loads(to_json(store.sheet))
        assert list(data["cells"]) == ["A1", "B1"]
        assert data["cells"]["A1"]["format"]["bold"] is True
        assert "computed" not in data["cells"]["A1"]
        assert data["cells"]["B1"]["computed"] == "Infinity"
        assert data["row_heights"] == {"1": 30}


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

@pytest.fixture
def script_path(tmp_path):
    path = tmp_path / "edits.yaml"
    path.write_text(SCRIPT)
    return str(path)


class TestRunScript:
    def test_replays_operations(self, script_path):
        sheet = run_script(script_path, SheetStore())
        assert sheet.cells["A2"].value == "2"
        assert sheet.cells["B2"].computed == 5
        assert sheet.cells["B2"].format.bold is True
        assert sheet.column_widths == {"B": 50}

    def test_unknown_operation(self):
        with pytest.raises(ValueError):
            apply_operation(SheetStore(), {"explode": "A1"})

    def test_operation_shape(self):
        with pytest.raises(ValueError):
            apply_operation(SheetStore(), {"insert_row": 1, "delete_row": 2})

    def test_find_replace_operation(self):
        store = SheetStore()
        apply_operation(store, {"update": {"cell": "A1", "value": "abc"}})
        apply_operation(store, {"find_replace": {"range": "a1:a2", "find": "b", "replace": "B"}})
        assert store.get_cell("A1").value == "aBc"


class TestMain:
    def test_eval(self, capsys):
        code = main(["--config", "", "eval", "=AVERAGE(A1:A3)",
                     "--cell", "A1=1", "--cell", "A2=x", "--cell", "A3=3"])
        assert code == 0
        assert capsys.readouterr().out.strip() == "2"

    def test_eval_name_error(self, capsys):
        assert main(["--config", "", "eval", "=NOPE(A1)"]) == 0
        assert capsys.readouterr().out.strip() == "#NAME?"

    def test_eval_bad_cell_arg(self):
        assert main(["--config", "", "eval", "=A1", "--cell", "A1"]) == 1

    def test_run_markdown(self, script_path, capsys):
        assert main(["--config", "", "run", script_path]) == 0
        out = capsys.readouterr().out
        assert "| 2 | 2 | 5 |" in out

    def test_run_json(self, script_path, capsys):
        assert main(["--config", "", "run", script_path, "--format", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["cells"]["B2"]["computed"] == 5

    def test_run_missing_script(self, tmp_path):
        assert main(["--config", "", "run", str(tmp_path / "missing.yaml")]) == 1
