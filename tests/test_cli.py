"""
E2E tests for the CLI interface using Click's CliRunner.
"""

import json

import pytest
from click.testing import CliRunner

from notebook_fill.cli import main
from notebook_fill.notebook import Notebook


@pytest.fixture
def notebook_path(tmp_path, make_notebook):
    path = tmp_path / "analysis.ipynb"
    make_notebook(
        ("markdown", "# Analysis"),
        ("code", "total = 2 + 3\nprint(total)"),
        ("code", "print(total * 2)"),
    ).save(path)
    return path


class TestRunCommand:
    """Test `notebook-fill run` end-to-end."""

    def test_run_in_place(self, tmp_path, notebook_path):
        result = CliRunner().invoke(
            main, ["run", str(notebook_path), "--temp-dir", str(tmp_path / "figures")]
        )

        assert result.exit_code == 0, result.output
        nb = Notebook.load(notebook_path)
        assert nb.cells[1].outputs[0]["text"] == ["5\n"]
        assert nb.cells[2].outputs[0]["text"] == ["10\n"]
        assert "Ran 2 code cell(s)" in result.output

    def test_run_to_output_file(self, tmp_path, notebook_path):
        before = notebook_path.read_text()
        out = tmp_path / "filled.ipynb"

        result = CliRunner().invoke(
            main,
            ["run", str(notebook_path), "-o", str(out), "--temp-dir", str(tmp_path / "figures")],
        )

        assert result.exit_code == 0, result.output
        assert notebook_path.read_text() == before
        saved = json.loads(out.read_text())
        assert saved["cells"][1]["outputs"][0]["text"] == ["5\n"]

    def test_run_selected_cells(self, tmp_path, notebook_path):
        result = CliRunner().invoke(
            main,
            ["run", str(notebook_path), "-c", "3", "--temp-dir", str(tmp_path / "figures")],
        )

        assert result.exit_code == 0, result.output
        nb = Notebook.load(notebook_path)
        assert nb.cells[1].outputs == []
        assert nb.cells[2].outputs[0]["name"] == "stderr"

    def test_invalid_cell_index(self, tmp_path, notebook_path):
        result = CliRunner().invoke(
            main,
            ["run", str(notebook_path), "-c", "9", "--temp-dir", str(tmp_path / "figures")],
        )

        assert result.exit_code == 1
        assert "out of range" in result.output

    def test_invalid_notebook(self, tmp_path):
        path = tmp_path / "broken.ipynb"
        path.write_text(json.dumps({"cells": []}))

        result = CliRunner().invoke(main, ["run", str(path)])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_existing_temp_dir(self, tmp_path, make_notebook):
        path = tmp_path / "plot.ipynb"
        make_notebook(("code", "import matplotlib.pyplot as plt\nplt.plot([1, 2]);")).save(path)
        scratch = tmp_path / "figures"
        scratch.mkdir()

        result = CliRunner().invoke(main, ["run", str(path), "--temp-dir", str(scratch)])

        assert result.exit_code == 1
        assert "remove it manually" in " ".join(result.output.split())


class TestScriptCommand:

    def test_script(self, tmp_path, notebook_path):
        out = tmp_path / "analysis.py"

        result = CliRunner().invoke(main, ["script", str(notebook_path), str(out)])

        assert result.exit_code == 0, result.output
        assert out.read_text() == "# # Analysis\n\ntotal = 2 + 3\nprint(total)\n\nprint(total * 2)\n"


class TestShowCommand:

    def test_show(self, notebook_path):
        result = CliRunner().invoke(main, ["show", str(notebook_path)])

        assert result.exit_code == 0, result.output
        assert "In [2]" in result.output
        assert "total" in result.output

    def test_show_missing_file(self, tmp_path):
        result = CliRunner().invoke(main, ["show", str(tmp_path / "missing.ipynb")])

        assert result.exit_code != 0
