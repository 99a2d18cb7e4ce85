"""
Tests for notebook_fill/utils.py.
"""

import logging

import pytest
from rich.logging import RichHandler
from rich.text import Text

from notebook_fill.notebook import Cell
from notebook_fill.utils import (
    configure_logging,
    format_output,
    format_rich_output,
    get_cell_status,
)


class TestFormatOutput:

    def test_stream_lines_are_joined(self):
        output = {"output_type": "stream", "name": "stdout", "text": ["a\n", "b\n"]}
        assert format_output(output) == "a\nb\n"

    def test_image_is_summarized(self):
        output = {
            "output_type": "display_data",
            "data": {"image/png": "iVBOR...", "text/plain": "<IPython.core.display.Image object>"},
            "metadata": {},
        }
        assert format_output(output) == "[image/png] <IPython.core.display.Image object>"

    def test_error_output(self):
        output = {"output_type": "error", "ename": "ValueError", "evalue": "bad"}
        assert format_output(output) == "ValueError: bad"

    def test_stderr_is_yellow(self):
        rendered = format_rich_output({"output_type": "stream", "name": "stderr", "text": ["oops\n"]})
        assert isinstance(rendered, Text)
        assert rendered.plain == "oops"
        assert rendered.style == "yellow"


class TestCellStatus:

    @pytest.mark.parametrize("outputs,expected", [
        ([], "--"),
        ([{"output_type": "stream", "name": "stdout", "text": ["1\n"]}], "ok"),
        ([{"output_type": "stream", "name": "stderr", "text": ["error: x\n"]}], "err"),
    ])
    def test_code_cell(self, outputs, expected):
        cell = Cell.from_dict({"cell_type": "code", "source": "x", "outputs": outputs})
        assert get_cell_status(cell)[0] == expected

    def test_markdown_cell(self):
        cell = Cell.from_dict({"cell_type": "markdown", "source": "# Hi"})
        assert get_cell_status(cell) == ("--", "dim")


class TestConfigureLogging:

    def setup_method(self):
        self.root = logging.getLogger()
        self.saved = (self.root.level, list(self.root.handlers))

    def teardown_method(self):
        level, handlers = self.saved
        self.root.setLevel(level)
        self.root.handlers[:] = handlers

    def test_installs_a_single_handler(self):
        self.root.handlers[:] = [h for h in self.root.handlers if not isinstance(h, RichHandler)]

        configure_logging("debug")
        configure_logging("info")

        rich_handlers = [h for h in self.root.handlers if isinstance(h, RichHandler)]
        assert len(rich_handlers) == 1
        assert self.root.level == logging.INFO
