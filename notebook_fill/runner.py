"""
NotebookRunner: run the code cells of a notebook and store their outputs.
"""

import logging
from pathlib import Path
from typing import Optional

from notebook_fill.config import NotebookFillConfig, get_config
from notebook_fill.context import ExecutionContext
from notebook_fill.directives import normalize_directives, parse_plot_options, strip_directives
from notebook_fill.embed import OutputEmbedder
from notebook_fill.exceptions import UsageError
from notebook_fill.figures import FigureCapture
from notebook_fill.kernel import NotebookKernel
from notebook_fill.notebook import Cell, Notebook, stream_output

logger = logging.getLogger(__name__)


class NotebookRunner:
    """
    Run notebook cells inside a persistent IPython kernel.

    Cells are addressed with 1-based indices. Running a code cell
    replaces its outputs with:
    - one stdout stream with everything the code printed
    - one stderr stream if the code raised
    - one display output (or stderr stream) per figure the code created

    Problems caused by a cell's own code end up in its outputs; only
    bad arguments and scratch-directory failures raise.
    """

    def __init__(
        self,
        notebook: Notebook | str | Path,
        config: Optional[NotebookFillConfig] = None,
        kernel: Optional[NotebookKernel] = None,
    ):
        """
        Args:
            notebook: A Notebook, or the path of an .ipynb file to load
            config: Runner configuration (the global config if omitted)
            kernel: Kernel to evaluate code with (a new one if omitted)
        """
        if not isinstance(notebook, Notebook):
            notebook = Notebook.load(Path(notebook))
        self.notebook = notebook
        self.config = config or get_config()
        self.kernel = kernel or NotebookKernel(backend=self.config.matplotlib_backend)
        self.context = ExecutionContext()
        self.embedder = OutputEmbedder(self.config.temp_dir)

    def _get_cell(self, index: int) -> Cell:
        if isinstance(index, bool) or not isinstance(index, int):
            raise UsageError(f"cell index must be an integer, not {type(index).__name__}")
        if index <= 0 or index > len(self.notebook.cells):
            raise UsageError(
                f"cell index {index} is out of range (1-{len(self.notebook.cells)})"
            )
        return self.notebook.get_cell(index - 1)

    def run(self, index: int):
        """
        Run one cell and replace its outputs.

        Args:
            index: 1-based position of the cell

        Raises:
            UsageError: If ``index`` is not a valid cell position
            ResourceError: If figures cannot be rendered in the scratch directory
        """
        cell = self._get_cell(index)

        if not cell.is_code:
            return

        cell.outputs = []
        if not cell.text.strip():
            return

        options = parse_plot_options(cell.source, self.config.plot_options())
        if self.config.strip_directives:
            code = "".join(strip_directives(cell.source))
        else:
            code = "".join(normalize_directives(cell.source))

        with FigureCapture() as capture:
            self.context.load(self.kernel)
            result = self.kernel.evaluate(code, self.config.error_template)
            self.context.save(self.kernel, result)
        logger.debug("Ran cell %d as evaluation %d", index, result.execution_count)

        if result.text:
            cell.outputs.append(stream_output("stdout", result.text))
        if not result.success:
            cell.outputs.append(stream_output("stderr", result.error_text))

        if capture.figures:
            self.embedder.embed_all(cell, capture.figures, options)

    def run_all(self):
        """Run every cell in order, stopping only on a raised error."""
        for index in range(1, len(self.notebook.cells) + 1):
            self.run(index)

    def reset(self):
        """Start again from an empty execution context."""
        self.context.clear()

    def save(self, path: Path):
        """Save the notebook, with its outputs, to ``path``."""
        self.notebook.save(Path(path))

    def generate_script(self, path: Path):
        """Write the notebook's cells as a Python script."""
        self.notebook.generate_script(Path(path))
