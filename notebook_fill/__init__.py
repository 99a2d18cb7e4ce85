"""
notebook-fill: Run Jupyter notebooks and fill in their outputs.

This package provides a batch notebook runner where:
- Code cells are executed in order inside a persistent IPython kernel
- Variables (and the last expression value, as ``_``) carry over between cells
- Printed text and new matplotlib figures are written back as cell outputs
"""

from notebook_fill.exceptions import (
    NotebookFillError,
    FormatError,
    UsageError,
    CellOutputError,
    ResourceError,
)
from notebook_fill.directives import PlotOptions, parse_plot_options
from notebook_fill.kernel import NotebookKernel, EvaluationResult
from notebook_fill.context import ExecutionContext
from notebook_fill.notebook import Notebook, Cell, CellType
from notebook_fill.runner import NotebookRunner

__version__ = "0.1.0"
__all__ = [
    "NotebookRunner",
    "NotebookKernel",
    "EvaluationResult",
    "ExecutionContext",
    "Notebook",
    "Cell",
    "CellType",
    "PlotOptions",
    "parse_plot_options",
    "NotebookFillError",
    "FormatError",
    "UsageError",
    "CellOutputError",
    "ResourceError",
]
