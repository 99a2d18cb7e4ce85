"""
Conversion of matplotlib figures into notebook display outputs.
"""

import base64
import logging
import math
import re
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Sequence

from matplotlib.figure import Figure

from notebook_fill.directives import PlotOptions
from notebook_fill.exceptions import CellOutputError, ResourceError
from notebook_fill.figures import dispose, has_content
from notebook_fill.notebook import Cell, display_output, stream_output

logger = logging.getLogger(__name__)

MIME_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "svg": "image/svg+xml",
}

RASTER_PLACEHOLDER = "<IPython.core.display.Image object>"
SVG_PLACEHOLDER = "<IPython.core.display.SVG object>"

_WIDTH_ATTR = re.compile(r'(?<![\w-])width="[^"]*"')
_HEIGHT_ATTR = re.compile(r'(?<![\w-])height="[^"]*"')


@contextmanager
def scoped_directory(path: Path) -> Iterator[Path]:
    """
    Create a scratch directory for the duration of a block and remove it after.

    Raises:
        ResourceError: If the directory already exists, or cannot be
            created or removed
    """
    path = Path(path)
    if path.exists():
        raise ResourceError(
            f"the directory {path} already exists; it may belong to another "
            "run, remove it manually and try again"
        )
    try:
        path.mkdir(parents=True)
    except OSError as exc:
        raise ResourceError(f"cannot create the directory {path}: {exc}") from exc

    try:
        yield path
    finally:
        try:
            shutil.rmtree(path)
        except OSError as exc:
            raise ResourceError(f"cannot remove the directory {path}: {exc}") from exc


def _parse_number(options: PlotOptions, field: str) -> float:
    value = getattr(options, field)
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = math.nan
    if not math.isfinite(number):
        raise CellOutputError(f"A number is required for {field}, not a string\n")
    if number <= 0:
        raise CellOutputError(f"A positive number is required for {field}, not {value}\n")
    return number


def _compact(number: float) -> int | float:
    return int(number) if number.is_integer() else number


def _resize_svg(lines: list[str], width: float, height: float) -> list[str]:
    """Rewrite the size attributes of the root <svg> tag."""
    for position, line in enumerate(lines):
        if line.lstrip().startswith("<svg"):
            line = _WIDTH_ATTR.sub(f'width="{width:g}px"', line, count=1)
            line = _HEIGHT_ATTR.sub(f'height="{height:g}px"', line, count=1)
            lines[position] = line
            break
    return lines


class OutputEmbedder:
    """Render figures into a scratch directory and attach them to cells."""

    def __init__(self, temp_dir: Path):
        self.temp_dir = Path(temp_dir)

    def embed_all(self, cell: Cell, figures: Sequence[Figure], options: PlotOptions):
        """
        Embed every figure into the cell's outputs, in order.

        Each figure is closed once handled. Per-figure problems become
        stderr outputs; a problem with the scratch directory aborts the
        whole call after closing the remaining figures.

        Raises:
            ResourceError: If the scratch directory cannot be used
        """
        pending = list(figures)
        try:
            with scoped_directory(self.temp_dir) as workdir:
                while pending:
                    figure = pending.pop(0)
                    try:
                        self.embed(cell, figure, options, workdir)
                    finally:
                        dispose(figure)
        finally:
            for figure in pending:
                dispose(figure)

    def embed(self, cell: Cell, figure: Figure, options: PlotOptions, workdir: Path):
        """Embed one figure, or append a stderr output explaining why it cannot be."""
        try:
            output = self.render(figure, options, workdir)
        except CellOutputError as exc:
            logger.warning("Figure %s not embedded: %s", figure.number, str(exc).strip())
            cell.outputs.append(stream_output("stderr", str(exc)))
            return
        cell.outputs.append(output)

    def render(self, figure: Figure, options: PlotOptions, workdir: Path) -> dict:
        """
        Render a figure and build its display output.

        Raises:
            CellOutputError: If the figure or its options cannot be embedded
            ResourceError: If the rendered file cannot be written or read
        """
        if not has_content(figure):
            raise CellOutputError("The figure is empty!\n")

        resolution = _parse_number(options, "resolution")
        width = _parse_number(options, "width")
        height = _parse_number(options, "height")

        fmt = options.format.lower()
        if fmt not in MIME_TYPES:
            raise CellOutputError(f"Cannot embed the '{options.format}' image format\n")
        mime = MIME_TYPES[fmt]

        path = workdir / f"figure_{figure.number}.{fmt}"
        try:
            figure.savefig(path, format=fmt, dpi=resolution)
            if fmt == "svg":
                lines = path.read_text(encoding="utf-8").splitlines(keepends=True)
                payload = None
            else:
                payload = base64.b64encode(path.read_bytes()).decode("ascii")
            path.unlink()
        except OSError as exc:
            raise ResourceError(f"cannot render figure {figure.number} into {workdir}: {exc}") from exc
        except Exception as exc:
            raise CellOutputError(f"Cannot render the figure: {str(exc).rstrip()}\n") from exc

        logger.debug("Embedded figure %s as %s", figure.number, mime)
        if payload is None:
            return display_output({
                mime: _resize_svg(lines, width, height),
                "text/plain": SVG_PLACEHOLDER,
            })
        return display_output(
            {mime: payload, "text/plain": RASTER_PLACEHOLDER},
            {mime: {"width": _compact(width), "height": _compact(height)}},
        )
