"""
Utility functions for notebook-fill.
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text


def _joined(value) -> str:
    if isinstance(value, list):
        return "".join(value)
    return value or ""


def format_output(output: dict[str, Any]) -> str:
    """
    Format an nbformat output dictionary for display (plain text).

    Args:
        output: Output dictionary stored on a cell

    Returns:
        Formatted string for display
    """
    output_type = output.get("output_type", "")

    if output_type == "stream":
        return _joined(output.get("text"))

    elif output_type in ("display_data", "execute_result"):
        data = output.get("data", {})
        images = [mime for mime in data if mime.startswith("image/")]
        if images:
            return f"[{images[0]}] {_joined(data.get('text/plain'))}"
        return _joined(data.get("text/plain", str(data)))

    elif output_type == "error":
        ename = output.get("ename", "Error")
        evalue = output.get("evalue", "")
        return f"{ename}: {evalue}"

    return str(output)


def format_rich_output(output: dict[str, Any]):
    """
    Format an nbformat output dictionary as a Rich renderable.

    stderr streams are shown in yellow, images as a cyan one-line summary.
    """
    output_type = output.get("output_type", "")
    text = format_output(output).rstrip("\n")

    if output_type == "stream":
        if output.get("name") == "stderr":
            return Text(text, style="yellow")
        return Text(text)

    elif output_type in ("display_data", "execute_result"):
        return Text(text, style="cyan")

    elif output_type == "error":
        return Text(text, style="bold red")

    return Text(text, style="dim")


def get_cell_status(cell) -> tuple[str, str]:
    """
    Get status indicator and style for a cell.

    Returns:
        Tuple of (indicator_string, rich_style)
    """
    if not cell.is_code:
        return ("--", "dim")
    if any(o.get("name") == "stderr" for o in cell.outputs):
        return ("err", "red")
    if cell.outputs:
        return ("ok", "green")
    return ("--", "dim")


def configure_logging(level: str = "WARNING", console: Console | None = None):
    """Install a RichHandler on the root logger (once)."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())

    for handler in root_logger.handlers:
        if isinstance(handler, RichHandler):
            return

    handler = RichHandler(
        console=console or Console(stderr=True),
        rich_tracebacks=True,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root_logger.addHandler(handler)
