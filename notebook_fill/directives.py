"""
Parsing of the %plot directive that configures figure embedding.

A directive is a source line such as::

    %plot -f svg -r 300 --width 800

Flags may repeat (the last one wins) and unknown tokens are ignored.
Values are kept verbatim; they are validated when a figure is embedded.
"""

from dataclasses import dataclass, replace
from typing import Iterable, Optional

DIRECTIVE = "%plot"

_FLAGS = {
    "-f": "format",
    "--format": "format",
    "-r": "resolution",
    "--resolution": "resolution",
    "-w": "width",
    "--width": "width",
    "-h": "height",
    "--height": "height",
}


@dataclass
class PlotOptions:
    """How the figures produced by one cell are embedded."""
    format: str = "png"
    resolution: str = "150"
    width: str = "640"
    height: str = "480"


def is_directive(line: str) -> bool:
    """Check whether a source line is a %plot directive."""
    return line.strip().lower().startswith(DIRECTIVE)


def parse_plot_options(source: Iterable[str], defaults: Optional[PlotOptions] = None) -> PlotOptions:
    """
    Build the PlotOptions for a cell from its source lines.

    Args:
        source: The cell's source lines
        defaults: Options to start from (PlotOptions() if omitted)

    Returns:
        A new PlotOptions; ``defaults`` is never modified
    """
    options = replace(defaults) if defaults is not None else PlotOptions()

    for line in source:
        if not is_directive(line):
            continue
        tokens = line.split()
        for position, token in enumerate(tokens[:-1]):
            field_name = _FLAGS.get(token)
            if field_name is not None:
                setattr(options, field_name, tokens[position + 1])

    return options


def strip_directives(source: Iterable[str]) -> list[str]:
    """Return the source lines without any %plot directive."""
    return [line for line in source if not is_directive(line)]


def normalize_directives(source: Iterable[str]) -> list[str]:
    """
    Rewrite directive lines into a form the evaluator accepts.

    An unindented directive becomes the lowercase ``%plot`` line magic.
    An indented one becomes a comment at the same indent, since a magic
    there could end the enclosing block or start an unexpected one.
    """
    lines = []
    for line in source:
        if is_directive(line):
            body = line.strip()
            arguments = body[len(DIRECTIVE):].strip()
            canonical = f"{DIRECTIVE} {arguments}".rstrip()
            indent = line[: len(line) - len(line.lstrip())]
            ending = "\n" if line.endswith("\n") else ""
            if indent:
                line = f"{indent}# {canonical}{ending}"
            else:
                line = f"{canonical}{ending}"
        lines.append(line)
    return lines
