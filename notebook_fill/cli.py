"""
CLI interface for notebook-fill.
"""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.syntax import Syntax
from rich.text import Text

from notebook_fill import Notebook, NotebookRunner, NotebookFillError
from notebook_fill.config import NotebookFillConfig
from notebook_fill.utils import configure_logging, format_rich_output, get_cell_status


console = Console()


def _print_outputs(cell):
    for output in cell.outputs:
        console.print(format_rich_output(output))


def _print_cell(position: int, cell):
    _, status_style = get_cell_status(cell)

    if cell.is_code:
        title = f"In [{position}]"
        content = (
            Syntax(cell.text, "python", theme="monokai", line_numbers=True)
            if cell.text.strip()
            else Text("(empty)", style="dim italic")
        )
    else:
        title = cell.cell_type.capitalize()
        content = Markdown(cell.text) if cell.text.strip() else Text("(empty)", style="dim italic")

    console.print(Panel(
        content,
        title=f"[{status_style}]{title}[/{status_style}]",
        title_align="left",
        border_style=status_style,
        padding=(0, 1),
    ))
    if cell.is_code:
        _print_outputs(cell)


@click.group()
def main():
    """notebook-fill: Run Jupyter notebooks and fill in their outputs."""
    pass


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), default=None,
              help="Where to save the filled notebook (default: in place)")
@click.option("--cell", "-c", "cells", type=int, multiple=True,
              help="Run only this cell (1-based); may be repeated")
@click.option("--strip-directives", is_flag=True, default=False,
              help="Remove %plot lines before evaluating a cell")
@click.option("--temp-dir", type=click.Path(file_okay=False, path_type=Path), default=None,
              help="Scratch directory for rendered figures (must not exist)")
@click.option("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ...)")
def run(path: Path, output: Optional[Path], cells: tuple[int, ...], strip_directives: bool,
        temp_dir: Optional[Path], log_level: Optional[str]):
    """Run a notebook and save it with its outputs."""
    overrides = {
        "strip_directives": strip_directives or None,
        "temp_dir": temp_dir,
        "log_level": log_level,
    }
    config = NotebookFillConfig(**{k: v for k, v in overrides.items() if v is not None})
    configure_logging(config.log_level)

    try:
        runner = NotebookRunner(path, config=config)
    except NotebookFillError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    indices = list(cells) or list(range(1, len(runner.notebook.cells) + 1))
    console.print(Panel(
        f"[bold]{path.name}[/bold]  [dim]{len(indices)} cell(s)[/dim]",
        title="[bold blue]notebook-fill[/bold blue]",
        border_style="blue",
    ))

    executed = 0
    for index in indices:
        try:
            runner.run(index)
        except NotebookFillError as e:
            console.print(f"[red]Error in cell {index}: {e}[/red]")
            sys.exit(1)

        cell = runner.notebook.cells[index - 1]
        if cell.is_code:
            executed += 1
            console.print(f"[dim]--- Cell {index} ---[/dim]")
            _print_outputs(cell)

    destination = output or path
    runner.save(destination)
    console.print(f"[green]Ran {executed} code cell(s), saved to {destination}[/green]")


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("script", type=click.Path(dir_okay=False, path_type=Path))
def script(path: Path, script: Path):
    """Write the cells of a notebook as a Python script."""
    try:
        nb = Notebook.load(path)
    except NotebookFillError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    nb.generate_script(script)
    console.print(f"[green]Script written to {script}[/green]")


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def show(path: Path):
    """Print the cells of a notebook and their stored outputs."""
    try:
        nb = Notebook.load(path)
    except NotebookFillError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    for position, cell in enumerate(nb.cells, start=1):
        _print_cell(position, cell)


if __name__ == "__main__":
    main()
