#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/tabbridge/cli/output.py
"""Rich rendering helpers for the tabbridge CLI."""

from pathlib import Path
from typing import Any, Optional

from tabbridge.grid import Grid
from tabbridge.session import FileClassification


def make_console(stderr: bool = False) -> Any:
    """Create a Rich console writing to stdout (or stderr)."""
    from rich.console import Console

    return Console(stderr=stderr)


def render_classifications(console: Any, classifications: list[FileClassification]) -> None:
    """Print one table row per classified file.

    Parameters
    ----------
    console : Console
        Rich console instance
    classifications : list[FileClassification]
        Classified files

    """
    from rich.table import Table

    table = Table(title=f"Detected formats ({len(classifications)} file(s))")
    table.add_column("File", style="cyan", no_wrap=True)
    table.add_column("Class", style="magenta")
    table.add_column("Separator", style="yellow")
    table.add_column("Encoding", style="white")
    table.add_column("Temporary CSV", style="blue")

    for classification in classifications:
        if classification.is_spreadsheet:
            kind = f"spreadsheet ({classification.spreadsheet_extension})"
            temp = str(classification.temp_path)
        else:
            kind = "text"
            temp = "[dim]-[/dim]"
        table.add_row(
            str(classification.source_path),
            kind,
            classification.separator.value,
            classification.encoding,
            temp,
        )

    console.print(table)


def render_grid(console: Any, grid: Grid, title: Optional[str] = None) -> None:
    """Print a grid with zero-based row and column indices.

    Parameters
    ----------
    console : Console
        Rich console instance
    grid : Grid
        Content to print
    title : str, optional
        Table title

    """
    from rich.markup import escape
    from rich.table import Table

    table = Table(title=title, show_lines=False)
    table.add_column("#", style="dim", justify="right")
    for col in range(grid.width):
        table.add_column(str(col), overflow="fold")

    for index, row in enumerate(grid.rows):
        cells = [escape(grid.cell(index, col)) for col in range(grid.width)]
        table.add_row(str(index), *cells)

    console.print(table)


def confirm_conversion(path: Path) -> bool:
    """Ask on the terminal whether a spreadsheet may be converted."""
    from rich.prompt import Confirm

    return Confirm.ask(
        f"[bold]{path}[/bold] is a spreadsheet. Convert it to CSV for editing? "
        "Only cell values are kept when it is saved back",
        default=False,
        console=make_console(stderr=True),
    )
