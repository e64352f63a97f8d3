#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tabbridge/grid.py
"""In-memory tabular representation shared by the bridge and editing surfaces.

A ``Grid`` is a list of rows of cell strings together with the line layout
observed when it was imported, so that exporting an unedited grid reproduces
the original text.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from typing import Any

from tabbridge.constants import DEFAULT_LINE_TERMINATOR
from tabbridge.separator import Separator

logger = logging.getLogger(__name__)


def _make_csv_dialect(delimiter: str) -> type[csv.Dialect]:
    """Create a dialect class based on csv.excel with a custom delimiter."""
    attrs: dict[str, Any] = {"delimiter": delimiter}
    return type("TabBridgeDialect", (csv.excel,), attrs)


@dataclass
class Grid:
    """Rows of cell text plus the line layout of their source.

    Parameters
    ----------
    rows : list[list[str]]
        Cell values, row-major. Rows may have different lengths.
    line_terminator : str, default "\\n"
        Line ending used when the grid is exported
    trailing_newline : bool, default True
        Whether the exported text ends with a line terminator

    """

    rows: list[list[str]] = field(default_factory=list)
    line_terminator: str = DEFAULT_LINE_TERMINATOR
    trailing_newline: bool = True

    @classmethod
    def from_text(cls, text: str, separator: Separator) -> "Grid":
        """Import delimited text.

        Tab and comma content is read with the csv module (so quoted fields
        may contain the delimiter, quotes and newlines). Space content is split
        on runs of whitespace.

        Parameters
        ----------
        text : str
            Delimited file content
        separator : Separator
            Field separator of the content

        Returns
        -------
        Grid
            Imported rows with the content's line ending and trailing newline

        """
        line_terminator = "\r\n" if "\r\n" in text else DEFAULT_LINE_TERMINATOR
        trailing_newline = text.endswith(("\n", "\r"))

        if separator is Separator.SPACE:
            rows = [line.split() for line in text.splitlines()]
        else:
            reader = csv.reader(io.StringIO(text), dialect=_make_csv_dialect(separator.char))
            rows = [list(row) for row in reader]

        logger.debug("Imported %d row(s) using %s separator", len(rows), separator.value)
        return cls(rows=rows, line_terminator=line_terminator, trailing_newline=trailing_newline)

    @property
    def width(self) -> int:
        """Number of columns in the widest row."""
        return max((len(row) for row in self.rows), default=0)

    def copy(self) -> "Grid":
        """Return a deep copy of the grid."""
        return Grid(
            rows=[list(row) for row in self.rows],
            line_terminator=self.line_terminator,
            trailing_newline=self.trailing_newline,
        )

    def cell(self, row: int, col: int) -> str:
        """Return a cell value, or ``""`` for cells outside a ragged row."""
        cells = self.rows[row]
        return cells[col] if col < len(cells) else ""
