#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tabbridge/surface.py
"""Editing surface interface and an in-memory implementation.

An editing surface displays a ``Grid`` and lets the user change it. The
bridge populates it on open, reads a snapshot back on save and is told about
edits through the ``on_edit`` callback. Surfaces have no way to
persist themselves: saving always goes through ``TableBridge.save`` so the
tabular export is the only thing ever written to disk.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

from tabbridge.grid import Grid

logger = logging.getLogger(__name__)

EditCallback = Callable[[], None]


class EditingSurface(ABC):
    """Abstract base class for tabular editing surfaces.

    Attributes
    ----------
    on_edit : callable or None
        Called with no arguments after every user edit. The bridge sets
        this to mark the owning session dirty.

    """

    def __init__(self) -> None:
        """Initialize the surface with no edit listener."""
        self.on_edit: Optional[EditCallback] = None

    @abstractmethod
    def populate(self, grid: Grid) -> None:
        """Replace the surface content with ``grid``."""

    @abstractmethod
    def snapshot(self) -> Grid:
        """Return the current content as an independent ``Grid``."""

    @abstractmethod
    def set_cell(self, row: int, col: int, value: str) -> None:
        """Change one cell as if the user had edited it, notifying ``on_edit``."""

    def focus(self) -> None:
        """Bring the surface to the front. No-op for headless surfaces."""

    def close(self) -> None:
        """Release the surface. No-op for headless surfaces."""

    def _notify_edit(self) -> None:
        if self.on_edit is not None:
            self.on_edit()


class GridSurface(EditingSurface):
    """Headless editing surface holding a ``Grid`` in memory.

    Examples
    --------
    >>> surface = GridSurface()
    >>> surface.populate(Grid(rows=[["a", "b"], ["1", "2"]]))
    >>> surface.set_cell(1, 1, "3")
    >>> surface.snapshot().rows
    [['a', 'b'], ['1', '3']]

    """

    def __init__(self) -> None:
        """Initialize an empty surface."""
        super().__init__()
        self._grid = Grid()
        self.focus_count = 0
        self.closed = False

    def populate(self, grid: Grid) -> None:
        """Replace the surface content with a copy of ``grid``."""
        self._grid = grid.copy()

    def snapshot(self) -> Grid:
        """Return a copy of the current content."""
        return self._grid.copy()

    def focus(self) -> None:
        """Record that the surface was brought to the front."""
        self.focus_count += 1

    def close(self) -> None:
        """Mark the surface closed."""
        self.closed = True

    @property
    def rows(self) -> list[list[str]]:
        """Current rows (read-only view; edit through the surface methods)."""
        return [list(row) for row in self._grid.rows]

    def cell(self, row: int, col: int) -> str:
        """Return the value at ``(row, col)``."""
        return self._grid.cell(row, col)

    def set_cell(self, row: int, col: int, value: str) -> None:
        """Set the value at ``(row, col)``, growing the grid as needed.

        Parameters
        ----------
        row : int
            Zero-based row index
        col : int
            Zero-based column index
        value : str
            New cell text

        Raises
        ------
        IndexError
            If ``row`` or ``col`` is negative

        """
        if row < 0 or col < 0:
            raise IndexError(f"Cell position must be non-negative, got ({row}, {col})")

        rows = self._grid.rows
        while len(rows) <= row:
            rows.append([])
        cells = rows[row]
        while len(cells) <= col:
            cells.append("")
        cells[col] = value
        logger.debug("Set cell (%d, %d)", row, col)
        self._notify_edit()

    def append_row(self, values: list[str]) -> None:
        """Append a row of cell values."""
        self._grid.rows.append(list(values))
        self._notify_edit()

    def delete_row(self, row: int) -> None:
        """Delete the row at ``row``."""
        del self._grid.rows[row]
        self._notify_edit()
