#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tabbridge/export.py
"""Separator-keyed export of a grid and the save path of a session.

Each separator class has exactly one serializer in ``EXPORTERS``. Saving a
session always writes delimited text using the separator fixed at open time;
spreadsheet sessions then hand the delimited copy to ``ConversionBridge`` to
rebuild the original spreadsheet.
"""

from __future__ import annotations

import csv
import io
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Union

from tabbridge.constants import DEFAULT_QUOTE_CHAR, SPACE_FIELD_SEPARATOR, STAGING_DIR_PREFIX
from tabbridge.conversion import ConversionBridge
from tabbridge.exceptions import ExportWriteError, ValidationError
from tabbridge.grid import Grid
from tabbridge.separator import Separator
from tabbridge.session import Session

logger = logging.getLogger(__name__)

Exporter = Callable[[Grid], str]


def _finish(text: str, grid: Grid) -> str:
    if not grid.trailing_newline and text.endswith(grid.line_terminator):
        return text[: -len(grid.line_terminator)]
    return text


def _export_delimited(grid: Grid, delimiter: str) -> str:
    output = io.StringIO()
    writer = csv.writer(
        output,
        delimiter=delimiter,
        quotechar=DEFAULT_QUOTE_CHAR,
        quoting=csv.QUOTE_MINIMAL,
        lineterminator=grid.line_terminator,
    )
    for row in grid.rows:
        writer.writerow(row)
    return _finish(output.getvalue(), grid)


def export_tab(grid: Grid) -> str:
    """Serialize ``grid`` as tab-separated text.

    Fields containing a tab, a quote or a line break are quoted.
    """
    return _export_delimited(grid, "\t")


def export_comma(grid: Grid) -> str:
    """Serialize ``grid`` as comma-separated text with minimal quoting."""
    return _export_delimited(grid, ",")


def export_space(grid: Grid) -> str:
    """Serialize ``grid`` as single-space-separated text.

    No quoting is applied, so a field that itself contains whitespace will
    split into several fields when the file is read back.
    """
    lines = [SPACE_FIELD_SEPARATOR.join(row) for row in grid.rows]
    text = "".join(line + grid.line_terminator for line in lines)
    return _finish(text, grid)


EXPORTERS: dict[Separator, Exporter] = {
    Separator.TAB: export_tab,
    Separator.COMMA: export_comma,
    Separator.SPACE: export_space,
}


def export_text(grid: Grid, separator: Separator) -> str:
    """Serialize ``grid`` with the exporter registered for ``separator``.

    Parameters
    ----------
    grid : Grid
        Content to serialize
    separator : Separator
        Separator class of the session

    Returns
    -------
    str
        Delimited text

    Raises
    ------
    ValidationError
        If no exporter is registered for ``separator``

    """
    exporter = EXPORTERS.get(separator)
    if exporter is None:
        raise ValidationError(
            f"No exporter registered for separator {separator!r}",
            parameter_name="separator",
            parameter_value=separator,
        )
    return exporter(grid)


def write_text_atomic(path: Union[str, Path], text: str, encoding: str) -> None:
    """Write ``text`` to ``path`` so that readers never observe a partial file.

    The text is encoded up front, written to a temporary file in the same
    directory and moved over ``path`` with ``os.replace``. An existing file
    keeps its permission bits.

    Raises
    ------
    ExportWriteError
        If the text cannot be encoded or the file cannot be written
    """
    path = Path(path)
    try:
        data = text.encode(encoding)
    except (UnicodeEncodeError, LookupError) as e:
        raise ExportWriteError(
            str(path),
            message=f"Cannot encode the content of {path} as {encoding}: {e}",
            original_error=e,
        ) from e

    tmp_name: str | None = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=STAGING_DIR_PREFIX, suffix=path.suffix, dir=path.parent)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        if path.exists():
            shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise ExportWriteError(str(path), original_error=e) from e
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)

    logger.debug("Wrote %d byte(s) to %s", len(data), path)


class ExportDispatcher:
    """Write a session's content back to disk.

    Parameters
    ----------
    conversion : ConversionBridge
        Bridge used to rebuild spreadsheets from their delimited copy

    """

    def __init__(self, conversion: ConversionBridge):
        """Initialize the dispatcher."""
        self.conversion = conversion

    def save(self, session: Session, force: bool = False) -> bool:
        """Export the session's current content and, for spreadsheets, convert it back.

        The session becomes clean only when every step succeeds. On any
        failure it stays dirty and the error propagates; for spreadsheets the
        original file is untouched because the reverse conversion only
        replaces it after producing a readable result.

        Parameters
        ----------
        session : Session
            Session to save
        force : bool, default False
            Save even if the session has no unsaved edits

        Returns
        -------
        bool
            True if anything was written, False if a clean session was skipped

        Raises
        ------
        SessionClosedError
            If the session has been closed
        ExportWriteError
            If the delimited export cannot be written
        ConversionError
            If the reverse conversion of a spreadsheet fails

        """
        session.ensure_open()
        if not session.dirty and not force:
            logger.debug("Session for %s has no unsaved edits, skipping save", session.source_path)
            return False

        grid = session.surface.snapshot()
        export_path = session.classification.export_path
        session.begin_save()
        try:
            write_text_atomic(export_path, export_text(grid, session.separator), session.encoding)
            if session.is_spreadsheet:
                self.conversion.reverse(
                    export_path, session.spreadsheet_extension or "", target=session.source_path
                )
        except Exception:
            session.save_failed()
            raise

        session.mark_clean()
        logger.info("Saved %s", session.source_path)
        return True
