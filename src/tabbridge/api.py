#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tabbridge/api.py
"""High-level entry points for opening, editing and saving tabular files.

``TableBridge`` ties the pieces together:

1. classify the path (spreadsheet or delimited text);
2. for spreadsheets, ask for confirmation and convert to a temporary CSV;
3. for text, decode the file and detect its separator;
4. populate an editing surface and register a session;
5. on ``save``, export the surface content and convert spreadsheets back.

Examples
--------
Edit a CSV file headlessly:

    >>> from tabbridge import open_table
    >>> bridge, result = open_table("data.csv")  # doctest: +SKIP
    >>> result.session.surface.set_cell(1, 0, "42")  # doctest: +SKIP
    >>> bridge.save(result.session)  # doctest: +SKIP
    True

Open a spreadsheet without prompting:

    >>> from tabbridge import TableBridge, accept_all
    >>> bridge = TableBridge(confirm=accept_all)
    >>> result = bridge.open("report.xlsx")  # doctest: +SKIP

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterator, Optional, Union

from tabbridge.classifier import classify, is_spreadsheet, temp_path_for
from tabbridge.constants import CONVERTED_CSV_ENCODING
from tabbridge.conversion import ConversionBridge
from tabbridge.converters import get_converter
from tabbridge.converters.base import SpreadsheetConverter
from tabbridge.exceptions import FileNotFoundError, ValidationError
from tabbridge.export import ExportDispatcher
from tabbridge.grid import Grid
from tabbridge.options import BridgeOptions
from tabbridge.separator import Separator, detect_separator
from tabbridge.session import FileClassification, Session, SessionRegistry
from tabbridge.surface import EditingSurface, GridSurface
from tabbridge.utils.encoding import read_text_file

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
ConfirmCallback = Callable[[Path], bool]
SurfaceFactory = Callable[[], EditingSurface]


class OpenStatus(str, Enum):
    """Outcome of ``TableBridge.open``."""

    OPENED = "opened"
    REUSED = "reused"
    DECLINED = "declined"


@dataclass(frozen=True)
class OpenResult:
    """Result of ``TableBridge.open``.

    Parameters
    ----------
    status : OpenStatus
        Whether a new session was opened, an existing one re-surfaced, or
        the spreadsheet confirmation was declined
    session : Session or None
        The live session; None when declined

    """

    status: OpenStatus
    session: Optional[Session] = None

    @property
    def opened(self) -> bool:
        """Whether a session is available (new or reused)."""
        return self.session is not None


def accept_all(path: Path) -> bool:
    """Confirmation callback that accepts every spreadsheet."""
    return True


def _decline(path: Path) -> bool:
    logger.warning("No confirmation callback configured, declining to open spreadsheet %s", path)
    return False


class TableBridge:
    """Open tabular files into editing surfaces and save them back.

    Parameters
    ----------
    options : BridgeOptions, optional
        Bridge configuration; defaults are used when omitted
    converter : SpreadsheetConverter, optional
        Conversion backend. Defaults to the backend selected by
        ``options.converter``.
    confirm : callable, optional
        ``confirm(path) -> bool`` asked before a spreadsheet is converted.
        Without one, spreadsheets are declined.
    surface_factory : callable, optional
        Creates the editing surface for each new session. Defaults to
        ``GridSurface``.

    Attributes
    ----------
    registry : SessionRegistry
        Live sessions, at most one per source path

    """

    def __init__(
        self,
        options: Optional[BridgeOptions] = None,
        converter: Optional[SpreadsheetConverter] = None,
        confirm: Optional[ConfirmCallback] = None,
        surface_factory: Optional[SurfaceFactory] = None,
    ):
        """Initialize the bridge."""
        self.options = options or BridgeOptions()
        self.conversion = ConversionBridge(converter or get_converter(self.options))
        self.exporter = ExportDispatcher(self.conversion)
        self.confirm: ConfirmCallback = confirm or _decline
        self.surface_factory: SurfaceFactory = surface_factory or GridSurface
        self.registry = SessionRegistry()

    @property
    def sessions(self) -> list[Session]:
        """Live sessions in the order they were opened."""
        return list(self.registry)

    def __iter__(self) -> Iterator[Session]:
        """Iterate over live sessions."""
        return iter(self.registry)

    def get(self, path: PathLike) -> Optional[Session]:
        """Return the live session for ``path``, or None."""
        return self.registry.get(path)

    def open(self, path: PathLike) -> OpenResult:
        """Open ``path`` into a new editing surface.

        If a session for the same file is already open it is focused and
        returned instead, without prompting.

        Parameters
        ----------
        path : str or Path
            File to open

        Returns
        -------
        OpenResult
            ``OPENED`` with a new session, ``REUSED`` with the existing one,
            or ``DECLINED`` with no session when the spreadsheet
            confirmation was refused

        Raises
        ------
        FileNotFoundError
            If ``path`` does not exist
        ValidationError
            If ``path``, or the temporary CSV a spreadsheet would be
            converted to, belongs to another open session
        FileAccessError
            If a delimited-text file cannot be read or decoded
        ConversionError
            If a spreadsheet cannot be converted

        """
        path = Path(path)
        existing = self.registry.get(path)
        if existing is not None:
            logger.debug("%s is already open, focusing existing session", path)
            existing.surface.focus()
            return OpenResult(OpenStatus.REUSED, existing)

        if not path.is_file():
            raise FileNotFoundError(str(path))

        spreadsheet = is_spreadsheet(path, self.options.spreadsheet_extensions)
        self._check_not_in_use(path, spreadsheet)

        if spreadsheet:
            if not self.confirm(path):
                logger.info("Opening %s declined", path)
                return OpenResult(OpenStatus.DECLINED)
            classification, grid = self._load_spreadsheet(path)
        else:
            classification, grid = self._load_text(path)

        session = self._create_session(classification, grid)
        logger.info(
            "Opened %s (%s, %s separator)",
            path,
            f"spreadsheet via {classification.temp_path}" if classification.is_spreadsheet else "text",
            classification.separator.value,
        )
        return OpenResult(OpenStatus.OPENED, session)

    def _check_not_in_use(self, path: Path, spreadsheet: bool) -> None:
        # A spreadsheet also claims its temporary CSV, which forward conversion overwrites
        claimed = [path, temp_path_for(path)] if spreadsheet else [path]
        for candidate in claimed:
            owner = self.registry.owner_of(candidate)
            if owner is not None:
                raise ValidationError(
                    f"Cannot open {path}: {candidate} is in use by the open session for {owner.source_path}. "
                    "Close that session first.",
                    parameter_name="path",
                    parameter_value=str(path),
                )

    def _load_spreadsheet(self, path: Path) -> tuple[FileClassification, Grid]:
        temp_path = self.conversion.forward(path)
        classification = classify(path, extensions=self.options.spreadsheet_extensions)
        text, _ = read_text_file(temp_path, CONVERTED_CSV_ENCODING)
        return classification, Grid.from_text(text, Separator.COMMA)

    def _load_text(self, path: Path) -> tuple[FileClassification, Grid]:
        text, encoding = read_text_file(path, self.options.encoding)
        separator = detect_separator(text, self.options.header_skip_lines)
        classification = classify(
            path, separator=separator, encoding=encoding, extensions=self.options.spreadsheet_extensions
        )
        return classification, Grid.from_text(text, separator)

    def _create_session(self, classification: FileClassification, grid: Grid) -> Session:
        surface = self.surface_factory()
        session = Session(classification, surface)
        surface.populate(grid)
        session.mark_loaded()
        surface.on_edit = session.mark_dirty
        self.registry.add(session)
        surface.focus()
        return session

    def save(self, session: Session, force: bool = False) -> bool:
        """Save ``session`` back to its source file.

        Parameters
        ----------
        session : Session
            Session to save
        force : bool, default False
            Save even when there are no unsaved edits

        Returns
        -------
        bool
            True if the file was written

        Raises
        ------
        SessionClosedError
            If the session has been closed
        ExportWriteError
            If writing the delimited export fails
        ConversionError
            If converting a spreadsheet back fails

        """
        return self.exporter.save(session, force=force)

    def close(self, session: Session) -> None:
        """Close ``session``, its surface and, if configured, its temporary CSV.

        Unsaved edits are discarded. Closing an already-closed session does
        nothing.
        """
        if session.is_closed:
            return
        if session.dirty:
            logger.warning("Closing %s with unsaved edits; they are discarded", session.source_path)

        session.surface.on_edit = None
        session.surface.close()
        session.mark_closed()
        self.registry.remove(session)

        if self.options.remove_temp_on_close and session.temp_path is not None:
            try:
                session.temp_path.unlink(missing_ok=True)
                logger.debug("Removed temporary file %s", session.temp_path)
            except OSError as e:
                logger.warning("Could not remove temporary file %s: %s", session.temp_path, e)

        logger.info("Closed %s", session.source_path)

    def close_all(self) -> None:
        """Close every live session."""
        for session in self.sessions:
            self.close(session)


def open_table(path: PathLike, **kwargs: Any) -> tuple[TableBridge, OpenResult]:
    """Create a bridge from keyword options and open ``path`` with it.

    Parameters
    ----------
    path : str or Path
        File to open
    **kwargs : Any
        ``BridgeOptions`` fields, plus ``converter_backend``, ``confirm``
        and ``surface_factory`` passed to ``TableBridge``

    Returns
    -------
    tuple[TableBridge, OpenResult]
        The bridge (needed to save and close) and the open result

    """
    bridge_kwargs = {key: kwargs.pop(key) for key in ("confirm", "surface_factory") if key in kwargs}
    converter = kwargs.pop("converter_backend", None)
    options = BridgeOptions.from_dict(kwargs) if kwargs else None
    bridge = TableBridge(options, converter=converter, **bridge_kwargs)
    return bridge, bridge.open(path)
