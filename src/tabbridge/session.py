#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tabbridge/session.py
"""Per-file editing sessions and the registry that keeps them unique.

A session records how a file was classified, which separator it uses, where
its spreadsheet working copy lives and whether it has unsaved edits. The
classification is frozen when the session is created; only the dirty flag
and the lifecycle state change afterwards.

Lifecycle::

    CLASSIFIED -> LOADED -> EDITING <-> SAVING -> CLEAN
                               ^                   |
                               +-------------------+
    any state -> CLOSED

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Union

from tabbridge.exceptions import SessionClosedError
from tabbridge.separator import Separator
from tabbridge.surface import EditingSurface

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Lifecycle state of a session."""

    CLASSIFIED = "classified"
    LOADED = "loaded"
    EDITING = "editing"
    SAVING = "saving"
    CLEAN = "clean"
    CLOSED = "closed"


@dataclass(frozen=True)
class FileClassification:
    """Immutable facts about an open file, fixed when its session is created.

    Parameters
    ----------
    source_path : Path
        The file the user edits
    is_spreadsheet : bool
        Whether the file needs external conversion
    separator : Separator
        Field separator; always COMMA for spreadsheets
    spreadsheet_extension : str or None
        Original extension, present iff ``is_spreadsheet``
    temp_path : Path or None
        Delimited working copy, present iff ``is_spreadsheet``
    encoding : str
        Text encoding of the delimited content

    """

    source_path: Path
    is_spreadsheet: bool
    separator: Separator
    spreadsheet_extension: Optional[str] = None
    temp_path: Optional[Path] = None
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        """Check that the spreadsheet-only fields match ``is_spreadsheet``."""
        if self.is_spreadsheet:
            if not self.spreadsheet_extension or self.temp_path is None:
                raise ValueError("Spreadsheet classification requires spreadsheet_extension and temp_path")
            if self.separator is not Separator.COMMA:
                raise ValueError("Spreadsheet sessions always use the comma separator")
        elif self.spreadsheet_extension is not None or self.temp_path is not None:
            raise ValueError("Delimited-text classification must not carry spreadsheet_extension or temp_path")

    @property
    def export_path(self) -> Path:
        """Path the delimited export is written to on save."""
        return self.temp_path if self.temp_path is not None else self.source_path


class Session:
    """Live state of one open file.

    Parameters
    ----------
    classification : FileClassification
        Frozen classification of the file
    surface : EditingSurface
        Surface that owns the session

    """

    def __init__(self, classification: FileClassification, surface: EditingSurface):
        """Create a session in the CLASSIFIED state."""
        self._classification = classification
        self.surface = surface
        self.dirty = False
        self.state = SessionState.CLASSIFIED

    def __repr__(self) -> str:
        """Return a short description of the session."""
        return (
            f"Session(source_path={str(self.source_path)!r}, separator={self.separator.value}, "
            f"state={self.state.value}, dirty={self.dirty})"
        )

    @property
    def classification(self) -> FileClassification:
        """The frozen classification record."""
        return self._classification

    @property
    def source_path(self) -> Path:
        """The file the user edits."""
        return self._classification.source_path

    @property
    def is_spreadsheet(self) -> bool:
        """Whether the file round-trips through a spreadsheet conversion."""
        return self._classification.is_spreadsheet

    @property
    def spreadsheet_extension(self) -> Optional[str]:
        """Original spreadsheet extension, or None for delimited text."""
        return self._classification.spreadsheet_extension

    @property
    def separator(self) -> Separator:
        """Field separator, fixed for the life of the session."""
        return self._classification.separator

    @property
    def temp_path(self) -> Optional[Path]:
        """Delimited working copy of a spreadsheet, or None."""
        return self._classification.temp_path

    @property
    def encoding(self) -> str:
        """Text encoding of the delimited content."""
        return self._classification.encoding

    @property
    def is_closed(self) -> bool:
        """Whether the session has been closed."""
        return self.state is SessionState.CLOSED

    def ensure_open(self) -> None:
        """Raise ``SessionClosedError`` if the session has been closed."""
        if self.is_closed:
            raise SessionClosedError(f"Session for {self.source_path} is closed")

    def mark_loaded(self) -> None:
        """Record that the surface has been populated."""
        self.dirty = False
        self.state = SessionState.LOADED

    def mark_dirty(self) -> None:
        """Record an edit."""
        if self.is_closed:
            return
        self.dirty = True
        self.state = SessionState.EDITING

    def begin_save(self) -> None:
        """Enter the SAVING state."""
        self.ensure_open()
        self.state = SessionState.SAVING

    def save_failed(self) -> None:
        """Return to EDITING after a failed save, keeping the session dirty."""
        self.dirty = True
        self.state = SessionState.EDITING

    def mark_clean(self) -> None:
        """Record a fully successful save."""
        self.dirty = False
        self.state = SessionState.CLEAN

    def mark_closed(self) -> None:
        """Record that the surface has been closed."""
        self.state = SessionState.CLOSED


def _registry_key(path: Union[str, Path]) -> Path:
    return Path(path).expanduser().resolve()


def _owned_keys(session: Session) -> list[Path]:
    keys = [_registry_key(session.source_path)]
    if session.temp_path is not None:
        keys.append(_registry_key(session.temp_path))
    return keys


class SessionRegistry:
    """Registry holding at most one session per source path.

    Paths are compared after ``expanduser`` and ``resolve`` so that relative
    and absolute spellings of the same file map to the same session. A
    session owns its source path and, for spreadsheets, its temporary CSV;
    no file is owned by two sessions.
    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._sessions: dict[Path, Session] = {}

    def __len__(self) -> int:
        """Return the number of live sessions."""
        return len(self._sessions)

    def __iter__(self) -> Iterator[Session]:
        """Iterate over live sessions."""
        return iter(list(self._sessions.values()))

    def __contains__(self, path: object) -> bool:
        """Return True if a session exists for ``path``."""
        if not isinstance(path, (str, Path)):
            return False
        return _registry_key(path) in self._sessions

    def get(self, path: Union[str, Path]) -> Optional[Session]:
        """Return the session for ``path``, or None."""
        return self._sessions.get(_registry_key(path))

    def owner_of(self, path: Union[str, Path]) -> Optional[Session]:
        """Return the session whose source path or temporary CSV is ``path``, or None."""
        key = _registry_key(path)
        for session in self._sessions.values():
            if key in _owned_keys(session):
                return session
        return None

    def add(self, session: Session) -> None:
        """Register ``session``.

        Raises
        ------
        ValueError
            If a file owned by ``session`` is already owned by a registered session

        """
        for owned in _owned_keys(session):
            if self.owner_of(owned) is not None:
                raise ValueError(f"{owned} is already in use by an open session")
        key = _registry_key(session.source_path)
        self._sessions[key] = session
        logger.debug("Registered session for %s", key)

    def remove(self, session: Session) -> None:
        """Unregister ``session`` if it is the registered one for its path."""
        key = _registry_key(session.source_path)
        if self._sessions.get(key) is session:
            del self._sessions[key]
            logger.debug("Unregistered session for %s", key)
