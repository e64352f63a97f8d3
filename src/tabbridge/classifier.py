#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tabbridge/classifier.py
"""Classification of input paths as spreadsheet-class or delimited-text-class.

Classification looks only at the path's extension; it never touches the
filesystem.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional, Union

from tabbridge.constants import CONVERTED_CSV_ENCODING, DEFAULT_SPREADSHEET_EXTENSIONS, TEMP_FILE_SUFFIX
from tabbridge.separator import Separator
from tabbridge.session import FileClassification

PathLike = Union[str, Path]


def spreadsheet_extension(path: PathLike) -> str:
    """Return the lower-case extension of ``path`` without its leading dot.

    Parameters
    ----------
    path : str or Path
        Any file path

    Returns
    -------
    str
        Extension such as ``"xlsx"``, or ``""`` when the path has none

    """
    return Path(path).suffix.lstrip(".").lower()


def is_spreadsheet(path: PathLike, extensions: Optional[Iterable[str]] = None) -> bool:
    """Decide whether ``path`` names a spreadsheet-class file.

    Parameters
    ----------
    path : str or Path
        Any file path
    extensions : iterable of str, optional
        Recognized spreadsheet extensions. Defaults to xlsx, xls and ods.

    Returns
    -------
    bool
        True iff the path's extension is one of ``extensions``

    """
    if extensions is None:
        extensions = DEFAULT_SPREADSHEET_EXTENSIONS
    recognized = {ext.lstrip(".").lower() for ext in extensions}
    ext = spreadsheet_extension(path)
    return bool(ext) and ext in recognized


def temp_path_for(path: PathLike) -> Path:
    """Return the delimited working copy path for a spreadsheet.

    The extension is replaced by ``.csv``; a path without an extension gets
    ``.csv`` appended.
    """
    return Path(path).with_suffix(TEMP_FILE_SUFFIX)


def classify(
    path: PathLike,
    separator: Optional[Separator] = None,
    encoding: str = CONVERTED_CSV_ENCODING,
    extensions: Optional[Iterable[str]] = None,
) -> FileClassification:
    """Build the frozen classification record for ``path``.

    Spreadsheets always get the comma separator, their extension and their
    temporary CSV path. Delimited-text files need the separator found by
    ``detect_separator``.

    Parameters
    ----------
    path : str or Path
        Source file
    separator : Separator, optional
        Detected separator; required for delimited-text files and ignored
        for spreadsheets
    encoding : str, default "utf-8"
        Encoding of the delimited content
    extensions : iterable of str, optional
        Recognized spreadsheet extensions

    Returns
    -------
    FileClassification
        Classification of ``path``

    Raises
    ------
    ValueError
        If ``path`` is delimited text and no separator was given

    """
    path = Path(path)
    if is_spreadsheet(path, extensions):
        return FileClassification(
            source_path=path,
            is_spreadsheet=True,
            separator=Separator.COMMA,
            spreadsheet_extension=spreadsheet_extension(path),
            temp_path=temp_path_for(path),
            encoding=CONVERTED_CSV_ENCODING,
        )

    if separator is None:
        raise ValueError(f"A separator is required to classify delimited text file {path}")
    return FileClassification(source_path=path, is_spreadsheet=False, separator=separator, encoding=encoding)
