#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tabbridge/converters/libreoffice.py
"""Spreadsheet conversion through a headless LibreOffice process.

LibreOffice writes ``<stem>.<ext>`` into the ``--outdir`` directory; the
converter renames that file to the requested target when the names differ.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from tabbridge.constants import (
    DEFAULT_CONVERSION_TIMEOUT,
    LIBREOFFICE_CSV_EXPORT_FILTER,
    LIBREOFFICE_CSV_IMPORT_FILTER,
    LIBREOFFICE_TOOL_NAME,
    SOFFICE_EXECUTABLES,
)
from tabbridge.converters.base import SpreadsheetConverter
from tabbridge.exceptions import ConversionError

logger = logging.getLogger(__name__)


class LibreOfficeConverter(SpreadsheetConverter):
    """Convert spreadsheets with ``soffice --headless --convert-to``.

    Parameters
    ----------
    soffice_path : str, optional
        Executable name or path. When omitted, ``soffice`` and then
        ``libreoffice`` are looked up on PATH.
    timeout : float or None, default 120.0
        Seconds to wait for each conversion; None waits indefinitely.

    """

    tool_name = LIBREOFFICE_TOOL_NAME

    def __init__(self, soffice_path: Optional[str] = None, timeout: Optional[float] = DEFAULT_CONVERSION_TIMEOUT):
        """Initialize the converter without touching the filesystem."""
        self.soffice_path = soffice_path
        self.timeout = timeout

    def find_executable(self) -> str:
        """Locate the LibreOffice executable.

        Returns
        -------
        str
            Absolute path of the executable

        Raises
        ------
        ConversionError
            If no executable can be found

        """
        candidates: Sequence[str] = (self.soffice_path,) if self.soffice_path else SOFFICE_EXECUTABLES
        for candidate in candidates:
            found = shutil.which(candidate)
            if found:
                logger.debug("Using LibreOffice executable %s", found)
                return found

        searched = ", ".join(candidates)
        raise ConversionError(
            f"{self.tool_name} is required to convert spreadsheets but was not found (looked for: {searched}). "
            "Install LibreOffice, set 'soffice_path' to its executable, "
            "or use converter = 'python' for xlsx and ods files.",
            tool=self.tool_name,
        )

    def _run(self, args: list[str], file_path: Path) -> None:
        cmd = [self.find_executable(), "--headless", *args]
        logger.debug("Running %s", " ".join(cmd))

        try:
            subprocess.run(cmd, check=True, stdout=subprocess.PIPE, stderr=subprocess.PIPE, timeout=self.timeout)
        except FileNotFoundError as e:
            raise ConversionError(
                f"{self.tool_name} could not be started: {e}. Check that LibreOffice is installed.",
                tool=self.tool_name,
                file_path=str(file_path),
                original_error=e,
            ) from e
        except subprocess.TimeoutExpired as e:
            raise ConversionError(
                f"{self.tool_name} did not finish converting {file_path} within {self.timeout} seconds. "
                "Close other LibreOffice windows or raise 'conversion_timeout'.",
                tool=self.tool_name,
                file_path=str(file_path),
                original_error=e,
            ) from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode("utf-8", errors="ignore").strip()
            raise ConversionError(
                f"{self.tool_name} failed converting {file_path} (exit code {e.returncode}): {stderr or 'no output'}",
                tool=self.tool_name,
                file_path=str(file_path),
                original_error=e,
            ) from e

    @staticmethod
    def _move_output(produced: Path, target: Path) -> None:
        if produced != target and produced.exists():
            os.replace(produced, target)

    def to_delimited(self, source: Path, target: Path) -> None:
        """Export the first sheet of ``source`` to CSV at ``target``."""
        self._run(["--convert-to", LIBREOFFICE_CSV_EXPORT_FILTER, "--outdir", str(target.parent), str(source)], source)
        self._move_output(target.parent / f"{source.stem}.csv", target)

    def from_delimited(self, source: Path, target: Path, extension: str) -> None:
        """Import the CSV ``source`` and save it as ``extension`` at ``target``."""
        self._run(
            [
                f"--infilter={LIBREOFFICE_CSV_IMPORT_FILTER}",
                "--convert-to",
                extension,
                "--outdir",
                str(target.parent),
                str(source),
            ],
            source,
        )
        self._move_output(target.parent / f"{source.stem}.{extension}", target)
