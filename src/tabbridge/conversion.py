#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tabbridge/conversion.py
"""Forward and reverse spreadsheet conversion around an injected backend.

``ConversionBridge.forward`` turns a spreadsheet into its delimited working
copy (``report.xlsx`` -> ``report.csv``); ``ConversionBridge.reverse`` turns
the working copy back into the spreadsheet, overwriting the original.

Every conversion renders into a private staging directory beside its final
destination. The output is checked for existence and readability there and
only then moved into place with ``os.replace``, so a missing tool, a crash
or a partial write never modifies the destination file.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Callable, Union

from tabbridge.classifier import temp_path_for
from tabbridge.constants import STAGING_DIR_PREFIX
from tabbridge.converters.base import SpreadsheetConverter
from tabbridge.exceptions import ConversionError, DependencyError, FileNotFoundError

logger = logging.getLogger(__name__)


class ConversionBridge:
    """Drive a ``SpreadsheetConverter`` with staging and output verification.

    Parameters
    ----------
    converter : SpreadsheetConverter
        Backend performing the actual conversion

    Examples
    --------
    >>> from tabbridge.converters import LibreOfficeConverter
    >>> bridge = ConversionBridge(LibreOfficeConverter())
    >>> temp_path = bridge.forward("report.xlsx")  # doctest: +SKIP
    >>> bridge.reverse(temp_path, "xlsx")  # doctest: +SKIP
    PosixPath('report.xlsx')

    """

    def __init__(self, converter: SpreadsheetConverter):
        """Initialize the bridge with its backend."""
        self.converter = converter

    @property
    def tool_name(self) -> str:
        """Name of the backend's conversion tool."""
        return self.converter.tool_name

    def forward(self, source_path: Union[str, Path]) -> Path:
        """Convert a spreadsheet into its delimited working copy.

        Parameters
        ----------
        source_path : str or Path
            Spreadsheet to convert

        Returns
        -------
        Path
            The working copy: ``source_path`` with its extension replaced by ``.csv``

        Raises
        ------
        FileNotFoundError
            If ``source_path`` does not exist
        ConversionError
            If the tool is missing or fails, or produces no readable output

        """
        source = Path(source_path)
        if not source.is_file():
            raise FileNotFoundError(str(source))

        target = temp_path_for(source)
        logger.info("Converting %s to %s with %s", source, target, self.tool_name)
        self._convert_staged(self.converter.to_delimited, source, target)
        return target

    def reverse(
        self,
        export_path: Union[str, Path],
        target_extension: str,
        target: Union[str, Path, None] = None,
    ) -> Path:
        """Convert a delimited export back into its spreadsheet format.

        Parameters
        ----------
        export_path : str or Path
            Delimited file written by the export step
        target_extension : str
            Spreadsheet format to produce (e.g., "xlsx")
        target : str or Path, optional
            Spreadsheet to overwrite. Defaults to ``export_path`` with its
            extension replaced by ``target_extension``; pass the session's
            source path so a suffix such as ``.XLSX`` is kept as it is.

        Returns
        -------
        Path
            The overwritten spreadsheet

        Raises
        ------
        ConversionError
            If the tool is missing or fails, or produces no readable output.
            The spreadsheet is left untouched in that case.

        """
        export = Path(export_path)
        extension = target_extension.lstrip(".").lower()
        destination = Path(target) if target is not None else export.with_suffix(f".{extension}")
        logger.info("Converting %s back to %s with %s", export, destination, self.tool_name)
        self._convert_staged(self.converter.from_delimited, export, destination, extension)
        return destination

    def _convert_staged(self, convert: Callable[..., None], source: Path, target: Path, *args: Any) -> None:
        try:
            staging_dir = Path(tempfile.mkdtemp(prefix=STAGING_DIR_PREFIX, dir=target.parent))
        except OSError as e:
            raise ConversionError(
                f"Cannot create a staging directory next to {target}: {e}",
                tool=self.tool_name,
                file_path=str(source),
                original_error=e,
            ) from e

        try:
            staged = staging_dir / target.name
            self._invoke(convert, source, staged, *args)
            self._verify_output(staged, source)
            os.replace(staged, target)
            logger.debug("Moved %s into place at %s", staged, target)
        except OSError as e:
            raise ConversionError(
                f"Could not move converted output into place at {target}: {e}",
                tool=self.tool_name,
                file_path=str(source),
                original_error=e,
            ) from e
        finally:
            shutil.rmtree(staging_dir, ignore_errors=True)

    def _invoke(self, convert: Callable[..., None], source: Path, staged: Path, *args: Any) -> None:
        try:
            convert(source, staged, *args)
        except ConversionError:
            raise
        except DependencyError as e:
            packages = ", ".join(name for name, _ in e.missing_packages) or e.converter_name
            raise ConversionError(
                f"{self.tool_name} is missing required packages ({packages}).\n{e.message}",
                tool=packages,
                file_path=str(source),
                original_error=e,
            ) from e
        except Exception as e:
            raise ConversionError(
                f"{self.tool_name} failed converting {source}: {e!r}",
                tool=self.tool_name,
                file_path=str(source),
                original_error=e,
            ) from e

    def _verify_output(self, staged: Path, source: Path) -> None:
        try:
            with open(staged, "rb") as f:
                f.read(1)
        except OSError as e:
            raise ConversionError(
                f"{self.tool_name} did not produce a readable file when converting {source}. "
                f"Make sure {self.tool_name} is installed and working.",
                tool=self.tool_name,
                file_path=str(source),
                original_error=e,
            ) from e
