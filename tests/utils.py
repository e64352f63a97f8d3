"""Test utilities for tabbridge test suite.

This module provides helper functions and fakes for the tests: temporary
directories, directory snapshots and a spreadsheet converter that needs no
external tool.
"""

import shutil
import tempfile
from pathlib import Path

from tabbridge.converters.base import SpreadsheetConverter
from tabbridge.exceptions import ConversionError


class FakeConverter(SpreadsheetConverter):
    """Converter treating "spreadsheets" as CSV files with a different extension.

    Forward conversion copies the spreadsheet's bytes to the CSV target and
    reverse conversion copies them back, so tests can inspect exactly what
    was exported. Failures can be switched on per direction.
    """

    tool_name = "FakeOffice"

    def __init__(self):
        self.calls = []
        self.fail_forward = False
        self.fail_reverse = False
        self.produce_nothing = False
        self.raise_error = None

    def _maybe_fail(self, failing: bool, source: Path) -> None:
        if self.raise_error is not None:
            raise self.raise_error
        if failing:
            raise ConversionError(
                f"{self.tool_name} is not installed. Install FakeOffice to convert {source}.",
                tool=self.tool_name,
                file_path=str(source),
            )

    def to_delimited(self, source: Path, target: Path) -> None:
        self.calls.append(("to_delimited", source, target))
        self._maybe_fail(self.fail_forward, source)
        if not self.produce_nothing:
            shutil.copyfile(source, target)

    def from_delimited(self, source: Path, target: Path, extension: str) -> None:
        self.calls.append(("from_delimited", source, target, extension))
        self._maybe_fail(self.fail_reverse, source)
        if not self.produce_nothing:
            shutil.copyfile(source, target)


def snapshot_dir(directory: Path) -> dict:
    """Return a mapping of relative file path to file bytes for ``directory``."""
    return {
        str(path.relative_to(directory)): path.read_bytes() for path in sorted(directory.rglob("*")) if path.is_file()
    }


def create_test_temp_dir() -> Path:
    """Create a temporary directory for test files."""
    return Path(tempfile.mkdtemp())


def cleanup_test_dir(temp_dir: Path) -> None:
    """Clean up test directory and files."""
    if temp_dir.exists():
        shutil.rmtree(temp_dir)
