#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tabbridge/options.py
"""Configuration options for the tabbridge round-trip bridge.

This module defines the frozen ``BridgeOptions`` dataclass that controls
format classification, separator detection, spreadsheet conversion and
session clean-up.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any, Mapping

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from tabbridge.constants import (
    DEFAULT_CONVERSION_TIMEOUT,
    DEFAULT_CONVERTER,
    DEFAULT_HEADER_SKIP_LINES,
    DEFAULT_REMOVE_TEMP_ON_CLOSE,
    DEFAULT_SPREADSHEET_EXTENSIONS,
    SUPPORTED_CONVERTERS,
    ConverterName,
)
from tabbridge.exceptions import ValidationError


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BridgeOptions(CloneFrozenMixin):
    """Configuration options for opening and saving tabular files.

    Parameters
    ----------
    spreadsheet_extensions : tuple[str, ...], default ("xlsx", "xls", "ods")
        File extensions treated as spreadsheet-class. Matching is
        case-insensitive; a leading dot is ignored.
    header_skip_lines : int, default 1
        Number of leading lines the separator detector ignores.
    converter : {"libreoffice", "python"}, default "libreoffice"
        Backend used for spreadsheet conversion. ``"libreoffice"`` runs the
        external ``soffice`` tool; ``"python"`` converts xlsx and ods files
        in-process with openpyxl and odfpy.
    soffice_path : str or None, default None
        Explicit path to the LibreOffice executable. When unset, ``soffice``
        and ``libreoffice`` are looked up on PATH.
    conversion_timeout : float or None, default 120.0
        Seconds to wait for an external conversion before giving up.
        None waits indefinitely.
    encoding : str or None, default None
        Force the text encoding of delimited-text files instead of detecting it.
    remove_temp_on_close : bool, default False
        Delete a spreadsheet's temporary CSV copy when its session is closed.

    """

    spreadsheet_extensions: tuple[str, ...] = field(
        default=DEFAULT_SPREADSHEET_EXTENSIONS,
        metadata={"help": "File extensions treated as spreadsheets (e.g., xlsx,xls,ods)", "importance": "core"},
    )
    header_skip_lines: int = field(
        default=DEFAULT_HEADER_SKIP_LINES,
        metadata={"help": "Leading lines ignored by separator detection", "type": int, "importance": "core"},
    )
    converter: ConverterName = field(
        default=DEFAULT_CONVERTER,
        metadata={
            "help": "Spreadsheet conversion backend",
            "choices": list(SUPPORTED_CONVERTERS),
            "importance": "core",
        },
    )
    soffice_path: str | None = field(
        default=None,
        metadata={"help": "Path to the LibreOffice soffice executable", "importance": "advanced"},
    )
    conversion_timeout: float | None = field(
        default=DEFAULT_CONVERSION_TIMEOUT,
        metadata={"help": "Seconds to wait for an external conversion", "type": float, "importance": "advanced"},
    )
    encoding: str | None = field(
        default=None,
        metadata={"help": "Force the text encoding of delimited files", "importance": "advanced"},
    )
    remove_temp_on_close: bool = field(
        default=DEFAULT_REMOVE_TEMP_ON_CLOSE,
        metadata={"help": "Delete the temporary CSV copy of a spreadsheet on close", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Normalize extensions and validate numeric ranges.

        Raises
        ------
        ValidationError
            If any field value is outside its valid range.

        """
        if isinstance(self.spreadsheet_extensions, str):
            raw_extensions: Any = self.spreadsheet_extensions.split(",")
        else:
            raw_extensions = self.spreadsheet_extensions
        normalized = tuple(ext.strip().lstrip(".").lower() for ext in raw_extensions if ext and ext.strip())
        object.__setattr__(self, "spreadsheet_extensions", normalized)

        if self.header_skip_lines < 0:
            raise ValidationError(
                f"header_skip_lines must be non-negative, got {self.header_skip_lines}",
                parameter_name="header_skip_lines",
                parameter_value=self.header_skip_lines,
            )

        if self.converter not in SUPPORTED_CONVERTERS:
            raise ValidationError(
                f"Unknown converter '{self.converter}'. Choose one of: {', '.join(SUPPORTED_CONVERTERS)}",
                parameter_name="converter",
                parameter_value=self.converter,
            )

        if self.conversion_timeout is not None and self.conversion_timeout <= 0:
            raise ValidationError(
                f"conversion_timeout must be positive, got {self.conversion_timeout}",
                parameter_name="conversion_timeout",
                parameter_value=self.conversion_timeout,
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BridgeOptions":
        """Build options from a configuration mapping.

        Keys may use hyphens or underscores. Unknown keys are rejected so
        that typos in configuration files do not pass silently.

        Parameters
        ----------
        data : Mapping[str, Any]
            Configuration values, e.g. loaded from ``.tabbridge.toml``

        Returns
        -------
        BridgeOptions
            Options populated from ``data``

        Raises
        ------
        ValidationError
            If ``data`` contains unknown keys or invalid values

        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = key.replace("-", "_")
            if name not in known:
                raise ValidationError(f"Unknown option '{key}'", parameter_name=key, parameter_value=value)
            kwargs[name] = value

        if isinstance(kwargs.get("spreadsheet_extensions"), list):
            kwargs["spreadsheet_extensions"] = tuple(kwargs["spreadsheet_extensions"])

        try:
            return cls(**kwargs)
        except TypeError as e:
            raise ValidationError(f"Invalid options: {e}", original_error=e) from e

    def to_dict(self) -> dict[str, Any]:
        """Return the options as a plain dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}
