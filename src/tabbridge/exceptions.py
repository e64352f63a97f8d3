#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Custom exceptions for the tabbridge library.

This module defines specialized exception classes for the error conditions
that can occur while opening, converting and saving tabular files. These
exceptions provide more specific error information than generic built-ins.

Exception Hierarchy
-------------------
- TabBridgeError (base exception)

  - ValidationError (parameter/option validation)

  - FileError (file access and I/O)
    - FileNotFoundError (file doesn't exist)
    - FileAccessError (permissions, unreadable input)

  - ConversionError (external conversion tool missing or failed)

  - ExportWriteError (writing the delimited export failed)

  - SessionClosedError (operation on a closed session)

  - DependencyError (missing/incompatible packages)

A declined confirmation prompt and a request to open an already-open file
are not errors; they are reported through ``OpenStatus``.

"""

from typing import Any


class TabBridgeError(Exception):
    """Base exception class for all tabbridge-specific errors.

    Parameters
    ----------
    message : str
        Human-readable description of the error
    original_error : Exception, optional
        The original exception that caused this error, if applicable

    Attributes
    ----------
    message : str
        The error message
    original_error : Exception or None
        The wrapped original exception, if any

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Initialize the error with a message and optional original exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(TabBridgeError):
    """Exception raised for invalid input parameters or options.

    Parameters
    ----------
    message : str
        Description of the validation error
    parameter_name : str, optional
        Name of the invalid parameter
    parameter_value : any, optional
        The invalid value that was provided
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Initialize the validation error with parameter details."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class FileError(TabBridgeError):
    """Base exception for file access and I/O errors.

    Parameters
    ----------
    message : str
        Description of the file error
    file_path : str, optional
        Path to the problematic file
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Initialize the file error with path and message."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class FileNotFoundError(FileError):
    """Exception raised when a file cannot be found."""

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the file not found error."""
        if message is None:
            message = f"File not found: {file_path}"
        super().__init__(message, file_path=file_path, original_error=original_error)


class FileAccessError(FileError):
    """Exception raised when a file cannot be read.

    This includes permission errors and undecodable text.

    """

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the file access error."""
        if message is None:
            message = f"Cannot access file: {file_path}"
        super().__init__(message, file_path=file_path, original_error=original_error)


class ConversionError(TabBridgeError):
    """Exception raised when spreadsheet conversion cannot produce its output.

    Raised when the external conversion tool is missing, misconfigured, exits
    with an error, times out, or finishes without leaving a readable output
    file. The message always names the tool so the user can install or
    configure it.

    Parameters
    ----------
    message : str
        Description of the failure, including remediation guidance
    tool : str
        Human-readable name of the conversion tool involved
    file_path : str, optional
        The file being converted
    original_error : Exception, optional
        The underlying exception

    Attributes
    ----------
    tool : str
        Name of the conversion tool
    file_path : str or None
        The file being converted

    """

    def __init__(
        self,
        message: str,
        tool: str,
        file_path: str | None = None,
        original_error: Exception | None = None,
    ):
        """Initialize the conversion error."""
        super().__init__(message, original_error=original_error)
        self.tool = tool
        self.file_path = file_path


class ExportWriteError(TabBridgeError):
    """Exception raised when writing the delimited export fails.

    Parameters
    ----------
    file_path : str
        Path the export was being written to
    message : str, optional
        Custom error message. If not provided, uses default message
    original_error : Exception, optional
        The original exception that caused this error

    """

    def __init__(self, file_path: str, message: str | None = None, original_error: Exception | None = None):
        """Initialize the export write error."""
        if message is None:
            message = f"Failed to write export file: {file_path}"
            if original_error is not None:
                message += f" ({original_error})"
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class SessionClosedError(TabBridgeError):
    """Exception raised when operating on a session that has been closed."""


class DependencyError(TabBridgeError):
    """Exception raised when required dependencies are not available.

    Parameters
    ----------
    converter_name : str
        Name of the converter requiring dependencies
    missing_packages : list[tuple[str, str]]
        List of (package_name, version_spec) tuples for missing packages
    version_mismatches : list[tuple[str, str, str]], optional
        List of (package_name, required_version, installed_version) tuples
    install_command : str, optional
        Suggested pip install command to resolve the issue
    message : str, optional
        Custom error message. If not provided, generates a helpful message

    """

    def __init__(
        self,
        converter_name: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        install_command: str = "",
        message: str | None = None,
        original_import_error: ImportError | None = None,
    ):
        """Initialize the dependency error with package details."""
        version_mismatches = version_mismatches or []
        self.original_import_error = original_import_error
        if message is None:
            message_parts = []

            if missing_packages:
                pkg_list = ", ".join(f"'{name}{spec}'" if spec else f"'{name}'" for name, spec in missing_packages)
                message_parts.append(f"{converter_name.upper()} conversion requires the following packages: {pkg_list}")

            if version_mismatches:
                mismatch_details = []
                for name, required, installed in version_mismatches:
                    mismatch_details.append(f"'{name}' (requires {required}, but {installed} is installed)")
                mismatch_str = ", ".join(mismatch_details)
                message_parts.append(f"{converter_name.upper()} conversion has version mismatches: {mismatch_str}")

            message = "\n".join(message_parts)

            if install_command:
                message += f"\nInstall with: {install_command}"
            else:
                all_packages = missing_packages + [(name, req) for name, req, _ in version_mismatches]
                if all_packages:
                    packages_str = " ".join(f'"{name}{spec}"' if spec else name for name, spec in all_packages)
                    message += f"\nInstall with: pip install --upgrade {packages_str}"

        super().__init__(message)
        self.converter_name = converter_name
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches
        self.install_command = install_command
