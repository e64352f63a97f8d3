#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tabbridge/utils/decorators.py
"""Dependency gate for the in-process spreadsheet readers and writers."""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, List

from tabbridge.exceptions import DependencyError
from tabbridge.utils.packages import Requirement, check_packages


def requires_dependencies(converter_name: str, packages: List[Requirement]) -> Callable:
    """Raise ``DependencyError`` before calling the wrapped function if packages are missing.

    Parameters
    ----------
    converter_name : str
        Format the function handles ("xlsx", "ods"); named in the error
    packages : list of tuple
        ``(install_name, import_name, version_spec)`` requirements, e.g.
        ``("odfpy", "odf", ">=1.4")``

    Examples
    --------
        >>> @requires_dependencies("xlsx", [("openpyxl", "openpyxl", "")])
        ... def read_xlsx_rows(path):
        ...     import openpyxl

    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            check = check_packages(packages)
            if not check.ok:
                raise DependencyError(
                    converter_name=converter_name,
                    missing_packages=check.missing,
                    version_mismatches=check.version_mismatches,
                    original_import_error=check.import_error,
                ) from check.import_error
            return func(*args, **kwargs)

        return wrapper

    return decorator
