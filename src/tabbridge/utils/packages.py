"""Installed-package checks for the optional in-process backends."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/tabbridge/utils/packages.py
from __future__ import annotations

import importlib
from dataclasses import dataclass, field
from importlib import metadata
from typing import Iterable, List, Optional, Tuple

from packaging import version
from packaging.specifiers import SpecifierSet

Requirement = Tuple[str, str, str]


def get_package_version(package_name: str) -> Optional[str]:
    """Return the installed version of a distribution, or None.

    ``package_name`` is the distribution name ("odfpy"), not the import
    name ("odf").
    """
    try:
        return metadata.version(package_name)
    except metadata.PackageNotFoundError:
        return None


def check_version_requirement(package_name: str, version_spec: str) -> Tuple[bool, Optional[str]]:
    """Check if installed package meets version requirement.

    Parameters
    ----------
    package_name : str
        Distribution name of the package
    version_spec : str
        Version specifier (e.g., ">=3.1")

    Returns
    -------
    tuple
        (meets_requirement, installed_version)

    """
    installed_version = get_package_version(package_name)
    if not installed_version:
        return False, None

    return version.parse(installed_version) in SpecifierSet(version_spec), installed_version


@dataclass
class PackageCheck:
    """Outcome of checking a list of requirements."""

    missing: List[Tuple[str, str]] = field(default_factory=list)
    version_mismatches: List[Tuple[str, str, str]] = field(default_factory=list)
    import_error: Optional[ImportError] = None

    @property
    def ok(self) -> bool:
        """True when every requirement is importable at a matching version."""
        return not self.missing and not self.version_mismatches


def check_packages(requirements: Iterable[Requirement]) -> PackageCheck:
    """Import each requirement and compare its installed version.

    Parameters
    ----------
    requirements : iterable of (install_name, import_name, version_spec)
        ``version_spec`` may be empty to accept any version

    Returns
    -------
    PackageCheck
        Missing packages, version mismatches and the first ImportError seen

    """
    result = PackageCheck()
    for install_name, import_name, version_spec in requirements:
        try:
            # nosemgrep: python.lang.security.audit.non-literal-import.non-literal-import
            importlib.import_module(import_name)
        except ImportError as e:
            result.missing.append((install_name, version_spec))
            if result.import_error is None:
                result.import_error = e
            continue

        if version_spec:
            meets_requirement, installed_version = check_version_requirement(install_name, version_spec)
            if not meets_requirement:
                result.version_mismatches.append((install_name, version_spec, installed_version or "unknown"))
    return result
