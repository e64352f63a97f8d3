#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery and loading for the tabbridge CLI.

Configuration files hold ``BridgeOptions`` values, for example::

    # .tabbridge.toml
    converter = "python"
    header-skip-lines = 0
    spreadsheet-extensions = ["xlsx", "ods"]

JSON, TOML and YAML files are supported, as is a ``[tool.tabbridge]`` table
in ``pyproject.toml``. Every loading problem is reported as
``argparse.ArgumentTypeError`` so the CLI can treat it as a usage error.
"""

import argparse
import json
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Callable, Dict, Optional

import yaml

from tabbridge.constants import CONFIG_FILENAMES, PYPROJECT_TOOL_SECTION

Config = Dict[str, Any]


def _parse_toml(path: Path) -> Any:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _parse_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _parse_yaml(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        # An empty YAML document means "no settings"
        return yaml.safe_load(f) or {}


# suffix -> (format label, parser, parse error type)
_PARSERS: Dict[str, tuple[str, Callable[[Path], Any], type[Exception]]] = {
    ".toml": ("TOML", _parse_toml, tomllib.TOMLDecodeError),
    ".json": ("JSON", _parse_json, json.JSONDecodeError),
    ".yaml": ("YAML", _parse_yaml, yaml.YAMLError),
    ".yml": ("YAML", _parse_yaml, yaml.YAMLError),
}


def _read_mapping(path: Path) -> Config:
    suffix = path.suffix.lower()
    if suffix not in _PARSERS:
        raise argparse.ArgumentTypeError(f"Unsupported config file format: {suffix}. Use .json, .toml, or .yaml")

    label, parse, parse_error = _PARSERS[suffix]
    try:
        data = parse(path)
    except parse_error as e:
        raise argparse.ArgumentTypeError(f"Invalid {label} in config file {path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading {label} config {path}: {e}") from e

    if not isinstance(data, dict):
        raise argparse.ArgumentTypeError(f"{label} config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def _tool_section(pyproject_path: Path) -> Config:
    section = _read_mapping(pyproject_path).get("tool", {}).get(PYPROJECT_TOOL_SECTION, {})
    if not isinstance(section, dict):
        raise argparse.ArgumentTypeError(
            f"[tool.{PYPROJECT_TOOL_SECTION}] in {pyproject_path} must be a table, got {type(section).__name__}"
        )
    return section


def _config_in(directory: Path, include_pyproject: bool) -> Optional[Path]:
    for filename in CONFIG_FILENAMES:
        candidate = directory / filename
        if candidate.is_file():
            return candidate

    pyproject = directory / "pyproject.toml"
    if include_pyproject and pyproject.is_file():
        try:
            if _tool_section(pyproject):
                return pyproject
        except argparse.ArgumentTypeError:
            # Someone else's broken pyproject.toml is not our configuration
            return None
    return None


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Return the nearest configuration file at or above ``start_dir``.

    In each directory the dedicated files (``.tabbridge.toml``,
    ``.tabbridge.yaml``, ``.tabbridge.yml``, ``.tabbridge.json``) win over a
    ``pyproject.toml`` carrying a ``[tool.tabbridge]`` table.

    Parameters
    ----------
    start_dir : Path, optional
        Where the search starts; defaults to the current working directory

    Returns
    -------
    Path or None
        The first configuration file found

    """
    current = (start_dir or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        found = _config_in(directory, include_pyproject=True)
        if found is not None:
            return found
    return None


def discover_config_file(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Search ``start_dir`` and its parents, then the home directory (dedicated files only)."""
    return find_config_in_parents(start_dir) or _config_in(Path.home(), include_pyproject=False)


def load_config_file(config_path: Path | str) -> Config:
    """Load option values from a configuration file.

    Parameters
    ----------
    config_path : Path or str
        A ``.toml``, ``.json``, ``.yaml``/``.yml`` file or a ``pyproject.toml``

    Returns
    -------
    dict
        Option values; for ``pyproject.toml`` only the ``[tool.tabbridge]`` table

    Raises
    ------
    argparse.ArgumentTypeError
        If the file is missing, unreadable, malformed or of an unknown format

    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise argparse.ArgumentTypeError(f"Configuration file does not exist: {config_path}")
    if not config_path.is_file():
        raise argparse.ArgumentTypeError(f"Configuration path is not a file: {config_path}")

    if config_path.name.lower() == "pyproject.toml":
        return _tool_section(config_path)
    return _read_mapping(config_path)


def load_config_with_priority(
    explicit_path: Optional[str] = None,
    env_var_path: Optional[str] = None,
    start_dir: Optional[Path] = None,
) -> Config:
    """Load the configuration that applies to this run.

    The first of these wins: ``explicit_path`` (``--config``),
    ``env_var_path`` (``TABBRIDGE_CONFIG``), then a discovered file. Returns
    an empty dict when there is no configuration.

    Raises
    ------
    argparse.ArgumentTypeError
        If the selected file cannot be loaded

    """
    chosen = explicit_path or env_var_path or discover_config_file(start_dir)
    return load_config_file(chosen) if chosen else {}
