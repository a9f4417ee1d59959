# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the SADL project configuration file."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml
from pydantic import ValidationError as _PydanticValidationError

from sadl.views.layout import LayoutOptions

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".sadl.yaml"


class WorkspaceConfigError(Exception):
    """Raised when a configuration file is invalid or cannot be loaded."""


@dataclass
class WorkspaceConfig:
    """The parsed configuration for a SADL project.

    Attributes:
        root: Directory containing the configuration file; relative include
            paths are resolved against it.
        include_paths: Directories searched for included files, in order.
        layout: Grid metrics used when laying out views.
    """

    root: Path
    include_paths: list[Path] = field(default_factory=list)
    layout: LayoutOptions = field(default_factory=LayoutOptions)


def load_workspace_config(path: Path) -> WorkspaceConfig:
    """Load and parse a SADL configuration file.

    Args:
        path: Path to the `.sadl.yaml` file.

    Returns:
        A WorkspaceConfig instance populated from the file.

    Raises:
        WorkspaceConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise WorkspaceConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise WorkspaceConfigError(f"Cannot read config file: {exc}") from exc

    return _parse_workspace_config(text, root=path.parent, source_label=str(path))


def find_workspace_config(source_file: Path) -> WorkspaceConfig:
    """Return the configuration next to *source_file*, or defaults if there is none."""
    candidate = source_file.parent / CONFIG_FILE_NAME
    if candidate.exists():
        return load_workspace_config(candidate)
    return WorkspaceConfig(root=source_file.parent)


# ################
# Implementation
# ################

_TOP_LEVEL_KEYS = frozenset({"include-paths", "layout"})

_LAYOUT_KEYS: dict[str, str] = {
    "node-width": "node_width",
    "node-height": "node_height",
    "padding": "padding",
    "connector-spacing": "connector_spacing",
}


def _parse_workspace_config(text: str, root: Path, source_label: str = "<string>") -> WorkspaceConfig:
    """Parse configuration YAML text into a WorkspaceConfig.

    Args:
        text: Raw YAML content.
        root: Directory relative include paths are resolved against.
        source_label: Human-readable label used in error messages (e.g. the file path).

    Returns:
        A WorkspaceConfig instance.

    Raises:
        WorkspaceConfigError: If the YAML is invalid or a field has the wrong type.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise WorkspaceConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise WorkspaceConfigError(f"{source_label}: configuration must be a YAML mapping")

    unknown = sorted(set(data) - _TOP_LEVEL_KEYS)
    if unknown:
        raise WorkspaceConfigError(f"{source_label}: unknown key(s): {', '.join(map(str, unknown))}")

    include_paths: list[Path] = []
    if "include-paths" in data:
        raw_paths = data["include-paths"]
        if not isinstance(raw_paths, list):
            raise WorkspaceConfigError(f"{source_label}: 'include-paths' must be a list")
        for index, entry in enumerate(raw_paths):
            if not isinstance(entry, str):
                raise WorkspaceConfigError(f"{source_label}: include-paths[{index}] must be a string")
            include_paths.append(root / entry)

    layout = LayoutOptions()
    if "layout" in data:
        layout = _parse_layout(data["layout"], source_label)

    return WorkspaceConfig(root=root, include_paths=include_paths, layout=layout)


def _parse_layout(raw: object, source_label: str) -> LayoutOptions:
    """Parse the ``layout`` mapping into LayoutOptions."""
    location = f"{source_label}: layout"
    if not isinstance(raw, dict):
        raise WorkspaceConfigError(f"{location} must be a YAML mapping")

    values: dict[str, int] = {}
    for key, value in raw.items():
        if key not in _LAYOUT_KEYS:
            raise WorkspaceConfigError(f"{location}: unknown key '{key}'")
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise WorkspaceConfigError(f"{location}: '{key}' must be a positive integer")
        values[_LAYOUT_KEYS[key]] = value

    try:
        return LayoutOptions(**values)
    except _PydanticValidationError as exc:
        raise WorkspaceConfigError(f"{location}: {exc}") from exc
