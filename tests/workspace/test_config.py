# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the project configuration module."""

from pathlib import Path

import pytest

from sadl.views.layout import LayoutOptions
from sadl.workspace import (
    CONFIG_FILE_NAME,
    WorkspaceConfig,
    WorkspaceConfigError,
    find_workspace_config,
    load_workspace_config,
)

# ###############
# Helpers
# ###############


def _write_config(tmp_path: Path, content: str) -> Path:
    """Write a config file and return its path."""
    config_file = tmp_path / CONFIG_FILE_NAME
    config_file.write_text(content, encoding="utf-8")
    return config_file


# ###############
# Normal Cases
# ###############


def test_empty_config_uses_defaults(tmp_path: Path) -> None:
    """An empty file yields no include paths and default layout options."""
    config = load_workspace_config(_write_config(tmp_path, ""))
    assert isinstance(config, WorkspaceConfig)
    assert config.root == tmp_path
    assert config.include_paths == []
    assert config.layout == LayoutOptions()


def test_include_paths_are_relative_to_config(tmp_path: Path) -> None:
    """Include paths are resolved against the directory holding the config file."""
    config = load_workspace_config(_write_config(tmp_path, "include-paths:\n  - lib\n  - vendor/schemas\n"))
    assert config.include_paths == [tmp_path / "lib", tmp_path / "vendor/schemas"]


def test_layout_overrides(tmp_path: Path) -> None:
    """Layout keys override the corresponding defaults only."""
    content = "layout:\n  node-width: 160\n  padding: 20\n"
    config = load_workspace_config(_write_config(tmp_path, content))
    assert config.layout.node_width == 160
    assert config.layout.padding == 20
    assert config.layout.node_height == LayoutOptions().node_height


def test_find_config_next_to_source(tmp_path: Path) -> None:
    """find_workspace_config loads the config file beside the source file."""
    _write_config(tmp_path, "layout:\n  connector-spacing: 30\n")
    config = find_workspace_config(tmp_path / "main.sadl")
    assert config.layout.connector_spacing == 30


def test_find_config_defaults_without_file(tmp_path: Path) -> None:
    """Without a config file the defaults are rooted at the source directory."""
    config = find_workspace_config(tmp_path / "main.sadl")
    assert config == WorkspaceConfig(root=tmp_path)


# ###############
# Error Cases
# ###############


def test_missing_file(tmp_path: Path) -> None:
    """Loading a config file that does not exist raises WorkspaceConfigError."""
    with pytest.raises(WorkspaceConfigError, match="not found"):
        load_workspace_config(tmp_path / CONFIG_FILE_NAME)


def test_invalid_yaml(tmp_path: Path) -> None:
    """Malformed YAML raises WorkspaceConfigError."""
    with pytest.raises(WorkspaceConfigError, match="Invalid YAML"):
        load_workspace_config(_write_config(tmp_path, "include-paths: [unclosed\n"))


def test_non_mapping(tmp_path: Path) -> None:
    """A top-level list is rejected."""
    with pytest.raises(WorkspaceConfigError, match="mapping"):
        load_workspace_config(_write_config(tmp_path, "- lib\n"))


def test_unknown_top_level_key(tmp_path: Path) -> None:
    """Unknown keys are rejected and named in the message."""
    with pytest.raises(WorkspaceConfigError, match="build-directory"):
        load_workspace_config(_write_config(tmp_path, "build-directory: out\n"))


def test_include_paths_must_be_list(tmp_path: Path) -> None:
    """include-paths given as a scalar is rejected."""
    with pytest.raises(WorkspaceConfigError, match="must be a list"):
        load_workspace_config(_write_config(tmp_path, "include-paths: lib\n"))


def test_include_path_entries_must_be_strings(tmp_path: Path) -> None:
    """Non-string include-paths entries are rejected with their index."""
    with pytest.raises(WorkspaceConfigError, match=r"include-paths\[1\]"):
        load_workspace_config(_write_config(tmp_path, "include-paths:\n  - lib\n  - 42\n"))


@pytest.mark.parametrize("value", ["0", "-5", "wide", "true", "1.5"])
def test_layout_values_must_be_positive_integers(tmp_path: Path, value: str) -> None:
    """Layout values that are not positive integers are rejected."""
    with pytest.raises(WorkspaceConfigError, match="node-width"):
        load_workspace_config(_write_config(tmp_path, f"layout:\n  node-width: {value}\n"))


def test_unknown_layout_key(tmp_path: Path) -> None:
    """Unknown layout keys are rejected."""
    with pytest.raises(WorkspaceConfigError, match="unknown key 'colour'"):
        load_workspace_config(_write_config(tmp_path, "layout:\n  colour: red\n"))


def test_layout_must_be_mapping(tmp_path: Path) -> None:
    """A scalar layout section is rejected."""
    with pytest.raises(WorkspaceConfigError, match="layout must be a YAML mapping"):
        load_workspace_config(_write_config(tmp_path, "layout: compact\n"))
