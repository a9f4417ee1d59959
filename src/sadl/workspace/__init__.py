# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Project configuration and filesystem include resolution."""

from sadl.workspace.config import (
    CONFIG_FILE_NAME,
    WorkspaceConfig,
    WorkspaceConfigError,
    find_workspace_config,
    load_workspace_config,
)
from sadl.workspace.resolver import FileSystemResolver, IncludeNotFoundError

__all__ = [
    "CONFIG_FILE_NAME",
    "WorkspaceConfig",
    "WorkspaceConfigError",
    "find_workspace_config",
    "load_workspace_config",
    "FileSystemResolver",
    "IncludeNotFoundError",
]
