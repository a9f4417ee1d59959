# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Abstract syntax tree for SADL (node classes, link classes, instances, etc.)."""

from sadl.model.entities import (
    AstNode,
    Connection,
    Include,
    Instance,
    LinkClass,
    Nat,
    NodeClass,
    SadlFile,
)
from sadl.model.types import (
    Connector,
    ConnectorRef,
    ConnectorRole,
    InstanceEntry,
    PortRange,
    PortSpec,
    Protocol,
    SourcePosition,
)

__all__ = [
    # Building blocks
    "SourcePosition",
    "Protocol",
    "PortRange",
    "PortSpec",
    "ConnectorRole",
    "Connector",
    "ConnectorRef",
    "InstanceEntry",
    # Entities
    "NodeClass",
    "LinkClass",
    "Instance",
    "Nat",
    "Connection",
    "Include",
    "AstNode",
    "SadlFile",
]
