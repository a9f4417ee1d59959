# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Export of SADL models as Mermaid flowchart text."""

from __future__ import annotations

import re

from sadl.model.entities import SadlFile
from sadl.model.types import Connector, ConnectorRole, PortSpec, Protocol
from sadl.views.layout import View

# ###############
# Public Interface
# ###############

DIRECTIONS: tuple[str, ...] = ("LR", "RL", "TB", "BT")


def to_mermaid(sadl_file: SadlFile, view: View, direction: str = "LR") -> str:
    """Render *sadl_file* as a Mermaid ``flowchart``.

    The schema view draws each node class as a subgraph of its connectors and
    each link class as an arrow between connectors. The instances view draws
    instance entries, NAT entries (as hexagons) and connections.

    Args:
        sadl_file: The parsed model.
        view: Which view to export.
        direction: Mermaid flow direction, one of :data:`DIRECTIONS`.

    Returns:
        The flowchart text, lines joined with ``\\n`` and no trailing newline.

    Raises:
        ValueError: If *direction* is not a Mermaid flow direction.
    """
    if direction not in DIRECTIONS:
        raise ValueError(f"Unknown flowchart direction {direction!r}; expected one of {', '.join(DIRECTIONS)}")
    if view == View.SCHEMA:
        lines = _schema_lines(sadl_file)
    else:
        lines = _instance_lines(sadl_file)
    return "\n".join([f"flowchart {direction}", *lines])


def sanitize_id(name: str) -> str:
    """Replace every character that is not valid in a Mermaid node id with ``_``."""
    return _INVALID_ID_CHARS.sub("_", name)


# ################
# Implementation
# ################

_INVALID_ID_CHARS = re.compile(r"[^A-Za-z0-9_]")


def _schema_lines(sadl_file: SadlFile) -> list[str]:
    lines: list[str] = []
    for node_class in sadl_file.node_classes:
        class_id = sanitize_id(node_class.name)
        lines.append(f"    subgraph {class_id}[{node_class.name}]")
        for connector in node_class.connectors:
            lines.append(f"        {class_id}_{sanitize_id(connector.name)}[{_connector_label(connector)}]")
        lines.append("    end")
    for link in sadl_file.link_classes:
        source_id = f"{sanitize_id(link.source.node_class)}_{sanitize_id(link.source.connector)}"
        target_id = f"{sanitize_id(link.target.node_class)}_{sanitize_id(link.target.connector)}"
        lines.append(f"    {source_id} --> {target_id}")
    return lines


def _instance_lines(sadl_file: SadlFile) -> list[str]:
    lines: list[str] = []
    for inst in sadl_file.instances:
        for entry in inst.entries:
            label = f"{entry.name}<br/>{entry.ip}" if entry.ip else entry.name
            lines.append(f"    {sanitize_id(entry.name)}[{label}]")
    for nat in sadl_file.nats:
        lines.append(f"    {sanitize_id(nat.name)}{{{{{nat.name}<br/>{nat.external_ip} -> {nat.internal_ip}}}}}")
    for conn in sadl_file.connections:
        lines.append(f"    {sanitize_id(conn.source)} --> {sanitize_id(conn.target)}")
    return lines


def _connector_label(connector: Connector) -> str:
    """Return ``[*]name[ (ports)]`` mirroring the source syntax."""
    prefix = "*" if connector.role == ConnectorRole.CLIENT else ""
    ports = f" ({', '.join(_port_label(p) for p in connector.ports)})" if connector.ports else ""
    return f"{prefix}{connector.name}{ports}"


def _port_label(spec: PortSpec) -> str:
    if spec.port_range is not None:
        value = f"{spec.port_range.start}-{spec.port_range.end}"
    else:
        value = str(spec.port)
    return f"UDP({value})" if spec.protocol == Protocol.UDP else value
