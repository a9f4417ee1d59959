# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Top-level SADL entities and the aggregate produced by the parser."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel
from pydantic import Field as _Field

from sadl.model.types import Connector, ConnectorRef, InstanceEntry, SourcePosition

# ###############
# Public Interface
# ###############


class NodeClass(BaseModel):
    """A reusable entity template defined by its connectors."""

    kind: Literal["node_class"] = "node_class"
    name: str
    connectors: list[Connector] = _Field(default_factory=list)
    position: SourcePosition | None = None


class LinkClass(BaseModel):
    """A permitted pattern: a connector of one node class may reach a connector of another."""

    kind: Literal["link_class"] = "link_class"
    source: ConnectorRef
    target: ConnectorRef
    position: SourcePosition | None = None


class Instance(BaseModel):
    """A group of concrete deployments of one node class."""

    kind: Literal["instance"] = "instance"
    node_class: str
    entries: list[InstanceEntry] = _Field(default_factory=list)
    position: SourcePosition | None = None


class Nat(BaseModel):
    """A named address-translation record, usable as a connection endpoint."""

    kind: Literal["nat"] = "nat"
    name: str
    external_ip: str
    internal_ip: str
    position: SourcePosition | None = None


class Connection(BaseModel):
    """A deployed edge between two named entities (instance entries or NATs)."""

    kind: Literal["connection"] = "connection"
    source: str
    target: str
    position: SourcePosition | None = None


class Include(BaseModel):
    """An ``include "path"`` directive."""

    kind: Literal["include"] = "include"
    path: str
    position: SourcePosition | None = None


# Any top-level construct. The `kind` discriminator makes the union closed.
AstNode = Annotated[
    NodeClass | LinkClass | Instance | Nat | Connection | Include,
    _Field(discriminator="kind"),
]


class SadlFile(BaseModel):
    """The parsed contents of one top-level SADL source, includes merged.

    Every collection keeps declaration order. Node classes and link classes
    pulled in through includes appear at the point of their include directive.
    """

    includes: list[Include] = _Field(default_factory=list)
    node_classes: list[NodeClass] = _Field(default_factory=list)
    link_classes: list[LinkClass] = _Field(default_factory=list)
    instances: list[Instance] = _Field(default_factory=list)
    nats: list[Nat] = _Field(default_factory=list)
    connections: list[Connection] = _Field(default_factory=list)
