# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Building blocks shared by the SADL entities: positions, ports and connectors."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, model_validator
from pydantic import Field as _Field

# ###############
# Public Interface
# ###############


class SourcePosition(BaseModel):
    """1-based line and column where a construct starts in its source text."""

    line: int
    column: int


class Protocol(Enum):
    """Transport protocol of a port specification."""

    TCP = "TCP"
    UDP = "UDP"


class PortRange(BaseModel):
    """An inclusive range of ports. Ordering of the bounds is not checked."""

    start: int
    end: int


class PortSpec(BaseModel):
    """A single port or a port range bound to a protocol.

    Exactly one of ``port`` and ``port_range`` is set.
    """

    protocol: Protocol = Protocol.TCP
    port: int | None = None
    port_range: PortRange | None = None

    @model_validator(mode="after")
    def _check_port_or_range(self) -> PortSpec:
        if (self.port is None) == (self.port_range is None):
            raise ValueError("exactly one of 'port' and 'port_range' must be set")
        return self


class ConnectorRole(Enum):
    """Whether a connector listens for (server) or initiates (client) connections."""

    SERVER = "server"
    CLIENT = "client"


class Connector(BaseModel):
    """A named communication endpoint on a node class.

    An empty ``ports`` list denotes an ephemeral or unspecified port and is valid
    for either role.
    """

    name: str
    role: ConnectorRole = ConnectorRole.SERVER
    ports: list[PortSpec] = _Field(default_factory=list)
    position: SourcePosition | None = None


class ConnectorRef(BaseModel):
    """Reference to a connector of a node class, by name only."""

    node_class: str
    connector: str


class InstanceEntry(BaseModel):
    """One concrete deployment inside an instance group.

    ``ip`` is the dotted literal exactly as written, never parsed into octets.
    """

    name: str
    ip: str | None = None
    position: SourcePosition | None = None
