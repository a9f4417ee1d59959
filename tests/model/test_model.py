# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""High-level tests demonstrating how to construct the SADL syntax tree."""

import pytest
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from sadl.model import (
    AstNode,
    Connection,
    Connector,
    ConnectorRef,
    ConnectorRole,
    Include,
    Instance,
    InstanceEntry,
    LinkClass,
    Nat,
    NodeClass,
    PortRange,
    PortSpec,
    Protocol,
    SadlFile,
    SourcePosition,
)


def test_connector_defaults_to_server_without_ports() -> None:
    """A connector is a server with no ports unless told otherwise."""
    c = Connector(name="listener")
    assert c.role == ConnectorRole.SERVER
    assert c.ports == []
    assert c.position is None


def test_port_spec_single_port() -> None:
    """A PortSpec with a single port defaults to TCP."""
    spec = PortSpec(port=443)
    assert spec.protocol == Protocol.TCP
    assert spec.port == 443
    assert spec.port_range is None


def test_port_spec_range() -> None:
    """A PortSpec can carry an inclusive range instead of a port."""
    spec = PortSpec(protocol=Protocol.UDP, port_range=PortRange(start=1000, end=2000))
    assert spec.port is None
    assert spec.port_range == PortRange(start=1000, end=2000)


def test_port_spec_requires_exactly_one_of_port_and_range() -> None:
    """Setting both or neither of port and port_range is rejected."""
    with pytest.raises(PydanticValidationError):
        PortSpec()
    with pytest.raises(PydanticValidationError):
        PortSpec(port=80, port_range=PortRange(start=80, end=81))


def test_node_class_with_connectors() -> None:
    """A node class groups server and client connectors."""
    nc = NodeClass(
        name="web_server",
        connectors=[
            Connector(name="https_listener", ports=[PortSpec(port=443)]),
            Connector(name="mysql_connector", role=ConnectorRole.CLIENT),
        ],
        position=SourcePosition(line=2, column=1),
    )
    assert nc.kind == "node_class"
    assert [c.role for c in nc.connectors] == [ConnectorRole.SERVER, ConnectorRole.CLIENT]


def test_link_class_refers_to_connectors_by_name() -> None:
    """A link class names its endpoints without resolving them."""
    link = LinkClass(
        source=ConnectorRef(node_class="web_server", connector="mysql_connector"),
        target=ConnectorRef(node_class="mysql_server", connector="mysql_listener"),
    )
    assert link.source.node_class == "web_server"
    assert link.target.connector == "mysql_listener"


def test_instance_entries() -> None:
    """An instance groups entries of one node class; IPs are optional strings."""
    inst = Instance(
        node_class="web_server",
        entries=[InstanceEntry(name="web1", ip="192.168.1.10"), InstanceEntry(name="web2")],
    )
    assert [e.ip for e in inst.entries] == ["192.168.1.10", None]


def test_sadl_file_collections_default_to_empty() -> None:
    """A fresh SadlFile has every collection empty."""
    f = SadlFile()
    assert f.includes == []
    assert f.node_classes == []
    assert f.link_classes == []
    assert f.instances == []
    assert f.nats == []
    assert f.connections == []


def test_sadl_file_collections_are_independent() -> None:
    """Default lists are not shared between instances."""
    a = SadlFile()
    b = SadlFile()
    a.node_classes.append(NodeClass(name="x"))
    assert b.node_classes == []


@pytest.mark.parametrize(
    ("node", "kind"),
    [
        (NodeClass(name="a"), "node_class"),
        (
            LinkClass(
                source=ConnectorRef(node_class="a", connector="x"),
                target=ConnectorRef(node_class="b", connector="y"),
            ),
            "link_class",
        ),
        (Instance(node_class="a", entries=[InstanceEntry(name="a1")]), "instance"),
        (Nat(name="n", external_ip="1.2.3.4", internal_ip="10.0.0.1"), "nat"),
        (Connection(source="a1", target="n"), "connection"),
        (Include(path="lib.sadl"), "include"),
    ],
)
def test_ast_node_union_dispatches_on_kind(node: object, kind: str) -> None:
    """The AstNode union restores the concrete class from the kind tag."""
    adapter = TypeAdapter(AstNode)
    dumped = adapter.dump_python(node)
    assert dumped["kind"] == kind
    assert type(adapter.validate_python(dumped)) is type(node)


def test_ast_node_union_rejects_unknown_kind() -> None:
    """The union is closed: an unknown kind does not validate."""
    with pytest.raises(PydanticValidationError):
        TypeAdapter(AstNode).validate_python({"kind": "system", "name": "x"})


def test_sadl_file_json_round_trip() -> None:
    """A SadlFile survives a JSON dump and reload unchanged."""
    f = SadlFile(
        node_classes=[
            NodeClass(name="dns", connectors=[Connector(name="l", ports=[PortSpec(protocol=Protocol.UDP, port=53)])])
        ],
        nats=[Nat(name="n", external_ip="1.2.3.4", internal_ip="10.0.0.1")],
    )
    assert SadlFile.model_validate_json(f.model_dump_json()) == f
