# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the Mermaid flowchart export."""

import pytest

from sadl.model.entities import Instance, SadlFile
from sadl.model.types import InstanceEntry
from sadl.parser.parser import parse
from sadl.views.flowchart import sanitize_id, to_mermaid
from sadl.views.layout import View

SOURCE = """
#nodeclass
web_server:: https_listener (443) *mysql_connector
dns:: l (UDP(53), 8000-8080)

#linkclass
web_server.mysql_connector -> dns.l

#instances
web_server web1(192.168.1.10), web2

#NATs
@public_nat (203.0.113.10, 192.168.1.10)

#connections
public_nat -> web1
"""


def test_schema_view() -> None:
    """Node classes become subgraphs of connectors; link classes become arrows."""
    assert to_mermaid(parse(SOURCE), View.SCHEMA) == "\n".join(
        [
            "flowchart LR",
            "    subgraph web_server[web_server]",
            "        web_server_https_listener[https_listener (443)]",
            "        web_server_mysql_connector[*mysql_connector]",
            "    end",
            "    subgraph dns[dns]",
            "        dns_l[l (UDP(53), 8000-8080)]",
            "    end",
            "    web_server_mysql_connector --> dns_l",
        ]
    )


def test_instances_view() -> None:
    """Instance entries, NAT hexagons and connections are exported."""
    assert to_mermaid(parse(SOURCE), View.INSTANCES, direction="TB") == "\n".join(
        [
            "flowchart TB",
            "    web1[web1<br/>192.168.1.10]",
            "    web2[web2]",
            "    public_nat{{public_nat<br/>203.0.113.10 -> 192.168.1.10}}",
            "    public_nat --> web1",
        ]
    )


def test_empty_model_has_only_header() -> None:
    """An empty model exports just the flowchart declaration."""
    assert to_mermaid(SadlFile(), View.SCHEMA) == "flowchart LR"


def test_unknown_direction_is_rejected() -> None:
    """Directions other than LR, RL, TB and BT raise ValueError."""
    with pytest.raises(ValueError, match="direction"):
        to_mermaid(SadlFile(), View.SCHEMA, direction="UP")


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("web_server", "web_server"),
        ("web-server", "web_server"),
        ("a.b c", "a_b_c"),
        ("Node1", "Node1"),
    ],
)
def test_sanitize_id(name: str, expected: str) -> None:
    """Characters outside [A-Za-z0-9_] are replaced with underscores."""
    assert sanitize_id(name) == expected


def test_instance_ids_are_sanitized() -> None:
    """Names built outside the parser still yield valid Mermaid ids."""
    model = SadlFile(instances=[Instance(node_class="x", entries=[InstanceEntry(name="edge-1")])])
    assert "    edge_1[edge-1]" in to_mermaid(model, View.INSTANCES).splitlines()
