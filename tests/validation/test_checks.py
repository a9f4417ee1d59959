# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for the SADL semantic checks."""

from sadl.model.entities import SadlFile
from sadl.parser.parser import parse
from sadl.validation.checks import ValidationError, ValidationResult, ValidationWarning, validate

# ###############
# Helpers
# ###############

SCHEMA = """
#nodeclass
browser_client:: *https_connector
web_server:: https_listener (443) *mysql_connector
mysql_server:: mysql_listener (3306)

#linkclass
browser_client.https_connector -> web_server.https_listener
web_server.mysql_connector -> mysql_server.mysql_listener
"""


def _check(source: str) -> ValidationResult:
    return validate(parse(source))


def _errors(source: str) -> list[str]:
    return [e.message for e in _check(source).errors]


def _warnings(source: str) -> list[str]:
    return [w.message for w in _check(source).warnings]


# ###############
# Result Type
# ###############


def test_empty_file_is_valid() -> None:
    """An empty model produces neither warnings nor errors."""
    result = validate(SadlFile())
    assert result.errors == []
    assert result.warnings == []
    assert not result.has_errors


def test_has_errors_reflects_error_list() -> None:
    """has_errors is True exactly when errors are present."""
    assert ValidationResult(errors=[ValidationError(message="x")]).has_errors
    assert not ValidationResult(warnings=[ValidationWarning(message="x")]).has_errors


def test_complete_example_is_valid() -> None:
    """A consistent schema with matching topology passes all checks."""
    source = SCHEMA + """
#instances
browser_client my_browser
web_server web1(192.168.1.10)
mysql_server db1(192.168.1.20)

#NATs
@nat (203.0.113.10, 192.168.1.10)

#connections
my_browser -> web1
web1 -> db1
nat -> web1
"""
    result = _check(source)
    assert result.errors == []
    assert result.warnings == []


# ###############
# Duplicate Names
# ###############


def test_duplicate_node_class() -> None:
    """Declaring a node class twice is an error."""
    errors = _errors("#nodeclass\na:: x\na:: y\n")
    assert errors == ["Node class 'a' is declared more than once."]


def test_duplicate_connector() -> None:
    """Declaring a connector twice within one node class is an error."""
    errors = _errors("#nodeclass\na:: x (80) *x\n")
    assert errors == ["Node class 'a' declares connector 'x' more than once."]


def test_same_connector_name_in_different_classes_is_fine() -> None:
    """Connector names only need to be unique within their node class."""
    assert _errors("#nodeclass\na:: x\nb:: x\n") == []


def test_instance_and_nat_share_namespace() -> None:
    """An instance entry and a NAT may not share a name."""
    errors = _errors("#nodeclass\nc:: l\n#instances\nc gw\n#nats\n@gw (1.1.1.1, 2.2.2.2)\n")
    assert errors == ["Instance or NAT name 'gw' is declared more than once."]


def test_duplicate_instance_entries() -> None:
    """The same entry name in two instance groups is an error."""
    errors = _errors("#nodeclass\nc:: l\n#instances\nc a\nc a\n")
    assert len(errors) == 1


# ###############
# References
# ###############


def test_instance_of_undeclared_node_class() -> None:
    """An instance group must use a declared node class."""
    errors = _errors("#instances\n  ghost g1\n")
    assert errors == ["Instance group (line 2, column 3) uses undeclared node class 'ghost'."]


def test_link_class_with_undeclared_node_class() -> None:
    """Both ends of a link class must name declared node classes."""
    errors = _errors("#nodeclass\na:: *x\n#linkclass\na.x -> b.y\n")
    assert errors == ["Link class (line 4, column 1) uses undeclared node class 'b'."]


def test_link_class_with_undeclared_connector() -> None:
    """Both ends of a link class must name connectors of their node class."""
    errors = _errors("#nodeclass\na:: *x\nb:: y\n#linkclass\na.x -> b.z\n")
    assert len(errors) == 1
    assert "connector 'z'" in errors[0]
    assert "'b'" in errors[0]


def test_connection_to_unknown_endpoint() -> None:
    """Connection endpoints must be instance entries or NATs."""
    errors = _errors("#nodeclass\nc:: l\n#instances\nc a\n#connections\na -> nowhere\n")
    assert errors == ["Connection (line 6, column 1) refers to unknown instance or NAT 'nowhere'."]


def test_connection_to_nat_is_known() -> None:
    """A NAT name is a valid connection endpoint."""
    errors = _errors("#nodeclass\nc:: l\n#instances\nc a\n#nats\n@n (1.1.1.1, 2.2.2.2)\n#connections\nn -> a\n")
    assert errors == []


# ###############
# Link Class Roles
# ###############


def test_link_class_from_server_connector_warns() -> None:
    """A link class should start at a client connector."""
    warnings = _warnings("#nodeclass\na:: x\nb:: y\n#linkclass\na.x -> b.y\n")
    assert len(warnings) == 1
    assert "starts at server connector 'a.x'" in warnings[0]


def test_link_class_to_client_connector_warns() -> None:
    """A link class should end at a server connector."""
    warnings = _warnings("#nodeclass\na:: *x\nb:: *y\n#linkclass\na.x -> b.y\n")
    assert len(warnings) == 1
    assert "ends at client connector 'b.y'" in warnings[0]


# ###############
# Ports and Addresses
# ###############


def test_reversed_port_range_warns() -> None:
    """A port range whose start exceeds its end is suspicious."""
    warnings = _warnings("#nodeclass\na:: l (9000-8000)\n")
    assert warnings == ["Connector 'a.l' has reversed port range 9000-8000."]


def test_port_out_of_range_warns() -> None:
    """Ports above 65535 are reported, including inside UDP specs."""
    warnings = _warnings("#nodeclass\na:: l (70000, UDP(53))\n")
    assert warnings == ["Connector 'a.l' uses port 70000 outside 0-65535."]


def test_invalid_instance_ip_warns() -> None:
    """Instance IPs should be four octets in 0..255."""
    warnings = _warnings("#nodeclass\nc:: l\n#instances\nc a(10.0.0), b(300.1.1.1), ok(10.0.0.1)\n")
    assert warnings == [
        "Instance 'a' has invalid IPv4 address '10.0.0'.",
        "Instance 'b' has invalid IPv4 address '300.1.1.1'.",
    ]


def test_invalid_nat_ip_warns() -> None:
    """Both NAT addresses are checked."""
    warnings = _warnings("#nats\n@n (1.2.3.4.5, 10.0.0.256)\n")
    assert warnings == [
        "NAT 'n' has invalid external address '1.2.3.4.5'.",
        "NAT 'n' has invalid internal address '10.0.0.256'.",
    ]


# ###############
# Permitted Connections
# ###############


def test_connection_not_permitted_by_link_class_warns() -> None:
    """A connection between instances needs a matching link class."""
    source = SCHEMA + "#instances\nmysql_server db1\nweb_server web1\n#connections\ndb1 -> web1\n"
    warnings = _warnings(source)
    assert len(warnings) == 1
    assert "'db1' -> 'web1'" in warnings[0]


def test_connections_unchecked_without_link_classes() -> None:
    """Without any link class every connection is accepted."""
    source = "#nodeclass\nc:: l\n#instances\nc a, b\n#connections\nb -> a\n"
    assert _warnings(source) == []
