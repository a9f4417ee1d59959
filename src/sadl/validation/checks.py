# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Semantic checks for parsed SADL models.

The parser accepts any syntactically valid input. These checks run afterwards
and report the problems the parser deliberately lets through: duplicate names,
dangling references, misdirected link classes and implausible addresses.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from sadl.model.entities import SadlFile
from sadl.model.types import ConnectorRole, SourcePosition

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ValidationWarning:
    """A non-fatal issue: the model can be laid out but is likely unintended.

    Attributes:
        message: Human-readable description of the warning.
    """

    message: str


@dataclass(frozen=True)
class ValidationError:
    """A fatal issue: the model refers to something that does not exist or is ambiguous.

    Attributes:
        message: Human-readable description of the error.
    """

    message: str


@dataclass
class ValidationResult:
    """Result of running the checks.

    Attributes:
        warnings: Non-fatal issues found during validation.
        errors: Fatal errors that indicate an invalid model.
    """

    warnings: list[ValidationWarning] = field(default_factory=list)
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        """Return True if any fatal validation errors were found."""
        return len(self.errors) > 0


def validate(sadl_file: SadlFile) -> ValidationResult:
    """Run all semantic checks on a parsed SadlFile.

    Checks performed:

    1. **Duplicate names** (error): node class names, connector names within
       one node class, and names in the instance namespace (instance entries
       and NAT entries share one namespace).

    2. **Dangling references** (error): instance groups naming an undeclared
       node class, link classes naming an undeclared node class or connector,
       connections naming an endpoint that is neither an instance entry nor
       a NAT.

    3. **Link class direction** (warning): a link class should lead from a
       client connector to a server connector.

    4. **Ports and addresses** (warning): port ranges must not be reversed,
       ports must lie in 0..65535, IP literals should be four octets in 0..255.

    5. **Unpermitted connections** (warning): when link classes are declared,
       every connection between two instance entries should match a link
       class between their node classes.

    Args:
        sadl_file: The SadlFile to validate.

    Returns:
        A :class:`ValidationResult`. An empty result indicates a valid model.
    """
    warnings: list[ValidationWarning] = []
    errors: list[ValidationError] = []

    errors.extend(_check_duplicate_names(sadl_file))
    errors.extend(_check_references(sadl_file))
    warnings.extend(_check_link_class_roles(sadl_file))
    warnings.extend(_check_ports(sadl_file))
    warnings.extend(_check_addresses(sadl_file))
    warnings.extend(_check_permitted_connections(sadl_file))

    return ValidationResult(warnings=warnings, errors=errors)


# ################
# Implementation
# ################

_MAX_PORT = 65535


def _at(position: SourcePosition | None) -> str:
    """Return a ``" (line L, column C)"`` suffix, or nothing without a position."""
    if position is None:
        return ""
    return f" (line {position.line}, column {position.column})"


def _duplicates(names: list[str]) -> list[str]:
    """Return names occurring more than once, in first-seen order."""
    counts = Counter(names)
    return [name for name in counts if counts[name] > 1]


def _instance_namespace(sadl_file: SadlFile) -> set[str]:
    names = {entry.name for inst in sadl_file.instances for entry in inst.entries}
    names.update(nat.name for nat in sadl_file.nats)
    return names


def _check_duplicate_names(sadl_file: SadlFile) -> list[ValidationError]:
    """Return errors for names declared more than once in the same namespace."""
    errors: list[ValidationError] = []

    for name in _duplicates([nc.name for nc in sadl_file.node_classes]):
        errors.append(ValidationError(message=f"Node class '{name}' is declared more than once."))

    for nc in sadl_file.node_classes:
        for name in _duplicates([c.name for c in nc.connectors]):
            errors.append(
                ValidationError(message=f"Node class '{nc.name}' declares connector '{name}' more than once.")
            )

    entity_names = [entry.name for inst in sadl_file.instances for entry in inst.entries]
    entity_names += [nat.name for nat in sadl_file.nats]
    for name in _duplicates(entity_names):
        errors.append(ValidationError(message=f"Instance or NAT name '{name}' is declared more than once."))

    return errors


def _check_references(sadl_file: SadlFile) -> list[ValidationError]:
    """Return errors for references to undeclared node classes, connectors and endpoints."""
    errors: list[ValidationError] = []
    connectors_by_class: dict[str, set[str]] = {}
    for nc in sadl_file.node_classes:
        connectors_by_class.setdefault(nc.name, set()).update(c.name for c in nc.connectors)

    for inst in sadl_file.instances:
        if inst.node_class not in connectors_by_class:
            errors.append(
                ValidationError(
                    message=f"Instance group{_at(inst.position)} uses undeclared node class '{inst.node_class}'."
                )
            )

    for link in sadl_file.link_classes:
        for ref in (link.source, link.target):
            if ref.node_class not in connectors_by_class:
                errors.append(
                    ValidationError(
                        message=f"Link class{_at(link.position)} uses undeclared node class '{ref.node_class}'."
                    )
                )
            elif ref.connector not in connectors_by_class[ref.node_class]:
                errors.append(
                    ValidationError(
                        message=(
                            f"Link class{_at(link.position)} uses connector '{ref.connector}' "
                            f"which node class '{ref.node_class}' does not declare."
                        )
                    )
                )

    known = _instance_namespace(sadl_file)
    for conn in sadl_file.connections:
        for endpoint in (conn.source, conn.target):
            if endpoint not in known:
                errors.append(
                    ValidationError(
                        message=f"Connection{_at(conn.position)} refers to unknown instance or NAT '{endpoint}'."
                    )
                )

    return errors


def _check_link_class_roles(sadl_file: SadlFile) -> list[ValidationWarning]:
    """Return warnings for link classes not leading from a client to a server connector."""
    warnings: list[ValidationWarning] = []
    roles: dict[tuple[str, str], ConnectorRole] = {}
    for nc in sadl_file.node_classes:
        for c in nc.connectors:
            roles.setdefault((nc.name, c.name), c.role)

    for link in sadl_file.link_classes:
        source_role = roles.get((link.source.node_class, link.source.connector))
        target_role = roles.get((link.target.node_class, link.target.connector))
        if source_role == ConnectorRole.SERVER:
            warnings.append(
                ValidationWarning(
                    message=(
                        f"Link class{_at(link.position)} starts at server connector "
                        f"'{link.source.node_class}.{link.source.connector}'; expected a client connector."
                    )
                )
            )
        if target_role == ConnectorRole.CLIENT:
            warnings.append(
                ValidationWarning(
                    message=(
                        f"Link class{_at(link.position)} ends at client connector "
                        f"'{link.target.node_class}.{link.target.connector}'; expected a server connector."
                    )
                )
            )
    return warnings


def _check_ports(sadl_file: SadlFile) -> list[ValidationWarning]:
    """Return warnings for reversed port ranges and out-of-range port numbers."""
    warnings: list[ValidationWarning] = []
    for nc in sadl_file.node_classes:
        for connector in nc.connectors:
            label = f"{nc.name}.{connector.name}"
            for spec in connector.ports:
                if spec.port_range is not None:
                    start, end = spec.port_range.start, spec.port_range.end
                    if start > end:
                        warnings.append(
                            ValidationWarning(message=f"Connector '{label}' has reversed port range {start}-{end}.")
                        )
                    numbers = [start, end]
                else:
                    numbers = [spec.port] if spec.port is not None else []
                for number in numbers:
                    if number > _MAX_PORT:
                        warnings.append(
                            ValidationWarning(message=f"Connector '{label}' uses port {number} outside 0-{_MAX_PORT}.")
                        )
    return warnings


def _is_ipv4(literal: str) -> bool:
    octets = literal.split(".")
    return len(octets) == 4 and all(octet.isdigit() and int(octet) <= 255 for octet in octets)


def _check_addresses(sadl_file: SadlFile) -> list[ValidationWarning]:
    """Return warnings for IP literals that are not dotted-quad IPv4 addresses."""
    warnings: list[ValidationWarning] = []
    for inst in sadl_file.instances:
        for entry in inst.entries:
            if entry.ip is not None and not _is_ipv4(entry.ip):
                warnings.append(
                    ValidationWarning(message=f"Instance '{entry.name}' has invalid IPv4 address '{entry.ip}'.")
                )
    for nat in sadl_file.nats:
        for side, ip in (("external", nat.external_ip), ("internal", nat.internal_ip)):
            if not _is_ipv4(ip):
                warnings.append(ValidationWarning(message=f"NAT '{nat.name}' has invalid {side} address '{ip}'."))
    return warnings


def _check_permitted_connections(sadl_file: SadlFile) -> list[ValidationWarning]:
    """Return warnings for instance-to-instance connections no link class permits."""
    if not sadl_file.link_classes:
        return []
    permitted = {(link.source.node_class, link.target.node_class) for link in sadl_file.link_classes}
    class_of = {entry.name: inst.node_class for inst in sadl_file.instances for entry in inst.entries}

    warnings: list[ValidationWarning] = []
    for conn in sadl_file.connections:
        source_class = class_of.get(conn.source)
        target_class = class_of.get(conn.target)
        if source_class is None or target_class is None:
            continue
        if (source_class, target_class) not in permitted:
            warnings.append(
                ValidationWarning(
                    message=(
                        f"Connection '{conn.source}' -> '{conn.target}' is not permitted by any link class "
                        f"from '{source_class}' to '{target_class}'."
                    )
                )
            )
    return warnings
