# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Section-aware recursive-descent parser for SADL source text.

Converts a token stream produced by the lexer into a SadlFile. Top-level
constructs are not self-describing: the same leading identifier is read as a
node class, a link class, an instance group or a connection depending on the
section marker most recently seen. ``include`` directives are resolved through
a caller-supplied resolver; only the node classes and link classes of an
included file are merged into the including one.
"""

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass, field

from sadl.log import get_logger
from sadl.model.entities import Connection, Include, Instance, LinkClass, Nat, NodeClass, SadlFile
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
from sadl.parser.lexer import Token, TokenType, tokenize

# ###############
# Public Interface
# ###############

# Maps an include path and the path of the including file (None for the
# top-level source when no path was given) to the included file's text.
FileResolver = Callable[[str, str | None], str]


class Section(enum.Enum):
    """The section whose grammar applies to the next top-level construct."""

    NONE = "none"
    NODE_CLASS = "nodeclass"
    LINK_CLASS = "linkclass"
    INSTANCES = "instances"
    NATS = "nats"
    CONNECTIONS = "connections"


class ParseError(Exception):
    """Raised when the parser encounters a syntactically invalid construct.

    Attributes:
        line: 1-based line number of the error.
        column: 1-based column number of the error.
        found: Type of the token found at the error position.
    """

    def __init__(self, message: str, line: int, column: int, found: TokenType) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column
        self.found = found


def parse(
    source: str,
    resolver: FileResolver | None = None,
    file_path: str | None = None,
) -> SadlFile:
    """Parse SADL source text into a SadlFile.

    Args:
        source: The full text of a SADL file.
        resolver: Optional callable returning the text of an included file.
            Without a resolver, include directives are recorded but not followed.
        file_path: Path of *source* itself. It counts as already visited, so
            an include cycle back to the top-level file is ignored, and it is
            passed to the resolver as the including path.

    Returns:
        A SadlFile with included node classes and link classes merged in.

    Raises:
        LexerError: If the source contains invalid characters or unterminated strings.
        ParseError: If the source is syntactically invalid.
        Exception: Whatever the resolver raises is propagated unchanged.
    """
    context = _IncludeContext(resolver=resolver)
    if file_path is not None:
        context.visited.add(file_path)
    return _Parser(tokenize(source), context, file_path).parse()


# ################
# Implementation
# ################

logger = get_logger(__name__)

_SECTIONS: dict[TokenType, Section] = {
    TokenType.SECTION_NODECLASS: Section.NODE_CLASS,
    TokenType.SECTION_LINKCLASS: Section.LINK_CLASS,
    TokenType.SECTION_INSTANCES: Section.INSTANCES,
    TokenType.SECTION_NATS: Section.NATS,
    TokenType.SECTION_CONNECTIONS: Section.CONNECTIONS,
}


@dataclass
class _IncludeContext:
    """State shared by every parse unit of one top-level ``parse`` call."""

    resolver: FileResolver | None
    visited: set[str] = field(default_factory=set)


class _Parser:
    """Recursive-descent parser for one SADL parse unit.

    Each included file gets its own instance, so token stream, position and
    current section of the including file are untouched by the nested parse.
    """

    def __init__(self, tokens: list[Token], context: _IncludeContext, file_path: str | None) -> None:
        self._tokens = tokens
        self._pos = 0
        self._section = Section.NONE
        self._context = context
        self._file_path = file_path

    def parse(self) -> SadlFile:
        """Parse the full token stream and return a SadlFile."""
        result = SadlFile()
        while not self._at_end():
            self._parse_top_level(result)
        return result

    # ------------------------------------------------------------------
    # Token access helpers
    # ------------------------------------------------------------------

    def _current(self) -> Token:
        """Return the current (un-consumed) token."""
        return self._tokens[self._pos]

    def _peek_type(self, offset: int = 0) -> TokenType:
        """Return the type of the token *offset* positions ahead, EOF past the end."""
        index = min(self._pos + offset, len(self._tokens) - 1)
        return self._tokens[index].type

    def _at_end(self) -> bool:
        """Return True if the current token is the EOF token."""
        return self._peek_type() == TokenType.EOF

    def _advance(self) -> Token:
        """Consume and return the current token, stopping at EOF."""
        tok = self._tokens[self._pos]
        if self._pos < len(self._tokens) - 1:
            self._pos += 1
        return tok

    def _check(self, *types: TokenType) -> bool:
        """Return True if the current token matches any of the given types (without
        consuming).
        """
        return self._peek_type() in types

    def _match(self, token_type: TokenType) -> bool:
        """Consume the current token and return True if it has the given type."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _expect(self, token_type: TokenType, what: str) -> Token:
        """Consume the current token if it has the given type.

        Raises ParseError naming *what* was expected otherwise.
        """
        tok = self._current()
        if tok.type != token_type:
            raise ParseError(
                f"Expected {what}, got {tok.type.name}",
                tok.line,
                tok.column,
                tok.type,
            )
        return self._advance()

    # ------------------------------------------------------------------
    # Top-level dispatch
    # ------------------------------------------------------------------

    def _parse_top_level(self, result: SadlFile) -> None:
        """Parse one top-level construct according to the current section."""
        tok = self._current()
        if tok.type in _SECTIONS:
            self._advance()
            self._section = _SECTIONS[tok.type]
        elif tok.type == TokenType.INCLUDE:
            include = self._parse_include()
            result.includes.append(include)
            self._process_include(include, result)
        elif self._section == Section.NODE_CLASS and tok.type == TokenType.IDENTIFIER:
            result.node_classes.append(self._parse_node_class())
        elif self._section == Section.LINK_CLASS and tok.type == TokenType.IDENTIFIER:
            result.link_classes.append(self._parse_link_class())
        elif self._section == Section.INSTANCES and tok.type == TokenType.IDENTIFIER:
            result.instances.append(self._parse_instance())
        elif self._section == Section.NATS and tok.type == TokenType.AT:
            result.nats.append(self._parse_nat())
        elif self._section == Section.CONNECTIONS and tok.type == TokenType.IDENTIFIER:
            result.connections.append(self._parse_connection())
        else:
            # Not a construct of the current section: ignored.
            logger.debug(
                "token_skipped",
                section=self._section.value,
                token=tok.type.name,
                line=tok.line,
                column=tok.column,
            )
            self._advance()

    # ------------------------------------------------------------------
    # Includes
    # ------------------------------------------------------------------

    def _parse_include(self) -> Include:
        """Parse: include "<path>" """
        start = self._expect(TokenType.INCLUDE, "'include'")
        path_tok = self._expect(TokenType.STRING, "file path string")
        return Include(path=path_tok.value, position=_position(start))

    def _process_include(self, include: Include, result: SadlFile) -> None:
        """Parse an included file and merge its node classes and link classes."""
        context = self._context
        if context.resolver is None:
            logger.debug("include_skipped", path=include.path, reason="no_resolver")
            return
        if include.path in context.visited:
            logger.debug("include_skipped", path=include.path, reason="already_visited")
            return
        context.visited.add(include.path)

        content = context.resolver(include.path, self._file_path)
        included = _Parser(tokenize(content), context, include.path).parse()
        result.node_classes.extend(included.node_classes)
        result.link_classes.extend(included.link_classes)
        logger.debug(
            "include_resolved",
            path=include.path,
            from_path=self._file_path,
            node_classes=len(included.node_classes),
            link_classes=len(included.link_classes),
        )

    # ------------------------------------------------------------------
    # Node classes
    # ------------------------------------------------------------------

    def _parse_node_class(self) -> NodeClass:
        """Parse: <Name> :: <connector>*"""
        name_tok = self._expect(TokenType.IDENTIFIER, "node class name")
        self._expect(TokenType.DOUBLE_COLON, "'::' after node class name")
        node_class = NodeClass(name=name_tok.value, position=_position(name_tok))
        while self._check(TokenType.IDENTIFIER, TokenType.STAR) and not self._at_node_class_start():
            node_class.connectors.append(self._parse_connector())
        return node_class

    def _at_node_class_start(self) -> bool:
        """Return True if the next tokens are ``<identifier> ::``."""
        return self._check(TokenType.IDENTIFIER) and self._peek_type(1) == TokenType.DOUBLE_COLON

    def _parse_connector(self) -> Connector:
        """Parse: [*] <name> [( <port-spec> [, <port-spec>]* )]"""
        start = self._current()
        role = ConnectorRole.CLIENT if self._match(TokenType.STAR) else ConnectorRole.SERVER
        name_tok = self._expect(TokenType.IDENTIFIER, "connector name")
        connector = Connector(name=name_tok.value, role=role, position=_position(start))
        if self._match(TokenType.LPAREN):
            connector.ports.append(self._parse_port_spec())
            while self._match(TokenType.COMMA):
                connector.ports.append(self._parse_port_spec())
            self._expect(TokenType.RPAREN, "')' after port list")
        return connector

    def _parse_port_spec(self) -> PortSpec:
        """Parse: UDP( <port-or-range> ) | <port-or-range>"""
        if self._match(TokenType.UDP):
            self._expect(TokenType.LPAREN, "'(' after UDP")
            port, port_range = self._parse_port_or_range()
            self._expect(TokenType.RPAREN, "')' after UDP port")
            return PortSpec(protocol=Protocol.UDP, port=port, port_range=port_range)
        port, port_range = self._parse_port_or_range()
        return PortSpec(protocol=Protocol.TCP, port=port, port_range=port_range)

    def _parse_port_or_range(self) -> tuple[int | None, PortRange | None]:
        """Parse: <number> [- <number>]"""
        start_tok = self._expect(TokenType.NUMBER, "port number")
        if self._match(TokenType.DASH):
            end_tok = self._expect(TokenType.NUMBER, "end port number")
            return None, PortRange(start=int(start_tok.value), end=int(end_tok.value))
        return int(start_tok.value), None

    # ------------------------------------------------------------------
    # Link classes
    # ------------------------------------------------------------------

    def _parse_link_class(self) -> LinkClass:
        """Parse: <Class>.<connector> -> <Class>.<connector>"""
        start = self._current()
        source = self._parse_connector_ref("source")
        self._expect(TokenType.ARROW, "'->'")
        target = self._parse_connector_ref("target")
        return LinkClass(source=source, target=target, position=_position(start))

    def _parse_connector_ref(self, side: str) -> ConnectorRef:
        """Parse: <Class>.<connector>"""
        class_tok = self._expect(TokenType.IDENTIFIER, f"{side} node class")
        self._expect(TokenType.DOT, "'.'")
        connector_tok = self._expect(TokenType.IDENTIFIER, f"{side} connector")
        return ConnectorRef(node_class=class_tok.value, connector=connector_tok.value)

    # ------------------------------------------------------------------
    # Instances and NATs
    # ------------------------------------------------------------------

    def _parse_instance(self) -> Instance:
        """Parse: <Class> <entry> [, <entry>]*"""
        class_tok = self._expect(TokenType.IDENTIFIER, "node class name")
        instance = Instance(node_class=class_tok.value, position=_position(class_tok))
        instance.entries.append(self._parse_instance_entry())
        while self._match(TokenType.COMMA):
            instance.entries.append(self._parse_instance_entry())
        return instance

    def _parse_instance_entry(self) -> InstanceEntry:
        """Parse: <name> [( <ip> )]"""
        name_tok = self._expect(TokenType.IDENTIFIER, "instance name")
        ip: str | None = None
        if self._match(TokenType.LPAREN):
            ip = self._parse_ip_address()
            self._expect(TokenType.RPAREN, "')' after IP address")
        return InstanceEntry(name=name_tok.value, ip=ip, position=_position(name_tok))

    def _parse_ip_address(self) -> str:
        """Parse: <number> [. <number>]* and return the digits joined with dots."""
        parts = [self._expect(TokenType.NUMBER, "IP address octet").value]
        while self._match(TokenType.DOT):
            parts.append(self._expect(TokenType.NUMBER, "IP address octet").value)
        return ".".join(parts)

    def _parse_nat(self) -> Nat:
        """Parse: @<name> ( <external-ip> , <internal-ip> )"""
        start = self._expect(TokenType.AT, "'@'")
        name_tok = self._expect(TokenType.IDENTIFIER, "NAT name")
        self._expect(TokenType.LPAREN, "'(' after NAT name")
        external_ip = self._parse_ip_address()
        self._expect(TokenType.COMMA, "',' between IP addresses")
        internal_ip = self._parse_ip_address()
        self._expect(TokenType.RPAREN, "')' after IP addresses")
        return Nat(
            name=name_tok.value,
            external_ip=external_ip,
            internal_ip=internal_ip,
            position=_position(start),
        )

    # ------------------------------------------------------------------
    # Connections
    # ------------------------------------------------------------------

    def _parse_connection(self) -> Connection:
        """Parse: <from> -> <to>"""
        source_tok = self._expect(TokenType.IDENTIFIER, "source entity name")
        self._expect(TokenType.ARROW, "'->'")
        target_tok = self._expect(TokenType.IDENTIFIER, "target entity name")
        return Connection(source=source_tok.value, target=target_tok.value, position=_position(source_tok))


def _position(tok: Token) -> SourcePosition:
    return SourcePosition(line=tok.line, column=tok.column)
