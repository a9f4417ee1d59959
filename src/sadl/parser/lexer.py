# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexical scanner for SADL source text.

SADL is scanned in one pass with one character of lookahead (for ``::`` and
``->``). The only context-sensitive rule is ``#``: it starts a section marker
when a section keyword follows, and a line comment otherwise.
"""

import enum
from dataclasses import dataclass

# ###############
# Public Interface
# ###############


class TokenType(enum.Enum):
    """All token types produced by the SADL lexer."""

    # Section markers
    SECTION_NODECLASS = "#nodeclass"
    SECTION_LINKCLASS = "#linkclass"
    SECTION_INSTANCES = "#instances"
    SECTION_NATS = "#nats"
    SECTION_CONNECTIONS = "#connections"

    # Keywords
    INCLUDE = "include"
    UDP = "udp"

    # Symbols and operators
    LPAREN = "("
    RPAREN = ")"
    COMMA = ","
    DOUBLE_COLON = "::"
    DOT = "."
    ARROW = "->"
    DASH = "-"
    STAR = "*"
    AT = "@"

    # Literals
    STRING = "STRING"
    NUMBER = "NUMBER"

    # Identifiers
    IDENTIFIER = "IDENTIFIER"

    # End of file
    EOF = "EOF"


SECTION_MARKERS: frozenset[TokenType] = frozenset(
    {
        TokenType.SECTION_NODECLASS,
        TokenType.SECTION_LINKCLASS,
        TokenType.SECTION_INSTANCES,
        TokenType.SECTION_NATS,
        TokenType.SECTION_CONNECTIONS,
    }
)


@dataclass(frozen=True)
class Token:
    """One token of SADL source.

    Attributes:
        type: The kind of token.
        value: Source text of the token. Section markers carry the keyword as
            written (without the ``#``), STRING tokens carry the unquoted content.
        line: Line of the first character, counting from 1.
        column: Column of the first character, counting from 1.
    """

    type: TokenType
    value: str
    line: int
    column: int


class LexerError(Exception):
    """Raised for an unterminated string literal or a character no token starts with.

    Attributes:
        line: Line of the offending character, counting from 1.
        column: Column of the offending character, counting from 1.
    """

    def __init__(self, message: str, line: int, column: int) -> None:
        super().__init__(f"Line {line}, column {column}: {message}")
        self.line = line
        self.column = column


def tokenize(source: str) -> list[Token]:
    """Split SADL source text into tokens.

    Whitespace and ``#`` comments produce no tokens. A ``#`` directly followed
    by a section keyword (in any letter case) produces a section marker
    instead of starting a comment.

    Args:
        source: The full text of a SADL file.

    Returns:
        The tokens in source order, terminated by exactly one EOF token that
        sits at the position just past the last character.

    Raises:
        LexerError: On an unterminated string literal or an unexpected character.
    """
    return _Scanner(source).run()


# ################
# Implementation
# ################

_SECTION_KEYWORDS: dict[str, TokenType] = {
    "nodeclass": TokenType.SECTION_NODECLASS,
    "linkclass": TokenType.SECTION_LINKCLASS,
    "instances": TokenType.SECTION_INSTANCES,
    "nats": TokenType.SECTION_NATS,
    "connections": TokenType.SECTION_CONNECTIONS,
}

_KEYWORDS: dict[str, TokenType] = {
    "include": TokenType.INCLUDE,
    "udp": TokenType.UDP,
}

_PUNCTUATION: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "*": TokenType.STAR,
    "@": TokenType.AT,
}

_WHITESPACE = frozenset(" \t\r\n")
_DIGITS = frozenset("0123456789")
_WORD_START = frozenset("_abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")
_WORD_PART = _WORD_START | _DIGITS


class _Scanner:
    """Single left-to-right pass over the source, tracking line and column."""

    def __init__(self, source: str) -> None:
        self._text = source
        self._index = 0
        self._line = 1
        self._column = 1
        self._out: list[Token] = []

    def run(self) -> list[Token]:
        self._take_while(_WHITESPACE)
        while self._index < len(self._text):
            self._scan_one()
            self._take_while(_WHITESPACE)
        self._out.append(Token(TokenType.EOF, "", self._line, self._column))
        return self._out

    def _char(self, offset: int = 0) -> str:
        """Return the character *offset* places ahead, '' past the end."""
        index = self._index + offset
        return self._text[index] if index < len(self._text) else ""

    def _bump(self, count: int = 1) -> None:
        """Move past *count* characters, keeping line and column current."""
        for _ in range(count):
            if self._text[self._index] == "\n":
                self._line += 1
                self._column = 1
            else:
                self._column += 1
            self._index += 1

    def _take_while(self, allowed: frozenset[str]) -> str:
        """Consume the longest run of characters in *allowed* and return it."""
        start = self._index
        while self._index < len(self._text) and self._text[self._index] in allowed:
            self._bump()
        return self._text[start : self._index]

    def _emit(self, token_type: TokenType, value: str, line: int, column: int) -> None:
        self._out.append(Token(token_type, value, line, column))

    def _scan_one(self) -> None:
        line, column = self._line, self._column
        ch = self._char()

        if ch == "#":
            self._bump()
            word = self._take_while(_WORD_PART)
            section = _SECTION_KEYWORDS.get(word.lower())
            if section is not None:
                self._emit(section, word, line, column)
            else:
                # Comment: drop the rest of the line.
                while self._index < len(self._text) and self._char() != "\n":
                    self._bump()
        elif ch in _WORD_START:
            word = self._take_while(_WORD_PART)
            self._emit(_KEYWORDS.get(word.lower(), TokenType.IDENTIFIER), word, line, column)
        elif ch in _DIGITS:
            self._emit(TokenType.NUMBER, self._take_while(_DIGITS), line, column)
        elif ch == '"':
            self._scan_string(line, column)
        elif ch in _PUNCTUATION:
            self._bump()
            self._emit(_PUNCTUATION[ch], ch, line, column)
        elif ch == ":" and self._char(1) == ":":
            self._bump(2)
            self._emit(TokenType.DOUBLE_COLON, "::", line, column)
        elif ch == "-" and self._char(1) == ">":
            self._bump(2)
            self._emit(TokenType.ARROW, "->", line, column)
        elif ch == "-":
            self._bump()
            self._emit(TokenType.DASH, "-", line, column)
        else:
            raise LexerError(f"Unexpected character: {ch!r}", line, column)

    def _scan_string(self, line: int, column: int) -> None:
        """Read a double-quoted literal verbatim; it may span lines."""
        close = self._text.find('"', self._index + 1)
        if close == -1:
            raise LexerError("Unterminated string literal", line, column)
        value = self._text[self._index + 1 : close]
        self._bump(close + 1 - self._index)
        self._emit(TokenType.STRING, value, line, column)
