# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Lexer and parser for SADL source text."""

from sadl.parser.lexer import LexerError, Token, TokenType, tokenize
from sadl.parser.parser import FileResolver, ParseError, Section, parse

__all__ = [
    "tokenize",
    "Token",
    "TokenType",
    "LexerError",
    "parse",
    "ParseError",
    "FileResolver",
    "Section",
]
