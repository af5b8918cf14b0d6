"""JavaScript/TypeScript lexer with recoverable diagnostics."""

from __future__ import annotations

from jslex.errors import ErrorKind, LexDiagnostic, LexError
from jslex.lexer import Lexer, LexResult, lex, tokenize
from jslex.tokens import (
    AssignOp,
    BinaryOp,
    Keyword,
    Span,
    Token,
    TokenKind,
    Word,
    WordKind,
)

__version__ = "0.1.0"

__all__ = [
    "AssignOp",
    "BinaryOp",
    "ErrorKind",
    "Keyword",
    "LexDiagnostic",
    "LexError",
    "LexResult",
    "Lexer",
    "Span",
    "Token",
    "TokenKind",
    "Word",
    "WordKind",
    "lex",
    "tokenize",
]
