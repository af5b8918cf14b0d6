"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    EOF = auto()  # scan-loop sentinel, never returned

    # Literals and words
    NUMBER = auto()  # value: float
    STRING = auto()  # value: decoded text, raw: source text with quotes
    WORD = auto()  # value: Word

    # Comments
    SINGLE_LINE_COMMENT = auto()  # // ...
    MULTI_LINE_COMMENT = auto()  # /* ... */

    # Punctuation
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    LBRACE = auto()  # {
    RBRACE = auto()  # }
    LBRACKET = auto()  # [
    RBRACKET = auto()  # ]
    COMMA = auto()  # ,
    DOT = auto()  # .
    DOT_DOT_DOT = auto()  # ...
    BANG = auto()  # !
    SEMICOLON = auto()  # ;
    COLON = auto()  # :
    QUESTION = auto()  # ?
    TILDE = auto()  # ~
    PLUS_PLUS = auto()  # ++
    MINUS_MINUS = auto()  # --
    ARROW = auto()  # =>

    # Operators
    ASSIGN_OP = auto()  # value: AssignOp
    BINARY_OP = auto()  # value: BinaryOp


class AssignOp(Enum):
    ASSIGN = "="
    ADD_ASSIGN = "+="
    SUB_ASSIGN = "-="
    MUL_ASSIGN = "*="
    DIV_ASSIGN = "/="
    MOD_ASSIGN = "%="
    BIT_OR_ASSIGN = "|="
    BIT_XOR_ASSIGN = "^="
    BIT_AND_ASSIGN = "&="
    ZERO_FILL_RIGHT_SHIFT_ASSIGN = ">>>="
    RIGHT_SHIFT_ASSIGN = ">>="
    LEFT_SHIFT_ASSIGN = "<<="


class BinaryOp(Enum):
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    LSHIFT = "<<"
    RSHIFT = ">>"
    ZERO_FILL_RSHIFT = ">>>"
    EQ = "=="
    EQ_EQ = "==="
    NE = "!="
    NE_NE = "!=="
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    BIT_OR = "|"
    BIT_XOR = "^"
    BIT_AND = "&"
    LOGICAL_OR = "||"
    LOGICAL_AND = "&&"


class Keyword(Enum):
    BREAK = "break"
    CASE = "case"
    CATCH = "catch"
    CLASS = "class"
    CONST = "const"
    CONTINUE = "continue"
    DEBUGGER = "debugger"
    DEFAULT = "default"
    DELETE = "delete"
    DO = "do"
    ELSE = "else"
    EXPORT = "export"
    EXTENDS = "extends"
    FINALLY = "finally"
    FOR = "for"
    FUNCTION = "function"
    IF = "if"
    IMPORT = "import"
    IN = "in"
    INSTANCEOF = "instanceof"
    NEW = "new"
    RETURN = "return"
    LET = "let"
    SUPER = "super"
    SWITCH = "switch"
    THIS = "this"
    THROW = "throw"
    TRY = "try"
    TYPEOF = "typeof"
    VAR = "var"
    VOID = "void"
    WHILE = "while"
    WITH = "with"
    YIELD = "yield"


KEYWORDS: dict[str, Keyword] = {kw.value: kw for kw in Keyword}


class WordKind(Enum):
    KEYWORD = auto()
    IDENTIFIER = auto()
    TRUE = auto()
    FALSE = auto()
    NULL = auto()


LITERAL_WORDS: dict[str, WordKind] = {
    "true": WordKind.TRUE,
    "false": WordKind.FALSE,
    "null": WordKind.NULL,
}


@dataclass(frozen=True, slots=True)
class Word:
    """A scanned word: keyword, literal word, or identifier with its exact text."""

    kind: WordKind
    text: str
    keyword: Keyword | None = None


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open character range [start, end)."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"span start {self.start} is after end {self.end}")

    @property
    def size(self) -> int:
        return self.end - self.start


TokenValue = float | str | Word | AssignOp | BinaryOp | None


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token with its decoded value and character span."""

    kind: TokenKind
    span: Span
    value: TokenValue = None
    raw: str | None = None


# Line breaks as editors count them: \r\n, \r or \n
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def position_at(source: str, offset: int) -> Position:
    """Return the line/column position of a character offset in source."""
    offset = max(0, min(offset, len(source)))
    line = 1
    line_start = 0
    for m in _LINE_BREAK.finditer(source, 0, offset):
        line += 1
        line_start = m.end()
    return Position(line, offset - line_start + 1, offset)


def split_lines(source: str) -> list[str]:
    """Split source into lines at the same breaks position_at() counts."""
    return _LINE_BREAK.split(source)


_IDENT_START = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ$_")
_IDENT_PART = _IDENT_START | frozenset("0123456789\u200c")
_LINE_TERMINATORS = frozenset("\n\r\u2028\u2029")
_DECIMAL_DIGITS = frozenset("0123456789")
# Unicode White_Space plus the byte-order mark
_WHITESPACE = frozenset(
    "\t\n\v\f\r \x85\xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000\ufeff"
)


# TODO: accept Unicode ID_Start/ID_Continue so non-Latin names lex as identifiers.
def is_ident_start(ch: str) -> bool:
    """Return True if ch can begin an identifier (ASCII letter, $ or _)."""
    return ch in _IDENT_START


def is_ident_part(ch: str) -> bool:
    """Return True if ch can continue an identifier."""
    return ch in _IDENT_PART


def is_line_terminator(ch: str) -> bool:
    return ch in _LINE_TERMINATORS


def is_whitespace(ch: str) -> bool:
    """Return True for any Unicode whitespace character or a byte-order mark."""
    return ch in _WHITESPACE


def is_decimal_digit(ch: str) -> bool:
    return ch in _DECIMAL_DIGITS
