"""JavaScript lexer: converts source text into a flat token stream plus diagnostics."""

from __future__ import annotations

import logging
import math
from typing import NamedTuple

from jslex.errors import ErrorKind, LexDiagnostic, LexError
from jslex.tokens import (
    KEYWORDS,
    LITERAL_WORDS,
    AssignOp,
    BinaryOp,
    Span,
    Token,
    TokenKind,
    TokenValue,
    Word,
    WordKind,
    is_decimal_digit,
    is_ident_part,
    is_ident_start,
    is_line_terminator,
    is_whitespace,
)

logger = logging.getLogger(__name__)

_Scanned = tuple[TokenKind, TokenValue, "str | None"]

_SINGLE_CHAR: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    ",": TokenKind.COMMA,
    ":": TokenKind.COLON,
    ";": TokenKind.SEMICOLON,
    "?": TokenKind.QUESTION,
    "~": TokenKind.TILDE,
}

_OPERATOR_LEADS = frozenset("!+-*/%=<>&|^")

_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "\\": "\\", "'": "'", '"': '"'}

_RADIX_DIGITS = {
    2: frozenset("01"),
    8: frozenset("01234567"),
    16: frozenset("0123456789abcdefABCDEF"),
}

# Characters that keep a decimal literal going past its first digit
_DECIMAL_CONTINUE = frozenset("0123456789.eE")


class LexResult(NamedTuple):
    """Tokens and diagnostics from one scan; an empty ``errors`` means success."""

    tokens: list[Token]
    errors: list[LexDiagnostic]


class Lexer:
    """Tokenize JavaScript source text in a single forward pass.

    Errors never stop the scan early; they are collected and returned next to
    the tokens. The one exception is a character that cannot start any token,
    which is reported and ends the scan. A Lexer can be run only once.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._last_pos = 0
        self._errors: list[LexDiagnostic] = []
        self._consumed = False

    def lex(self) -> LexResult:
        """Scan the full source and return its tokens (without EOF) and diagnostics."""
        if self._consumed:
            raise RuntimeError("Lexer has already been run; create a new Lexer")
        self._consumed = True

        tokens: list[Token] = []
        while True:
            token = self._read_next_token()
            if token.kind is TokenKind.EOF:
                break
            tokens.append(token)

        logger.debug("lexed %d tokens with %d diagnostics", len(tokens), len(self._errors))
        return LexResult(tokens, self._errors)

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        if self._pos >= len(self._source):
            return ""
        ch = self._source[self._pos]
        self._pos += 1
        return ch

    def _commit(self) -> None:
        """Mark everything consumed so far as part of the current token."""
        self._last_pos = self._pos

    def _match(self, expected: str) -> bool:
        if self._peek() != expected:
            return False
        self._advance()
        self._commit()
        return True

    def _error(self, kind: ErrorKind, char: str, start: int, end: int) -> None:
        self._errors.append(LexDiagnostic(kind, char, Span(start, end)))

    def _stray(self, kind: ErrorKind, char: str) -> None:
        """Record the character just consumed as not belonging to its construct."""
        self._error(kind, char, self._pos - 1, self._pos)

    def _skip_whitespace(self) -> None:
        while is_whitespace(self._peek()):
            self._advance()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _read_next_token(self) -> Token:
        self._skip_whitespace()
        start = self._pos
        kind, value, raw = self._read_next_kind()
        return Token(kind, Span(start, self._last_pos), value, raw)

    def _read_next_kind(self) -> _Scanned:
        ch = self._advance()
        self._commit()

        if ch == "":
            return TokenKind.EOF, None, None

        single = _SINGLE_CHAR.get(ch)
        if single is not None:
            return single, None, None

        if ch in ("'", '"'):
            value, raw = self._read_string(ch)
            return TokenKind.STRING, value, raw

        if ch in _OPERATOR_LEADS:
            return self._read_operator(ch)

        if is_decimal_digit(ch):
            return TokenKind.NUMBER, self._read_numeric(ch), None

        if ch == ".":
            return self._read_dot()

        if is_ident_start(ch):
            return TokenKind.WORD, self._read_identifier(ch), None

        # Nothing can start here; report it and stop scanning
        logger.debug("unrecognized character %r at offset %d, ending scan", ch, self._pos - 1)
        self._stray(ErrorKind.UNEXPECTED_TOKEN, ch)
        return TokenKind.EOF, None, None

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def _read_operator(self, ch: str) -> _Scanned:
        """Resolve the longest operator starting with ch, checking suffixes in fixed order."""
        if ch == "!":
            if self._match("="):
                if self._match("="):
                    return _binary(BinaryOp.NE_NE)
                return _binary(BinaryOp.NE)
            return TokenKind.BANG, None, None

        if ch == "+":
            if self._match("="):
                return _assign(AssignOp.ADD_ASSIGN)
            if self._match("+"):
                return TokenKind.PLUS_PLUS, None, None
            return _binary(BinaryOp.ADD)

        if ch == "-":
            if self._match("-"):
                return TokenKind.MINUS_MINUS, None, None
            if self._match("="):
                return _assign(AssignOp.SUB_ASSIGN)
            return _binary(BinaryOp.SUB)

        if ch == "*":
            if self._match("="):
                return _assign(AssignOp.MUL_ASSIGN)
            return _binary(BinaryOp.MUL)

        if ch == "/":
            if self._match("/"):
                return self._read_line_comment()
            if self._match("*"):
                return self._read_block_comment()
            if self._match("="):
                return _assign(AssignOp.DIV_ASSIGN)
            return _binary(BinaryOp.DIV)

        if ch == "%":
            if self._match("="):
                return _assign(AssignOp.MOD_ASSIGN)
            return _binary(BinaryOp.MOD)

        if ch == "=":
            if self._match(">"):
                return TokenKind.ARROW, None, None
            if self._match("="):
                if self._match("="):
                    return _binary(BinaryOp.EQ_EQ)
                return _binary(BinaryOp.EQ)
            return _assign(AssignOp.ASSIGN)

        if ch == ">":
            if self._match("="):
                return _binary(BinaryOp.GE)
            if self._match(">"):
                if self._match(">"):
                    if self._match("="):
                        return _assign(AssignOp.ZERO_FILL_RIGHT_SHIFT_ASSIGN)
                    return _binary(BinaryOp.ZERO_FILL_RSHIFT)
                if self._match("="):
                    return _assign(AssignOp.RIGHT_SHIFT_ASSIGN)
                return _binary(BinaryOp.RSHIFT)
            return _binary(BinaryOp.GT)

        if ch == "<":
            if self._match("="):
                return _binary(BinaryOp.LE)
            if self._match("<"):
                if self._match("="):
                    return _assign(AssignOp.LEFT_SHIFT_ASSIGN)
                return _binary(BinaryOp.LSHIFT)
            return _binary(BinaryOp.LT)

        if ch == "&":
            if self._match("&"):
                return _binary(BinaryOp.LOGICAL_AND)
            if self._match("="):
                return _assign(AssignOp.BIT_AND_ASSIGN)
            return _binary(BinaryOp.BIT_AND)

        if ch == "|":
            if self._match("|"):
                return _binary(BinaryOp.LOGICAL_OR)
            if self._match("="):
                return _assign(AssignOp.BIT_OR_ASSIGN)
            return _binary(BinaryOp.BIT_OR)

        # ^
        if self._match("="):
            return _assign(AssignOp.BIT_XOR_ASSIGN)
        return _binary(BinaryOp.BIT_XOR)

    def _read_dot(self) -> _Scanned:
        if is_decimal_digit(self._peek()):
            return TokenKind.NUMBER, self._read_decimal(".", self._pos - 1), None
        if self._peek() == "." and self._peek(1) == ".":
            self._advance()
            self._advance()
            self._commit()
            return TokenKind.DOT_DOT_DOT, None, None
        return TokenKind.DOT, None, None

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def _read_line_comment(self) -> _Scanned:
        """Consume through the next line terminator, which belongs to the comment."""
        while True:
            ch = self._advance()
            if ch == "" or is_line_terminator(ch):
                break
        self._commit()
        return TokenKind.SINGLE_LINE_COMMENT, None, None

    def _read_block_comment(self) -> _Scanned:
        start = self._pos - 2
        while True:
            ch = self._advance()
            if ch == "":
                self._error(ErrorKind.UNTERMINATED_COMMENT, "*", start, self._pos)
                break
            if ch == "*" and self._peek() == "/":
                self._advance()
                break
        self._commit()
        return TokenKind.MULTI_LINE_COMMENT, None, None

    # ------------------------------------------------------------------
    # Numeric literals
    # ------------------------------------------------------------------

    def _read_numeric(self, lead: str) -> float:
        start = self._pos - 1
        if lead != "0":
            return self._read_decimal(lead, start)

        nxt = self._peek()

        if nxt in ("b", "B"):
            self._advance()
            self._commit()
            return self._read_radix(2, start)

        if nxt in ("o", "O"):
            self._advance()
            self._commit()
            return self._read_radix(8, start)

        if nxt in ("x", "X"):
            self._advance()
            self._commit()
            return self._read_radix(16, start)

        if nxt in ("8", "9"):
            self._advance()
            self._commit()
            value = self._read_decimal(nxt, start)
            self._error(ErrorKind.LEGACY_DECIMAL_ESCAPE, lead, start, self._last_pos)
            return value

        if nxt in _RADIX_DIGITS[8]:
            value = self._read_radix(8, start)
            self._error(ErrorKind.LEGACY_OCTAL_LITERAL, lead, start, self._last_pos)
            return value

        if nxt == "." and is_decimal_digit(self._peek(1)):
            return self._read_decimal(lead, start)

        if _at_boundary(nxt):
            return 0.0

        # Left unconsumed so the next token starts there
        self._error(ErrorKind.INVALID_OR_UNEXPECTED_TOKEN, nxt, self._pos, self._pos + 1)
        return 0.0

    def _read_decimal(self, head: str, start: int) -> float:
        """Scan DecimalDigits [. DecimalDigits] [e [+-] DecimalDigits] after head."""
        text = [head]
        if self._peek() not in _DECIMAL_CONTINUE:
            return self._to_number(head, 10, start)

        seen_dot = head == "."
        seen_exp = False
        while True:
            ch = self._peek()
            if _at_boundary(ch):
                break
            self._advance()

            if is_decimal_digit(ch):
                text.append(ch)
                self._commit()
            elif ch == "." and not seen_dot and not seen_exp:
                seen_dot = True
                text.append(ch)
                self._commit()
                # A non-blank follower is reported by the loop itself
                if _at_boundary(self._peek()):
                    self._stray(ErrorKind.INVALID_OR_UNEXPECTED_TOKEN, ch)
            elif ch in ("e", "E") and not seen_exp:
                seen_exp = True
                text.append(ch)
                self._commit()
                if self._peek() in ("+", "-"):
                    text.append(self._advance())
                    self._commit()
                if _at_boundary(self._peek()):
                    self._stray(ErrorKind.INVALID_OR_UNEXPECTED_TOKEN, text[-1])
            else:
                self._stray(ErrorKind.INVALID_OR_UNEXPECTED_TOKEN, ch)

        # An exponent without digits has already been reported
        return self._to_number("".join(text).rstrip("eE+-"), 10, start)

    def _read_radix(self, radix: int, start: int) -> float:
        """Scan digits of the given radix from the cursor until whitespace."""
        allowed = _RADIX_DIGITS[radix]
        digits: list[str] = []
        while True:
            ch = self._peek()
            if _at_boundary(ch):
                break
            self._advance()

            if ch in allowed:
                digits.append(ch)
                self._commit()
            elif ch == ".":
                self._stray(ErrorKind.UNEXPECTED_NUMBER, ch)
            else:
                self._stray(ErrorKind.INVALID_OR_UNEXPECTED_TOKEN, ch)

        return self._to_number("".join(digits), radix, start)

    def _to_number(self, text: str, radix: int, start: int) -> float:
        try:
            if radix == 10:
                return float(text)
            digits = int(text, radix)
        except ValueError:
            end = max(self._last_pos, start + 1)
            self._error(ErrorKind.INVALID_NUMERIC_LITERAL, self._source[start], start, end)
            return 0.0
        try:
            return float(digits)
        except OverflowError:
            # Out of double range, same as a decimal literal such as 1e999
            return math.inf

    # ------------------------------------------------------------------
    # String literals
    # ------------------------------------------------------------------

    def _read_string(self, quote: str) -> tuple[str, str]:
        """Return (decoded value, raw source text) for a literal opened by quote."""
        start = self._pos - 1
        value: list[str] = []
        raw = [quote]
        while True:
            ch = self._advance()
            if ch == "":
                self._error(ErrorKind.UNTERMINATED_STRING, quote, start, self._pos)
                break
            if ch == "\\":
                raw.append(ch)
                escaped = self._advance()
                raw.append(escaped)
                value.append(_SIMPLE_ESCAPES.get(escaped, escaped))
            elif ch == quote:
                raw.append(ch)
                self._commit()
                break
            else:
                value.append(ch)
                raw.append(ch)
            self._commit()
        return "".join(value), "".join(raw)

    # ------------------------------------------------------------------
    # Identifiers and keywords
    # ------------------------------------------------------------------

    def _read_identifier(self, head: str) -> Word:
        chars = [head]
        while True:
            ch = self._peek()
            if _at_boundary(ch):
                break
            self._advance()
            if is_ident_part(ch):
                chars.append(ch)
                self._commit()
            else:
                self._stray(ErrorKind.UNEXPECTED_TOKEN, ch)

        text = "".join(chars)
        keyword = KEYWORDS.get(text)
        if keyword is not None:
            return Word(WordKind.KEYWORD, text, keyword)
        return Word(LITERAL_WORDS.get(text, WordKind.IDENTIFIER), text)


def _binary(op: BinaryOp) -> _Scanned:
    return TokenKind.BINARY_OP, op, None


def _assign(op: AssignOp) -> _Scanned:
    return TokenKind.ASSIGN_OP, op, None


def _at_boundary(ch: str) -> bool:
    return ch == "" or is_whitespace(ch)


def lex(source: str) -> LexResult:
    """Scan source and return its tokens and diagnostics."""
    return Lexer(source).lex()


def tokenize(source: str, *, strict: bool = False) -> list[Token]:
    """Convenience function: return the token list, raising LexError in strict mode."""
    tokens, errors = lex(source)
    if strict and errors:
        raise LexError(errors, source)
    return tokens
