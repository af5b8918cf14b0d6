"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from jslex.errors import ErrorKind, LexDiagnostic
from jslex.lexer import LexResult
from jslex.lexer import lex as run_lex
from jslex.tokens import Token, TokenKind


@pytest.fixture
def lex():
    """Return a helper that lexes source and returns only the tokens."""

    def _lex(source: str) -> list[Token]:
        return run_lex(source).tokens

    return _lex


@pytest.fixture
def lex_all():
    """Return a helper that lexes source and returns tokens and diagnostics."""

    def _lex(source: str) -> LexResult:
        return run_lex(source)

    return _lex


def assert_kinds(tokens: list[Token], expected: list[TokenKind]) -> None:
    """Assert that the token kinds match the expected list."""
    actual = [t.kind for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[object]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_spans(tokens: list[Token], expected: list[tuple[int, int]]) -> None:
    """Assert token spans as (start, end) pairs."""
    actual = [(t.span.start, t.span.end) for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def error_kinds(errors: list[LexDiagnostic]) -> list[ErrorKind]:
    return [e.kind for e in errors]


def only_token(tokens: list[Token]) -> Token:
    """Return the single token in the list, failing if there is not exactly one."""
    assert len(tokens) == 1, f"Expected one token, got {tokens}"
    return tokens[0]
