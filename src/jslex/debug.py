"""Token dumps: human-readable lines and JSON-ready dictionaries."""

from __future__ import annotations

import math
import sys
from typing import Any, TextIO

from jslex.tokens import AssignOp, BinaryOp, Token, TokenKind, Word


def dump_tokens(tokens: list[Token], *, file: TextIO | None = None) -> None:
    """Print one line per token to *file* (default: stderr)."""
    out = file if file is not None else sys.stderr
    for token in tokens:
        out.write(f"{format_token(token)}\n")


def format_token(token: Token) -> str:
    """Return e.g. ``Number(1.0) @ 0..1`` for a token."""
    return f"{_describe(token)} @ {token.span.start}..{token.span.end}"


def _describe(token: Token) -> str:
    kind = token.kind
    value = token.value
    if kind is TokenKind.NUMBER:
        return f"Number({value!r})"
    if kind is TokenKind.STRING:
        return f"String({value!r}, raw={token.raw!r})"
    if kind is TokenKind.WORD and isinstance(value, Word):
        if value.keyword is not None:
            return f"Keyword({value.text})"
        return f"{value.kind.name.title()}({value.text!r})"
    if isinstance(value, (AssignOp, BinaryOp)):
        return f"{type(value).__name__}({value.value})"
    return kind.name


def token_to_dict(token: Token) -> dict[str, Any]:
    """Convert a token into plain JSON-serializable data."""
    data: dict[str, Any] = {
        "kind": token.kind.name,
        "span": [token.span.start, token.span.end],
    }
    value = token.value
    if isinstance(value, Word):
        data["word"] = value.kind.name
        data["value"] = value.text
    elif isinstance(value, (AssignOp, BinaryOp)):
        data["value"] = value.value
    elif isinstance(value, float) and not math.isfinite(value):
        # JSON has no literal for these
        data["value"] = _non_finite_text(value)
    elif value is not None:
        data["value"] = value
    if token.raw is not None:
        data["raw"] = token.raw
    return data


def _non_finite_text(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    return "Infinity" if value > 0 else "-Infinity"
