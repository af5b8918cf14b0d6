"""Diagnostic records and error types with formatted source context."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from jslex.tokens import Span, position_at, split_lines


class ErrorKind(Enum):
    UNEXPECTED_TOKEN = "unexpected token"
    INVALID_OR_UNEXPECTED_TOKEN = "invalid or unexpected token"
    UNEXPECTED_NUMBER = "unexpected number"
    LEGACY_DECIMAL_ESCAPE = "Legacy decimal escape is not permitted in strict mode"
    LEGACY_OCTAL_LITERAL = "Legacy octal literals are not available"
    UNTERMINATED_STRING = "unterminated string literal"
    UNTERMINATED_COMMENT = "unterminated comment"
    INVALID_NUMERIC_LITERAL = "invalid numeric literal"


# Kinds whose message quotes the offending character
_CHAR_KINDS = frozenset(
    {
        ErrorKind.UNEXPECTED_TOKEN,
        ErrorKind.INVALID_OR_UNEXPECTED_TOKEN,
        ErrorKind.UNEXPECTED_NUMBER,
    }
)

# Pre-strict-mode syntax; reported as warnings rather than errors
LEGACY_KINDS = frozenset({ErrorKind.LEGACY_DECIMAL_ESCAPE, ErrorKind.LEGACY_OCTAL_LITERAL})


@dataclass(frozen=True, slots=True)
class LexDiagnostic:
    """A recoverable lexical error: what went wrong, on which character, and where."""

    kind: ErrorKind
    char: str
    span: Span

    @property
    def message(self) -> str:
        if self.kind in _CHAR_KINDS:
            return f"{self.kind.value} `{_printable(self.char)}`"
        return self.kind.value

    @property
    def is_legacy(self) -> bool:
        return self.kind in LEGACY_KINDS

    def format(self, source: str, filename: str = "input.js") -> str:
        return render_snippet(self.message, self.span, source, filename, self.kind.value)


class LexError(Exception):
    """Raised by strict tokenization when the scan recorded any diagnostics."""

    def __init__(self, diagnostics: Sequence[LexDiagnostic], source: str) -> None:
        self.diagnostics = list(diagnostics)
        self.source = source
        super().__init__(self.format())

    @property
    def message(self) -> str:
        return self.diagnostics[0].message if self.diagnostics else "lexing failed"

    def format(self, filename: str = "input.js") -> str:
        return "\n\n".join(d.format(self.source, filename) for d in self.diagnostics)


def render_snippet(
    message: str,
    span: Span,
    source: str,
    filename: str = "input.js",
    label: str | None = None,
) -> str:
    """Render an error report with a source line, gutter, and caret label at span."""
    start = position_at(source, span.start)
    end = position_at(source, span.end)
    lines = split_lines(source)
    line_idx = start.line - 1
    col = start.column

    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx]
    else:
        source_line = ""

    # Underline the full span when on one line, otherwise to end of line
    if end.line == start.line:
        underline_len = max(1, end.column - col)
    else:
        underline_len = max(1, len(source_line) - col + 1)

    pad = " " * (col - 1)
    carets = "^" * underline_len

    line_num = str(start.line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    result = (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{start.line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )
    if label:
        result += f" {label}"
    return result


def _printable(ch: str) -> str:
    if ch == "":
        return "end of input"
    if ch.isprintable():
        return ch
    return ascii(ch)[1:-1]
