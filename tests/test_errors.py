"""Test diagnostic collection, messages, and context snippets."""

import pytest

from jslex.errors import ErrorKind, LexDiagnostic, LexError, render_snippet
from jslex.lexer import Lexer, lex, tokenize
from jslex.tokens import Span, TokenKind

from .conftest import assert_kinds, error_kinds


class TestCollection:
    def test_clean_source_has_no_errors(self):
        result = lex("let x = 1;")
        assert result.errors == []
        assert result.tokens

    def test_errors_accumulate_across_tokens(self):
        _, errors = lex("a-b 08 0b12")
        assert error_kinds(errors) == [
            ErrorKind.UNEXPECTED_TOKEN,
            ErrorKind.LEGACY_DECIMAL_ESCAPE,
            ErrorKind.INVALID_OR_UNEXPECTED_TOKEN,
        ]

    def test_tokens_returned_despite_errors(self):
        tokens, errors = lex("a-b c")
        assert len(tokens) == 2
        assert len(errors) == 1

    def test_errors_in_source_order(self):
        _, errors = lex("x.y 1.2.3 z#")
        starts = [e.span.start for e in errors]
        assert starts == sorted(starts)


class TestUnknownCharacter:
    def test_ends_scan(self, lex_all):
        tokens, errors = lex_all("a ` b")
        assert_kinds(tokens, [TokenKind.WORD])
        assert error_kinds(errors) == [ErrorKind.UNEXPECTED_TOKEN]
        assert errors[0].char == "`"
        assert (errors[0].span.start, errors[0].span.end) == (2, 3)

    def test_unknown_first_character(self, lex_all):
        tokens, errors = lex_all("#!/usr/bin/env node")
        assert tokens == []
        assert len(errors) == 1

    def test_nul_character(self, lex_all):
        _, errors = lex_all("\0")
        assert errors[0].message == "unexpected token `\\x00`"


class TestMessages:
    def test_character_is_quoted(self):
        diag = LexDiagnostic(ErrorKind.INVALID_OR_UNEXPECTED_TOKEN, ";", Span(1, 2))
        assert diag.message == "invalid or unexpected token `;`"

    def test_kind_only_message(self):
        diag = LexDiagnostic(ErrorKind.UNTERMINATED_STRING, "'", Span(0, 3))
        assert diag.message == "unterminated string literal"

    def test_legacy_message(self):
        diag = LexDiagnostic(ErrorKind.LEGACY_OCTAL_LITERAL, "0", Span(0, 3))
        assert diag.message == "Legacy octal literals are not available"
        assert diag.is_legacy

    def test_non_legacy(self):
        diag = LexDiagnostic(ErrorKind.UNEXPECTED_NUMBER, ".", Span(0, 1))
        assert not diag.is_legacy

    def test_empty_character(self):
        diag = LexDiagnostic(ErrorKind.UNEXPECTED_TOKEN, "", Span(0, 0))
        assert diag.message == "unexpected token `end of input`"


class TestFormatting:
    def test_full_report(self):
        _, errors = lex("a-b")
        assert errors[0].format("a-b") == (
            "error: unexpected token `-`\n"
            "  --> input.js:1:2\n"
            "  |\n"
            "1 | a-b\n"
            "  |  ^ unexpected token"
        )

    def test_custom_filename(self):
        _, errors = lex("a-b")
        assert "--> app.js:1:2" in errors[0].format("a-b", "app.js")

    def test_second_line(self):
        source = "x\n  a-b"
        _, errors = lex(source)
        formatted = errors[0].format(source)
        assert "2:4" in formatted
        assert "2 |   a-b" in formatted

    def test_underline_covers_span(self):
        formatted = render_snippet("boom", Span(4, 8), "let 0123;")
        assert formatted.endswith("    ^^^^")

    def test_multiline_span_underlines_to_end_of_line(self):
        source = "/* a\nb"
        _, errors = lex(source)
        formatted = errors[0].format(source)
        assert "1 | /* a\n" in formatted
        assert formatted.endswith("^^^^ unterminated comment")

    def test_carriage_return_line_endings(self):
        source = "x\ra-b\ry"
        _, errors = lex(source)
        formatted = errors[0].format(source)
        assert "--> input.js:2:2" in formatted
        assert "2 | a-b\n" in formatted

    def test_wide_gutter(self):
        source = "\n" * 11 + "a-b"
        _, errors = lex(source)
        formatted = errors[0].format(source)
        assert "12 | a-b" in formatted
        assert "   --> input.js:12:2" in formatted


class TestStrict:
    def test_clean_source(self):
        tokens = tokenize("a + b", strict=True)
        assert len(tokens) == 3

    def test_raises_with_all_diagnostics(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("a-b 08", strict=True)
        err = exc_info.value
        assert len(err.diagnostics) == 2
        assert err.source == "a-b 08"
        assert err.message == "unexpected token `-`"

    def test_str_is_formatted_report(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("a-b", strict=True)
        assert str(exc_info.value).startswith("error:")

    def test_format_joins_reports(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("a-b c-d", strict=True)
        formatted = exc_info.value.format("f.js")
        assert formatted.count("error:") == 2
        assert "\n\nerror:" in formatted
        assert "f.js:1:6" in formatted

    def test_lenient_default(self):
        tokens = tokenize("a-b")
        assert len(tokens) == 1


class TestLexerLifecycle:
    def test_single_use(self):
        lexer = Lexer("a")
        lexer.lex()
        with pytest.raises(RuntimeError):
            lexer.lex()

    def test_independent_lexers(self):
        assert Lexer("a").lex() == Lexer("a").lex()
