"""Test punctuation tokens, spans, and the token data model."""

import pytest

from jslex.tokens import Position, Span, TokenKind, position_at, split_lines

from .conftest import assert_kinds, assert_spans, only_token


class TestSingleCharacter:
    @pytest.mark.parametrize(
        ("source", "kind"),
        [
            ("(", TokenKind.LPAREN),
            (")", TokenKind.RPAREN),
            ("{", TokenKind.LBRACE),
            ("}", TokenKind.RBRACE),
            ("[", TokenKind.LBRACKET),
            ("]", TokenKind.RBRACKET),
            (",", TokenKind.COMMA),
            (":", TokenKind.COLON),
            (";", TokenKind.SEMICOLON),
            ("?", TokenKind.QUESTION),
            ("~", TokenKind.TILDE),
        ],
    )
    def test_leaf(self, lex, source, kind):
        token = only_token(lex(source))
        assert token.kind == kind
        assert token.value is None
        assert (token.span.start, token.span.end) == (0, 1)

    def test_brackets_back_to_back(self, lex):
        tokens = lex("({[]})")
        assert_kinds(
            tokens,
            [
                TokenKind.LPAREN,
                TokenKind.LBRACE,
                TokenKind.LBRACKET,
                TokenKind.RBRACKET,
                TokenKind.RBRACE,
                TokenKind.RPAREN,
            ],
        )
        assert_spans(tokens, [(0, 1), (1, 2), (2, 3), (3, 4), (4, 5), (5, 6)])


class TestDots:
    def test_dot(self, lex):
        token = only_token(lex("."))
        assert token.kind == TokenKind.DOT

    def test_dot_dot_dot(self, lex):
        token = only_token(lex("..."))
        assert token.kind == TokenKind.DOT_DOT_DOT
        assert (token.span.start, token.span.end) == (0, 3)

    def test_two_dots_are_two_tokens(self, lex):
        assert_kinds(lex(".."), [TokenKind.DOT, TokenKind.DOT])

    def test_spread_before_bracket(self, lex):
        assert_kinds(lex("...[ ]"), [TokenKind.DOT_DOT_DOT, TokenKind.LBRACKET, TokenKind.RBRACKET])


class TestEmptyInput:
    def test_empty_source(self, lex_all):
        tokens, errors = lex_all("")
        assert tokens == []
        assert errors == []

    def test_whitespace_only(self, lex_all):
        tokens, errors = lex_all("  \t\n\r\n ")
        assert tokens == []
        assert errors == []

    def test_no_eof_token(self, lex):
        assert all(t.kind != TokenKind.EOF for t in lex("( )"))


class TestSpan:
    def test_size(self):
        assert Span(2, 7).size == 5

    def test_empty_span_allowed(self):
        assert Span(3, 3).size == 0

    def test_start_after_end_rejected(self):
        with pytest.raises(ValueError):
            Span(5, 4)

    def test_spans_count_characters_not_bytes(self, lex):
        # each accented letter is two bytes in UTF-8 but one position here
        tokens = lex("'\u00e9\u00e9' ;")
        assert_spans(tokens, [(0, 4), (5, 6)])

    def test_astral_character_is_one_position(self, lex):
        tokens = lex("'\U0001f600' ;")
        assert_spans(tokens, [(0, 3), (4, 5)])


class TestPositionAt:
    def test_first_character(self):
        assert position_at("abc", 0) == Position(1, 1, 0)

    def test_second_line(self):
        assert position_at("ab\ncd", 4) == Position(2, 2, 4)

    def test_end_of_source(self):
        assert position_at("ab\n", 3) == Position(2, 1, 3)

    def test_carriage_return_is_a_break(self):
        assert position_at("a\r#", 2) == Position(2, 1, 2)

    def test_crlf_is_one_break(self):
        assert position_at("a\r\nb\r\nc", 6) == Position(3, 1, 6)

    def test_mixed_breaks(self):
        assert position_at("a\nb\rc\r\nd", 7) == Position(4, 1, 7)

    def test_offset_is_clamped(self):
        assert position_at("ab", 10) == Position(1, 3, 2)


class TestSplitLines:
    def test_matches_position_at(self):
        source = "one\rtwo\r\nthree\nfour"
        lines = split_lines(source)
        assert lines == ["one", "two", "three", "four"]
        pos = position_at(source, source.index("four"))
        assert lines[pos.line - 1] == "four"

    def test_trailing_break(self):
        assert split_lines("a\n") == ["a", ""]
