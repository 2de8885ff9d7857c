# =============================================================================
# test_scanner.py - Scanner Unit Tests
# =============================================================================
# Tests for the calculator language scanner.
#
# Test coverage includes:
#   - Keywords versus identifiers (maximal munch)
#   - Numeric literals, including the unimplemented real-literal path
#   - All operators and delimiters
#   - Whitespace handling and token positions
#   - Lexical error conditions
# =============================================================================

import pytest

from calc_checker.errors import (
    LexicalError,
    UnexpectedCharacterError,
    IncompleteOperatorError,
)
from calc_checker.scanner import Scanner, Token, TokenType, KEYWORDS, is_blank
from calc_checker.source import SourceReader


# =============================================================================
# Helper Functions
# =============================================================================

def tokenize(source: str) -> list[Token]:
    """Scan a whole source string, dropping the final END token."""
    scanner = Scanner(SourceReader.from_string(source), "<test>")
    tokens = list(scanner.tokens())
    assert tokens[-1].type == TokenType.END
    return tokens[:-1]


def types(source: str) -> list[TokenType]:
    """Token types of a source string, without END."""
    return [t.type for t in tokenize(source)]


# =============================================================================
# Identifier and Keyword Tests
# =============================================================================

class TestIdentifiers:
    """Test identifier and keyword recognition."""

    def test_identifier(self):
        """A plain name is an identifier."""
        tokens = tokenize("total")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.IDENT
        assert tokens[0].text == "total"

    def test_identifier_with_digits_and_underscore(self):
        """Identifiers continue with digits and underscores."""
        tokens = tokenize("x_1y2")
        assert [t.text for t in tokens] == ["x_1y2"]

    def test_unicode_identifier(self):
        """Any alphabetic codepoint can start and continue an identifier."""
        tokens = tokenize("été")
        assert tokens[0].type == TokenType.IDENT
        assert tokens[0].text == "été"

    @pytest.mark.parametrize("word,token_type", sorted(KEYWORDS.items()))
    def test_keywords(self, word, token_type):
        """Every keyword maps to its own token type."""
        tokens = tokenize(word)
        assert tokens[0].type == token_type
        assert tokens[0].text == word

    def test_keyword_prefix_is_identifier(self):
        """Maximal munch: a keyword followed by letters is an identifier."""
        assert types("reader iff done") == [TokenType.IDENT] * 3

    def test_keywords_are_case_sensitive(self):
        """Only lowercase spellings are keywords."""
        assert types("Read WRITE") == [TokenType.IDENT, TokenType.IDENT]

    def test_underscore_cannot_start_identifier(self):
        """An underscore is not alphabetic, so it starts no token."""
        with pytest.raises(UnexpectedCharacterError):
            tokenize("_x")


# =============================================================================
# Numeric Literal Tests
# =============================================================================

class TestNumbers:
    """Test numeric literal recognition."""

    def test_integer(self):
        """A digit run is an integer literal."""
        tokens = tokenize("1234")
        assert tokens[0].type == TokenType.I_LIT
        assert tokens[0].text == "1234"

    def test_decimal_point_stays_integer_literal(self):
        """A '.' is absorbed into the run but the token stays I_LIT."""
        tokens = tokenize("3.14")
        assert len(tokens) == 1
        assert tokens[0].type == TokenType.I_LIT
        assert tokens[0].text == "3.14"

    def test_multiple_points_absorbed(self):
        """Every '.' in the run is kept; no validation is done."""
        tokens = tokenize("1.2.3 4.")
        assert [t.text for t in tokens] == ["1.2.3", "4."]

    def test_leading_point_is_rejected(self):
        """A literal cannot start with '.'."""
        with pytest.raises(UnexpectedCharacterError):
            tokenize(".5")

    @pytest.mark.xfail(
        strict=True,
        reason="real literals are not scanned: digit runs with '.' are I_LIT",
    )
    def test_real_literal_is_recognised(self):
        """A literal with a decimal point should be an R_LIT."""
        tokens = tokenize("2.5")
        assert tokens[0].type == TokenType.R_LIT

    def test_number_then_identifier(self):
        """Digits followed by letters split into two tokens."""
        tokens = tokenize("12ab")
        assert [(t.type, t.text) for t in tokens] == [
            (TokenType.I_LIT, "12"),
            (TokenType.IDENT, "ab"),
        ]

    def test_non_ascii_digit_rejected(self):
        """Only ASCII digits start a number."""
        with pytest.raises(UnexpectedCharacterError):
            tokenize("٣")


# =============================================================================
# Operator Tests
# =============================================================================

class TestOperators:
    """Test operator and delimiter recognition."""

    @pytest.mark.parametrize("text,token_type", [
        ("(", TokenType.LPAREN),
        (")", TokenType.RPAREN),
        ("+", TokenType.PLUS),
        ("-", TokenType.MINUS),
        ("*", TokenType.TIMES),
        ("/", TokenType.DIV_BY),
        (":=", TokenType.GETS),
        ("==", TokenType.EQ),
        ("!=", TokenType.NE),
        ("<", TokenType.LT),
        (">", TokenType.GT),
        ("<=", TokenType.LE),
        (">=", TokenType.GE),
    ])
    def test_operator(self, text, token_type):
        """Each operator is recognised with its exact text."""
        tokens = tokenize(text)
        assert len(tokens) == 1
        assert tokens[0].type == token_type
        assert tokens[0].text == text

    def test_operators_without_spaces(self):
        """Operators need no surrounding whitespace."""
        assert types("x:=(a+b)*c/2") == [
            TokenType.IDENT,
            TokenType.GETS,
            TokenType.LPAREN,
            TokenType.IDENT,
            TokenType.PLUS,
            TokenType.IDENT,
            TokenType.RPAREN,
            TokenType.TIMES,
            TokenType.IDENT,
            TokenType.DIV_BY,
            TokenType.I_LIT,
        ]

    def test_less_than_then_equal_is_one_token(self):
        """'<=' is formed even when followed by more operators."""
        assert types("a<=-b") == [
            TokenType.IDENT,
            TokenType.LE,
            TokenType.MINUS,
            TokenType.IDENT,
        ]

    def test_split_compound_operator(self):
        """Whitespace between '<' and '=' is not a '<=' operator."""
        with pytest.raises(IncompleteOperatorError):
            tokenize("a < = b")


# =============================================================================
# Whitespace and Position Tests
# =============================================================================

class TestWhitespaceAndPositions:
    """Test whitespace skipping and token positions."""

    def test_empty_input(self):
        """Empty input produces only END."""
        assert tokenize("") == []

    def test_whitespace_only(self):
        """Whitespace and blank lines produce only END."""
        assert tokenize("  \t\n\n   \n") == []

    def test_unicode_whitespace(self):
        """Non-ASCII whitespace also separates tokens."""
        assert types("a b c") == [TokenType.IDENT] * 3

    @pytest.mark.parametrize("char", ["\x1c", "\x1d", "\x1e", "\x1f"])
    def test_information_separators_are_not_whitespace(self, char):
        """U+001C-U+001F are not Unicode White_Space, so they start no token."""
        with pytest.raises(UnexpectedCharacterError) as exc_info:
            tokenize(f"x{char}:= 1")
        assert exc_info.value.char == char
        assert exc_info.value.location.column == 1
        assert f"(0x{ord(char):x})" in str(exc_info.value)

    def test_is_blank(self):
        assert is_blank(" ")
        assert is_blank("\t")
        assert is_blank("\u2003")
        assert not is_blank("\x1c")
        assert not is_blank("x")

    def test_token_positions(self):
        """Tokens record line (1-based) and column (0-based) of their start."""
        tokens = tokenize("int x := 3\n  write x\n")
        assert [(t.text, t.line, t.column) for t in tokens] == [
            ("int", 1, 0),
            ("x", 1, 4),
            (":=", 1, 6),
            ("3", 1, 9),
            ("write", 2, 2),
            ("x", 2, 8),
        ]

    def test_tokens_never_contain_whitespace(self):
        """No token text includes whitespace or a line terminator."""
        for token in tokenize("read\tint  a\nwrite a +\n 1\n"):
            assert not any(c.isspace() for c in token.text)

    def test_end_token_is_repeated(self):
        """Once END is reached, every further scan returns END."""
        scanner = Scanner(SourceReader.from_string("x"))
        assert scanner.scan().type == TokenType.IDENT
        for _ in range(3):
            assert scanner.scan().type == TokenType.END

    def test_end_token_position(self):
        """END is placed one line past the last line of input."""
        scanner = Scanner(SourceReader.from_string("a\nb"))
        end = list(scanner.tokens())[-1]
        assert (end.type, end.line, end.column) == (TokenType.END, 3, 0)

    def test_token_count(self):
        """The scanner counts every token it returns, END included."""
        scanner = Scanner(SourceReader.from_string("a := b"))
        list(scanner.tokens())
        assert scanner.token_count == 4


# =============================================================================
# Token Display Tests
# =============================================================================

class TestTokenDisplay:
    """Test the trace and debug forms of tokens."""

    def test_describe_identifier_includes_text(self):
        assert Token(TokenType.IDENT, "abc", 1, 0).describe() == "IDENT: abc"

    def test_describe_literal_includes_text(self):
        assert Token(TokenType.I_LIT, "42", 1, 0).describe() == "I_LIT: 42"
        assert Token(TokenType.R_LIT, "4.2", 1, 0).describe() == "R_LIT: 4.2"

    def test_describe_keyword_is_name_only(self):
        assert Token(TokenType.WRITE, "write", 1, 0).describe() == "WRITE"
        assert Token(TokenType.GETS, ":=", 1, 0).describe() == "GETS"

    def test_repr(self):
        assert repr(Token(TokenType.IDENT, "x", 2, 5)) == "Token(IDENT, 'x', 2:5)"
        assert repr(Token(TokenType.END, "", 3, 0)) == "Token(END, 3:0)"


# =============================================================================
# Error Tests
# =============================================================================

class TestErrors:
    """Test lexical error conditions."""

    @pytest.mark.parametrize("first", [":", "=", "!"])
    def test_mandatory_equals_missing(self, first):
        """':', '=' and '!' must be followed by '='."""
        with pytest.raises(IncompleteOperatorError) as exc_info:
            tokenize(f"x {first} y")
        assert exc_info.value.first == first
        assert exc_info.value.found == " "
        assert f"expected '=' after '{first}'" in str(exc_info.value)

    def test_colon_error_message(self):
        """The diagnostic names the operator, the character found and its code."""
        with pytest.raises(LexicalError) as exc_info:
            tokenize("x : y")
        assert str(exc_info.value) == (
            "lexical error on line 1: expected '=' after ':', got ' ' (0x20)"
        )
        assert exc_info.value.location.column == 2

    def test_colon_at_end_of_line(self):
        """A trailing ':' sees the line terminator."""
        with pytest.raises(IncompleteOperatorError) as exc_info:
            tokenize("x :\n")
        assert exc_info.value.found == "\n"
        assert "'\\n' (0xa)" in str(exc_info.value)

    @pytest.mark.parametrize("char", ["#", "@", "$", ";", "{", "%", "&"])
    def test_unexpected_character(self, char):
        """Characters that start no token are rejected."""
        with pytest.raises(UnexpectedCharacterError) as exc_info:
            tokenize(f"x {char}")
        assert exc_info.value.char == char
        assert f"unexpected character '{char}' (0x{ord(char):x})" in str(exc_info.value)

    def test_error_reports_offending_line(self):
        """The diagnostic carries the line and source text of the character."""
        with pytest.raises(UnexpectedCharacterError) as exc_info:
            tokenize("write 1\nwrite #\n")
        error = exc_info.value
        assert error.line == 2
        assert error.source_line == "write #"
        assert error.format_context().splitlines() == [
            "lexical error on line 2: unexpected character '#' (0x23)",
            "    write #",
            "          ^",
        ]

    def test_tokens_before_error_are_produced(self):
        """Scanning is lazy: tokens before the bad character are returned."""
        scanner = Scanner(SourceReader.from_string("a b ?"))
        assert scanner.scan().text == "a"
        assert scanner.scan().text == "b"
        with pytest.raises(LexicalError):
            scanner.scan()
