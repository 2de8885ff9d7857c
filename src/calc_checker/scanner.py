"""
Calculator Language Scanner
===========================

This module implements the lexical scanner for the calculator language.
It pulls characters from a SourceReader and groups them into tokens for
the parser, one token per ``scan()`` call.

Token Categories
----------------
- Keywords: read, write, if, fi, do, od, check, int, real, trunc, float
- Identifiers: a letter followed by letters, digits or underscores
- Literals: runs of ASCII digits (a '.' inside the run is kept)
- Operators: := == != < > <= >= + - * / ( )

Whitespace (any Unicode White_Space codepoint, line terminators included;
not the U+001C-U+001F separators that str.isspace() also accepts) separates
tokens and is discarded, so no token ever spans a line boundary.

Lookahead
---------
The scanner always holds exactly one character that has been read from
the SourceReader but not yet consumed. The constructor primes it with a
blank, which the first ``scan()`` skips as whitespace.

Literals
--------
A digit-initiated run is always an I_LIT, even when it contains a
decimal point ("3.14", "1.2.3"). R_LIT exists for the grammar but is
never produced by the scanner.

Example Usage
-------------
>>> from calc_checker.source import SourceReader
>>> scanner = Scanner(SourceReader.from_string("int x := 42"))
>>> for token in scanner.tokens():
...     print(token)
Token(INT, 'int', 1:0)
Token(IDENT, 'x', 1:4)
Token(GETS, ':=', 1:6)
Token(I_LIT, '42', 1:9)
Token(END, 2:0)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator
import logging
import string

from calc_checker.errors import (
    SourceLocation,
    UnexpectedCharacterError,
    IncompleteOperatorError,
)
from calc_checker.source import SourceReader, PositionedChar

logger = logging.getLogger(__name__)


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for the calculator language.

    Keywords are distinguished from identifiers to simplify parsing.
    """

    # === Structural Tokens ===
    BEGIN = auto()          # Dummy value priming the parser's lookahead
    END = auto()            # End of input ($$)

    # === Keywords ===
    READ = auto()           # read
    WRITE = auto()          # write
    IF = auto()             # if
    FI = auto()             # fi
    DO = auto()             # do
    OD = auto()             # od
    CHECK = auto()          # check
    INT = auto()            # int
    REAL = auto()           # real
    TRUNC = auto()          # trunc
    FLOAT = auto()          # float

    # === Identifiers and Literals ===
    IDENT = auto()          # Variable names
    I_LIT = auto()          # Integer literals
    R_LIT = auto()          # Real literals (never produced)

    # === Comparison Operators ===
    GT = auto()             # >
    LT = auto()             # <
    EQ = auto()             # ==
    NE = auto()             # !=
    GE = auto()             # >=
    LE = auto()             # <=

    # === Assignment ===
    GETS = auto()           # :=

    # === Arithmetic Operators ===
    PLUS = auto()           # +
    MINUS = auto()          # -
    TIMES = auto()          # *
    DIV_BY = auto()         # /

    # === Delimiters ===
    LPAREN = auto()         # (
    RPAREN = auto()         # )


# =============================================================================
# Keyword and Operator Tables
# =============================================================================

KEYWORDS: dict[str, TokenType] = {
    "read": TokenType.READ,
    "write": TokenType.WRITE,
    "if": TokenType.IF,
    "fi": TokenType.FI,
    "do": TokenType.DO,
    "od": TokenType.OD,
    "check": TokenType.CHECK,
    "int": TokenType.INT,
    "real": TokenType.REAL,
    "trunc": TokenType.TRUNC,
    "float": TokenType.FLOAT,
}

# Single characters that are complete tokens on their own
SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.TIMES,
    "/": TokenType.DIV_BY,
}

# First characters that must be followed by '='
MANDATORY_EQ_TOKENS: dict[str, TokenType] = {
    ":": TokenType.GETS,
    "=": TokenType.EQ,
    "!": TokenType.NE,
}

# First characters optionally followed by '=': (alone, with '=')
OPTIONAL_EQ_TOKENS: dict[str, tuple[TokenType, TokenType]] = {
    "<": (TokenType.LT, TokenType.LE),
    ">": (TokenType.GT, TokenType.GE),
}

# Token types whose text is shown in the trace
TEXT_TOKENS = frozenset({TokenType.IDENT, TokenType.I_LIT, TokenType.R_LIT})

# File, group, record and unit separators: str.isspace() accepts them but
# they are not Unicode White_Space
INFORMATION_SEPARATORS = frozenset("\x1c\x1d\x1e\x1f")


def is_blank(char: str) -> bool:
    """True for the Unicode White_Space characters that separate tokens."""
    return char.isspace() and char not in INFORMATION_SEPARATORS


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token of calculator source.

    Attributes:
        type: The TokenType classification
        text: The exact characters matched (empty for END and BEGIN)
        line: Line number in source (1-indexed)
        column: Column number in source (0-indexed)
    """
    type: TokenType
    text: str
    line: int
    column: int

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if self.text:
            return f"Token({self.type.name}, {self.text!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    def describe(self) -> str:
        """
        Return the trace form of this token: its type name, plus its
        text for identifiers and literals.
        """
        if self.type in TEXT_TOKENS:
            return f"{self.type.name}: {self.text}"
        return self.type.name


# =============================================================================
# Scanner Implementation
# =============================================================================

class Scanner:
    """
    Pull-based scanner for the calculator language.

    Usage:
        scanner = Scanner(SourceReader(sys.stdin))
        token = scanner.scan()

    Attributes:
        reader: The SourceReader supplying characters
        filename: Source name used in error locations
        token_count: Number of tokens produced so far
    """

    def __init__(self, reader: SourceReader, filename: str = "<input>"):
        """
        Initialize the scanner and prime its lookahead.

        Args:
            reader: Character source
            filename: Name of the source (for error messages)
        """
        self.reader = reader
        self.filename = filename
        self.token_count = 0

        # Already peeked at; the blank is skipped by the first scan()
        self._next_char = PositionedChar(" ", 0, 0)

    def scan(self) -> Token:
        """
        Return the next token.

        Returns the END token on every call once the input is exhausted.

        Raises:
            LexicalError: If the characters form no valid token
        """
        while is_blank(self._next_char.char):
            self._advance()

        if self._next_char.at_end:
            token = Token(TokenType.END, "", self._next_char.line, self._next_char.column)
        else:
            token = self._scan_token()

        self.token_count += 1
        logger.debug(f"scanned {token!r}")
        return token

    def tokens(self) -> Iterator[Token]:
        """
        Generate tokens up to and including END.

        Raises:
            LexicalError: If invalid input is encountered
        """
        while True:
            token = self.scan()
            yield token
            if token.type == TokenType.END:
                return

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _advance(self) -> str:
        """Consume the lookahead character, fetch a new one, return the old."""
        char = self._next_char.char
        self._next_char = self.reader.next()
        return char

    def _peek(self) -> str:
        """Look at the lookahead character without consuming it."""
        return self._next_char.char

    def _location(self) -> SourceLocation:
        """Location of the lookahead character."""
        return SourceLocation(self.filename, self._next_char.line, self._next_char.column)

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Token:
        """Scan one token starting at the (non-blank) lookahead."""
        start_line = self._next_char.line
        start_column = self._next_char.column
        char = self._peek()

        # Identifiers and keywords
        if char.isalpha():
            return self._scan_identifier(start_line, start_column)

        # Numbers
        if char in string.digits:
            return self._scan_number(start_line, start_column)

        # Operators and delimiters
        return self._scan_operator(start_line, start_column)

    def _scan_identifier(self, start_line: int, start_column: int) -> Token:
        """
        Scan an identifier or keyword.

        Consumes the longest run of letters, digits and underscores, then
        checks it against the keyword table.
        """
        chars = [self._advance()]
        while self._peek() == "_" or self._peek().isalnum():
            chars.append(self._advance())

        text = "".join(chars)
        token_type = KEYWORDS.get(text, TokenType.IDENT)
        return Token(token_type, text, start_line, start_column)

    def _scan_number(self, start_line: int, start_column: int) -> Token:
        """
        Scan a numeric literal.

        Consumes the longest run of ASCII digits and '.' characters. The
        result is classified as I_LIT whether or not a '.' was consumed.
        """
        chars = [self._advance()]
        while self._peek() in string.digits or self._peek() == ".":
            chars.append(self._advance())

        return Token(TokenType.I_LIT, "".join(chars), start_line, start_column)

    def _scan_operator(self, start_line: int, start_column: int) -> Token:
        """
        Scan an operator or delimiter.

        Raises:
            LexicalError: For an unknown character, or ':', '=', '!'
                not followed by '='
        """
        location = self._location()
        source_line = self.reader.current_line
        char = self._advance()

        if char in SINGLE_CHAR_TOKENS:
            return Token(SINGLE_CHAR_TOKENS[char], char, start_line, start_column)

        if char in MANDATORY_EQ_TOKENS:
            if self._peek() != "=":
                raise IncompleteOperatorError(char, self._peek(), location, source_line)
            self._advance()
            return Token(MANDATORY_EQ_TOKENS[char], char + "=", start_line, start_column)

        if char in OPTIONAL_EQ_TOKENS:
            alone, with_eq = OPTIONAL_EQ_TOKENS[char]
            if self._peek() == "=":
                self._advance()
                return Token(with_eq, char + "=", start_line, start_column)
            return Token(alone, char, start_line, start_column)

        raise UnexpectedCharacterError(char, location, source_line)
