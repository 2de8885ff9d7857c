"""
Calculator Checker Error Hierarchy
==================================

This module defines the exception hierarchy for the calculator language
syntax checker. All exceptions inherit from CalcError, allowing callers
to catch every checker failure with a single except clause.

Exception Hierarchy
-------------------
CalcError (base)
├── LexicalError - a character sequence cannot form any token
└── CalcSyntaxError - the lookahead token fits no prediction

Both kinds are fatal: the checker performs no error recovery, so the
first error raised anywhere in the pipeline ends the run.

Message Format
--------------
``str(error)`` is always the single diagnostic line printed by the
command-line tool:

    syntax error on line 3
    lexical error on line 1: expected '=' after ':', got ' ' (0x20)

``format_context()`` adds the offending source line and a caret:

    syntax error on line 3
        if x fi
             ^
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source text for error reporting.

    Attributes:
        filename: Name of the source (or "<stdin>" / "<string>")
        line: Line number (1-indexed)
        column: Column number (0-indexed, counted in codepoints)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column'."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Base Exception Class
# =============================================================================

class CalcError(Exception):
    """
    Base exception for all checker errors.

    Attributes:
        message: The single-line diagnostic
        location: Where in the source the error occurred (optional)
        source_line: The text of the offending source line (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.source_line = source_line
        super().__init__(message)

    @property
    def line(self) -> Optional[int]:
        """Line number of the error, if known."""
        return self.location.line if self.location else None

    def format_context(self) -> str:
        """
        Format the diagnostic followed by source context and a caret.

        Falls back to the bare diagnostic when no source line is known.
        """
        parts = [self.message]

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            padding = " " * (4 + self.location.column)
            parts.append(f"{padding}^")

        return "\n".join(parts)


# =============================================================================
# Lexical Errors
# =============================================================================

class LexicalError(CalcError):
    """
    A character sequence cannot be classified into any token.

    Raised by the scanner when:
        - a character that starts no token is encountered
        - ':', '=' or '!' is not followed by the mandatory '='
    """

    def __init__(
        self,
        detail: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.detail = detail
        if location is not None:
            message = f"lexical error on line {location.line}: {detail}"
        else:
            message = f"lexical error: {detail}"
        super().__init__(message, location, source_line)


class UnexpectedCharacterError(LexicalError):
    """A character that cannot begin any token."""

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"unexpected character {describe_char(char)}",
            location,
            source_line,
        )


class IncompleteOperatorError(LexicalError):
    """A two-character operator whose second character is not '='."""

    def __init__(
        self,
        first: str,
        found: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.first = first
        self.found = found
        super().__init__(
            f"expected '=' after '{first}', got {describe_char(found)}",
            location,
            source_line,
        )


# =============================================================================
# Syntax Errors
# =============================================================================

class CalcSyntaxError(CalcError):
    """
    The lookahead token does not fit the grammar.

    Raised by the parser when the lookahead token is in neither the FIRST
    set of any production of the current nonterminal nor (for nullable
    nonterminals) its FOLLOW set, or when a terminal match fails.

    Attributes:
        found: Name of the offending token type
        nonterminal: The nonterminal being expanded, or None for a failed match
    """

    def __init__(
        self,
        found: str,
        location: SourceLocation,
        nonterminal: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        self.nonterminal = nonterminal
        super().__init__(
            f"syntax error on line {location.line}",
            location,
            source_line,
        )


# =============================================================================
# Helpers
# =============================================================================

def describe_char(char: str) -> str:
    """
    Describe a character for a diagnostic, including its code point.

    Non-printable characters are shown as escapes, so a tab appears
    as '\\t' (0x9).

    >>> describe_char(":")
    "':' (0x3a)"
    """
    shown = char if char.isprintable() else char.encode("unicode_escape").decode("ascii")
    return f"'{shown}' (0x{ord(char):x})"
