"""
calc-checker - LL(1) Syntax Checker for the Calculator Language
===============================================================

This package checks the syntax of programs written in a small imperative
"calculator" language and prints a trace of every grammar production it
predicts and every token it matches.

The language has typed declarations, assignment, read/write statements,
if/fi and do/od blocks, a check assertion, and arithmetic and comparison
expressions:

    int n := 10
    read real x
    do
        check n > 0
        write x * (n - 1)
        n := n - 1
    od

Main Components
---------------
- **source**: SourceReader, line-buffered codepoint reader with positions
- **scanner**: Scanner, turns characters into tokens (one lookahead char)
- **parser**: Parser, predictive recursive descent (one lookahead token)
- **grammar**: the grammar as data, with FIRST/FOLLOW analysis
- **checker**: SyntaxChecker driver returning a CheckResult

Quick Start
-----------
Check a string:
    >>> from calc_checker import check_source
    >>> result = check_source("int x := 3 write x")
    >>> result.success
    True

Check a file and print the trace:
    >>> from calc_checker import SyntaxChecker
    >>> result = SyntaxChecker().check_file("prog.calc")
    >>> print("\\n".join(result.trace))

Or use the command-line tool:
    $ calccheck prog.calc
    $ echo "write 1 + 2" | calccheck
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from calc_checker.errors import (
    CalcError,
    LexicalError,
    UnexpectedCharacterError,
    IncompleteOperatorError,
    CalcSyntaxError,
    SourceLocation,
)
from calc_checker.source import SourceReader, PositionedChar, END_OF_INPUT
from calc_checker.scanner import Scanner, Token, TokenType, KEYWORDS
from calc_checker.parser import Parser
from calc_checker.grammar import (
    GRAMMAR,
    GrammarAnalysis,
    Nonterminal,
    Production,
)
from calc_checker.checker import (
    CheckerOptions,
    CheckResult,
    SyntaxChecker,
    check_source,
)

__all__ = [
    # Version info
    "__version__",
    # Driver
    "SyntaxChecker",
    "CheckerOptions",
    "CheckResult",
    "check_source",
    # Pipeline stages
    "SourceReader",
    "PositionedChar",
    "END_OF_INPUT",
    "Scanner",
    "Token",
    "TokenType",
    "KEYWORDS",
    "Parser",
    # Grammar
    "GRAMMAR",
    "GrammarAnalysis",
    "Nonterminal",
    "Production",
    # Exception hierarchy
    "CalcError",
    "LexicalError",
    "UnexpectedCharacterError",
    "IncompleteOperatorError",
    "CalcSyntaxError",
    "SourceLocation",
]
