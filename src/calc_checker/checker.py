"""
Syntax Checker Driver
=====================

This module provides the main interface to the checker. It composes the
three pipeline stages over a string, a file or an open text stream:

    Text → SourceReader → Scanner → Parser → trace

Usage
-----
Command line:
    $ calccheck program.calc

Programmatic:
    >>> from calc_checker import check_source
    >>> result = check_source("int x := 3 write x")
    >>> result.success
    True
    >>> result.trace[-1]
    'matched END'

Error Handling
--------------
The parser stops at the first error, but the driver does not let that
error escape: it is stored in the returned CheckResult together with
every trace line emitted before the failure. Callers that prefer an
exception call ``result.raise_for_error()``.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterator, Optional, TextIO
import io
import logging
import os

from calc_checker.errors import CalcError
from calc_checker.parser import Parser
from calc_checker.scanner import Scanner, Token
from calc_checker.source import SourceReader

logger = logging.getLogger(__name__)


@dataclass
class CheckerOptions:
    """
    Checker configuration options.

    Attributes:
        filename: Name reported in error locations when none is given
        encoding: Encoding used to read files
        emit_trace: Collect trace lines (and forward them to the sink)
        trace_sink: Called with each trace line as it is produced, so a
                    caller can stream the trace instead of waiting for
                    the result
    """
    filename: str = "<input>"
    encoding: str = "utf-8"
    emit_trace: bool = True
    trace_sink: Optional[Callable[[str], None]] = None

    @classmethod
    def from_env(cls) -> "CheckerOptions":
        """
        Create options from environment variables.

        Environment variables (all optional):
            CALCCHECK_ENCODING: Input file encoding
            CALCCHECK_QUIET: Set to 1/true/yes to disable the trace
        """
        options = cls()

        if encoding := os.environ.get("CALCCHECK_ENCODING"):
            options.encoding = encoding

        if quiet := os.environ.get("CALCCHECK_QUIET"):
            options.emit_trace = quiet.strip().lower() not in ("1", "true", "yes")

        return options


@dataclass
class CheckResult:
    """
    Result of checking one input.

    Attributes:
        filename: Name of the checked source
        success: True if the whole input is a valid program
        trace: Trace lines, in generation order, up to any failure
        error: The error that stopped the check, if any
        token_count: Number of tokens scanned
    """
    filename: str
    success: bool = False
    trace: list[str] = field(default_factory=list)
    error: Optional[CalcError] = None
    token_count: int = 0

    @property
    def diagnostic(self) -> Optional[str]:
        """The single diagnostic line, or None on success."""
        return str(self.error) if self.error else None

    def raise_for_error(self) -> None:
        """Re-raise the stored error, if there is one."""
        if self.error is not None:
            raise self.error


class SyntaxChecker:
    """
    Syntax checker for calculator programs.

    Example:
        checker = SyntaxChecker()
        result = checker.check_file("prog.calc")
        for line in result.trace:
            print(line)

    Attributes:
        options: Checker configuration options
    """

    def __init__(self, options: Optional[CheckerOptions] = None):
        """
        Initialize the checker.

        Args:
            options: Checker configuration (uses defaults if None)
        """
        self.options = options or CheckerOptions()

    def check_stream(self, stream: TextIO, filename: Optional[str] = None) -> CheckResult:
        """
        Check a program read line by line from a text stream.

        The stream is not closed.

        Args:
            stream: Open text stream
            filename: Name for error messages (defaults to options.filename)

        Returns:
            CheckResult with the trace and any error
        """
        filename = filename or self.options.filename
        result = CheckResult(filename=filename)

        scanner = Scanner(SourceReader(stream), filename)
        parser = Parser(scanner, trace=self._make_sink(result))

        try:
            parser.parse()
            result.success = True
        except CalcError as e:
            result.error = e
            logger.info(f"{filename}: {e}")

        result.token_count = scanner.token_count
        if result.success:
            logger.info(f"{filename}: valid program ({result.token_count} tokens)")
        return result

    def check_source(self, source: str, filename: str = "<string>") -> CheckResult:
        """Check a program held in a string."""
        return self.check_stream(io.StringIO(source), filename)

    def check_file(self, filepath: str | Path) -> CheckResult:
        """
        Check a program stored in a file.

        Raises:
            FileNotFoundError: If the file does not exist
            UnicodeDecodeError: If the file is not in the configured encoding
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        with path.open("r", encoding=self.options.encoding) as stream:
            return self.check_stream(stream, str(path))

    def iter_tokens(self, stream: TextIO, filename: Optional[str] = None) -> Iterator[Token]:
        """
        Scan a stream without parsing, yielding tokens through END.

        Raises:
            LexicalError: If invalid input is encountered
        """
        scanner = Scanner(SourceReader(stream), filename or self.options.filename)
        yield from scanner.tokens()

    def _make_sink(self, result: CheckResult) -> Optional[Callable[[str], None]]:
        """Build the trace callback that records into the result."""
        if not self.options.emit_trace:
            return None

        forward = self.options.trace_sink

        def sink(line: str) -> None:
            result.trace.append(line)
            if forward is not None:
                forward(line)

        return sink


# =============================================================================
# Convenience Functions
# =============================================================================

def check_source(source: str, filename: str = "<string>") -> CheckResult:
    """
    Check a calculator program held in a string.

    Args:
        source: Program text
        filename: Name for error messages

    Returns:
        CheckResult with the trace and any error
    """
    return SyntaxChecker().check_source(source, filename)
