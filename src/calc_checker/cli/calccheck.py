"""
calccheck - Calculator Syntax Checker Command-Line Interface
============================================================

This module implements the command-line interface for the checker. It
reads a calculator program from a file or standard input, prints the
parse trace to stdout as it is produced, and reports the first error
(if any) on stderr.

Usage Examples
--------------
Check a file:
    $ calccheck prog.calc

Check standard input:
    $ echo "int x := 3 write x" | calccheck

Only report whether the program is valid:
    $ calccheck -q prog.calc

Show the tokens instead of parsing:
    $ calccheck --tokens prog.calc

Show the grammar with its FIRST and FOLLOW sets:
    $ calccheck --grammar

Exit Codes
----------
0 - Valid program
1 - Lexical or syntax error
2 - Invalid arguments or unreadable input
3 - Internal error
"""

import codecs
import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional, TextIO

import click

from calc_checker import __version__
from calc_checker.checker import CheckerOptions, SyntaxChecker
from calc_checker.cli.errors import ExitCode, handle_cli_exception, report_check_error
from calc_checker.grammar import GrammarAnalysis

logger = logging.getLogger(__name__)

STDIN_NAME = "<stdin>"


# =============================================================================
# Utilities
# =============================================================================

def setup_logging(verbose: bool) -> None:
    """Configure logging to stderr based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(name)s: %(message)s" if verbose else "%(message)s",
        stream=sys.stderr,
    )


def check_encoding(encoding: str) -> None:
    """
    Reject an encoding name that Python has no codec for.

    Raises:
        click.BadParameter: If the codec is unknown
    """
    try:
        codecs.lookup(encoding)
    except LookupError:
        raise click.BadParameter(
            f"unknown encoding: {encoding}", param_hint="'--encoding'"
        ) from None


@contextmanager
def open_source(path: Path, encoding: str) -> Iterator[tuple[TextIO, str]]:
    """
    Open the input named on the command line.

    '-' means standard input, which is left open afterwards.

    Yields:
        Tuple of (text stream, name for diagnostics)
    """
    if str(path) == "-":
        yield click.get_text_stream("stdin", encoding=encoding), STDIN_NAME
        return

    with path.open("r", encoding=encoding) as stream:
        yield stream, str(path)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, allow_dash=True, path_type=Path),
    default="-",
)
@click.option(
    "-q", "--quiet",
    is_flag=True,
    help="Do not print the trace; only the exit code and any error",
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Scan only and print one token per line (for debugging)",
)
@click.option(
    "--grammar",
    is_flag=True,
    help="Print the grammar with FIRST/FOLLOW sets and exit",
)
@click.option(
    "--encoding",
    default=None,
    help="Input encoding (default: utf-8, or $CALCCHECK_ENCODING)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Debug logging, and source context with errors",
)
@click.version_option(version=__version__, prog_name="calccheck")
def main(
    input_file: Path,
    quiet: bool,
    tokens: bool,
    grammar: bool,
    encoding: Optional[str],
    verbose: bool,
) -> None:
    """
    Check the syntax of a calculator language program.

    INPUT_FILE is the program to check; '-' or no argument reads
    standard input.

    Each grammar production predicted and each token matched is
    printed as it happens. The first lexical or syntax error stops the
    check and is reported on stderr.

    \b
    Examples:
        calccheck prog.calc            # Trace the parse of prog.calc
        calccheck -q prog.calc         # Exit code only
        calccheck --tokens prog.calc   # Token dump
        calccheck --grammar            # FIRST/FOLLOW sets
    """
    setup_logging(verbose)

    options = CheckerOptions.from_env()
    if encoding:
        options.encoding = encoding
    if quiet:
        options.emit_trace = False
    options.trace_sink = click.echo

    try:
        if grammar:
            click.echo(GrammarAnalysis.analyze().format_report())
            return

        check_encoding(options.encoding)
        checker = SyntaxChecker(options)

        with open_source(input_file, options.encoding) as (stream, name):
            logger.debug(f"checking {name} (encoding {options.encoding})")

            if tokens:
                for token in checker.iter_tokens(stream, name):
                    click.echo(repr(token))
                return

            result = checker.check_stream(stream, name)

    except Exception as e:
        handle_cli_exception(e, verbose)

    if not result.success:
        report_check_error(result.error, verbose)
        sys.exit(ExitCode.CHECK_ERROR)


if __name__ == "__main__":
    main()
