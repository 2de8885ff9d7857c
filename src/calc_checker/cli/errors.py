"""
Unified CLI Error Handling
==========================

Provides consistent error reporting and exit codes for the CLI.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from calc_checker.errors import CalcError


class ExitCode(IntEnum):
    """Standard exit codes for the CLI."""
    SUCCESS = 0
    CHECK_ERROR = 1      # Lexical or syntax error in the checked program
    INVALID_ARGS = 2     # Invalid arguments or unreadable input
    INTERNAL_ERROR = 3   # Unexpected internal error


def report_check_error(error: CalcError, verbose: bool = False) -> None:
    """
    Print a checker diagnostic to stderr.

    The diagnostic is a single line; in verbose mode the offending
    source line and a caret follow it.
    """
    text = error.format_context() if verbose else str(error)
    click.echo(text, err=True)


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Unified exception handler for the CLI.

    Formats the error message, optionally prints a traceback for internal
    errors in verbose mode, and exits with the matching exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print source context or full traceback

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    if isinstance(error, CalcError):
        report_check_error(error, verbose)
        sys.exit(ExitCode.CHECK_ERROR)

    elif isinstance(error, click.BadParameter):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, (FileNotFoundError, PermissionError, IsADirectoryError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, UnicodeDecodeError):
        click.echo(f"Error: cannot decode input: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
